"""Parsing Go source files, using tree-sitter and its Go grammar.

We need three things from a Go file, matching the three modes of Go's own
`go/parser`:

- `Mode.PACKAGE_CLAUSE_ONLY`: does this file start with a package clause?
- `Mode.IMPORTS_ONLY`: what does this file import?
- `Mode.PARSE_COMMENTS`: what does this file import, and what doc comment is attached to
  each import? This is how we find the preamble of a cgo `import "C"`.

tree-sitter always parses the whole file and recovers from errors, so the modes
differ in which syntax errors we care about: only errors in the region the mode
covers make the parse fail. A file with a broken function body still has
perfectly good imports.

"""
from __future__ import annotations
from dataclasses import dataclass, field
from vendorprune.concurrency import run_all
from vendorprune.exceptions import GoSyntaxError
from tree_sitter import Language, Node, Parser
import tree_sitter_go
import enum
import functools
import os
import outcome
import trio
import typing as t
import logging
logger = logging.getLogger(__name__)

__all__ = [
    'Mode',
    'ImportSpec',
    'GoFile',
    'parse_source',
    'parse_file',
    'list_go_files',
    'parse_dir',
    'aparse_dir',
]

GO_LANGUAGE = Language(tree_sitter_go.language())
SOURCE_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"
# The only top-level nodes allowed before the first real declaration.
HEADER_NODES = {"package_clause", "import_declaration"}

class Mode(enum.Enum):
    PACKAGE_CLAUSE_ONLY = enum.auto()
    IMPORTS_ONLY = enum.auto()
    PARSE_COMMENTS = enum.auto()

@dataclass
class ImportSpec:
    "One import spec; `path` is the import path with its quotes removed."
    path: str
    line: int
    doc: t.Optional[str] = None

@dataclass
class GoFile:
    filename: str
    package: str
    imports: t.List[ImportSpec] = field(default_factory=list)

def is_source_file(name: str) -> bool:
    return name.endswith(SOURCE_SUFFIX)

def is_test_file(name: str) -> bool:
    return name.endswith(TEST_SUFFIX)

def _first_error(node: Node) -> t.Optional[Node]:
    "Return the first ERROR or MISSING node at or under this node, if any."
    if node.is_error or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node

def _header(root: Node) -> t.Tuple[t.List[Node], t.Optional[Node]]:
    """Split off the package clause and import declarations at the top of a file.

    Returns those nodes, and the first top-level node after them, if there is one.

    """
    header: t.List[Node] = []
    for child in root.named_children:
        if child.type == "comment":
            continue
        if child.type not in HEADER_NODES:
            return header, child
        header.append(child)
    return header, None

def comment_text(comments: t.Sequence[Node]) -> str:
    """Return the text of a comment group, like Go's `ast.CommentGroup.Text`.

    Comment markers, the first space of a line comment, trailing whitespace, and
    leading and trailing blank lines are removed.

    """
    lines: t.List[str] = []
    for comment in comments:
        text = comment.text.decode("utf-8", "replace")
        if text.startswith("//"):
            text = text[2:]
            if text.startswith(" "):
                text = text[1:]
        else:
            text = text[2:-2]
        lines.extend(line.rstrip() for line in text.split("\n"))
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return ""
    return "\n".join(lines) + "\n"

def _lead_comments(node: Node) -> t.List[Node]:
    """Return the comment group directly before this node.

    The group has to end on the line before the node, and consecutive comments
    in it can't have blank lines between them. A comment trailing some other
    node on the same line isn't part of it.

    """
    comments: t.List[Node] = []
    row = node.start_point[0]
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type == "comment" and sibling.end_point[0] >= row - 1:
        comments.append(sibling)
        row = sibling.start_point[0]
        sibling = sibling.prev_named_sibling
    while comments and sibling is not None and sibling.end_point[0] == comments[-1].start_point[0]:
        comments.pop()
    comments.reverse()
    return comments

def _doc(node: Node) -> t.Optional[str]:
    comments = _lead_comments(node)
    if not comments:
        return None
    return comment_text(comments)

def _import_specs(decl: Node, with_docs: bool) -> t.Iterator[ImportSpec]:
    specs: t.List[Node] = []
    for child in decl.named_children:
        if child.type == "import_spec":
            specs.append(child)
        elif child.type == "import_spec_list":
            specs.extend(spec for spec in child.named_children if spec.type == "import_spec")
    for spec in specs:
        path = spec.child_by_field_name("path")
        if path is None:
            continue
        doc: t.Optional[str] = None
        if with_docs:
            doc = _doc(spec)
            if doc is None and len(specs) == 1:
                doc = _doc(decl)
        yield ImportSpec(path.text.decode("utf-8", "replace")[1:-1], spec.start_point[0] + 1, doc)

def _package_name(clause: Node) -> str:
    for child in clause.named_children:
        if child.type == "package_identifier":
            return child.text.decode("utf-8", "replace")
    return ""

def parse_source(filename: str, source: bytes, mode: Mode) -> GoFile:
    "Parse this Go source, raising GoSyntaxError if the region that mode covers is broken."
    tree = Parser(GO_LANGUAGE).parse(source)
    root = tree.root_node
    header, rest = _header(root)
    if not header or header[0].type != "package_clause":
        bad = header[0] if header else rest
        line = bad.start_point[0] + 1 if bad is not None else 1
        raise GoSyntaxError(filename, line, "expected 'package'")
    if mode is Mode.PACKAGE_CLAUSE_ONLY:
        checked = header[:1]
    elif mode is Mode.IMPORTS_ONLY:
        checked = list(header)
        # a mangled import declaration can end up in a top-level ERROR node
        if rest is not None and rest.is_error and rest.text.lstrip().startswith(b"import"):
            checked.append(rest)
    else:
        checked = [root]
    for node in checked:
        error = _first_error(node)
        if error is not None:
            raise GoSyntaxError(filename, error.start_point[0] + 1)
    gofile = GoFile(filename, _package_name(header[0]))
    if mode is not Mode.PACKAGE_CLAUSE_ONLY:
        for decl in header[1:]:
            gofile.imports.extend(_import_specs(decl, with_docs=mode is Mode.PARSE_COMMENTS))
    return gofile

def parse_file(path: t.Union[str, os.PathLike], mode: Mode) -> GoFile:
    with open(path, 'rb') as f:
        source = f.read()
    return parse_source(os.fsdecode(path), source, mode)

def list_go_files(directory: t.Union[str, os.PathLike],
                  file_filter: t.Optional[t.Callable[[str], bool]]=None) -> t.List[str]:
    """List the names of the Go source files in this directory, sorted.

    Raises FileNotFoundError if the directory doesn't exist.

    """
    with os.scandir(directory) as entries:
        return sorted(entry.name for entry in entries
                      if not entry.is_dir(follow_symlinks=False)
                      and is_source_file(entry.name)
                      and (file_filter is None or file_filter(entry.name)))

def parse_dir(directory: t.Union[str, os.PathLike], mode: Mode,
              file_filter: t.Optional[t.Callable[[str], bool]]=None) -> t.Dict[str, GoFile]:
    "Parse every Go file in this directory; the first bad file fails the whole directory."
    return {name: parse_file(os.path.join(directory, name), mode)
            for name in list_go_files(directory, file_filter)}

async def aparse_dir(directory: t.Union[str, os.PathLike], mode: Mode,
                     file_filter: t.Optional[t.Callable[[str], bool]]=None) -> t.Dict[str, GoFile]:
    """Like `parse_dir`, but parse the files in parallel in worker threads.

    Errors are captured in each thread and re-raised here in filename order, so
    the error reported is the same one `parse_dir` would raise.

    """
    names = await trio.to_thread.run_sync(list_go_files, directory, file_filter)
    results = await run_all([
        functools.partial(trio.to_thread.run_sync,
                          outcome.capture, parse_file, os.path.join(directory, name), mode)
        for name in names])
    return {name: result.unwrap() for name, result in zip(names, results)}
