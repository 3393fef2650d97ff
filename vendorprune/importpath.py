"""Operations on package identifiers: slash-separated Go import paths.

Identifiers are opaque strings; the only structure we rely on is the slash
separator and the dot-in-first-segment heuristic which tells an
externally-rooted dependency (`github.com/foo/bar`) apart from a standard
library package (`net/http`).

"""
import posixpath
import typing as t

def first_segment(pkg: str) -> str:
    return pkg.split("/", 1)[0]

def is_external(pkg: str) -> bool:
    "Return true if this import path names something which could be vendored."
    return "." in first_segment(pkg)

def is_relative(pkg: str) -> bool:
    "Return true if this is a `./foo` or `../foo` style import."
    return first_segment(pkg) in (".", "..")

def clean(pkg: str) -> str:
    """Lexically normalize an identifier, like Go's `path.Clean`.

    `posixpath.normpath` is the same except that it preserves a leading `//`.

    """
    ret = posixpath.normpath(pkg)
    if ret.startswith("//"):
        ret = "/" + ret.lstrip("/")
    return ret

def join(*elems: str) -> str:
    "Join identifier segments, ignoring empty ones, and clean the result."
    return clean("/".join(elem for elem in elems if elem))

def is_internal(root: str, pkg: str) -> bool:
    "Return true if pkg is the root package or lives underneath it."
    return pkg == root or pkg.startswith(root + "/")

def ancestors(pkg: str) -> t.List[str]:
    "Every proper prefix of this identifier, longest first."
    ret: t.List[str] = []
    parent = posixpath.dirname(pkg)
    while parent and parent != "/":
        ret.append(parent)
        parent = posixpath.dirname(parent)
    return ret

def ancestor_set(packages: t.Iterable[str]) -> t.Set[str]:
    "The union of the ancestors of all these packages."
    ret: t.Set[str] = set()
    for pkg in packages:
        ret.update(ancestors(pkg))
    return ret
