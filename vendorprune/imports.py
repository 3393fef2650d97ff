"""Extracting the dependencies of a single package.

A package needs two kinds of things to keep working:

- the external packages it imports, which we learn from its import declarations;
- directories holding C headers that its cgo preambles `#include`, which we
  learn from the doc comments on its `import "C"` declarations. Those
  directories aren't Go packages, so the import declarations can't tell us
  about them.

Identifiers are sent down a trio channel as they're found, so that the
extraction of many packages can be merged into one stream; see
`vendorprune.closure`.

"""
from __future__ import annotations
from vendorprune import importpath
from vendorprune.environ import Project
from vendorprune.exceptions import GoSyntaxError
from vendorprune.goparse import Mode, GoFile, aparse_dir, is_test_file
import math
import posixpath
import trio
import typing as t
import logging
logger = logging.getLogger(__name__)

CGO_PACKAGE = "C"
INCLUDE_PREFIX = '#include "'

def resolve_import(root_package: str, pkg: str, path: str) -> t.Optional[str]:
    """Turn an import path declared in pkg into an external package identifier.

    Returns None for standard library imports and for packages inside the
    project. Relative imports are resolved against pkg's identifier.

    """
    if not importpath.is_external(path):
        return None
    if importpath.is_relative(path):
        path = importpath.join(pkg, path)
    if importpath.is_internal(root_package, path):
        return None
    return path

def preamble_include_dirs(doc: str) -> t.Iterator[str]:
    "Yield the directories of the local `#include \"...\"` directives in a cgo preamble."
    for line in doc.split("\n"):
        line = line.strip()
        if not line.startswith(INCLUDE_PREFIX):
            continue
        include, quote, _ = line[len(INCLUDE_PREFIX):].partition('"')
        if not quote:
            continue
        directory = importpath.clean(posixpath.dirname(include) or ".")
        if directory != ".":
            yield directory

def _declared_imports(root_package: str, pkg: str, files: t.Iterable[GoFile]) -> t.Iterator[str]:
    for gofile in files:
        for spec in gofile.imports:
            resolved = resolve_import(root_package, pkg, spec.path)
            if resolved is not None:
                yield resolved

async def _cgo_imports(location: str, pkg: str, files: t.Iterable[GoFile]) -> t.List[str]:
    found: t.List[str] = []
    for gofile in files:
        for spec in gofile.imports:
            if spec.path != CGO_PACKAGE or not spec.doc:
                continue
            for directory in preamble_include_dirs(spec.doc):
                if await trio.Path(location, directory).exists():
                    found.append(importpath.join(pkg, directory))
    return found

async def _extract(project: Project, pkg: str, send: trio.MemorySendChannel[str]) -> None:
    location = project.package_dir(pkg)
    rel = project.relative_dir(pkg)
    logger.debug("listImports, pkgPath: '%s'", rel)
    file_filter: t.Optional[t.Callable[[str], bool]] = None
    if project.is_vendored(pkg):
        # vendored test files are never a source of dependencies
        file_filter = lambda name: not is_test_file(name)

    try:
        files = await aparse_dir(location, Mode.IMPORTS_ONLY, file_filter)
    except FileNotFoundError as e:
        logger.debug("listImports, pkgPath does not exist: %s", e)
        return
    except (GoSyntaxError, OSError) as e:
        logger.error("Error parsing imports, pkgPath: '%s', err: '%s'", rel, e)
        return
    logger.info("Collecting imports for package '%s'", pkg)
    for imp in _declared_imports(project.root_package, pkg, files.values()):
        logger.debug("listImports, found '%s'", imp)
        await send.send(imp)

    try:
        files = await aparse_dir(location, Mode.PARSE_COMMENTS, file_filter)
    except FileNotFoundError as e:
        logger.debug("listImports, pkgPath does not exist: %s", e)
        return
    except (GoSyntaxError, OSError) as e:
        logger.error("Error parsing comments, pkgPath: '%s', err: '%s'", rel, e)
        return
    logger.info("Collecting CGO imports for package '%s'", pkg)
    for imp in await _cgo_imports(location, pkg, files.values()):
        logger.debug("listImports, found cgo include dir '%s'", imp)
        await send.send(imp)

async def list_imports(project: Project, pkg: str, send: trio.MemorySendChannel[str],
                       timeout: t.Optional[float]=None) -> None:
    """Send pkg and everything pkg needs down this channel.

    pkg itself always comes first. A package that doesn't exist on disk yet, or
    can't be parsed, contributes nothing else; so does one whose extraction
    takes longer than timeout seconds.

    """
    await send.send(pkg)
    with trio.move_on_after(math.inf if timeout is None else timeout) as cancel_scope:
        await _extract(project, pkg, send)
    if cancel_scope.cancelled_caught:
        logger.error("Timed out collecting imports for package '%s'", pkg)
