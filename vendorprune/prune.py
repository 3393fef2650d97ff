"""Deleting everything from the vendor directory that the closure doesn't need.

Given the closure, the vendor directory is pruned in two walks:

1. `remove_unused` deletes directories which are neither a package in the
   closure nor an ancestor of one, Go files in packages outside the closure,
   and every vendored test file, whatever package it's in.
2. `remove_empty_dirs` then deletes directories which were left empty,
   repeating until nothing changes, since removing a directory can leave its
   parent empty.

Deletion errors don't stop the walk. They are logged, and raised together as a
`PruneError` at the end. Symbolic links are never followed.

"""
from __future__ import annotations
from vendorprune import importpath
from vendorprune.closure import collect_imports
from vendorprune.environ import Project
from vendorprune.exceptions import PruneError
from vendorprune.goparse import is_source_file, is_test_file
import errno
import os
import shutil
import trio
import typing as t
import logging
logger = logging.getLogger(__name__)

__all__ = [
    'remove_unused',
    'remove_empty_dirs',
    'cleanup',
]

def _package(target_dir: str, dirpath: str) -> str:
    "The identifier of a directory under the target directory; the target itself is ''."
    rel = os.path.relpath(dirpath, target_dir)
    if rel == ".":
        return ""
    return rel.replace(os.sep, "/")

def _split_links(dirpath: str, dirnames: t.List[str]) -> t.Tuple[t.List[str], t.List[str]]:
    "Separate real directories from symlinks to directories."
    dirs: t.List[str] = []
    links: t.List[str] = []
    for name in sorted(dirnames):
        (links if os.path.islink(os.path.join(dirpath, name)) else dirs).append(name)
    return dirs, links

def remove_unused(imports: t.AbstractSet[str], target_dir: str) -> None:
    "Delete everything in target_dir which isn't needed by the packages in imports."
    parents = importpath.ancestor_set(imports)
    errors: t.List[OSError] = []
    def onerror(err: OSError) -> None:
        if isinstance(err, FileNotFoundError):
            logger.debug("removeUnusedImports, already gone: '%s'", err.filename)
            return
        logger.error("Error walking '%s': %s", err.filename, err)
        errors.append(err)

    for dirpath, dirnames, filenames in os.walk(target_dir, onerror=onerror):
        pkg = _package(target_dir, dirpath)
        logger.debug("removeUnusedImports, path: '%s'", dirpath)
        dirs, links = _split_links(dirpath, dirnames)
        for name in sorted(filenames + links):
            if not (is_test_file(name) or is_source_file(name) and pkg not in imports):
                continue
            path = os.path.join(dirpath, name)
            logger.debug("Removing unused source file: '%s'", path)
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error("Error removing file: '%s', err: '%s'", path, e)
                errors.append(e)
        keep: t.List[str] = []
        for name in dirs:
            child = importpath.join(pkg, name)
            if child in imports or child in parents:
                keep.append(name)
                continue
            path = os.path.join(dirpath, name)
            logger.info("Removing unused dir: '%s'", path)
            try:
                shutil.rmtree(path)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error("Error removing unused dir, path: '%s', err: '%s'", path, e)
                errors.append(e)
        dirnames[:] = keep
    if errors:
        raise PruneError(errors)

def _is_empty(path: str) -> bool:
    try:
        with os.scandir(path) as entries:
            return next(entries, None) is None
    except OSError:
        return False

def remove_empty_dirs(target_dir: str) -> None:
    "Delete every empty directory under target_dir, until there are none left."
    errors: t.Dict[str, OSError] = {}
    def onerror(err: OSError) -> None:
        if isinstance(err, FileNotFoundError):
            logger.debug("removeEmptyDirs, already gone: '%s'", err.filename)
            return
        logger.error("Error walking '%s': %s", err.filename, err)
        errors[os.fsdecode(err.filename or target_dir)] = err
    count = 1
    while count:
        count = 0
        for dirpath, dirnames, _ in os.walk(target_dir, onerror=onerror):
            logger.debug("removeEmptyDirs, path: '%s'", dirpath)
            dirs, _links = _split_links(dirpath, dirnames)
            keep: t.List[str] = []
            for name in dirs:
                path = os.path.join(dirpath, name)
                try:
                    os.rmdir(path)
                except FileNotFoundError:
                    continue
                except OSError as e:
                    if e.errno in (errno.ENOTEMPTY, errno.EEXIST) or not _is_empty(path):
                        keep.append(name)
                    else:
                        logger.error("Error removing empty dir, path: '%s', err: '%s'", path, e)
                        errors[path] = e
                    continue
                logger.info("Removed Empty dir: '%s'", path)
                errors.pop(path, None)
                count += 1
            dirnames[:] = keep
    if errors:
        raise PruneError(list(errors.values()))

async def cleanup(project: Project, timeout: t.Optional[float]=None) -> None:
    """Prune the project's target directory down to the packages the project needs.

    Both pruning walks always run; if either failed, a PruneError carrying all
    the failures is raised at the end.

    """
    imports = await collect_imports(project, timeout)
    errors: t.List[OSError] = []
    try:
        await trio.to_thread.run_sync(remove_unused, imports, project.target_dir)
    except PruneError as e:
        logger.error("Error removing unused dirs: %s", e)
        errors.extend(e.errors)
    try:
        await trio.to_thread.run_sync(remove_empty_dirs, project.target_dir)
    except PruneError as e:
        logger.error("Error removing empty dirs: %s", e)
        errors.extend(e.errors)
    if errors:
        raise PruneError(errors)
