"Finding the packages which make up the project itself."
from __future__ import annotations
from vendorprune.environ import Project
from vendorprune.exceptions import GoSyntaxError
from vendorprune.goparse import Mode, parse_dir
import os
import typing as t
import logging
logger = logging.getLogger(__name__)

def _skip(project: Project, rel: str, name: str) -> bool:
    "Don't descend into the target directory, or into hidden directories."
    return rel == project.target or name.startswith(".")

def list_packages(project: Project) -> t.Set[str]:
    """Return the identifiers of every package in the project.

    A package is a directory with at least one Go file carrying a package
    clause. A directory we can't parse contributes nothing, but we still look
    at its subdirectories.

    """
    packages: t.Set[str] = set()
    def onerror(err: OSError) -> None:
        logger.warning("%s", err)
    for dirpath, dirnames, _ in os.walk(project.directory, onerror=onerror):
        rel = os.path.relpath(dirpath, project.directory).replace(os.sep, "/")
        dirnames[:] = sorted(name for name in dirnames
                             if not _skip(project, name if rel == "." else rel + "/" + name, name))
        logger.debug("path: '%s'", rel)
        try:
            files = parse_dir(dirpath, Mode.PACKAGE_CLAUSE_ONLY)
        except (GoSyntaxError, OSError) as e:
            logger.error("%s", e)
            continue
        if files:
            pkg = project.root_package if rel == "." else project.root_package + "/" + rel
            logger.debug("Adding package: '%s'", pkg)
            packages.add(pkg)
    return packages
