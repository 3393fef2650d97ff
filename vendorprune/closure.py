"""Computing the closure of external packages a project needs.

This is a breadth-first search over the package reference graph, one level at
a time. Every package in the frontier is handed to its own
`vendorprune.imports.list_imports` task; their outputs are merged into a single
stream, which we drain into the set of discovered packages. Once a level is
done, the next frontier is everything discovered but not yet processed.

Only this coordinating task touches `discovered` and `seen`; the workers just
send identifiers down their channels.

The search terminates because `seen` only grows and there are only finitely
many directories on disk. Each package is extracted at most once, however many
other packages refer to it.

"""
from __future__ import annotations
from vendorprune.concurrency import merged
from vendorprune.discovery import list_packages
from vendorprune.environ import Project
from vendorprune.imports import list_imports
import functools
import trio
import typing as t
import logging
logger = logging.getLogger(__name__)

async def expand(project: Project, packages: t.AbstractSet[str],
                 timeout: t.Optional[float]=None) -> t.Set[str]:
    """Starting from these packages, return every package transitively reachable.

    The result includes the starting packages and any internal packages reached
    through relative imports.

    """
    discovered: t.Set[str] = set()
    seen: t.Set[str] = set()
    frontier = set(packages)
    while frontier:
        logger.debug("expanding frontier of %d package(s)", len(frontier))
        async with merged([functools.partial(list_imports, project, pkg, timeout=timeout)
                           for pkg in sorted(frontier)]) as stream:
            async for pkg in stream:
                discovered.add(pkg)
        seen |= frontier
        frontier = discovered - seen
    return discovered

async def collect_imports(project: Project, timeout: t.Optional[float]=None) -> t.Set[str]:
    "Return the closure: every external package transitively needed by the project's packages."
    logger.info("Collecting packages in '%s'", project.root_package)
    packages = await trio.to_thread.run_sync(list_packages, project)
    discovered = await expand(project, packages, timeout)
    imports = {pkg for pkg in discovered if not project.is_internal(pkg)}
    for pkg in sorted(imports):
        logger.debug("Keeping: '%s'", pkg)
    logger.debug("imports len: %d", len(imports))
    return imports
