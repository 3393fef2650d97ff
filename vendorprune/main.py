"The vendorprune command: remove unused packages and files from a Go project's ./vendor dir."
from __future__ import annotations
from vendorprune import __version__
from vendorprune.environ import DEFAULT_TARGET, Project
from vendorprune.exceptions import ConfigurationError, PruneError
from vendorprune.prune import cleanup
import argparse
import functools
import os
import sys
import trio
import typing as t
import logging
logger = logging.getLogger(__name__)

EXIT_PRUNE_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2

def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vendorprune",
        description="Remove unused packages and files from your Go project's ./vendor dir",
        usage="vendorprune [options]")
    parser.add_argument('-C', '--directory', default=".",
                        help="The directory in which to run")
    parser.add_argument('-d', '--debug', action='store_true',
                        help="Debug logging")
    parser.add_argument('-T', '--target', default=DEFAULT_TARGET,
                        help=argparse.SUPPRESS)
    parser.add_argument('--gopath', default=os.environ.get("GOPATH"),
                        help=argparse.SUPPRESS)
    parser.add_argument('--timeout', type=float, default=None,
                        help=argparse.SUPPRESS)
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser

def run(argv: t.List[str]) -> int:
    "Run vendorprune with these arguments, and return the exit status."
    args = make_parser().parse_args(argv[1:])
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    directory = os.path.abspath(args.directory)
    logger.debug("dir: '%s'", directory)
    if not os.path.isdir(directory):
        logger.error("No such directory: '%s'", directory)
        return EXIT_CONFIGURATION_ERROR
    try:
        project = Project.from_environ(directory, args.gopath, args.target)
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_CONFIGURATION_ERROR
    try:
        trio.run(functools.partial(cleanup, project, timeout=args.timeout))
    except PruneError as e:
        logger.error("Pruning '%s' finished with errors: %s", project.target_dir, e)
        return EXIT_PRUNE_ERROR
    return 0

def main() -> None:
    sys.exit(run(sys.argv))

if __name__ == "__main__":
    main()
