"""Working out where everything is: the project, its root package, and its vendor directory.

The root package is the import path of the project itself. As with the
classic GOPATH layout, it is derived from where the project sits underneath
`$GOPATH/src`: a project at `$GOPATH/src/example.com/app` has root package
`example.com/app`.

"""
from __future__ import annotations
from dataclasses import dataclass
from vendorprune import importpath
from vendorprune.exceptions import ConfigurationError
import os
import typing as t
import logging
logger = logging.getLogger(__name__)

__all__ = [
    'DEFAULT_TARGET',
    'guess_root_package',
    'Project',
]

DEFAULT_TARGET = "vendor"

def guess_root_package(directory: str, gopath: t.Optional[str]) -> str:
    """Return the import path of the project in this directory.

    Raises ConfigurationError if GOPATH is unset, holds more than one entry, or
    doesn't contain this directory.

    """
    logger.warning("GOPATH is '%s'", gopath)
    if not gopath or os.pathsep in gopath:
        raise ConfigurationError(f"GOPATH not set or is not a single path: '{gopath}'")
    src_path = os.path.normpath(os.path.join(gopath, "src"))
    if not directory.startswith(src_path + "/"):
        raise ConfigurationError(f"project directory '{directory}' is not a subdirectory of '{src_path}'")
    if not os.path.isdir(src_path):
        raise ConfigurationError(f"$GOPATH/src does not exist: '{src_path}'")
    logger.debug("srcPath: '%s'", src_path)
    return directory[len(src_path + "/"):]

@dataclass(frozen=True)
class Project:
    """A Go project on disk.

    `directory` is absolute; `target` is the vendor directory, relative to
    `directory`.

    """
    directory: str
    root_package: str
    target: str = DEFAULT_TARGET

    @classmethod
    def from_environ(cls, directory: t.Union[str, os.PathLike], gopath: t.Optional[str],
                     target: str=DEFAULT_TARGET) -> Project:
        "Make a Project for this directory, deriving the root package from GOPATH."
        directory = os.path.abspath(os.fsdecode(directory))
        root_package = guess_root_package(directory, gopath)
        logger.debug("rootPackage: '%s'", root_package)
        return cls(directory, root_package, importpath.clean(target))

    @property
    def target_dir(self) -> str:
        return os.path.join(self.directory, self.target)

    def is_internal(self, pkg: str) -> bool:
        return importpath.is_internal(self.root_package, pkg)

    def relative_dir(self, pkg: str) -> str:
        """Return where this package lives, relative to the project directory.

        The root package is the project directory itself, internal packages are
        subdirectories of it, and everything else lives in the target directory.

        """
        if pkg == self.root_package:
            return "."
        elif pkg.startswith(self.root_package + "/"):
            return pkg[len(self.root_package)+1:]
        else:
            return self.target + "/" + pkg

    def package_dir(self, pkg: str) -> str:
        return os.path.normpath(os.path.join(self.directory, self.relative_dir(pkg)))

    def is_vendored(self, pkg: str) -> bool:
        "Return true if this package is looked up inside the target directory."
        return self.relative_dir(pkg).startswith(self.target + "/")
