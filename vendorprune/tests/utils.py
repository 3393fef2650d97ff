"Test helpers: a trio-enabled TestCase, and throwaway GOPATH trees to run against."
import functools
import os
import shutil
import tempfile
import trio
import typing as t
import unittest
from vendorprune.environ import Project

import logging
logger = logging.getLogger(__name__)
# logging.basicConfig(level=logging.DEBUG)

class TrioTestCase(unittest.TestCase):
    "A trio-enabled variant of unittest.TestCase; async test methods run in a fresh trio run."
    nursery: trio.Nursery

    async def asyncSetUp(self) -> None:
        pass

    async def asyncTearDown(self) -> None:
        pass

    def __init__(self, methodName='runTest') -> None:
        if methodName == 'runTest' and not hasattr(type(self), methodName):
            # as unittest.TestCase does: allow instantiation with no test method
            super().__init__(methodName)
            return
        test = getattr(type(self), methodName)
        @functools.wraps(test)
        async def test_with_setup() -> None:
            async with trio.open_nursery() as nursery:
                self.nursery = nursery
                await self.asyncSetUp()
                try:
                    await test(self)
                finally:
                    await self.asyncTearDown()
                nursery.cancel_scope.cancel()
        @functools.wraps(test_with_setup)
        def sync_test_with_setup() -> None:
            trio.run(test_with_setup)
        setattr(self, methodName, sync_test_with_setup)
        super().__init__(methodName)

ROOT_PACKAGE = "example.com/app"

def write_file(path: str, content: str="") -> str:
    "Write content to path, making any missing parent directories."
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        f.write(content)
    return path

def go_source(package: str, *imports: str, body: str="") -> str:
    "Render a small Go file which imports these paths."
    ret = f"package {package}\n\n"
    if imports:
        ret += "import (\n"
        for imp in imports:
            ret += f'\t"{imp}"\n'
        ret += ")\n"
    return ret + body

class GoPathMixin:
    """Make a temporary GOPATH, holding a project with root package `ROOT_PACKAGE`.

    Mix this into a TestCase; it provides `self.gopath`, `self.project`, and
    helpers to populate the project and its vendor directory.

    """
    gopath: str
    project: Project

    def setUp(self) -> None:
        self.gopath = os.path.realpath(tempfile.mkdtemp(prefix="vendorprune."))
        directory = os.path.join(self.gopath, "src", *ROOT_PACKAGE.split("/"))
        os.makedirs(directory)
        self.project = Project.from_environ(directory, self.gopath)

    def tearDown(self) -> None:
        shutil.rmtree(self.gopath, ignore_errors=True)

    def path(self, rel: str) -> str:
        "A path inside the project directory."
        return os.path.join(self.project.directory, *rel.split("/"))

    def write(self, rel: str, content: str="") -> str:
        "Write a file inside the project directory."
        return write_file(self.path(rel), content)

    def write_package(self, rel: str, *imports: str, name: t.Optional[str]=None,
                      filename: t.Optional[str]=None, body: str="") -> str:
        "Write a Go file into the directory of this package; rel is relative to the project."
        if not name:
            name = rel.split("/")[-1].replace(".", "_").replace("-", "_") if rel else "main"
        filename = filename or name + ".go"
        return self.write(f"{rel}/{filename}" if rel else filename,
                          go_source(name, *imports, body=body))

    def vendor(self, pkg: str, *imports: str, **kwargs) -> str:
        "Write a Go file for this package into the vendor directory."
        return self.write_package(self.project.target + "/" + pkg, *imports, **kwargs)

    def exists(self, rel: str) -> bool:
        return os.path.lexists(self.path(rel))
