from vendorprune.discovery import list_packages
from vendorprune.tests.utils import GoPathMixin, ROOT_PACKAGE
import unittest

class TestListPackages(GoPathMixin, unittest.TestCase):
    def test_list_packages(self) -> None:
        self.write_package("", "fmt")
        self.write_package("cmd/tool", "github.com/foo/bar")
        self.write_package("internal/util", name="util", filename="util_test.go")
        self.write("docs/README.md", "no go here\n")
        self.write("broken/broken.go", "not go at all\n")
        self.write_package("broken/child")
        self.write_package(".git/hooks")
        self.write_package("cmd/.hidden")
        self.vendor("github.com/foo/bar")
        self.assertEqual(list_packages(self.project), {
            ROOT_PACKAGE,
            ROOT_PACKAGE + "/cmd/tool",
            ROOT_PACKAGE + "/internal/util",
            ROOT_PACKAGE + "/broken/child",
        })

    def test_empty_project(self) -> None:
        self.assertEqual(list_packages(self.project), set())

    def test_nested_vendor_dir_is_walked(self) -> None:
        "Only the configured target directory is skipped."
        self.write_package("lib/vendor/thing")
        self.assertEqual(list_packages(self.project), {ROOT_PACKAGE + "/lib/vendor/thing"})
