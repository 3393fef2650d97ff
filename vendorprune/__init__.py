"""Prune a Go project's vendor directory down to what the project actually uses

vendorprune works out which vendored packages a project needs, and deletes
everything else from its vendor directory.

## The closure

The project's own packages are found by walking the project directory, skipping
the vendor directory and hidden directories (`vendorprune.discovery`). The
project's root package is the import path implied by its location under
`$GOPATH/src` (`vendorprune.environ`).

Starting from those packages, `vendorprune.closure` repeatedly extracts the
dependencies of every package found so far, in parallel, until no new package
turns up. A package's dependencies are its external imports, plus directories
of C headers included from cgo preambles (`vendorprune.imports`). Standard
library imports, recognizable because their first path segment has no dot, are
never followed; neither are imports of the project's own packages.

## Pruning

With the closure in hand, `vendorprune.prune` deletes every vendored directory
that isn't in the closure or on the path to something in it, every Go file in
a package outside the closure, and every vendored test file; then it deletes
any directories left empty.

Nothing is fetched, and version constraints and lock files are not looked at.

"""
__version__ = "0.1.0"
