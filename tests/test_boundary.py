"""Tests for package boundary location."""

from pathlib import Path

import pytest

from exportmap.boundary import BoundaryLocator
from exportmap.config import ResolverConfig
from exportmap.errors import NoPackageBoundaryError
from exportmap.errors import PackageNotFoundError
from exportmap.metadata import InMemoryMetadataLoader


@pytest.fixture
def tree():
    return InMemoryMetadataLoader(
        {
            "/proj": {"name": "app"},
            "/proj/node_modules/pkg": {"name": "pkg"},
            "/proj/node_modules/@scope/lib": {"name": "@scope/lib"},
            "/proj/packages/inner/node_modules/pkg": {"name": "pkg", "main": "inner.js"},
            "/proj/node_modules/pkg/node_modules/dep": {"name": "dep"},
        }
    )


class TestLocateDependency:
    def test_nearest_installation(self, tree):
        locator = BoundaryLocator(tree)
        boundary = locator.locate_dependency("pkg", Path("/proj/src"))
        assert boundary.root == Path("/proj/node_modules/pkg")
        assert boundary.name == "pkg"

    def test_nested_installation_shadows_outer(self, tree):
        locator = BoundaryLocator(tree)
        boundary = locator.locate_dependency("pkg", Path("/proj/packages/inner/src"))
        assert boundary.metadata.main == "inner.js"

    def test_scoped_package(self, tree):
        boundary = BoundaryLocator(tree).locate_dependency("@scope/lib", Path("/proj"))
        assert boundary.root == Path("/proj/node_modules/@scope/lib")

    def test_dependency_of_a_dependency(self, tree):
        locator = BoundaryLocator(tree)
        boundary = locator.locate_dependency("dep", Path("/proj/node_modules/pkg/lib"))
        assert boundary.root == Path("/proj/node_modules/pkg/node_modules/dep")

    def test_skips_dependency_directories(self, tree):
        tree.add("/proj/node_modules/node_modules/pkg", {"name": "wrong"})
        boundary = BoundaryLocator(tree).locate_dependency("pkg", Path("/proj/node_modules"))
        assert boundary.root == Path("/proj/node_modules/pkg")

    def test_not_installed(self, tree):
        with pytest.raises(PackageNotFoundError, match="'missing' is not installed"):
            BoundaryLocator(tree).locate_dependency("missing", Path("/proj/src"))

    def test_custom_dependency_dir(self):
        loader = InMemoryMetadataLoader({"/proj/vendor/pkg": {"name": "pkg"}})
        locator = BoundaryLocator(loader, ResolverConfig(dependency_dir="vendor"))
        assert locator.locate_dependency("pkg", Path("/proj/src")).root == Path("/proj/vendor/pkg")


class TestLocateSelf:
    def test_nearest_package(self, tree):
        boundary = BoundaryLocator(tree).locate_self(Path("/proj/src/deep"))
        assert boundary.root == Path("/proj")
        assert boundary.root_url == "file:///proj/"

    def test_inside_a_dependency(self, tree):
        boundary = BoundaryLocator(tree).locate_self(Path("/proj/node_modules/pkg/lib"))
        assert boundary.name == "pkg"

    def test_stops_at_dependency_directory(self, tree):
        assert BoundaryLocator(tree).find_self(Path("/proj/node_modules")) is None

    def test_no_boundary(self):
        with pytest.raises(NoPackageBoundaryError, match="no package.json found"):
            BoundaryLocator(InMemoryMetadataLoader()).locate_self(Path("/tmp/loose"))
