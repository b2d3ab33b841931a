"""Shared fixtures for exportmap tests."""

import json
from pathlib import Path

import pytest

from exportmap.config import ResolverConfig
from exportmap.metadata import InMemoryMetadataLoader
from exportmap.resolver import Resolver

PROJECT = Path("/proj")


@pytest.fixture
def loader():
    """Empty in-memory metadata loader; tests register packages with ``add``."""
    return InMemoryMetadataLoader()


@pytest.fixture
def make_resolver(loader):
    """Build a Resolver over the in-memory loader, optionally with config overrides."""

    def _make(**config_overrides) -> Resolver:
        return Resolver(config=ResolverConfig(**config_overrides), loader=loader)

    return _make


@pytest.fixture
def resolver(make_resolver):
    return make_resolver()


@pytest.fixture
def add_package(loader):
    """Register ``/proj/node_modules/<name>`` with the given package.json fields."""

    def _add(name: str, root: Path = PROJECT, **fields) -> Path:
        directory = root / "node_modules" / name
        loader.add(directory, {"name": name, **fields})
        return directory

    return _add


@pytest.fixture
def write_package(tmp_path):
    """Write a package.json into ``tmp_path/<relative>`` and return the directory."""

    def _write(relative: str, metadata: dict) -> Path:
        directory = tmp_path / relative if relative else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "package.json").write_text(json.dumps(metadata))
        return directory

    return _write
