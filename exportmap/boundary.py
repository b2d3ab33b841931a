"""Package boundary location.

Two lookups, both a strict walk up the importer's ancestor directories:
- dependency: ``<dir>/<dependency_dir>/<name>/package.json`` at each level
- self: the nearest directory that has a ``package.json`` of its own
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_CONFIG
from .config import ResolverConfig
from .errors import NoPackageBoundaryError
from .errors import PackageNotFoundError
from .metadata import MetadataLoader
from .metadata import PackageMetadata
from .metadata import list_ancestor_directories

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PackageBoundary:
    """A directory governed by a package.json.

    Attributes:
        root: Directory containing the metadata file
        metadata: Parsed metadata
    """

    root: Path
    metadata: PackageMetadata

    @property
    def name(self) -> str | None:
        return self.metadata.name

    @property
    def root_url(self) -> str:
        """``file:`` URL of the root, always slash-terminated."""
        uri = self.root.as_uri()
        return uri if uri.endswith("/") else uri + "/"


class BoundaryLocator:
    """Finds the package boundary that governs a resolution."""

    def __init__(self, loader: MetadataLoader, config: ResolverConfig = DEFAULT_CONFIG):
        self.loader = loader
        self.config = config

    def locate_dependency(self, package_name: str, importer_dir: Path) -> PackageBoundary:
        """Find an installed dependency by walking up from the importer.

        Directories that are themselves dependency directories are skipped,
        so ``a/node_modules`` never looks inside ``a/node_modules/node_modules``.

        Raises:
            PackageNotFoundError: No ancestor has the package installed
        """
        dependency_dir = self.config.dependency_dir
        for directory in list_ancestor_directories(importer_dir):
            if directory.name == dependency_dir:
                continue
            candidate = directory / dependency_dir / package_name
            metadata = self.loader.load_package_metadata(candidate)
            if metadata is not None:
                logger.debug(
                    f"[boundary] {package_name} -> {candidate}",
                    extra={"event": "boundary.dependency", "package": str(candidate)},
                )
                return PackageBoundary(root=candidate, metadata=metadata)

        raise PackageNotFoundError(
            f"package '{package_name}' is not installed in any {dependency_dir} above {importer_dir}"
        )

    def find_self(self, importer_dir: Path) -> PackageBoundary | None:
        """Nearest enclosing package, or None.

        The walk stops at a dependency directory: a file directly inside
        ``node_modules`` belongs to no package.
        """
        for directory in list_ancestor_directories(importer_dir):
            if directory.name == self.config.dependency_dir:
                break
            metadata = self.loader.load_package_metadata(directory)
            if metadata is not None:
                logger.debug(f"[boundary] self -> {directory}")
                return PackageBoundary(root=directory, metadata=metadata)
        return None

    def locate_self(self, importer_dir: Path) -> PackageBoundary:
        """Nearest enclosing package.

        Raises:
            NoPackageBoundaryError: No package.json above the importer
        """
        boundary = self.find_self(importer_dir)
        if boundary is None:
            raise NoPackageBoundaryError(f"no {self.config.metadata_filename} found above {importer_dir}")
        return boundary
