"""Package metadata collaborators.

The resolver never reads files itself. It asks a ``MetadataLoader`` for the
already-parsed metadata of a directory and walks directories produced by
``list_ancestor_directories``. Two loaders are provided: one backed by the
filesystem (with a per-directory cache) and one backed by a dict.
"""

import json
import logging
import threading
from collections.abc import Iterator
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from typing import Protocol

from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .errors import MalformedMappingError

logger = logging.getLogger(__name__)


class PackageMetadata(BaseModel):
    """The fields of a package.json the resolver consults."""

    name: str | None = Field(None, description="Package name")
    main: str | None = Field(None, description="Legacy entrypoint, relative to the package root")
    exports: Any = Field(None, description="Public subpath mapping (string, array, or object)")
    imports: Any = Field(None, description="Package-internal alias mapping")
    default: Any = Field(None, description="Entrypoint mapping used when exports is absent")
    type: str | None = Field(None, description="'module' or 'commonjs'; decides the format of .js files")

    @classmethod
    def from_json(cls, data: Any, source: str = "<memory>") -> "PackageMetadata":
        """Build metadata from a parsed JSON document."""
        if not isinstance(data, dict):
            raise MalformedMappingError(f"package metadata in {source} is not a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise MalformedMappingError(f"invalid package metadata in {source}: {e}") from e


class MetadataLoader(Protocol):
    """Loads parsed package metadata for a directory."""

    def load_package_metadata(self, directory: Path) -> PackageMetadata | None:
        """Return metadata for ``directory``, or None if it has no metadata file."""
        ...


def list_ancestor_directories(start: Path) -> Iterator[Path]:
    """Yield ``start`` and then each parent directory, nearest first."""
    yield start
    yield from start.parents


class FilesystemMetadataLoader:
    """Reads ``package.json`` files from disk.

    Parsed metadata is cached per directory, including negative results.
    The cache is guarded by a lock so one loader can serve concurrent resolutions.
    """

    def __init__(self, filename: str = "package.json"):
        self.filename = filename
        self._cache: dict[Path, PackageMetadata | None] = {}
        self._lock = threading.Lock()

    def load_package_metadata(self, directory: Path) -> PackageMetadata | None:
        with self._lock:
            if directory in self._cache:
                return self._cache[directory]

        metadata = self._read(directory / self.filename)

        with self._lock:
            self._cache.setdefault(directory, metadata)
            return self._cache[directory]

    def _read(self, path: Path) -> PackageMetadata | None:
        if not path.is_file():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Invalid JSON in {path}: {e}")
            raise MalformedMappingError(f"invalid JSON in {path}: {e}") from e
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            raise MalformedMappingError(f"cannot read {path}: {e}") from e
        logger.debug(f"[metadata] loaded {path}")
        return PackageMetadata.from_json(data, source=str(path))

    def clear_cache(self) -> None:
        """Forget all cached metadata."""
        with self._lock:
            self._cache.clear()


class InMemoryMetadataLoader:
    """Serves metadata from a mapping of directory to parsed package.json.

    Example:
        >>> loader = InMemoryMetadataLoader({"/app": {"name": "app", "imports": {"#db": "./db.js"}}})
        >>> loader.load_package_metadata(Path("/app")).name
        'app'
    """

    def __init__(self, packages: Mapping[str | Path, PackageMetadata | dict[str, Any]] | None = None):
        self._packages: dict[Path, PackageMetadata] = {}
        for directory, metadata in (packages or {}).items():
            self.add(directory, metadata)

    def add(self, directory: str | Path, metadata: PackageMetadata | dict[str, Any]) -> None:
        """Register metadata for a directory."""
        if not isinstance(metadata, PackageMetadata):
            metadata = PackageMetadata.from_json(metadata, source=str(directory))
        self._packages[Path(directory)] = metadata

    def load_package_metadata(self, directory: Path) -> PackageMetadata | None:
        return self._packages.get(directory)
