"""Resolver facade.

``Resolver.resolve(specifier, importer, conditions)`` turns an import specifier
into a file URL:

- relative and absolute-URL specifiers are joined/used verbatim, no metadata read
- ``#alias`` specifiers go through the importer's own package ``imports``; an
  alias may point at another package, which is resolved once more (one hop)
- bare specifiers locate the dependency (or the importer's own package, for
  self references) and go through its ``exports``, falling back to
  ``default`` and then ``main`` only when no ``exports`` are declared

Every failure is a ``ResolutionError`` and is final; nothing retries with a
different strategy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from pathlib import PurePath
from urllib.parse import quote
from urllib.parse import urljoin
from urllib.parse import urlparse
from urllib.request import url2pathname

from . import formats
from .boundary import BoundaryLocator
from .boundary import PackageBoundary
from .conditions import ConditionEvaluator
from .conditions import ConditionSet
from .config import DEFAULT_CONFIG
from .config import ResolverConfig
from .errors import InvalidSpecifierError
from .errors import NoMappingError
from .errors import ResolutionError
from .mapping import MappingField
from .mapping import MappingTable
from .mapping import StringTarget
from .mapping import build_mapping_table
from .matcher import SubpathMatch
from .matcher import match_subpath
from .metadata import FilesystemMetadataLoader
from .metadata import MetadataLoader
from .metadata import PackageMetadata
from .specifier import Specifier
from .specifier import SpecifierKind
from .specifier import classify
from .validation import ValidatedTarget
from .validation import validate_target

logger = logging.getLogger(__name__)

# An alias may name another package once; that package's exports never alias further.
MAX_ALIAS_DEPTH = 1

Conditions = ConditionSet | Iterable[str] | None


@dataclass(frozen=True, eq=False)
class ResolvedModule:
    """A successful resolution.

    Attributes:
        url: Absolute URL of the module
        path: Filesystem path for ``file:`` URLs, None otherwise
        format: Module format ("module", "commonjs", "json", "wasm", "builtin") or None
        boundary: Package whose mapping produced the URL, or that contains the file
        key: Mapping key that matched, None when no mapping was consulted
    """

    url: str
    path: Path | None
    format: str | None
    boundary: PackageBoundary | None = None
    key: str | None = None


@dataclass(frozen=True, eq=False)
class ResolutionResult:
    """Either a ``ResolvedModule`` or the ``ResolutionError`` that prevented it."""

    specifier: str
    resolved: ResolvedModule | None = None
    error: ResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Resolver:
    """Resolves module specifiers against package metadata.

    Args:
        config: Resolver policy (defaults to ``ResolverConfig()``)
        loader: Metadata collaborator (defaults to reading package.json from disk)

    A resolver holds no per-call state; one instance can serve concurrent callers
    as long as the loader can.
    """

    def __init__(self, config: ResolverConfig | None = None, loader: MetadataLoader | None = None):
        self.config = config or DEFAULT_CONFIG
        self.loader = loader or FilesystemMetadataLoader(self.config.metadata_filename)
        self.locator = BoundaryLocator(self.loader, self.config)

    def resolve(self, specifier: str, importer: str | PurePath, conditions: Conditions = None) -> ResolvedModule:
        """Resolve ``specifier`` as imported from ``importer``.

        Args:
            specifier: Import specifier
            importer: ``file:`` URL or filesystem path of the importing file
                (a URL ending in '/' names a directory)
            conditions: Active conditions; None uses ``config.default_conditions``

        Raises:
            ResolutionError: Any of the resolution error kinds
        """
        condition_set = self.condition_set(conditions)
        importer_url = to_file_url(importer)
        logger.debug(
            f"[resolve] {specifier} from {importer_url} with [{', '.join(condition_set)}]",
            extra={"event": "resolve.start", "specifier": specifier, "importer": importer_url},
        )
        try:
            return self._resolve(specifier, importer_url, condition_set, depth=0)
        except ResolutionError as e:
            e.specifier = specifier
            raise

    def try_resolve(self, specifier: str, importer: str | PurePath, conditions: Conditions = None) -> ResolutionResult:
        """Like ``resolve`` but returns the failure instead of raising it."""
        try:
            return ResolutionResult(specifier=specifier, resolved=self.resolve(specifier, importer, conditions))
        except ResolutionError as e:
            return ResolutionResult(specifier=specifier, error=e)

    def condition_set(self, conditions: Conditions = None) -> ConditionSet:
        if conditions is None:
            return ConditionSet.of(self.config.default_conditions)
        if isinstance(conditions, ConditionSet):
            return conditions
        return ConditionSet.of(conditions)

    def entry_table(self, metadata: PackageMetadata) -> MappingTable | None:
        """Pick the table that governs bare imports of a package.

        ``exports`` wins when it maps anything. Otherwise ``default``, and
        otherwise ``main`` as a single ``"."`` entry.
        """
        sigil = self.config.alias_sigil
        exports = build_mapping_table(metadata.exports, MappingField.EXPORTS, sigil)
        if exports is not None and len(exports):
            return exports
        default = build_mapping_table(metadata.default, MappingField.DEFAULT, sigil)
        if default is not None:
            return default
        if metadata.main is not None:
            main = StringTarget(_main_target(metadata.main))
            return MappingTable(field=MappingField.MAIN, entries=((".", main),))
        return exports

    def _resolve(self, raw: str, importer_url: str, conditions: ConditionSet, depth: int) -> ResolvedModule:
        specifier = classify(raw, self.config, allow_alias=depth == 0)

        if specifier.kind is SpecifierKind.RELATIVE:
            url = urljoin(importer_url, raw)
            logger.debug(f"[resolve] {raw} -> {url} (relative)", extra={"event": "resolve.relative", "url": url})
            return self._located(url)

        if specifier.kind is SpecifierKind.ABSOLUTE_URL:
            logger.debug(f"[resolve] {raw} -> verbatim URL", extra={"event": "resolve.url", "url": raw})
            return self._located(raw)

        importer_dir = _directory_of(importer_url)
        if specifier.alias:
            return self._resolve_alias(specifier, importer_dir, conditions, depth)
        return self._resolve_package(specifier, importer_dir, conditions)

    def _resolve_alias(
        self, specifier: Specifier, importer_dir: Path, conditions: ConditionSet, depth: int
    ) -> ResolvedModule:
        boundary = self.locator.locate_self(importer_dir)
        try:
            table = build_mapping_table(boundary.metadata.imports, MappingField.IMPORTS, self.config.alias_sigil)
            if table is None:
                raise NoMappingError("package declares no 'imports'", key=specifier.subpath)
            match, target = self._match(table, specifier, conditions, allow_bare=True)
        except ResolutionError as e:
            raise e.attach(boundary=boundary)

        if not target.bare:
            return self._mapped(boundary, match, target)

        if depth >= MAX_ALIAS_DEPTH:
            raise InvalidSpecifierError(
                f"alias target '{target.value}' exceeds the indirection limit", boundary=boundary, key=match.key
            )
        logger.debug(f"[resolve] {specifier.raw} -> package specifier {target.value}")
        return self._resolve(target.value, boundary.root_url, conditions, depth + 1)

    def _resolve_package(self, specifier: Specifier, importer_dir: Path, conditions: ConditionSet) -> ResolvedModule:
        assert specifier.package_name is not None

        boundary: PackageBoundary | None = None
        if self.config.self_reference:
            own = self.locator.find_self(importer_dir)
            if own is not None and own.name == specifier.package_name and own.metadata.exports is not None:
                logger.debug(f"[resolve] {specifier.raw} -> self reference {own.root}")
                boundary = own
        if boundary is None:
            boundary = self.locator.locate_dependency(specifier.package_name, importer_dir)

        try:
            table = self.entry_table(boundary.metadata)
            if table is None or not len(table):
                raise NoMappingError("package declares no entrypoints", key=specifier.subpath)
            match, target = self._match(table, specifier, conditions, allow_bare=False)
        except ResolutionError as e:
            raise e.attach(boundary=boundary)
        return self._mapped(boundary, match, target)

    def _match(
        self, table: MappingTable, specifier: Specifier, conditions: ConditionSet, *, allow_bare: bool
    ) -> tuple[SubpathMatch, ValidatedTarget]:
        assert specifier.subpath is not None
        match = match_subpath(
            table,
            specifier.subpath,
            allow_default_subpath=self.config.allow_default_subpath and table.field is not MappingField.IMPORTS,
        )
        validate = partial(
            validate_target, key=match.key, remainder=match.remainder, allow_bare=allow_bare, config=self.config
        )
        evaluator = ConditionEvaluator(conditions, validate, order=self.config.condition_order)
        try:
            return match, evaluator.evaluate(match.target)
        except ResolutionError as e:
            raise e.attach(key=match.key)

    def _mapped(self, boundary: PackageBoundary, match: SubpathMatch, target: ValidatedTarget) -> ResolvedModule:
        relative = target.value[2:]
        url = urljoin(boundary.root_url, quote(relative))
        path = boundary.root / relative
        logger.debug(
            f"[resolve] {match.key} -> {url}",
            extra={"event": "resolve.mapped", "package": str(boundary.root), "key": match.key, "url": url},
        )
        return ResolvedModule(
            url=url, path=path, format=self._format_of(path), boundary=boundary, key=match.key
        )

    def _located(self, url: str) -> ResolvedModule:
        parsed = urlparse(url)
        if parsed.scheme == "node":
            return ResolvedModule(url=url, path=None, format=formats.BUILTIN)
        if parsed.scheme != "file":
            return ResolvedModule(url=url, path=None, format=None)
        path = _url_to_path(url)
        try:
            owner = self.locator.find_self(path.parent)
        except ResolutionError as e:
            logger.debug(
                f"[resolve] package scope of {path} unknown: {e}",
                extra={"event": "resolve.scope_unknown", "path": str(path)},
            )
            return ResolvedModule(url=url, path=path, format=None)
        return ResolvedModule(url=url, path=path, format=_format_in(path, owner), boundary=owner)

    def _format_of(self, path: Path) -> str | None:
        try:
            owner = self.locator.find_self(path.parent)
        except ResolutionError as e:
            logger.debug(
                f"[resolve] package scope of {path} unknown: {e}",
                extra={"event": "resolve.scope_unknown", "path": str(path)},
            )
            return None
        return _format_in(path, owner)


def resolve(
    specifier: str,
    importer: str | PurePath,
    conditions: Conditions = None,
    *,
    config: ResolverConfig | None = None,
    loader: MetadataLoader | None = None,
) -> ResolvedModule:
    """Resolve with a one-off ``Resolver``."""
    return Resolver(config=config, loader=loader).resolve(specifier, importer, conditions)


def to_file_url(importer: str | PurePath) -> str:
    """Normalize an importer given as a path or URL into a ``file:`` URL."""
    if isinstance(importer, PurePath):
        return Path(importer).absolute().as_uri()
    if urlparse(importer).scheme == "file":
        return importer
    if "://" in importer:
        raise ValueError(f"importer must be a file URL or path, got {importer!r}")
    url = Path(importer).absolute().as_uri()
    return url + "/" if importer.endswith("/") and not url.endswith("/") else url


def _url_to_path(url: str) -> Path:
    return Path(url2pathname(urlparse(url).path))


def _directory_of(importer_url: str) -> Path:
    path = _url_to_path(importer_url)
    return path if importer_url.endswith("/") else path.parent


def _main_target(main: str) -> str:
    if main.startswith(("./", "/")) or ":" in main:
        return main
    return f"./{main}"


def _format_in(path: Path, owner: PackageBoundary | None) -> str | None:
    return formats.detect_format(path, owner.metadata.type if owner else None)
