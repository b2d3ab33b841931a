"""Mapping table model.

An ``exports``/``imports``/``default`` field is parsed into a ``MappingTable``:
an ordered list of subpath keys, each mapped to a ``MappingTarget``. A target is
one of four immutable variants:

- ``StringTarget``: a path (or, for imports, a bare package specifier)
- ``NullTarget``: the ``false``/``null`` sentinel, an explicit "no mapping"
- ``ConditionalTarget``: ordered ``condition -> target`` entries
- ``FallbackArray``: ordered alternatives tried until one is valid

Construction only checks structure. Whether a string target is acceptable
(prefix, traversal, slash symmetry) is decided later by the validator, so that
fallback arrays can skip entries they do not understand.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import MalformedMappingError


class MappingField(str, Enum):
    """Metadata fields that hold a mapping table."""

    EXPORTS = "exports"
    IMPORTS = "imports"
    DEFAULT = "default"
    MAIN = "main"


@dataclass(frozen=True)
class StringTarget:
    path: str


@dataclass(frozen=True)
class NullTarget:
    pass


@dataclass(frozen=True)
class ConditionalTarget:
    entries: tuple[tuple[str, MappingTarget], ...]


@dataclass(frozen=True)
class FallbackArray:
    items: tuple[MappingTarget, ...]


MappingTarget = StringTarget | NullTarget | ConditionalTarget | FallbackArray


@dataclass(frozen=True)
class MappingTable:
    """Ordered subpath-key to target entries for one metadata field."""

    field: MappingField
    entries: tuple[tuple[str, MappingTarget], ...]

    def __iter__(self) -> Iterator[tuple[str, MappingTarget]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]


def is_directory_key(key: str) -> bool:
    """Directory keys end with '/' and match every subpath below them."""
    return key.endswith("/")


def build_mapping_table(raw: Any, field: MappingField, alias_sigil: str = "#") -> MappingTable | None:
    """Parse a raw metadata field into a ``MappingTable``.

    Args:
        raw: Parsed JSON value of the field
        field: Which field it came from (imports keys use the alias sigil)
        alias_sigil: Leading character of imports keys

    Returns:
        The table, or None when the field is absent

    Raises:
        MalformedMappingError: Mixed key forms, non-alias imports keys,
            path-like condition names, or values of an unsupported type
    """
    if raw is None:
        return None

    if raw is False:
        return MappingTable(field=field, entries=())

    if field is MappingField.IMPORTS:
        if not isinstance(raw, dict):
            raise MalformedMappingError(f"'imports' must be an object, got {type(raw).__name__}", target=raw)
        for key in raw:
            if not key.startswith(alias_sigil) or key == alias_sigil:
                raise MalformedMappingError(
                    f"'imports' keys must start with '{alias_sigil}' and name an alias", key=key
                )
        return MappingTable(
            field=field,
            entries=tuple((key, build_target(value, key, alias_sigil)) for key, value in raw.items()),
        )

    if isinstance(raw, str | list):
        return MappingTable(field=field, entries=((".", build_target(raw, ".", alias_sigil)),))

    if isinstance(raw, dict):
        path_keys = [key for key in raw if _is_path_like(key, alias_sigil)]
        if not path_keys:
            if not raw:
                return MappingTable(field=field, entries=())
            return MappingTable(field=field, entries=((".", build_target(raw, ".", alias_sigil)),))
        if len(path_keys) != len(raw):
            condition_keys = [key for key in raw if key not in path_keys]
            raise MalformedMappingError(
                f"'{field.value}' mixes subpath keys {path_keys} with condition keys {condition_keys}",
                target=raw,
            )
        for key in raw:
            if not key.startswith("."):
                raise MalformedMappingError(f"'{field.value}' subpath keys must start with '.'", key=key)
        return MappingTable(
            field=field,
            entries=tuple((key, build_target(value, key, alias_sigil)) for key, value in raw.items()),
        )

    raise MalformedMappingError(f"'{field.value}' has unsupported type {type(raw).__name__}", target=raw)


def build_target(raw: Any, key: str, alias_sigil: str = "#") -> MappingTarget:
    """Recursively convert a raw value into a ``MappingTarget``."""
    if isinstance(raw, str):
        return StringTarget(raw)
    if raw is False or raw is None:
        return NullTarget()
    if isinstance(raw, list):
        return FallbackArray(tuple(build_target(item, key, alias_sigil) for item in raw))
    if isinstance(raw, dict):
        for condition in raw:
            if _is_path_like(condition, alias_sigil):
                raise MalformedMappingError(
                    f"condition name '{condition}' looks like a subpath; nested subpath tables are not allowed",
                    key=key,
                    target=raw,
                )
            if condition.isdigit():
                raise MalformedMappingError(f"condition name '{condition}' is numeric", key=key, target=raw)
        return ConditionalTarget(
            tuple((condition, build_target(value, key, alias_sigil)) for condition, value in raw.items())
        )
    kind = "directory key" if is_directory_key(key) else "key"
    raise MalformedMappingError(
        f"{kind} '{key}' maps to unsupported value of type {type(raw).__name__}", key=key, target=raw
    )


def format_target(target: MappingTarget) -> str:
    """Render a target back into compact JSON-like text."""
    return json.dumps(_to_raw(target))


def _to_raw(target: MappingTarget) -> Any:
    if isinstance(target, StringTarget):
        return target.path
    if isinstance(target, NullTarget):
        return False
    if isinstance(target, ConditionalTarget):
        return {condition: _to_raw(value) for condition, value in target.entries}
    if isinstance(target, FallbackArray):
        return [_to_raw(item) for item in target.items]
    raise TypeError(f"unknown mapping target {target!r}")


def _is_path_like(key: str, alias_sigil: str) -> bool:
    return key.startswith(".") or key.startswith(alias_sigil)
