"""Subpath matching against a mapping table.

1. An exact key match wins.
2. Otherwise the longest directory key (``"./dir/"``) that prefixes the
   subpath wins; the rest of the subpath becomes the remainder appended to
   the target later.
3. Otherwise there is no mapping. Nothing is guessed: no ``index`` lookup,
   no extension probing, and a subpath ending in '/' never matches.
"""

import logging
from dataclasses import dataclass

from .errors import AmbiguousMappingError
from .errors import NoMappingError
from .mapping import MappingTable
from .mapping import MappingTarget
from .mapping import is_directory_key

logger = logging.getLogger(__name__)

DEFAULT_SUBPATH = "./default"


@dataclass(frozen=True)
class SubpathMatch:
    """Result of matching a subpath.

    Attributes:
        key: Table key that matched
        target: Its mapping target
        remainder: Text after a directory key, or None for an exact match
    """

    key: str
    target: MappingTarget
    remainder: str | None = None

    @property
    def is_directory(self) -> bool:
        return self.remainder is not None


def match_subpath(table: MappingTable, subpath: str, *, allow_default_subpath: bool = False) -> SubpathMatch:
    """Find the table entry for ``subpath``.

    Args:
        table: Mapping table to search
        subpath: Normalized subpath (``"."``, ``"./x"``, or an alias like ``"#x"``)
        allow_default_subpath: Treat an unmapped ``"./default"`` as ``"."``

    Raises:
        NoMappingError: No key applies, or the subpath names a directory
        AmbiguousMappingError: Two equally specific keys apply
    """
    if subpath.endswith("/"):
        raise NoMappingError(f"'{subpath}' names a directory; directories cannot be imported", key=subpath)

    exact = [target for key, target in table if key == subpath]
    if len(exact) > 1:
        raise AmbiguousMappingError(f"key '{subpath}' is defined {len(exact)} times", key=subpath)
    if exact:
        logger.debug(f"[match] {subpath} -> exact")
        return SubpathMatch(key=subpath, target=exact[0])

    best: list[tuple[str, MappingTarget]] = []
    for key, target in table:
        if not is_directory_key(key) or not subpath.startswith(key):
            continue
        if not best or len(key) > len(best[0][0]):
            best = [(key, target)]
        elif len(key) == len(best[0][0]):
            best.append((key, target))

    if len(best) > 1:
        raise AmbiguousMappingError(
            f"directory keys {[key for key, _ in best]} match '{subpath}' equally", key=best[0][0]
        )
    if best:
        key, target = best[0]
        remainder = subpath[len(key) :]
        logger.debug(f"[match] {subpath} -> directory {key} + {remainder!r}")
        return SubpathMatch(key=key, target=target, remainder=remainder)

    if allow_default_subpath and subpath == DEFAULT_SUBPATH:
        logger.debug(f"[match] {subpath} -> '.'")
        return match_subpath(table, ".")

    raise NoMappingError(f"no mapping for '{subpath}'", key=subpath)
