"""Specifier classification.

Splits a raw import string into one of three shapes:
- relative: ``./x``, ``../x`` and path-absolute ``/x``, joined against the importer
- absolute URL: a recognized scheme such as ``file:`` or ``node:``, used verbatim
- bare: ``pkg``, ``pkg/sub``, ``@scope/pkg/sub`` or an alias such as ``#internal``
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .config import DEFAULT_CONFIG
from .config import ResolverConfig
from .errors import InvalidSpecifierError

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_ENCODED_SEPARATOR_RE = re.compile(r"%2f|%5c", re.IGNORECASE)


class SpecifierKind(str, Enum):
    """Shape of an import specifier."""

    RELATIVE = "relative"
    ABSOLUTE_URL = "absolute_url"
    BARE = "bare"


@dataclass(frozen=True)
class Specifier:
    """A classified specifier.

    Attributes:
        raw: The string as written by the importer
        kind: Which of the three shapes it has
        package_name: Package part of a bare specifier (``None`` for aliases)
        subpath: Mapping-table lookup key for bare specifiers, ``"."`` for the
            package itself, ``"./sub"`` for deeper paths, the full string for aliases
        alias: True when the specifier names a package-internal ``imports`` alias
    """

    raw: str
    kind: SpecifierKind
    package_name: str | None = None
    subpath: str | None = None
    alias: bool = False


def classify(raw: str, config: ResolverConfig = DEFAULT_CONFIG, *, allow_alias: bool = True) -> Specifier:
    """Classify a raw specifier.

    Args:
        raw: Specifier string
        config: Resolver configuration (schemes and alias sigil)
        allow_alias: False when the specifier is itself the target of an alias,
            where another alias would be an indirection cycle

    Returns:
        Classified ``Specifier``

    Raises:
        InvalidSpecifierError: Empty input, unsupported scheme, malformed
            package name or subpath, or an alias where none is allowed
    """
    if not raw:
        raise InvalidSpecifierError("specifier is empty", specifier=raw)

    if raw.startswith(("./", "../", "/")):
        return Specifier(raw=raw, kind=SpecifierKind.RELATIVE)

    if scheme_match := _SCHEME_RE.match(raw):
        scheme = scheme_match.group(1).lower()
        if scheme not in config.url_schemes:
            raise InvalidSpecifierError(f"unsupported URL scheme '{scheme}:'", specifier=raw)
        return Specifier(raw=raw, kind=SpecifierKind.ABSOLUTE_URL)

    sigil = config.alias_sigil
    if raw.startswith(sigil):
        if not allow_alias:
            raise InvalidSpecifierError(f"alias '{raw}' is not allowed here", specifier=raw)
        if raw == sigil or raw.startswith(sigil + "/"):
            raise InvalidSpecifierError("alias name is empty", specifier=raw)
        _check_subpath(raw, raw)
        return Specifier(raw=raw, kind=SpecifierKind.BARE, subpath=raw, alias=True)

    package_name, subpath = split_bare(raw, config)
    return Specifier(raw=raw, kind=SpecifierKind.BARE, package_name=package_name, subpath=subpath)


def split_bare(raw: str, config: ResolverConfig = DEFAULT_CONFIG) -> tuple[str, str]:
    """Split a bare specifier into ``(package_name, subpath)``.

    Examples:
        >>> split_bare("lodash")
        ('lodash', '.')
        >>> split_bare("@babel/core/lib/index.js")
        ('@babel/core', './lib/index.js')
        >>> split_bare("pkg/")
        ('pkg', './')
    """
    rest: str | None
    if raw.startswith("@"):
        parts = raw.split("/", 2)
        if len(parts) < 2 or len(parts[0]) < 2 or not parts[1]:
            raise InvalidSpecifierError("scoped package name must be '@scope/name'", specifier=raw)
        package_name = f"{parts[0]}/{parts[1]}"
        rest = parts[2] if len(parts) == 3 else None
    else:
        package_name, slash, rest_text = raw.partition("/")
        rest = rest_text if slash else None

    if not package_name:
        raise InvalidSpecifierError("package name is empty", specifier=raw)
    if package_name.startswith("."):
        raise InvalidSpecifierError(f"package name '{package_name}' may not start with '.'", specifier=raw)
    if "\\" in package_name or "%" in package_name:
        raise InvalidSpecifierError(f"package name '{package_name}' contains '\\' or '%'", specifier=raw)
    if config.alias_sigil in package_name:
        raise InvalidSpecifierError(
            f"alias sigil '{config.alias_sigil}' is only valid at the start of an alias", specifier=raw
        )

    subpath = "." if rest is None else f"./{rest}"
    _check_subpath(subpath, raw)
    return package_name, subpath


def _check_subpath(subpath: str, raw: str) -> None:
    if "\\" in subpath or _ENCODED_SEPARATOR_RE.search(subpath):
        raise InvalidSpecifierError("subpath contains a backslash or an encoded separator", specifier=raw)
