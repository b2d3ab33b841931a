"""Target validation.

Every candidate string target is checked before it is accepted:
- it starts with ``./`` (imports may also name a bare package)
- directory keys map to slash-terminated targets; exact keys never do
- it does not normalize to the package root or above it
- the remainder after a directory key contains no ``..`` segments
- no segment names the dependency directory
"""

from dataclasses import dataclass

from .config import DEFAULT_CONFIG
from .config import ResolverConfig
from .errors import EncapsulationViolationError
from .errors import InvalidSpecifierError
from .errors import InvalidTargetError
from .errors import PathTraversalError
from .specifier import SpecifierKind
from .specifier import classify


@dataclass(frozen=True)
class ValidatedTarget:
    """An accepted target.

    Attributes:
        value: Normalized ``./``-relative path, or a bare specifier when ``bare``
        bare: True for an imports target that names another package
    """

    value: str
    bare: bool = False


def validate_target(
    target: str,
    *,
    key: str,
    remainder: str | None = None,
    allow_bare: bool = False,
    config: ResolverConfig = DEFAULT_CONFIG,
) -> ValidatedTarget:
    """Validate a string target and apply the directory remainder.

    Args:
        target: String target from the mapping table
        key: Table key that produced it (for error context)
        remainder: Subpath text after a directory key, None for exact keys
        allow_bare: Accept bare package specifiers (imports targets)
        config: Resolver configuration

    Raises:
        InvalidTargetError: Wrong prefix or slash asymmetry
        PathTraversalError: Target or remainder escapes its base
        EncapsulationViolationError: Target reaches into a dependency directory
    """
    if remainder is not None and not target.endswith("/"):
        raise InvalidTargetError(
            f"directory key '{key}' maps to '{target}', which does not end with '/'", key=key, target=target
        )
    if remainder is None and target.endswith("/"):
        raise InvalidTargetError(f"'{target}' names a directory", key=key, target=target)

    if not target.startswith("./"):
        if allow_bare:
            return _validate_bare(target, key, remainder, config)
        raise InvalidTargetError(f"target '{target}' must start with './'", key=key, target=target)

    if remainder is not None:
        remainder_segments = remainder.split("/")
        if ".." in remainder_segments:
            raise PathTraversalError(
                f"subpath remainder '{remainder}' backtracks out of '{target}'", key=key, target=target
            )

    full = target + (remainder or "")
    segments = full[2:].split("/")

    normalized: list[str] = []
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if not normalized:
                raise PathTraversalError(f"'{full}' escapes the package root", key=key, target=target)
            normalized.pop()
            continue
        normalized.append(segment)
    if not normalized:
        raise PathTraversalError(f"'{full}' resolves to the package root itself", key=key, target=target)

    dependency_dir = config.dependency_dir.lower()
    if any(segment.lower() == dependency_dir for segment in segments):
        raise EncapsulationViolationError(
            f"'{full}' reaches into '{config.dependency_dir}'", key=key, target=target
        )

    return ValidatedTarget(value="./" + "/".join(normalized))


def _validate_bare(target: str, key: str, remainder: str | None, config: ResolverConfig) -> ValidatedTarget:
    candidate = target + (remainder or "")
    try:
        specifier = classify(candidate, config, allow_alias=False)
    except InvalidSpecifierError as e:
        raise InvalidTargetError(
            f"target '{target}' is not a valid package specifier: {e.message}", key=key, target=target
        ) from e
    if specifier.kind is not SpecifierKind.BARE:
        raise InvalidTargetError(
            f"target '{target}' must start with './' or name a package", key=key, target=target
        )
    return ValidatedTarget(value=candidate, bare=True)
