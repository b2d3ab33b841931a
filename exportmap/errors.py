"""Resolution error kinds.

Every failure the resolver can produce is a ``ResolutionError`` subclass carrying
the original specifier, the package boundary it was resolved against (if any),
and the mapping key/target that failed. All of them are terminal: the resolver
only recovers from ``TargetValidationError`` and ``NoConditionMatchError`` inside
fallback arrays and conditional objects.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    from .boundary import PackageBoundary


class ErrorKind(str, Enum):
    """Kinds of resolution failure."""

    INVALID_SPECIFIER = "InvalidSpecifier"
    PACKAGE_NOT_FOUND = "PackageNotFound"
    NO_PACKAGE_BOUNDARY = "NoPackageBoundary"
    MALFORMED_MAPPING = "MalformedMapping"
    NO_MAPPING = "NoMapping"
    AMBIGUOUS_MAPPING = "AmbiguousMapping"
    NO_CONDITION_MATCH = "NoConditionMatch"
    INVALID_TARGET = "InvalidTarget"
    PATH_TRAVERSAL = "PathTraversal"
    ENCAPSULATION_VIOLATION = "EncapsulationViolation"


class ResolutionError(Exception):
    """Base class for all resolution failures."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        specifier: str | None = None,
        boundary: PackageBoundary | None = None,
        key: str | None = None,
        target: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.specifier = specifier
        self.boundary = boundary
        self.key = key
        self.target = target

    def attach(
        self,
        *,
        boundary: PackageBoundary | None = None,
        key: str | None = None,
    ) -> ResolutionError:
        """Fill in context that was unknown where the error was raised.

        Existing values win, so the innermost context is preserved.
        """
        if self.boundary is None:
            self.boundary = boundary
        if self.key is None:
            self.key = key
        return self

    def __str__(self) -> str:
        parts = [f"{self.kind.value}: {self.message}"]
        if self.specifier is not None:
            parts.append(f"specifier={self.specifier!r}")
        if self.boundary is not None:
            parts.append(f"package={self.boundary.root}")
        if self.key is not None:
            parts.append(f"key={self.key!r}")
        if self.target is not None:
            parts.append(f"target={self.target!r}")
        return " ".join(parts)


class InvalidSpecifierError(ResolutionError):
    kind = ErrorKind.INVALID_SPECIFIER


class PackageNotFoundError(ResolutionError):
    kind = ErrorKind.PACKAGE_NOT_FOUND


class NoPackageBoundaryError(ResolutionError):
    kind = ErrorKind.NO_PACKAGE_BOUNDARY


class MalformedMappingError(ResolutionError):
    kind = ErrorKind.MALFORMED_MAPPING


class NoMappingError(ResolutionError):
    """No mapping exists for the requested subpath.

    ``explicit`` is set when the mapping deliberately says so (a ``false``
    target) rather than simply lacking an entry.
    """

    kind = ErrorKind.NO_MAPPING

    def __init__(self, message: str, *, explicit: bool = False, **context: Any):
        super().__init__(message, **context)
        self.explicit = explicit


class AmbiguousMappingError(ResolutionError):
    kind = ErrorKind.AMBIGUOUS_MAPPING


class NoConditionMatchError(ResolutionError):
    kind = ErrorKind.NO_CONDITION_MATCH


class TargetValidationError(ResolutionError):
    """A candidate target was structurally rejected.

    Inside a fallback array or conditional object this moves evaluation on to
    the next alternative, as does ``NoConditionMatchError``.
    """


class InvalidTargetError(TargetValidationError):
    kind = ErrorKind.INVALID_TARGET


class PathTraversalError(TargetValidationError):
    kind = ErrorKind.PATH_TRAVERSAL


class EncapsulationViolationError(TargetValidationError):
    kind = ErrorKind.ENCAPSULATION_VIOLATION
