"""exportmap - package specifier resolution.

Turns import specifiers into module URLs by applying the ``exports``,
``imports`` and entrypoint mappings declared in package.json files.
"""

from .boundary import BoundaryLocator
from .boundary import PackageBoundary
from .conditions import ConditionSet
from .config import ResolverConfig
from .errors import AmbiguousMappingError
from .errors import EncapsulationViolationError
from .errors import ErrorKind
from .errors import InvalidSpecifierError
from .errors import InvalidTargetError
from .errors import MalformedMappingError
from .errors import NoConditionMatchError
from .errors import NoMappingError
from .errors import NoPackageBoundaryError
from .errors import PackageNotFoundError
from .errors import PathTraversalError
from .errors import ResolutionError
from .metadata import FilesystemMetadataLoader
from .metadata import InMemoryMetadataLoader
from .metadata import MetadataLoader
from .metadata import PackageMetadata
from .resolver import ResolutionResult
from .resolver import ResolvedModule
from .resolver import Resolver
from .resolver import resolve
from .specifier import Specifier
from .specifier import SpecifierKind
from .specifier import classify

__all__ = [
    "AmbiguousMappingError",
    "BoundaryLocator",
    "ConditionSet",
    "EncapsulationViolationError",
    "ErrorKind",
    "FilesystemMetadataLoader",
    "InMemoryMetadataLoader",
    "InvalidSpecifierError",
    "InvalidTargetError",
    "MalformedMappingError",
    "MetadataLoader",
    "NoConditionMatchError",
    "NoMappingError",
    "NoPackageBoundaryError",
    "PackageBoundary",
    "PackageMetadata",
    "PackageNotFoundError",
    "PathTraversalError",
    "ResolutionError",
    "ResolutionResult",
    "ResolvedModule",
    "Resolver",
    "ResolverConfig",
    "Specifier",
    "SpecifierKind",
    "classify",
    "resolve",
]
