"""Resolver configuration.

Process-wide policy (dependency directory name, alias sigil, condition defaults
and ordering) lives in one immutable value that is passed into the resolver.
"""

from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

ConditionOrder = Literal["declared", "priority"]


class ResolverConfig(BaseModel):
    """Configuration for a ``Resolver`` instance."""

    model_config = ConfigDict(frozen=True)

    dependency_dir: str = Field(
        default="node_modules", description="Directory name holding installed dependencies"
    )
    alias_sigil: str = Field(default="#", description="Leading character of package-internal import aliases")
    metadata_filename: str = Field(default="package.json", description="Package metadata file name")
    default_conditions: tuple[str, ...] = Field(
        default=("node", "import"), description="Conditions used when the caller supplies none"
    )
    condition_order: ConditionOrder = Field(
        default="declared",
        description="'declared': conditional object order wins; 'priority': condition set order wins",
    )
    allow_default_subpath: bool = Field(
        default=False, description="Let 'pkg/default' address the package entrypoint when unmapped"
    )
    self_reference: bool = Field(
        default=True, description="Resolve a package's own name through its own exports"
    )
    url_schemes: tuple[str, ...] = Field(
        default=("file", "data", "node"), description="Schemes accepted for absolute URL specifiers"
    )

    @field_validator("dependency_dir", "metadata_filename")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"must be a single path segment, got {value!r}")
        return value

    @field_validator("alias_sigil")
    @classmethod
    def _one_character(cls, value: str) -> str:
        if len(value) != 1 or value in "./@\\":
            raise ValueError(f"must be one character other than '.', '/', '@' or '\\', got {value!r}")
        return value

    @field_validator("default_conditions")
    @classmethod
    def _non_empty_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            if not name:
                raise ValueError("condition names must be non-empty")
        return value

    @field_validator("url_schemes")
    @classmethod
    def _lowercase_schemes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(scheme.lower().rstrip(":") for scheme in value)


DEFAULT_CONFIG = ResolverConfig()
