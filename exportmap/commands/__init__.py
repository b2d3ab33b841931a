"""CLI command groups for exportmap."""

__all__ = [
    "config",
    "inspect",
    "resolve",
]
