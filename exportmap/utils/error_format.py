"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when their str()
representation is empty, and that dynamic text (paths, specifiers, targets)
never gets interpreted as Rich markup.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

from ..errors import ResolutionError

# Friendly messages for exception types known to have empty str()
FRIENDLY_MESSAGES: dict[type, str] = {
    FileNotFoundError: "File not found.",
    PermissionError: "Permission denied.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    if isinstance(e, ResolutionError):
        # The kind already leads the message
        return str(e)

    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def describe_resolution_error(e: ResolutionError) -> list[str]:
    """Rich-markup lines describing a resolution failure and its context."""
    lines = [f"[red]{e.kind.value}:[/red] {escape_markup(e.message)}"]
    if e.specifier is not None:
        lines.append(f"  [dim]specifier:[/dim] {escape_markup(e.specifier)}")
    if e.boundary is not None:
        name = e.boundary.name or "(unnamed)"
        lines.append(f"  [dim]package:[/dim]   {escape_markup(name)} at {escape_markup(e.boundary.root)}")
    if e.key is not None:
        lines.append(f"  [dim]key:[/dim]       {escape_markup(e.key)}")
    if e.target is not None:
        lines.append(f"  [dim]target:[/dim]    {escape_markup(e.target)}")
    cause = e.__cause__
    if isinstance(cause, ResolutionError):
        lines.append(f"  [dim]cause:[/dim]     {escape_markup(format_error_message(cause))}")
    return lines


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Args:
        value: Any value to escape (will be converted to str)

    Returns:
        String safe for interpolation into Rich markup f-strings
    """
    return _escape_markup(str(value))
