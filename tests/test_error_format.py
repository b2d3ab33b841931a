"""Tests for error display helpers."""

from io import StringIO
from pathlib import Path

from rich.console import Console

from exportmap.boundary import PackageBoundary
from exportmap.errors import InvalidTargetError
from exportmap.errors import NoConditionMatchError
from exportmap.errors import PackageNotFoundError
from exportmap.metadata import PackageMetadata
from exportmap.utils.error_format import describe_resolution_error
from exportmap.utils.error_format import escape_markup
from exportmap.utils.error_format import format_error_message


class TestFormatErrorMessage:
    def test_plain_exception(self):
        assert format_error_message(ValueError("invalid input")) == "ValueError: invalid input"
        assert format_error_message(ValueError("invalid input"), include_type=False) == "invalid input"

    def test_empty_message_uses_friendly_text(self):
        assert format_error_message(PermissionError()) == "PermissionError: Permission denied."
        assert format_error_message(RuntimeError()) == "RuntimeError: (no additional details)"

    def test_resolution_error_leads_with_kind(self):
        error = PackageNotFoundError("package 'x' is not installed", specifier="x")
        assert format_error_message(error) == "PackageNotFound: package 'x' is not installed specifier='x'"


class TestDescribeResolutionError:
    def render(self, lines):
        buf = StringIO()
        console = Console(file=buf, force_terminal=False, no_color=True, width=200)
        for line in lines:
            console.print(line)
        return buf.getvalue()

    def test_context_lines(self):
        boundary = PackageBoundary(root=Path("/proj/node_modules/pkg"), metadata=PackageMetadata(name="pkg"))
        error = InvalidTargetError(
            "target 'x' must start with './'", specifier="pkg[x]", boundary=boundary, key="./[x]", target="x"
        )
        output = self.render(describe_resolution_error(error))
        assert "InvalidTarget: target 'x' must start with './'" in output
        assert "specifier: pkg[x]" in output
        assert "pkg at /proj/node_modules/pkg" in output
        assert "key:       ./[x]" in output

    def test_cause_line(self):
        try:
            try:
                raise InvalidTargetError("bad target", target="lib.js")
            except InvalidTargetError as cause:
                raise NoConditionMatchError("no branch matched") from cause
        except NoConditionMatchError as e:
            error = e
        output = self.render(describe_resolution_error(error))
        assert "cause:" in output
        assert "InvalidTarget: bad target" in output

    def test_minimal_error(self):
        lines = describe_resolution_error(PackageNotFoundError("missing"))
        assert len(lines) == 1


def test_escape_markup_keeps_brackets():
    buf = StringIO()
    console = Console(file=buf, force_terminal=False, no_color=True)
    console.print(f"[red]Error:[/red] {escape_markup('[/proj/node_modules]')}")
    assert "[/proj/node_modules]" in buf.getvalue()
