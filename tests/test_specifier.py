"""Tests for specifier classification."""

import pytest

from exportmap.config import ResolverConfig
from exportmap.errors import InvalidSpecifierError
from exportmap.specifier import SpecifierKind
from exportmap.specifier import classify
from exportmap.specifier import split_bare


class TestClassify:
    """Each specifier lands in exactly one shape."""

    @pytest.mark.parametrize("raw", ["./x.js", "../lib/x.js", "/abs/x.js"])
    def test_relative(self, raw):
        spec = classify(raw)
        assert spec.kind is SpecifierKind.RELATIVE
        assert spec.package_name is None

    @pytest.mark.parametrize("raw", ["file:///tmp/x.js", "node:fs", "data:text/javascript,export{}"])
    def test_absolute_url(self, raw):
        assert classify(raw).kind is SpecifierKind.ABSOLUTE_URL

    def test_unknown_scheme_is_invalid(self):
        with pytest.raises(InvalidSpecifierError, match="unsupported URL scheme"):
            classify("https://example.com/x.js")

    def test_extra_scheme_from_config(self):
        config = ResolverConfig(url_schemes=("file", "HTTPS"))
        assert classify("https://example.com/x.js", config).kind is SpecifierKind.ABSOLUTE_URL

    def test_bare_package(self):
        spec = classify("lodash")
        assert spec.kind is SpecifierKind.BARE
        assert spec.package_name == "lodash"
        assert spec.subpath == "."
        assert not spec.alias

    def test_bare_with_subpath(self):
        spec = classify("pkg/timezones/utc")
        assert spec.package_name == "pkg"
        assert spec.subpath == "./timezones/utc"

    def test_alias(self):
        spec = classify("#internal/db")
        assert spec.alias
        assert spec.package_name is None
        assert spec.subpath == "#internal/db"

    def test_alias_with_custom_sigil(self):
        spec = classify("~db", ResolverConfig(alias_sigil="~"))
        assert spec.alias

    def test_alias_rejected_when_not_allowed(self):
        with pytest.raises(InvalidSpecifierError, match="not allowed"):
            classify("#db", allow_alias=False)

    @pytest.mark.parametrize("raw", ["", "#", "#/x"])
    def test_empty_forms_are_invalid(self, raw):
        with pytest.raises(InvalidSpecifierError):
            classify(raw)

    def test_error_carries_specifier(self):
        with pytest.raises(InvalidSpecifierError) as exc_info:
            classify("pkg\\evil")
        assert exc_info.value.specifier == "pkg\\evil"


class TestSplitBare:
    """Package name and subpath extraction."""

    def test_scoped_package(self):
        assert split_bare("@babel/core") == ("@babel/core", ".")

    def test_scoped_package_with_subpath(self):
        assert split_bare("@babel/core/lib/index.js") == ("@babel/core", "./lib/index.js")

    def test_trailing_slash_kept_in_subpath(self):
        assert split_bare("pkg/") == ("pkg", "./")
        assert split_bare("pkg/timezones/") == ("pkg", "./timezones/")

    @pytest.mark.parametrize("raw", ["@scope", "@/name", "@scope/"])
    def test_incomplete_scope(self, raw):
        with pytest.raises(InvalidSpecifierError, match="scoped package name"):
            split_bare(raw)

    @pytest.mark.parametrize("raw", [".hidden", "pk%20g", "p\\kg"])
    def test_bad_package_names(self, raw):
        with pytest.raises(InvalidSpecifierError):
            split_bare(raw)

    def test_sigil_inside_name(self):
        with pytest.raises(InvalidSpecifierError, match="alias sigil"):
            split_bare("pkg#x")

    @pytest.mark.parametrize("raw", ["pkg/a%2fb", "pkg/a%5Cb", "pkg/a\\b"])
    def test_encoded_separators_in_subpath(self, raw):
        with pytest.raises(InvalidSpecifierError, match="separator"):
            split_bare(raw)
