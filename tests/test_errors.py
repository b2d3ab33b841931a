"""Tests for resolution error kinds."""

from pathlib import Path

from exportmap.boundary import PackageBoundary
from exportmap.errors import EncapsulationViolationError
from exportmap.errors import ErrorKind
from exportmap.errors import InvalidTargetError
from exportmap.errors import NoMappingError
from exportmap.errors import PathTraversalError
from exportmap.errors import ResolutionError
from exportmap.errors import TargetValidationError
from exportmap.metadata import PackageMetadata


def test_every_kind_has_a_class():
    kinds = set()
    pending = list(ResolutionError.__subclasses__())
    while pending:
        cls = pending.pop()
        pending.extend(cls.__subclasses__())
        if "kind" in cls.__dict__:
            kinds.add(cls.kind)
    assert kinds == set(ErrorKind)


def test_target_validation_family():
    for cls in (InvalidTargetError, PathTraversalError, EncapsulationViolationError):
        assert issubclass(cls, TargetValidationError)
    assert not issubclass(NoMappingError, TargetValidationError)


def test_str_includes_context():
    boundary = PackageBoundary(root=Path("/proj/node_modules/pkg"), metadata=PackageMetadata(name="pkg"))
    error = NoMappingError("no mapping for './x'", specifier="pkg/x", boundary=boundary, key="./x")
    text = str(error)
    assert text.startswith("NoMapping: no mapping for './x'")
    assert "specifier='pkg/x'" in text
    assert "package=/proj/node_modules/pkg" in text
    assert "key='./x'" in text


def test_attach_keeps_innermost_context():
    inner = PackageBoundary(root=Path("/inner"), metadata=PackageMetadata())
    outer = PackageBoundary(root=Path("/outer"), metadata=PackageMetadata())
    error = PathTraversalError("escape", key="./a")
    assert error.attach(boundary=inner, key="./b") is error
    error.attach(boundary=outer)
    assert error.boundary is inner
    assert error.key == "./a"


def test_no_mapping_explicit_flag():
    assert NoMappingError("gone", explicit=True).explicit
    assert not NoMappingError("missing").explicit
