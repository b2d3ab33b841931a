"""Tests for condition sets and target evaluation."""

from functools import partial

import pytest

from exportmap.conditions import ConditionEvaluator
from exportmap.conditions import ConditionSet
from exportmap.errors import InvalidTargetError
from exportmap.errors import NoConditionMatchError
from exportmap.errors import NoMappingError
from exportmap.errors import PathTraversalError
from exportmap.mapping import MappingField
from exportmap.mapping import build_mapping_table
from exportmap.validation import validate_target


def evaluate(raw, conditions=(), *, key=".", remainder=None, order="declared"):
    """Evaluate the target of a single-entry exports table."""
    table = build_mapping_table({key: raw}, MappingField.EXPORTS)
    validate = partial(validate_target, key=key, remainder=remainder)
    evaluator = ConditionEvaluator(ConditionSet.of(conditions), validate, order=order)
    return evaluator.evaluate(table.entries[0][1]).value


class TestConditionSet:
    def test_default_is_always_active(self):
        conditions = ConditionSet.of([])
        assert "default" in conditions
        assert "node" not in conditions

    def test_deduplicates_and_keeps_order(self):
        conditions = ConditionSet.of(["node", "import", "node", "default"])
        assert list(conditions) == ["node", "import"]
        assert len(conditions) == 2

    def test_with_conditions_appends(self):
        conditions = ConditionSet.of(["node"]).with_conditions("development", "node")
        assert conditions.names == ("node", "development")

    def test_insert_sets_precedence(self):
        conditions = ConditionSet.of(["node", "import"]).insert(0, "import")
        assert conditions.names == ("import", "node")


class TestEvaluate:
    def test_string(self):
        assert evaluate("./index.js") == "./index.js"

    def test_declared_order_wins(self):
        raw = {"import": "./a.mjs", "node": "./a.js", "default": "./a.cjs"}
        assert evaluate(raw, ["node", "import"]) == "./a.mjs"

    def test_priority_order_wins(self):
        raw = {"import": "./a.mjs", "node": "./a.js", "default": "./a.cjs"}
        assert evaluate(raw, ["node", "import"], order="priority") == "./a.js"

    def test_priority_order_keeps_default_last(self):
        raw = {"default": "./a.cjs", "import": "./a.mjs"}
        assert evaluate(raw, ["import"], order="priority") == "./a.mjs"
        assert evaluate(raw, ["import"]) == "./a.cjs"

    def test_default_condition(self):
        assert evaluate({"browser": "./b.js", "default": "./d.js"}, ["node"]) == "./d.js"

    def test_no_active_condition(self):
        with pytest.raises(NoConditionMatchError, match=r"\[node\]"):
            evaluate({"browser": "./b.js"}, ["node"])

    def test_failing_branch_moves_to_next(self):
        raw = {"node": "bad.js", "default": "./good.js"}
        assert evaluate(raw, ["node"]) == "./good.js"

    def test_all_branches_fail_chains_last_cause(self):
        with pytest.raises(NoConditionMatchError) as exc_info:
            evaluate({"node": "bad.js", "default": "./../escape.js"}, ["node"])
        assert isinstance(exc_info.value.__cause__, PathTraversalError)

    def test_nested_conditions(self):
        raw = {"node": {"import": "./node.mjs", "require": "./node.cjs"}, "default": "./browser.js"}
        assert evaluate(raw, ["node", "require"]) == "./node.cjs"
        assert evaluate(raw, ["node"]) == "./browser.js"

    def test_false_is_terminal(self):
        with pytest.raises(NoMappingError) as exc_info:
            evaluate(False)
        assert exc_info.value.explicit

    def test_false_branch_is_not_skipped(self):
        with pytest.raises(NoMappingError):
            evaluate({"node": None, "default": "./index.js"}, ["node"])


class TestFallbackArrays:
    def test_first_valid_element_wins(self):
        assert evaluate(["./a.js", "./b.js"]) == "./a.js"

    def test_invalid_element_is_skipped(self):
        assert evaluate(["not-relative.js", "./b.js"]) == "./b.js"

    def test_directory_fallback_continuation(self):
        raw = [{"require": "./features-cjs"}, "./features/"]
        assert evaluate(raw, ["require"], key="./features/", remainder="x.js") == "./features/x.js"

    def test_conditional_element_without_match_is_skipped(self):
        raw = [{"require": "./index.cjs"}, "./index.js"]
        assert evaluate(raw, ["require"]) == "./index.cjs"
        assert evaluate(raw, []) == "./index.js"

    def test_last_error_is_reported(self):
        with pytest.raises(PathTraversalError):
            evaluate(["bad.js", "./../escape.js"])

    def test_empty_array(self):
        with pytest.raises(NoMappingError, match="empty"):
            evaluate([])

    def test_false_element_stops_evaluation(self):
        with pytest.raises(NoMappingError):
            evaluate([False, "./index.js"])

    def test_first_invalid_only(self):
        with pytest.raises(InvalidTargetError):
            evaluate(["bad.js"])
