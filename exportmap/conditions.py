"""Condition sets and conditional target evaluation.

``ConditionEvaluator`` reduces a ``MappingTarget`` to one validated string:

- string: validated and returned
- ``false``/``null``: a deliberate "no mapping", never skipped
- conditional object: entries whose condition is active (``default`` always is)
  are tried in order; a failing branch moves on to the next active entry
- fallback array: elements are tried in order; the first valid one wins and
  the last failure is reported if none is
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable
from dataclasses import dataclass

from .config import ConditionOrder
from .errors import NoConditionMatchError
from .errors import NoMappingError
from .errors import ResolutionError
from .errors import TargetValidationError
from .mapping import ConditionalTarget
from .mapping import FallbackArray
from .mapping import MappingTarget
from .mapping import NullTarget
from .mapping import StringTarget
from .mapping import format_target
from .validation import ValidatedTarget

logger = logging.getLogger(__name__)

DEFAULT_CONDITION = "default"

# Failures that let evaluation continue with the next alternative
_RECOVERABLE = (TargetValidationError, NoConditionMatchError)


@dataclass(frozen=True)
class ConditionSet:
    """Ordered, duplicate-free set of active condition names.

    ``default`` is implicitly active and always ranks last.
    """

    names: tuple[str, ...] = ()

    @classmethod
    def of(cls, names: Iterable[str]) -> ConditionSet:
        seen: dict[str, None] = {}
        for name in names:
            if name and name != DEFAULT_CONDITION:
                seen.setdefault(name, None)
        return cls(tuple(seen))

    def __contains__(self, name: object) -> bool:
        return name == DEFAULT_CONDITION or name in self.names

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def with_conditions(self, *names: str) -> ConditionSet:
        """Append caller-defined conditions after the existing ones."""
        return ConditionSet.of((*self.names, *names))

    def insert(self, index: int, name: str) -> ConditionSet:
        """Place ``name`` at an explicit precedence position."""
        names = [n for n in self.names if n != name]
        names.insert(index, name)
        return ConditionSet.of(names)


class ConditionEvaluator:
    """Walks a target tree for one matched table entry.

    Args:
        conditions: Active conditions
        validate: Validates a string target (key and remainder already bound)
        order: 'declared' tries conditional entries in the object's order;
            'priority' tries them in the condition set's order
    """

    def __init__(
        self,
        conditions: ConditionSet,
        validate: Callable[[str], ValidatedTarget],
        order: ConditionOrder = "declared",
    ):
        self.conditions = conditions
        self.validate = validate
        self.order = order

    def evaluate(self, target: MappingTarget) -> ValidatedTarget:
        if isinstance(target, StringTarget):
            return self.validate(target.path)
        if isinstance(target, NullTarget):
            raise NoMappingError("mapping is explicitly disabled", explicit=True, target=False)
        if isinstance(target, ConditionalTarget):
            return self._evaluate_conditional(target)
        if isinstance(target, FallbackArray):
            return self._evaluate_fallback(target)
        raise TypeError(f"unknown mapping target {target!r}")

    def _evaluate_conditional(self, target: ConditionalTarget) -> ValidatedTarget:
        last_error: ResolutionError | None = None
        for condition, value in self._active_entries(target):
            try:
                result = self.evaluate(value)
            except _RECOVERABLE as e:
                logger.debug(
                    f"[conditions] '{condition}' branch failed, trying next: {e}",
                    extra={"event": "conditions.skip", "condition": condition, "reason": e.kind.value},
                )
                last_error = e
                continue
            logger.debug(f"[conditions] matched '{condition}'")
            return result

        active = ", ".join(self.conditions.names) or "(none)"
        raise NoConditionMatchError(
            f"no branch matched active conditions [{active}]", target=format_target(target)
        ) from last_error

    def _evaluate_fallback(self, target: FallbackArray) -> ValidatedTarget:
        if not target.items:
            raise NoMappingError("fallback array is empty", target="[]")

        last_error: ResolutionError | None = None
        for index, item in enumerate(target.items):
            try:
                return self.evaluate(item)
            except _RECOVERABLE as e:
                logger.debug(
                    f"[conditions] fallback element {index} rejected: {e}",
                    extra={"event": "conditions.skip", "element": index, "reason": e.kind.value},
                )
                last_error = e

        assert last_error is not None
        raise last_error

    def _active_entries(self, target: ConditionalTarget) -> list[tuple[str, MappingTarget]]:
        if self.order == "declared":
            return [(condition, value) for condition, value in target.entries if condition in self.conditions]

        by_name: dict[str, MappingTarget] = {}
        for condition, value in target.entries:
            by_name.setdefault(condition, value)
        ordered = [(name, by_name[name]) for name in self.conditions.names if name in by_name]
        if DEFAULT_CONDITION in by_name:
            ordered.append((DEFAULT_CONDITION, by_name[DEFAULT_CONDITION]))
        return ordered
