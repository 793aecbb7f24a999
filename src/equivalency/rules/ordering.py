"""Ordering rules: whether element order matters for a collection.

Rules are kept in registration order.  ``OrderingRuleCollection`` asks them
from the most recently registered to the oldest and the first one that does
not answer IRRELEVANT decides, so strict ordering can be switched on, off
and on again for the same collection.  With no deciding rule, order does not
matter.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from equivalency.graph.nodes import ObjectInfo
from equivalency.graph.paths import MemberPath
from equivalency.protocols import OrderingRule, OrderStrictness

__all__ = [
    "MatchAllOrderingRule",
    "OrderingRuleCollection",
    "PathBasedOrderingRule",
    "PredicateBasedOrderingRule",
]


class MatchAllOrderingRule:
    """Strict ordering for every collection."""

    def evaluate(self, info: ObjectInfo) -> OrderStrictness:
        return OrderStrictness.STRICT

    def __str__(self) -> str:
        return "Be strict about the order of items in all collections"


class PredicateBasedOrderingRule:
    """Strict (or, inverted, not strict) ordering for collections matching a predicate."""

    def __init__(self, predicate: Callable[[ObjectInfo], bool], invert: bool = False) -> None:
        self._predicate = predicate
        self._invert = invert

    def evaluate(self, info: ObjectInfo) -> OrderStrictness:
        if self._predicate(info):
            return OrderStrictness.NOT_STRICT if self._invert else OrderStrictness.STRICT
        return OrderStrictness.IRRELEVANT

    def __str__(self) -> str:
        verb = "Do not be" if self._invert else "Be"
        return f"{verb} strict about the order of collections matching a predicate"


class PathBasedOrderingRule:
    """Strict (or, inverted, not strict) ordering for the collection at ``path``."""

    def __init__(self, path: MemberPath, invert: bool = False) -> None:
        self._path = path
        self._invert = invert

    def evaluate(self, info: ObjectInfo) -> OrderStrictness:
        if self._path.is_same_as(info.member_path):
            return OrderStrictness.NOT_STRICT if self._invert else OrderStrictness.STRICT
        return OrderStrictness.IRRELEVANT

    def __str__(self) -> str:
        verb = "Do not be" if self._invert else "Be"
        return f"{verb} strict about the order of collection {self._path}"


class OrderingRuleCollection:
    """Immutable, ordered set of ordering rules."""

    def __init__(self, rules: Iterable[OrderingRule] = ()) -> None:
        self._rules: tuple[OrderingRule, ...] = tuple(rules)

    def add(self, rule: OrderingRule) -> OrderingRuleCollection:
        return OrderingRuleCollection((*self._rules, rule))

    def is_order_strict(self, info: ObjectInfo) -> bool:
        for rule in reversed(self._rules):
            strictness = rule.evaluate(info)
            if strictness != OrderStrictness.IRRELEVANT:
                return strictness == OrderStrictness.STRICT
        return False

    def __iter__(self) -> Iterator[OrderingRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
