"""Tests for ordering rules and OrderingRuleCollection precedence.

Covers:
- MatchAllOrderingRule is always strict
- Predicate- and path-based rules, inverted and not
- The most recently registered deciding rule wins
- No deciding rule means order is not strict
"""

from __future__ import annotations

from equivalency.graph.members import Member
from equivalency.graph.nodes import Comparands, Node, ObjectInfo
from equivalency.graph.paths import MemberPath
from equivalency.protocols import OrderingRule, OrderStrictness
from equivalency.rules.ordering import (
    MatchAllOrderingRule,
    OrderingRuleCollection,
    PathBasedOrderingRule,
    PredicateBasedOrderingRule,
)


def _info(path: str = "") -> ObjectInfo:
    node = Node.root()
    for name in filter(None, path.split(".")):
        member = Member(name=name)
        node = node.child_member(member, member, None)
    return ObjectInfo.of(node, Comparands([1], [1]))


class TestRules:
    """Individual rule decisions."""

    def test_match_all(self) -> None:
        assert MatchAllOrderingRule().evaluate(_info()) == OrderStrictness.STRICT

    def test_predicate(self) -> None:
        rule = PredicateBasedOrderingRule(lambda info: info.path == "Lines")
        assert rule.evaluate(_info("Lines")) == OrderStrictness.STRICT
        assert rule.evaluate(_info("Tags")) == OrderStrictness.IRRELEVANT

    def test_inverted_predicate(self) -> None:
        rule = PredicateBasedOrderingRule(lambda info: True, invert=True)
        assert rule.evaluate(_info()) == OrderStrictness.NOT_STRICT

    def test_path(self) -> None:
        rule = PathBasedOrderingRule(MemberPath.parse("Order.Lines"))
        assert rule.evaluate(_info("Order.Lines")) == OrderStrictness.STRICT
        assert rule.evaluate(_info("Lines")) == OrderStrictness.IRRELEVANT

    def test_rules_satisfy_protocol(self) -> None:
        assert isinstance(MatchAllOrderingRule(), OrderingRule)
        assert isinstance(PathBasedOrderingRule(MemberPath.parse("A")), OrderingRule)


class TestCollection:
    """OrderingRuleCollection.is_order_strict()."""

    def test_empty_is_not_strict(self) -> None:
        assert not OrderingRuleCollection().is_order_strict(_info())

    def test_last_deciding_rule_wins(self) -> None:
        rules = OrderingRuleCollection(
            [
                MatchAllOrderingRule(),
                PathBasedOrderingRule(MemberPath.parse("Tags"), invert=True),
            ]
        )
        assert not rules.is_order_strict(_info("Tags"))
        assert rules.is_order_strict(_info("Lines"))

    def test_strict_again_after_exclusion(self) -> None:
        rules = (
            OrderingRuleCollection()
            .add(MatchAllOrderingRule())
            .add(PathBasedOrderingRule(MemberPath.parse("Tags"), invert=True))
            .add(PathBasedOrderingRule(MemberPath.parse("Tags")))
        )
        assert rules.is_order_strict(_info("Tags"))
        assert len(rules) == 3

    def test_add_returns_new_collection(self) -> None:
        original = OrderingRuleCollection()
        extended = original.add(MatchAllOrderingRule())
        assert len(original) == 0
        assert len(extended) == 1
