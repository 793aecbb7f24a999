"""rules subpackage: member selection, member matching and collection ordering.

Import from this module (not from sub-modules directly) to stay on the stable
public interface.
"""

from __future__ import annotations

from equivalency.rules.matching import (
    MappedMemberMatchingRule,
    MappedPathMatchingRule,
    MatchByNameRule,
)
from equivalency.rules.ordering import (
    MatchAllOrderingRule,
    OrderingRuleCollection,
    PathBasedOrderingRule,
    PredicateBasedOrderingRule,
)
from equivalency.rules.selection import (
    AllFieldsSelectionRule,
    AllPropertiesSelectionRule,
    ExcludeMemberByPathSelectionRule,
    ExcludeMemberByPredicateSelectionRule,
    ExcludeMembersNamedSelectionRule,
    ExcludeMembersOfTypeSelectionRule,
    ExcludeNonBrowsableMembersRule,
    IncludeMemberByPathSelectionRule,
    IncludeMemberByPredicateSelectionRule,
    MemberSelectionContext,
)

__all__ = [
    "AllFieldsSelectionRule",
    "AllPropertiesSelectionRule",
    "ExcludeMemberByPathSelectionRule",
    "ExcludeMemberByPredicateSelectionRule",
    "ExcludeMembersNamedSelectionRule",
    "ExcludeMembersOfTypeSelectionRule",
    "ExcludeNonBrowsableMembersRule",
    "IncludeMemberByPathSelectionRule",
    "IncludeMemberByPredicateSelectionRule",
    "MappedMemberMatchingRule",
    "MappedPathMatchingRule",
    "MatchAllOrderingRule",
    "MatchByNameRule",
    "MemberSelectionContext",
    "OrderingRuleCollection",
    "PathBasedOrderingRule",
    "PredicateBasedOrderingRule",
]
