"""Rule definition schemas."""

from kpreflight.schemas.rule_spec import (
    NodeResourcesRule,
    parse_filters,
    parse_outcomes,
    parse_rule,
    parse_rules,
)

__all__ = [
    "NodeResourcesRule",
    "parse_filters",
    "parse_outcomes",
    "parse_rule",
    "parse_rules",
]
