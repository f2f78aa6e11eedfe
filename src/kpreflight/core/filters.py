"""
Record Filter: decides which nodes a rule aggregates over.

A FilterSpec holds optional clauses. All declared clauses must hold (AND):

    selector.matchLabel   every key present on the node with the exact value
    <property>: "<qty>"   node property present and >= qty (inclusive)

The two clause kinds fail differently. A node that misses a threshold is
simply excluded. A node that misses a label raises FilterError, which aborts
the filtering pass for every node.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from kpreflight.constants import NODE_PROPERTIES
from kpreflight.core.errors import FilterError, QuantityParseError
from kpreflight.core.quantity import Quantity
from kpreflight.core.records import ClusterNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSpec:
    """
    Filter clauses for a node-resources rule.

    Attributes:
        match_labels: Label key/value pairs every node must carry.
        thresholds: Property name -> minimum-inclusive quantity string.
    """
    match_labels: Dict[str, str] = field(default_factory=dict)
    thresholds: Dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.match_labels and not any(self.thresholds.values())


def node_matches_filters(node: ClusterNode, filters: Optional[FilterSpec]) -> bool:
    """
    Check a single node against the filter clauses.

    Args:
        node: The node to check.
        filters: Filter clauses, or None for no filtering.

    Returns:
        True if every declared clause holds.

    Raises:
        FilterError: If a label clause does not hold.
        QuantityParseError: If a threshold clause is not a valid quantity.
    """
    if filters is None or filters.is_empty:
        return True

    for key, expected in filters.match_labels.items():
        if node.labels.get(key) != expected:
            raise FilterError(f"failed to match label {key}")

    for prop in NODE_PROPERTIES:
        bound_text = filters.thresholds.get(prop)
        if not bound_text:
            continue

        try:
            bound = Quantity.parse(bound_text)
        except QuantityParseError as e:
            raise QuantityParseError(f"failed to parse {prop} filter: {e}") from e

        actual = node.quantity(prop)
        if actual is None or actual.cmp(bound) == -1:
            return False

    return True


def partition_nodes(
    nodes: Iterable[ClusterNode],
    filters: Optional[FilterSpec],
) -> Tuple[List[ClusterNode], List[ClusterNode]]:
    """
    Split nodes into (matching, non_matching), preserving order.

    Raises:
        FilterError: From the first node that misses a label clause.
        QuantityParseError: If a threshold clause is malformed.
    """
    matching: List[ClusterNode] = []
    non_matching: List[ClusterNode] = []

    for node in nodes:
        try:
            is_match = node_matches_filters(node, filters)
        except FilterError as e:
            raise FilterError(f"failed to check if node matches filter: {e}") from e

        if is_match:
            matching.append(node)
        else:
            non_matching.append(node)

    logger.debug(f"Filtered nodes: {len(matching)} matching, {len(non_matching)} excluded")
    return matching, non_matching
