"""Aggregate functions over the matching node set."""

from enum import Enum
from typing import Optional, Sequence, Union

from kpreflight.core.errors import ConditionalEvaluationError
from kpreflight.core.quantity import Quantity
from kpreflight.core.records import ClusterNode


class AggregateFunction(Enum):
    """Functions a conditional may apply to the matching nodes."""
    COUNT = "count"
    MIN = "min"
    MAX = "max"
    SUM = "sum"


AggregateValue = Union[int, Quantity, None]


def find_sum(nodes: Sequence[ClusterNode], prop: str) -> Quantity:
    """
    Sum a property; nodes that do not report it contribute nothing.

    Raises:
        ConditionalEvaluationError: If the total is out of range.
    """
    total = Quantity.zero()
    for node in nodes:
        quantity = node.quantity(prop)
        if quantity is None:
            continue
        try:
            total = total + quantity
        except ArithmeticError as e:
            raise ConditionalEvaluationError(f"sum of {prop} is out of range at node {node.name}") from e
    return total


def find_min(nodes: Sequence[ClusterNode], prop: str) -> Optional[Quantity]:
    """Smallest reported value, or None if no node reports the property."""
    smallest: Optional[Quantity] = None
    for node in nodes:
        quantity = node.quantity(prop)
        if quantity is None:
            continue
        if smallest is None or quantity.cmp(smallest) == -1:
            smallest = quantity
    return smallest


def find_max(nodes: Sequence[ClusterNode], prop: str) -> Optional[Quantity]:
    """Largest reported value, or None if no node reports the property."""
    largest: Optional[Quantity] = None
    for node in nodes:
        quantity = node.quantity(prop)
        if quantity is None:
            continue
        if largest is None or quantity.cmp(largest) == 1:
            largest = quantity
    return largest


def evaluate_aggregate(
    function: AggregateFunction,
    prop: str,
    nodes: Sequence[ClusterNode],
) -> AggregateValue:
    """
    Apply an aggregate function to a node set.

    Args:
        function: The aggregate to compute.
        prop: Property name; ignored for COUNT.
        nodes: The matching node set.

    Returns:
        int for COUNT, Quantity for SUM, Quantity or None for MIN/MAX.
    """
    if function is AggregateFunction.COUNT:
        return len(nodes)
    if function is AggregateFunction.SUM:
        return find_sum(nodes, prop)
    if function is AggregateFunction.MIN:
        return find_min(nodes, prop)
    if function is AggregateFunction.MAX:
        return find_max(nodes, prop)
    raise ConditionalEvaluationError(f"Unknown aggregate function: {function}")
