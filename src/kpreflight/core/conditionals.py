"""
Conditional Grammar: Outcome `when` Expressions.

A conditional aggregates over the matching node set and compares the result
against a literal.

Grammar:
    conditional := function "(" property? ")" OPERATOR literal
                 | OPERATOR literal                     (same as count())
                 | ""                                   (always true)

    function := count | min | max | sum
    OPERATOR := = | == | === | < | > | <= | >=
    literal  := integer | quantity

Examples:
    "count() >= 3"
    "min(memoryCapacity) < 16Gi"
    "sum(cpuAllocatable) > 12"
    "< 5"

Values on both sides are tagged Operands. The coercion rules are:

    actual     desired    comparison
    ---------  ---------  ---------------------------------------------
    INTEGER    INTEGER    integers
    QUANTITY   TEXT       desired parsed as a quantity
    QUANTITY   INTEGER    desired stringified, then parsed as a quantity
    INTEGER    TEXT       ConditionalEvaluationError
    ABSENT     any        ConditionalEvaluationError

A count is never compared against a quantity, and min/max over nodes that
do not report the property has no value to compare.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Sequence, Union

from kpreflight.core.aggregates import AggregateFunction, evaluate_aggregate
from kpreflight.core.errors import (
    ConditionalEvaluationError,
    ConditionalParseError,
    QuantityParseError,
)
from kpreflight.core.quantity import Quantity
from kpreflight.core.records import ClusterNode

logger = logging.getLogger(__name__)


class Comparator(Enum):
    """Comparison operators for conditionals."""
    EQ = "=="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="

    @property
    def accepted(self) -> FrozenSet[int]:
        """Three-way comparison results for which the comparator holds."""
        return COMPARATOR_RESULTS[self]


COMPARATOR_RESULTS = {
    Comparator.EQ: frozenset({0}),
    Comparator.LT: frozenset({-1}),
    Comparator.GT: frozenset({1}),
    Comparator.LE: frozenset({0, -1}),
    Comparator.GE: frozenset({0, 1}),
}

OPERATOR_ALIASES = {
    "=": Comparator.EQ,
    "==": Comparator.EQ,
    "===": Comparator.EQ,
    "<": Comparator.LT,
    ">": Comparator.GT,
    "<=": Comparator.LE,
    ">=": Comparator.GE,
}


# =============================================================================
# OPERANDS
# =============================================================================

class OperandKind(Enum):
    INTEGER = "integer"
    QUANTITY = "quantity"
    TEXT = "text"
    ABSENT = "absent"


@dataclass(frozen=True)
class Operand:
    """A tagged comparison value."""
    kind: OperandKind
    value: Union[int, Quantity, str, None] = None

    @classmethod
    def integer(cls, value: int) -> "Operand":
        return cls(OperandKind.INTEGER, value)

    @classmethod
    def quantity(cls, value: Optional[Quantity]) -> "Operand":
        if value is None:
            return cls(OperandKind.ABSENT)
        return cls(OperandKind.QUANTITY, value)

    @classmethod
    def text(cls, value: str) -> "Operand":
        return cls(OperandKind.TEXT, value)

    def __str__(self) -> str:
        if self.kind is OperandKind.ABSENT:
            return "<no value>"
        return str(self.value)


INTEGER_LITERAL_PATTERN = re.compile(r"^[+-]?\d+$")


def resolve_literal(text: str) -> Operand:
    """Integer if the literal is a decimal integer, raw quantity text otherwise."""
    if INTEGER_LITERAL_PATTERN.match(text):
        return Operand.integer(int(text))
    return Operand.text(text)


def compare_operands(actual: Operand, desired: Operand) -> int:
    """
    Three-way compare an aggregate result against a literal.

    Returns:
        -1, 0 or 1.

    Raises:
        ConditionalEvaluationError: If the operands cannot be compared.
    """
    if actual.kind is OperandKind.INTEGER:
        if desired.kind is OperandKind.INTEGER:
            return (actual.value > desired.value) - (actual.value < desired.value)
        raise ConditionalEvaluationError(
            f"cannot compare count {actual} with non-integer value {desired}"
        )

    if actual.kind is OperandKind.ABSENT:
        raise ConditionalEvaluationError("no matching node reports the property")

    if actual.kind is not OperandKind.QUANTITY:
        raise ConditionalEvaluationError(f"cannot compare {actual.kind.value} value {actual}")

    if desired.kind is OperandKind.TEXT:
        bound_text = desired.value
    elif desired.kind is OperandKind.INTEGER:
        bound_text = str(desired.value)
    else:
        raise ConditionalEvaluationError(f"cannot compare quantity with {desired.kind.value} value")

    try:
        bound = Quantity.parse(bound_text)
    except QuantityParseError as e:
        raise ConditionalEvaluationError(f"invalid quantity {bound_text!r}: {e}") from e

    return actual.value.cmp(bound)


# =============================================================================
# PARSER
# =============================================================================

@dataclass(frozen=True)
class ParsedConditional:
    """A conditional split into its parts."""
    expression: str
    function: AggregateFunction
    prop: str
    comparator: Comparator
    literal: Operand


class ConditionalParser:
    """
    Parses conditional strings.

    Tokens are whitespace separated. Two tokens are the count shorthand;
    three tokens whose first token is not a function call are read as
    count() as well.
    """

    CALL_PATTERN = re.compile(r"(?P<function>.*)\((?P<property>.*)\)")

    def parse(self, expression: str) -> Optional[ParsedConditional]:
        """
        Parse a conditional.

        Args:
            expression: The conditional string.

        Returns:
            The parsed conditional, or None for the always-true empty string.

        Raises:
            ConditionalParseError: If the string does not match the grammar.
        """
        if expression == "":
            return None

        parts = expression.split()
        if len(parts) == 2:
            parts = ["count"] + parts
        if len(parts) != 3:
            raise ConditionalParseError(f"unable to parse nodeResources conditional {expression!r}")

        head, operator_text, literal_text = parts

        comparator = OPERATOR_ALIASES.get(operator_text)
        if comparator is None:
            raise ConditionalParseError(
                f"unexpected operator {operator_text!r} in nodeResources conditional {expression!r}"
            )

        match = self.CALL_PATTERN.search(head)
        if match is None:
            function_name, prop = "count", ""
        else:
            function_name, prop = match.group("function"), match.group("property")

        try:
            function = AggregateFunction(function_name)
        except ValueError as e:
            raise ConditionalParseError(
                f"unknown function {function_name!r} in nodeResources conditional {expression!r}"
            ) from e

        return ParsedConditional(
            expression=expression,
            function=function,
            prop=prop,
            comparator=comparator,
            literal=resolve_literal(literal_text),
        )


# =============================================================================
# EVALUATOR
# =============================================================================

class ConditionalEvaluator:
    """Evaluates a parsed conditional against the matching nodes."""

    def aggregate(self, parsed: ParsedConditional, nodes: Sequence[ClusterNode]) -> Operand:
        """Compute the left-hand side, tagged by the function that produced it."""
        value = evaluate_aggregate(parsed.function, parsed.prop, nodes)
        if parsed.function is AggregateFunction.COUNT:
            return Operand.integer(value)
        return Operand.quantity(value)

    def evaluate(
        self,
        parsed: ParsedConditional,
        matching_nodes: Sequence[ClusterNode],
        total_node_count: int,
    ) -> bool:
        """
        Evaluate a parsed conditional.

        Args:
            parsed: The parsed conditional.
            matching_nodes: Nodes that passed the filters; the only set the
                aggregate functions see.
            total_node_count: Size of the unfiltered inventory.

        Returns:
            True if the comparison holds.

        Raises:
            ConditionalEvaluationError: If the comparison cannot be made.
        """
        actual = self.aggregate(parsed, matching_nodes)
        try:
            result = compare_operands(actual, parsed.literal)
        except ConditionalEvaluationError as e:
            raise ConditionalEvaluationError(f"failed to evaluate {parsed.expression!r}: {e}") from e

        holds = result in parsed.comparator.accepted
        logger.debug(
            f"{parsed.expression!r}: {actual} vs {parsed.literal} "
            f"({len(matching_nodes)}/{total_node_count} nodes) -> {holds}"
        )
        return holds


# =============================================================================
# COMPILED CONDITIONAL
# =============================================================================

class CompiledConditional:
    """A conditional parsed once and ready for evaluation."""

    def __init__(
        self,
        expression: str,
        parser: Optional[ConditionalParser] = None,
        evaluator: Optional[ConditionalEvaluator] = None,
    ):
        """
        Raises:
            ConditionalParseError: If the expression is malformed.
        """
        self.expression = expression
        self._parser = parser or ConditionalParser()
        self._evaluator = evaluator or ConditionalEvaluator()
        self._parsed = self._parser.parse(expression)

    @property
    def always_true(self) -> bool:
        return self._parsed is None

    @property
    def parsed(self) -> Optional[ParsedConditional]:
        return self._parsed

    def evaluate(self, matching_nodes: Sequence[ClusterNode], total_node_count: int) -> bool:
        if self._parsed is None:
            return True
        return self._evaluator.evaluate(self._parsed, matching_nodes, total_node_count)


def compile_conditional(expression: str) -> CompiledConditional:
    """Parse a conditional for repeated evaluation."""
    return CompiledConditional(expression)


def evaluate_conditional(
    expression: str,
    matching_nodes: Sequence[ClusterNode],
    total_node_count: int,
) -> bool:
    """
    Parse and evaluate a conditional in one step.

    Raises:
        ConditionalParseError: If the expression is malformed.
        ConditionalEvaluationError: If the comparison cannot be made.
    """
    return compile_conditional(expression).evaluate(matching_nodes, total_node_count)
