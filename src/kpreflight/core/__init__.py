"""
kpreflight core: node-resources rule evaluation.

Layer Architecture:
    Records:      ClusterNode / WorkloadRecord decoded from the snapshot
                      ↓
    Gating:       workload existence selects the active rule body
                      ↓
    Filtering:    FilterSpec partitions nodes into matching / excluded
                      ↓
    Conditionals: count/min/max/sum over matching nodes vs a literal
                      ↓
    Outcomes:     first true entry decides Fail / Warn / Pass

Usage:
    from kpreflight.core import (
        Quantity,
        FilterSpec,
        Outcome,
        Verdict,
        evaluate_conditional,
    )
"""

from kpreflight.core.errors import (
    AnalyzeError,
    FetchError,
    DecodeError,
    ParseError,
    QuantityParseError,
    FilterError,
    ConditionalEvaluationError,
    ConditionalParseError,
    RuleSpecError,
)

from kpreflight.core.quantity import Quantity, parse_quantity

from kpreflight.core.records import (
    ClusterNode,
    WorkloadRecord,
    decode_nodes,
    decode_workloads,
)

from kpreflight.core.filters import (
    FilterSpec,
    node_matches_filters,
    partition_nodes,
)

from kpreflight.core.aggregates import (
    AggregateFunction,
    evaluate_aggregate,
    find_max,
    find_min,
    find_sum,
)

from kpreflight.core.conditionals import (
    Comparator,
    Operand,
    OperandKind,
    ParsedConditional,
    ConditionalParser,
    ConditionalEvaluator,
    CompiledConditional,
    compare_operands,
    compile_conditional,
    evaluate_conditional,
    resolve_literal,
)

from kpreflight.core.outcomes import Outcome, Verdict, select_outcome

from kpreflight.core.gating import (
    GateResolution,
    GatingSpec,
    RuleBody,
    WorkloadRef,
    deployment_exists,
    resolve_gating,
    workload_check,
)

__all__ = [
    # Errors
    "AnalyzeError",
    "FetchError",
    "DecodeError",
    "ParseError",
    "QuantityParseError",
    "FilterError",
    "ConditionalEvaluationError",
    "ConditionalParseError",
    "RuleSpecError",
    # Quantity
    "Quantity",
    "parse_quantity",
    # Records
    "ClusterNode",
    "WorkloadRecord",
    "decode_nodes",
    "decode_workloads",
    # Filters
    "FilterSpec",
    "node_matches_filters",
    "partition_nodes",
    # Aggregates
    "AggregateFunction",
    "evaluate_aggregate",
    "find_max",
    "find_min",
    "find_sum",
    # Conditionals
    "Comparator",
    "Operand",
    "OperandKind",
    "ParsedConditional",
    "ConditionalParser",
    "ConditionalEvaluator",
    "CompiledConditional",
    "compare_operands",
    "compile_conditional",
    "evaluate_conditional",
    "resolve_literal",
    # Outcomes
    "Outcome",
    "Verdict",
    "select_outcome",
    # Gating
    "GateResolution",
    "GatingSpec",
    "RuleBody",
    "WorkloadRef",
    "deployment_exists",
    "resolve_gating",
    "workload_check",
]
