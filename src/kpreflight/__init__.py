"""
kpreflight: node-resources preflight rules for collected cluster snapshots.

Submodules:
    core: quantities, records, filters, conditionals, outcomes, gating
    schemas: rule definition parsing
    analyze: rule evaluation, snapshot store, runner
"""

from kpreflight.analyze import (
    AnalysisResult,
    CollectedData,
    analyze_node_resources,
    results_to_frame,
    run_analyzers,
)
from kpreflight.config import AnalyzerSettings
from kpreflight.schemas import NodeResourcesRule, parse_rule, parse_rules

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "AnalyzerSettings",
    "CollectedData",
    "NodeResourcesRule",
    "analyze_node_resources",
    "parse_rule",
    "parse_rules",
    "results_to_frame",
    "run_analyzers",
]
