"""
Analyze module for kpreflight.

Provides:
- Node-resources rule evaluation (analyze_node_resources)
- The collected snapshot store (CollectedData)
- The multi-rule runner and result table (run_analyzers, results_to_frame)
"""

from .result import AnalysisResult

from .collected import CollectedData

from .node_resources import analyze_node_resources

from .runner import (
    run_analyzer,
    run_analyzers,
    results_to_frame,
)

__all__ = [
    "AnalysisResult",
    "CollectedData",
    "analyze_node_resources",
    "run_analyzer",
    "run_analyzers",
    "results_to_frame",
]
