"""
Multi-rule runner and result summary.

run_analyzers() is the boundary where a rule that raised becomes a
synthetic Fail result, so one bad rule never hides the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import pandas as pd

from kpreflight.analyze.collected import CollectedData
from kpreflight.analyze.node_resources import analyze_node_resources
from kpreflight.analyze.result import AnalysisResult
from kpreflight.config import AnalyzerSettings
from kpreflight.constants import ANALYZER_FAILED_TITLE
from kpreflight.core.errors import AnalyzeError
from kpreflight.core.outcomes import Verdict
from kpreflight.schemas.rule_spec import NodeResourcesRule

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["title", "verdict", "message", "uri", "icon_key"]


def run_analyzer(
    rule: NodeResourcesRule,
    store: CollectedData,
    settings: Optional[AnalyzerSettings] = None,
) -> AnalysisResult:
    """Evaluate one rule, converting an evaluation error into a Fail result."""
    try:
        return analyze_node_resources(rule, store.fetch_blob, settings)
    except AnalyzeError as e:
        logger.warning(f"Analyzer {rule.check_name or '<unnamed>'} failed: {e}")
        return AnalysisResult(
            title=ANALYZER_FAILED_TITLE,
            verdict=Verdict.FAIL,
            message=str(e),
        )


def run_analyzers(
    rules: Sequence[NodeResourcesRule],
    store: CollectedData,
    settings: Optional[AnalyzerSettings] = None,
) -> List[AnalysisResult]:
    """
    Evaluate independent rules against one snapshot.

    Args:
        rules: Rules in report order.
        store: The collected snapshot, shared read-only by every rule.
        settings: Collected keys, presentation defaults and worker count.

    Returns:
        One result per rule, in rule order.
    """
    settings = settings or AnalyzerSettings()

    if settings.max_workers > 1 and len(rules) > 1:
        with ThreadPoolExecutor(max_workers=settings.max_workers) as pool:
            results = list(pool.map(lambda rule: run_analyzer(rule, store, settings), rules))
    else:
        results = [run_analyzer(rule, store, settings) for rule in rules]

    failed = sum(1 for r in results if r.is_fail)
    logger.info(f"Evaluated {len(results)} rules ({failed} failing)")
    return results


def results_to_frame(results: Sequence[AnalysisResult]) -> pd.DataFrame:
    """
    Tabulate results for reporting.

    Inconclusive results carry verdict None.
    """
    rows = [
        {
            "title": r.title,
            "verdict": r.verdict.value if r.verdict else None,
            "message": r.message,
            "uri": r.uri,
            "icon_key": r.icon_key,
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)
