"""
Node Resources Analyzer.

Evaluates one NodeResourcesRule against a collected snapshot:

    1. fetch the node inventory
    2. gate on workload existence (may swap the body or skip)
    3. decode nodes
    4. partition nodes with the active filters
    5. first outcome whose conditional holds decides the verdict

Errors from any step propagate as AnalyzeError subclasses; the runner
decides what to do with them.
"""

import logging
from dataclasses import replace
from typing import Callable, Optional

from kpreflight.analyze.result import AnalysisResult
from kpreflight.config import AnalyzerSettings
from kpreflight.constants import SKIPPED_TITLE_PREFIX
from kpreflight.core.errors import FetchError
from kpreflight.core.filters import partition_nodes
from kpreflight.core.gating import resolve_gating, workload_check
from kpreflight.core.outcomes import Verdict, select_outcome
from kpreflight.core.records import decode_nodes
from kpreflight.schemas.rule_spec import NodeResourcesRule

logger = logging.getLogger(__name__)

FetchBlob = Callable[[str], bytes]


def analyze_node_resources(
    rule: NodeResourcesRule,
    fetch_blob: FetchBlob,
    settings: Optional[AnalyzerSettings] = None,
) -> AnalysisResult:
    """
    Evaluate a node-resources rule.

    Args:
        rule: The rule to evaluate.
        fetch_blob: Returns the collected payload for a key, raising
            FetchError when the key was not collected.
        settings: Collected keys and presentation defaults.

    Returns:
        The result. Its verdict is None when no outcome matched.

    Raises:
        FetchError: If the node inventory or a gating deployment list is missing.
        DecodeError: If a collected payload is malformed.
        FilterError: If a node misses a label clause.
        ParseError: If a threshold filter is not a valid quantity.
        ConditionalEvaluationError: If an outcome conditional cannot be evaluated.
    """
    settings = settings or AnalyzerSettings()

    try:
        payload = fetch_blob(settings.nodes_key)
    except FetchError as e:
        raise FetchError(f"failed to get contents of {settings.nodes_key}: {e}") from e

    title = rule.check_name or settings.default_title
    result = AnalysisResult(
        title=title,
        icon_key=settings.icon_key,
        icon_uri=settings.icon_uri,
    )

    resolution = resolve_gating(
        rule.body,
        rule.gating,
        workload_check(fetch_blob, settings.deployments_dir),
    )
    if resolution.skipped:
        logger.info(f"{title}: skipped, {resolution.skip_message}")
        return replace(
            result,
            title=SKIPPED_TITLE_PREFIX + title,
            verdict=Verdict.WARN,
            message=resolution.skip_message,
        )

    nodes = decode_nodes(payload)
    matching, _ = partition_nodes(nodes, resolution.body.filters)

    outcome = select_outcome(resolution.body.outcomes, matching, len(nodes))
    if outcome is None:
        logger.debug(f"{title}: no outcome matched ({len(matching)}/{len(nodes)} nodes)")
        return result

    logger.debug(f"{title}: {outcome.verdict.value} ({len(matching)}/{len(nodes)} nodes)")
    return AnalysisResult.from_outcome(outcome, title, settings.icon_key, settings.icon_uri)
