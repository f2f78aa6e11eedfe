"""
Outcome Selector: ordered first-match verdicts.

Outcomes are evaluated in declared order. The first entry whose `when`
holds decides the verdict and nothing after it is evaluated, whatever its
kind. If no entry holds, there is no verdict.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from kpreflight.core.conditionals import evaluate_conditional
from kpreflight.core.errors import ConditionalEvaluationError
from kpreflight.core.records import ClusterNode

logger = logging.getLogger(__name__)


class Verdict(Enum):
    FAIL = "fail"
    WARN = "warn"
    PASS = "pass"


@dataclass(frozen=True)
class Outcome:
    """One verdict entry: kind, condition and operator-facing payload."""
    verdict: Verdict
    when: str = ""
    message: str = ""
    uri: str = ""


def select_outcome(
    outcomes: Sequence[Outcome],
    matching_nodes: Sequence[ClusterNode],
    total_node_count: int,
) -> Optional[Outcome]:
    """
    Return the first outcome whose conditional holds.

    Args:
        outcomes: Entries in declared order.
        matching_nodes: Nodes that passed the filters.
        total_node_count: Size of the unfiltered inventory.

    Returns:
        The winning outcome, or None if no conditional holds.

    Raises:
        ConditionalEvaluationError: If a conditional reached before the
            winning entry cannot be parsed or evaluated.
    """
    for index, outcome in enumerate(outcomes):
        try:
            holds = evaluate_conditional(outcome.when, matching_nodes, total_node_count)
        except ConditionalEvaluationError as e:
            logger.debug(f"Outcome {index} ({outcome.verdict.value}) failed to evaluate: {e}")
            raise

        if holds:
            logger.debug(f"Outcome {index} ({outcome.verdict.value}) matched")
            return outcome

    return None
