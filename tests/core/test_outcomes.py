import pytest

from kpreflight.core import (
    ClusterNode,
    ConditionalEvaluationError,
    Outcome,
    Verdict,
    select_outcome,
)


def _nodes(n):
    return [ClusterNode(name=f"n{i}") for i in range(n)]


def test_first_true_entry_wins():
    outcomes = [
        Outcome(Verdict.FAIL, "count() > 5", "too many"),
        Outcome(Verdict.WARN, "count() > 0", "some"),
        Outcome(Verdict.PASS, "", "fine"),
    ]
    selected = select_outcome(outcomes, _nodes(3), 3)
    assert selected.verdict is Verdict.WARN
    assert selected.message == "some"


def test_declared_order_beats_verdict_severity():
    outcomes = [
        Outcome(Verdict.PASS, "count() >= 1", "pass first"),
        Outcome(Verdict.FAIL, "count() >= 1", "fail second"),
    ]
    assert select_outcome(outcomes, _nodes(1), 1).verdict is Verdict.PASS


def test_no_match_is_none():
    outcomes = [
        Outcome(Verdict.FAIL, "count() > 5"),
        Outcome(Verdict.PASS, "count() == 5"),
    ]
    assert select_outcome(outcomes, _nodes(3), 3) is None
    assert select_outcome([], _nodes(3), 3) is None


def test_entries_after_the_winner_are_not_evaluated():
    outcomes = [
        Outcome(Verdict.PASS, "", "default"),
        Outcome(Verdict.FAIL, "banana"),
    ]
    assert select_outcome(outcomes, _nodes(2), 2).message == "default"


def test_malformed_entry_before_the_winner_raises():
    outcomes = [
        Outcome(Verdict.FAIL, "banana"),
        Outcome(Verdict.PASS, ""),
    ]
    with pytest.raises(ConditionalEvaluationError):
        select_outcome(outcomes, _nodes(2), 2)


def test_uri_is_carried():
    outcome = Outcome(Verdict.FAIL, "", "msg", "https://example.com/nodes")
    assert select_outcome([outcome], [], 0).uri == "https://example.com/nodes"
