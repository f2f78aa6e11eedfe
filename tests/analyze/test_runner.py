import json
from pathlib import Path

import pandas as pd
import pytest

from kpreflight.analyze import CollectedData, results_to_frame, run_analyzer, run_analyzers
from kpreflight.config import AnalyzerSettings
from kpreflight.core import FetchError
from kpreflight.schemas import parse_rules


NODES = [
    {"metadata": {"name": f"n{i}"}, "status": {"capacity": {"cpu": "4", "memory": "16Gi"}}}
    for i in range(3)
]

RULES = parse_rules([
    {"checkName": "three nodes", "outcomes": [{"pass": {"when": "count() == 3", "message": "ok"}}]},
    {"checkName": "broken", "outcomes": [{"fail": {"when": "count() ~ 3", "message": "x"}}]},
    {"checkName": "big nodes", "outcomes": [
        {"fail": {"when": "min(memoryCapacity) < 32Gi", "message": "need 32Gi"}},
    ]},
    {"checkName": "nothing", "outcomes": [{"fail": {"when": "count() > 100", "message": "x"}}]},
])


def _store():
    return CollectedData({"cluster-resources/nodes.json": json.dumps(NODES).encode()})


class TestCollectedData:

    def test_fetch_blob(self):
        store = CollectedData({"a.json": b"[]"})
        assert store.fetch_blob("a.json") == b"[]"
        assert "a.json" in store
        assert len(store) == 1

    def test_missing_key_is_fetch_error(self):
        with pytest.raises(FetchError, match="file b.json was not collected"):
            CollectedData({"a.json": b"[]"}).fetch_blob("b.json")

    def test_protected_shadows_collected(self):
        store = CollectedData(
            {"a.json": b"collected", "b.json": b"only collected"},
            protected={"a.json": b"protected"},
        )
        assert store.fetch_blob("a.json") == b"protected"
        assert store.fetch_blob("b.json") == b"only collected"
        assert store.keys() == ["a.json", "b.json"]

    def test_from_directory_uses_posix_relative_keys(self, tmp_path: Path):
        nodes_file = tmp_path / "cluster-resources" / "nodes.json"
        nodes_file.parent.mkdir(parents=True)
        nodes_file.write_bytes(b"[]")
        (tmp_path / "version.yaml").write_text("v1")

        store = CollectedData.from_directory(tmp_path)
        assert store.keys() == ["cluster-resources/nodes.json", "version.yaml"]
        assert store.fetch_blob("cluster-resources/nodes.json") == b"[]"

    def test_from_directory_requires_directory(self, tmp_path: Path):
        with pytest.raises(FetchError):
            CollectedData.from_directory(tmp_path / "missing")


class TestRunAnalyzers:

    def test_failed_rule_becomes_analyzer_failed_result(self):
        result = run_analyzer(RULES[1], _store())
        assert result.is_fail
        assert result.title == "Analyzer Failed"
        assert "count() ~ 3" in result.message

    def test_one_bad_rule_does_not_hide_the_others(self):
        results = run_analyzers(RULES, _store())

        assert [r.title for r in results] == [
            "three nodes", "Analyzer Failed", "big nodes", "nothing",
        ]
        assert results[0].is_pass
        assert results[2].is_fail
        assert results[2].message == "need 32Gi"
        assert results[3].verdict is None

    def test_worker_pool_keeps_rule_order(self):
        serial = run_analyzers(RULES, _store())
        parallel = run_analyzers(RULES, _store(), AnalyzerSettings(max_workers=4))
        assert parallel == serial

    def test_missing_inventory_fails_every_rule(self):
        results = run_analyzers(RULES, CollectedData({}))
        assert all(r.is_fail and r.title == "Analyzer Failed" for r in results)
        assert all("nodes.json" in r.message for r in results)


def test_results_to_frame():
    frame = results_to_frame(run_analyzers(RULES, _store()))

    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ["title", "verdict", "message", "uri", "icon_key"]
    assert frame["verdict"].tolist() == ["pass", "fail", "fail", None]
    assert frame.loc[0, "icon_key"] == "kubernetes_node_resources"


def test_results_to_frame_empty():
    frame = results_to_frame([])
    assert frame.empty
    assert list(frame.columns) == ["title", "verdict", "message", "uri", "icon_key"]


def test_undecodable_inventory_does_not_stop_other_rules():
    store = CollectedData({"cluster-resources/nodes.json": b"[" * 200000})
    results = run_analyzers(RULES, store)

    assert len(results) == len(RULES)
    assert all(r.is_fail and r.title == "Analyzer Failed" for r in results)
    assert all("nested too deeply" in r.message for r in results)


def test_out_of_range_sum_does_not_stop_other_rules():
    nodes = [
        {"metadata": {"name": f"n{i}"}, "status": {"capacity": {"cpu": "9e999999"}}}
        for i in range(2)
    ]
    store = CollectedData({"cluster-resources/nodes.json": json.dumps(nodes).encode()})
    rules = parse_rules([
        {"checkName": "total cpu", "outcomes": [{"pass": {"when": "sum(cpuCapacity) > 1"}}]},
        {"checkName": "two nodes", "outcomes": [{"pass": {"when": "count() == 2", "message": "ok"}}]},
    ])

    failed, counted = run_analyzers(rules, store)
    assert failed.title == "Analyzer Failed"
    assert "out of range" in failed.message
    assert counted.is_pass
    assert counted.message == "ok"
