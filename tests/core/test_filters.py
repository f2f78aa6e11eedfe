import pytest

from kpreflight.core import (
    ClusterNode,
    FilterError,
    FilterSpec,
    QuantityParseError,
    node_matches_filters,
    partition_nodes,
)


def _node(name, labels=None, capacity=None, allocatable=None):
    return ClusterNode.from_dict({
        "metadata": {"name": name, "labels": labels or {}},
        "status": {"capacity": capacity or {}, "allocatable": allocatable or {}},
    })


class TestNodeMatchesFilters:

    def test_no_filters_matches_everything(self):
        assert node_matches_filters(_node("n1"), None) is True

    def test_empty_filter_spec_matches_everything(self):
        spec = FilterSpec()
        assert spec.is_empty
        assert node_matches_filters(_node("n1"), spec) is True
        assert node_matches_filters(_node("n2", {"a": "b"}, {"cpu": "1"}), spec) is True

    def test_blank_thresholds_count_as_no_clauses(self):
        spec = FilterSpec(thresholds={"cpuCapacity": "", "memoryCapacity": ""})
        assert spec.is_empty
        assert node_matches_filters(_node("n1"), spec) is True

    def test_threshold_bound_is_inclusive(self):
        spec = FilterSpec(thresholds={"cpuCapacity": "4"})
        assert node_matches_filters(_node("n1", capacity={"cpu": "4"}), spec) is True
        assert node_matches_filters(_node("n2", capacity={"cpu": "4000m"}), spec) is True

    def test_below_threshold_is_excluded(self):
        spec = FilterSpec(thresholds={"memoryAllocatable": "8Gi"})
        node = _node("n1", allocatable={"memory": "7Gi"})
        assert node_matches_filters(node, spec) is False

    def test_missing_property_is_excluded_without_error(self):
        spec = FilterSpec(thresholds={"ephemeralStorageCapacity": "10Gi"})
        assert node_matches_filters(_node("n1", capacity={"cpu": "4"}), spec) is False

    def test_all_clauses_must_hold(self):
        spec = FilterSpec(
            match_labels={"zone": "a"},
            thresholds={"cpuCapacity": "2", "podCapacity": "100"},
        )
        good = _node("n1", {"zone": "a"}, {"cpu": "4", "pods": "110"})
        few_pods = _node("n2", {"zone": "a"}, {"cpu": "4", "pods": "50"})
        assert node_matches_filters(good, spec) is True
        assert node_matches_filters(few_pods, spec) is False

    def test_label_mismatch_raises(self):
        spec = FilterSpec(match_labels={"zone": "a"})
        with pytest.raises(FilterError, match="zone"):
            node_matches_filters(_node("n1", {"zone": "b"}), spec)

    def test_missing_label_raises(self):
        spec = FilterSpec(match_labels={"gpu": "true"})
        with pytest.raises(FilterError):
            node_matches_filters(_node("n1", {"zone": "a"}), spec)

    def test_empty_label_value_matches_present_empty_label(self):
        spec = FilterSpec(match_labels={"node-role.kubernetes.io/worker": ""})
        node = _node("n1", {"node-role.kubernetes.io/worker": ""})
        assert node_matches_filters(node, spec) is True

    def test_malformed_threshold_raises_parse_error(self):
        spec = FilterSpec(thresholds={"cpuCapacity": "lots"})
        with pytest.raises(QuantityParseError):
            node_matches_filters(_node("n1", capacity={"cpu": "4"}), spec)

    def test_first_failing_clause_short_circuits(self):
        # cpuCapacity is checked before memoryCapacity, so the bad memory
        # bound is never parsed for a node that already fails on CPU.
        spec = FilterSpec(thresholds={"cpuCapacity": "8", "memoryCapacity": "lots"})
        node = _node("n1", capacity={"cpu": "4", "memory": "16Gi"})
        assert node_matches_filters(node, spec) is False


class TestPartitionNodes:

    def test_splits_matching_and_excluded_in_order(self):
        nodes = [
            _node("small", capacity={"cpu": "1"}),
            _node("big", capacity={"cpu": "8"}),
            _node("bare"),
            _node("medium", capacity={"cpu": "2"}),
        ]
        matching, excluded = partition_nodes(nodes, FilterSpec(thresholds={"cpuCapacity": "2"}))

        assert [n.name for n in matching] == ["big", "medium"]
        assert [n.name for n in excluded] == ["small", "bare"]

    def test_label_mismatch_on_one_node_aborts_whole_pass(self):
        nodes = [
            _node("n1", {"zone": "a"}),
            _node("n2", {"zone": "b"}),
            _node("n3", {"zone": "a"}),
        ]
        with pytest.raises(FilterError):
            partition_nodes(nodes, FilterSpec(match_labels={"zone": "a"}))

    def test_no_nodes(self):
        assert partition_nodes([], FilterSpec(match_labels={"zone": "a"})) == ([], [])
