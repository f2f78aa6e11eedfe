"""
Record model for collected cluster state.

ClusterNode and WorkloadRecord are the read-only records a rule evaluates.
They are decoded from the JSON payloads a collector stored in the snapshot:

    cluster-resources/nodes.json                    -> List[ClusterNode]
    cluster-resources/deployments/<namespace>.json  -> List[WorkloadRecord]
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kpreflight.constants import PROPERTY_SOURCES
from kpreflight.core.errors import DecodeError, QuantityParseError
from kpreflight.core.quantity import Quantity


@dataclass(frozen=True)
class ClusterNode:
    """A node from the collected inventory."""
    name: str
    labels: Dict[str, str] = field(default_factory=dict)
    # property name (e.g. "cpuCapacity") -> Quantity; absent properties are missing
    resources: Dict[str, Quantity] = field(default_factory=dict)

    def quantity(self, prop: str) -> Optional[Quantity]:
        """
        Look up a named property.

        Unknown property names resolve to None exactly like a property the
        node does not report.
        """
        return self.resources.get(prop)

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "ClusterNode":
        """
        Build a node from a Kubernetes node object.

        Raises:
            DecodeError: If the object does not have the node shape or a
                reported resource is not a valid quantity.
        """
        if not isinstance(obj, dict):
            raise DecodeError(f"node must be an object, got {type(obj).__name__}")

        metadata = _mapping(obj.get("metadata"), "metadata")
        status = _mapping(obj.get("status"), "status")

        labels = _mapping(metadata.get("labels"), "metadata.labels")
        for key, value in labels.items():
            if not isinstance(value, str):
                raise DecodeError(f"label {key} must be a string")

        sections = {
            "capacity": _mapping(status.get("capacity"), "status.capacity"),
            "allocatable": _mapping(status.get("allocatable"), "status.allocatable"),
        }

        resources: Dict[str, Quantity] = {}
        for prop, (section, resource_key) in PROPERTY_SOURCES.items():
            raw = sections[section].get(resource_key)
            if raw is None:
                continue
            # JSON numbers are accepted the same way as their string form
            if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                raw = str(raw)
            try:
                resources[prop] = Quantity.parse(raw)
            except QuantityParseError as e:
                raise DecodeError(f"invalid {section} {resource_key} on node: {e}") from e

        return cls(
            name=str(metadata.get("name", "")),
            labels=dict(labels),
            resources=resources,
        )


@dataclass(frozen=True)
class WorkloadRecord:
    """A deployment reference used for gating."""
    namespace: str
    name: str

    @classmethod
    def from_dict(cls, obj: Dict[str, Any], namespace: str = "") -> "WorkloadRecord":
        if not isinstance(obj, dict):
            raise DecodeError(f"deployment must be an object, got {type(obj).__name__}")
        metadata = _mapping(obj.get("metadata"), "metadata")
        return cls(
            namespace=str(metadata.get("namespace") or namespace),
            name=str(metadata.get("name", "")),
        )


# =============================================================================
# DECODERS
# =============================================================================

def decode_nodes(payload: bytes) -> List[ClusterNode]:
    """
    Decode a collected node list.

    Args:
        payload: JSON array of node objects.

    Returns:
        Nodes in payload order.

    Raises:
        DecodeError: If the payload is not a JSON array of nodes.
    """
    items = _load_array(payload, "node list")
    return [ClusterNode.from_dict(item) for item in items]


def decode_workloads(payload: bytes, namespace: str = "") -> List[WorkloadRecord]:
    """Decode a collected deployment list for one namespace."""
    items = _load_array(payload, "deployment list")
    return [WorkloadRecord.from_dict(item, namespace) for item in items]


def _load_array(payload: bytes, what: str) -> List[Any]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"failed to unmarshal {what}: {e}") from e
    except RecursionError as e:
        raise DecodeError(f"failed to unmarshal {what}: nested too deeply") from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"failed to unmarshal {what}: expected an array, got {type(data).__name__}")
    return data


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    """Missing sections are empty; present ones must be objects."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"{where} must be an object, got {type(value).__name__}")
    return value
