"""
Rule Gate: swap the rule body depending on whether a workload exists.

    workload present, on_update set      -> on_update body
    workload present, on_update missing  -> skipped (Warn)
    workload absent,  on_install set     -> on_install body
    workload absent,  on_install missing -> the rule's own body, unchanged
"""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from kpreflight.constants import DEPLOYMENTS_DIR
from kpreflight.core.errors import FetchError
from kpreflight.core.filters import FilterSpec
from kpreflight.core.outcomes import Outcome
from kpreflight.core.records import decode_workloads

logger = logging.getLogger(__name__)


WorkloadExists = Callable[[str, str], bool]
FetchBlob = Callable[[str], bytes]


@dataclass(frozen=True)
class WorkloadRef:
    namespace: str
    name: str


@dataclass(frozen=True)
class RuleBody:
    """A filter set with the outcomes evaluated over it."""
    filters: Optional[FilterSpec] = None
    outcomes: List[Outcome] = field(default_factory=list)


@dataclass(frozen=True)
class GatingSpec:
    """
    Alternative rule bodies selected by workload existence.

    Attributes:
        workload: The deployment whose existence is checked.
        on_install: Body used while the workload does not exist yet.
        on_update: Body used once the workload exists.
    """
    workload: WorkloadRef
    on_install: Optional[RuleBody] = None
    on_update: Optional[RuleBody] = None


@dataclass(frozen=True)
class GateResolution:
    """The body to evaluate, or a skip."""
    body: RuleBody
    skipped: bool = False
    skip_message: str = ""


def skip_message(workload: WorkloadRef) -> str:
    return (
        f"Test skipped: Deployment {workload.name} found in the cluster, "
        f"but no specs were found for updates, under 'onUpdate:' field"
    )


def resolve_gating(
    body: RuleBody,
    gating: Optional[GatingSpec],
    workload_exists: WorkloadExists,
) -> GateResolution:
    """
    Choose the active rule body.

    Args:
        body: The rule's own filters and outcomes.
        gating: Gating configuration, or None.
        workload_exists: Existence check called as (namespace, name).

    Returns:
        The resolution; `skipped` is set when the workload exists and no
        update body is configured.

    Raises:
        AnalyzeError: Whatever the existence check raises.
    """
    if gating is None:
        return GateResolution(body=body)

    workload = gating.workload
    exists = workload_exists(workload.namespace, workload.name)
    logger.debug(f"Deployment {workload.namespace}/{workload.name} exists: {exists}")

    if exists:
        if gating.on_update is not None:
            return GateResolution(body=gating.on_update)
        return GateResolution(body=body, skipped=True, skip_message=skip_message(workload))

    if gating.on_install is not None:
        return GateResolution(body=gating.on_install)
    return GateResolution(body=body)


def deployment_exists(
    fetch_blob: FetchBlob,
    namespace: str,
    name: str,
    deployments_dir: str = DEPLOYMENTS_DIR,
) -> bool:
    """
    Check the collected deployments of a namespace for a deployment name.

    Raises:
        FetchError: If the namespace's deployment list was not collected.
        DecodeError: If the deployment list is malformed.
    """
    key = posixpath.join(deployments_dir, f"{namespace}.json")
    try:
        payload = fetch_blob(key)
    except FetchError as e:
        raise FetchError(f"failed to read collected deployments from namespace {namespace}: {e}") from e

    return any(record.name == name for record in decode_workloads(payload, namespace))


def workload_check(fetch_blob: FetchBlob, deployments_dir: str = DEPLOYMENTS_DIR) -> WorkloadExists:
    """Bind deployment_exists to a snapshot."""
    def check(namespace: str, name: str) -> bool:
        return deployment_exists(fetch_blob, namespace, name, deployments_dir)
    return check
