"""
Cancellation of the latest rollout of a DeploymentConfig.

Only the latest version is looked at: the platform keeps a single active
rollout per config. A rollout whose phase is Complete, Failed or Cancelled
is left alone, so running the cancellation again (or concurrently) is a
no-op once the first call has landed.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .adapters import ResourceAccessor
from .kube_types import (
    CANCELLED_ANNOTATION,
    DEPLOYMENT_CONFIG_ANNOTATION,
    STATUS_REASON_ANNOTATION,
    TERMINAL_PHASES,
    DeploymentPhase,
)

logger = logging.getLogger(__name__)

CANCEL_REASON = "The deployment was cancelled by the user"


class CancelStatus(str, Enum):
    CONFIG_NOT_FOUND = "config_not_found"
    ROLLOUT_NOT_FOUND = "rollout_not_found"
    NOT_IN_PROGRESS = "not_in_progress"
    CANCELLED = "cancelled"


@dataclass
class CancelOutcome:
    """What the cancellation found and did."""
    status: CancelStatus
    dep_cfg: str
    namespace: str
    rollout: Optional[str] = None
    phase: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status in (CancelStatus.CANCELLED, CancelStatus.NOT_IN_PROGRESS)


def rollout_name(dep_cfg: str, latest_version: int) -> str:
    """Name of the ReplicationController for a given config version."""
    return f"{dep_cfg}-{latest_version}"


def is_terminal_phase(phase: Optional[str]) -> bool:
    """
    True for Complete, Failed and Cancelled, in any case.

    Unknown and missing phases are not terminal; those rollouts get cancelled.
    """
    return DeploymentPhase.parse(phase) in TERMINAL_PHASES


def cancel_latest_rollout(accessor: ResourceAccessor, dep_cfg: str, namespace: str) -> CancelOutcome:
    """
    Cancel the latest rollout of ``dep_cfg`` if it is still in progress.

    Args:
        accessor: Resource accessor bound to a cluster client
        dep_cfg: DeploymentConfig name
        namespace: Project / namespace

    Returns:
        CancelOutcome describing the branch taken

    Raises:
        ClusterUpdateError: the cancel annotations could not be written
    """
    dc = accessor.get_deployment_config(dep_cfg, namespace)
    if dc is None:
        logger.warning(f"DeploymentConfig {namespace}/{dep_cfg} could not be retrieved")
        return CancelOutcome(CancelStatus.CONFIG_NOT_FOUND, dep_cfg, namespace)

    rc_name = rollout_name(dep_cfg, dc.latest_version)
    rc = accessor.get_replication_controller(rc_name, namespace)
    if rc is None:
        logger.warning(f"ReplicationController {namespace}/{rc_name} could not be retrieved")
        return CancelOutcome(CancelStatus.ROLLOUT_NOT_FOUND, dep_cfg, namespace, rollout=rc_name)

    owner = rc.get_annotation(DEPLOYMENT_CONFIG_ANNOTATION)
    if owner and owner != dep_cfg:
        logger.warning(f"⚠️ {namespace}/{rc_name} is annotated as belonging to {owner}, not {dep_cfg}")
        return CancelOutcome(CancelStatus.ROLLOUT_NOT_FOUND, dep_cfg, namespace, rollout=rc_name)

    phase = rc.phase
    if is_terminal_phase(phase):
        logger.info(f"Rollout {namespace}/{rc_name} is not in progress (phase={phase})")
        return CancelOutcome(CancelStatus.NOT_IN_PROGRESS, dep_cfg, namespace, rollout=rc_name, phase=phase)

    if phase is None:
        logger.warning(f"⚠️ Rollout {namespace}/{rc_name} has no phase annotation; treating it as active")
    elif DeploymentPhase.parse(phase) is None:
        logger.warning(f"⚠️ Rollout {namespace}/{rc_name} has unrecognised phase {phase!r}; treating it as active")

    rc.set_annotation(CANCELLED_ANNOTATION, "true")
    rc.set_annotation(STATUS_REASON_ANNOTATION, CANCEL_REASON)
    accessor.update_replication_controller(rc)

    logger.info(f"✅ Cancelled rollout {namespace}/{rc_name} (phase was {phase})")
    return CancelOutcome(CancelStatus.CANCELLED, dep_cfg, namespace, rollout=rc_name, phase=phase)
