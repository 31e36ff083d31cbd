"""
Cancel in-progress OpenShift deployment rollouts from a build pipeline.
"""
from .action import BuildListener, OpenShiftDeployCanceller
from .adapters import ResourceAccessor
from .canceller import CancelOutcome, CancelStatus, cancel_latest_rollout, is_terminal_phase, rollout_name
from .errors import CancellerError, ClusterUpdateError
from .kube_client import ClusterClient, ExecClusterClient, RestClusterClient, create_client
from .kube_types import BuildResult, DeploymentConfig, DeploymentPhase, ReplicationController, ResourceKind

__version__ = "1.0.0"

__all__ = [
    "BuildListener",
    "BuildResult",
    "CancelOutcome",
    "CancelStatus",
    "CancellerError",
    "ClusterClient",
    "ClusterUpdateError",
    "DeploymentConfig",
    "DeploymentPhase",
    "ExecClusterClient",
    "OpenShiftDeployCanceller",
    "ReplicationController",
    "ResourceAccessor",
    "ResourceKind",
    "RestClusterClient",
    "cancel_latest_rollout",
    "create_client",
    "is_terminal_phase",
    "rollout_name",
]
