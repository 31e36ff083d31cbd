"""
Type definitions for OpenShift objects.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional


PHASE_ANNOTATION = "openshift.io/deployment.phase"
CANCELLED_ANNOTATION = "openshift.io/deployment.cancelled"
STATUS_REASON_ANNOTATION = "openshift.io/deployment.status-reason"
DEPLOYMENT_CONFIG_ANNOTATION = "openshift.io/deployment-config.name"


class ResourceKind(str, Enum):
    """Resource kinds the canceller reads and writes."""
    DEPLOYMENT_CONFIG = "DeploymentConfig"
    REPLICATION_CONTROLLER = "ReplicationController"


class DeploymentPhase(str, Enum):
    """Lifecycle phase of a rollout, as set by the platform's deployer."""
    NEW = "New"
    PENDING = "Pending"
    RUNNING = "Running"
    COMPLETE = "Complete"
    FAILED = "Failed"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["DeploymentPhase"]:
        """Case-insensitive lookup; None for missing or unknown phases."""
        if not value:
            return None
        lowered = value.lower()
        for phase in cls:
            if phase.value.lower() == lowered:
                return phase
        return None


TERMINAL_PHASES = frozenset(
    {DeploymentPhase.COMPLETE, DeploymentPhase.FAILED, DeploymentPhase.CANCELLED}
)


class BuildResult(Enum):
    """Result of the pipeline job the action is attached to, best first."""
    SUCCESS = 0
    UNSTABLE = 1
    FAILURE = 2
    NOT_BUILT = 3
    ABORTED = 4

    def is_worse_than(self, other: "BuildResult") -> bool:
        return self.value > other.value


def _parse_version(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"latestVersion is not a number: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"latestVersion is not a number: {value!r}") from e


@dataclass
class DeploymentConfig:
    """OpenShift DeploymentConfig representation."""
    name: str
    namespace: str
    latest_version: int
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_manifest(cls, manifest: Dict[str, Any]) -> "DeploymentConfig":
        metadata = manifest.get("metadata") or {}
        status = manifest.get("status") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            latest_version=_parse_version(status.get("latestVersion")),
            raw=manifest,
        )


@dataclass
class ReplicationController:
    """
    ReplicationController representation (one rollout of a DeploymentConfig).

    ``raw`` is the full manifest sent back on update, so annotation changes
    are written straight into it.
    """
    name: str
    namespace: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_manifest(cls, manifest: Dict[str, Any]) -> "ReplicationController":
        metadata = manifest.get("metadata") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            raw=manifest,
        )

    @property
    def annotations(self) -> Dict[str, str]:
        """Annotation map; a detached empty dict when the manifest has none."""
        metadata = self.raw.get("metadata") or {}
        return metadata.get("annotations") or {}

    def get_annotation(self, key: str) -> Optional[str]:
        return self.annotations.get(key)

    def set_annotation(self, key: str, value: str) -> None:
        metadata = self.raw.setdefault("metadata", {})
        if metadata.get("annotations") is None:
            metadata["annotations"] = {}
        metadata["annotations"][key] = value

    @property
    def phase(self) -> Optional[str]:
        return self.get_annotation(PHASE_ANNOTATION)
