"""
Typed resource access on top of a cluster client.
"""
import logging
from typing import Optional, Union

from .kube_client import ClusterClient
from .kube_types import DeploymentConfig, ReplicationController, ResourceKind

logger = logging.getLogger(__name__)

Resource = Union[DeploymentConfig, ReplicationController]


class ResourceAccessor:
    """Read/update DeploymentConfigs and ReplicationControllers. No caching."""

    def __init__(self, cluster_client: ClusterClient):
        self.cluster_client = cluster_client

    def get(self, kind: ResourceKind, name: str, namespace: str) -> Optional[Resource]:
        if kind == ResourceKind.DEPLOYMENT_CONFIG:
            return self.get_deployment_config(name, namespace)
        if kind == ResourceKind.REPLICATION_CONTROLLER:
            return self.get_replication_controller(name, namespace)
        raise ValueError(f"Unsupported resource kind: {kind}")

    def get_deployment_config(self, name: str, namespace: str) -> Optional[DeploymentConfig]:
        manifest = self.cluster_client.get(ResourceKind.DEPLOYMENT_CONFIG, name, namespace)
        if manifest is None:
            return None
        try:
            return DeploymentConfig.from_manifest(manifest)
        except ValueError as e:
            logger.error(f"DeploymentConfig {namespace}/{name} is unusable: {e}")
            return None

    def get_replication_controller(self, name: str, namespace: str) -> Optional[ReplicationController]:
        manifest = self.cluster_client.get(ResourceKind.REPLICATION_CONTROLLER, name, namespace)
        if manifest is None:
            return None
        return ReplicationController.from_manifest(manifest)

    def update(self, resource: Resource) -> Resource:
        if isinstance(resource, ReplicationController):
            return self.update_replication_controller(resource)
        raise ValueError(f"Unsupported resource for update: {type(resource).__name__}")

    def update_replication_controller(self, rc: ReplicationController) -> ReplicationController:
        """Send the controller's manifest to the API server; errors propagate."""
        manifest = self.cluster_client.update(ResourceKind.REPLICATION_CONTROLLER, rc.raw)
        return ReplicationController.from_manifest(manifest)
