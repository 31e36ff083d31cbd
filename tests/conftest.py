"""
Pytest configuration and fixtures for the canceller tests.
"""

import copy
import io

import pytest

from openshift_canceller.action import BuildListener
from openshift_canceller.adapters import ResourceAccessor
from openshift_canceller.errors import ClusterUpdateError
from openshift_canceller.kube_client import ClusterClient
from openshift_canceller.kube_types import PHASE_ANNOTATION, ResourceKind


def dc_manifest(name="frontend", namespace="ns1", latest_version=3):
    return {
        "apiVersion": "apps.openshift.io/v1",
        "kind": "DeploymentConfig",
        "metadata": {"name": name, "namespace": namespace},
        "status": {"latestVersion": latest_version},
    }


def rc_manifest(name="frontend-3", namespace="ns1", phase="Running", dep_cfg="frontend"):
    annotations = {"openshift.io/deployment-config.name": dep_cfg}
    if phase is not None:
        annotations[PHASE_ANNOTATION] = phase
    return {
        "apiVersion": "v1",
        "kind": "ReplicationController",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": "1001",
            "annotations": annotations,
        },
        "spec": {"replicas": 1},
    }


class FakeClusterClient(ClusterClient):
    """In-memory cluster that records every call."""

    def __init__(self, resources=None, fail_update=False, cancel_on_update=False):
        self.resources = resources or {}
        self.fail_update = fail_update
        self.cancel_on_update = cancel_on_update
        self.get_calls = []
        self.update_calls = []

    def add(self, kind, manifest):
        metadata = manifest["metadata"]
        self.resources[(kind, metadata["namespace"], metadata["name"])] = manifest

    def get(self, kind, name, namespace):
        self.get_calls.append((kind, name, namespace))
        manifest = self.resources.get((kind, namespace, name))
        return copy.deepcopy(manifest) if manifest is not None else None

    def update(self, kind, manifest):
        self.update_calls.append((kind, copy.deepcopy(manifest)))
        metadata = manifest["metadata"]
        if self.fail_update:
            raise ClusterUpdateError(kind.value, metadata["name"], metadata["namespace"], "409 Conflict")
        stored = copy.deepcopy(manifest)
        if self.cancel_on_update:
            # the deployer reacts to the cancel request
            stored["metadata"]["annotations"][PHASE_ANNOTATION] = "Cancelled"
        self.add(kind, stored)
        return copy.deepcopy(stored)


@pytest.fixture
def cluster():
    """Cluster with frontend at version 3 and a running frontend-3 rollout."""
    fake = FakeClusterClient()
    fake.add(ResourceKind.DEPLOYMENT_CONFIG, dc_manifest())
    fake.add(ResourceKind.REPLICATION_CONTROLLER, rc_manifest())
    return fake


@pytest.fixture
def accessor(cluster):
    return ResourceAccessor(cluster)


@pytest.fixture
def build_log():
    return io.StringIO()


@pytest.fixture
def listener(build_log):
    return BuildListener(build_log)
