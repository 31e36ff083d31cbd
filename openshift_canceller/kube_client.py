"""
OpenShift client for deployment operations.

Two transports share the ClusterClient interface: the kubernetes REST
client and the ``oc`` command line binary.
"""
import json
import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import urllib3
from kubernetes import client
from kubernetes.client.rest import ApiException

from .errors import ClusterUpdateError
from .kube_types import ResourceKind

logger = logging.getLogger(__name__)

DC_GROUP = "apps.openshift.io"
DC_VERSION = "v1"
DC_PLURAL = "deploymentconfigs"

TRANSPORTS = ("auto", "rest", "cli")


def _oc_path() -> str:
    entries = [os.path.expanduser("~/.local/bin"), os.environ.get("PATH", "")]
    return os.pathsep.join(entry for entry in entries if entry and not entry.startswith("~"))


class ClusterClient(ABC):
    """Transport-agnostic access to the cluster API."""

    @abstractmethod
    def get(self, kind: ResourceKind, name: str, namespace: str) -> Optional[Dict[str, Any]]:
        """Return the resource manifest, or None if it cannot be retrieved."""

    @abstractmethod
    def update(self, kind: ResourceKind, manifest: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the resource with ``manifest``; raises ClusterUpdateError."""


class RestClusterClient(ClusterClient):
    """Cluster client backed by the kubernetes python client."""

    def __init__(self, api_url: str, auth_token: str | None = None, verify_tls: bool = True,
                 ca_cert: str | None = None, timeout: int = 30):
        """
        Initialize the REST client.

        Args:
            api_url: Cluster API endpoint, e.g. https://api.example.com:6443
            auth_token: Bearer token (optional)
            verify_tls: Verify the server certificate
            ca_cert: Path to a CA bundle (optional)
            timeout: Request timeout in seconds
        """
        self.api_url = api_url
        self.timeout = timeout

        configuration = client.Configuration()
        configuration.host = api_url.rstrip("/")
        configuration.verify_ssl = verify_tls
        if ca_cert:
            configuration.ssl_ca_cert = ca_cert
        if auth_token:
            configuration.api_key = {"authorization": auth_token}
            configuration.api_key_prefix = {"authorization": "Bearer"}

        self.api_client = client.ApiClient(configuration)
        self.v1 = client.CoreV1Api(self.api_client)
        self.custom = client.CustomObjectsApi(self.api_client)

    def ping(self) -> bool:
        """Single reachability probe against /version."""
        try:
            info = client.VersionApi(self.api_client).get_code(_request_timeout=self.timeout)
            logger.debug(f"Connected to {self.api_url} (server {info.git_version})")
            return True
        except (ApiException, urllib3.exceptions.HTTPError, OSError) as e:
            logger.error(f"❌ Cluster API {self.api_url} is not reachable: {e}")
            return False

    def get(self, kind: ResourceKind, name: str, namespace: str) -> Optional[Dict[str, Any]]:
        try:
            if kind == ResourceKind.DEPLOYMENT_CONFIG:
                return self.custom.get_namespaced_custom_object(
                    group=DC_GROUP,
                    version=DC_VERSION,
                    namespace=namespace,
                    plural=DC_PLURAL,
                    name=name,
                    _request_timeout=self.timeout,
                )
            if kind == ResourceKind.REPLICATION_CONTROLLER:
                rc = self.v1.read_namespaced_replication_controller(
                    name=name,
                    namespace=namespace,
                    _request_timeout=self.timeout,
                )
                return self.api_client.sanitize_for_serialization(rc)
        except ApiException as e:
            if e.status == 404:
                logger.info(f"{kind.value} {namespace}/{name} not found")
            else:
                logger.error(f"Failed to get {kind.value} {namespace}/{name}: {e.status} {e.reason}")
            return None
        except (urllib3.exceptions.HTTPError, OSError) as e:
            logger.error(f"Failed to get {kind.value} {namespace}/{name}: {e}")
            return None
        raise ValueError(f"Unsupported resource kind: {kind}")

    def update(self, kind: ResourceKind, manifest: Dict[str, Any]) -> Dict[str, Any]:
        if kind != ResourceKind.REPLICATION_CONTROLLER:
            raise ValueError(f"Unsupported resource kind for update: {kind}")
        metadata = manifest.get("metadata") or {}
        name = metadata.get("name", "")
        namespace = metadata.get("namespace", "")
        try:
            rc = self.v1.replace_namespaced_replication_controller(
                name=name,
                namespace=namespace,
                body=manifest,
                _request_timeout=self.timeout,
            )
        except ApiException as e:
            logger.error(f"❌ Failed to update {kind.value} {namespace}/{name}: {e.status} {e.reason}")
            raise ClusterUpdateError(kind.value, name, namespace, f"{e.status} {e.reason}") from e
        except (urllib3.exceptions.HTTPError, OSError) as e:
            logger.error(f"❌ Failed to update {kind.value} {namespace}/{name}: {e}")
            raise ClusterUpdateError(kind.value, name, namespace, str(e)) from e

        logger.info(f"✅ Updated {kind.value} {namespace}/{name}")
        return self.api_client.sanitize_for_serialization(rc)


class ExecClusterClient(ClusterClient):
    """Cluster client that shells out to the ``oc`` binary."""

    OC_KINDS = {
        ResourceKind.DEPLOYMENT_CONFIG: "deploymentconfig",
        ResourceKind.REPLICATION_CONTROLLER: "replicationcontroller",
    }

    def __init__(self, api_url: str | None = None, auth_token: str | None = None,
                 oc_binary: str = "oc", verify_tls: bool = True,
                 ca_cert: str | None = None, timeout: int = 30):
        self.api_url = api_url
        self.auth_token = auth_token
        self.oc_binary = oc_binary
        self.verify_tls = verify_tls
        self.ca_cert = ca_cert
        self.timeout = timeout

    def _global_args(self) -> List[str]:
        args = []
        if self.api_url:
            args.append(f"--server={self.api_url}")
        if self.auth_token:
            args.append(f"--token={self.auth_token}")
        if not self.verify_tls:
            args.append("--insecure-skip-tls-verify=true")
        elif self.ca_cert:
            args.append(f"--certificate-authority={self.ca_cert}")
        args.append(f"--request-timeout={self.timeout}s")
        return args

    def _run(self, args: List[str], stdin: str | None = None) -> subprocess.CompletedProcess:
        # Configure environment for oc
        env = os.environ.copy()
        env["PATH"] = _oc_path()

        command = [self.oc_binary, *args, *self._global_args()]
        logger.debug(f"Running {self.oc_binary} {' '.join(args)}")
        return subprocess.run(
            command,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            env=env,
        )

    def get(self, kind: ResourceKind, name: str, namespace: str) -> Optional[Dict[str, Any]]:
        oc_kind = self.OC_KINDS.get(kind)
        if oc_kind is None:
            raise ValueError(f"Unsupported resource kind: {kind}")
        try:
            result = self._run(["get", oc_kind, name, "-n", namespace, "-o", "json"])
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.error(f"Failed to get {kind.value} {namespace}/{name}: {e}")
            return None

        if result.returncode != 0:
            if "NotFound" in result.stderr:
                logger.info(f"{kind.value} {namespace}/{name} not found")
            else:
                logger.error(f"Failed to get {kind.value} {namespace}/{name}: {result.stderr.strip()}")
            return None

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            logger.error(f"Could not parse {self.oc_binary} output for {kind.value} {namespace}/{name}: {e}")
            return None

    def update(self, kind: ResourceKind, manifest: Dict[str, Any]) -> Dict[str, Any]:
        if kind != ResourceKind.REPLICATION_CONTROLLER:
            raise ValueError(f"Unsupported resource kind for update: {kind}")
        metadata = manifest.get("metadata") or {}
        name = metadata.get("name", "")
        namespace = metadata.get("namespace", "")
        try:
            result = self._run(["replace", "-f", "-", "-n", namespace, "-o", "json"],
                               stdin=json.dumps(manifest))
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.error(f"❌ Failed to update {kind.value} {namespace}/{name}: {e}")
            raise ClusterUpdateError(kind.value, name, namespace, str(e)) from e

        if result.returncode != 0:
            logger.error(f"❌ Failed to update {kind.value} {namespace}/{name}: {result.stderr.strip()}")
            raise ClusterUpdateError(kind.value, name, namespace, result.stderr.strip())

        logger.info(f"✅ Updated {kind.value} {namespace}/{name}")
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError:
            # oc accepted the update but printed something other than JSON
            return manifest


def create_client(api_url: str | None, auth_token: str | None = None, transport: str = "auto",
                  oc_binary: str = "oc", verify_tls: bool = True, ca_cert: str | None = None,
                  timeout: int = 30) -> Optional[ClusterClient]:
    """
    Get a cluster client (sometimes REST, sometimes exec of the oc command).

    Args:
        api_url: Cluster API endpoint; blank means the current oc context
        auth_token: Bearer token
        transport: "auto", "rest" or "cli"
        oc_binary: oc executable for the cli transport
        verify_tls: Verify the server certificate
        ca_cert: CA bundle path
        timeout: Request timeout in seconds

    Returns:
        A ClusterClient, or None when no connection could be obtained
    """
    transport = (transport or "auto").lower()
    if transport not in TRANSPORTS:
        logger.error(f"❌ Unsupported transport: {transport}")
        return None

    is_http = bool(api_url) and urlparse(api_url).scheme in ("http", "https")

    if transport == "auto":
        if is_http:
            transport = "rest"
        elif not api_url:
            transport = "cli"
        else:
            logger.error(f"❌ Cannot choose a transport for endpoint: {api_url}")
            return None

    if transport == "rest":
        if not is_http or not urlparse(api_url).netloc:
            logger.error(f"❌ REST transport needs an http(s) endpoint, got: {api_url!r}")
            return None
        rest_client = RestClusterClient(api_url, auth_token, verify_tls=verify_tls,
                                        ca_cert=ca_cert, timeout=timeout)
        if not rest_client.ping():
            return None
        logger.info(f"✅ REST client initialized for {api_url}")
        return rest_client

    if shutil.which(oc_binary, path=_oc_path()) is None:
        logger.error(f"❌ {oc_binary} binary not found on PATH")
        return None
    logger.info(f"✅ {oc_binary} client initialized for {api_url or 'current context'}")
    return ExecClusterClient(api_url or None, auth_token, oc_binary=oc_binary,
                             verify_tls=verify_tls, ca_cert=ca_cert, timeout=timeout)
