"""
Post-build action: cancel the in-progress OpenShift deployment.
"""
import logging
import sys
from typing import Callable, Mapping, Optional, TextIO

from .adapters import ResourceAccessor
from .canceller import CancelStatus, cancel_latest_rollout
from .config import expand_env, parse_bool
from .kube_client import ClusterClient, create_client
from .kube_types import BuildResult

logger = logging.getLogger(__name__)

DISPLAY_NAME = "Cancel OpenShift Deployment"

ClientFactory = Callable[..., Optional[ClusterClient]]


class BuildListener:
    """Line-oriented build log."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def println(self, line: str = "") -> None:
        self.stream.write(f"{line}\n")
        self.stream.flush()
        logger.debug(line.strip())


class OpenShiftDeployCanceller:
    """Cancels the latest rollout of a deployment config, whatever the build result."""

    def __init__(self, api_url: str = "", dep_cfg: str = "frontend", namespace: str = "",
                 auth_token: str = "", verbose: str = "false", transport: str = "auto",
                 oc_binary: str = "oc", verify_tls: bool = True, ca_cert: Optional[str] = None,
                 request_timeout: int = 30):
        self.api_url = api_url
        self.dep_cfg = dep_cfg
        self.namespace = namespace
        self.auth_token = auth_token
        self.verbose = verbose
        self.transport = transport
        self.oc_binary = oc_binary
        self.verify_tls = verify_tls
        self.ca_cert = ca_cert
        self.request_timeout = request_timeout

    def perform(self, build_result: Optional[BuildResult], listener: BuildListener,
                env: Optional[Mapping[str, str]] = None,
                client_factory: Optional[ClientFactory] = None) -> bool:
        """Expand build variables in the fields, then run the action."""
        expanded = OpenShiftDeployCanceller(
            api_url=expand_env(self.api_url, env),
            dep_cfg=expand_env(self.dep_cfg, env),
            namespace=expand_env(self.namespace, env),
            auth_token=expand_env(self.auth_token, env),
            verbose=self.verbose,
            transport=self.transport,
            oc_binary=self.oc_binary,
            verify_tls=self.verify_tls,
            ca_cert=self.ca_cert,
            request_timeout=self.request_timeout,
        )
        return expanded.run(build_result, listener, client_factory=client_factory)

    def run(self, build_result: Optional[BuildResult], listener: BuildListener,
            client_factory: Optional[ClientFactory] = None) -> bool:
        """
        Run the cancellation.

        Args:
            build_result: Result of the job so far (None if unknown)
            listener: Build log sink
            client_factory: Builds the cluster client; create_client if not given

        Returns:
            True if the rollout is terminal or was cancelled, False otherwise

        Raises:
            ClusterUpdateError: the cancel annotations could not be written
        """
        chatty = parse_bool(self.verbose)

        # cleanup of rogue rollouts happens whether or not the build succeeded
        if build_result is not None and build_result.is_worse_than(BuildResult.SUCCESS):
            if chatty:
                listener.println("\nOpenShiftDeployCanceller build did not succeed")
        elif chatty:
            result_name = build_result.name if build_result is not None else None
            listener.println(f"\nOpenShiftDeployCanceller build succeeded / result {result_name}")

        listener.println(
            f'\n\nStarting the "{DISPLAY_NAME}" action for deployment config '
            f'"{self.dep_cfg}" from the project "{self.namespace}".'
        )

        factory = client_factory or create_client
        cluster_client = factory(
            self.api_url,
            self.auth_token,
            transport=self.transport,
            oc_binary=self.oc_binary,
            verify_tls=self.verify_tls,
            ca_cert=self.ca_cert,
            timeout=self.request_timeout,
        )
        if cluster_client is None:
            if chatty:
                listener.println(
                    f'\n\nExiting "{DISPLAY_NAME}" unsuccessfully; a client connection to '
                    f'"{self.api_url}" could not be obtained.'
                )
            return False

        outcome = cancel_latest_rollout(ResourceAccessor(cluster_client), self.dep_cfg, self.namespace)

        if chatty:
            listener.println(self._exit_message(outcome.status, outcome.rollout, outcome.phase))
        return outcome.success

    def _exit_message(self, status: CancelStatus, rollout: Optional[str], phase: Optional[str]) -> str:
        if status == CancelStatus.CONFIG_NOT_FOUND:
            return (f'\n\nExiting "{DISPLAY_NAME}" unsuccessfully; the deployment config '
                    f'"{self.dep_cfg}" could not be retrieved.')
        if status == CancelStatus.ROLLOUT_NOT_FOUND:
            return (f'\n\nExiting "{DISPLAY_NAME}" unsuccessfully; the latest deployment '
                    f'"{rollout}" could not be retrieved.')
        if status == CancelStatus.NOT_IN_PROGRESS:
            return (f'\n\nExiting "{DISPLAY_NAME}" successfully; the deployment "{rollout}" '
                    f'is not in-progress; the phase is:  "{phase}".')
        return f'\n\nExiting "{DISPLAY_NAME}" successfully; the deployment "{rollout}" has been cancelled.'
