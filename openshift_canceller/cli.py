#!/usr/bin/env python3
"""
Command line entry point, for running the action as a pipeline step.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .action import BuildListener
from .config import load_settings
from .errors import ClusterUpdateError
from .kube_client import TRANSPORTS
from .kube_types import BuildResult
from .logging_config import setup_logging
from .registry import ValidationKind, get_descriptor

logger = logging.getLogger(__name__)

ACTION_NAME = "openshift-deploy-canceller"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openshift-deploy-canceller",
        description="Cancel the in-progress rollout of an OpenShift deployment config",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Settings not given on the command line are read from OPENSHIFT_* environment
variables (and from .env). Examples:

  # Cancel the latest rollout of "frontend" in project "myproject"
  openshift-deploy-canceller --api-url https://api.example.com:6443 \\
      --namespace myproject --token "$TOKEN" --verbose

  # Use the current oc login context
  openshift-deploy-canceller --transport cli --namespace myproject --dep-cfg backend
""",
    )
    parser.add_argument("--api-url", help="Cluster API endpoint")
    parser.add_argument("--dep-cfg", help="Deployment config name (default: frontend)")
    parser.add_argument("--namespace", "-n", help="Project / namespace")
    parser.add_argument("--token", dest="auth_token", help="Bearer token")
    parser.add_argument("--verbose", "-v", action="store_true", default=None,
                        help="Print progress and outcome lines")
    parser.add_argument("--transport", choices=TRANSPORTS, help="Client transport")
    parser.add_argument("--oc-binary", help="oc executable for the cli transport")
    parser.add_argument("--insecure", action="store_true", default=None,
                        help="Skip TLS verification of the API server")
    parser.add_argument("--ca-cert", help="CA bundle for the API server")
    parser.add_argument("--timeout", type=int, help="Request timeout in seconds")
    parser.add_argument("--build-result", choices=[result.name for result in BuildResult],
                        help="Result of the job so far")
    parser.add_argument("--env-file", help="Build environment file used for $VAR expansion")
    parser.add_argument("--settings-file", help="Settings .env file")
    parser.add_argument("--log-level", help="Diagnostic log level: info|debug|warning")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.env_file:
        load_dotenv(args.env_file, override=False)

    try:
        settings = load_settings(
            env_file=args.settings_file,
            API_URL=args.api_url,
            DEP_CFG=args.dep_cfg,
            NAMESPACE=args.namespace,
            AUTH_TOKEN=args.auth_token,
            VERBOSE="true" if args.verbose else None,
            TRANSPORT=args.transport,
            OC_BINARY=args.oc_binary,
            VERIFY_TLS=False if args.insecure else None,
            CA_CERT=args.ca_cert,
            REQUEST_TIMEOUT_SECS=args.timeout,
            LOG_LEVEL=args.log_level,
        )
    except ValidationError as e:
        print(f"Configuration invalid: {e}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(settings.LOG_LEVEL)

    descriptor = get_descriptor(ACTION_NAME)
    checks = descriptor.validate({
        "api_url": settings.API_URL,
        "dep_cfg": settings.DEP_CFG,
        "namespace": settings.NAMESPACE,
    })
    for field, check in checks.items():
        if check.kind == ValidationKind.WARNING:
            logger.warning(f"⚠️ {field}: {check.message}")
        elif check.kind == ValidationKind.ERROR:
            logger.error(f"❌ {field}: {check.message}")
    if any(check.kind == ValidationKind.ERROR for check in checks.values()):
        return EXIT_ERROR

    action = descriptor.new_instance(
        api_url=settings.API_URL,
        dep_cfg=settings.DEP_CFG,
        namespace=settings.NAMESPACE,
        auth_token=settings.AUTH_TOKEN,
        verbose=settings.VERBOSE,
        transport=settings.TRANSPORT,
        oc_binary=settings.OC_BINARY,
        verify_tls=settings.VERIFY_TLS,
        ca_cert=settings.CA_CERT,
        request_timeout=settings.REQUEST_TIMEOUT_SECS,
    )
    build_result = BuildResult[args.build_result] if args.build_result else None

    try:
        succeeded = action.perform(build_result, BuildListener(), env=os.environ)
    except ClusterUpdateError as e:
        logger.error(f"❌ {e}", exc_info=True)
        print(f"Error running {descriptor.display_name}: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK if succeeded else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
