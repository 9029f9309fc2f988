"""Command line entry point for deploying the gemserver.

Usage:
    gemdeploy deploy [--config gemdeploy.yml] [--cluster-name NAME --zone ZONE]
    gemdeploy init [--config gemdeploy.yml]
"""

import argparse
import sys
from pathlib import Path

from .configuration import ConfigurationService
from .deployment import Deployer, DeployError, ReadinessTimeout, Templater
from .deployment.deployer import POD_TIMEOUT
from .logging_config import get_logger, setup_logging
from .shared.schemas import ClusterDescriptor

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gemdeploy",
        description="Deploy a gemserver to Google App Engine Flex or Google Kubernetes Engine.",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: $GEMSERVER_CONFIG or gemdeploy.yml)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy = subparsers.add_parser("deploy", help="Deploy the gemserver")
    deploy.add_argument("--cluster-name", default=None, help="GKE cluster name (prompted if omitted)")
    deploy.add_argument("--zone", default=None, help="GKE cluster zone (prompted if omitted)")
    deploy.add_argument(
        "--timeout",
        type=float,
        default=POD_TIMEOUT,
        help=f"Seconds to wait for the gemserver pod (default: {POD_TIMEOUT})",
    )

    subparsers.add_parser("init", help="Install the base Dockerfile and deployment templates")

    return parser


def run_deploy(args: argparse.Namespace) -> int:
    config = ConfigurationService().load(args.config)

    cluster = None
    if args.cluster_name or args.zone:
        if not (args.cluster_name and args.zone):
            logger.error("--cluster-name and --zone must be given together")
            return 2
        cluster = ClusterDescriptor(name=args.cluster_name, zone=args.zone)

    Deployer(config, cluster=cluster, pod_timeout=args.timeout).deploy()
    return 0


def run_init(args: argparse.Namespace) -> int:
    config = ConfigurationService().load(args.config)
    copied = Templater().install_base_templates(config.server_path)
    logger.info(f"Installed {len(copied)} template(s) into {config.server_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(log_file=args.log_file, debug=args.debug)

    commands = {"deploy": run_deploy, "init": run_init}
    try:
        return commands[args.command](args)
    except ReadinessTimeout as e:
        logger.error(f"Deployment timed out after {e.elapsed:.1f}s (limit {e.timeout}s)")
        return 1
    except DeployError as e:
        logger.error(f"Deployment failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
