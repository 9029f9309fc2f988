"""GKE cluster provisioning.

Creates the cluster the gemserver runs on unless one with the same name and
zone already exists, then points kubectl at it.
"""

import logging
from collections.abc import Callable

from ..shared.schemas import ClusterDescriptor
from .errors import ClusterCreationFailed, ClusterCredentialsFailed, ClusterInputError
from .runner import CommandRunner

logger = logging.getLogger(__name__)

ZONES_URL = "https://cloud.google.com/compute/docs/regions-zones/regions-zones"


def parse_cluster_table(stdout: str) -> list[ClusterDescriptor]:
    """
    Parse `gcloud container clusters list` output.

    The first line is the column header (NAME LOCATION ...). Rows with fewer
    than two columns are ignored.

    Args:
        stdout: Raw command output

    Returns:
        Clusters in listing order
    """
    clusters = []
    for line in stdout.splitlines()[1:]:
        columns = line.split()
        if len(columns) < 2:
            continue
        clusters.append(ClusterDescriptor(name=columns[0], zone=columns[1]))
    return clusters


def ask_cluster(
    reader: Callable[[str], str] = input,
) -> ClusterDescriptor:
    """
    Prompt the operator for the cluster name and zone.

    Args:
        reader: Line reader taking a prompt (defaults to input)

    Returns:
        The requested cluster

    Raises:
        ClusterInputError: If the name or zone is empty, or input is closed
    """
    try:
        name = reader(
            "Enter the name of cluster. If it does not exist it will be created.\n"
        ).strip()
        zone = reader(
            f"Enter the zone of the cluster. Options can be found here: {ZONES_URL}\n"
        ).strip()
    except EOFError:
        raise ClusterInputError("No cluster name or zone given (input closed)")

    if not name or not zone:
        raise ClusterInputError("Cluster name and zone must not be empty")
    return ClusterDescriptor(name=name, zone=zone)


class ClusterProvisioner:
    """Create or reuse a GKE cluster and fetch its credentials."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def list_clusters(self) -> list[ClusterDescriptor]:
        """List the clusters of the active gcloud project."""
        result = self.runner.run(["gcloud", "container", "clusters", "list"])
        if not result.ok:
            logger.warning(f"Failed to list clusters: {result.stderr.strip()}")
            return []
        return parse_cluster_table(result.stdout)

    def cluster_exists(self, name: str, zone: str) -> bool:
        """Check if a cluster with this exact name and zone exists."""
        wanted = ClusterDescriptor(name=name, zone=zone)
        return wanted in self.list_clusters()

    def ensure_cluster(self, name: str, zone: str) -> bool:
        """
        Create the cluster if absent, then fetch its credentials.

        Args:
            name: Cluster name
            zone: Cluster zone

        Returns:
            True if the cluster was created, False if it already existed

        Raises:
            ClusterCreationFailed: If cluster creation fails
            ClusterCredentialsFailed: If the credentials cannot be fetched
        """
        created = False
        if self.cluster_exists(name, zone):
            logger.info(f"Cluster {name} already exists in {zone}")
        else:
            logger.info(f"Creating cluster {name} in {zone}...")
            result = self.runner.run(
                ["gcloud", "container", "clusters", "create", name, "--zone", zone]
            )
            if not result.ok:
                raise ClusterCreationFailed("Cluster creation error", result)
            created = True

        result = self.runner.run(
            ["gcloud", "container", "clusters", "get-credentials", name, "--zone", zone]
        )
        if not result.ok:
            raise ClusterCredentialsFailed(
                f"Failed to fetch credentials for cluster {name}", result
            )

        logger.info(f"kubectl configured for cluster {name} ({zone})")
        return created
