"""Deployment engine: image pipelines, cluster provisioning and readiness polling."""

from .cluster import ClusterProvisioner, ask_cluster, parse_cluster_table
from .deployer import IMAGE_NAME, Deployer
from .errors import (
    BuildFailed,
    ClusterCreationFailed,
    ClusterCredentialsFailed,
    ClusterInputError,
    CommandFailed,
    CommandNotFound,
    CommandTimeout,
    ConfigurationError,
    CredentialsMissing,
    DeployError,
    ManagedDeployFailed,
    ManifestRenderError,
    ManifestValidationError,
    PushFailed,
    ReadinessTimeout,
    WorkloadSubmitFailed,
)
from .images import ImagePipeline
from .readiness import PodStatusChecker, find_pod, parse_pod_table, wait_until
from .runner import CommandRunner
from .templater import Templater
from .validator import ManifestValidator

__all__ = [
    "Deployer",
    "IMAGE_NAME",
    "CommandRunner",
    "Templater",
    "ManifestValidator",
    "ImagePipeline",
    "ClusterProvisioner",
    "ask_cluster",
    "parse_cluster_table",
    "PodStatusChecker",
    "parse_pod_table",
    "find_pod",
    "wait_until",
    "DeployError",
    "CommandFailed",
    "CommandNotFound",
    "CommandTimeout",
    "ConfigurationError",
    "CredentialsMissing",
    "ManifestRenderError",
    "ManifestValidationError",
    "ClusterInputError",
    "ManagedDeployFailed",
    "BuildFailed",
    "PushFailed",
    "ClusterCreationFailed",
    "ClusterCredentialsFailed",
    "WorkloadSubmitFailed",
    "ReadinessTimeout",
]
