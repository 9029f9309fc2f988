"""Shared Pydantic schemas for gemdeploy.

- deployment: targets, image references, clusters and pod rows
- config: the deployment configuration value
"""

from .config import DeployConfig
from .deployment import (
    REGISTRY_HOST,
    ClusterDescriptor,
    CommandResult,
    DeploymentTarget,
    ImageReference,
    PodRecord,
)

__all__ = [
    "DeployConfig",
    "DeploymentTarget",
    "ImageReference",
    "ClusterDescriptor",
    "CommandResult",
    "PodRecord",
    "REGISTRY_HOST",
]
