"""Data schemas for deployment targets, images, clusters and pods."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Registry host images are pushed to
REGISTRY_HOST = "us.gcr.io"


class DeploymentTarget(str, Enum):
    """Where the gemserver is deployed."""

    MANAGED_PLATFORM = "gae"
    CLUSTER_PLATFORM = "gke"


class ImageReference(BaseModel):
    """A docker image on Google Container Registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Image name (e.g., gemserver-image)")
    project_id: str = Field(..., description="GCP project owning the registry")
    registry_host: str = Field(REGISTRY_HOST, description="Registry host name")

    @property
    def location(self) -> str:
        """Registry-qualified image location."""
        return f"{self.registry_host}/{self.project_id}/{self.name}"

    @property
    def artifacts_path(self) -> str:
        """Cloud Storage path backing the pushed image."""
        return (
            f"gs://us.artifacts.{self.project_id}.appspot.com"
            f"/containers/repositories/library/{self.name}/"
        )


class ClusterDescriptor(BaseModel):
    """A GKE cluster identified by name and zone."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Cluster name")
    zone: str = Field(..., description="Compute zone (e.g., us-central1-a)")


class PodRecord(BaseModel):
    """One row of `kubectl get pods` output."""

    name: str
    ready: str | None = None
    status: str | None = None
    restarts: str | None = None
    age: str | None = None


class CommandResult(BaseModel):
    """Captured outcome of an external command."""

    model_config = ConfigDict(frozen=True)

    args: tuple[str, ...]
    stdout: str = ""
    stderr: str = ""
    exit_status: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)
