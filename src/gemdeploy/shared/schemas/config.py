"""Deployment configuration schema."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .deployment import DeploymentTarget


class DeployConfig(BaseModel):
    """Immutable settings for a single deployment run."""

    model_config = ConfigDict(frozen=True)

    platform: DeploymentTarget = Field(
        DeploymentTarget.MANAGED_PLATFORM, description="gae or gke"
    )
    project_id: str = Field(..., min_length=1, description="GCP project id")
    credentials_path: Path | None = Field(
        None, description="Service account credentials file copied into the image"
    )
    sql_instances: str = Field(
        "", description="Cloud SQL instance connection names for the proxy sidecar"
    )
    server_path: Path = Field(..., description="Directory holding the gemserver files")

    @field_validator("platform", mode="before")
    @classmethod
    def _normalize_platform(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def app_descriptor(self) -> Path:
        """App Engine descriptor submitted on the managed platform."""
        return self.server_path / "app.yaml"
