"""Exceptions raised while deploying the gemserver."""

from ..shared.schemas import CommandResult


class DeployError(Exception):
    """Base class for every fatal deployment failure."""
    pass


class CommandFailed(DeployError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, message: str, result: CommandResult | None = None):
        self.result = result
        if result is not None and result.stderr.strip():
            message = f"{message}: {result.stderr.strip()}"
        super().__init__(message)


class CommandNotFound(DeployError):
    """Raised when an external tool is not installed or not in PATH."""
    pass


class CommandTimeout(DeployError):
    """Raised when an external command runs past its timeout."""
    pass


class ConfigurationError(DeployError):
    """Raised when the deployment configuration cannot be loaded."""
    pass


class CredentialsMissing(DeployError):
    """Raised when the service account credentials file is unset or unreadable."""
    pass


class ManifestRenderError(DeployError):
    """Raised when a template cannot be read or has an unresolved placeholder."""
    pass


class ManifestValidationError(DeployError):
    """Raised when a rendered manifest is not a usable Kubernetes document."""
    pass


class ClusterInputError(DeployError):
    """Raised when the operator supplies an empty cluster name or zone."""
    pass


class ManagedDeployFailed(CommandFailed):
    """Raised when `gcloud app deploy` fails."""
    pass


class BuildFailed(CommandFailed):
    """Raised when `docker build` fails."""
    pass


class PushFailed(CommandFailed):
    """Raised when pushing the image to the registry fails."""
    pass


class ClusterCreationFailed(CommandFailed):
    """Raised when the GKE cluster cannot be created."""
    pass


class ClusterCredentialsFailed(CommandFailed):
    """Raised when kubectl credentials for the cluster cannot be fetched."""
    pass


class WorkloadSubmitFailed(CommandFailed):
    """Raised when the deployment cannot be created or exposed."""
    pass


class ReadinessTimeout(DeployError):
    """Raised when a condition does not become true before the deadline."""

    def __init__(self, elapsed: float, timeout: float):
        self.elapsed = elapsed
        self.timeout = timeout
        super().__init__(
            f"Timeout after trying for {timeout} seconds ({elapsed:.1f}s elapsed)"
        )
