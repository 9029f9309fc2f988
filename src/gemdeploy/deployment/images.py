"""Docker image build and push with guaranteed cleanup.

Both pipelines are context managers. The built image is removed from the
local docker cache and the pushed image is deleted from the registry bucket
when the `with` block exits, whatever the outcome. Cleanup failures are
logged and never replace the error that ended the block.
"""

import logging
import shutil
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from ..shared.schemas import ImageReference
from .errors import BuildFailed, CredentialsMissing, DeployError, PushFailed
from .runner import CommandRunner
from .templater import DOCKERFILE, DOCKERFILE_TEMPLATE, Templater

logger = logging.getLogger(__name__)


class ImagePipeline:
    """Build, push and clean up the gemserver image."""

    def __init__(
        self,
        runner: CommandRunner,
        credentials_path: str | Path | None,
        templater: Templater | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            runner: Command runner used for docker and gsutil
            credentials_path: Service account file baked into the image
            templater: Templater for the Dockerfile (default: new Templater)
        """
        self.runner = runner
        self.credentials_path = Path(credentials_path) if credentials_path else None
        self.templater = templater or Templater()

    def _copy_credentials(self, build_dir: Path) -> str:
        """Copy the credentials file into the build context and return its name."""
        if self.credentials_path is None:
            raise CredentialsMissing("Credentials path is not set (GEMSERVER_CREDS)")
        if not self.credentials_path.is_file():
            raise CredentialsMissing(f"Credentials file not found: {self.credentials_path}")

        dest = build_dir / self.credentials_path.name
        try:
            if not (dest.exists() and dest.samefile(self.credentials_path)):
                shutil.copyfile(self.credentials_path, dest)
        except OSError as e:
            raise CredentialsMissing(f"Cannot copy credentials {self.credentials_path}: {e}")

        return self.credentials_path.name

    def _ensure_dockerfile(self, build_dir: Path, credentials_name: str) -> None:
        dockerfile = build_dir / DOCKERFILE
        if dockerfile.is_file():
            logger.info("The Dockerfile file already exists.")
            return
        self.templater.render(
            build_dir / DOCKERFILE_TEMPLATE,
            dockerfile,
            {"service_account_name": f"/app/{credentials_name}"},
        )

    def _release(self, args: Sequence[str], description: str) -> None:
        """Run a cleanup command, logging instead of raising on failure."""
        logger.info(f"Cleaning up: {description}")
        try:
            result = self.runner.run(args)
        except (DeployError, OSError) as e:
            logger.warning(f"Cleanup failed ({description}): {e}")
            return
        if not result.ok:
            logger.warning(
                f"Cleanup failed ({description}): exit {result.exit_status} "
                f"{result.stderr.strip()}"
            )

    @contextmanager
    def built_image(
        self,
        build_dir: str | Path,
        image_name: str,
        project_id: str,
    ) -> Iterator[ImageReference]:
        """
        Prepare the build context, build the image and remove it on exit.

        Args:
            build_dir: Directory containing the gemserver files
            image_name: Name of the docker image
            project_id: GCP project whose registry hosts the image

        Yields:
            Reference to the built image

        Raises:
            CredentialsMissing: If the credentials file is unset or unreadable
            ManifestRenderError: If the Dockerfile cannot be rendered
            BuildFailed: If docker build fails
        """
        build_dir = Path(build_dir)
        image = ImageReference(name=image_name, project_id=project_id)

        credentials_name = self._copy_credentials(build_dir)
        self._ensure_dockerfile(build_dir, credentials_name)

        try:
            logger.info(f"Building image {image_name} at {image.location}")
            result = self.runner.run(["docker", "build", "-t", image.location, str(build_dir)])
            if not result.ok:
                raise BuildFailed(f"Failed to build image {image.location}", result)
            yield image
        finally:
            self._release(["docker", "rmi", image.location], f"docker rmi {image.location}")

    @contextmanager
    def pushed_image(self, image: ImageReference) -> Iterator[ImageReference]:
        """
        Push an image to the registry and delete it from the registry on exit.

        Args:
            image: The locally built image

        Yields:
            The pushed image

        Raises:
            PushFailed: If docker push fails
        """
        try:
            logger.info(f"Pushing {image.name} to {image.location}")
            result = self.runner.run(["docker", "push", image.location])
            if not result.ok:
                raise PushFailed(f"Failed to push image {image.location}", result)
            yield image
        finally:
            self._release(["gsutil", "rm", "-r", image.artifacts_path], f"gsutil rm -r {image.artifacts_path}")
