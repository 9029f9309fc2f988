"""Deployment of the gemserver to Google App Engine Flex or Google Kubernetes Engine."""

import json
import logging
import time
from collections.abc import Callable

from ..shared.schemas import ClusterDescriptor, DeployConfig, DeploymentTarget, ImageReference
from .cluster import ClusterProvisioner, ask_cluster
from .errors import ManagedDeployFailed, WorkloadSubmitFailed
from .images import ImagePipeline
from .readiness import PodStatusChecker
from .runner import CommandRunner
from .templater import MANIFEST, MANIFEST_TEMPLATE, Templater
from .validator import ManifestValidator

logger = logging.getLogger(__name__)

# The name of the gemserver docker image
IMAGE_NAME = "gemserver-image"

# Port the gemserver listens on behind the load balancer
SERVICE_PORT = 8080

# Seconds to wait for the gemserver pod to run
POD_TIMEOUT = 300


class Deployer:
    """
    Deploy the gemserver to the platform selected in the configuration.

    On gke the image is built and pushed, the cluster is created if needed,
    the deployment manifest is applied and exposed, and the call blocks until
    the gemserver pod runs. The local image and the registry copy are removed
    when the run ends, successfully or not.
    """

    def __init__(
        self,
        config: DeployConfig,
        runner: CommandRunner | None = None,
        cluster: ClusterDescriptor | None = None,
        cluster_prompt: Callable[[], ClusterDescriptor] = ask_cluster,
        pod_timeout: float = POD_TIMEOUT,
        poll_interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the deployer.

        Args:
            config: Deployment configuration
            runner: Command runner (default: CommandRunner())
            cluster: Target cluster; if None the operator is prompted
            cluster_prompt: Callable asking the operator for the cluster
            pod_timeout: Seconds to wait for the gemserver pod
            poll_interval: Seconds between pod status checks
            sleep: Sleep function used while polling
            clock: Monotonic time source used while polling
        """
        self.config = config
        self.runner = runner or CommandRunner()
        self.cluster = cluster
        self.cluster_prompt = cluster_prompt
        self.pod_timeout = pod_timeout
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.clock = clock

        self.templater = Templater()
        self.validator = ManifestValidator()
        self.images = ImagePipeline(self.runner, config.credentials_path, self.templater)
        self.provisioner = ClusterProvisioner(self.runner)

    def deploy(self) -> None:
        """
        Deploy the gemserver.

        Raises:
            DeployError: On the first fatal failure of any stage
        """
        logger.info(f"Deploying gemserver for project {self.config.project_id} "
                    f"to {self.config.platform.value}")
        if self.config.platform == DeploymentTarget.CLUSTER_PLATFORM:
            self.deploy_to_gke()
        else:
            self.deploy_to_gae()

    def deploy_to_gae(self) -> None:
        """Deploy the gemserver to Google App Engine Flex."""
        result = self.runner.run(
            ["gcloud", "app", "deploy", str(self.config.app_descriptor), "-q"]
        )
        if not result.ok:
            raise ManagedDeployFailed("gcloud app deploy failed", result)
        logger.info("The gemserver has been deployed to GAE!")

    def deploy_to_gke(self) -> None:
        """Build and push the image, then run it on Google Kubernetes Engine."""
        with self.images.built_image(
            self.config.server_path, IMAGE_NAME, self.config.project_id
        ) as image:
            with self.images.pushed_image(image) as pushed:
                self.deploy_gke_image(pushed)

    def sql_proxy_command(self) -> list[str]:
        """Command line of the Cloud SQL proxy sidecar."""
        return [
            "/cloud_sql_proxy",
            "--dir=/cloudsql",
            f"-instances={self.config.sql_instances}",
            "-credential_file=/secrets/cloudsql/credentials.json",
        ]

    def update_gke_deploy_config(self, image: ImageReference) -> None:
        """Render deployment.yaml unless the operator already provided one."""
        server_path = self.config.server_path
        self.templater.render(
            server_path / MANIFEST_TEMPLATE,
            server_path / MANIFEST,
            {
                "image_name": image.name,
                "image_location": image.location,
                "sql_proxy_command": json.dumps(self.sql_proxy_command()),
            },
        )

    def deploy_gke_image(self, image: ImageReference) -> None:
        """
        Run a pushed image as a service on GKE and wait for it to start.

        Args:
            image: The image pushed to Google Container Registry
        """
        deploy_file = self.config.server_path / MANIFEST

        self.update_gke_deploy_config(image)
        self.validator.validate(deploy_file)

        cluster = self.cluster or self.cluster_prompt()
        self.provisioner.ensure_cluster(cluster.name, cluster.zone)

        logger.info("Creating deployment")
        result = self.runner.run(["kubectl", "apply", "-f", str(deploy_file)])
        if not result.ok:
            raise WorkloadSubmitFailed(f"Failed to apply {deploy_file}", result)

        self.expose(image.name)

        checker = PodStatusChecker(self.runner, image.name)
        checker.wait(
            timeout=self.pod_timeout,
            interval=self.poll_interval,
            sleep=self.sleep,
            clock=self.clock,
        )

        logger.info("The gemserver has been deployed to GKE!")

    def expose(self, deployment_name: str) -> None:
        """Expose the deployment through a LoadBalancer service."""
        logger.info("Exposing nodes")
        result = self.runner.run([
            "kubectl", "expose", "deployment", deployment_name,
            "--type", "LoadBalancer",
            "--port", str(SERVICE_PORT),
        ])
        if result.ok:
            return
        if "AlreadyExists" in result.stderr:
            logger.info(f"Service {deployment_name} already exposed")
            return
        raise WorkloadSubmitFailed(f"Failed to expose deployment {deployment_name}", result)
