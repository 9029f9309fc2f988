"""Readiness polling for the deployed workload."""

import logging
import time
from collections.abc import Callable

from ..shared.schemas import PodRecord
from .errors import ReadinessTimeout
from .runner import CommandRunner

logger = logging.getLogger(__name__)

# Indicates that the pod has started correctly and the gemserver is running
VALID_POD_STATUS = "Running"

POD_COLUMNS = ("name", "ready", "status", "restarts", "age")


def wait_until(
    predicate: Callable[[], bool],
    timeout: float = 30,
    interval: float = 1.0,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> float:
    """
    Block until predicate returns True or the timeout elapses.

    Args:
        predicate: Zero-argument condition, evaluated once per interval
        timeout: Seconds to keep trying
        interval: Fixed delay between evaluations
        clock: Monotonic time source
        sleep: Sleep function

    Returns:
        Seconds elapsed until the predicate held

    Raises:
        ReadinessTimeout: If the predicate is still False after timeout seconds
    """
    started = clock()
    while True:
        if predicate():
            return clock() - started

        elapsed = clock() - started
        if elapsed > timeout:
            raise ReadinessTimeout(elapsed, timeout)

        sleep(interval)


def parse_pod_table(stdout: str) -> list[PodRecord]:
    """
    Parse `kubectl get pods` output into pod records.

    The header line is skipped; missing trailing columns are left as None.
    """
    pods = []
    for line in stdout.splitlines()[1:]:
        columns = line.split()
        if not columns:
            continue
        pods.append(PodRecord(**dict(zip(POD_COLUMNS, columns))))
    return pods


def find_pod(pods: list[PodRecord], name_fragment: str) -> PodRecord | None:
    """Return the first pod whose name contains name_fragment."""
    return next((pod for pod in pods if name_fragment in pod.name), None)


class PodStatusChecker:
    """Check whether the gemserver pod reports a running status."""

    def __init__(self, runner: CommandRunner, image_name: str):
        self.runner = runner
        self.image_name = image_name

    def current_pod(self) -> PodRecord | None:
        """Fetch a fresh pod listing and pick the first matching pod."""
        result = self.runner.run(["kubectl", "get", "pods"])
        if not result.ok:
            logger.warning(f"Failed to get pods: {result.stderr.strip()}")
            return None
        return find_pod(parse_pod_table(result.stdout), self.image_name)

    def is_running(self) -> bool:
        # First match only, other replicas are not inspected
        pod = self.current_pod()
        if pod is None:
            logger.debug(f"No pod matching {self.image_name} yet")
            return False
        logger.debug(f"Pod {pod.name}: {pod.status}")
        return pod.status == VALID_POD_STATUS

    def wait(self, timeout: float = 300, **kwargs) -> float:
        """Wait for the pod to run. Extra keyword arguments go to wait_until."""
        logger.info("Waiting for the service to start running...")
        elapsed = wait_until(self.is_running, timeout=timeout, **kwargs)
        logger.info(f"Pod running after {elapsed:.1f}s")
        return elapsed
