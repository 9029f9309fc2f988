"""Shared fixtures: a recording command runner, a fake clock and a server directory."""

from pathlib import Path

import pytest

from gemdeploy.deployment import Templater
from gemdeploy.shared.schemas import CommandResult, DeployConfig

CLUSTER_HEADER = "NAME  LOCATION  MASTER_VERSION  MASTER_IP  MACHINE_TYPE  NODE_VERSION  NUM_NODES  STATUS\n"
POD_HEADER = "NAME                              READY   STATUS    RESTARTS   AGE\n"


class FakeRunner:
    """Record every command and answer with canned results.

    Responses are matched on the longest registered argument prefix. A
    prefix registered with several results returns them in order and keeps
    repeating the last one.
    """

    def __init__(self):
        self.calls: list[tuple[str, ...]] = []
        self._responses: dict[tuple[str, ...], list] = {}

    def on(self, *prefix: str, stdout: str = "", stderr: str = "", exit_status: int = 0, raises=None):
        response = raises if raises is not None else (stdout, stderr, exit_status)
        self._responses.setdefault(tuple(prefix), []).append(response)
        return self

    def run(self, args):
        args = tuple(str(arg) for arg in args)
        self.calls.append(args)

        matches = [p for p in self._responses if args[:len(p)] == p]
        if not matches:
            return CommandResult(args=args)

        queue = self._responses[max(matches, key=len)]
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        stdout, stderr, exit_status = response
        return CommandResult(args=args, stdout=stdout, stderr=stderr, exit_status=exit_status)

    def count(self, *prefix: str) -> int:
        return sum(1 for call in self.calls if call[:len(prefix)] == prefix)

    def index(self, *prefix: str) -> int:
        return next(i for i, call in enumerate(self.calls) if call[:len(prefix)] == prefix)


class FakeClock:
    """Monotonic clock that only advances when sleep is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def server_dir(tmp_path) -> Path:
    """Server directory holding the packaged base templates."""
    path = tmp_path / "server"
    Templater().install_base_templates(path)
    return path


@pytest.fixture
def credentials_file(tmp_path) -> Path:
    path = tmp_path / "keys" / "gemserver-sa.json"
    path.parent.mkdir()
    path.write_text('{"type": "service_account"}')
    return path


@pytest.fixture
def gke_config(server_dir, credentials_file) -> DeployConfig:
    return DeployConfig(
        platform="gke",
        project_id="demo-project",
        credentials_path=credentials_file,
        sql_instances="demo-project:us-central1:gemserver",
        server_path=server_dir,
    )


@pytest.fixture
def gae_config(server_dir, credentials_file) -> DeployConfig:
    return DeployConfig(
        platform="gae",
        project_id="demo-project",
        credentials_path=credentials_file,
        server_path=server_dir,
    )
