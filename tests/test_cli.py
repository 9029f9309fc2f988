"""Tests for the gemdeploy command line and its exit statuses."""

import logging

import pytest
from conftest import CLUSTER_HEADER, POD_HEADER

from gemdeploy import cli
from gemdeploy.logging_config import setup_logging


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def patched_runner(monkeypatch, runner):
    monkeypatch.setattr("gemdeploy.deployment.deployer.CommandRunner", lambda: runner)
    return runner


def write_config(tmp_path, server_dir, platform, credentials=None):
    path = tmp_path / "gemdeploy.yml"
    text = f"project_id: demo-project\nplatform: {platform}\nserver_path: {server_dir}\n"
    if credentials:
        text += f"credentials_path: {credentials}\n"
    path.write_text(text)
    return path


def test_gae_deploy_exits_zero(tmp_path, server_dir, patched_runner):
    config = write_config(tmp_path, server_dir, "gae")

    assert cli.main(["--config", str(config), "deploy"]) == 0
    assert patched_runner.count("gcloud", "app", "deploy") == 1


def test_gae_failure_exits_non_zero(tmp_path, server_dir, patched_runner):
    patched_runner.on("gcloud", "app", "deploy", exit_status=1)
    config = write_config(tmp_path, server_dir, "gae")

    assert cli.main(["--config", str(config), "deploy"]) == 1


def test_gke_deploy_with_cluster_flags(tmp_path, server_dir, credentials_file, patched_runner):
    patched_runner.on("gcloud", "container", "clusters", "list", stdout=CLUSTER_HEADER)
    patched_runner.on("kubectl", "get", "pods", stdout=POD_HEADER + "gemserver-image-abc  2/2  Running  0  1s\n")
    config = write_config(tmp_path, server_dir, "gke", credentials_file)

    status = cli.main([
        "--config", str(config), "deploy", "--cluster-name", "demo", "--zone", "us-central1-a",
    ])

    assert status == 0
    assert patched_runner.count("gcloud", "container", "clusters", "create", "demo", "--zone", "us-central1-a") == 1


def test_gke_missing_credentials_exits_non_zero(tmp_path, server_dir, patched_runner, monkeypatch):
    monkeypatch.delenv("GEMSERVER_CREDS", raising=False)
    config = write_config(tmp_path, server_dir, "gke")

    status = cli.main(["--config", str(config), "deploy", "--cluster-name", "demo", "--zone", "z"])

    assert status == 1
    assert patched_runner.calls == []


def test_cluster_flags_must_be_paired(tmp_path, server_dir, patched_runner):
    config = write_config(tmp_path, server_dir, "gke")

    assert cli.main(["--config", str(config), "deploy", "--zone", "us-central1-a"]) == 2


def test_missing_config_exits_non_zero(tmp_path):
    assert cli.main(["--config", str(tmp_path / "missing.yml"), "deploy"]) == 1


def test_init_installs_templates(tmp_path):
    server = tmp_path / "fresh"
    config = write_config(tmp_path, server, "gke")

    assert cli.main(["--config", str(config), "init"]) == 0
    assert (server / "Dockerfile.base").is_file()
    assert (server / "deployment.yaml.base").is_file()


def test_setup_logging_writes_log_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "logs" / "deploy.log"
    try:
        setup_logging(log_file=str(log_file), debug=True)
        logging.getLogger("gemdeploy.test").debug("polling pods")
        for handler in root.handlers:
            handler.flush()
        assert root.level == logging.DEBUG
        assert "polling pods" in log_file.read_text()
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
