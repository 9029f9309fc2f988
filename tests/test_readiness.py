"""Tests for readiness polling and pod table parsing."""

import pytest
from conftest import POD_HEADER

from gemdeploy.deployment import PodStatusChecker, ReadinessTimeout, find_pod, parse_pod_table, wait_until


def test_wait_until_returns_once_predicate_holds(clock):
    answers = iter([False, True])

    elapsed = wait_until(lambda: next(answers), timeout=2, clock=clock, sleep=clock.sleep)

    assert elapsed == 1.0
    assert elapsed < 2
    assert clock.sleeps == [1.0]


def test_wait_until_immediate_success_does_not_sleep(clock):
    assert wait_until(lambda: True, timeout=2, clock=clock, sleep=clock.sleep) == 0
    assert clock.sleeps == []


def test_wait_until_times_out(clock):
    calls = []

    def never():
        calls.append(clock.now)
        return False

    with pytest.raises(ReadinessTimeout) as excinfo:
        wait_until(never, timeout=2, clock=clock, sleep=clock.sleep)

    assert excinfo.value.elapsed >= 2
    assert excinfo.value.timeout == 2
    assert "Timeout after trying for 2 seconds" in str(excinfo.value)
    # Fixed cadence, no backoff
    assert set(clock.sleeps) == {1.0}
    assert len(calls) == len(clock.sleeps) + 1


def test_wait_until_uses_fixed_interval(clock):
    answers = iter([False, False, False, True])

    wait_until(lambda: next(answers), timeout=10, interval=0.5, clock=clock, sleep=clock.sleep)

    assert clock.sleeps == [0.5, 0.5, 0.5]


def test_parse_pod_table():
    stdout = POD_HEADER + (
        "gemserver-image-5d8f9c7b6-abcde   2/2     Running   0          3m\n"
        "other-app-7c9d-xyz12              1/1     Pending   1          10s\n"
    )

    pods = parse_pod_table(stdout)

    assert [p.name for p in pods] == ["gemserver-image-5d8f9c7b6-abcde", "other-app-7c9d-xyz12"]
    assert pods[0].status == "Running"
    assert pods[1].restarts == "1"


def test_parse_pod_table_tolerates_short_rows():
    pods = parse_pod_table(POD_HEADER + "gemserver-image-1\n\n")

    assert len(pods) == 1
    assert pods[0].status is None


def test_find_pod_uses_first_match():
    pods = parse_pod_table(POD_HEADER + (
        "gemserver-image-aaa   0/2   Pending   0   1s\n"
        "gemserver-image-bbb   2/2   Running   0   1m\n"
    ))

    assert find_pod(pods, "gemserver-image").name == "gemserver-image-aaa"
    assert find_pod(pods, "missing") is None


def test_checker_only_inspects_first_matching_pod(runner):
    runner.on("kubectl", "get", "pods", stdout=POD_HEADER + (
        "gemserver-image-aaa   0/2   ContainerCreating   0   1s\n"
        "gemserver-image-bbb   2/2   Running             0   1m\n"
    ))

    assert PodStatusChecker(runner, "gemserver-image").is_running() is False


def test_checker_reports_running(runner):
    runner.on("kubectl", "get", "pods", stdout=POD_HEADER + "gemserver-image-aaa   2/2   Running   0   1m\n")

    assert PodStatusChecker(runner, "gemserver-image").is_running() is True


def test_checker_treats_failed_query_as_not_ready(runner):
    runner.on("kubectl", "get", "pods", stderr="connection refused", exit_status=1)

    assert PodStatusChecker(runner, "gemserver-image").is_running() is False


def test_checker_wait_polls_fresh_snapshots(runner, clock):
    runner.on("kubectl", "get", "pods", stdout=POD_HEADER)
    runner.on("kubectl", "get", "pods", stdout=POD_HEADER + "gemserver-image-aaa   0/2   Pending   0   1s\n")
    runner.on("kubectl", "get", "pods", stdout=POD_HEADER + "gemserver-image-aaa   2/2   Running   0   2s\n")

    elapsed = PodStatusChecker(runner, "gemserver-image").wait(timeout=10, clock=clock, sleep=clock.sleep)

    assert elapsed == 2.0
    assert runner.count("kubectl", "get", "pods") == 3
