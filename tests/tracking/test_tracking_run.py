from unittest import mock

import pytest

from mlrest.entities import (
    LifecycleStage,
    Metric,
    Param,
    Run,
    RunData,
    RunInfo,
    RunStatus,
    RunTag,
)
from mlrest.exceptions import MlrestException, StorageError, TooManyParams, TooManyTags
from mlrest.tracking import TrackingClient, TrackingRun


def _run_info(status=RunStatus.RUNNING, end_time=None):
    return RunInfo(
        run_id="abc",
        experiment_id="7",
        status=status,
        start_time=1000,
        end_time=end_time,
        lifecycle_stage=LifecycleStage.ACTIVE,
        artifact_uri="s3://bucket/7/abc/artifacts",
    )


@pytest.fixture
def client():
    client = mock.create_autospec(TrackingClient, instance=True)
    client.create_run.return_value = Run(_run_info(), RunData(tags=[RunTag("k", "v")]))
    client.update_run.return_value = _run_info(RunStatus.FINISHED, 5000)
    return client


@pytest.fixture
def tracking_run():
    with mock.patch("mlrest.tracking.tracking_run.get_current_time_millis", return_value=1000):
        return TrackingRun()


def test_start_time_is_captured_at_construction(tracking_run):
    assert tracking_run.start_time == 1000


def test_submit_with_2500_metrics(client, tracking_run):
    tracking_run.log_param("alpha", "0.5")
    tracking_run.log_tag("team", "vision")
    with mock.patch("mlrest.tracking.tracking_run.get_current_time_millis", return_value=2000):
        for step in range(2500):
            tracking_run.log_metric("loss", 1.0 / (step + 1), step)

    with mock.patch("mlrest.tracking.tracking_run.get_current_time_millis", return_value=5000):
        run = tracking_run.submit(client, "7")

    expected_metrics = [Metric("loss", 1.0 / (step + 1), 2000, step) for step in range(2500)]
    assert client.mock_calls == [
        mock.call.create_run("7", 1000, []),
        mock.call.log_batch("abc", [], [Param("alpha", "0.5")], [RunTag("team", "vision")]),
        mock.call.log_batch("abc", expected_metrics[:1000], [], []),
        mock.call.log_batch("abc", expected_metrics[1000:2000], [], []),
        mock.call.log_batch("abc", expected_metrics[2000:], [], []),
        mock.call.update_run("abc", RunStatus.FINISHED, 5000),
    ]
    assert run.info == client.update_run.return_value
    assert run.info.status == RunStatus.FINISHED
    assert run.data.tags == {"k": "v"}


def test_metric_chunks(tracking_run):
    assert tracking_run.metric_chunks == []
    for step in range(1000):
        tracking_run.log_metric("m", 1.0, step)
    assert [len(chunk) for chunk in tracking_run.metric_chunks] == [1000]
    tracking_run.log_metric("m", 1.0, 1000)
    assert [len(chunk) for chunk in tracking_run.metric_chunks] == [1000, 1]
    assert tracking_run.metric_chunks[1][0].step == 1000


def test_submit_without_values(client, tracking_run):
    tracking_run.submit(client, "7")
    assert [c[0] for c in client.mock_calls] == ["create_run", "log_batch", "update_run"]
    client.log_batch.assert_called_once_with("abc", [], [], [])


def test_metric_timestamp(tracking_run):
    with mock.patch("mlrest.tracking.tracking_run.get_current_time_millis", return_value=42):
        tracking_run.log_metric("m", 1.0, 0)
    tracking_run.log_metric("m", 2.0, 1, timestamp=7)
    assert [m.timestamp for m in tracking_run.metric_chunks[0]] == [42, 7]


def test_invalid_metric_value(tracking_run):
    with pytest.raises(MlrestException, match="Got invalid value"):
        tracking_run.log_metric("m", "not a number", 0)
    assert tracking_run.metric_chunks == []


def test_param_and_tag_caps(tracking_run):
    for i in range(100):
        tracking_run.log_param(f"p{i}", i)
        tracking_run.log_tag(f"t{i}", i)
    with pytest.raises(TooManyParams) as e:
        tracking_run.log_param("one", "too many")
    assert e.value.count == 101
    with pytest.raises(TooManyTags):
        tracking_run.log_tag("one", "too many")
    assert len(tracking_run.params) == 100
    assert tracking_run.params[5] == Param("p5", "5")
    assert tracking_run.tags[5] == RunTag("t5", "5")


def test_failure_aborts_remaining_steps(client, tracking_run):
    for step in range(1500):
        tracking_run.log_metric("m", 1.0, step)
    client.log_batch.side_effect = [None, StorageError("boom"), None]

    with pytest.raises(StorageError, match="boom"):
        tracking_run.submit(client, "7")

    assert client.log_batch.call_count == 2
    client.update_run.assert_not_called()


def test_submit_against_memory_store(tracking_run):
    client = TrackingClient("memory:")
    experiment_id = client.create_experiment("exp")
    tracking_run.log_param("alpha", "0.5")
    tracking_run.log_tag("team", "vision")
    for step in range(1200):
        tracking_run.log_metric("loss", float(step), step)

    run = tracking_run.submit(client, experiment_id)

    assert run.info.status == RunStatus.FINISHED
    assert run.info.end_time is not None
    stored = client.get_run(run.info.run_id)
    assert stored.info == run.info
    assert stored.data.params == {"alpha": "0.5"}
    assert stored.data.tags == {"team": "vision"}
    assert stored.data.metrics == {"loss": 1199.0}
    history = client.get_metric_history(run.info.run_id, "loss")
    assert [m.step for m in history] == list(range(1200))
