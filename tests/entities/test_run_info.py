import pytest

from mlrest.entities import ExperimentId, LifecycleStage, RunId, RunInfo, RunStatus
from mlrest.exceptions import MlrestException
from mlrest.protos.service import RunInfo as ProtoRunInfo
from mlrest.utils.proto_json_utils import parse_dict


def _check(ri, run_id, experiment_id, start_time, end_time):
    assert isinstance(ri, RunInfo)
    assert ri.run_id == run_id
    assert isinstance(ri.run_id, RunId)
    assert ri.experiment_id == experiment_id
    assert isinstance(ri.experiment_id, ExperimentId)
    assert ri.status == RunStatus.FINISHED
    assert ri.start_time == start_time
    assert ri.end_time == end_time
    assert ri.lifecycle_stage == LifecycleStage.ACTIVE


def test_creation_and_hydration(run_info):
    ri, run_id, experiment_id, start_time, end_time = run_info
    _check(ri, run_id, experiment_id, start_time, end_time)

    as_dict = dict(ri)
    assert as_dict["run_id"] == run_id
    assert as_dict["status"] == "FINISHED"

    proto = ri.to_proto()
    ri2 = RunInfo.from_proto(proto)
    _check(ri2, run_id, experiment_id, start_time, end_time)
    assert ri2 == ri

    ri3 = RunInfo.from_dictionary(as_dict)
    _check(ri3, run_id, experiment_id, start_time, end_time)


def test_from_wire_keeps_deprecated_fields():
    proto = ProtoRunInfo.model_validate(
        {
            "run_id": "abc",
            "run_uuid": "abc",
            "experiment_id": "1",
            "user_id": "someone",
            "status": "RUNNING",
            "start_time": "1662004217511",
            "artifact_uri": "s3://bucket/1/abc/artifacts",
            "lifecycle_stage": "active",
        }
    )
    ri = RunInfo.from_proto(proto)
    assert ri.run_uuid == "abc"
    assert ri.user_id == "someone"
    assert ri.start_time == 1662004217511
    assert ri.end_time is None


def test_from_wire_falls_back_to_run_uuid():
    wire = {
        "run_uuid": "abc",
        "experiment_id": "1",
        "status": "FINISHED",
        "start_time": 1662004217511,
        "lifecycle_stage": "active",
    }
    ri = RunInfo.from_proto(parse_dict(wire, ProtoRunInfo))
    assert ri.run_id == RunId("abc")
    assert ri.artifact_uri is None

    del wire["run_uuid"]
    with pytest.raises(MlrestException, match="run_id and run_uuid cannot both be missing"):
        parse_dict(wire, ProtoRunInfo)


def test_unknown_status_fails():
    with pytest.raises(MlrestException, match="Could not get run status"):
        RunInfo(
            run_id="abc",
            experiment_id="1",
            status="BROKEN",
            start_time=0,
            end_time=None,
            lifecycle_stage=LifecycleStage.ACTIVE,
        )


def test_copy_with_overrides(run_info):
    ri = run_info[0]
    copy = ri._copy_with_overrides(status=RunStatus.KILLED, end_time=12345)
    assert copy.status == RunStatus.KILLED
    assert copy.end_time == 12345
    assert copy.run_id == ri.run_id
    assert ri.status == RunStatus.FINISHED
