"""
Wire messages of the tracking REST API.

Each request message carries its response message as a nested ``Response`` class, so that
an endpoint only needs to know its request type. Unknown response fields are ignored.
Millisecond timestamps are ``int``; lax parsing also accepts the numeric strings some server
versions send for int64 fields.
"""

from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

RunStatusName = Literal["RUNNING", "SCHEDULED", "FINISHED", "FAILED", "KILLED"]
ViewTypeName = Literal["ACTIVE_ONLY", "DELETED_ONLY", "ALL"]
LifecycleStageName = Literal["active", "deleted"]


class Message(BaseModel):
    # NaN and infinite metric values travel as "NaN", "Infinity" and "-Infinity"
    model_config = ConfigDict(extra="ignore", ser_json_inf_nan="strings")


class _Empty(Message):
    pass


class ExperimentTag(Message):
    key: str
    value: str


class Experiment(Message):
    experiment_id: str
    name: str
    artifact_location: str
    lifecycle_stage: LifecycleStageName
    creation_time: int | None = None
    last_update_time: int | None = None
    tags: list[ExperimentTag] | None = None


class Metric(Message):
    key: str
    value: float
    timestamp: int
    step: int = 0


class Param(Message):
    key: str
    value: str


class RunTag(Message):
    key: str
    value: str


class RunInfo(Message):
    # Older servers only send the deprecated run_uuid
    run_id: str | None = None
    run_uuid: str | None = None
    run_name: str | None = None
    experiment_id: str
    user_id: str | None = None
    status: RunStatusName
    start_time: int
    end_time: int | None = None
    artifact_uri: str | None = None
    lifecycle_stage: LifecycleStageName

    @model_validator(mode="after")
    def _fill_run_id(self):
        if self.run_id is None:
            if self.run_uuid is None:
                raise ValueError("run_id and run_uuid cannot both be missing")
            self.run_id = self.run_uuid
        return self


class RunData(Message):
    metrics: list[Metric] | None = None
    params: list[Param] | None = None
    tags: list[RunTag] | None = None


class Run(Message):
    info: RunInfo
    data: RunData = Field(default_factory=RunData)


class CreateExperiment(Message):
    name: str
    artifact_location: str | None = None

    class Response(Message):
        experiment_id: str


class GetExperiment(Message):
    experiment_id: str

    class Response(Message):
        experiment: Experiment


class GetExperimentByName(Message):
    experiment_name: str

    class Response(Message):
        experiment: Experiment


class ListExperiments(Message):
    view_type: ViewTypeName = "ACTIVE_ONLY"

    class Response(Message):
        experiments: list[Experiment] = Field(default_factory=list)


class UpdateExperiment(Message):
    experiment_id: str
    new_name: str | None = None

    Response: ClassVar[type[Message]] = _Empty


class DeleteExperiment(Message):
    experiment_id: str

    Response: ClassVar[type[Message]] = _Empty


class CreateRun(Message):
    experiment_id: str
    start_time: int
    tags: list[RunTag] = Field(default_factory=list)

    class Response(Message):
        run: Run


class GetRun(Message):
    run_id: str

    class Response(Message):
        run: Run


class DeleteRun(Message):
    run_id: str

    Response: ClassVar[type[Message]] = _Empty


class UpdateRun(Message):
    run_id: str
    status: RunStatusName
    end_time: int

    class Response(Message):
        run_info: RunInfo


class LogParam(Message):
    run_id: str
    key: str
    value: str

    Response: ClassVar[type[Message]] = _Empty


class LogMetric(Message):
    run_id: str
    key: str
    value: float
    timestamp: int
    step: int = 0

    Response: ClassVar[type[Message]] = _Empty


class LogBatch(Message):
    run_id: str
    metrics: list[Metric] = Field(default_factory=list)
    params: list[Param] = Field(default_factory=list)
    tags: list[RunTag] = Field(default_factory=list)

    Response: ClassVar[type[Message]] = _Empty


class SearchRuns(Message):
    experiment_ids: list[str]
    filter: str = ""
    run_view_type: ViewTypeName = "ACTIVE_ONLY"
    max_results: int = 1000
    order_by: list[str] | None = None
    page_token: str | None = None

    class Response(Message):
        runs: list[Run] = Field(default_factory=list)
        next_page_token: str | None = None


class GetMetricHistory(Message):
    run_id: str
    metric_key: str

    class Response(Message):
        metrics: list[Metric] = Field(default_factory=list)
