"""
Registry of the tracking server REST endpoints.

Every client operation maps to one :py:class:`Endpoint`: the path relative to the API root,
the HTTP method, the request message (whose nested ``Response`` is the response message)
and the function that narrows the response message to the value the operation returns.
"""

from typing import Any, Callable, NamedTuple

from mlrest.entities import (
    Experiment,
    ExperimentId,
    Metric,
    PagedList,
    PageToken,
    Run,
    RunInfo,
)
from mlrest.protos.service import (
    CreateExperiment,
    CreateRun,
    DeleteExperiment,
    DeleteRun,
    GetExperiment,
    GetExperimentByName,
    GetMetricHistory,
    GetRun,
    ListExperiments,
    LogBatch,
    LogMetric,
    LogParam,
    Message,
    SearchRuns,
    UpdateExperiment,
    UpdateRun,
)

_API_VERSION = "2.0"


class Endpoint(NamedTuple):
    path: str
    method: str
    request: type[Message]
    extract: Callable[[Message], Any]


def _get_path(endpoint_path):
    return f"{_API_VERSION}/mlflow/{endpoint_path}"


def _void(response):
    return None


def _page_token(response):
    return PageToken(response.next_page_token) if response.next_page_token else None


def _extract_runs(response):
    return PagedList([Run.from_proto(run) for run in response.runs], _page_token(response))


def _extract_run_infos(response):
    return PagedList(
        [RunInfo.from_proto(run.info) for run in response.runs], _page_token(response)
    )


ENDPOINTS = {
    "create_experiment": Endpoint(
        _get_path("experiments/create"),
        "POST",
        CreateExperiment,
        lambda response: ExperimentId(response.experiment_id),
    ),
    "get_experiment": Endpoint(
        _get_path("experiments/get"),
        "GET",
        GetExperiment,
        lambda response: Experiment.from_proto(response.experiment),
    ),
    "get_experiment_by_name": Endpoint(
        _get_path("experiments/get-by-name"),
        "GET",
        GetExperimentByName,
        lambda response: Experiment.from_proto(response.experiment),
    ),
    "list_experiments": Endpoint(
        _get_path("experiments/list"),
        "GET",
        ListExperiments,
        lambda response: [Experiment.from_proto(e) for e in response.experiments],
    ),
    "update_experiment": Endpoint(
        _get_path("experiments/update"), "POST", UpdateExperiment, _void
    ),
    "delete_experiment": Endpoint(
        _get_path("experiments/delete"), "POST", DeleteExperiment, _void
    ),
    "create_run": Endpoint(
        _get_path("runs/create"),
        "POST",
        CreateRun,
        lambda response: Run.from_proto(response.run),
    ),
    "get_run": Endpoint(
        _get_path("runs/get"),
        "GET",
        GetRun,
        lambda response: Run.from_proto(response.run),
    ),
    "delete_run": Endpoint(_get_path("runs/delete"), "POST", DeleteRun, _void),
    "update_run": Endpoint(
        _get_path("runs/update"),
        "POST",
        UpdateRun,
        lambda response: RunInfo.from_proto(response.run_info),
    ),
    "log_param": Endpoint(_get_path("runs/log-parameter"), "POST", LogParam, _void),
    "log_metric": Endpoint(_get_path("runs/log-metric"), "POST", LogMetric, _void),
    "log_batch": Endpoint(_get_path("runs/log-batch"), "POST", LogBatch, _void),
    "get_metric_history": Endpoint(
        _get_path("metrics/get-history"),
        "GET",
        GetMetricHistory,
        lambda response: [Metric.from_proto(metric) for metric in response.metrics],
    ),
    "search_runs": Endpoint(_get_path("runs/search"), "POST", SearchRuns, _extract_runs),
    # Same endpoint as search_runs, projected to run infos
    "list_run_infos": Endpoint(
        _get_path("runs/search"), "POST", SearchRuns, _extract_run_infos
    ),
}
