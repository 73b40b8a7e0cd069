"""
In-process tracking store. It keeps experiments and runs in dictionaries and follows the
same contract as :py:class:`mlrest.store.rest_store.RestStore`, which makes it usable in
place of a tracking server in tests and examples.
"""

import logging
import uuid

from mlrest.entities import (
    Experiment,
    ExperimentId,
    LifecycleStage,
    Metric,
    PagedList,
    PageToken,
    Param,
    Run,
    RunData,
    RunId,
    RunInfo,
    RunStatus,
    RunTag,
    ViewType,
)
from mlrest.exceptions import (
    MlrestException,
    ResourceAlreadyExists,
    ResourceDoesNotExist,
    StorageError,
)
from mlrest.store.abstract_store import SEARCH_MAX_RESULTS_DEFAULT, AbstractStore
from mlrest.utils.time import get_current_time_millis
from mlrest.utils.validation import (
    _validate_batch_log_limits,
    _validate_max_results,
    _validate_metric_value,
)

_logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_ROOT = "memory://artifacts"

_ORDER_BY_ATTRIBUTE_PREFIX = "attribute."


def _invalid_parameter(message):
    cause = MlrestException.invalid_parameter_value(message)
    return StorageError("Invalid request", cause=cause)


def _parse_order_by(order_by_clause):
    tokens = order_by_clause.strip().split()
    if not tokens or len(tokens) > 2:
        raise _invalid_parameter(f"Invalid order_by clause '{order_by_clause}'")
    key = tokens[0]
    if key.startswith(_ORDER_BY_ATTRIBUTE_PREFIX):
        key = key[len(_ORDER_BY_ATTRIBUTE_PREFIX) :]
    ascending = True
    if len(tokens) == 2:
        direction = tokens[1].upper()
        if direction not in ("ASC", "DESC"):
            raise _invalid_parameter(f"Invalid order_by direction '{tokens[1]}'")
        ascending = direction == "ASC"
    if not isinstance(getattr(RunInfo, key, None), property):
        raise _invalid_parameter(f"Invalid order_by key '{key}'")
    return key, ascending


def _sort_runs(runs, order_by):
    # Default order: newest runs first, ties broken by run id
    runs = sorted(runs, key=lambda run: run.info.run_id)
    runs = sorted(runs, key=lambda run: run.info.start_time, reverse=True)
    # Stable sorts applied from the least to the most significant clause
    for order_by_clause in reversed(order_by or []):
        key, ascending = _parse_order_by(order_by_clause)
        present = [run for run in runs if getattr(run.info, key) is not None]
        missing = [run for run in runs if getattr(run.info, key) is None]
        present.sort(key=lambda run: getattr(run.info, key), reverse=not ascending)
        runs = present + missing
    return runs


def _parse_page_token(page_token):
    if not page_token:
        return 0
    try:
        offset = int(page_token)
    except ValueError:
        raise _invalid_parameter(f"Invalid page token '{page_token}'")
    if offset < 0:
        raise _invalid_parameter(f"Invalid page token '{page_token}'")
    return offset


class _RunRecord:
    def __init__(self, info):
        self.info = info
        self.metrics = []
        self.params = {}
        self.tags = {}

    def to_run(self):
        return Run(
            self.info,
            RunData(
                metrics=list(self.metrics),
                params=[Param(key, value) for key, value in self.params.items()],
                tags=[RunTag(key, value) for key, value in self.tags.items()],
            ),
        )


class InMemoryStore(AbstractStore):
    """
    Tracking store keeping all state in memory. Nothing is shared between instances.

    :param artifact_root: Root URI under which artifact locations of new experiments are
        derived when none is given.
    """

    def __init__(self, artifact_root=DEFAULT_ARTIFACT_ROOT):
        super().__init__()
        self.artifact_root = artifact_root.rstrip("/")
        self._experiments = {}
        self._runs = {}
        self._next_experiment_id = 0

    def _get_experiment_or_none(self, experiment_id):
        return self._experiments.get(str(experiment_id))

    def _get_run_record(self, run_id, error):
        record = self._runs.get(str(run_id))
        if record is None:
            raise error
        return record

    def _get_run_record_for_logging(self, run_id):
        record = self._get_run_record(
            run_id, StorageError("Failed to log to run", cause=ResourceDoesNotExist(run_id))
        )
        if record.info.lifecycle_stage != LifecycleStage.ACTIVE:
            raise _invalid_parameter(f"The run {run_id} must be in the 'active' state")
        return record

    def list_experiments(self, view_type=ViewType.ACTIVE_ONLY):
        return [
            experiment
            for experiment in self._experiments.values()
            if LifecycleStage.matches_view_type(view_type, experiment.lifecycle_stage)
        ]

    def create_experiment(self, name, artifact_location=None):
        if not name:
            raise _invalid_parameter(f"Invalid experiment name '{name}'")
        if any(e.name == name for e in self._experiments.values()):
            raise ResourceAlreadyExists(name)
        experiment_id = ExperimentId(str(self._next_experiment_id))
        self._next_experiment_id += 1
        now = get_current_time_millis()
        self._experiments[experiment_id] = Experiment(
            experiment_id,
            name,
            artifact_location or f"{self.artifact_root}/{experiment_id}",
            LifecycleStage.ACTIVE,
            creation_time=now,
            last_update_time=now,
        )
        _logger.debug("Created experiment '%s' with ID %s", name, experiment_id)
        return experiment_id

    def get_experiment(self, experiment_id):
        experiment = self._get_experiment_or_none(experiment_id)
        if experiment is None:
            raise ResourceDoesNotExist(experiment_id)
        return experiment

    def get_experiment_by_name(self, experiment_name):
        for experiment in self._experiments.values():
            if experiment.name == experiment_name:
                return experiment
        raise ResourceDoesNotExist(experiment_name)

    def _replace_experiment(self, experiment, **overrides):
        fields = dict(experiment)
        fields.update(overrides, last_update_time=get_current_time_millis())
        self._experiments[experiment.experiment_id] = Experiment.from_dictionary(fields)

    def delete_experiment(self, experiment_id):
        experiment = self.get_experiment(experiment_id)
        if experiment.lifecycle_stage == LifecycleStage.DELETED:
            raise ResourceDoesNotExist(experiment_id)
        self._replace_experiment(experiment, lifecycle_stage=LifecycleStage.DELETED)

    def update_experiment(self, experiment_id, new_name=None):
        experiment = self._get_experiment_or_none(experiment_id)
        if experiment is None:
            raise StorageError(
                "Failed to update experiment", cause=ResourceDoesNotExist(experiment_id)
            )
        if new_name is None or new_name == experiment.name:
            return
        if any(e.name == new_name for e in self._experiments.values()):
            raise StorageError(
                "Failed to update experiment", cause=ResourceAlreadyExists(new_name)
            )
        self._replace_experiment(experiment, name=new_name)

    def create_run(self, experiment_id, start_time, tags):
        experiment = self._get_experiment_or_none(experiment_id)
        if experiment is None:
            raise StorageError("Failed to create run", cause=ResourceDoesNotExist(experiment_id))
        if experiment.lifecycle_stage != LifecycleStage.ACTIVE:
            raise _invalid_parameter(
                f"The experiment {experiment_id} must be in the 'active' state"
            )
        run_id = RunId(uuid.uuid4().hex)
        info = RunInfo(
            run_id=run_id,
            experiment_id=experiment.experiment_id,
            status=RunStatus.RUNNING,
            start_time=start_time,
            end_time=None,
            lifecycle_stage=LifecycleStage.ACTIVE,
            artifact_uri=f"{experiment.artifact_location}/{run_id}/artifacts",
        )
        record = _RunRecord(info)
        for tag in tags:
            record.tags[tag.key] = tag.value
        self._runs[run_id] = record
        return record.to_run()

    def get_run(self, run_id):
        return self._get_run_record(run_id, ResourceDoesNotExist(run_id)).to_run()

    def delete_run(self, run_id):
        record = self._get_run_record(run_id, ResourceDoesNotExist(run_id))
        record.info = record.info._copy_with_overrides(lifecycle_stage=LifecycleStage.DELETED)

    def update_run(self, run_id, run_status, end_time):
        record = self._get_run_record(run_id, ResourceDoesNotExist(run_id))
        try:
            status = RunStatus.from_string(run_status)
        except MlrestException as e:
            raise StorageError("Failed to update run", cause=e) from e
        record.info = record.info._copy_with_overrides(status=status, end_time=end_time)
        return record.info

    def _validate_metrics(self, metrics):
        try:
            for metric in metrics:
                _validate_metric_value(metric.key, metric.value)
        except MlrestException as e:
            raise StorageError("Failed to log metric", cause=e) from e

    def log_param(self, run_id, key, value):
        record = self._get_run_record_for_logging(run_id)
        record.params[key] = value

    def log_metric(self, run_id, key, value, timestamp, step=0):
        record = self._get_run_record_for_logging(run_id)
        metric = Metric(key, value, timestamp, step)
        self._validate_metrics([metric])
        record.metrics.append(metric)

    def log_batch(self, run_id, metrics, params, tags):
        _validate_batch_log_limits(metrics, params, tags)
        record = self._get_run_record_for_logging(run_id)
        # Nothing is written unless the whole batch is valid
        self._validate_metrics(metrics)
        record.metrics.extend(metrics)
        for param in params:
            record.params[param.key] = param.value
        for tag in tags:
            record.tags[tag.key] = tag.value

    def get_metric_history(self, run_id, metric_key):
        record = self._get_run_record(run_id, ResourceDoesNotExist(run_id))
        return [metric for metric in record.metrics if metric.key == metric_key]

    def search_runs(
        self,
        experiment_ids,
        filter_string="",
        run_view_type=ViewType.ACTIVE_ONLY,
        max_results=SEARCH_MAX_RESULTS_DEFAULT,
        order_by=None,
        page_token=None,
    ):
        if filter_string:
            raise StorageError(
                "Failed to search runs",
                cause=MlrestException(
                    "Filter strings are not supported by the in-memory store",
                    error_code="NOT_IMPLEMENTED",
                ),
            )
        try:
            _validate_max_results(max_results)
        except MlrestException as e:
            raise StorageError("Failed to search runs", cause=e) from e
        if isinstance(order_by, str):
            order_by = [order_by]

        experiment_ids = {str(experiment_id) for experiment_id in experiment_ids}
        runs = [
            record.to_run()
            for record in self._runs.values()
            if record.info.experiment_id in experiment_ids
            and LifecycleStage.matches_view_type(run_view_type, record.info.lifecycle_stage)
        ]
        runs = _sort_runs(runs, order_by)

        offset = _parse_page_token(page_token)
        final_offset = offset + max_results
        next_page_token = PageToken(str(final_offset)) if final_offset < len(runs) else None
        return PagedList(runs[offset:final_offset], next_page_token)
