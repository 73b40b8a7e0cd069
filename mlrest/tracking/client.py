"""
Public client for a tracking server: it creates and manages experiments and runs. The
client is a thin wrapper around a tracking store chosen from the tracking URI.
"""

import logging
from typing import Optional, Sequence, Union

from mlrest.entities import (
    Experiment,
    ExperimentId,
    Metric,
    PagedList,
    Param,
    Run,
    RunInfo,
    RunStatus,
    RunTag,
    ViewType,
)
from mlrest.exceptions import ResourceDoesNotExist
from mlrest.store.abstract_store import SEARCH_MAX_RESULTS_DEFAULT
from mlrest.tracking import utils
from mlrest.utils.time import get_current_time_millis

_logger = logging.getLogger(__name__)


class TrackingClient:
    """
    Client of a tracking server that creates and manages experiments and runs.
    """

    def __init__(self, tracking_uri: Optional[str] = None):
        """
        Args:
            tracking_uri: Address of the tracking server, including the API prefix
                (e.g. ``http://localhost:5000/api``), or ``memory:`` for an in-process store.
                If not provided, defaults to the URI set by
                ``mlrest.tracking.set_tracking_uri`` or ``MLREST_TRACKING_URI``.
        """
        self._tracking_uri = tracking_uri if tracking_uri is not None else utils.get_tracking_uri()
        self.store = utils._get_store(self._tracking_uri)

    @property
    def tracking_uri(self):
        return self._tracking_uri

    # Experiments

    def create_experiment(
        self, name: str, artifact_location: Optional[str] = None
    ) -> ExperimentId:
        """Create an experiment.

        Args:
            name: The experiment name. Must be unique.
            artifact_location: The location to store run artifacts. If not provided, the server
                picks an appropriate default.

        Returns:
            The :py:class:`mlrest.entities.ExperimentId` of the created experiment.

        Raises:
            ResourceAlreadyExists: If an experiment with the same name exists.
        """
        return self.store.create_experiment(name, artifact_location)

    def get_experiment(self, experiment_id: str) -> Experiment:
        """Retrieve an experiment by experiment_id from the backend store.

        Raises:
            ResourceDoesNotExist: If the experiment does not exist.
        """
        return self.store.get_experiment(experiment_id)

    def get_experiment_by_name(self, name: str) -> Experiment:
        """Retrieve an experiment by experiment name from the backend store.

        Raises:
            ResourceDoesNotExist: If no experiment has that name.
        """
        return self.store.get_experiment_by_name(name)

    def get_or_create_experiment(
        self, name: str, artifact_location: Optional[str] = None
    ) -> ExperimentId:
        """Return the ID of the experiment called ``name``, creating it if needed."""
        try:
            return self.get_experiment_by_name(name).experiment_id
        except ResourceDoesNotExist:
            _logger.info("Experiment '%s' does not exist. Creating a new experiment.", name)
            return self.create_experiment(name, artifact_location)

    def list_experiments(self, view_type: int = ViewType.ACTIVE_ONLY) -> list[Experiment]:
        """
        Args:
            view_type: One of ``ViewType.ACTIVE_ONLY``, ``ViewType.DELETED_ONLY`` or
                ``ViewType.ALL``.

        Returns:
            List of :py:class:`mlrest.entities.Experiment`.
        """
        return self.store.list_experiments(view_type)

    def delete_experiment(self, experiment_id: str) -> None:
        self.store.delete_experiment(experiment_id)

    def update_experiment(self, experiment_id: str, new_name: Optional[str] = None) -> None:
        """Rename an experiment. Experiments fetched earlier keep their old name."""
        self.store.update_experiment(experiment_id, new_name)

    # Runs

    def create_run(
        self,
        experiment_id: str,
        start_time: Optional[int] = None,
        tags: Optional[Sequence[RunTag]] = None,
    ) -> Run:
        """
        Create a :py:class:`mlrest.entities.Run` object that can be associated with
        metrics, parameters and tags.

        Args:
            experiment_id: The ID of the experiment to create a run in.
            start_time: Start time of the run in milliseconds. Defaults to now.
            tags: A list of :py:class:`mlrest.entities.RunTag` to set on the run.

        Returns:
            :py:class:`mlrest.entities.Run` that was created.
        """
        start_time = start_time if start_time is not None else get_current_time_millis()
        return self.store.create_run(experiment_id, start_time, list(tags or []))

    def get_run(self, run_id: str) -> Run:
        """
        Fetch the run from backend store.

        Raises:
            ResourceDoesNotExist: If the run does not exist.
        """
        return self.store.get_run(run_id)

    def delete_run(self, run_id: str) -> None:
        self.store.delete_run(run_id)

    def update_run(
        self, run_id: str, status: str = RunStatus.FINISHED, end_time: Optional[int] = None
    ) -> RunInfo:
        """Set the status of a run. ``end_time`` defaults to now.

        Returns:
            The updated :py:class:`mlrest.entities.RunInfo` as reported by the store.
        """
        end_time = end_time if end_time is not None else get_current_time_millis()
        return self.store.update_run(run_id, status, end_time)

    def log_param(self, run_id: str, key: str, value: str) -> None:
        self.store.log_param(run_id, key, value)

    def log_metric(
        self,
        run_id: str,
        key: str,
        value: float,
        timestamp: Optional[int] = None,
        step: int = 0,
    ) -> None:
        """
        Log a metric against the run ID.

        Args:
            run_id: The run id to which the metric should be logged.
            key: Metric name.
            value: Metric value (float).
            timestamp: Time when this metric was calculated. Defaults to the current system time.
            step: Integer training step (iteration) at which was the metric calculated.
        """
        timestamp = timestamp if timestamp is not None else get_current_time_millis()
        self.store.log_metric(run_id, key, value, timestamp, step)

    def log_batch(
        self,
        run_id: str,
        metrics: Sequence[Metric] = (),
        params: Sequence[Param] = (),
        tags: Sequence[RunTag] = (),
    ) -> None:
        """
        Log multiple metrics, params, and/or tags.

        Raises:
            BatchError: If the batch exceeds the batch size limits. Nothing is sent then.
        """
        self.store.log_batch(run_id, list(metrics), list(params), list(tags))

    def get_metric_history(self, run_id: str, key: str) -> list[Metric]:
        """Return a list of metric objects corresponding to all values logged for a given metric."""
        return self.store.get_metric_history(run_id, key)

    def search_runs(
        self,
        experiment_ids: Union[str, list[str]],
        filter_string: str = "",
        run_view_type: int = ViewType.ACTIVE_ONLY,
        max_results: int = SEARCH_MAX_RESULTS_DEFAULT,
        order_by: Optional[list[str]] = None,
        page_token: Optional[str] = None,
    ) -> PagedList[Run]:
        """
        Search for Runs that fit the specified criteria.

        Args:
            experiment_ids: List of experiment IDs, or a single int or string id.
            filter_string: Filter query string, defaults to searching all runs.
            run_view_type: one of enum values ACTIVE_ONLY, DELETED_ONLY, or ALL runs.
            max_results: Maximum number of runs desired.
            order_by: List of columns to order by (e.g., "start_time DESC").
            page_token: Token specifying the next page of results. It should be obtained from
                a ``search_runs`` call.

        Returns:
            A :py:class:`PagedList <mlrest.entities.PagedList>` of
            :py:class:`Run <mlrest.entities.Run>` objects that satisfy the search expressions.
            If the tracking server supports pagination, the token for the next page may be
            obtained via the ``token`` attribute of the returned object.
        """
        if isinstance(experiment_ids, (str, int)):
            experiment_ids = [experiment_ids]
        return self.store.search_runs(
            experiment_ids=experiment_ids,
            filter_string=filter_string,
            run_view_type=run_view_type,
            max_results=max_results,
            order_by=order_by,
            page_token=page_token,
        )

    def list_run_infos(
        self,
        experiment_id: str,
        run_view_type: int = ViewType.ACTIVE_ONLY,
        max_results: int = SEARCH_MAX_RESULTS_DEFAULT,
        order_by: Optional[list[str]] = None,
        page_token: Optional[str] = None,
    ) -> PagedList[RunInfo]:
        """Like :py:meth:`search_runs` for a single experiment, returning only run metadata."""
        return self.store.list_run_infos(
            experiment_id,
            run_view_type=run_view_type,
            max_results=max_results,
            order_by=order_by,
            page_token=page_token,
        )
