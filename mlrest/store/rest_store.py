import logging

from pydantic import ValidationError

from mlrest.entities import ViewType
from mlrest.exceptions import (
    RESOURCE_ALREADY_EXISTS,
    RESOURCE_DOES_NOT_EXIST,
    MlrestException,
    ResourceAlreadyExists,
    ResourceDoesNotExist,
    RestException,
    StorageError,
)
from mlrest.store.abstract_store import SEARCH_MAX_RESULTS_DEFAULT, AbstractStore
from mlrest.store.endpoints import ENDPOINTS
from mlrest.utils.proto_json_utils import message_to_dict
from mlrest.utils.rest_utils import call_endpoint
from mlrest.utils.validation import _validate_batch_log_limits

_logger = logging.getLogger(__name__)


def _already_exists(name):
    """Error mapper turning a RESOURCE_ALREADY_EXISTS response into ResourceAlreadyExists."""

    def mapper(e):
        if e.error_code == RESOURCE_ALREADY_EXISTS:
            return ResourceAlreadyExists(name)
        return None

    return mapper


def _does_not_exist(name):
    """Error mapper turning a RESOURCE_DOES_NOT_EXIST response into ResourceDoesNotExist."""

    def mapper(e):
        if e.error_code == RESOURCE_DOES_NOT_EXIST:
            return ResourceDoesNotExist(name)
        return None

    return mapper


def _order_by_list(order_by):
    if order_by is None:
        return None
    if isinstance(order_by, str):
        return [order_by]
    return list(order_by)


class RestStore(AbstractStore):
    """
    Client for a remote tracking server accessed via REST API calls

    :param get_host_creds: Method to be invoked prior to every REST request to get the
      :py:class:`mlrest.utils.rest_utils.HostCreds` for the request. Note that this
      is a function so that we can obtain fresh credentials in the case of expiry.
    """

    def __init__(self, get_host_creds):
        super().__init__()
        self.get_host_creds = get_host_creds

    def _call_endpoint(self, operation, on_error=None, **fields):
        """
        Sends the request of ``operation`` built from ``fields`` and returns the extracted
        response value.

        Error responses are passed to ``on_error``, which may return a more specific
        exception. Everything else fails as :py:class:`mlrest.exceptions.StorageError`.
        """
        endpoint = ENDPOINTS[operation]
        try:
            request = endpoint.request(**fields)
        except ValidationError as e:
            raise StorageError(f"Failed to build the {operation} request", cause=e) from e

        try:
            response = call_endpoint(
                self.get_host_creds(),
                endpoint.path,
                endpoint.method,
                message_to_dict(request),
                endpoint.request.Response,
            )
        except StorageError:
            raise
        except RestException as e:
            mapped = on_error(e) if on_error is not None else None
            if mapped is not None:
                raise mapped from e
            raise StorageError(f"Tracking server failed to {operation}", cause=e) from e
        except MlrestException as e:
            raise StorageError(f"Failed to {operation}", cause=e) from e
        return endpoint.extract(response)

    def list_experiments(self, view_type=ViewType.ACTIVE_ONLY):
        """
        :return: a list of all known Experiment objects
        """
        return self._call_endpoint("list_experiments", view_type=ViewType.to_string(view_type))

    def create_experiment(self, name, artifact_location=None):
        """
        Create a new experiment.
        If an experiment with the given name already exists, raises ResourceAlreadyExists.

        :param name: Desired name for an experiment

        :return: ExperimentId of the newly created experiment
        """
        return self._call_endpoint(
            "create_experiment",
            on_error=_already_exists(name),
            name=name,
            artifact_location=artifact_location,
        )

    def get_experiment(self, experiment_id):
        """
        Fetch the experiment from the backend store.

        :param experiment_id: ExperimentId of the experiment

        :return: A single :py:class:`mlrest.entities.Experiment` object if it exists,
            otherwise raises ResourceDoesNotExist.
        """
        return self._call_endpoint(
            "get_experiment",
            on_error=_does_not_exist(experiment_id),
            experiment_id=str(experiment_id),
        )

    def get_experiment_by_name(self, experiment_name):
        return self._call_endpoint(
            "get_experiment_by_name",
            on_error=_does_not_exist(experiment_name),
            experiment_name=experiment_name,
        )

    def delete_experiment(self, experiment_id):
        self._call_endpoint(
            "delete_experiment",
            on_error=_does_not_exist(experiment_id),
            experiment_id=str(experiment_id),
        )

    def update_experiment(self, experiment_id, new_name=None):
        self._call_endpoint(
            "update_experiment", experiment_id=str(experiment_id), new_name=new_name
        )

    def create_run(self, experiment_id, start_time, tags):
        """
        Create a run under the specified experiment ID, setting the run's status to "RUNNING".

        :param experiment_id: ID of the experiment for this run
        :param start_time: Start time of the run in milliseconds
        :param tags: List of RunTag to set on the run

        :return: The created Run object
        """
        return self._call_endpoint(
            "create_run",
            experiment_id=str(experiment_id),
            start_time=start_time,
            tags=[dict(tag) for tag in tags],
        )

    def get_run(self, run_id):
        """
        Fetch the run from backend store

        :param run_id: Unique identifier for the run

        :return: A single Run object if it exists, otherwise raises ResourceDoesNotExist
        """
        return self._call_endpoint("get_run", on_error=_does_not_exist(run_id), run_id=str(run_id))

    def delete_run(self, run_id):
        self._call_endpoint("delete_run", on_error=_does_not_exist(run_id), run_id=str(run_id))

    def update_run(self, run_id, run_status, end_time):
        """Updates the status and end time of the specified run."""
        return self._call_endpoint(
            "update_run",
            on_error=_does_not_exist(run_id),
            run_id=str(run_id),
            status=run_status,
            end_time=end_time,
        )

    def log_param(self, run_id, key, value):
        self._call_endpoint("log_param", run_id=str(run_id), key=key, value=value)

    def log_metric(self, run_id, key, value, timestamp, step=0):
        self._call_endpoint(
            "log_metric",
            run_id=str(run_id),
            key=key,
            value=value,
            timestamp=timestamp,
            step=step,
        )

    def log_batch(self, run_id, metrics, params, tags):
        _validate_batch_log_limits(metrics, params, tags)
        _logger.debug(
            "Logging batch of %d metrics, %d params and %d tags to run %s",
            len(metrics),
            len(params),
            len(tags),
            run_id,
        )
        self._call_endpoint(
            "log_batch",
            run_id=str(run_id),
            metrics=[dict(metric) for metric in metrics],
            params=[dict(param) for param in params],
            tags=[dict(tag) for tag in tags],
        )

    def get_metric_history(self, run_id, metric_key):
        """
        Return all logged values for a given metric.

        :param run_id: Unique identifier for run
        :param metric_key: Metric name within the run

        :return: A list of Metric entities logged for the given key, else empty list
        """
        return self._call_endpoint(
            "get_metric_history",
            on_error=_does_not_exist(run_id),
            run_id=str(run_id),
            metric_key=metric_key,
        )

    def _search(
        self,
        operation,
        experiment_ids,
        filter_string,
        run_view_type,
        max_results,
        order_by,
        page_token,
    ):
        return self._call_endpoint(
            operation,
            experiment_ids=[str(experiment_id) for experiment_id in experiment_ids],
            filter=filter_string or "",
            run_view_type=ViewType.to_string(run_view_type),
            max_results=max_results,
            order_by=_order_by_list(order_by),
            page_token=str(page_token) if page_token else None,
        )

    def search_runs(
        self,
        experiment_ids,
        filter_string="",
        run_view_type=ViewType.ACTIVE_ONLY,
        max_results=SEARCH_MAX_RESULTS_DEFAULT,
        order_by=None,
        page_token=None,
    ):
        return self._search(
            "search_runs",
            experiment_ids,
            filter_string,
            run_view_type,
            max_results,
            order_by,
            page_token,
        )

    def list_run_infos(
        self,
        experiment_id,
        run_view_type=ViewType.ACTIVE_ONLY,
        max_results=SEARCH_MAX_RESULTS_DEFAULT,
        order_by=None,
        page_token=None,
    ):
        return self._search(
            "list_run_infos",
            [experiment_id],
            "",
            run_view_type,
            max_results,
            order_by,
            page_token,
        )
