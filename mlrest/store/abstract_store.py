from abc import ABCMeta, abstractmethod

from mlrest.entities import PagedList, ViewType

SEARCH_MAX_RESULTS_DEFAULT = 1000


class AbstractStore(metaclass=ABCMeta):
    """
    Abstract class for the tracking backend.
    This class defines the API interface for front ends to connect with various types of backends.

    Operations raise the error kinds of :py:mod:`mlrest.exceptions`: creating raises
    ``CreateError``, reading, deleting and updating raise ``GetError``, batched logging raises
    ``BatchError``, and everything else raises ``StorageError``.
    """

    def __init__(self):
        """
        Empty constructor for now. This is deliberately not marked as abstract, else every
        derived class would be forced to create one.
        """

    @abstractmethod
    def list_experiments(self, view_type=ViewType.ACTIVE_ONLY):
        """
        :param view_type: Qualify requested type of experiments.

        :return: a list of Experiment objects stored in store for requested view.
        """

    @abstractmethod
    def create_experiment(self, name, artifact_location=None):
        """
        Create a new experiment.
        If an experiment with the given name already exists, raises
        :py:class:`mlrest.exceptions.ResourceAlreadyExists`.

        :param name: Desired name for an experiment
        :param artifact_location: Base location for artifacts in runs. May be None.

        :return: :py:class:`mlrest.entities.ExperimentId` of the newly created experiment.
        """

    @abstractmethod
    def get_experiment(self, experiment_id):
        """
        Fetch the experiment by ID from the backend store.

        :param experiment_id: :py:class:`mlrest.entities.ExperimentId` of the experiment

        :return: A single :py:class:`mlrest.entities.Experiment` object if it exists,
            otherwise raises :py:class:`mlrest.exceptions.ResourceDoesNotExist`.
        """

    @abstractmethod
    def get_experiment_by_name(self, experiment_name):
        """
        Fetch the experiment by name from the backend store.

        :param experiment_name: Name of experiment

        :return: A single :py:class:`mlrest.entities.Experiment` object if it exists,
            otherwise raises :py:class:`mlrest.exceptions.ResourceDoesNotExist`.
        """

    @abstractmethod
    def delete_experiment(self, experiment_id):
        """
        Delete the experiment from the backend store.

        :param experiment_id: :py:class:`mlrest.entities.ExperimentId` of the experiment
        """

    @abstractmethod
    def update_experiment(self, experiment_id, new_name=None):
        """
        Update an experiment's name. The new name must be unique. Previously fetched
        experiment objects are not updated.

        :param experiment_id: :py:class:`mlrest.entities.ExperimentId` of the experiment
        :param new_name: New name of the experiment. Nothing is renamed if None.
        """

    @abstractmethod
    def create_run(self, experiment_id, start_time, tags):
        """
        Create a run under the specified experiment ID, setting the run's status to "RUNNING".

        :param experiment_id: ID of the experiment for this run
        :param start_time: Start time of the run, in milliseconds since the UNIX epoch
        :param tags: List of :py:class:`mlrest.entities.RunTag` to set on the run

        :return: The created :py:class:`mlrest.entities.Run` object
        """

    @abstractmethod
    def get_run(self, run_id):
        """
        Fetch the run from backend store

        :param run_id: Unique identifier for the run

        :return: A single :py:class:`mlrest.entities.Run` object if it exists,
            otherwise raises :py:class:`mlrest.exceptions.ResourceDoesNotExist`
        """

    @abstractmethod
    def delete_run(self, run_id):
        """
        Delete a run.

        :param run_id: Unique identifier for the run
        """

    @abstractmethod
    def update_run(self, run_id, run_status, end_time):
        """
        Update the status and end time of the specified run.

        :return: :py:class:`mlrest.entities.RunInfo` describing the updated run.
        """

    @abstractmethod
    def log_param(self, run_id, key, value):
        """
        Log a param for the specified run

        :param run_id: String id for the run
        :param key: Param name
        :param value: String value of the param
        """

    @abstractmethod
    def log_metric(self, run_id, key, value, timestamp, step=0):
        """
        Log a metric for the specified run

        :param run_id: String id for the run
        :param key: Metric name
        :param value: Float value of the metric
        :param timestamp: Time the value was observed, in milliseconds since the UNIX epoch
        :param step: Integer step of the metric
        """

    @abstractmethod
    def log_batch(self, run_id, metrics, params, tags):
        """
        Log multiple metrics, params, and tags for the specified run. The batch is checked
        against the batch size limits before anything is sent.

        :param run_id: String id for the run
        :param metrics: List of :py:class:`mlrest.entities.Metric` instances to log
        :param params: List of :py:class:`mlrest.entities.Param` instances to log
        :param tags: List of :py:class:`mlrest.entities.RunTag` instances to log

        :return: None.
        """

    @abstractmethod
    def get_metric_history(self, run_id, metric_key):
        """
        Return all logged values for a given metric.

        :param run_id: Unique identifier for run
        :param metric_key: Metric name within the run

        :return: A list of :py:class:`mlrest.entities.Metric` logged under the key,
            else empty list
        """

    @abstractmethod
    def search_runs(
        self,
        experiment_ids,
        filter_string="",
        run_view_type=ViewType.ACTIVE_ONLY,
        max_results=SEARCH_MAX_RESULTS_DEFAULT,
        order_by=None,
        page_token=None,
    ):
        """
        Return runs that match the given filter within the experiments.

        :param experiment_ids: List of experiment ids to scope the search
        :param filter_string: Filter query string, empty for all runs
        :param run_view_type: ACTIVE_ONLY, DELETED_ONLY, or ALL runs
        :param max_results: Maximum number of runs desired
        :param order_by: List of order_by clauses, e.g. ``["start_time DESC"]``
        :param page_token: Token specifying the next page of results. It should be obtained from
            a ``search_runs`` call.

        :return: A :py:class:`mlrest.entities.PagedList` of :py:class:`mlrest.entities.Run`
            objects that satisfy the search expressions. If the underlying tracking store
            supports pagination, the token for the next page may be obtained via the ``token``
            attribute of the returned object.
        """

    def list_run_infos(
        self,
        experiment_id,
        run_view_type=ViewType.ACTIVE_ONLY,
        max_results=SEARCH_MAX_RESULTS_DEFAULT,
        order_by=None,
        page_token=None,
    ):
        """
        Return run information for runs which belong to the experiment_id

        :param experiment_id: The experiment id which to search

        :return: A :py:class:`mlrest.entities.PagedList` of
            :py:class:`mlrest.entities.RunInfo` objects
        """
        runs = self.search_runs(
            [experiment_id], "", run_view_type, max_results, order_by, page_token
        )
        return PagedList([run.info for run in runs], runs.token)
