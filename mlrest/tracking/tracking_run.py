"""
Client-side buffer for the values of a single run.

A :py:class:`TrackingRun` collects params, tags and metrics without talking to the tracking
server, then creates the run and sends everything in as few batches as the batch size limits
allow when it is submitted.
"""

import logging

from mlrest.entities import Metric, Param, Run, RunStatus, RunTag
from mlrest.exceptions import TooManyParams, TooManyTags
from mlrest.utils.time import get_current_time_millis
from mlrest.utils.validation import (
    MAX_METRICS_PER_BATCH,
    MAX_PARAMS_TAGS_PER_BATCH,
    _validate_metric_value,
)

_logger = logging.getLogger(__name__)


class TrackingRun:
    """
    Buffers params, tags and metrics of a run until :py:meth:`submit` is called.

    The start time of the run is the time the buffer was created. Params and tags are sent
    together in one batch, so each is capped at the per-batch limit of 100. Metrics are split
    into chunks of at most 1000, one batch per chunk, and are not capped in total.

    A ``TrackingRun`` is not thread safe.
    """

    def __init__(self):
        self.start_time = get_current_time_millis()
        self._params = []
        self._tags = []
        self._metric_chunks = [[]]

    @property
    def params(self):
        return list(self._params)

    @property
    def tags(self):
        return list(self._tags)

    @property
    def metric_chunks(self):
        """Buffered metrics, in logging order, split into chunks of at most 1000 metrics."""
        return [list(chunk) for chunk in self._metric_chunks if chunk]

    def log_param(self, key, value):
        """
        Buffer a param.

        Raises:
            TooManyParams: If 100 params are already buffered.
        """
        if len(self._params) >= MAX_PARAMS_TAGS_PER_BATCH:
            raise TooManyParams(len(self._params) + 1, MAX_PARAMS_TAGS_PER_BATCH)
        self._params.append(Param(key, str(value)))

    def log_tag(self, key, value):
        """
        Buffer a tag.

        Raises:
            TooManyTags: If 100 tags are already buffered.
        """
        if len(self._tags) >= MAX_PARAMS_TAGS_PER_BATCH:
            raise TooManyTags(len(self._tags) + 1, MAX_PARAMS_TAGS_PER_BATCH)
        self._tags.append(RunTag(key, str(value)))

    def log_metric(self, key, value, step=0, timestamp=None):
        """
        Buffer a metric value. The timestamp defaults to the time of this call.

        Raises:
            MlrestException: If ``value`` is not a number.
        """
        _validate_metric_value(key, value)
        timestamp = timestamp if timestamp is not None else get_current_time_millis()
        if len(self._metric_chunks[-1]) >= MAX_METRICS_PER_BATCH:
            self._metric_chunks.append([])
        self._metric_chunks[-1].append(Metric(key, value, timestamp, step))

    def submit(self, client, experiment_id):
        """
        Create the run under ``experiment_id`` and send the buffered values.

        The run is created, params and tags are logged in one batch, each metric chunk is
        logged in its own batch in logging order, and the run is finally marked as finished.
        The first failing call stops the submission and its error is raised; values logged
        before that stay on the server and the run is left unfinished.

        Args:
            client: A :py:class:`mlrest.tracking.TrackingClient` or a tracking store.
            experiment_id: ID of the experiment to create the run in.

        Returns:
            The :py:class:`mlrest.entities.Run` returned when the run was created, with its
            info replaced by the run info returned when it was marked as finished.
        """
        run = client.create_run(experiment_id, self.start_time, [])
        run_id = run.info.run_id
        metric_chunks = self.metric_chunks
        _logger.debug(
            "Submitting run %s: %d params, %d tags and %d metric batches",
            run_id,
            len(self._params),
            len(self._tags),
            len(metric_chunks),
        )

        client.log_batch(run_id, [], self.params, self.tags)
        for chunk in metric_chunks:
            client.log_batch(run_id, chunk, [], [])

        run_info = client.update_run(run_id, RunStatus.FINISHED, get_current_time_millis())
        _logger.info("Submitted run %s to experiment %s", run_id, experiment_id)
        return Run(run_info, run.data)
