from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.ids import ExperimentId, RunId
from mlrest.entities.run_status import RunStatus
from mlrest.protos.service import RunInfo as ProtoRunInfo


class RunInfo(_MlrestObject):
    """
    Metadata about a run.
    """

    def __init__(
        self,
        run_id,
        experiment_id,
        status,
        start_time,
        end_time,
        lifecycle_stage,
        artifact_uri=None,
        run_name=None,
        user_id=None,
        run_uuid=None,
    ):
        if experiment_id is None:
            raise Exception("experiment_id cannot be None")
        if status is None:
            raise Exception("status cannot be None")
        if start_time is None:
            raise Exception("start_time cannot be None")
        actual_run_id = run_id or run_uuid
        if actual_run_id is None:
            raise Exception("run_id and run_uuid cannot both be None")
        self._run_id = RunId(actual_run_id)
        self._run_uuid = run_uuid
        self._experiment_id = ExperimentId(experiment_id)
        self._user_id = user_id
        self._status = RunStatus.from_string(status)
        self._start_time = start_time
        self._end_time = end_time
        self._lifecycle_stage = lifecycle_stage
        self._artifact_uri = artifact_uri
        self._run_name = run_name

    @property
    def run_id(self):
        """:py:class:`mlrest.entities.RunId` of the run."""
        return self._run_id

    @property
    def run_uuid(self):
        """[Deprecated, use run_id instead] String containing run UUID, if the server sent it."""
        return self._run_uuid

    @property
    def experiment_id(self):
        """:py:class:`mlrest.entities.ExperimentId` of the experiment for the current run."""
        return self._experiment_id

    @property
    def run_name(self):
        """String containing run name."""
        return self._run_name

    @property
    def user_id(self):
        """[Deprecated] String ID of the user who initiated this run."""
        return self._user_id

    @property
    def status(self):
        """
        One of the values in :py:class:`mlrest.entities.RunStatus`
        describing the status of the run.
        """
        return self._status

    @property
    def start_time(self):
        """Start time of the run, in number of milliseconds since the UNIX epoch."""
        return self._start_time

    @property
    def end_time(self):
        """End time of the run, in number of milliseconds since the UNIX epoch."""
        return self._end_time

    @property
    def artifact_uri(self):
        """String root artifact URI of the run."""
        return self._artifact_uri

    @property
    def lifecycle_stage(self):
        return self._lifecycle_stage

    def _copy_with_overrides(self, status=None, end_time=None, lifecycle_stage=None):
        """A copy of the RunInfo with certain attributes modified."""
        proto = self.to_proto()
        if status:
            proto.status = status
        if end_time:
            proto.end_time = end_time
        if lifecycle_stage:
            proto.lifecycle_stage = lifecycle_stage
        return RunInfo.from_proto(proto)

    def to_proto(self):
        return ProtoRunInfo(
            run_id=self.run_id,
            run_uuid=self.run_uuid,
            run_name=self.run_name,
            experiment_id=self.experiment_id,
            user_id=self.user_id,
            status=RunStatus.to_string(self.status),
            start_time=self.start_time,
            end_time=self.end_time,
            artifact_uri=self.artifact_uri,
            lifecycle_stage=self.lifecycle_stage,
        )

    @classmethod
    def from_proto(cls, proto):
        return cls(
            run_id=proto.run_id,
            run_uuid=proto.run_uuid,
            run_name=proto.run_name,
            experiment_id=proto.experiment_id,
            user_id=proto.user_id,
            status=proto.status,
            start_time=proto.start_time,
            end_time=proto.end_time,
            lifecycle_stage=proto.lifecycle_stage,
            artifact_uri=proto.artifact_uri,
        )
