from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.experiment_tag import ExperimentTag
from mlrest.entities.ids import ExperimentId
from mlrest.protos.service import Experiment as ProtoExperiment
from mlrest.protos.service import ExperimentTag as ProtoExperimentTag


class Experiment(_MlrestObject):
    """
    Experiment object. A snapshot of the server-side state at the time it was fetched;
    renaming an experiment does not update previously fetched objects.
    """

    def __init__(
        self,
        experiment_id,
        name,
        artifact_location,
        lifecycle_stage,
        tags=None,
        creation_time=None,
        last_update_time=None,
    ):
        super().__init__()
        self._experiment_id = ExperimentId(experiment_id)
        self._name = name
        self._artifact_location = artifact_location
        self._lifecycle_stage = lifecycle_stage
        if isinstance(tags, dict):
            self._tags = dict(tags)
        else:
            self._tags = {tag.key: tag.value for tag in (tags or [])}
        self._creation_time = creation_time
        self._last_update_time = last_update_time

    @property
    def experiment_id(self):
        """:py:class:`mlrest.entities.ExperimentId` of the experiment."""
        return self._experiment_id

    @property
    def name(self):
        """String name of the experiment."""
        return self._name

    @property
    def artifact_location(self):
        """String corresponding to the root artifact URI for the experiment."""
        return self._artifact_location

    @property
    def lifecycle_stage(self):
        """Lifecycle stage of the experiment. Can either be 'active' or 'deleted'."""
        return self._lifecycle_stage

    @property
    def tags(self):
        """Copy of the tags that have been set on the experiment, as a key -> value dict."""
        return dict(self._tags)

    def _add_tag(self, tag):
        self._tags[tag.key] = tag.value

    @property
    def creation_time(self):
        return self._creation_time

    @property
    def last_update_time(self):
        return self._last_update_time

    @classmethod
    def from_proto(cls, proto):
        experiment = cls(
            proto.experiment_id,
            proto.name,
            proto.artifact_location,
            proto.lifecycle_stage,
            creation_time=proto.creation_time,
            last_update_time=proto.last_update_time,
        )
        for proto_tag in proto.tags or []:
            experiment._add_tag(ExperimentTag.from_proto(proto_tag))
        return experiment

    def to_proto(self):
        return ProtoExperiment(
            experiment_id=self.experiment_id,
            name=self.name,
            artifact_location=self.artifact_location,
            lifecycle_stage=self.lifecycle_stage,
            creation_time=self.creation_time,
            last_update_time=self.last_update_time,
            tags=[ProtoExperimentTag(key=key, value=val) for key, val in self._tags.items()]
            or None,
        )
