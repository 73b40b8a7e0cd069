from mlrest.entities.base_tag import BaseTag
from mlrest.protos.service import ExperimentTag as ProtoExperimentTag


class ExperimentTag(BaseTag):
    """Tag object associated with an experiment."""

    def to_proto(self):
        return ProtoExperimentTag(key=self.key, value=self.value)
