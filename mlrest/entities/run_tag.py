from mlrest.entities.base_tag import BaseTag
from mlrest.protos.service import RunTag as ProtoRunTag


class RunTag(BaseTag):
    """Tag object associated with a run."""

    def to_proto(self):
        return ProtoRunTag(key=self.key, value=self.value)
