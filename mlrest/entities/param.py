from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.protos.service import Param as ProtoParam


class Param(_MlrestObject):
    """
    Parameter object.
    """

    def __init__(self, key, value):
        self._key = key
        self._value = value

    @property
    def key(self):
        """String key corresponding to the parameter name."""
        return self._key

    @property
    def value(self):
        """String value of the parameter."""
        return self._value

    def to_proto(self):
        return ProtoParam(key=self.key, value=self.value)

    @classmethod
    def from_proto(cls, proto):
        return cls(proto.key, proto.value)
