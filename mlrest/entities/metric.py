from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.protos.service import Metric as ProtoMetric


class Metric(_MlrestObject):
    """
    Metric object. Several metrics may share a key with different steps; together they
    form the time series of that key.
    """

    def __init__(self, key, value, timestamp, step=0):
        self._key = key
        self._value = value
        self._timestamp = timestamp
        self._step = step

    @property
    def key(self):
        """String key corresponding to the metric name."""
        return self._key

    @property
    def value(self):
        """Float value of the metric."""
        return self._value

    @property
    def timestamp(self):
        """Metric timestamp as an integer (milliseconds since the Unix epoch)."""
        return self._timestamp

    @property
    def step(self):
        """Integer metric step (x-coordinate)."""
        return self._step

    def to_proto(self):
        return ProtoMetric(key=self.key, value=self.value, timestamp=self.timestamp, step=self.step)

    @classmethod
    def from_proto(cls, proto):
        return cls(proto.key, proto.value, proto.timestamp, proto.step)
