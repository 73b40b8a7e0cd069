from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.metric import Metric
from mlrest.entities.param import Param
from mlrest.entities.run_tag import RunTag
from mlrest.protos.service import Param as ProtoParam
from mlrest.protos.service import RunData as ProtoRunData
from mlrest.protos.service import RunTag as ProtoRunTag


class RunData(_MlrestObject):
    """
    Run data (metrics, parameters and tags).
    """

    def __init__(self, metrics=None, params=None, tags=None):
        """
        Construct a new :py:class:`mlrest.entities.RunData` instance.

        Args:
            metrics: List of :py:class:`mlrest.entities.Metric`.
            params: List of :py:class:`mlrest.entities.Param`.
            tags: List of :py:class:`mlrest.entities.RunTag`.
        """
        # Maintain the original list of metrics so that we can easily convert it back to
        # its wire form
        self._metric_objs = list(metrics or [])
        self._metrics = {metric.key: metric.value for metric in self._metric_objs}
        self._params = {param.key: param.value for param in (params or [])}
        self._tags = {tag.key: tag.value for tag in (tags or [])}

    @property
    def metrics(self):
        """
        Dictionary of string key -> metric value for the current run.
        For each metric key, the value logged last is returned.
        """
        return self._metrics

    @property
    def params(self):
        """Dictionary of param key (string) -> param value for the current run."""
        return self._params

    @property
    def tags(self):
        """Dictionary of tag key (string) -> tag value for the current run."""
        return self._tags

    def _add_metric(self, metric):
        self._metrics[metric.key] = metric.value
        self._metric_objs.append(metric)

    def _add_param(self, param):
        self._params[param.key] = param.value

    def _add_tag(self, tag):
        self._tags[tag.key] = tag.value

    def to_proto(self):
        return ProtoRunData(
            metrics=[m.to_proto() for m in self._metric_objs] or None,
            params=[ProtoParam(key=key, value=val) for key, val in self.params.items()] or None,
            tags=[ProtoRunTag(key=key, value=val) for key, val in self.tags.items()] or None,
        )

    def to_dictionary(self):
        return {
            "metrics": self.metrics,
            "params": self.params,
            "tags": self.tags,
        }

    @classmethod
    def from_proto(cls, proto):
        run_data = cls()
        for proto_metric in proto.metrics or []:
            run_data._add_metric(Metric.from_proto(proto_metric))
        for proto_param in proto.params or []:
            run_data._add_param(Param.from_proto(proto_param))
        for proto_tag in proto.tags or []:
            run_data._add_tag(RunTag.from_proto(proto_tag))
        return run_data
