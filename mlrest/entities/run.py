from typing import Any, Dict, Optional

from mlrest.entities._mlrest_object import _MlrestObject
from mlrest.entities.run_data import RunData
from mlrest.entities.run_info import RunInfo
from mlrest.exceptions import MlrestException
from mlrest.protos.service import Run as ProtoRun


class Run(_MlrestObject):
    """
    Run object.
    """

    def __init__(self, run_info: RunInfo, run_data: Optional[RunData] = None) -> None:
        if run_info is None:
            raise MlrestException("run_info cannot be None")
        self._info = run_info
        self._data = run_data if run_data is not None else RunData()

    @property
    def info(self) -> RunInfo:
        """
        The run metadata, such as the run id, start time, and status.

        :rtype: :py:class:`mlrest.entities.RunInfo`
        """
        return self._info

    @property
    def data(self) -> RunData:
        """
        The run data, including metrics, parameters, and tags.

        :rtype: :py:class:`mlrest.entities.RunData`
        """
        return self._data

    def to_proto(self):
        return ProtoRun(info=self.info.to_proto(), data=self.data.to_proto())

    @classmethod
    def from_proto(cls, proto):
        return cls(RunInfo.from_proto(proto.info), RunData.from_proto(proto.data))

    def to_dictionary(self) -> Dict[Any, Any]:
        return {
            "info": dict(self.info),
            "data": self.data.to_dictionary(),
        }
