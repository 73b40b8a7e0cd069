"""
The ``mlrest.entities`` module defines entities returned by the tracking server
REST API.
"""

from mlrest.entities.experiment import Experiment
from mlrest.entities.experiment_tag import ExperimentTag
from mlrest.entities.ids import ExperimentId, PageToken, RunId
from mlrest.entities.lifecycle_stage import LifecycleStage
from mlrest.entities.metric import Metric
from mlrest.entities.paged_list import PagedList
from mlrest.entities.param import Param
from mlrest.entities.run import Run
from mlrest.entities.run_data import RunData
from mlrest.entities.run_info import RunInfo
from mlrest.entities.run_status import RunStatus
from mlrest.entities.run_tag import RunTag
from mlrest.entities.view_type import ViewType

__all__ = [
    "Experiment",
    "ExperimentId",
    "ExperimentTag",
    "LifecycleStage",
    "Metric",
    "PagedList",
    "PageToken",
    "Param",
    "Run",
    "RunData",
    "RunId",
    "RunInfo",
    "RunStatus",
    "RunTag",
    "ViewType",
]
