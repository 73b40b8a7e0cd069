"""
The ``mlrest`` module is a client for MLflow-compatible tracking servers. For example:

.. code:: python

    from mlrest import TrackingClient, TrackingRun

    client = TrackingClient("http://localhost:5000/api")
    experiment_id = client.get_or_create_experiment("my-experiment")

    run = TrackingRun()
    run.log_param("my", "param")
    for step in range(10):
        run.log_metric("score", step * 0.1, step=step)
    run.submit(client, experiment_id)

The client and the run buffer are not threadsafe. Any concurrent callers must implement
mutual exclusion manually.
"""

from mlrest.version import VERSION

__version__ = VERSION

from mlrest import entities, exceptions, tracking  # noqa: F401
from mlrest.environment_variables import MLREST_CONFIGURE_LOGGING
from mlrest.exceptions import MlrestException
from mlrest.tracking import (
    TrackingClient,
    TrackingRun,
    get_tracking_uri,
    is_tracking_uri_set,
    set_tracking_uri,
)
from mlrest.utils.logging_utils import _configure_mlrest_loggers
from mlrest.utils.time import get_current_time_millis as timestamp

if MLREST_CONFIGURE_LOGGING.get() is True:
    _configure_mlrest_loggers(root_module_name=__name__)

__all__ = [
    "MlrestException",
    "TrackingClient",
    "TrackingRun",
    "get_tracking_uri",
    "is_tracking_uri_set",
    "set_tracking_uri",
    "timestamp",
]
