"""
The ``mlrest.tracking`` module provides the client of the tracking server and the run
buffer built on top of it.
"""

from mlrest.tracking.client import TrackingClient
from mlrest.tracking.tracking_run import TrackingRun
from mlrest.tracking.utils import get_tracking_uri, is_tracking_uri_set, set_tracking_uri

__all__ = [
    "TrackingClient",
    "TrackingRun",
    "get_tracking_uri",
    "is_tracking_uri_set",
    "set_tracking_uri",
]
