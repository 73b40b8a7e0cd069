import pytest

from mlrest.environment_variables import (
    MLREST_TRACKING_INSECURE_TLS,
    MLREST_TRACKING_PASSWORD,
    MLREST_TRACKING_SERVER_CERT_PATH,
    MLREST_TRACKING_TOKEN,
    MLREST_TRACKING_URI,
    MLREST_TRACKING_USERNAME,
)
from mlrest.store.memory_store import InMemoryStore
from mlrest.tracking import utils as tracking_utils


@pytest.fixture(autouse=True)
def clean_tracking_env(monkeypatch):
    for env_var in (
        MLREST_TRACKING_URI,
        MLREST_TRACKING_USERNAME,
        MLREST_TRACKING_PASSWORD,
        MLREST_TRACKING_TOKEN,
        MLREST_TRACKING_INSECURE_TLS,
        MLREST_TRACKING_SERVER_CERT_PATH,
    ):
        monkeypatch.delenv(env_var.name, raising=False)
    monkeypatch.setattr(tracking_utils, "_tracking_uri", None)


@pytest.fixture
def memory_store():
    return InMemoryStore()
