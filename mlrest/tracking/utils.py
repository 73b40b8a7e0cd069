import logging
import urllib.parse

from mlrest.environment_variables import (
    MLREST_TRACKING_INSECURE_TLS,
    MLREST_TRACKING_PASSWORD,
    MLREST_TRACKING_SERVER_CERT_PATH,
    MLREST_TRACKING_TOKEN,
    MLREST_TRACKING_URI,
    MLREST_TRACKING_USERNAME,
)
from mlrest.exceptions import INVALID_PARAMETER_VALUE, MlrestException
from mlrest.store.memory_store import InMemoryStore
from mlrest.store.rest_store import RestStore
from mlrest.utils import rest_utils

_logger = logging.getLogger(__name__)

_tracking_uri = None


def is_tracking_uri_set():
    """Returns True if the tracking URI has been set, False otherwise."""
    if _tracking_uri or MLREST_TRACKING_URI.get():
        return True
    return False


def set_tracking_uri(uri):
    """
    Set the tracking server URI used by clients created without an explicit URI.

    :param uri:

                - An HTTP URI including the API prefix, like
                  ``https://my-tracking-server:5000/api``.
                - ``memory:`` for an in-process store that keeps everything in memory.
    """
    global _tracking_uri
    _tracking_uri = uri


def get_tracking_uri():
    """
    Get the current tracking URI: the one set with ``set_tracking_uri``, else the value of
    ``MLREST_TRACKING_URI``.

    :return: The tracking URI.
    """
    if _tracking_uri is not None:
        return _tracking_uri
    elif (env_uri := MLREST_TRACKING_URI.get()) is not None:
        return env_uri
    raise MlrestException(
        "No tracking URI configured. Pass one explicitly, call set_tracking_uri() or set "
        f"the {MLREST_TRACKING_URI} environment variable.",
        error_code=INVALID_PARAMETER_VALUE,
    )


def _get_default_host_creds(store_uri):
    return rest_utils.HostCreds(
        host=store_uri,
        username=MLREST_TRACKING_USERNAME.get(),
        password=MLREST_TRACKING_PASSWORD.get(),
        token=MLREST_TRACKING_TOKEN.get(),
        ignore_tls_verification=MLREST_TRACKING_INSECURE_TLS.get(),
        server_cert_path=MLREST_TRACKING_SERVER_CERT_PATH.get(),
    )


def _get_rest_store(store_uri):
    return RestStore(lambda: _get_default_host_creds(store_uri))


def _get_memory_store(store_uri):
    return InMemoryStore()


class TrackingStoreRegistry:
    """Scheme-based registry for tracking store implementations

    This class allows the registration of a function or class to provide an
    implementation for a given scheme of `store_uri` through the `register`
    method.

    When instantiating a store through the `get_store` method, the scheme of
    the store URI provided (or inferred from environment) will be used to
    select which implementation to instantiate, which will be called with the
    store URI.
    """

    def __init__(self):
        self._registry = {}

    def register(self, scheme, store_builder):
        self._registry[scheme] = store_builder

    def get_store(self, store_uri=None):
        """Get a store from the registry based on the scheme of store_uri

        :param store_uri: The store URI. If None, it will be inferred from the environment. This URI
                          is used to select which tracking store implementation to instantiate and
                          is passed to the constructor of the implementation.

        :return: An instance of `mlrest.store.abstract_store.AbstractStore` that fulfills the
                 store URI requirements.
        """
        store_uri = store_uri if store_uri is not None else get_tracking_uri()

        scheme = urllib.parse.urlparse(store_uri).scheme
        try:
            store_builder = self._registry[scheme]
        except KeyError:
            raise MlrestException(
                "Could not find a registered tracking store for: {}. "
                "Currently registered schemes are: {}".format(
                    store_uri, list(self._registry.keys())
                ),
                error_code=INVALID_PARAMETER_VALUE,
            )
        _logger.debug("Using tracking store for scheme '%s'", scheme)
        return store_builder(store_uri)


_tracking_store_registry = TrackingStoreRegistry()
_tracking_store_registry.register("memory", _get_memory_store)

for scheme in ["http", "https"]:
    _tracking_store_registry.register(scheme, _get_rest_store)


def _get_store(store_uri=None):
    return _tracking_store_registry.get_store(store_uri)
