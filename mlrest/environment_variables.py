"""
Environment variables read by mlrest. All names begin with ``MLREST_``.

Variables are read every time their value is needed, so changes made after import take
effect on the next request. A variable set to the empty string counts as unset.
"""

import os


class _EnvironmentVariable:
    """
    An environment variable converted to ``type_`` when read.
    """

    def __init__(self, name, type_, default):
        if type_ == bool and not isinstance(self, _BooleanEnvironmentVariable):
            raise ValueError("Use _BooleanEnvironmentVariable instead for boolean variables")
        self.name = name
        self.type = type_
        self.default = default

    @property
    def defined(self):
        return bool(os.environ.get(self.name))

    def _convert(self, raw):
        try:
            return self.type(raw)
        except ValueError as e:
            raise ValueError(f"Failed to convert {raw!r} for {self.name}: {e}") from e

    def get(self):
        """
        Returns the converted value of the variable, or the default when it is unset.
        """
        if not self.defined:
            return self.default
        return self._convert(os.environ[self.name])

    def __repr__(self):
        return repr(self.name)

    def __format__(self, format_spec):
        return self.name.__format__(format_spec)


class _BooleanEnvironmentVariable(_EnvironmentVariable):
    _VALUES = {"true": True, "1": True, "false": False, "0": False}

    def __init__(self, name, default):
        # `default in [True, False, None]` would also accept 1 and 0
        if not (default is True or default is False or default is None):
            raise ValueError(f"{name} default value must be one of [True, False, None]")
        super().__init__(name, bool, default)

    def _convert(self, raw):
        try:
            return self._VALUES[raw.lower()]
        except KeyError:
            raise ValueError(
                f"{self.name} value must be one of ['true', 'false', '1', '0'] "
                f"(case-insensitive), but got {raw}"
            ) from None


class _PositiveIntEnvironmentVariable(_EnvironmentVariable):
    def __init__(self, name, default):
        super().__init__(name, int, default)

    def _convert(self, raw):
        value = super()._convert(raw)
        if value <= 0:
            raise ValueError(f"{self.name} must be a positive integer, but got {raw}")
        return value


#: Address of the tracking server including the API prefix, e.g.
#: ``http://127.0.0.1:5000/api``, or ``memory:`` for an in-process store.
#: (default: ``None``)
MLREST_TRACKING_URI = _EnvironmentVariable("MLREST_TRACKING_URI", str, None)

#: Username for Basic authentication against the tracking server.
#: (default: ``None``)
MLREST_TRACKING_USERNAME = _EnvironmentVariable("MLREST_TRACKING_USERNAME", str, None)

#: Password for Basic authentication against the tracking server.
#: (default: ``None``)
MLREST_TRACKING_PASSWORD = _EnvironmentVariable("MLREST_TRACKING_PASSWORD", str, None)

#: Bearer token for the tracking server. Used instead of the username and password when set.
#: (default: ``None``)
MLREST_TRACKING_TOKEN = _EnvironmentVariable("MLREST_TRACKING_TOKEN", str, None)

#: Skip verification of the tracking server's TLS certificate.
#: (default: ``False``)
MLREST_TRACKING_INSECURE_TLS = _BooleanEnvironmentVariable("MLREST_TRACKING_INSECURE_TLS", False)

#: CA bundle used to verify the tracking server's TLS certificate.
#: (default: ``None``)
MLREST_TRACKING_SERVER_CERT_PATH = _EnvironmentVariable(
    "MLREST_TRACKING_SERVER_CERT_PATH", str, None
)

#: Timeout in seconds of a single request to the tracking server.
#: (default: ``120``)
MLREST_HTTP_REQUEST_TIMEOUT = _PositiveIntEnvironmentVariable("MLREST_HTTP_REQUEST_TIMEOUT", 120)

#: Level of the ``mlrest`` logger.
#: (default: ``None``, meaning ``INFO``)
MLREST_LOGGING_LEVEL = _EnvironmentVariable("MLREST_LOGGING_LEVEL", str, None)

#: Whether mlrest configures its own logger on import.
#: (default: ``True``)
MLREST_CONFIGURE_LOGGING = _BooleanEnvironmentVariable("MLREST_CONFIGURE_LOGGING", True)
