import json
import logging

INTERNAL_ERROR = "INTERNAL_ERROR"
BAD_REQUEST = "BAD_REQUEST"
ENDPOINT_NOT_FOUND = "ENDPOINT_NOT_FOUND"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
TEMPORARILY_UNAVAILABLE = "TEMPORARILY_UNAVAILABLE"
PERMISSION_DENIED = "PERMISSION_DENIED"
UNAUTHENTICATED = "UNAUTHENTICATED"
RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
RESOURCE_DOES_NOT_EXIST = "RESOURCE_DOES_NOT_EXIST"
INVALID_PARAMETER_VALUE = "INVALID_PARAMETER_VALUE"

# Codes the client branches on. Any other code sent by a server is kept verbatim.
KNOWN_ERROR_CODES = frozenset(
    [RESOURCE_ALREADY_EXISTS, RESOURCE_DOES_NOT_EXIST, INVALID_PARAMETER_VALUE]
)

ERROR_CODE_TO_HTTP_STATUS = {
    INTERNAL_ERROR: 500,
    NOT_IMPLEMENTED: 501,
    TEMPORARILY_UNAVAILABLE: 503,
    ENDPOINT_NOT_FOUND: 404,
    RESOURCE_DOES_NOT_EXIST: 404,
    PERMISSION_DENIED: 403,
    UNAUTHENTICATED: 401,
    BAD_REQUEST: 400,
    RESOURCE_ALREADY_EXISTS: 400,
    INVALID_PARAMETER_VALUE: 400,
}

HTTP_STATUS_TO_ERROR_CODE = {v: k for k, v in ERROR_CODE_TO_HTTP_STATUS.items()}
HTTP_STATUS_TO_ERROR_CODE[400] = BAD_REQUEST
HTTP_STATUS_TO_ERROR_CODE[404] = ENDPOINT_NOT_FOUND
HTTP_STATUS_TO_ERROR_CODE[500] = INTERNAL_ERROR

_logger = logging.getLogger(__name__)


def get_error_code(http_status):
    return HTTP_STATUS_TO_ERROR_CODE.get(http_status, INTERNAL_ERROR)


class MlrestException(Exception):
    """
    Generic exception thrown to surface failure information about operations against a
    tracking server.
    """

    def __init__(self, message, error_code=INTERNAL_ERROR, **kwargs):
        """
        Args:
            message: The message or exception describing the error that occurred. This will be
                included in the exception's serialized JSON representation.
            error_code: The error code string for the error that occurred. Codes sent by a
                server are kept as-is, even when the client does not recognize them.
            kwargs: Additional key-value pairs to include in the serialized JSON representation
                of the MlrestException.
        """
        self.error_code = str(error_code) if error_code else INTERNAL_ERROR
        message = str(message)
        self.message = message
        self.json_kwargs = kwargs
        super().__init__(message)

    def serialize_as_json(self):
        exception_dict = {"error_code": self.error_code, "message": self.message}
        exception_dict.update(self.json_kwargs)
        return json.dumps(exception_dict)

    def get_http_status_code(self):
        return ERROR_CODE_TO_HTTP_STATUS.get(self.error_code, 500)

    @classmethod
    def invalid_parameter_value(cls, message, **kwargs):
        """Constructs an `MlrestException` object with the `INVALID_PARAMETER_VALUE` error code.

        Args:
            message: The message describing the error that occurred.
            kwargs: Additional key-value pairs to include in the serialized JSON representation
                of the MlrestException.
        """
        return cls(message, error_code=INVALID_PARAMETER_VALUE, **kwargs)


class RestException(MlrestException):
    """
    Exception thrown on non 200-level responses whose body is a structured error envelope
    ``{"error_code": ..., "message": ...}``.
    """

    def __init__(self, json, status_code=None):
        self.json = json
        self.status_code = status_code

        error_code = json.get("error_code", INTERNAL_ERROR)
        message = "{}: {}".format(
            error_code,
            json["message"] if "message" in json else "Response: " + str(json),
        )
        super().__init__(message, error_code=error_code)
        if not self.is_known_code:
            _logger.warning(
                f"Received error code not recognized by mlrest: {self.error_code}, this may "
                "indicate your request encountered an error before reaching the tracking "
                "server, e.g., within a proxy server or authentication service."
            )

    @property
    def is_known_code(self):
        return self.error_code in KNOWN_ERROR_CODES

    @property
    def server_message(self):
        """The ``message`` field of the error envelope, without the error code prefix."""
        return self.json.get("message")

    def __reduce__(self):
        """
        Overriding `__reduce__` to make `RestException` instance pickle-able.
        """
        return RestException, (self.json, self.status_code)


class UnparsedRestException(MlrestException):
    """
    Exception thrown on non 200-level responses whose body could not be parsed as an error
    envelope. Carries the raw status code and body.
    """

    def __init__(self, status_code, body, endpoint=None):
        self.status_code = status_code
        self.body = body
        target = f"endpoint {endpoint}" if endpoint else "endpoint"
        super().__init__(
            f"API request to {target} failed with error code {status_code} != 200. "
            f"Response body: '{body}'",
            error_code=get_error_code(status_code),
        )

    def __reduce__(self):
        return UnparsedRestException, (self.status_code, self.body)


class InvalidUrlException(MlrestException):
    """Exception thrown when a http request fails to send due to an invalid URL"""


class CreateError(MlrestException):
    """Failure of an operation that creates a resource."""


class GetError(MlrestException):
    """Failure of an operation that reads, deletes or updates an existing resource."""


# Deleting and updating fail in the same ways as reading.
DeleteError = GetError
UpdateError = GetError


class BatchError(MlrestException):
    """Failure of a batched logging request."""


class ResourceAlreadyExists(CreateError):
    """The resource to be created already exists on the tracking server."""

    def __init__(self, name):
        self.name = name
        super().__init__(
            f"the resource {name} already exists", error_code=RESOURCE_ALREADY_EXISTS
        )

    def __reduce__(self):
        return ResourceAlreadyExists, (self.name,)


class ResourceDoesNotExist(GetError):
    """The requested resource does not exist on the tracking server."""

    def __init__(self, name):
        self.name = name
        super().__init__(
            f"the resource {name} does not exist", error_code=RESOURCE_DOES_NOT_EXIST
        )

    def __reduce__(self):
        return ResourceDoesNotExist, (self.name,)


class _BatchLimitExceeded(BatchError):
    entity_name = None

    def __init__(self, count, limit):
        self.count = count
        self.limit = limit
        super().__init__(
            f"A batch logging request can contain at most {limit} {self.entity_name}. "
            f"Got {count} {self.entity_name}. Please split up {self.entity_name} across "
            "multiple requests and try again.",
            error_code=INVALID_PARAMETER_VALUE,
        )

    def __reduce__(self):
        return type(self), (self.count, self.limit)


class TooManyMetrics(_BatchLimitExceeded):
    entity_name = "metrics"


class TooManyParams(_BatchLimitExceeded):
    entity_name = "params"


class TooManyTags(_BatchLimitExceeded):
    entity_name = "tags"


class TooManyItems(_BatchLimitExceeded):
    entity_name = "metrics, params, and tags"


class StorageError(CreateError, GetError, BatchError):
    """
    Opaque failure of the storage backend: transport errors, unexpected server errors and
    responses that could not be deserialized. It is a member of every error kind, so
    ``except GetError`` also catches storage failures of a read.

    The underlying exception is chained (``raise ... from``) and kept in ``cause``. When a
    response body could not be deserialized, it is attached as ``body``.
    """

    def __init__(self, message, cause=None, body=None):
        self.cause = cause
        self.body = body
        error_code = getattr(cause, "error_code", None) or INTERNAL_ERROR
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, error_code=error_code)

    def __reduce__(self):
        return StorageError, (self.message, None, self.body)
