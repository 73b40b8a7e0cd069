import base64
import json
import logging
import os
from functools import lru_cache

import requests

from mlrest.environment_variables import MLREST_HTTP_REQUEST_TIMEOUT
from mlrest.exceptions import (
    INVALID_PARAMETER_VALUE,
    InvalidUrlException,
    MlrestException,
    RestException,
    StorageError,
    UnparsedRestException,
)
from mlrest.utils.proto_json_utils import parse_dict

_logger = logging.getLogger(__name__)

_MAX_LOGGED_BODY_LENGTH = 50


@lru_cache(maxsize=8)
def _cached_get_request_session(_pid):
    """
    This function should not be called directly. Instead, use `_get_request_session` below.
    """
    return requests.Session()


def _get_request_session():
    """Returns a `requests.Session` object shared by all requests of the current process.

    The process id is part of the cache key so that forked processes never share a session.
    """
    return _cached_get_request_session(os.getpid())


def _join_url(host, endpoint):
    return "{}/{}".format(host.rstrip("/"), endpoint.lstrip("/"))


def http_request(host_creds, endpoint, method, extra_headers=None, timeout=None, **kwargs):
    """Makes an HTTP request with the specified method to the specified hostname/endpoint.
    Failed requests are not retried.

    Args:
        host_creds: A :py:class:`mlrest.utils.rest_utils.HostCreds` object containing
            hostname and optional authentication.
        endpoint: A string for service endpoint relative to the host, e.g.
            "2.0/mlflow/experiments/get".
        method: A string indicating the method to use, e.g. "GET", "POST".
        extra_headers: A dict of HTTP header name-value pairs to be included in the request.
        timeout: Wait for timeout seconds for response from remote server for connect and
            read request. Defaults to ``MLREST_HTTP_REQUEST_TIMEOUT``.
        kwargs: Additional keyword arguments to pass to `requests.Session.request()`

    Returns:
        requests.Response object.
    """
    url = _join_url(host_creds.host, endpoint)
    timeout = MLREST_HTTP_REQUEST_TIMEOUT.get() if timeout is None else timeout

    headers = dict(extra_headers or {})
    auth_str = None
    if host_creds.token:
        auth_str = f"Bearer {host_creds.token}"
    elif host_creds.username and host_creds.password:
        basic_auth_str = f"{host_creds.username}:{host_creds.password}".encode()
        auth_str = "Basic " + base64.standard_b64encode(basic_auth_str).decode("utf-8")
    if auth_str:
        headers["Authorization"] = auth_str

    _logger.debug("Sending %s request to %s", method, url)
    try:
        return _get_request_session().request(
            method,
            url,
            headers=headers,
            verify=host_creds.verify,
            timeout=timeout,
            **kwargs,
        )
    except requests.exceptions.Timeout as to:
        raise MlrestException(
            f"API request to {url} failed with timeout exception {to}."
            " To increase the timeout, set the environment variable "
            f"{MLREST_HTTP_REQUEST_TIMEOUT} to a larger value."
        ) from to
    except requests.exceptions.InvalidURL as iu:
        raise InvalidUrlException(f"Invalid url: {url}") from iu
    except requests.exceptions.RequestException as e:
        raise MlrestException(f"API request to {url} failed with exception {e}") from e


def _parse_error_envelope(string):
    """Returns the error envelope in ``string``, or None if it does not hold one."""
    try:
        parsed = json.loads(string)
    except ValueError:
        return None
    if isinstance(parsed, dict) and isinstance(parsed.get("error_code"), str):
        return parsed
    return None


def verify_rest_response(response, endpoint):
    """Verify the return code and format, raise exception if the request was not successful.

    Raises:
        RestException: If the status is not 2xx and the body is an error envelope, i.e. a
            JSON object with a string ``error_code``.
        UnparsedRestException: If the status is not 2xx and the body is anything else.
    """
    if not 200 <= response.status_code < 300:
        if (envelope := _parse_error_envelope(response.text)) is not None:
            raise RestException(envelope, status_code=response.status_code)
        raise UnparsedRestException(response.status_code, response.text, endpoint=endpoint)

    # Void endpoints may answer with an empty body
    if response.text.strip() == "":
        response._content = b"{}"
    return response


def _truncate(text):
    if len(text) > _MAX_LOGGED_BODY_LENGTH:
        return text[:_MAX_LOGGED_BODY_LENGTH] + "..."
    return text


def call_endpoint(host_creds, endpoint, method, json_body, response_cls, extra_headers=None):
    """
    Calls a REST endpoint and parses its response.

    Args:
        host_creds: :py:class:`HostCreds` of the tracking server.
        endpoint: Endpoint path relative to the host.
        method: "GET" sends ``json_body`` as query parameters, any other method as a JSON body.
        json_body: Dictionary form of the request message.
        response_cls: Message class the response body is parsed into.
        extra_headers: Optional additional HTTP headers.

    Returns:
        An instance of ``response_cls``.

    Raises:
        StorageError: If the response body is not a JSON object of the expected shape. The
            raw body is attached to the error.
    """
    call_kwargs = {
        "host_creds": host_creds,
        "endpoint": endpoint,
        "method": method,
        "extra_headers": extra_headers,
    }
    if method == "GET":
        call_kwargs["params"] = json_body
    else:
        call_kwargs["json"] = json_body
    response = http_request(**call_kwargs)

    response = verify_rest_response(response, endpoint)
    response_to_parse = response.text
    try:
        js_dict = json.loads(response_to_parse)
    except json.JSONDecodeError as e:
        _logger.warning(f"Response is not a valid JSON object: {_truncate(response_to_parse)}")
        raise StorageError(
            f"Failed to decode response of endpoint {endpoint}", cause=e, body=response_to_parse
        ) from e
    if not isinstance(js_dict, dict):
        raise StorageError(
            f"Response of endpoint {endpoint} is not a JSON object", body=response_to_parse
        )

    try:
        return parse_dict(js_dict=js_dict, message_cls=response_cls)
    except MlrestException as e:
        raise StorageError(
            f"Failed to deserialize response of endpoint {endpoint}",
            cause=e,
            body=response_to_parse,
        ) from e


class HostCreds:
    """
    Provides a hostname and optional authentication for talking to a tracking server.

    Args:
        host: Base URL of the tracking server including the API prefix
            (e.g., http://localhost:5000/api). Required.
        username: Username to use with Basic authentication when talking to server.
            If this is specified, password must also be specified.
        password: Password to use with Basic authentication when talking to server.
            If this is specified, username must also be specified.
        token: Token to use with Bearer authentication when talking to server.
            If provided, user/password authentication will be ignored.
        ignore_tls_verification: If true, we will not verify the server's hostname or TLS
            certificate. This is useful for certain testing situations, but should never be
            true in production.
            If this is set to true ``server_cert_path`` must not be set.
        server_cert_path: Path to a CA bundle to use.
            Sets the verify param of the ``requests.request``
            function (see https://requests.readthedocs.io/en/master/api/).
            If this is set ``ignore_tls_verification`` must be false.
    """

    def __init__(
        self,
        host,
        username=None,
        password=None,
        token=None,
        ignore_tls_verification=False,
        server_cert_path=None,
    ):
        if not host:
            raise MlrestException(
                message="host is a required parameter for HostCreds",
                error_code=INVALID_PARAMETER_VALUE,
            )
        if ignore_tls_verification and (server_cert_path is not None):
            raise MlrestException(
                message=(
                    "When 'ignore_tls_verification' is true then 'server_cert_path' "
                    "must not be set! This error may have occurred because the "
                    "'MLREST_TRACKING_INSECURE_TLS' and 'MLREST_TRACKING_SERVER_CERT_PATH' "
                    "environment variables are both set - only one of these environment "
                    "variables may be set."
                ),
                error_code=INVALID_PARAMETER_VALUE,
            )
        self.host = host
        self.username = username
        self.password = password
        self.token = token
        self.ignore_tls_verification = ignore_tls_verification
        self.server_cert_path = server_cert_path

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        return NotImplemented

    def __hash__(self):
        return hash(frozenset(self.__dict__.items()))

    @property
    def verify(self):
        if self.server_cert_path is None:
            return not self.ignore_tls_verification
        else:
            return self.server_cert_path
