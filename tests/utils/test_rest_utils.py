import base64
from unittest import mock

import pytest
import requests

from mlrest.environment_variables import MLREST_HTTP_REQUEST_TIMEOUT
from mlrest.exceptions import (
    InvalidUrlException,
    MlrestException,
    RestException,
    StorageError,
    UnparsedRestException,
)
from mlrest.protos.service import GetExperiment, UpdateExperiment
from mlrest.utils.rest_utils import (
    HostCreds,
    call_endpoint,
    http_request,
    verify_rest_response,
)

from tests.helper_functions import make_response


def test_host_creds_validation():
    with pytest.raises(MlrestException, match="host is a required parameter"):
        HostCreds(None)
    with pytest.raises(MlrestException, match="'server_cert_path' must not be set"):
        HostCreds("http://hello", ignore_tls_verification=True, server_cert_path="/ca.pem")


def test_host_creds_verify():
    assert HostCreds("http://hello").verify is True
    assert HostCreds("http://hello", ignore_tls_verification=True).verify is False
    assert HostCreds("http://hello", server_cert_path="/ca.pem").verify == "/ca.pem"
    assert HostCreds("http://hello", token="t") == HostCreds("http://hello", token="t")
    assert HostCreds("http://hello", token="t") != HostCreds("http://hello", token="u")


@pytest.mark.parametrize(
    ("host", "endpoint"),
    [
        ("http://hello/api", "2.0/mlflow/runs/get"),
        ("http://hello/api/", "2.0/mlflow/runs/get"),
        ("http://hello/api", "/2.0/mlflow/runs/get"),
    ],
)
def test_http_request_joins_host_and_endpoint(host, endpoint):
    with mock.patch("requests.Session.request", return_value=make_response()) as mock_request:
        http_request(HostCreds(host), endpoint, "GET")
    mock_request.assert_called_once_with(
        "GET",
        "http://hello/api/2.0/mlflow/runs/get",
        headers={},
        verify=True,
        timeout=MLREST_HTTP_REQUEST_TIMEOUT.get(),
    )


def test_http_request_with_basic_auth():
    host_only = HostCreds("http://my-host", username="user", password="pass")
    expected = "Basic " + base64.standard_b64encode(b"user:pass").decode("utf-8")
    with mock.patch("requests.Session.request", return_value=make_response()) as mock_request:
        http_request(host_only, "/my/endpoint", "GET")
    assert mock_request.call_args.kwargs["headers"] == {"Authorization": expected}


def test_http_request_with_token_wins_over_basic_auth():
    creds = HostCreds("http://my-host", username="user", password="pass", token="my-token")
    with mock.patch("requests.Session.request", return_value=make_response()) as mock_request:
        http_request(creds, "/my/endpoint", "GET")
    assert mock_request.call_args.kwargs["headers"] == {"Authorization": "Bearer my-token"}


def test_http_request_timeout_from_environment(monkeypatch):
    monkeypatch.setenv(MLREST_HTTP_REQUEST_TIMEOUT.name, "7")
    with mock.patch("requests.Session.request", return_value=make_response()) as mock_request:
        http_request(HostCreds("http://my-host"), "/my/endpoint", "GET")
    assert mock_request.call_args.kwargs["timeout"] == 7


def test_http_request_explicit_timeout_wins(monkeypatch):
    monkeypatch.setenv(MLREST_HTTP_REQUEST_TIMEOUT.name, "7")
    with mock.patch("requests.Session.request", return_value=make_response()) as mock_request:
        http_request(HostCreds("http://my-host"), "/my/endpoint", "GET", timeout=3)
    assert mock_request.call_args.kwargs["timeout"] == 3


def test_http_request_transport_errors():
    creds = HostCreds("http://my-host")
    with mock.patch("requests.Session.request", side_effect=requests.exceptions.Timeout("slow")):
        with pytest.raises(MlrestException, match="MLREST_HTTP_REQUEST_TIMEOUT"):
            http_request(creds, "/my/endpoint", "GET")

    with mock.patch(
        "requests.Session.request", side_effect=requests.exceptions.InvalidURL("bad")
    ):
        with pytest.raises(InvalidUrlException, match="Invalid url: http://my-host/my/endpoint"):
            http_request(creds, "/my/endpoint", "GET")

    with mock.patch(
        "requests.Session.request", side_effect=requests.exceptions.ConnectionError("refused")
    ):
        with pytest.raises(MlrestException, match="failed with exception refused") as e:
            http_request(creds, "/my/endpoint", "GET")
    assert isinstance(e.value.__cause__, requests.exceptions.ConnectionError)


def test_verify_rest_response_with_error_envelope():
    response = make_response(400, {"error_code": "RESOURCE_ALREADY_EXISTS", "message": "x"})
    with pytest.raises(RestException, match="RESOURCE_ALREADY_EXISTS: x") as e:
        verify_rest_response(response, "2.0/mlflow/experiments/create")
    assert e.value.status_code == 400
    assert e.value.error_code == "RESOURCE_ALREADY_EXISTS"
    assert e.value.server_message == "x"


def test_verify_rest_response_without_error_envelope():
    response = make_response(502, "<html>Bad gateway</html>")
    with pytest.raises(UnparsedRestException, match="failed with error code 502") as e:
        verify_rest_response(response, "2.0/mlflow/experiments/create")
    assert e.value.status_code == 502
    assert e.value.body == "<html>Bad gateway</html>"

    # A JSON body that is not an object is not an error envelope either
    with pytest.raises(UnparsedRestException, match="Response body: '\\[1, 2\\]'"):
        verify_rest_response(make_response(500, [1, 2]), "2.0/mlflow/runs/get")

    # Neither is a JSON object without an error code, e.g. from a proxy in front of the server
    with mock.patch("mlrest.exceptions._logger.warning") as mock_warning:
        with pytest.raises(UnparsedRestException) as e:
            verify_rest_response(
                make_response(502, {"detail": "upstream down"}), "2.0/mlflow/runs/get"
            )
    assert e.value.status_code == 502
    assert e.value.body == '{"detail": "upstream down"}'
    mock_warning.assert_not_called()


def test_verify_rest_response_accepts_empty_success_body():
    response = verify_rest_response(make_response(200, ""), "2.0/mlflow/runs/delete")
    assert response.text == "{}"


def test_call_endpoint_get_sends_query_params():
    body = {
        "experiment": {
            "experiment_id": "1",
            "name": "exp",
            "artifact_location": "a",
            "lifecycle_stage": "active",
        }
    }
    with mock.patch(
        "mlrest.utils.rest_utils.http_request", return_value=make_response(200, body)
    ) as mock_http:
        creds = HostCreds("http://my-host")
        response = call_endpoint(
            creds, "2.0/mlflow/experiments/get", "GET", {"experiment_id": "1"},
            GetExperiment.Response,
        )
    mock_http.assert_called_once_with(
        host_creds=creds,
        endpoint="2.0/mlflow/experiments/get",
        method="GET",
        extra_headers=None,
        params={"experiment_id": "1"},
    )
    assert response.experiment.name == "exp"


def test_call_endpoint_post_sends_json_body():
    with mock.patch(
        "mlrest.utils.rest_utils.http_request", return_value=make_response(200, "")
    ) as mock_http:
        creds = HostCreds("http://my-host")
        call_endpoint(
            creds, "2.0/mlflow/experiments/update", "POST", {"experiment_id": "1"},
            UpdateExperiment.Response,
        )
    assert mock_http.call_args.kwargs["json"] == {"experiment_id": "1"}
    assert "params" not in mock_http.call_args.kwargs


@pytest.mark.parametrize(
    "body",
    [
        "this is not json",
        "[1, 2, 3]",
        '{"experiment": {"name": "missing fields"}}',
    ],
)
def test_call_endpoint_undecodable_response_is_storage_error(body):
    with mock.patch(
        "mlrest.utils.rest_utils.http_request", return_value=make_response(200, body)
    ):
        with pytest.raises(StorageError, match="2.0/mlflow/experiments/get") as e:
            call_endpoint(
                HostCreds("http://my-host"), "2.0/mlflow/experiments/get", "GET",
                {"experiment_id": "1"}, GetExperiment.Response,
            )
    assert e.value.body == body
