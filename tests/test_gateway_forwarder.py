import base64
import json

import httpx
import pytest

from mpgs_bridge.integrations.clients.real_http.gateway import HttpGatewayForwarder
from mpgs_bridge.integrations.contracts.interfaces import (
    ForwardNetworkError,
    ForwardRequest,
    ForwardRequestError,
    ForwardSuccess,
    ForwardUpstreamError,
    build_auth_token,
)

URL = "https://mtf.gateway.mastercard.com/api/rest/version/73/merchant/M1/order/O1/transaction/T1"


def _request(**overrides):
    fields = {
        "method": "PUT",
        "url": URL,
        "auth_token": build_auth_token("merchant.M1", "pw-123456"),
        "body": {"apiOperation": "INITIATE_AUTHENTICATION"},
    }
    fields.update(overrides)
    return ForwardRequest(**fields)


@pytest.mark.parametrize(
    "username,password",
    [
        ("merchant.TEST01", "s3cret-pass"),
        ("merchant.TEST01", "pä$$:word"),
    ],
)
def test_auth_token_round_trips_username_and_password(username, password):
    token = build_auth_token(username, password)

    assert token == base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    decoded_user, decoded_password = base64.b64decode(token).decode("utf-8").split(":", 1)
    assert (decoded_user, decoded_password) == (username, password)


def test_forward_request_repr_hides_token():
    req = _request()
    assert req.auth_token not in repr(req)


@pytest.mark.asyncio
async def test_success_passes_status_and_body_through():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        seen["timeout"] = request.extensions.get("timeout")
        return httpx.Response(201, json={"result": "SUCCESS", "authentication": {"status": "AUTHENTICATION_AVAILABLE"}})

    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(handler))
    result = await forwarder.forward(_request())

    assert result == ForwardSuccess(status=201, body={"result": "SUCCESS", "authentication": {"status": "AUTHENTICATION_AVAILABLE"}})
    assert seen["method"] == "PUT"
    assert seen["body"] == {"apiOperation": "INITIATE_AUTHENTICATION"}
    assert seen["headers"]["authorization"] == "Basic " + build_auth_token("merchant.M1", "pw-123456")
    assert seen["headers"]["content-type"] == "application/json"
    assert seen["headers"]["accept"] == "application/json"
    assert seen["timeout"]["read"] == 30.0


@pytest.mark.asyncio
async def test_get_without_body_sends_no_content():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["content"] = request.content
        return httpx.Response(200, json={"status": "CAPTURED"})

    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(handler))
    result = await forwarder.forward(_request(method="get", body=None))

    assert isinstance(result, ForwardSuccess)
    assert seen == {"method": "GET", "content": b""}


@pytest.mark.asyncio
async def test_non_2xx_is_relayed_untouched():
    error_body = {"error": {"cause": "INVALID_REQUEST", "explanation": "Invalid credentials."}, "result": "ERROR"}
    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(lambda r: httpx.Response(401, json=error_body)))

    result = await forwarder.forward(_request())

    assert result == ForwardUpstreamError(status=401, body=error_body)


@pytest.mark.asyncio
async def test_non_json_error_body_is_kept_as_text():
    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(lambda r: httpx.Response(502, text="Bad Gateway")))

    result = await forwarder.forward(_request())

    assert result == ForwardUpstreamError(status=502, body="Bad Gateway")


@pytest.mark.asyncio
async def test_empty_success_body_becomes_empty_dict():
    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(lambda r: httpx.Response(204)))

    result = await forwarder.forward(_request())

    assert result == ForwardSuccess(status=204, body={})


@pytest.mark.asyncio
async def test_timeout_is_a_network_error():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("timed out", request=request)

    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(handler))
    result = await forwarder.forward(_request(timeout_ms=10))

    assert isinstance(result, ForwardNetworkError)
    assert not isinstance(result, ForwardUpstreamError)


@pytest.mark.asyncio
async def test_connection_failure_is_a_network_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(handler))

    assert isinstance(await forwarder.forward(_request()), ForwardNetworkError)


@pytest.mark.asyncio
async def test_url_without_scheme_is_a_request_error():
    # what a missing apiBaseUrl produces; rejected before any connection is opened
    forwarder = HttpGatewayForwarder()

    result = await forwarder.forward(_request(url="/api/rest/version/73/merchant/M1/order/O1"))

    assert isinstance(result, ForwardRequestError)
    assert result.message


@pytest.mark.asyncio
async def test_unserialisable_body_is_a_request_error():
    forwarder = HttpGatewayForwarder(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

    result = await forwarder.forward(_request(body={"amount": object()}))

    assert isinstance(result, ForwardRequestError)


@pytest.mark.asyncio
async def test_undecodable_response_content_is_a_request_error():
    transport = httpx.MockTransport(
        lambda r: httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")
    )
    forwarder = HttpGatewayForwarder(transport=transport)

    result = await forwarder.forward(_request())

    assert isinstance(result, ForwardRequestError)
    assert result.message

