"""Tests for the HTTP transport: verbs, headers, classification, cancellation."""

import asyncio
import base64
import json

import httpx
import pytest
from respx import MockRouter

from buy_client.core.http.client import CUSTOMER_ACCESS_TOKEN_HEADER, HTTPClient
from buy_client.core.http.exceptions import ErrorKind, HTTPTimeoutError
from buy_client.core.http.task import RequestTask
from buy_client.pydantic_models.customer.credentials_model import AccountCredentials

from tests.factories import BASE

URL = f"{BASE}/customers/42"


def _start(client: HTTPClient, method: str, url: str, **kwargs) -> RequestTask:
    verb = getattr(client, method.lower())
    if method in ("POST", "PUT", "PATCH"):
        return verb(url, {"customer": {"note": "vip"}}, **kwargs)
    return verb(url, **kwargs)


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "DELETE", "POST", "PUT", "PATCH"])
async def test_success_delivers_json_once(http_client: HTTPClient, respx_mock: MockRouter, method):
    respx_mock.route(method=method, url=URL).mock(
        return_value=httpx.Response(200, json={"customer": {"id": 42}})
    )
    calls = []

    task = _start(http_client, method, URL, callback=lambda *args: calls.append(args))
    body, response, error = await task

    assert error is None
    assert body == {"customer": {"id": 42}}
    assert response.status_code == 200
    assert len(calls) == 1
    assert calls[0] == (body, response, None)


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "DELETE", "POST", "PUT", "PATCH"])
@pytest.mark.parametrize(
    "status_code, kind",
    [(400, ErrorKind.CLIENT_ERROR), (404, ErrorKind.CLIENT_ERROR), (500, ErrorKind.SERVER_ERROR), (503, ErrorKind.SERVER_ERROR)],
)
async def test_error_status_is_classified(http_client: HTTPClient, respx_mock: MockRouter, method, status_code, kind):
    respx_mock.route(method=method, url=URL).mock(
        return_value=httpx.Response(status_code, json={"errors": "Something went wrong"})
    )

    body, response, error = await _start(http_client, method, URL)

    assert error is not None
    assert error.kind is kind
    assert error.status_code == status_code
    assert error.message == "Something went wrong"
    # the parsed error payload comes along as the partial result
    assert body == {"errors": "Something went wrong"}
    assert response.status_code == status_code


@pytest.mark.asyncio
async def test_non_json_error_body_uses_status_message(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.get(URL).mock(return_value=httpx.Response(502, text="<html>Bad Gateway</html>"))

    body, response, error = await http_client.get(URL)

    assert body is None
    assert error.kind is ErrorKind.SERVER_ERROR
    assert error.message == "HTTP 502 Bad Gateway"


@pytest.mark.asyncio
async def test_malformed_json_on_success(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.get(URL).mock(return_value=httpx.Response(200, text="{not json"))

    body, response, error = await http_client.get(URL)

    assert body is None
    assert error.kind is ErrorKind.MALFORMED_RESPONSE
    assert error.status_code == 200
    assert response is not None


@pytest.mark.asyncio
async def test_empty_success_body_is_not_an_error(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.post(f"{BASE}/customers/recover").mock(return_value=httpx.Response(204))

    body, response, error = await http_client.post(f"{BASE}/customers/recover", {"email": "a@b.c"})

    assert body is None
    assert error is None
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_connection_failure_is_network_error(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.get(URL).mock(side_effect=httpx.ConnectError("connection refused"))
    calls = []

    body, response, error = await http_client.get(URL, callback=lambda *args: calls.append(args))

    assert body is None
    assert response is None
    assert error.kind is ErrorKind.NETWORK
    assert error.status_code is None
    assert error.is_retryable
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_timeout_is_network_error(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.get(URL).mock(side_effect=httpx.ReadTimeout("too slow"))

    _, _, error = await http_client.get(URL)

    assert isinstance(error, HTTPTimeoutError)
    assert error.kind is ErrorKind.NETWORK


@pytest.mark.asyncio
async def test_default_headers(http_client: HTTPClient, respx_mock: MockRouter):
    route = respx_mock.get(URL).mock(return_value=httpx.Response(200, json={}))

    await http_client.get(URL)

    headers = route.calls.last.request.headers
    assert headers["Content-Type"] == "application/json"
    assert headers["Authorization"] == "Basic " + base64.b64encode(b"test-api-key").decode()
    assert CUSTOMER_ACCESS_TOKEN_HEADER not in headers


@pytest.mark.asyncio
async def test_customer_token_header_attached_when_set(http_client: HTTPClient, respx_mock: MockRouter):
    route = respx_mock.get(URL).mock(return_value=httpx.Response(200, json={}))
    http_client.customer_token = "secret-token"

    await http_client.get(URL)

    assert route.calls.last.request.headers[CUSTOMER_ACCESS_TOKEN_HEADER] == "secret-token"


@pytest.mark.asyncio
async def test_per_request_headers_override_defaults(http_client: HTTPClient, respx_mock: MockRouter):
    route = respx_mock.get(URL).mock(return_value=httpx.Response(200, json={}))
    http_client.customer_token = "old-token"

    await http_client.get(URL, headers={CUSTOMER_ACCESS_TOKEN_HEADER: "new-token"})

    assert route.calls.last.request.headers[CUSTOMER_ACCESS_TOKEN_HEADER] == "new-token"
    assert http_client.customer_token == "old-token"


@pytest.mark.asyncio
async def test_serializable_body_is_sent_as_json(http_client: HTTPClient, respx_mock: MockRouter):
    route = respx_mock.post(f"{BASE}/customers").mock(return_value=httpx.Response(201, json={}))
    credentials = AccountCredentials.from_items(email="a@b.c", password="pw")

    await http_client.post(f"{BASE}/customers", credentials)

    sent = json.loads(route.calls.last.request.content)
    assert sent == {"customer": {"email": "a@b.c", "password": "pw"}}


@pytest.mark.asyncio
async def test_unserializable_body_raises_before_sending(http_client: HTTPClient, respx_mock: MockRouter):
    with pytest.raises(TypeError):
        http_client.post(URL, object())

    assert respx_mock.calls.call_count == 0


@pytest.mark.asyncio
@pytest.mark.respx(assert_all_called=False)
async def test_cancel_before_completion_delivers_cancelled_error(http_client: HTTPClient, respx_mock: MockRouter):
    route = respx_mock.get(URL).mock(return_value=httpx.Response(200, json={"customer": {"id": 42}}))
    calls = []

    task = http_client.get(URL, callback=lambda *args: calls.append(args))
    assert task.cancel() is True
    body, response, error = await task

    assert body is None
    assert response is None
    assert error.kind is ErrorKind.CANCELLED
    assert task.cancelled()
    assert not route.called
    assert calls == [(None, None, error)]


@pytest.mark.asyncio
async def test_cancel_after_completion_is_a_no_op(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.get(URL).mock(return_value=httpx.Response(200, json={"customer": {"id": 42}}))
    calls = []

    task = http_client.get(URL, callback=lambda *args: calls.append(args))
    body, _, error = await task

    assert task.cancel() is False
    assert task.done()
    assert task.result().json == body
    assert len(calls) == 1
    assert error is None


@pytest.mark.asyncio
async def test_callback_exception_does_not_change_result(http_client: HTTPClient, respx_mock: MockRouter):
    respx_mock.get(URL).mock(return_value=httpx.Response(200, json={"ok": True}))

    def explode(*args):
        raise RuntimeError("callback bug")

    body, _, error = await http_client.get(URL, callback=explode)

    assert body == {"ok": True}
    assert error is None


@pytest.mark.asyncio
@pytest.mark.respx(assert_all_called=False)
async def test_concurrent_requests_with_some_cancelled(http_client: HTTPClient, respx_mock: MockRouter):
    for customer_id in range(1, 9):
        respx_mock.get(f"{BASE}/customers/{customer_id}").mock(
            return_value=httpx.Response(200, json={"customer": {"id": customer_id}})
        )

    tasks = {customer_id: http_client.get(f"{BASE}/customers/{customer_id}") for customer_id in range(1, 9)}
    cancelled = {2, 5, 7}
    for customer_id in cancelled:
        tasks[customer_id].cancel()

    results = await asyncio.gather(*tasks.values())

    for customer_id, (body, _, error) in zip(tasks, results):
        if customer_id in cancelled:
            assert body is None
            assert error.kind is ErrorKind.CANCELLED
        else:
            assert error is None
            assert body == {"customer": {"id": customer_id}}


def test_task_requires_running_loop():
    client = HTTPClient(shop_domain="shop.example.com")
    with pytest.raises(RuntimeError):
        client.get("https://shop.example.com/api/customers/1")


@pytest.fixture
async def stalled_client():
    """Transport whose responses never arrive, to cancel requests in flight."""
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.Event().wait()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        yield HTTPClient(shop_domain="shop.example.com", http_client=session), started


@pytest.mark.asyncio
async def test_cancel_in_flight_request(stalled_client):
    client, started = stalled_client
    calls = []

    task = client.get(URL, callback=lambda *args: calls.append(args))
    await started.wait()
    assert not task.done()

    task.cancel()
    body, response, error = await task

    assert body is None
    assert error.kind is ErrorKind.CANCELLED
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_cancelling_the_awaiting_coroutine_cancels_the_request(stalled_client):
    client, started = stalled_client
    task = client.get(URL)

    async def waiter():
        return await task

    outer = asyncio.ensure_future(waiter())
    await started.wait()
    outer.cancel()
    with pytest.raises(asyncio.CancelledError):
        await outer

    _, _, error = await task
    assert error.kind is ErrorKind.CANCELLED


@pytest.mark.asyncio
async def test_default_timeout_applies_to_injected_session():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json={})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as session:
        client = HTTPClient(shop_domain="shop.example.com", default_timeout=60.0, http_client=session)
        _, _, error = await client.get(URL)

    assert error is None
    assert seen[0]["read"] == 60.0
    assert seen[0]["connect"] == 60.0
