"""
Unit tests for submission transports.
"""

import httpx
import pytest

from service_submission.app.adapters.transport import (
    HttpxTransport,
    OutboundRequest,
    StaticTransport,
    TransportResponse,
)
from shared.errors import TransportError

API_URL = "https://ismp.example/api/v3/lk/documents/create"


@pytest.fixture
def outbound():
    return OutboundRequest(
        url=API_URL,
        headers={"Content-Type": "application/json", "Signature": "signature123"},
        body='{"doc_id": "doc123"}'
    )


class TestHttpxTransport:
    """Test cases for HttpxTransport."""

    @pytest.mark.asyncio
    async def test_posts_body_and_headers(self, outbound):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text='{"value": "ok"}')

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(client=client)

        response = await transport.send(outbound)

        assert response == TransportResponse(200, '{"value": "ok"}')
        assert seen[0].method == "POST"
        assert str(seen[0].url) == API_URL
        assert seen[0].headers["Content-Type"] == "application/json"
        assert seen[0].headers["Signature"] == "signature123"
        assert seen[0].content == b'{"doc_id": "doc123"}'
        await client.aclose()

    @pytest.mark.asyncio
    async def test_error_status_is_a_response(self, outbound):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="bad request"))
        )
        transport = HttpxTransport(client=client)

        response = await transport.send(outbound)

        assert response.status_code == 500
        assert response.body == "bad request"
        assert response.is_success is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_network_fault_raises_transport_error(self, outbound):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(client=client)

        with pytest.raises(TransportError) as exc_info:
            await transport.send(outbound)

        assert exc_info.value.code == "TRANSPORT_ERROR"
        assert exc_info.value.details["error_type"] == "ConnectError"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_close_keeps_injected_client_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        transport = HttpxTransport(client=client)

        await transport.close()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_close_closes_own_client(self):
        transport = HttpxTransport(timeout=5.0)
        client = transport._get_client()

        await transport.close()

        assert client.is_closed
        assert client.timeout.connect == 5.0


class TestTransportResponse:
    """Test cases for TransportResponse."""

    @pytest.mark.parametrize("status_code,expected", [
        (200, True), (201, True), (299, True), (199, False), (400, False), (500, False),
    ])
    def test_is_success(self, status_code, expected):
        assert TransportResponse(status_code).is_success is expected


class TestStaticTransport:
    """Test cases for StaticTransport."""

    @pytest.mark.asyncio
    async def test_records_requests(self, outbound):
        transport = StaticTransport(status_code=201, body="created")

        response = await transport.send(outbound)

        assert response == TransportResponse(201, "created")
        assert transport.sent == [outbound]
