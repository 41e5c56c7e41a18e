"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from rental_booking.adapters.wati_client import HttpxWatiClient, ProviderResponse
from rental_booking.errors import ConfigurationError

API_URL = "https://live-server.wati.io/api/v1/sendTemplateMessage"


def _client(handler, **overrides) -> HttpxWatiClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    options = {
        "api_url": API_URL,
        "auth_token": "wati-token",
        "channel_number": "15550001111",
    }
    options.update(overrides)
    return HttpxWatiClient(http_client=httpx.AsyncClient(transport=transport), **options)


def test_wati_client_posts_template_with_channel() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"result": True})

    client = _client(handler)
    body = {"template_name": "after_booking", "broadcast_name": "b", "parameters": []}

    response = asyncio.run(client.send_template("919876543210", body))

    assert response.ok
    assert response.payload() == {"result": True}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.params["whatsappNumber"] == "919876543210"
    assert request.headers["Authorization"] == "Bearer wati-token"
    assert request.headers["Content-Type"] == "application/json-patch+json"
    sent = json.loads(request.content)
    assert sent["channel_number"] == "15550001111"
    assert sent["template_name"] == "after_booking"


def test_wati_client_returns_error_responses() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="Invalid template")

    client = _client(handler)

    response = asyncio.run(client.send_template("919876543210", {"template_name": "x"}))

    assert not response.ok
    assert response.status_code == 400
    assert response.payload() == {"message": "Invalid template"}


def test_wati_client_requires_configuration() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = _client(handler, channel_number=None)

    assert not client.is_configured
    with pytest.raises(ConfigurationError):
        asyncio.run(client.send_template("919876543210", {"template_name": "x"}))


def test_provider_response_wraps_non_object_json() -> None:
    assert ProviderResponse(200, "[1, 2]").payload() == {"message": [1, 2]}
