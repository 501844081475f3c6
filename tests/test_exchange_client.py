"""
tests.test_exchange_client

ExchangeClient against an in-process httpx transport.
"""

from __future__ import annotations

import httpx
import pytest

from origin_registry.exchange.client import ExchangeClient
from origin_registry.settings import Settings


def make_client(handler) -> tuple[ExchangeClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    settings = Settings(env="test", exchange_api_base_url="http://exchange.test/api/")
    return ExchangeClient(settings=settings, http=http), http


@pytest.mark.asyncio
async def test_deposit_address_forwards_caller_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"address": "0xabc"})

    client, http = make_client(handler)
    async with http:
        assert await client.deposit_address(access_token="tok-1") == "0xabc"

    assert str(seen[0].url) == "http://exchange.test/api/account"
    assert seen[0].headers["Authorization"] == "Bearer tok-1"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"message": "boom"}),
        httpx.Response(404),
        httpx.Response(200, json={"address": ""}),
        httpx.Response(200, json={}),
        httpx.Response(200, content=b"not json"),
    ],
)
async def test_deposit_address_degrades_to_none(response: httpx.Response) -> None:
    client, http = make_client(lambda request: response)
    async with http:
        assert await client.deposit_address(access_token="tok") is None


@pytest.mark.asyncio
async def test_deposit_address_transport_error_is_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client, http = make_client(handler)
    async with http:
        assert await client.deposit_address(access_token="tok") is None
