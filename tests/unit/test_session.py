"""Tests for CatalogSession wiring and lifecycle."""

import httpx
import pytest

from catbreeds.config import CatalogConfig
from catbreeds.core.errors import ConfigurationError
from catbreeds.core.state import CatalogStore
from catbreeds.session import CatalogSession


def _client(pages):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=pages.get(request.url.params.get("page"), []))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestCatalogSession:
    def test_missing_key_fails_fast(self):
        with pytest.raises(ConfigurationError):
            CatalogSession(CatalogConfig())

    def test_out_of_range_setting_fails_fast(self):
        with pytest.raises(ConfigurationError, match="max_retries"):
            CatalogSession(CatalogConfig(api_key="k", max_retries=0))

    def test_wires_config_through(self):
        config = CatalogConfig(
            api_key="k",
            base_url="https://api.test/v1/",
            page_size=3,
            max_retries=5,
            timeout=4.0,
            retry_delay=0.1,
        )

        session = CatalogSession(config)

        assert isinstance(session.store, CatalogStore)
        assert session.gateway.base_url == "https://api.test/v1"
        assert session.gateway.page_size == 3
        http_client = session.gateway.http_client
        assert (http_client.max_retries, http_client.timeout, http_client.retry_delay) == (5, 4.0, 0.1)

    @pytest.mark.asyncio
    async def test_store_drives_gateway_and_closes(self):
        config = CatalogConfig(api_key="k")
        client = _client({"0": [{"id": "abys", "name": "Abyssinian"}]})

        async with CatalogSession(config, client=client) as session:
            await session.store.fetch_breeds()
            assert [item.id for item in session.store.items] == ["abys"]

        assert session.gateway.http_client.closed is True
        assert client.is_closed is True
