"""Composition root for a catalog session.

Builds the object graph once, from configuration, and owns its lifecycle:

    RetryingHttpClient -> CatalogGateway -> GetBreedsPage / SearchBreedsByTerm
        -> CatalogStore

Example usage:
    config = CatalogConfig.from_env()
    async with CatalogSession(config) as session:
        await session.store.fetch_breeds()
        print(session.store.items)
"""

import logging
from typing import Optional

import httpx

from catbreeds.config import CatalogConfig
from catbreeds.core.gateway import CatalogGateway
from catbreeds.core.http import RetryingHttpClient
from catbreeds.core.operations import GetBreedsPage, SearchBreedsByTerm
from catbreeds.core.state import CatalogStore

logger = logging.getLogger(__name__)


class CatalogSession:
    """Wires the catalog components together and closes the transport on exit."""

    def __init__(
        self,
        config: CatalogConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Build the session.

        Args:
            config: Resolved configuration
            client: Optional pre-built transport handle, handed to the fetch
                client (tests pass one backed by ``httpx.MockTransport``)

        Raises:
            ConfigurationError: If no API key is configured or a numeric
                setting is out of range
        """
        api_key = config.require_api_key()
        config.validate()
        self.config = config
        self._http_client = RetryingHttpClient(
            max_retries=config.max_retries,
            timeout=config.timeout,
            retry_delay=config.retry_delay,
            client=client,
        )
        self._gateway = CatalogGateway(
            api_key,
            config.base_url,
            http_client=self._http_client,
            page_size=config.page_size,
        )
        self._store = CatalogStore(
            GetBreedsPage(self._gateway),
            SearchBreedsByTerm(self._gateway),
        )
        logger.debug(
            "Catalog session ready (base_url=%s, page_size=%d)",
            self._gateway.base_url,
            config.page_size,
        )

    @property
    def store(self) -> CatalogStore:
        return self._store

    @property
    def gateway(self) -> CatalogGateway:
        return self._gateway

    async def aclose(self) -> None:
        await self._gateway.aclose()

    async def __aenter__(self) -> "CatalogSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
