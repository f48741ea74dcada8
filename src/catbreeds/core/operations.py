"""Fetch operations consumed by the catalog state container.

The container depends only on the ``PageFetcher`` / ``TermSearcher``
protocols, never on the gateway, so tests and alternative backends can supply
any object with a matching ``execute`` coroutine.
"""

from typing import Protocol, Sequence, runtime_checkable

from catbreeds.core.gateway import CatalogGateway
from catbreeds.core.models import CatalogItem


@runtime_checkable
class PageFetcher(Protocol):
    """Fetches one zero-based page of catalog items."""

    async def execute(self, page: int) -> Sequence[CatalogItem]: ...


@runtime_checkable
class TermSearcher(Protocol):
    """Searches catalog items by a free-text term."""

    async def execute(self, query: str) -> Sequence[CatalogItem]: ...


class GetBreedsPage:
    """Delegates page fetches to the gateway."""

    def __init__(self, gateway: CatalogGateway):
        self._gateway = gateway

    async def execute(self, page: int) -> list[CatalogItem]:
        return await self._gateway.get_page(page)


class SearchBreedsByTerm:
    """Delegates term searches to the gateway."""

    def __init__(self, gateway: CatalogGateway):
        self._gateway = gateway

    async def execute(self, query: str) -> list[CatalogItem]:
        return await self._gateway.search_by_term(query)
