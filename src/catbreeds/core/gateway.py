"""Catalog gateway for The Cat API.

Translates HTTP responses from the ``/breeds`` endpoints into ``CatalogItem``
sequences or classified ``CatalogError`` failures. The gateway classifies but
never recovers: transient failures are already retried by
``RetryingHttpClient`` underneath it.

The Cat API documentation:
https://developers.thecatapi.com/

Classification:
    - 200: JSON array of breed objects; malformed JSON or any other shape is
      a ``ParsingFailure``
    - 401: ``ApiFailure`` (bad credentials, not transient)
    - 404: ``ApiFailure`` (page out of range / no match on search, see
      ``empty_search_on_404``)
    - other status: ``ApiFailure`` carrying the status (429 included)
    - ``CatalogError`` from the fetch client: re-raised unchanged
    - anything else: ``UnknownFailure``

Example usage:
    gateway = CatalogGateway(api_key="live_...")
    first_page = await gateway.get_page(0)
    matches = await gateway.search_by_term("bengal")
"""

import json
import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from catbreeds.core.errors import (
    ApiFailure,
    CatalogError,
    ConfigurationError,
    ParsingFailure,
    UnknownFailure,
)
from catbreeds.core.http import RetryingHttpClient
from catbreeds.core.models import CatalogItem
from catbreeds.core.redaction import redact_secrets

logger = logging.getLogger(__name__)

# The Cat API constants
DEFAULT_BASE_URL = "https://api.thecatapi.com/v1"
BREEDS_ENDPOINT = "/breeds"
SEARCH_ENDPOINT = "/breeds/search"
API_KEY_HEADER = "x-api-key"
DEFAULT_PAGE_SIZE = 10

INVALID_FORMAT_MESSAGE = "Invalid response format from server"
UNAUTHORIZED_MESSAGE = "Unauthorized: Invalid API Key"


class CatalogGateway:
    """The Cat API breeds gateway.

    Attributes:
        base_url: API base URL without trailing slash
        page_size: Items requested per page (default: 10)
        empty_search_on_404: Treat a 404 from the search endpoint as "no
            matches" (empty result) instead of an ``ApiFailure``
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: Optional[RetryingHttpClient] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        empty_search_on_404: bool = True,
    ):
        """Initialize the gateway.

        Args:
            api_key: The Cat API key, sent as the ``x-api-key`` header
            base_url: API base URL (default: https://api.thecatapi.com/v1)
            http_client: Resilient fetch client; a default one is created
                when omitted
            page_size: Items per page for ``get_page``
            empty_search_on_404: See class attributes

        Raises:
            ConfigurationError: If ``api_key`` is empty
        """
        if not api_key:
            raise ConfigurationError("CAT_API_KEY not found in environment variables")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.empty_search_on_404 = empty_search_on_404
        self._http_client = http_client or RetryingHttpClient()

    @property
    def http_client(self) -> RetryingHttpClient:
        return self._http_client

    def _headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self._api_key}

    async def get_page(self, page: int) -> list[CatalogItem]:
        """Fetch one page of breeds.

        Args:
            page: Zero-based page index

        Returns:
            Breeds on that page; an empty list past the last page

        Raises:
            ApiFailure: Non-200 status
            ParsingFailure: Body is not a JSON array of objects
            TimeoutFailure: Request timed out after retries
            NetworkFailure: Transport failed after retries
            UnknownFailure: Anything unexpected
        """
        url = f"{self.base_url}{BREEDS_ENDPOINT}"
        params = {"limit": self.page_size, "page": page}
        try:
            response = await self._http_client.get(url, headers=self._headers(), params=params)
            if response.status_code == 404:
                raise ApiFailure(f"Breeds not found on page {page}", status_code=404)
            if response.status_code != 200:
                self._raise_for_status(response, "Failed to load breeds")
            items = self._parse_items(response)
            logger.debug("Fetched %d breeds from page %d", len(items), page)
            return items
        except CatalogError:
            raise
        except Exception as e:
            raise UnknownFailure(
                redact_secrets(f"Error loading breeds: {e}"),
                original_error=e,
            ) from e

    async def search_by_term(self, query: str) -> list[CatalogItem]:
        """Search breeds by (partial, case-insensitive) name.

        Args:
            query: Raw search term, passed as the ``q`` parameter

        Returns:
            Matching breeds

        Raises:
            Same failures as ``get_page``. A 404 is only raised when
            ``empty_search_on_404`` is disabled.
        """
        url = f"{self.base_url}{SEARCH_ENDPOINT}"
        try:
            response = await self._http_client.get(url, headers=self._headers(), params={"q": query})
            if response.status_code == 404:
                if self.empty_search_on_404:
                    logger.debug("Search for %r returned 404; treating as no matches", query)
                    return []
                raise ApiFailure(f'No breeds found for "{query}"', status_code=404)
            if response.status_code != 200:
                self._raise_for_status(response, "Failed to search breeds")
            items = self._parse_items(response)
            logger.debug("Search for %r matched %d breeds", query, len(items))
            return items
        except CatalogError:
            raise
        except Exception as e:
            raise UnknownFailure(
                redact_secrets(f"Error searching breeds: {e}"),
                original_error=e,
            ) from e

    def _raise_for_status(self, response: httpx.Response, prefix: str) -> None:
        """Raise the ``ApiFailure`` matching a non-200, non-404 response."""
        if response.status_code == 401:
            raise ApiFailure(UNAUTHORIZED_MESSAGE, status_code=401)
        raise ApiFailure(
            f"{prefix}: {response.status_code}",
            status_code=response.status_code,
        )

    def _parse_items(self, response: httpx.Response) -> list[CatalogItem]:
        """Parse a 200 body into catalog items.

        Expected shape::

            [
                {"id": "abys", "name": "Abyssinian", "weight": {...}, ...},
                ...
            ]
        """
        try:
            data: Any = json.loads(response.text)
        except ValueError as e:
            raise ParsingFailure(INVALID_FORMAT_MESSAGE) from e

        if not isinstance(data, list) or not all(isinstance(entry, dict) for entry in data):
            raise ParsingFailure(INVALID_FORMAT_MESSAGE)

        try:
            return [CatalogItem.from_api(entry) for entry in data]
        except ValidationError as e:
            raise ParsingFailure(INVALID_FORMAT_MESSAGE) from e

    async def aclose(self) -> None:
        """Close the underlying fetch client."""
        await self._http_client.aclose()
