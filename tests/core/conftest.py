"""Shared fixtures for catalog core tests.

Provides breed payload builders, an ``httpx.MockTransport``-backed fetch
client factory, and scripted fakes for the page/search operations consumed by
the state container.
"""

import asyncio
from typing import Any, Callable, Iterable

import httpx
import pytest

from catbreeds.core.http import RetryingHttpClient
from catbreeds.core.models import CatalogItem

TEST_API_KEY = "live_test_key_1234567890"
TEST_BASE_URL = "https://api.test/v1"


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


ABYSSINIAN = {
    "weight": {"imperial": "7  -  10", "metric": "3 - 5"},
    "id": "abys",
    "name": "Abyssinian",
    "cfa_url": "http://cfa.org/Breeds/BreedsAB/Abyssinian.aspx",
    "vetstreet_url": "http://www.vetstreet.com/cats/abyssinian",
    "vcahospitals_url": "https://vcahospitals.com/know-your-pet/cat-breeds/abyssinian",
    "temperament": "Active, Energetic, Independent, Intelligent, Gentle",
    "origin": "Egypt",
    "description": "The Abyssinian is easy to care for, and a joy to have in your home.",
    "life_span": "14 - 15",
    "adaptability": 5,
    "affection_level": 5,
    "child_friendly": 3,
    "dog_friendly": 4,
    "energy_level": 5,
    "grooming": 1,
    "health_issues": 2,
    "intelligence": 5,
    "shedding_level": 2,
    "social_needs": 5,
    "stranger_friendly": 5,
    "vocalisation": 1,
    "hypoallergenic": 0,
    "wikipedia_url": "https://en.wikipedia.org/wiki/Abyssinian_(cat)",
    "reference_image_id": "0XYvRd7oD",
    "image": {
        "id": "0XYvRd7oD",
        "width": 1204,
        "height": 1445,
        "url": "https://cdn2.thecatapi.com/images/0XYvRd7oD.jpg",
    },
}


def breed_payload(breed_id: str, name: str | None = None, **overrides: Any) -> dict:
    """Minimal breed JSON object with the given id."""
    payload = {
        "id": breed_id,
        "name": name or breed_id.title(),
        "origin": "Nowhere",
        "temperament": "Calm",
        "weight": {"imperial": "8 - 12", "metric": "4 - 6"},
    }
    payload.update(overrides)
    return payload


def make_item(breed_id: str, name: str | None = None) -> CatalogItem:
    return CatalogItem.from_api(breed_payload(breed_id, name))


def make_items(*breed_ids: str) -> list[CatalogItem]:
    return [make_item(breed_id) for breed_id in breed_ids]


# ---------------------------------------------------------------------------
# Transport fakes
# ---------------------------------------------------------------------------


async def no_sleep(delay: float) -> None:
    """Sleep replacement that returns immediately."""


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_http_client(
    handler: Callable[[httpx.Request], httpx.Response],
    **kwargs: Any,
) -> RetryingHttpClient:
    """Build a ``RetryingHttpClient`` whose transport is *handler*."""
    kwargs.setdefault("sleep_func", no_sleep)
    return RetryingHttpClient(
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


# ---------------------------------------------------------------------------
# Operation fakes
# ---------------------------------------------------------------------------


class ScriptedPageFetcher:
    """PageFetcher returning (or raising) scripted results per call.

    Each entry of *script* is either a list of items or an exception instance.
    When *gate* is set every call waits on it before answering, so tests can
    observe in-flight state.
    """

    def __init__(self, script: Iterable[Any] = ()):
        self.script = list(script)
        self.calls: list[int] = []
        self.gate: asyncio.Event | None = None

    async def execute(self, page: int) -> list[CatalogItem]:
        self.calls.append(page)
        if self.gate is not None:
            await self.gate.wait()
        result = self.script.pop(0) if self.script else []
        if isinstance(result, BaseException):
            raise result
        return list(result)


class ScriptedSearcher:
    """TermSearcher with per-query results or exceptions."""

    def __init__(self, results: dict[str, Any] | None = None):
        self.results = results or {}
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def execute(self, query: str) -> list[CatalogItem]:
        self.calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        result = self.results.get(query, [])
        if isinstance(result, BaseException):
            raise result
        return list(result)
