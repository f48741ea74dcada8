"""Core catalog components for catbreeds."""

from catbreeds.core.errors import (
    ApiFailure,
    CatalogError,
    ConfigurationError,
    NetworkFailure,
    ParsingFailure,
    TimeoutFailure,
    UnknownFailure,
)

from catbreeds.core.models import (
    BreedImage,
    BreedWeight,
    CatalogItem,
)

from catbreeds.core.http import RetryingHttpClient
from catbreeds.core.gateway import CatalogGateway

from catbreeds.core.operations import (
    GetBreedsPage,
    PageFetcher,
    SearchBreedsByTerm,
    TermSearcher,
)

from catbreeds.core.state import (
    CatalogState,
    CatalogStore,
)

__all__ = [
    "ApiFailure",
    "CatalogError",
    "ConfigurationError",
    "NetworkFailure",
    "ParsingFailure",
    "TimeoutFailure",
    "UnknownFailure",
    "BreedImage",
    "BreedWeight",
    "CatalogItem",
    "RetryingHttpClient",
    "CatalogGateway",
    "GetBreedsPage",
    "PageFetcher",
    "SearchBreedsByTerm",
    "TermSearcher",
    "CatalogState",
    "CatalogStore",
]
