"""Observable catalog state container.

``CatalogStore`` owns the breed list, the search results, the loading and
error flags and the pagination cursor. It is the only component that mutates
catalog state, and every mutation is followed by a synchronous notification to
subscribers before the operation continues.

State axes:
    - List axis: idle -> loading -> loaded | errored, then
      loaded -> loading (load more) -> loaded more | errored | exhausted
    - Search axis: empty -> searching -> found | not found | errored, and
      found | not found -> empty when the query is cleared

The axes are independent. Each has its own in-flight flag
(``is_loading_list``, ``is_searching``); ``is_loading`` is true while either
is in flight. Concurrency safety comes from these flags alone: there are no
locks and no cancellation.

Example usage:
    store = CatalogStore(GetBreedsPage(gateway), SearchBreedsByTerm(gateway))
    unsubscribe = store.subscribe(lambda state: render(state))
    await store.fetch_breeds()
    await store.load_more_breeds()
    await store.search_breeds("bengal")
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable

from catbreeds.core.errors import CatalogError
from catbreeds.core.models import CatalogItem
from catbreeds.core.operations import PageFetcher, TermSearcher

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."
LOAD_MORE_ERROR_MESSAGE = "An error occurred while loading more breeds"


@dataclass(frozen=True)
class CatalogState:
    """Immutable snapshot of the catalog state.

    Attributes:
        items: Loaded breeds in page order (append-only across load-more)
        search_results: Results of the latest search
        is_loading_list: A first-page or load-more fetch is in flight
        is_searching: A search is in flight
        has_error: The latest failed operation left an error behind
        error_message: User-facing description of that error
        has_reached_max: A page fetch returned no items; pagination is over
        page: Index of the last successfully fetched page
    """

    items: tuple[CatalogItem, ...] = ()
    search_results: tuple[CatalogItem, ...] = ()
    is_loading_list: bool = False
    is_searching: bool = False
    has_error: bool = False
    error_message: str = ""
    has_reached_max: bool = False
    page: int = 0

    @property
    def is_loading(self) -> bool:
        return self.is_loading_list or self.is_searching


Listener = Callable[[CatalogState], None]


class CatalogStore:
    """Catalog state machine with publish/subscribe change notification."""

    def __init__(self, get_page: PageFetcher, search: TermSearcher):
        self._get_page = get_page
        self._search = search
        self._state = CatalogState()
        self._listeners: list[Listener] = []
        # Incremented by every search-axis reset so late results are dropped
        self._search_generation = 0

    # ------------------------------------------------------------------
    # Observable interface
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        """Unregister *listener*; unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        return self._state.items

    @property
    def search_results(self) -> tuple[CatalogItem, ...]:
        return self._state.search_results

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_loading_list(self) -> bool:
        return self._state.is_loading_list

    @property
    def is_searching(self) -> bool:
        return self._state.is_searching

    @property
    def has_error(self) -> bool:
        return self._state.has_error

    @property
    def error_message(self) -> str:
        return self._state.error_message

    @property
    def has_reached_max(self) -> bool:
        return self._state.has_reached_max

    @property
    def page(self) -> int:
        return self._state.page

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        self._notify()

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Catalog listener %r raised", listener)

    # ------------------------------------------------------------------
    # List axis
    # ------------------------------------------------------------------

    async def fetch_breeds(self) -> None:
        """Reload the list from page 0, replacing everything loaded so far.

        No-op while another list fetch (first page or load-more) is in
        flight, including on a cold start with nothing loaded yet.
        """
        if self._state.is_loading_list:
            logger.debug("fetch_breeds skipped: list fetch already in flight")
            return

        self._update(
            is_loading_list=True,
            has_error=False,
            error_message="",
            page=0,
            has_reached_max=False,
            search_results=(),
        )
        logger.debug("Fetching breeds from page 0")

        try:
            items = await self._get_page.execute(0)
        except Exception as e:
            logger.error("Error fetching breeds: %s", e)
            self._update(
                is_loading_list=False,
                has_error=True,
                error_message=self._error_message(e),
            )
            return

        logger.debug("Loaded %d breeds", len(items))
        self._update(
            items=tuple(items),
            is_loading_list=False,
            has_error=False,
            error_message="",
        )

    async def load_more_breeds(self) -> None:
        """Fetch the next page and append the breeds not already loaded.

        No-op once pagination is exhausted or while a list fetch is in
        flight. On failure the cursor is rolled back so calling again
        re-requests the same page.
        """
        if self._state.has_reached_max or self._state.is_loading_list:
            return

        previous_page = self._state.page
        next_page = previous_page + 1
        self._update(is_loading_list=True, page=next_page)

        try:
            fetched = await self._get_page.execute(next_page)
        except Exception as e:
            logger.error("Error loading breeds page %d: %s", next_page, e)
            changes: dict[str, Any] = {
                "is_loading_list": False,
                "has_error": True,
                "error_message": self._error_message(e, load_more=True),
            }
            # clear_search() may have reset the cursor while we were waiting
            if self._state.page == next_page:
                changes["page"] = previous_page
            self._update(**changes)
            return

        if not fetched:
            logger.debug("Page %d is empty; pagination exhausted", next_page)
            self._update(
                has_reached_max=True,
                is_loading_list=False,
                has_error=False,
                error_message="",
            )
            return

        new_items = self._without_duplicates(fetched)
        logger.debug(
            "Page %d: %d fetched, %d new",
            next_page,
            len(fetched),
            len(new_items),
        )
        self._update(
            items=self._state.items + new_items,
            is_loading_list=False,
            has_error=False,
            error_message="",
        )

    def _without_duplicates(self, fetched: Any) -> tuple[CatalogItem, ...]:
        seen = {item.id for item in self._state.items}
        fresh: list[CatalogItem] = []
        for item in fetched:
            if item.id in seen:
                continue
            seen.add(item.id)
            fresh.append(item)
        return tuple(fresh)

    # ------------------------------------------------------------------
    # Search axis
    # ------------------------------------------------------------------

    async def search_breeds(self, query: str) -> None:
        """Replace the search results with the breeds matching *query*.

        An empty query clears the results without any network call. When
        searches overlap, only the most recently started one is applied.
        """
        self._search_generation += 1
        generation = self._search_generation

        if not query:
            self._update(search_results=(), is_searching=False)
            return

        self._update(is_searching=True, has_error=False, error_message="")

        try:
            results = await self._search.execute(query)
        except Exception as e:
            if generation != self._search_generation:
                logger.debug("Dropping failure of superseded search %r", query)
                return
            logger.error("Error searching breeds for %r: %s", query, e)
            self._update(
                is_searching=False,
                has_error=True,
                error_message=self._error_message(e),
            )
            return

        if generation != self._search_generation:
            logger.debug("Dropping results of superseded search %r", query)
            return
        self._update(
            search_results=tuple(results),
            is_searching=False,
            has_error=False,
        )

    def clear_search(self) -> None:
        """Drop search results and reset pagination for the list view."""
        self._search_generation += 1
        self._update(
            search_results=(),
            is_searching=False,
            page=0,
            has_reached_max=False,
        )

    @staticmethod
    def _error_message(error: Exception, *, load_more: bool = False) -> str:
        if isinstance(error, CatalogError):
            return error.message
        return LOAD_MORE_ERROR_MESSAGE if load_more else GENERIC_ERROR_MESSAGE

