# autocomplete.py
# debounced, superseding address suggestions for one input field

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

import config
from geocoding import MIN_QUERY_LEN, new_session_token, resolve_candidate, search_addresses
from models import AddressCandidate, Coordinate

log = logging.getLogger(__name__)

SearchFn = Callable[..., Awaitable[List[AddressCandidate]]]
ResolveFn = Callable[[AddressCandidate, Optional[str]], Awaitable[Optional[Coordinate]]]


class AddressAutocomplete:
    """
    One instance per input-field session. Holds the session token shared by
    every suggest/retrieve pair and a generation counter: each keystroke bumps
    it, and any request that finishes under an older generation is dropped.
    The underlying network call is not aborted, only its result.
    """

    def __init__(self, search: SearchFn = search_addresses, resolve: ResolveFn = resolve_candidate,
                 debounce_s: float = config.AUTOCOMPLETE_DEBOUNCE_MS / 1000, limit: int = 8):
        self._search = search
        self._resolve = resolve
        self.debounce_s = debounce_s
        self.limit = limit
        self.session_token = new_session_token()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        """Invalidate whatever is in flight (field cleared, step left)."""
        self._generation += 1

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def suggest(self, query: str) -> Optional[List[AddressCandidate]]:
        """
        Suggestions for the latest input.
        Returns None when a newer keystroke superseded this one.
        """
        self._generation += 1
        gen = self._generation
        if len(query.strip()) < MIN_QUERY_LEN:
            return []

        await asyncio.sleep(self.debounce_s)
        if not self.is_current(gen):
            return None

        results = await self._search(query, self.limit, session_token=self.session_token)
        if not self.is_current(gen):
            log.debug("discarding stale suggestions for %r", query)
            return None
        return results

    async def select(self, candidate: AddressCandidate) -> Optional[Coordinate]:
        return await self._resolve(candidate, self.session_token)
