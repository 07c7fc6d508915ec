# providers/http.py
# shared httpx client handling for provider calls

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

DEFAULT_TIMEOUT_S = 20.0


@asynccontextmanager
async def open_client(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the caller's client untouched, or a short-lived one that is closed
    on exit. Headers are passed per request so both cases behave the same.
    """
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_S) as c:
        yield c
