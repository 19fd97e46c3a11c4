"""Local cache entry."""

from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """
    A cached payload and the instant it was stored.

    ``timestamp`` is epoch milliseconds so entries written by other
    clients of the same store remain readable.
    """

    data: Any
    timestamp: int
