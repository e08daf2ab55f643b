"""
Store selection.

Picks which configured store to ask for the next requested chunk. The
writable store, when configured, occupies slot 0 ahead of the read-only
stores.
"""
from __future__ import annotations

from typing import Optional, Sequence

__all__ = ["StoreSelector"]


class StoreSelector:
    """
    Round-robin over the writable store and the read-only stores.

    By default the cursor is not advanced between requests, so every chunk
    goes to slot 0. Pass round_robin=True to rotate through all stores.
    """

    def __init__(self, wstore_url: Optional[str], store_urls: Sequence[str], *,
                 round_robin: bool = False):
        self.wstore_url = wstore_url
        self.store_urls = list(store_urls)
        self.round_robin = round_robin
        self.cursor = 0

    def __len__(self) -> int:
        return (1 if self.wstore_url else 0) + len(self.store_urls)

    def select(self, counter: int) -> str:
        """
        Map a request counter onto a store URL.

        Raises:
            LookupError: If no store is configured
        """
        n_stores = len(self)
        if n_stores == 0:
            raise LookupError("No stores configured")

        index = counter % n_stores
        if self.wstore_url:
            return self.wstore_url if index == 0 else self.store_urls[index - 1]
        return self.store_urls[index]

    def next(self) -> str:
        """Store for the next request."""
        store_url = self.select(self.cursor)
        if self.round_robin:
            self.cursor = (self.cursor + 1) % len(self)
        return store_url
