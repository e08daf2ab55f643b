"""
Chunk URL construction.

Stores are plain HTTP directory trees sharded by the first four hex
characters of the chunk id, holding xz-compressed chunks:

    <store>/<first 4 hex chars>/<64 hex chars>.xz
"""
from __future__ import annotations

import re

from .chunk_id import ChunkID

__all__ = ["chunk_url", "CHUNK_SUFFIX"]

CHUNK_SUFFIX = ".xz"

_ARGS_RE = re.compile(r"[?;]")


def chunk_url(store_url: str, chunk_id: ChunkID) -> str:
    """
    Build the URL of a chunk inside a store.

    URL arguments (anything from the first '?' or ';') and trailing slashes
    are dropped from the store URL before the chunk path is appended.

    Args:
        store_url: Base URL of the store
        chunk_id: Chunk to locate

    Returns:
        Full chunk URL

    Example:
        "http://example.com/store/?token=1" with id "ab12..." becomes
        "http://example.com/store/ab12/ab12....xz"
    """
    match = _ARGS_RE.search(store_url)
    prefix = store_url[:match.start()] if match else store_url
    prefix = prefix.rstrip("/")

    ids = chunk_id.format()
    return f"{prefix}/{ids[:4]}/{ids}{CHUNK_SUFFIX}"
