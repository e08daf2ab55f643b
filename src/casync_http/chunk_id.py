"""
Chunk identifiers.

A chunk is addressed by a fixed-size digest of its (uncompressed) content.
The protocol engine hands out identifiers as raw bytes; stores address them
by their lowercase hex form.
"""
from __future__ import annotations

from dataclasses import dataclass

__all__ = ["ChunkID", "CHUNK_ID_SIZE", "CHUNK_ID_FORMAT_LEN"]

CHUNK_ID_SIZE = 32
CHUNK_ID_FORMAT_LEN = CHUNK_ID_SIZE * 2


@dataclass(frozen=True, slots=True)
class ChunkID:
    """
    Binary chunk digest.

    Invariants:
    - digest: exactly CHUNK_ID_SIZE bytes
    - str() is always CHUNK_ID_FORMAT_LEN lowercase hex characters
    """
    digest: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.digest, (bytes, bytearray)):
            raise ValueError(f"chunk id must be bytes, got {type(self.digest).__name__}")
        if len(self.digest) != CHUNK_ID_SIZE:
            raise ValueError(f"chunk id must be {CHUNK_ID_SIZE} bytes, got {len(self.digest)}")
        # Normalize bytearray so the id stays hashable
        object.__setattr__(self, "digest", bytes(self.digest))

    def format(self) -> str:
        """Canonical lowercase hex form."""
        return self.digest.hex()

    def __str__(self) -> str:
        return self.format()
