"""
Byte sinks for streamed HTTP bodies.

The fetcher hands every slice of a response body to a sink. A sink returns
the number of bytes it consumed, or raises TransferAborted to stop the
transfer.
"""
from __future__ import annotations

import logging

from .engine import MAX_CHUNK_PAYLOAD, RemoteEngine
from .errors import ChunkTooLarge, EngineError, TransferAborted
from .pump import ProcessUntil, PumpResult, process_remote

logger = logging.getLogger(__name__)

__all__ = ["IndexSink", "ChunkSink"]


class IndexSink:
    """Feeds index bytes straight into the engine, honouring backpressure."""

    def __init__(self, engine: RemoteEngine):
        self.engine = engine
        self.written = 0

    def __call__(self, data: bytes) -> int:
        try:
            if process_remote(self.engine, ProcessUntil.CAN_PUT_INDEX) is PumpResult.CLOSED:
                raise TransferAborted("Remote closed while receiving index")
        except EngineError as e:
            raise TransferAborted(f"Cannot pass index to remote: {e}") from e

        try:
            self.engine.put_index(data)
        except EngineError as e:
            logger.error(f"Failed to put index: {e}")
            raise TransferAborted(f"Failed to put index: {e}") from e

        self.written += len(data)
        return len(data)


class ChunkSink:
    """
    Accumulates one chunk body in memory.

    The engine is not involved while the body streams in; the puller checks
    backpressure once the whole chunk is here. The buffer is reused across
    chunks and must be reset between them.
    """

    def __init__(self, limit: int = MAX_CHUNK_PAYLOAD):
        self.limit = limit
        self._buffer = bytearray()

    def __call__(self, data: bytes) -> int:
        size = len(self._buffer) + len(data)
        if size > self.limit:
            logger.error("Chunk too large")
            raise ChunkTooLarge(
                f"Chunk of at least {size} bytes exceeds limit of {self.limit} bytes",
                size=size,
                limit=self.limit,
            )

        self._buffer += data
        return len(data)

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def data(self) -> bytes:
        """Copy of the accumulated body."""
        return bytes(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()
