"""
casync-http error classes.

Provides a clear taxonomy of errors that can occur while pulling an index and
chunks over HTTP on behalf of the protocol engine. HTTP outcomes that the
protocol itself can express (a missing chunk, an unavailable index) are not
errors; they are forwarded to the engine instead.
"""
from __future__ import annotations


class CasyncHttpError(Exception):
    """
    Base class for all casync-http errors.

    Anything deriving from this class ends the run with a non-zero exit status.
    """
    pass


class ConfigurationError(CasyncHttpError):
    """
    Invalid endpoint combination or settings.

    Raised when:
    - Neither an index URL nor any store URL is configured
    - A setting has an invalid value
    - No protocol engine factory is configured
    """
    pass


class UnsupportedOperation(ConfigurationError):
    """
    Requested mode is not supported over HTTP.

    Raised when a base or archive URL is passed. Pushing to (or pulling from)
    those over HTTP is not implemented.
    """
    pass


class TransportError(CasyncHttpError):
    """
    HTTP transfer failed.

    Raised when:
    - The connection cannot be established (after configured retries)
    - The transfer breaks off mid-body
    - A byte sink aborted the transfer
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class TransferAborted(TransportError):
    """
    A byte sink refused the bytes it was offered.

    This is the sink's way of cancelling the transfer; the fetcher stops
    reading the response body as soon as it sees it.
    """
    pass


class ChunkTooLarge(TransferAborted):
    """
    Chunk body exceeds the largest payload a chunk message can carry.

    Fatal to the run; the engine is never handed an oversized payload.
    """

    def __init__(self, message: str, size: int, limit: int):
        super().__init__(message)
        self.size = size
        self.limit = limit


class EngineError(CasyncHttpError):
    """
    The protocol engine reported a failure.

    Raised by engine implementations from any of their operations.
    """
    pass


class RemoteClosed(EngineError):
    """
    The peer closed the duplex channel, or the engine has finished.

    This is the expected way for a session to end and is never logged as an
    error. Call sites treat it as success.
    """
    pass


__all__ = [
    "CasyncHttpError",
    "ConfigurationError",
    "UnsupportedOperation",
    "TransportError",
    "TransferAborted",
    "ChunkTooLarge",
    "EngineError",
    "RemoteClosed",
]
