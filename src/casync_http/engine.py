"""
Protocol engine interface for casync-http.

The engine speaks the chunk/index exchange protocol over a duplex byte
channel; this helper only drives it. The protocol below is the boundary
between the puller and engine implementations, enabling clean dependency
injection and testing with fakes.
"""
from __future__ import annotations

import enum
import errno
import importlib
from typing import Callable, Optional, Protocol, runtime_checkable

from .chunk_id import CHUNK_ID_SIZE, ChunkID
from .errors import ConfigurationError

__all__ = [
    "RemoteEngine",
    "StepResult",
    "FeatureFlags",
    "AbortReason",
    "EngineFactory",
    "PROTOCOL_SIZE_MAX",
    "CHUNK_HEADER_SIZE",
    "MAX_CHUNK_PAYLOAD",
    "load_engine_factory",
]

# Largest message the protocol will carry, header included
PROTOCOL_SIZE_MAX = 16 * 1024 * 1024

# Chunk message header: size + type + flags (le64 each) followed by the chunk id
CHUNK_HEADER_SIZE = 8 + 8 + 8 + CHUNK_ID_SIZE

MAX_CHUNK_PAYLOAD = PROTOCOL_SIZE_MAX - CHUNK_HEADER_SIZE


class StepResult(enum.Enum):
    """Outcome of advancing the engine by one step."""
    CONTINUE = "continue"   # made progress, step again
    POLL = "poll"           # nothing to do until the channel is ready
    FINISHED = "finished"   # session complete


class FeatureFlags(enum.IntFlag):
    """Local capabilities announced to the peer."""
    NONE = 0
    READABLE_STORE = 1
    READABLE_INDEX = 2


class AbortReason(enum.IntEnum):
    """errno-style reasons carried by an abort message."""
    NO_MEDIUM = getattr(errno, "ENOMEDIUM", 123)
    BAD_RESPONSE = getattr(errno, "EBADR", 53)


@runtime_checkable
class RemoteEngine(Protocol):
    """
    Protocol for the chunk/index exchange engine.

    Every operation may raise EngineError. RemoteClosed (an EngineError) is
    raised when the peer closed the channel or the session has ended; callers
    treat it as expected termination.
    """

    def set_local_feature_flags(self, flags: FeatureFlags) -> None:
        """Announce what this side can serve."""
        ...

    def set_io_fds(self, input_fd: int, output_fd: int) -> None:
        """Bind the duplex channel to the given file descriptors."""
        ...

    def can_put_chunk(self) -> bool:
        """Whether the engine will accept one chunk payload right now."""
        ...

    def can_put_index(self) -> bool:
        """Whether the engine will accept a slice of index bytes right now."""
        ...

    def has_pending_requests(self) -> bool:
        """Whether the peer has asked for at least one chunk not yet served."""
        ...

    def step(self) -> StepResult:
        """Advance the engine by one step."""
        ...

    def poll(self, timeout: Optional[float] = None) -> None:
        """
        Block until the channel is ready for the engine.

        Args:
            timeout: Seconds to wait; None waits indefinitely
        """
        ...

    def put_index(self, data: bytes) -> None:
        """Queue a slice of index bytes for the peer."""
        ...

    def put_index_eof(self) -> None:
        """Signal that the index is complete."""
        ...

    def next_request(self) -> ChunkID:
        """Dequeue the next chunk the peer asked for."""
        ...

    def put_chunk(self, chunk_id: ChunkID, data: bytes, *, compressed: bool) -> None:
        """
        Queue a chunk payload for the peer.

        Args:
            chunk_id: Identifier the payload answers
            data: Chunk payload (at most MAX_CHUNK_PAYLOAD bytes)
            compressed: True when data is the compressed (.xz) representation
        """
        ...

    def put_missing(self, chunk_id: ChunkID) -> None:
        """Tell the peer a requested chunk cannot be provided."""
        ...

    def abort(self, reason: int, message: str) -> None:
        """End the session, telling the peer why."""
        ...

    def close(self) -> None:
        """Release the engine and its resources."""
        ...


EngineFactory = Callable[[], RemoteEngine]


def load_engine_factory(path: str) -> EngineFactory:
    """
    Import an engine factory from a "module:attribute" path.

    The attribute may be a class implementing RemoteEngine or any zero
    argument callable returning one.

    Raises:
        ConfigurationError: If the path is malformed or cannot be imported
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Engine factory must look like 'module:attribute', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import engine module '{module_name}': {e}") from e

    factory = module
    for part in attr.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError as e:
            raise ConfigurationError(f"Engine factory '{path}' not found") from e

    if not callable(factory):
        raise ConfigurationError(f"Engine factory '{path}' is not callable")
    return factory
