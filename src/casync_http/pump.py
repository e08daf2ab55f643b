"""
Engine pump.

Advances the protocol engine until it reaches a given readiness condition.
Every other part of the helper goes through process_remote() before handing
data to the engine, which is how backpressure is honoured.
"""
from __future__ import annotations

import enum
import logging

from .engine import RemoteEngine, StepResult
from .errors import EngineError, RemoteClosed

logger = logging.getLogger(__name__)

__all__ = ["ProcessUntil", "PumpResult", "process_remote"]


class ProcessUntil(enum.Enum):
    """Condition process_remote() drives the engine towards."""
    CAN_PUT_CHUNK = "can_put_chunk"
    CAN_PUT_INDEX = "can_put_index"
    HAVE_REQUEST = "have_request"
    FINISHED = "finished"


class PumpResult(enum.Enum):
    READY = "ready"
    CLOSED = "closed"


_PREDICATES = {
    ProcessUntil.CAN_PUT_CHUNK: (
        "can_put_chunk",
        "Failed to determine whether we can add a chunk to the buffer",
    ),
    ProcessUntil.CAN_PUT_INDEX: (
        "can_put_index",
        "Failed to determine whether we can add an index fragment to the buffer",
    ),
    ProcessUntil.HAVE_REQUEST: (
        "has_pending_requests",
        "Failed to determine whether there are pending requests",
    ),
}


def process_remote(engine: RemoteEngine, until: ProcessUntil) -> PumpResult:
    """
    Step the engine until `until` holds.

    Returns READY once the condition holds (for FINISHED: once the engine
    reports it is done), and CLOSED when the peer closed the channel or the
    engine finished before the condition was reached. CLOSED is an expected
    outcome and is not logged.

    Raises:
        EngineError: If the engine fails (logged before re-raising)
    """
    predicate = _PREDICATES.get(until)

    while True:
        if predicate is not None:
            name, failure = predicate
            try:
                if getattr(engine, name)():
                    return PumpResult.READY
            except RemoteClosed:
                return PumpResult.CLOSED
            except EngineError as e:
                logger.error(f"{failure}: {e}")
                raise

        try:
            result = engine.step()
        except RemoteClosed:
            return PumpResult.CLOSED
        except EngineError as e:
            logger.error(f"Failed to process remoting engine: {e}")
            raise

        if result is StepResult.FINISHED:
            return PumpResult.READY if until is ProcessUntil.FINISHED else PumpResult.CLOSED

        if result is not StepResult.POLL:
            continue

        try:
            engine.poll(None)
        except RemoteClosed:
            return PumpResult.CLOSED
        except EngineError as e:
            logger.error(f"Failed to poll remoting engine: {e}")
            raise
