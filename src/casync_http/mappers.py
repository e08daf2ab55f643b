"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and a CLI command wrapper
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

import typer

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Matched against the exception's class hierarchy, most derived first
EXIT_CODES = {
    "ConfigurationError": 2,
    "ValueError": 2,
    "TransportError": 3,
    "ChunkTooLarge": 4,
    "EngineError": 5,
}

FALLBACK_EXIT_CODE = 1


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to exit code.

    Returns:
    - 2: Invalid endpoints or settings (ConfigurationError, UnsupportedOperation, ValueError)
    - 3: HTTP transfer failure (TransportError, TransferAborted)
    - 4: Chunk over the payload limit (ChunkTooLarge)
    - 5: Protocol engine failure (EngineError)
    - 1: anything else

    Args:
        exc: Exception to map

    Returns:
        Non-zero exit code
    """
    for cls in type(exc).__mro__:
        code = EXIT_CODES.get(cls.__name__)
        if code is not None:
            return code
    return FALLBACK_EXIT_CODE


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit. The error is reported on stderr; stdout
    belongs to the protocol channel.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except Exception as e:
        logger.error(str(e) or type(e).__name__)
        raise typer.Exit(code=exit_code_for(e)) from e
