"""
Pull orchestration.

Fetches the index over HTTP and then serves the engine's chunk requests from
the configured stores until the peer stops asking, translating HTTP outcomes
into protocol messages:

- index 200: index bytes, then end-of-index
- index 404: abort with NO_MEDIUM
- index other: abort with BAD_RESPONSE
- chunk 200: compressed chunk
- chunk other: missing chunk (the session goes on)
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

from .endpoints import EndpointSet
from .engine import AbortReason, FeatureFlags, RemoteEngine
from .errors import EngineError
from .locator import chunk_url
from .pump import ProcessUntil, PumpResult, process_remote
from .selector import StoreSelector
from .settings import Settings
from .sinks import ChunkSink, IndexSink
from .transport import HttpFetcher

logger = logging.getLogger(__name__)

__all__ = ["Puller", "pull"]


class Puller:
    """
    Drives one pull session.

    Owns the engine, the HTTP fetcher and the chunk buffer for the duration
    of the session and releases all of them in close(), whatever phase the
    session ended in. Use as a context manager.
    """

    def __init__(self, endpoints: EndpointSet, engine: RemoteEngine, *,
                 settings: Optional[Settings] = None,
                 fetcher: Optional[HttpFetcher] = None,
                 input_fd: Optional[int] = None,
                 output_fd: Optional[int] = None):
        """
        Initialize puller.

        Args:
            endpoints: Endpoints of this invocation (validated in run())
            engine: Protocol engine to drive
            settings: Optional settings (defaults to Settings())
            fetcher: Optional HTTP fetcher (defaults to one built from settings)
            input_fd: Channel input, defaults to stdin
            output_fd: Channel output, defaults to stdout
        """
        self.endpoints = endpoints
        self.engine = engine
        self.settings = settings or Settings()
        self.fetcher = fetcher or HttpFetcher(self.settings)
        self.input_fd = input_fd
        self.output_fd = output_fd

        self.selector = StoreSelector(
            endpoints.wstore_url,
            endpoints.store_urls,
            round_robin=self.settings.round_robin,
        )
        self.chunk_sink = ChunkSink()
        self._closed = False

    def run(self) -> None:
        """
        Run the whole session.

        Raises:
            ConfigurationError: If the endpoints cannot be served
            TransportError: If an HTTP transfer fails
            EngineError: If the engine fails
        """
        self.endpoints.check()
        self._setup_engine()

        if self.endpoints.index_url and not self._fetch_index():
            return

        if self.endpoints.has_stores and not self._serve_chunks():
            return

        self._drain()

    def _setup_engine(self) -> None:
        flags = FeatureFlags.NONE
        if self.endpoints.has_stores:
            flags |= FeatureFlags.READABLE_STORE
        if self.endpoints.index_url:
            flags |= FeatureFlags.READABLE_INDEX

        try:
            self.engine.set_local_feature_flags(flags)
        except EngineError as e:
            logger.error(f"Failed to set feature flags: {e}")
            raise

        try:
            self.engine.set_io_fds(
                sys.stdin.fileno() if self.input_fd is None else self.input_fd,
                sys.stdout.fileno() if self.output_fd is None else self.output_fd,
            )
        except EngineError as e:
            logger.error(f"Failed to set I/O file descriptors: {e}")
            raise

    def _fetch_index(self) -> bool:
        """
        Stream the index into the engine.

        Returns:
            False if the session is over (peer closed the channel), True to go on
        """
        index_url = self.endpoints.index_url
        index_sink = IndexSink(self.engine)
        status = self.fetcher.fetch(index_url, index_sink)

        if status != 200:
            logger.info(f"HTTP server failure {status} while requesting {index_url}.")
            reason = AbortReason.NO_MEDIUM if status == 404 else AbortReason.BAD_RESPONSE
            try:
                self.engine.abort(reason, f"HTTP request on {index_url} failed with status {status}")
            except EngineError as e:
                logger.warning(f"Failed to abort remote session: {e}")

            self._drain()
            return False

        if process_remote(self.engine, ProcessUntil.CAN_PUT_INDEX) is PumpResult.CLOSED:
            return False

        try:
            self.engine.put_index_eof()
        except EngineError as e:
            logger.error(f"Failed to put index EOF: {e}")
            raise

        logger.info(f"Index complete, {index_sink.written} bytes.")
        return True

    def _serve_chunks(self) -> bool:
        """
        Answer chunk requests until the peer stops sending them.

        Returns:
            False if the session is over (peer closed the channel), True to drain
        """
        while True:
            if process_remote(self.engine, ProcessUntil.HAVE_REQUEST) is PumpResult.CLOSED:
                return False

            try:
                chunk_id = self.engine.next_request()
            except EngineError as e:
                logger.error(f"Failed to determine next chunk to get: {e}")
                raise

            url = chunk_url(self.selector.next(), chunk_id)

            self.chunk_sink.reset()
            status = self.fetcher.fetch(url, self.chunk_sink)

            if process_remote(self.engine, ProcessUntil.CAN_PUT_CHUNK) is PumpResult.CLOSED:
                return False

            if status == 200:
                try:
                    self.engine.put_chunk(chunk_id, self.chunk_sink.data, compressed=True)
                except EngineError as e:
                    logger.error(f"Failed to write chunk: {e}")
                    raise
            else:
                logger.info(f"HTTP server failure {status} while requesting {url}.")
                try:
                    self.engine.put_missing(chunk_id)
                except EngineError as e:
                    logger.error(f"Failed to write missing message: {e}")
                    raise

            self.chunk_sink.reset()

    def _drain(self) -> None:
        # Closed and finished both end the session cleanly here
        process_remote(self.engine, ProcessUntil.FINISHED)

    def close(self) -> None:
        """Release HTTP client, chunk buffer and engine. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        try:
            self.fetcher.close()
        finally:
            self.chunk_sink.reset()
            self.engine.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def pull(endpoints: EndpointSet, engine: RemoteEngine, *,
         settings: Optional[Settings] = None,
         fetcher: Optional[HttpFetcher] = None) -> None:
    """
    Run a pull session and release everything afterwards.

    Args:
        endpoints: Endpoints of this invocation
        engine: Protocol engine bound to stdin/stdout
        settings: Optional settings
        fetcher: Optional HTTP fetcher (for testing)
    """
    with Puller(endpoints, engine, settings=settings, fetcher=fetcher) as puller:
        puller.run()
