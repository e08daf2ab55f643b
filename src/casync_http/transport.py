"""
HTTP fetcher for casync-http.

One blocking GET at a time, response body streamed into a byte sink. Only
connection setup is retried: once body bytes have reached a sink they may
already be inside the protocol engine, so a broken transfer is fatal.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .errors import TransferAborted, TransportError
from .settings import Settings

logger = logging.getLogger(__name__)

__all__ = ["HttpFetcher", "Sink"]

Sink = Callable[[bytes], int]


class HttpFetcher:
    """
    Thin GET-only wrapper around httpx.

    Redirects are followed. No timeout applies unless one is configured.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        """
        Initialize fetcher.

        Args:
            settings: Timeout, retry and user agent configuration
            client: Optional httpx.Client for dependency injection (testing).
                If not provided, one is created from settings.
        """
        self.settings = settings
        self._retries = settings.http_retry
        self._wait = wait_exponential(multiplier=1, min=1, max=10)

        if client is None:
            client = httpx.Client(
                timeout=httpx.Timeout(settings.http_timeout_s),
                follow_redirects=True,
                headers={"User-Agent": settings.user_agent},
            )
        self.client = client

    def fetch(self, url: str, sink: Sink) -> int:
        """
        GET `url` and stream a successful body into `sink`.

        Bodies of non-200 responses are discarded; the caller decides what
        the status means.

        Args:
            url: URL to fetch
            sink: Called with each body slice; may raise TransferAborted

        Returns:
            HTTP status code of the final response

        Raises:
            TransportError: If the request fails
            TransferAborted: If the sink refused the body
        """
        logger.info(f"Acquiring {url}...")

        try:
            response = self._open(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to acquire {url}")
            raise TransportError(f"Failed to acquire {url}: {e}", url=url) from e

        try:
            if response.status_code == 200:
                for data in response.iter_bytes():
                    sink(data)
            return response.status_code
        except TransferAborted:
            logger.error(f"Failed to acquire {url}")
            raise
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Failed to acquire {url}")
            raise TransportError(f"Failed to acquire {url}: {e}", url=url) from e
        finally:
            response.close()

    def _open(self, url: str) -> httpx.Response:
        """Send the request, retrying connection setup, and return the response with its body unread."""
        send = retry(
            stop=stop_after_attempt(self._retries + 1),
            wait=self._wait,
            retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
            reraise=True,
        )(self._send)
        return send(url)

    def _send(self, url: str) -> httpx.Response:
        request = self.client.build_request("GET", url)
        return self.client.send(request, stream=True)

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
