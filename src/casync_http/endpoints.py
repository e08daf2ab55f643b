"""
Endpoints passed to the helper.

casync invokes the helper with four positional endpoints (base, archive,
index, writable store) followed by any number of read-only store URLs. An
empty string or "-" marks a positional endpoint as not configured.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from .errors import ConfigurationError, UnsupportedOperation

__all__ = ["EndpointSet", "empty_or_dash_to_none"]


def empty_or_dash_to_none(value: Optional[str]) -> Optional[str]:
    """Map the "not configured" markers ("" and "-") to None."""
    if value is None or value in ("", "-"):
        return None
    return value


class EndpointSet(BaseModel):
    """Endpoints of one helper invocation."""
    base_url: Optional[str] = Field(default=None, description="Base directory URL (unsupported)")
    archive_url: Optional[str] = Field(default=None, description="Archive URL (unsupported)")
    index_url: Optional[str] = Field(default=None, description="Index URL to fetch")
    wstore_url: Optional[str] = Field(default=None, description="Writable (primary) store URL")
    store_urls: List[str] = Field(default_factory=list, description="Additional read-only store URLs")

    @field_validator("base_url", "archive_url", "index_url", "wstore_url", mode="before")
    @classmethod
    def normalize_marker(cls, v):
        """Treat "" and "-" as not configured."""
        return empty_or_dash_to_none(v)

    @classmethod
    def from_argv(cls, base: str, archive: str, index: str, wstore: str,
                  stores: Sequence[str] = ()) -> EndpointSet:
        """Build from the positional command line arguments."""
        return cls(
            base_url=base,
            archive_url=archive,
            index_url=index,
            wstore_url=wstore,
            store_urls=list(stores),
        )

    @property
    def n_stores(self) -> int:
        return (1 if self.wstore_url else 0) + len(self.store_urls)

    @property
    def has_stores(self) -> bool:
        return self.n_stores > 0

    def check(self) -> None:
        """
        Reject combinations this helper cannot serve.

        Raises:
            UnsupportedOperation: If a base or archive URL is configured
            ConfigurationError: If neither an index nor a store is configured
        """
        if self.base_url or self.archive_url:
            raise UnsupportedOperation("Pushing/pulling to base or archive via HTTP not yet supported.")

        if not self.index_url and not self.has_stores:
            raise ConfigurationError("Nothing to do.")
