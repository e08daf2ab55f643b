"""casync-http: pull casync indexes and chunks over HTTP."""

__version__ = "0.1.0"

__all__ = ["__version__"]
