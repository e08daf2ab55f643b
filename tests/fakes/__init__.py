# Fake implementations for testing

from .fake_engine import FakeRemoteEngine

__all__ = ["FakeRemoteEngine"]
