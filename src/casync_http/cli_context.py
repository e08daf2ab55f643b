"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like settings and the
protocol engine, avoiding global state and enabling proper dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .engine import RemoteEngine, load_engine_factory
from .errors import ConfigurationError
from .settings import Settings, create_settings_from_env


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Manages application-level dependencies (settings, engine) that are
    initialized once and shared across a CLI command execution.
    """
    settings: Settings
    _engine: Optional[RemoteEngine] = None

    @classmethod
    def from_env(cls) -> CLIContext:
        """
        Create CLI context from environment variables.

        Returns:
            CLIContext with settings loaded from environment
        """
        settings = create_settings_from_env()
        return cls(settings=settings)

    @property
    def engine(self) -> RemoteEngine:
        """
        Get or create the protocol engine (lazy initialization).

        Raises:
            ConfigurationError: If no engine factory is configured or it
                cannot be loaded
        """
        if self._engine is None:
            if not self.settings.engine_factory:
                raise ConfigurationError(
                    "No protocol engine configured. Set CASYNC_HTTP_ENGINE to 'module:attribute'."
                )
            factory = load_engine_factory(self.settings.engine_factory)
            self._engine = factory()
        return self._engine
