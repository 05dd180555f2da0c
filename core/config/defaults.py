# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for term retrieval and vocabulary settings
# CREATED: 02 MAR 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for external vocabulary resolution.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

import httpx

from __version__ import __version__


@dataclass(frozen=True)
class RetrievalDefaults:
    """
    Defaults for HTTP retrieval of vocabulary terms.

    A timed-out request is a retrieval failure, never a fatal error.
    """
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    write_timeout: float = 10.0
    pool_timeout: float = 10.0

    accept_header: str = "application/json+ld, application/json"
    user_agent: str = f"cvoc-engine/{__version__}"
    follow_redirects: bool = True

    def timeout(self) -> httpx.Timeout:
        """Build the httpx timeout for a retrieval request."""
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
            pool=self.pool_timeout,
        )

    @classmethod
    def from_env(cls) -> "RetrievalDefaults":
        """Create from environment variables."""
        return cls(
            connect_timeout=float(os.getenv("CVOC_CONNECT_TIMEOUT", 10.0)),
            read_timeout=float(os.getenv("CVOC_READ_TIMEOUT", 30.0)),
            user_agent=os.getenv("CVOC_USER_AGENT", f"cvoc-engine/{__version__}"),
            follow_redirects=os.getenv("CVOC_FOLLOW_REDIRECTS", "true").lower() == "true",
        )


@dataclass(frozen=True)
class VocabularyDefaults:
    """
    Defaults for the vocabulary configuration and storage.
    """
    # Settings key holding the JSON configuration array
    settings_key: str = ":CVocConf"

    # PostgreSQL schema for engine tables
    db_schema: str = "cvoc"

    # Reserved key in retrieval-filtering that is never evaluated
    context_key: str = "@context"

    @classmethod
    def from_env(cls) -> "VocabularyDefaults":
        """Create from environment variables."""
        return cls(
            settings_key=os.getenv("CVOC_SETTINGS_KEY", ":CVocConf"),
            db_schema=os.getenv("CVOC_DB_SCHEMA", "cvoc"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    retrieval: RetrievalDefaults = field(default_factory=RetrievalDefaults)
    vocabulary: VocabularyDefaults = field(default_factory=VocabularyDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            retrieval=RetrievalDefaults.from_env(),
            vocabulary=VocabularyDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "RetrievalDefaults",
    "VocabularyDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
