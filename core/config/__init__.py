# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 02 MAR 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the vocabulary engine.
"""

from core.config.defaults import (
    RetrievalDefaults,
    VocabularyDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "RetrievalDefaults",
    "VocabularyDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
