# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Infrastructure - Repository base and concurrency control
# PURPOSE: Shared plumbing for repositories and services
# CREATED: 03 MAR 2026
# ============================================================================
"""
Infrastructure module for the vocabulary engine.

Provides:
- BaseRepository / RepositoryError: error handling for repositories
- SingleFlight: at-most-one in-flight call per key
"""

from infrastructure.base_repository import (
    BaseRepository,
    RepositoryError,
)
from infrastructure.single_flight import SingleFlight

__all__ = [
    'BaseRepository',
    'RepositoryError',
    'SingleFlight',
]
