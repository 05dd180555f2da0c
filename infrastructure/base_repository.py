# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: One exception type and one log format for all repositories
# CREATED: 03 MAR 2026
# ============================================================================
"""
Base Repository Patterns

Every repository failure surfaces as RepositoryError, whatever the driver
raised underneath (the original exception is chained as __cause__).
Callers in the service layer catch exactly that type: the config cache
degrades to an empty mapping, the registrar skips the term.
"""

import logging
from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Optional

_MAX_ID_LENGTH = 96


class RepositoryError(Exception):
    """A storage operation failed."""

    def __init__(self, message: str, operation: str = None, entity_id: str = None):
        self.operation = operation
        self.entity_id = entity_id
        super().__init__(message)


def _shorten(entity_id: Optional[str]) -> str:
    if not entity_id:
        return ""
    text = str(entity_id)
    return text if len(text) <= _MAX_ID_LENGTH else text[:_MAX_ID_LENGTH] + "..."


class BaseRepository(ABC):
    """Shared error wrapping and logging for PostgreSQL repositories."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Re-raise anything but RepositoryError as RepositoryError.

        Example:
            with self._error_context("external vocabulary lookup", uri):
                row = cur.fetchone()
        """
        try:
            yield
        except RepositoryError:
            raise
        except Exception as e:
            target = f" for {_shorten(entity_id)}" if entity_id else ""
            message = f"{operation} failed{target}: {type(e).__name__}: {e}"
            self.logger.error(message)
            raise RepositoryError(message, operation=operation, entity_id=entity_id) from e

    def _log_write(
        self,
        operation: str,
        entity_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a completed write as "operation: entity_id | details"."""
        message = f"{operation}: {_shorten(entity_id)}"
        if details:
            message += " | " + ", ".join(f"{k}={v}" for k, v in details.items())
        self.logger.info(message)


__all__ = [
    "BaseRepository",
    "RepositoryError",
]
