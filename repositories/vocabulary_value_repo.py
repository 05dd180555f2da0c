# ============================================================================
# EXTERNAL VOCABULARY VALUE REPOSITORY
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain - Term URI -> normalized value store
# PURPOSE: Database access for the external_vocabulary_value table
# CREATED: 03 MAR 2026
# ============================================================================
"""
ExternalVocabularyValue Repository

Durable, shared cache of normalized vocabulary terms.

Write-once semantics are enforced in SQL: an upsert only replaces a NULL
value, so a term resolved by another process is never overwritten. Entries
are never deleted.
"""

import logging
from typing import Any, Dict, Optional

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from core.models.external_vocabulary_value import ExternalVocabularyValue
from infrastructure.base_repository import BaseRepository
from .database import TABLE_EXTERNAL_VOCABULARY_VALUES

logger = logging.getLogger(__name__)


class ExternalVocabularyValueRepository(BaseRepository):
    """Repository for ExternalVocabularyValue entities."""

    def __init__(self, pool: ConnectionPool):
        super().__init__()
        self.pool = pool

    def get(self, uri: str) -> Optional[ExternalVocabularyValue]:
        """Get the cache entry for a term URI, or None."""
        with self._error_context("external vocabulary lookup", uri):
            with self.pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        sql.SQL("SELECT id, uri, value FROM {} WHERE uri = %s").format(
                            TABLE_EXTERNAL_VOCABULARY_VALUES
                        ),
                        (uri,),
                    )
                    row = cur.fetchone()
        return self._row_to_model(row) if row else None

    def get_value(self, uri: str) -> Optional[str]:
        """Get the stored normalized JSON text for a term URI, or None."""
        entry = self.get(uri)
        return entry.value if entry else None

    def save_value(self, uri: str, value: str) -> bool:
        """
        Store the normalized value for a term URI.

        Creates the entry if missing. An existing non-null value is left
        untouched.

        Returns:
            True if the value was written, False if the term was already resolved.
        """
        with self._error_context("external vocabulary save", uri):
            with self.pool.connection() as conn:
                cur = conn.execute(
                    sql.SQL("""
                        INSERT INTO {} AS evv (uri, value)
                        VALUES (%s, %s)
                        ON CONFLICT (uri) DO UPDATE
                            SET value = EXCLUDED.value
                            WHERE evv.value IS NULL
                    """).format(TABLE_EXTERNAL_VOCABULARY_VALUES),
                    (uri, value),
                )
                written = cur.rowcount > 0

        if written:
            self._log_write("Stored external vocabulary value", uri)
        else:
            logger.info(f"External vocabulary value already present, not overwritten: {uri}")
        return written

    def _row_to_model(self, row: Dict[str, Any]) -> ExternalVocabularyValue:
        """Convert a database row to an ExternalVocabularyValue instance."""
        return ExternalVocabularyValue(
            id=row.get("id"),
            uri=row["uri"],
            value=row.get("value"),
        )
