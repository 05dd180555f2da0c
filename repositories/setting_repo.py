# ============================================================================
# SETTING REPOSITORY
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain - Key-value settings
# PURPOSE: Raw configuration text by key
# CREATED: 03 MAR 2026
# ============================================================================
"""Setting Repository - get/set raw setting text by name."""

import logging
from typing import Optional

from psycopg import sql
from psycopg_pool import ConnectionPool

from infrastructure.base_repository import BaseRepository
from .database import TABLE_SETTINGS

logger = logging.getLogger(__name__)


class SettingRepository(BaseRepository):
    """Repository for named settings."""

    def __init__(self, pool: ConnectionPool):
        super().__init__()
        self.pool = pool

    def get_value(self, name: str) -> Optional[str]:
        """Raw setting content, or None if unset."""
        with self._error_context("setting lookup", name):
            with self.pool.connection() as conn:
                cur = conn.execute(
                    sql.SQL("SELECT content FROM {} WHERE name = %s").format(TABLE_SETTINGS),
                    (name,),
                )
                row = cur.fetchone()
        return row[0] if row else None

    def set_value(self, name: str, content: str) -> None:
        """Create or replace a setting."""
        with self._error_context("setting save", name):
            with self.pool.connection() as conn:
                conn.execute(
                    sql.SQL("""
                        INSERT INTO {} (name, content) VALUES (%s, %s)
                        ON CONFLICT (name) DO UPDATE SET content = EXCLUDED.content
                    """).format(TABLE_SETTINGS),
                    (name, content),
                )
        self._log_write("Saved setting", name, {"length": len(content)})

    def delete(self, name: str) -> bool:
        """Remove a setting. Returns True if it existed."""
        with self._error_context("setting delete", name):
            with self.pool.connection() as conn:
                cur = conn.execute(
                    sql.SQL("DELETE FROM {} WHERE name = %s").format(TABLE_SETTINGS),
                    (name,),
                )
                deleted = cur.rowcount > 0
        if deleted:
            self._log_write("Deleted setting", name)
        return deleted
