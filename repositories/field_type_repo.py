# ============================================================================
# DATASET FIELD TYPE REPOSITORY
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain - Field type finders
# PURPOSE: Database access for the dataset_field_type table
# CREATED: 03 MAR 2026
# ============================================================================
"""
DatasetFieldType Repository

Plain finders over metadata field types. The vocabulary config cache only
uses find_by_name(); the list finders serve search and form building.
"""

import logging
from typing import Any, Dict, List, Optional

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from core.models.field_type import DatasetFieldType
from infrastructure.base_repository import BaseRepository
from .database import TABLE_DATASET_FIELD_TYPES

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id", "name", "display_name", "title",
    "is_primitive", "is_compound", "has_children", "parent_id",
    "metadata_block_id", "required", "facetable",
    "advanced_search_field_type", "display_order",
)


class DatasetFieldTypeRepository(BaseRepository):
    """Repository for DatasetFieldType entities."""

    def __init__(self, pool: ConnectionPool):
        super().__init__()
        self.pool = pool

    def _fetch(self, operation: str, where: sql.Composable, params: tuple, order_by: str = "id") -> List[DatasetFieldType]:
        query = sql.SQL("SELECT {cols} FROM {table} {where} ORDER BY {order}").format(
            cols=sql.SQL(", ").join(sql.Identifier(c) for c in _COLUMNS),
            table=TABLE_DATASET_FIELD_TYPES,
            where=where,
            order=sql.Identifier(order_by),
        )
        with self._error_context(operation):
            with self.pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
        return [self._row_to_model(row) for row in rows]

    def get(self, field_type_id: int) -> Optional[DatasetFieldType]:
        """Get a field type by id."""
        rows = self._fetch("field type lookup", sql.SQL("WHERE id = %s"), (field_type_id,))
        return rows[0] if rows else None

    def find_by_name(self, name: str) -> Optional[DatasetFieldType]:
        """Get a field type by its unique name, or None."""
        rows = self._fetch("field type lookup by name", sql.SQL("WHERE name = %s"), (name,))
        return rows[0] if rows else None

    def list_children(self, parent_id: int) -> List[DatasetFieldType]:
        """Child field types of a compound field, in display order."""
        return self._fetch(
            "child field type listing",
            sql.SQL("WHERE parent_id = %s"),
            (parent_id,),
            order_by="display_order",
        )

    def list_all_ordered_by_id(self) -> List[DatasetFieldType]:
        return self._fetch("field type listing", sql.SQL(""), ())

    def list_all_ordered_by_name(self) -> List[DatasetFieldType]:
        return self._fetch("field type listing", sql.SQL(""), (), order_by="name")

    def list_required(self) -> List[DatasetFieldType]:
        return self._fetch("required field type listing", sql.SQL("WHERE required"), ())

    def list_advanced_search(self) -> List[DatasetFieldType]:
        """Advanced-search field types with a non-empty title."""
        return self._fetch(
            "advanced search field type listing",
            sql.SQL("WHERE advanced_search_field_type AND title <> ''"),
            (),
        )

    def list_facetable(self, metadata_block_id: Optional[int] = None) -> List[DatasetFieldType]:
        """Facetable field types, optionally restricted to one metadata block."""
        if metadata_block_id is None:
            return self._fetch("facetable field type listing", sql.SQL("WHERE facetable"), ())
        return self._fetch(
            "facetable field type listing",
            sql.SQL("WHERE facetable AND metadata_block_id = %s"),
            (metadata_block_id,),
        )

    def save(self, field_type: DatasetFieldType) -> DatasetFieldType:
        """Insert or update a field type (merge semantics)."""
        data = field_type.model_dump(include=set(_COLUMNS))
        updates = [c for c in _COLUMNS if c != "id"]
        query = sql.SQL("""
            INSERT INTO {table} ({cols}) VALUES ({vals})
            ON CONFLICT (id) DO UPDATE SET {updates}
        """).format(
            table=TABLE_DATASET_FIELD_TYPES,
            cols=sql.SQL(", ").join(sql.Identifier(c) for c in _COLUMNS),
            vals=sql.SQL(", ").join(sql.Placeholder(c) for c in _COLUMNS),
            updates=sql.SQL(", ").join(
                sql.SQL("{} = EXCLUDED.{}").format(sql.Identifier(c), sql.Identifier(c))
                for c in updates
            ),
        )
        with self._error_context("field type save", field_type.name):
            with self.pool.connection() as conn:
                conn.execute(query, data)
        self._log_write("Saved field type", field_type.name, {"id": field_type.id})
        return field_type

    def _row_to_model(self, row: Dict[str, Any]) -> DatasetFieldType:
        """Convert a database row to a DatasetFieldType instance."""
        return DatasetFieldType(
            id=row["id"],
            name=row["name"],
            display_name=row.get("display_name"),
            title=row.get("title"),
            is_primitive=row.get("is_primitive", not row.get("is_compound", False)),
            is_compound=row.get("is_compound", False),
            has_children=row.get("has_children", False),
            parent_id=row.get("parent_id"),
            metadata_block_id=row.get("metadata_block_id"),
            required=row.get("required", False),
            facetable=row.get("facetable", False),
            advanced_search_field_type=row.get("advanced_search_field_type", False),
            display_order=row.get("display_order", 0),
        )
