# ============================================================================
# DDL UTILITIES
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Index and schema statements
# PURPOSE: Index and schema builders using psycopg.sql
# CREATED: 03 MAR 2026
# EXPORTS: IndexBuilder, SchemaUtils
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities

Statements are psycopg.sql.Composed objects; identifiers are always quoted
through sql.Identifier. Everything is IF NOT EXISTS so DDL can be replayed
on every deployment.

Usage:
    from core.schema.ddl_utils import IndexBuilder

    stmt = IndexBuilder.unique("cvoc", "external_vocabulary_value", "uri")
    conn.execute(stmt)
"""

from typing import Optional, Sequence, Union

from psycopg import sql

Columns = Union[str, Sequence[str]]


def _columns(columns: Columns) -> list:
    return [columns] if isinstance(columns, str) else list(columns)


class IndexBuilder:
    """CREATE INDEX statements. Default names: idx[_unique]_<table>_<columns>."""

    @staticmethod
    def _create(
        unique: bool,
        schema: str,
        table: str,
        columns: Columns,
        name: Optional[str],
    ) -> sql.Composed:
        cols = _columns(columns)
        prefix = "idx_unique" if unique else "idx"
        template = (
            "CREATE UNIQUE INDEX IF NOT EXISTS {name} ON {table} ({columns})"
            if unique
            else "CREATE INDEX IF NOT EXISTS {name} ON {table} ({columns})"
        )
        return sql.SQL(template).format(
            name=sql.Identifier(name or f"{prefix}_{table}_{'_'.join(cols)}"),
            table=sql.Identifier(schema, table),
            columns=sql.SQL(", ").join(map(sql.Identifier, cols)),
        )

    @staticmethod
    def btree(
        schema: str,
        table: str,
        columns: Columns,
        name: Optional[str] = None,
        partial_where: Optional[str] = None,
    ) -> sql.Composed:
        """B-tree index, optionally partial (partial_where is trusted model metadata)."""
        stmt = IndexBuilder._create(False, schema, table, columns, name)
        if partial_where:
            stmt = sql.SQL("{} WHERE {}").format(stmt, sql.SQL(partial_where))
        return stmt

    @staticmethod
    def unique(
        schema: str,
        table: str,
        columns: Columns,
        name: Optional[str] = None,
    ) -> sql.Composed:
        """Unique index; also the conflict target for upserts on those columns."""
        return IndexBuilder._create(True, schema, table, columns, name)


class SchemaUtils:
    """Schema-level DDL."""

    @staticmethod
    def create_schema(schema: str) -> sql.Composed:
        return sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(schema))


__all__ = ["IndexBuilder", "SchemaUtils"]
