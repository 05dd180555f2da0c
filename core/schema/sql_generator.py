# ============================================================================
# PYDANTIC TO SQL GENERATOR
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - DDL generation from Pydantic models
# PURPOSE: Generate PostgreSQL CREATE statements for the engine's tables
# CREATED: 03 MAR 2026
# EXPORTS: PydanticToSQL
# DEPENDENCIES: pydantic, psycopg
# ============================================================================
"""
Pydantic to PostgreSQL Schema Generator.

Persisted models are the source of truth for the tables. Each carries its
table metadata as ClassVars:

    __sql_table__           table name
    __sql_primary_key__     primary key column(s)
    __sql_serial_columns__  SERIAL columns
    __sql_unique__          columns with their own unique index
    __sql_indexes__         (name, columns) or (name, columns, partial_where)

The schema comes from the generator, not the model, so a deployment can
place the tables anywhere (CVOC_DB_SCHEMA). Computed and excluded fields
are not columns.

Usage:
    generator = PydanticToSQL(schema_name="cvoc")
    with pool.connection() as conn:
        generator.execute(conn)
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union, get_args, get_origin

from annotated_types import MaxLen
from psycopg import sql
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from core.schema.ddl_utils import IndexBuilder, SchemaUtils

logger = logging.getLogger(__name__)


def _unwrap_optional(annotation: Any) -> Any:
    """Optional[X] -> X; anything else unchanged."""
    if get_origin(annotation) is Union:
        args = [a for a in get_args(annotation) if a is not type(None)]
        return args[0] if len(args) == 1 else annotation
    return annotation


def _is_nullable(annotation: Any) -> bool:
    return get_origin(annotation) is Union and type(None) in get_args(annotation)


class PydanticToSQL:
    """Convert Pydantic models with __sql_* metadata to PostgreSQL DDL."""

    TYPE_MAP = {
        int: "INTEGER",
        float: "DOUBLE PRECISION",
        bool: "BOOLEAN",
        datetime: "TIMESTAMPTZ",
    }

    def __init__(self, schema_name: str = "cvoc"):
        self.schema_name = schema_name

    @staticmethod
    def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
        """Collect the __sql_* ClassVars of a model."""
        primary_key = getattr(model, "__sql_primary_key__", [])
        return {
            "table": getattr(model, "__sql_table__", None),
            "primary_key": [primary_key] if isinstance(primary_key, str) else list(primary_key),
            "serial_columns": list(getattr(model, "__sql_serial_columns__", [])),
            "unique": list(getattr(model, "__sql_unique__", [])),
            "indexes": list(getattr(model, "__sql_indexes__", [])),
        }

    def python_type_to_sql(self, field_type: Any, field_info: FieldInfo) -> str:
        """
        Column type for a field annotation.

        str -> VARCHAR(n) when max_length is set, else TEXT
        dict/list (and anything unmapped) -> JSONB
        """
        base = _unwrap_optional(field_type)
        if get_origin(base) in (dict, list):
            return "JSONB"
        if base is str:
            max_len: Optional[int] = next(
                (m.max_length for m in field_info.metadata if isinstance(m, MaxLen)), None
            )
            return f"VARCHAR({max_len})" if max_len else "TEXT"
        return self.TYPE_MAP.get(base, "JSONB")

    def _column(self, name: str, info: FieldInfo, meta: Dict[str, Any]) -> sql.Composed:
        serial = name in meta["serial_columns"]
        sql_type = "SERIAL" if serial else self.python_type_to_sql(info.annotation, info)
        parts: List[sql.Composable] = [sql.Identifier(name), sql.SQL(f" {sql_type}")]

        if not serial and name not in meta["primary_key"] and not _is_nullable(info.annotation):
            parts.append(sql.SQL(" NOT NULL"))

        default = info.default
        if default is not PydanticUndefined and default is not None and not serial:
            if isinstance(default, bool):
                parts.append(sql.SQL(" DEFAULT {}").format(sql.SQL("true" if default else "false")))
            elif isinstance(default, (int, float, str)):
                parts.append(sql.SQL(" DEFAULT {}").format(sql.Literal(default)))

        return sql.Composed(parts)

    def generate_table(self, model: Type[BaseModel]) -> sql.Composed:
        """CREATE TABLE IF NOT EXISTS for one model."""
        meta = self.get_model_metadata(model)
        if not meta["table"]:
            raise ValueError(f"Model {model.__name__} missing __sql_table__ attribute")

        columns: List[sql.Composable] = [
            self._column(name, info, meta)
            for name, info in model.model_fields.items()
            if not info.exclude
        ]
        if meta["primary_key"]:
            columns.append(sql.SQL("PRIMARY KEY ({})").format(
                sql.SQL(", ").join(map(sql.Identifier, meta["primary_key"]))
            ))

        return sql.SQL("CREATE TABLE IF NOT EXISTS {} ({})").format(
            sql.Identifier(self.schema_name, meta["table"]),
            sql.SQL(", ").join(columns),
        )

    def generate_indexes(self, model: Type[BaseModel]) -> List[sql.Composed]:
        """Unique indexes first, then the declared secondary indexes."""
        meta = self.get_model_metadata(model)
        table = meta["table"]

        statements = [IndexBuilder.unique(self.schema_name, table, col) for col in meta["unique"]]
        for index in meta["indexes"]:
            name, columns, *rest = index
            statements.append(IndexBuilder.btree(
                self.schema_name, table, columns,
                name=name,
                partial_where=rest[0] if rest else None,
            ))
        return statements

    def generate_all(self) -> List[sql.Composed]:
        """Schema, tables, then indexes for every persisted model."""
        from core.models import DatasetFieldType, ExternalVocabularyValue, Setting

        models = [DatasetFieldType, ExternalVocabularyValue, Setting]

        statements = [SchemaUtils.create_schema(self.schema_name)]
        statements.extend(self.generate_table(m) for m in models)
        for m in models:
            statements.extend(self.generate_indexes(m))

        logger.info(f"Generated {len(statements)} DDL statements for schema {self.schema_name}")
        return statements

    def execute(self, conn, dry_run: bool = False) -> int:
        """
        Run (or with dry_run, only log) every DDL statement.

        Returns:
            Number of statements
        """
        statements = self.generate_all()

        if dry_run:
            for stmt in statements:
                logger.info(f"[DRY RUN] {stmt.as_string(conn)}")
            return len(statements)

        with conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)

        logger.info(f"Executed {len(statements)} DDL statements")
        return len(statements)


__all__ = ['PydanticToSQL']
