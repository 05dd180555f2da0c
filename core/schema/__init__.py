# ============================================================================
# SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Schema generation from Pydantic models
# PURPOSE: Generate PostgreSQL DDL from Pydantic models (single source of truth)
# CREATED: 03 MAR 2026
# ============================================================================

from core.schema.ddl_utils import IndexBuilder, SchemaUtils
from core.schema.sql_generator import PydanticToSQL

__all__ = [
    "PydanticToSQL",
    "IndexBuilder",
    "SchemaUtils",
]
