# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Database access layer
# PURPOSE: Persistence for vocabulary values, field types, and settings
# CREATED: 03 MAR 2026
# ============================================================================
"""
Repositories Module

Provides database access for the vocabulary engine.
Uses psycopg3 with connection pooling.

Usage:
    from repositories import get_pool, ExternalVocabularyValueRepository

    values = ExternalVocabularyValueRepository(get_pool())
    entry = values.get("https://vocab.example/123")
"""

from .database import get_pool, init_pool, close_pool, DatabasePool
from .vocabulary_value_repo import ExternalVocabularyValueRepository
from .field_type_repo import DatasetFieldTypeRepository
from .setting_repo import SettingRepository

__all__ = [
    "get_pool",
    "init_pool",
    "close_pool",
    "DatabasePool",
    "ExternalVocabularyValueRepository",
    "DatasetFieldTypeRepository",
    "SettingRepository",
]
