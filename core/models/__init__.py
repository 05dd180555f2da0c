# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# CREATED: 02 MAR 2026
# ============================================================================
"""
Models Module - Central Export Point

Persisted models define SQL metadata via __sql_* ClassVar attributes for
DDL generation (see core.schema).
"""

from core.models.field_type import DatasetFieldType, index_by_id
from core.models.dataset_field import DatasetField, DatasetFieldCompoundValue
from core.models.external_vocabulary_value import ExternalVocabularyValue
from core.models.setting import Setting
from core.models.vocabulary_config import (
    CONTEXT_KEY,
    ID_TOKEN,
    PathStep,
    ParamSpec,
    FilterRule,
    VocabularyFieldConfig,
)

__all__ = [
    # Field types
    "DatasetFieldType",
    "index_by_id",
    # Field values
    "DatasetField",
    "DatasetFieldCompoundValue",
    # Persistence
    "ExternalVocabularyValue",
    "Setting",
    # Configuration
    "CONTEXT_KEY",
    "ID_TOKEN",
    "PathStep",
    "ParamSpec",
    "FilterRule",
    "VocabularyFieldConfig",
]
