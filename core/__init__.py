# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors, models, and schema utilities
# CREATED: 02 MAR 2026
# ============================================================================

from core.contracts import JsonKind, ParamKind, RetrievalOutcome, json_kind
from core.errors import (
    VocabularyError,
    ConfigParseError,
    FieldResolutionError,
    NotAUriError,
    RetrievalError,
    FilterRuleError,
    PathResolutionError,
    ExtractionError,
)
from core.models import (
    DatasetFieldType,
    DatasetField,
    DatasetFieldCompoundValue,
    ExternalVocabularyValue,
    VocabularyFieldConfig,
    FilterRule,
)
from core.schema import PydanticToSQL

__all__ = [
    # Enums
    "JsonKind",
    "ParamKind",
    "RetrievalOutcome",
    "json_kind",
    # Errors
    "VocabularyError",
    "ConfigParseError",
    "FieldResolutionError",
    "NotAUriError",
    "RetrievalError",
    "FilterRuleError",
    "PathResolutionError",
    "ExtractionError",
    # Models
    "DatasetFieldType",
    "DatasetField",
    "DatasetFieldCompoundValue",
    "ExternalVocabularyValue",
    "VocabularyFieldConfig",
    "FilterRule",
    # Schema
    "PydanticToSQL",
]
