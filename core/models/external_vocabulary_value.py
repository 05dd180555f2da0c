# ============================================================================
# EXTERNAL VOCABULARY VALUE MODEL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain model - Cached normalized vocabulary term
# PURPOSE: Durable term URI -> normalized JSON cache entry
# CREATED: 02 MAR 2026
# ============================================================================
"""
ExternalVocabularyValue Model

Keyed by the term URI. value is None until the term has been fetched and
filtered, then holds the serialized normalized JSON document. The engine
writes a non-null value at most once per URI and never deletes entries.
"""

import json
from typing import Any, ClassVar, List, Optional

from pydantic import BaseModel, Field, computed_field


class ExternalVocabularyValue(BaseModel):
    """
    Normalized external vocabulary term.
    Maps to: cvoc.external_vocabulary_value
    """

    # SQL DDL METADATA
    __sql_table__: ClassVar[str] = "external_vocabulary_value"
    __sql_schema__: ClassVar[str] = "cvoc"
    __sql_primary_key__: ClassVar[List[str]] = ["id"]
    __sql_serial_columns__: ClassVar[List[str]] = ["id"]
    __sql_unique__: ClassVar[List[str]] = ["uri"]

    id: Optional[int] = Field(default=None, description="Surrogate key (SERIAL)")
    uri: str = Field(..., min_length=1, description="Term URI, globally unique")
    value: Optional[str] = Field(default=None, description="Normalized JSON text")

    @computed_field
    @property
    def is_resolved(self) -> bool:
        """True once a normalized value has been stored."""
        return self.value is not None

    def as_json(self) -> Optional[Any]:
        """
        Parse the stored value.

        Raises:
            ValueError: stored text is not valid JSON.
        """
        if self.value is None:
            return None
        return json.loads(self.value)


__all__ = ["ExternalVocabularyValue"]
