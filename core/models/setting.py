# ============================================================================
# SETTING MODEL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain model - Key-value installation setting
# PURPOSE: Raw configuration text source for the vocabulary config cache
# CREATED: 02 MAR 2026
# ============================================================================
"""Setting Model - one named configuration value."""

from typing import ClassVar, List, Optional

from pydantic import BaseModel, Field


class Setting(BaseModel):
    """
    Named setting.
    Maps to: cvoc.setting
    """

    __sql_table__: ClassVar[str] = "setting"
    __sql_schema__: ClassVar[str] = "cvoc"
    __sql_primary_key__: ClassVar[List[str]] = ["name"]

    name: str = Field(..., max_length=255)
    content: Optional[str] = None


__all__ = ["Setting"]
