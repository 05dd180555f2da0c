# ============================================================================
# DATASET FIELD VALUE MODEL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain model - In-memory metadata field values
# PURPOSE: Input shape for vocabulary registration
# CREATED: 02 MAR 2026
# ============================================================================
"""
DatasetField Model

A metadata field as submitted on save/import:

    primitive field   DatasetField(field_type=subject, values=["https://..."])
    compound field    DatasetField(field_type=keyword, compound_values=[
                          DatasetFieldCompoundValue(children=[
                              DatasetField(field_type=keywordTermURL, values=["https://..."]),
                              DatasetField(field_type=keywordValue, values=["Biology"]),
                          ]),
                      ])

Storage of field values is owned by the metadata tier; these models only
carry values into the registrar.
"""

from typing import List

from pydantic import BaseModel, Field

from core.models.field_type import DatasetFieldType


class DatasetField(BaseModel):
    """A field instance with its type descriptor and values."""

    field_type: DatasetFieldType
    values: List[str] = Field(default_factory=list, description="Scalar values (primitive)")
    compound_values: List["DatasetFieldCompoundValue"] = Field(
        default_factory=list,
        description="Child-value groups (compound)",
    )

    @property
    def value(self) -> str:
        """First scalar value, or empty string."""
        return self.values[0] if self.values else ""


class DatasetFieldCompoundValue(BaseModel):
    """One group of child field instances within a compound field."""

    children: List[DatasetField] = Field(default_factory=list)

    def children_of_type(self, field_type_id: int) -> List[DatasetField]:
        """Child instances whose type key matches."""
        return [c for c in self.children if c.field_type.id == field_type_id]


DatasetField.model_rebuild()


__all__ = ["DatasetField", "DatasetFieldCompoundValue"]
