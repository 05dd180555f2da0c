# ============================================================================
# DATASET FIELD TYPE MODEL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain model - Metadata field type descriptor
# PURPOSE: Field-type lookups consumed by the vocabulary config cache
# CREATED: 02 MAR 2026
# ============================================================================
"""
DatasetFieldType Model

Descriptor for one metadata field type. The vocabulary engine only needs
{is_primitive, is_compound, has_children, parent}; the remaining columns
back the plain finders in DatasetFieldTypeRepository.

Parent/child relationships are expressed through parent_id, an integer key
into the same table, never through object references.
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


class DatasetFieldType(BaseModel):
    """
    Metadata field type.
    Maps to: cvoc.dataset_field_type
    """

    # SQL DDL METADATA
    __sql_table__: ClassVar[str] = "dataset_field_type"
    __sql_schema__: ClassVar[str] = "cvoc"
    __sql_primary_key__: ClassVar[List[str]] = ["id"]
    __sql_unique__: ClassVar[List[str]] = ["name"]
    __sql_indexes__: ClassVar[List] = [
        ("idx_dataset_field_type_parent", ["parent_id"], "parent_id IS NOT NULL"),
        ("idx_dataset_field_type_block", ["metadata_block_id"]),
    ]

    # Identity
    id: int = Field(..., description="Stable field type key")
    name: str = Field(..., max_length=255, description="Unique field name")
    display_name: Optional[str] = Field(default=None, max_length=255)
    title: Optional[str] = Field(default=None, max_length=255)

    # Shape
    is_primitive: bool = Field(default=True, description="Holds scalar values")
    is_compound: bool = Field(default=False, description="Holds groups of child fields")
    has_children: bool = Field(default=False)
    parent_id: Optional[int] = Field(default=None, description="Key of the parent field type")

    # Finder flags
    metadata_block_id: Optional[int] = None
    required: bool = Field(default=False)
    facetable: bool = Field(default=False)
    advanced_search_field_type: bool = Field(default=False)
    display_order: int = Field(default=0)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _compound_is_not_primitive(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("is_compound") and "is_primitive" not in data:
            return {**data, "is_primitive": False}
        return data

    @model_validator(mode="after")
    def _validate_shape(self) -> "DatasetFieldType":
        if self.is_primitive and self.is_compound:
            raise ValueError(f"Field type {self.name} cannot be both primitive and compound")
        return self

    @computed_field
    @property
    def is_child(self) -> bool:
        """True if this field type belongs to a compound parent."""
        return self.parent_id is not None

    def is_child_of(self, parent: "DatasetFieldType") -> bool:
        """Check the parent key against another descriptor."""
        return self.parent_id is not None and self.parent_id == parent.id


def index_by_id(field_types: List[DatasetFieldType]) -> Dict[int, DatasetFieldType]:
    """Arena lookup table: id -> descriptor."""
    return {ft.id: ft for ft in field_types}


__all__ = ["DatasetFieldType", "index_by_id"]
