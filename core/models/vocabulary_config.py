# ============================================================================
# VOCABULARY FIELD CONFIGURATION MODEL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Domain model - Per-field external vocabulary configuration
# PURPOSE: Typed view of one element of the :CVocConf JSON array
# CREATED: 02 MAR 2026
# ============================================================================
"""
VocabularyFieldConfig Model

One entry per vocabulary-backed metadata field. Parsed from the JSON array
stored under the :CVocConf setting, e.g.:

    {
      "field-name": "keyword",
      "term-uri-field": "keywordTermURL",
      "child-fields": ["keywordValue", "keywordVocabulary"],
      "retrieval-uri": "https://vocab.example/rest/v1/data?uri={0}",
      "prefix": "https://vocab.example/",
      "retrieval-filtering": {
        "@context": {"termName": "https://schema.org/name"},
        "termName": {"pattern": "{0}", "params": ["/graph/uri=@id/prefLabel"]}
      },
      "managed-fields": {"vocabularyName": "keywordVocabulary"}
    }

Configuration is immutable once parsed. Rules are parsed leniently: a rule
with a missing pattern or a non-string param is kept and fails on its own at
evaluation time, so one bad rule never discards the whole field entry.
"""

from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator

from core.contracts import ParamKind

CONTEXT_KEY = "@context"
ID_TOKEN = "@id"


class PathStep(BaseModel):
    """
    One step of a path parameter.

    "graph"        -> member access
    "uri=@id"      -> array predicate on member "uri"
    """
    model_config = ConfigDict(frozen=True)

    key: str
    expected: Optional[str] = None

    @property
    def is_predicate(self) -> bool:
        return self.expected is not None

    @classmethod
    def parse(cls, text: str) -> "PathStep":
        if "=" in text:
            key, _, expected = text.partition("=")
            return cls(key=key, expected=expected)
        return cls(key=text)


class ParamSpec(BaseModel):
    """A single filter rule parameter, classified by source."""
    model_config = ConfigDict(frozen=True)

    raw: str
    kind: ParamKind
    steps: Tuple[PathStep, ...] = ()

    @classmethod
    def parse(cls, raw: str) -> "ParamSpec":
        if raw.startswith("/"):
            steps = tuple(PathStep.parse(part) for part in raw[1:].split("/"))
            return cls(raw=raw, kind=ParamKind.PATH, steps=steps)
        if raw == ID_TOKEN:
            return cls(raw=raw, kind=ParamKind.ID_REFERENCE)
        return cls(raw=raw, kind=ParamKind.LITERAL)


class FilterRule(BaseModel):
    """
    Declarative instruction producing one normalized output field.

    pattern: "@id", "{0}", "{0} ({1})", or a hardcoded literal.
    params:  raw parameter sources, parsed on use.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    pattern: Optional[str] = None
    params: List[Any] = Field(default_factory=list)

    @field_validator("params", mode="before")
    @classmethod
    def _none_params_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class VocabularyFieldConfig(BaseModel):
    """
    External vocabulary configuration for one metadata field.

    field_type_id and term_uri_field_type_id are resolved by the config
    cache against the field-type store; they are not part of the wire format.
    """

    __wire_keys__: ClassVar[Dict[str, str]] = {
        "field-name": "field_name",
        "term-uri-field": "term_uri_field",
        "child-fields": "child_fields",
        "retrieval-uri": "retrieval_uri",
        "prefix": "prefix",
        "retrieval-filtering": "retrieval_filtering",
        "managed-fields": "managed_fields",
    }

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Identity
    field_name: str = Field(..., alias="field-name", min_length=1)
    field_type_id: int

    # Where the term URI lives
    term_uri_field: Optional[str] = Field(default=None, alias="term-uri-field")
    term_uri_field_type_id: Optional[int] = None
    child_fields: List[str] = Field(default_factory=list, alias="child-fields")

    # Retrieval
    retrieval_uri: str = Field(..., alias="retrieval-uri", min_length=1)
    prefix: Optional[str] = None

    # Normalization
    retrieval_filtering: Dict[str, Any] = Field(
        default_factory=dict, alias="retrieval-filtering"
    )
    managed_fields: Dict[str, Any] = Field(default_factory=dict, alias="managed-fields")

    # Raw wire entry, kept for diagnostics
    source: Dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)

    @field_validator("retrieval_filtering", mode="before")
    @classmethod
    def _parse_rules(cls, v: Any) -> Any:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("retrieval-filtering must be an object")
        parsed: Dict[str, Any] = {}
        for key, rule in v.items():
            if key == CONTEXT_KEY:
                parsed[key] = rule
            elif isinstance(rule, FilterRule):
                parsed[key] = rule
            elif isinstance(rule, dict):
                try:
                    parsed[key] = FilterRule.model_validate(rule)
                except ValidationError:
                    parsed[key] = FilterRule()
            else:
                # Kept so the rule fails, and is omitted, at evaluation time
                parsed[key] = FilterRule()
        return parsed

    @field_validator("managed_fields", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @computed_field
    @property
    def has_filtering(self) -> bool:
        """True if at least one evaluable output key is configured."""
        return any(key != CONTEXT_KEY for key in self.retrieval_filtering)

    def filter_rules(self) -> List[Tuple[str, FilterRule]]:
        """Output keys and rules in configuration order, @context excluded."""
        return [
            (key, rule)
            for key, rule in self.retrieval_filtering.items()
            if key != CONTEXT_KEY
        ]

    @classmethod
    def from_wire(
        cls,
        entry: Dict[str, Any],
        field_type_id: int,
        term_uri_field_type_id: Optional[int] = None,
    ) -> "VocabularyFieldConfig":
        """
        Build from one element of the :CVocConf array.

        Raises:
            pydantic.ValidationError: required keys missing or malformed.
        """
        return cls.model_validate({
            **{k: v for k, v in entry.items() if k in cls.__wire_keys__},
            "field_type_id": field_type_id,
            "term_uri_field_type_id": term_uri_field_type_id,
            "source": entry,
        })


__all__ = [
    "CONTEXT_KEY",
    "ID_TOKEN",
    "PathStep",
    "ParamSpec",
    "FilterRule",
    "VocabularyFieldConfig",
]
