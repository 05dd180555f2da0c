# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Foundation - Core enums and JSON kind tagging
# PURPOSE: Define outcome enums and the tagged JSON kind used by the filter
# CREATED: 02 MAR 2026
# EXPORTS: JsonKind, json_kind, ParamKind, RetrievalOutcome
# ============================================================================
"""
Base contracts for the external vocabulary engine.

JSON documents returned by vocabulary services are untyped. Rather than
sprinkling isinstance checks through the traversal code, every value is
tagged with a JsonKind first and the walker dispatches on the tag.
"""

from enum import Enum
from typing import Any


# ============================================================================
# JSON KIND
# ============================================================================

class JsonKind(str, Enum):
    """Tag for a decoded JSON value."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    OTHER = "other"      # number, boolean, null


def json_kind(value: Any) -> JsonKind:
    """Classify a decoded JSON value."""
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, str):
        return JsonKind.STRING
    return JsonKind.OTHER


# ============================================================================
# FILTER PARAMETERS
# ============================================================================

class ParamKind(str, Enum):
    """
    Source of a filter rule parameter.

    PATH          "/a/b=c/d"  walk the response document
    ID_REFERENCE  "@id"       the term URI being resolved
    LITERAL       anything else, used verbatim
    """
    PATH = "path"
    ID_REFERENCE = "id_reference"
    LITERAL = "literal"


# ============================================================================
# RETRIEVAL OUTCOMES
# ============================================================================

class RetrievalOutcome(str, Enum):
    """
    Result of a single TermRetriever.resolve() call.

    Only RESOLVED mutates the store. Failure outcomes leave the term
    unresolved so a later call retries it.
    """
    RESOLVED = "resolved"                  # Fetched, filtered and stored
    ALREADY_RESOLVED = "already_resolved"  # Store already held a value
    SKIPPED_BLANK = "skipped_blank"        # Empty or whitespace value
    NOT_A_URI = "not_a_uri"                # Value is not an absolute URI
    HTTP_ERROR = "http_error"              # Non-200 response
    TRANSPORT_ERROR = "transport_error"    # Connection failure or timeout
    PARSE_ERROR = "parse_error"            # Body is not a JSON object

    def is_failure(self) -> bool:
        """Check if this outcome is a retrieval failure eligible for retry."""
        return self in (
            RetrievalOutcome.HTTP_ERROR,
            RetrievalOutcome.TRANSPORT_ERROR,
            RetrievalOutcome.PARSE_ERROR,
        )


__all__ = [
    "JsonKind",
    "json_kind",
    "ParamKind",
    "RetrievalOutcome",
]
