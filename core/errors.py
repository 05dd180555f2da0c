# ============================================================================
# VOCABULARY ENGINE ERRORS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Foundation - Exception taxonomy
# PURPOSE: Name every non-fatal failure mode of the vocabulary engine
# CREATED: 02 MAR 2026
# ============================================================================
"""
Vocabulary engine exceptions.

These are raised where a failure is detected and caught at the component
boundary, where they are logged and turned into a non-fatal outcome. None of
them is allowed to abort the save of the owning metadata.

    VocabularyError
    ├── ConfigParseError       malformed settings JSON -> empty configuration
    ├── FieldResolutionError   unknown field / child field -> entry skipped
    ├── NotAUriError           candidate value is not a URI -> no external term
    ├── RetrievalError         non-200, transport failure, timeout -> retry later
    ├── FilterRuleError        one rule failed -> output key omitted
    │   └── PathResolutionError
    └── ExtractionError        stored value has unexpected shape -> empty set
"""

from typing import Optional


class VocabularyError(Exception):
    """Base exception for the external vocabulary engine."""
    pass


class ConfigParseError(VocabularyError):
    """The vocabulary configuration document could not be parsed."""
    pass


class FieldResolutionError(VocabularyError):
    """A field or child field named in the configuration does not exist."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        super().__init__(message)


class NotAUriError(VocabularyError):
    """A candidate value is not an absolute URI."""

    def __init__(self, message: str, value: Optional[str] = None):
        self.value = value
        super().__init__(message)


class RetrievalError(VocabularyError):
    """A term could not be retrieved from the vocabulary service."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class FilterRuleError(VocabularyError):
    """A single retrieval-filtering rule could not be evaluated."""

    def __init__(self, message: str, output_key: Optional[str] = None):
        self.output_key = output_key
        super().__init__(message)


class PathResolutionError(FilterRuleError):
    """A path parameter did not resolve against the response document."""

    def __init__(self, message: str, path: Optional[str] = None, step: Optional[str] = None):
        self.path = path
        self.step = step
        super().__init__(message)


class ExtractionError(VocabularyError):
    """A stored normalized value does not have the expected shape."""
    pass


__all__ = [
    "VocabularyError",
    "ConfigParseError",
    "FieldResolutionError",
    "NotAUriError",
    "RetrievalError",
    "FilterRuleError",
    "PathResolutionError",
    "ExtractionError",
]
