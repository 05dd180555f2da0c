# ============================================================================
# STRING EXTRACTOR
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Service - Search/display strings from stored terms
# PURPOSE: Flatten a normalized term into its set of strings
# CREATED: 05 MAR 2026
# ============================================================================
"""
String Extractor

Reads a stored, filtered term value and returns the strings it carries.
Filtered values look like:

    {
      "termName": [{"lang": "en", "value": "Biology"}, {"lang": "fr", "value": "Biologie"}],
      "vocabularyUri": "https://vocab.example/123"
    }

String members are taken as-is; array members must hold objects with a
string "value". Other member kinds are ignored. Anything else in an array
means the value was not filtered into this shape, and no strings are
returned at all rather than a partial set.
"""

import json
from typing import Any, Dict, Optional, Set

from core.contracts import JsonKind, json_kind
from core.errors import ExtractionError
from core.logging import get_logger, ComponentType
from infrastructure.base_repository import RepositoryError

logger = get_logger(__name__, ComponentType.SERVICE)


class StringExtractor:
    """
    Collaborators:
        store: anything with get_value(uri) -> Optional[str]
    """

    def __init__(self, store: Any):
        self.store = store

    def load_value(self, term_uri: str) -> Optional[Dict[str, Any]]:
        """
        Stored value for term_uri as a JSON object.

        Returns:
            The parsed object, or None if the term is unresolved, unreadable,
            or not a JSON object.
        """
        try:
            raw = self.store.get_value(term_uri)
        except RepositoryError as e:
            logger.error(f"Could not load external vocab value for uri: {term_uri}: {e}")
            return None

        if raw is None:
            logger.warning(f"No external vocab value for uri: {term_uri}")
            return None

        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Problem parsing external vocab value for uri: {term_uri}: {e}")
            return None

        if json_kind(value) is not JsonKind.OBJECT:
            logger.warning(f"External vocab value for uri {term_uri} is not an object")
            return None
        return value

    def strings_for(self, term_uri: str) -> Set[str]:
        """All strings of the stored term, or an empty set."""
        value = self.load_value(term_uri)
        if value is None:
            return set()

        try:
            strings = extract_strings(value)
        except ExtractionError as e:
            logger.warning(f"Problem interpreting external vocab value for uri: {term_uri}: {e}")
            return set()

        logger.debug(f"Returning {', '.join(sorted(strings))} for {term_uri}")
        return strings


def extract_strings(value: Dict[str, Any]) -> Set[str]:
    """
    Raises:
        ExtractionError: an array member holds something other than
            objects with a string "value"
    """
    strings: Set[str] = set()
    for key, member in value.items():
        kind = json_kind(member)
        if kind is JsonKind.STRING:
            strings.add(member)
        elif kind is JsonKind.ARRAY:
            for position, element in enumerate(member):
                if json_kind(element) is not JsonKind.OBJECT:
                    raise ExtractionError(f"{key}[{position}] is not an object")
                text = element.get("value")
                if json_kind(text) is not JsonKind.STRING:
                    raise ExtractionError(f"{key}[{position}] has no string value")
                strings.add(text)
    return strings


__all__ = ["StringExtractor", "extract_strings"]
