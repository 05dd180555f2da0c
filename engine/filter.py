# ============================================================================
# RESPONSE FILTER
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Retrieval-filtering interpreter
# PURPOSE: Normalize vocabulary service responses with declarative rules
# CREATED: 04 MAR 2026
# ============================================================================
"""
Response Filter

Interprets a field's retrieval-filtering rules against the raw JSON returned
by a vocabulary service, producing one normalized object:

    "retrieval-filtering": {
        "@context":   {...},                                  # never evaluated
        "termName":   {"pattern": "{0}", "params": ["/prefLabel"]},
        "vocabularyUri": {"pattern": "@id"},
        "display":    {"pattern": "{0} ({1})", "params": ["/label", "@id"]},
        "source":     {"pattern": "Library of Congress"}
    }

Pattern resolution:
    "@id"          -> the term URI
    "{0}"          -> parameter 0 verbatim (arrays stay arrays)
    "...{n}..."    -> indexed placeholder substitution, result is a string
    anything else  -> emitted as a literal

A rule that fails is omitted; if every rule fails (or none is configured)
the raw document is returned unchanged.
"""

import json
import re
from typing import Any, Dict, List, Optional

from core.contracts import JsonKind, ParamKind, json_kind
from core.errors import FilterRuleError
from core.logging import get_logger, ComponentType
from core.models.vocabulary_config import ID_TOKEN, FilterRule, ParamSpec, VocabularyFieldConfig
from engine.paths import ParamValue, resolve_path

logger = get_logger(__name__, ComponentType.FILTER)

_PLACEHOLDER = re.compile(r"\{(\d+)\}")


class ResponseFilter:
    """
    Stateless retrieval-filtering interpreter.

    Thread-safe, can be reused across resolutions.
    """

    def filter(
        self,
        config: VocabularyFieldConfig,
        raw: Any,
        term_uri: str,
    ) -> Any:
        """
        Apply every rule of config to raw.

        Returns:
            The filtered object, or raw itself if no rule produced a value.
        """
        result: Dict[str, Any] = {}

        for output_key, rule in config.filter_rules():
            try:
                result[output_key] = self.evaluate_rule(rule, raw, term_uri)
            except FilterRuleError as e:
                logger.info(
                    f"External vocabulary {term_uri}: no value for {output_key}: {e}"
                )

        if not result:
            logger.info(f"No filtered values for {term_uri}, keeping raw response")
            return raw

        return result

    def evaluate_rule(self, rule: FilterRule, raw: Any, term_uri: str) -> Any:
        """
        Evaluate one rule.

        Raises:
            FilterRuleError: the rule cannot produce a value.
        """
        if rule.pattern is None:
            raise FilterRuleError("Rule has no pattern")

        values = self.resolve_params(rule.params, raw, term_uri)
        return self.apply_pattern(rule.pattern, values, term_uri)

    def resolve_params(self, params: List[Any], raw: Any, term_uri: str) -> List[ParamValue]:
        """Resolve every parameter source in order."""
        values: List[ParamValue] = []
        for param in params:
            if json_kind(param) is not JsonKind.STRING:
                raise FilterRuleError(f"Parameter {param!r} is not a string")

            spec = ParamSpec.parse(param)
            if spec.kind is ParamKind.PATH:
                values.append(resolve_path(raw, spec.steps, term_uri, path=spec.raw))
            elif spec.kind is ParamKind.ID_REFERENCE:
                values.append(term_uri)
            else:
                values.append(spec.raw)
        return values

    def apply_pattern(self, pattern: str, values: List[ParamValue], term_uri: str) -> Any:
        """Resolve a pattern against resolved parameter values."""
        if pattern == ID_TOKEN:
            return term_uri

        if "{" not in pattern:
            return pattern

        if pattern == "{0}":
            if not values:
                raise FilterRuleError("Pattern {0} has no parameter")
            return values[0]

        return substitute(pattern, values)


def _render(value: ParamValue) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def substitute(pattern: str, values: List[ParamValue]) -> str:
    """
    Replace {n} placeholders with values[n].

    Placeholders with no corresponding value are left as they are.
    """
    def _replace(match: "re.Match") -> str:
        index = int(match.group(1))
        if index < len(values):
            return _render(values[index])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, pattern)


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

_filter: Optional[ResponseFilter] = None


def get_filter() -> ResponseFilter:
    """Get shared response filter instance."""
    global _filter
    if _filter is None:
        _filter = ResponseFilter()
    return _filter


def filter_response(config: VocabularyFieldConfig, raw: Any, term_uri: str) -> Any:
    """Convenience function: apply config's retrieval-filtering to raw."""
    return get_filter().filter(config, raw, term_uri)


__all__ = [
    "ResponseFilter",
    "substitute",
    "get_filter",
    "filter_response",
]
