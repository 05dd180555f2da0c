# ============================================================================
# RESPONSE FILTER TESTS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Tests - Retrieval-filtering interpreter
# PURPOSE: Verify path walking, pattern resolution and fallback behaviour
# CREATED: 05 MAR 2026
# ============================================================================
"""
Response Filter Tests

Unit tests for engine.paths and engine.filter:
- Path walking: member access, array predicates, @id predicates
- Patterns: @id, {0} shortcut, placeholder substitution, literals
- Per-rule failure isolation and raw-document fallback

Run with:
    pytest tests/test_response_filter.py -v
"""

import json
import pytest

from core.errors import FilterRuleError, PathResolutionError
from core.models.vocabulary_config import ParamSpec, VocabularyFieldConfig
from engine.filter import ResponseFilter, filter_response, substitute
from engine.paths import resolve_path

TERM = "https://vocab.example/123"


# ============================================================================
# HELPERS
# ============================================================================

def _make_config(filtering=None, **overrides):
    entry = {
        "field-name": "subject",
        "retrieval-uri": "https://vocab.example/rest?uri={0}",
        "retrieval-filtering": filtering if filtering is not None else {},
    }
    entry.update(overrides)
    return VocabularyFieldConfig.from_wire(entry, field_type_id=1)


def _walk(document, path, term_uri=TERM):
    return resolve_path(document, ParamSpec.parse(path).steps, term_uri, path=path)


# ============================================================================
# PATH WALKER
# ============================================================================

class TestResolvePath:
    def test_single_member(self):
        assert _walk({"prefLabel": "Biology"}, "/prefLabel") == "Biology"

    def test_nested_members(self):
        doc = {"a": {"b": {"c": "deep"}}}
        assert _walk(doc, "/a/b/c") == "deep"

    def test_array_predicate(self):
        doc = {"items": [{"id": "x", "label": "A"}, {"id": "y", "label": "B"}]}
        assert _walk(doc, "/items/id=y/label") == "B"

    def test_predicate_takes_first_match(self):
        doc = {"items": [{"id": "y", "label": "first"}, {"id": "y", "label": "second"}]}
        assert _walk(doc, "/items/id=y/label") == "first"

    def test_id_predicate_matches_term_uri(self):
        doc = {"graph": [
            {"uri": "https://vocab.example/other", "prefLabel": "Other"},
            {"uri": TERM, "prefLabel": "Mine"},
        ]}
        assert _walk(doc, "/graph/uri=@id/prefLabel") == "Mine"

    def test_predicate_skips_non_objects(self):
        doc = {"items": ["junk", 3, {"id": "y", "label": "B"}]}
        assert _walk(doc, "/items/id=y/label") == "B"

    def test_array_value_returned(self):
        labels = [{"lang": "en", "value": "Biology"}]
        assert _walk({"prefLabel": labels}, "/prefLabel") == labels

    def test_missing_member(self):
        with pytest.raises(PathResolutionError) as exc:
            _walk({"a": "x"}, "/b")
        assert exc.value.step == "b"
        assert exc.value.path == "/b"

    def test_member_on_array_fails(self):
        with pytest.raises(PathResolutionError):
            _walk({"a": ["x"]}, "/a/b")

    def test_predicate_on_object_fails(self):
        with pytest.raises(PathResolutionError):
            _walk({"items": {"id": "y"}}, "/items/id=y/label")

    def test_predicate_without_match_fails(self):
        doc = {"items": [{"id": "x", "label": "A"}]}
        with pytest.raises(PathResolutionError):
            _walk(doc, "/items/id=z/label")

    def test_number_value_fails(self):
        with pytest.raises(PathResolutionError):
            _walk({"count": 3}, "/count")

    def test_object_value_fails(self):
        with pytest.raises(PathResolutionError):
            _walk({"a": {"b": "c"}}, "/a")

    def test_path_error_is_rule_error(self):
        assert issubclass(PathResolutionError, FilterRuleError)


# ============================================================================
# PATTERNS
# ============================================================================

class TestPatterns:
    def test_id_pattern(self):
        config = _make_config({"vocabularyUri": {"pattern": "@id"}})
        assert filter_response(config, {}, TERM) == {"vocabularyUri": TERM}

    def test_literal_pattern(self):
        config = _make_config({"source": {"pattern": "Library of Congress"}})
        assert filter_response(config, {}, TERM) == {"source": "Library of Congress"}

    def test_zero_shortcut_keeps_string(self):
        config = _make_config({"label": {"pattern": "{0}", "params": ["/prefLabel"]}})
        assert filter_response(config, {"prefLabel": "Biology"}, TERM) == {"label": "Biology"}

    def test_zero_shortcut_keeps_array(self):
        labels = [{"lang": "en", "value": "Biology"}, {"lang": "fr", "value": "Biologie"}]
        config = _make_config({"termName": {"pattern": "{0}", "params": ["/prefLabel"]}})
        assert filter_response(config, {"prefLabel": labels}, TERM) == {"termName": labels}

    def test_zero_shortcut_with_id_param(self):
        config = _make_config({"uri": {"pattern": "{0}", "params": ["@id"]}})
        assert filter_response(config, {}, TERM) == {"uri": TERM}

    def test_zero_shortcut_with_literal_param(self):
        config = _make_config({"source": {"pattern": "{0}", "params": ["LCSH"]}})
        assert filter_response(config, {}, TERM) == {"source": "LCSH"}

    def test_substitution(self):
        config = _make_config({"display": {"pattern": "{0} ({1})", "params": ["/label", "@id"]}})
        result = filter_response(config, {"label": "Biology"}, TERM)
        assert result == {"display": f"Biology ({TERM})"}

    def test_substitution_renders_arrays_as_json(self):
        labels = [{"lang": "en", "value": "A"}]
        config = _make_config({"text": {"pattern": "labels: {0}", "params": ["/labels"]}})
        result = filter_response(config, {"labels": labels}, TERM)
        assert result == {"text": 'labels: [{"lang":"en","value":"A"}]'}

    def test_substitution_leaves_unknown_index(self):
        assert substitute("{0}-{2}", ["A"]) == "A-{2}"

    def test_substitution_repeated_index(self):
        assert substitute("{0}/{0}", ["x"]) == "x/x"


# ============================================================================
# RULE FAILURES AND FALLBACK
# ============================================================================

class TestRuleFailures:
    def test_failed_rule_omitted(self):
        config = _make_config({
            "label": {"pattern": "{0}", "params": ["/prefLabel"]},
            "broken": {"pattern": "{0}", "params": ["/missing"]},
        })
        assert filter_response(config, {"prefLabel": "Biology"}, TERM) == {"label": "Biology"}

    def test_zero_without_params_omitted(self):
        config = _make_config({
            "label": {"pattern": "{0}"},
            "uri": {"pattern": "@id"},
        })
        assert filter_response(config, {}, TERM) == {"uri": TERM}

    def test_missing_pattern_omitted(self):
        config = _make_config({
            "label": {"params": ["/prefLabel"]},
            "uri": {"pattern": "@id"},
        })
        assert filter_response(config, {"prefLabel": "x"}, TERM) == {"uri": TERM}

    def test_non_string_param_omitted(self):
        config = _make_config({
            "label": {"pattern": "{0}", "params": [7]},
            "uri": {"pattern": "@id"},
        })
        assert filter_response(config, {}, TERM) == {"uri": TERM}

    def test_non_object_rule_omitted(self):
        config = _make_config({
            "label": "not a rule",
            "uri": {"pattern": "@id"},
        })
        assert filter_response(config, {}, TERM) == {"uri": TERM}

    def test_all_rules_failing_returns_raw(self):
        raw = {"something": "else"}
        config = _make_config({"label": {"pattern": "{0}", "params": ["/prefLabel"]}})
        assert filter_response(config, raw, TERM) is raw

    def test_no_rules_returns_raw(self):
        raw = {"prefLabel": "Biology"}
        assert filter_response(_make_config({}), raw, TERM) is raw

    def test_context_only_returns_raw(self):
        raw = {"prefLabel": "Biology"}
        config = _make_config({"@context": {"label": "https://schema.org/name"}})
        assert filter_response(config, raw, TERM) is raw

    def test_context_never_in_output(self):
        config = _make_config({
            "@context": {"label": "https://schema.org/name"},
            "label": {"pattern": "{0}", "params": ["/prefLabel"]},
        })
        result = filter_response(config, {"prefLabel": "Biology"}, TERM)
        assert "@context" not in result

    def test_evaluate_rule_raises(self):
        config = _make_config({"label": {"pattern": "{0}", "params": ["/nope"]}})
        (_, rule), = config.filter_rules()
        with pytest.raises(FilterRuleError):
            ResponseFilter().evaluate_rule(rule, {}, TERM)


# ============================================================================
# WHOLE-DOCUMENT BEHAVIOUR
# ============================================================================

class TestFilterDocument:
    def test_output_follows_configuration_order(self):
        config = _make_config({
            "b": {"pattern": "@id"},
            "a": {"pattern": "literal"},
        })
        assert list(filter_response(config, {}, TERM)) == ["b", "a"]

    def test_deterministic(self):
        config = _make_config({
            "display": {"pattern": "{0} ({1})", "params": ["/label", "@id"]},
            "uri": {"pattern": "@id"},
        })
        raw = {"label": "Biology"}
        assert filter_response(config, raw, TERM) == filter_response(config, raw, TERM)

    def test_skosmos_style_response(self):
        raw = {
            "graph": [
                {"uri": "https://vocab.example/scheme", "prefLabel": "Scheme"},
                {
                    "uri": TERM,
                    "prefLabel": [
                        {"lang": "en", "value": "Biology"},
                        {"lang": "de", "value": "Biologie"},
                    ],
                },
            ]
        }
        config = _make_config({
            "@context": {"termName": "https://schema.org/name"},
            "termName": {"pattern": "{0}", "params": ["/graph/uri=@id/prefLabel"]},
            "vocabularyUri": {"pattern": "{0}", "params": ["/graph/uri=@id/uri"]},
            "vocabularyName": {"pattern": "Example Vocabulary"},
        })

        result = filter_response(config, raw, TERM)

        assert result == {
            "termName": [
                {"lang": "en", "value": "Biology"},
                {"lang": "de", "value": "Biologie"},
            ],
            "vocabularyUri": TERM,
            "vocabularyName": "Example Vocabulary",
        }
