# ============================================================================
# TERM RETRIEVER TESTS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Tests - Fetch, normalize and store one term
# PURPOSE: Verify TermRetriever outcomes with mocked httpx and store
# CREATED: 05 MAR 2026
# ============================================================================
"""
Term Retriever Tests

Tests TermRetriever against a mocked httpx.Client and store:
- Blank and non-URI values never touch the store
- Already-resolved terms are not refetched
- 200 responses are filtered and stored
- HTTP, transport and parse failures leave the store untouched

Uses unittest.mock to patch httpx calls - no real HTTP traffic.

Run with:
    pytest tests/test_term_retriever.py -v
"""

import json
import threading
import time
import pytest
import httpx
from unittest.mock import patch, MagicMock

from core.config import RetrievalDefaults
from core.contracts import RetrievalOutcome
from core.errors import NotAUriError
from core.models.vocabulary_config import VocabularyFieldConfig
from infrastructure.base_repository import RepositoryError
from services.term_retriever import TermRetriever, build_retrieval_url, parse_term_uri

TERM = "https://vocab.example/123"
CLIENT = "services.term_retriever.httpx.Client"


# ============================================================================
# HELPERS
# ============================================================================

def _make_config(**overrides):
    entry = {
        "field-name": "subject",
        "retrieval-uri": "https://vocab.example/rest/v1/data?uri={0}",
        "retrieval-filtering": {"label": {"pattern": "{0}", "params": ["/prefLabel"]}},
    }
    entry.update(overrides)
    return VocabularyFieldConfig.from_wire(entry, field_type_id=1)


def _mock_response(status_code=200, json_data=None):
    """Create a mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else {}
    resp.text = json.dumps(json_data) if json_data is not None else ""
    return resp


def _mock_client(mock_client_cls, response=None, side_effect=None):
    mock_client = MagicMock()
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    if side_effect is not None:
        mock_client.get.side_effect = side_effect
    else:
        mock_client.get.return_value = response
    mock_client_cls.return_value = mock_client
    return mock_client


def _make_store(existing=None, written=True):
    store = MagicMock()
    store.get_value.return_value = existing
    store.save_value.return_value = written
    return store


class MemoryStore:
    """Write-once dict store."""

    def __init__(self):
        self.values = {}

    def get_value(self, uri):
        return self.values.get(uri)

    def save_value(self, uri, value):
        if self.values.get(uri) is not None:
            return False
        self.values[uri] = value
        return True


# ============================================================================
# URI AND URL HANDLING
# ============================================================================

class TestParseTermUri:
    @pytest.mark.parametrize("term", [
        TERM,
        "http://id.loc.gov/authorities/subjects/sh85014203",
        "urn:isbn:0451450523",
    ])
    def test_absolute_uris_accepted(self, term):
        assert parse_term_uri(term).scheme

    @pytest.mark.parametrize("term", [
        "Biology",
        "/relative/path",
        "https://vocab.example/has space",
        "https://vocab.example/\t123",
        "https://vocab.example/\x00",
    ])
    def test_non_uris_rejected(self, term):
        with pytest.raises(NotAUriError):
            parse_term_uri(term)


class TestBuildRetrievalUrl:
    def test_template_substitution(self):
        url = build_retrieval_url(_make_config(), TERM)
        assert url == f"https://vocab.example/rest/v1/data?uri={TERM}"

    def test_prefix_stripped(self):
        config = _make_config(**{
            "retrieval-uri": "https://api.example/terms/{0}.json",
            "prefix": "https://vocab.example/",
        })
        assert build_retrieval_url(config, TERM) == "https://api.example/terms/123.json"

    def test_prefix_only_stripped_at_start(self):
        config = _make_config(**{
            "retrieval-uri": "https://api.example/lookup?q={0}",
            "prefix": "123",
        })
        assert build_retrieval_url(config, TERM) == f"https://api.example/lookup?q={TERM}"

    def test_every_placeholder_replaced(self):
        config = _make_config(**{"retrieval-uri": "https://api.example/{0}?self={0}"})
        assert build_retrieval_url(config, "x:1") == "https://api.example/x:1?self=x:1"


# ============================================================================
# SKIPPED VALUES
# ============================================================================

class TestSkippedValues:
    @pytest.mark.parametrize("term", [None, "", "   ", "\n"])
    @patch(CLIENT)
    def test_blank_terms(self, mock_client_cls, term):
        store = _make_store()
        outcome = TermRetriever(store).resolve(_make_config(), term)

        assert outcome == RetrievalOutcome.SKIPPED_BLANK
        store.get_value.assert_not_called()
        mock_client_cls.assert_not_called()

    @patch(CLIENT)
    def test_non_uri_term(self, mock_client_cls):
        store = _make_store()
        outcome = TermRetriever(store).resolve(_make_config(), "Biology")

        assert outcome == RetrievalOutcome.NOT_A_URI
        store.get_value.assert_not_called()
        store.save_value.assert_not_called()
        mock_client_cls.assert_not_called()

    @patch(CLIENT)
    def test_already_resolved(self, mock_client_cls):
        store = _make_store(existing='{"label": "Biology"}')
        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.ALREADY_RESOLVED
        mock_client_cls.assert_not_called()
        store.save_value.assert_not_called()


# ============================================================================
# SUCCESSFUL RETRIEVAL
# ============================================================================

class TestRetrieval:
    @patch(CLIENT)
    def test_resolves_and_stores_filtered_value(self, mock_client_cls):
        mock_client = _mock_client(mock_client_cls, _mock_response(200, {"prefLabel": "Biology"}))
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.RESOLVED
        mock_client.get.assert_called_once_with(f"https://vocab.example/rest/v1/data?uri={TERM}")
        uri, value = store.save_value.call_args[0]
        assert uri == TERM
        assert json.loads(value) == {"label": "Biology"}

    @patch(CLIENT)
    def test_unfilterable_response_stored_raw(self, mock_client_cls):
        raw = {"unexpected": {"shape": True}}
        _mock_client(mock_client_cls, _mock_response(200, raw))
        store = _make_store()

        TermRetriever(store).resolve(_make_config(), TERM)

        assert json.loads(store.save_value.call_args[0][1]) == raw

    @patch(CLIENT)
    def test_stored_text_is_compact(self, mock_client_cls):
        config = _make_config(**{
            "retrieval-filtering": {"labels": {"pattern": "{0}", "params": ["/altLabel"]}},
        })
        alt = [{"lang": "en", "value": "Biology"}]
        _mock_client(mock_client_cls, _mock_response(200, {"altLabel": alt}))
        store = _make_store()

        TermRetriever(store).resolve(config, TERM)

        assert store.save_value.call_args[0][1] == '{"labels":[{"lang":"en","value":"Biology"}]}'

    @patch(CLIENT)
    def test_client_configuration(self, mock_client_cls):
        _mock_client(mock_client_cls, _mock_response(200, {"prefLabel": "x"}))
        defaults = RetrievalDefaults(connect_timeout=2.0, read_timeout=5.0, user_agent="test-agent")

        TermRetriever(_make_store(), defaults=defaults).resolve(_make_config(), TERM)

        kwargs = mock_client_cls.call_args.kwargs
        assert kwargs["headers"]["Accept"] == "application/json+ld, application/json"
        assert kwargs["headers"]["User-Agent"] == "test-agent"
        assert kwargs["timeout"] == defaults.timeout()

    @patch(CLIENT)
    def test_lost_write_race_reported_as_already_resolved(self, mock_client_cls):
        _mock_client(mock_client_cls, _mock_response(200, {"prefLabel": "Biology"}))
        store = _make_store(written=False)

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.ALREADY_RESOLVED

    @patch(CLIENT)
    def test_second_resolution_does_not_refetch(self, mock_client_cls):
        mock_client = _mock_client(mock_client_cls, _mock_response(200, {"prefLabel": "Biology"}))
        store = MemoryStore()
        retriever = TermRetriever(store)

        first = retriever.resolve(_make_config(), TERM)
        second = retriever.resolve(_make_config(), TERM)

        assert first == RetrievalOutcome.RESOLVED
        assert second == RetrievalOutcome.ALREADY_RESOLVED
        assert mock_client.get.call_count == 1
        assert json.loads(store.values[TERM]) == {"label": "Biology"}


# ============================================================================
# FAILURES
# ============================================================================

class TestFailures:
    @patch(CLIENT)
    def test_non_200(self, mock_client_cls):
        _mock_client(mock_client_cls, _mock_response(404, {"error": "not found"}))
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.HTTP_ERROR
        assert outcome.is_failure()
        store.save_value.assert_not_called()

    @patch(CLIENT)
    def test_connect_error(self, mock_client_cls):
        _mock_client(mock_client_cls, side_effect=httpx.ConnectError("connection refused"))
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.TRANSPORT_ERROR
        store.save_value.assert_not_called()

    @patch(CLIENT)
    def test_timeout(self, mock_client_cls):
        _mock_client(mock_client_cls, side_effect=httpx.ReadTimeout("timed out"))
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.TRANSPORT_ERROR
        store.save_value.assert_not_called()

    @patch(CLIENT)
    def test_unparseable_body(self, mock_client_cls):
        resp = _mock_response(200)
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        _mock_client(mock_client_cls, resp)
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.PARSE_ERROR
        store.save_value.assert_not_called()

    @patch(CLIENT)
    def test_deeply_nested_body(self, mock_client_cls):
        resp = _mock_response(200)
        resp.json.side_effect = RecursionError("maximum recursion depth exceeded")
        _mock_client(mock_client_cls, resp)
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.PARSE_ERROR
        store.save_value.assert_not_called()

    @patch(CLIENT)
    def test_non_object_body(self, mock_client_cls):
        _mock_client(mock_client_cls, _mock_response(200, ["a", "b"]))
        store = _make_store()

        outcome = TermRetriever(store).resolve(_make_config(), TERM)

        assert outcome == RetrievalOutcome.PARSE_ERROR
        store.save_value.assert_not_called()

    @patch(CLIENT)
    def test_failure_is_retried_next_time(self, mock_client_cls):
        mock_client = _mock_client(mock_client_cls, side_effect=[
            httpx.ConnectError("down"),
            _mock_response(200, {"prefLabel": "Biology"}),
        ])
        retriever = TermRetriever(MemoryStore())

        assert retriever.resolve(_make_config(), TERM) == RetrievalOutcome.TRANSPORT_ERROR
        assert retriever.resolve(_make_config(), TERM) == RetrievalOutcome.RESOLVED
        assert mock_client.get.call_count == 2

    @patch(CLIENT)
    def test_store_failure_propagates(self, mock_client_cls):
        store = _make_store()
        store.get_value.side_effect = RepositoryError("db down", operation="external vocabulary lookup")

        with pytest.raises(RepositoryError):
            TermRetriever(store).resolve(_make_config(), TERM)
        mock_client_cls.assert_not_called()


# ============================================================================
# CONCURRENCY
# ============================================================================

class TestConcurrentResolution:
    @patch(CLIENT)
    def test_concurrent_calls_share_one_fetch(self, mock_client_cls):
        release = threading.Event()
        started = threading.Event()

        def slow_get(url):
            started.set()
            release.wait(5)
            return _mock_response(200, {"prefLabel": "Biology"})

        mock_client = _mock_client(mock_client_cls, side_effect=slow_get)
        retriever = TermRetriever(MemoryStore())
        outcomes = []

        def run():
            outcomes.append(retriever.resolve(_make_config(), TERM))

        leader = threading.Thread(target=run)
        leader.start()
        assert started.wait(5)

        followers = [threading.Thread(target=run) for _ in range(3)]
        for t in followers:
            t.start()

        deadline = time.monotonic() + 5
        while retriever.flights._calls[TERM].waiters < 3 and time.monotonic() < deadline:
            time.sleep(0.01)

        release.set()
        for t in [leader, *followers]:
            t.join(5)

        assert mock_client.get.call_count == 1
        assert outcomes == [RetrievalOutcome.RESOLVED] * 4
