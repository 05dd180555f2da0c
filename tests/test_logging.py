# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Tests - Logging context and formatters
# PURPOSE: Verify context propagation into records and formatter output
# CREATED: 06 MAR 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging
import threading

from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_context,
)

LOGGER = "tests.logging"


class TestLogContext:
    def test_nested_contexts_inherit(self):
        with log_context(field_name="keyword"):
            with log_context(term_uri="https://vocab.example/1"):
                context = get_current_context()
                assert context.field_name == "keyword"
                assert context.term_uri == "https://vocab.example/1"
            assert get_current_context().term_uri is None
        assert get_current_context().field_name is None

    def test_extra_merged(self):
        with log_context(extra={"a": 1}):
            with log_context(extra={"b": 2}):
                assert get_current_context().to_dict() == {"a": 1, "b": 2}

    def test_contexts_are_per_thread(self):
        seen = []
        with log_context(field_name="subject"):
            t = threading.Thread(target=lambda: seen.append(get_current_context().field_name))
            t.start()
            t.join()
        assert seen == [None]


class TestContextLogger:
    def test_record_carries_context_and_component(self, caplog):
        logger = get_logger(LOGGER, ComponentType.RETRIEVER)

        with caplog.at_level(logging.INFO, logger=LOGGER):
            with log_context(field_name="subject", term_uri="https://vocab.example/1"):
                logger.info("Retrieving term")

        record = caplog.records[-1]
        assert record.cvoc == {
            "field_name": "subject",
            "term_uri": "https://vocab.example/1",
            "component": "retriever",
        }

    def test_call_extra_merged(self, caplog):
        logger = get_logger(LOGGER)
        with caplog.at_level(logging.INFO, logger=LOGGER):
            logger.info("x", extra={"status_code": 404})
        assert caplog.records[-1].cvoc == {"status_code": 404}


class TestFormatters:
    def _record(self, **cvoc):
        record = logging.LogRecord(LOGGER, logging.WARNING, __file__, 10, "Error retrieving %s", ("u",), None)
        record.cvoc = cvoc
        return record

    def test_structured(self):
        payload = json.loads(StructuredFormatter().format(self._record(field_name="subject")))

        assert payload["level"] == "WARNING"
        assert payload["message"] == "Error retrieving u"
        assert payload["service"] == "cvoc-engine"
        assert payload["context"] == {"field_name": "subject"}

    def test_human(self):
        line = HumanFormatter().format(self._record(field_name="subject", term_uri="https://v/1"))
        assert "[field=subject, term=https://v/1]" in line
        assert line.endswith("Error retrieving u")
