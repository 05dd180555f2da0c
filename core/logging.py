# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all components
# CREATED: 02 MAR 2026
# ============================================================================
"""
Structured Logging

stdlib logging with a per-thread context of the field and term being
worked on, so a retrieval failure deep in the retriever still says which
field save triggered it.

- get_logger() returns a ContextLogger tagged with its component
- log_context() pushes field_name / term_uri / correlation_id for a block
- StructuredFormatter emits one JSON object per record (LOG_FORMAT=json)
- HumanFormatter emits one readable line per record

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("services.term_retriever")

    with log_context(field_name="keywordValue", term_uri="https://..."):
        logger.info("Retrieving term")
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from enum import Enum

SERVICE_NAME = "cvoc-engine"

# Third-party loggers that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "psycopg.pool")


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    SERVICE = "service"
    REPOSITORY = "repository"
    RETRIEVER = "retriever"
    FILTER = "filter"
    INFRASTRUCTURE = "infrastructure"
    TOOL = "tool"


@dataclass(frozen=True)
class LogContext:
    """Contextual fields attached to every record logged inside a log_context() block."""
    field_name: Optional[str] = None
    term_uri: Optional[str] = None
    correlation_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **changes) -> "LogContext":
        """New context with changes applied; extra dicts are combined."""
        extra = {**self.extra, **changes.pop("extra", {})}
        return replace(self, extra=extra, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with extra flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


class _ContextStack(threading.local):
    def __init__(self):
        self.frames: List[LogContext] = []

    def current(self) -> LogContext:
        return self.frames[-1] if self.frames else _EMPTY_CONTEXT


_EMPTY_CONTEXT = LogContext()
_stack = _ContextStack()


def get_current_context() -> LogContext:
    """Innermost context for the calling thread."""
    return _stack.current()


@contextmanager
def log_context(**kwargs):
    """
    Push logging context for the duration of a block.

    Fields not given are inherited from the enclosing block.

    Example:
        with log_context(field_name="subject", term_uri="https://vocab/1"):
            logger.info("Registering term")
    """
    context = _stack.current().merged(**kwargs)
    _stack.frames.append(context)
    try:
        yield context
    finally:
        _stack.frames.pop()


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "cvoc", None) or get_current_context().to_dict()


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def __init__(self, service: str = SERVICE_NAME, include_source: bool = True):
        super().__init__()
        self.service = service
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _record_fields(record)
        if context:
            payload["context"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            payload["source"] = f"{record.filename}:{record.lineno} {record.funcName}"

        return json.dumps(payload, default=str, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """Readable single-line format for development and the CLI."""

    SHORT_NAMES = {
        "field_name": "field",
        "term_uri": "term",
        "correlation_id": "cid",
        "operation": "op",
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        context = _record_fields(record)
        tags = [
            f"{short}={context[name]}"
            for name, short in self.SHORT_NAMES.items()
            if context.get(name)
        ]
        where = f" [{', '.join(tags)}]" if tags else ""

        line = f"{timestamp} {record.levelname:<8} {record.name}{where}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that snapshots the thread's context into each record.

    The snapshot is stored on the record as `cvoc`, with the adapter's
    component filled in when the context has none.
    """

    def process(self, msg, kwargs):
        context = get_current_context().to_dict()
        component = self.extra.get("component")
        if component is not None and "component" not in context:
            context["component"] = component.value if isinstance(component, Enum) else component

        context.update(kwargs.pop("extra", None) or {})
        kwargs["extra"] = {"cvoc": context}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name, normally the module's __name__
        component: Component tag added to every record
    """
    return ContextLogger(logging.getLogger(name), {"component": component})


def configure_logging(
    level: Union[str, int, None] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level; LOG_LEVEL env var, else INFO
        json_output: JSON records; LOG_FORMAT=json env var, else human-readable
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output is None:
        json_output = os.getenv("LOG_FORMAT", "").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
