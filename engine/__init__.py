# ============================================================================
# ENGINE MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Response normalization engine
# PURPOSE: Path walker and retrieval-filtering interpreter
# CREATED: 04 MAR 2026
# ============================================================================
"""
Engine Module

Pure, I/O-free interpretation of retrieval-filtering rules.

    engine.paths   path/predicate walker over untyped JSON
    engine.filter  rule and pattern interpreter
"""

from engine.paths import member, select, resolve_path
from engine.filter import ResponseFilter, substitute, get_filter, filter_response

__all__ = [
    "member",
    "select",
    "resolve_path",
    "ResponseFilter",
    "substitute",
    "get_filter",
    "filter_response",
]
