# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Business logic layer
# PURPOSE: Vocabulary configuration, retrieval, registration and lookup
# CREATED: 04 MAR 2026
# ============================================================================
"""
Services Module

Business logic for external controlled vocabularies.
Services coordinate between repositories, the HTTP client and the engine.

Usage:
    from services import ExternalVocabularyService

    service = ExternalVocabularyService(pool)
    service.register_external_vocab_values(field)
"""

from .vocabulary_config_service import VocabularyConfigCache, ConfigSnapshot, content_hash
from .term_retriever import TermRetriever, build_retrieval_url, parse_term_uri
from .vocabulary_registrar import VocabularyRegistrar
from .string_extractor import StringExtractor, extract_strings
from .vocabulary_service import ExternalVocabularyService

__all__ = [
    "VocabularyConfigCache",
    "ConfigSnapshot",
    "content_hash",
    "TermRetriever",
    "build_retrieval_url",
    "parse_term_uri",
    "VocabularyRegistrar",
    "StringExtractor",
    "extract_strings",
    "ExternalVocabularyService",
]
