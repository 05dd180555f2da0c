# ============================================================================
# EXTERNAL VOCABULARY SERVICE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Service - Public entry point
# PURPOSE: Wire the config cache, retriever, registrar and extractor
# CREATED: 05 MAR 2026
# ============================================================================
"""
External Vocabulary Service

Facade used by the rest of the application:

    service = ExternalVocabularyService(pool)

    service.get_config()                          # field_type_id -> config
    service.register_external_vocab_values(field) # on field save
    service.get_strings_for(term_uri)             # search indexing
    service.get_external_vocabulary_value(uri)    # display
    service.close()

Collaborators can be passed explicitly instead of a pool (in-memory
stores for tools and tests).
"""

from typing import Any, Dict, Optional, Set

from psycopg_pool import ConnectionPool

from core.config import Defaults, get_defaults
from core.contracts import RetrievalOutcome
from core.logging import get_logger, ComponentType
from core.models.dataset_field import DatasetField
from repositories import (
    DatasetFieldTypeRepository,
    ExternalVocabularyValueRepository,
    SettingRepository,
    close_pool,
    init_pool,
)
from .string_extractor import StringExtractor
from .term_retriever import TermRetriever
from .vocabulary_config_service import ConfigMap, VocabularyConfigCache
from .vocabulary_registrar import VocabularyRegistrar

logger = get_logger(__name__, ComponentType.SERVICE)


class ExternalVocabularyService:
    """Service for external controlled vocabulary terms."""

    def __init__(
        self,
        pool: Optional[ConnectionPool] = None,
        settings: Any = None,
        field_types: Any = None,
        store: Any = None,
        defaults: Optional[Defaults] = None,
    ):
        """
        Initialize the service.

        Args:
            pool: Database connection pool; repositories are built on it for
                any collaborator not given explicitly
            settings: Settings source (get_value)
            field_types: Field type finder (find_by_name)
            store: Term value store (get_value, save_value)
            defaults: Configuration defaults (env-derived if None)
        """
        self.pool = pool
        self._owns_pool = False
        self.defaults = defaults or get_defaults()

        if pool is not None:
            settings = settings or SettingRepository(pool)
            field_types = field_types or DatasetFieldTypeRepository(pool)
            store = store or ExternalVocabularyValueRepository(pool)

        if settings is None or field_types is None or store is None:
            raise ValueError("A connection pool or all of settings, field_types and store are required")

        self.config_cache = VocabularyConfigCache(
            settings, field_types, settings_key=self.defaults.vocabulary.settings_key
        )
        self.retriever = TermRetriever(store, defaults=self.defaults.retrieval)
        self.registrar = VocabularyRegistrar(self.config_cache, self.retriever)
        self.extractor = StringExtractor(store)

    @classmethod
    def from_env(cls) -> "ExternalVocabularyService":
        """Open a pool from DATABASE_URL / POSTGRES_* and own it."""
        service = cls(pool=init_pool())
        service._owns_pool = True
        return service

    def get_config(self) -> ConfigMap:
        return self.config_cache.get_config()

    def register_external_vocab_values(self, field: DatasetField) -> Dict[str, RetrievalOutcome]:
        """Resolve and store every term URI held by field."""
        return self.registrar.register(field)

    def get_strings_for(self, term_uri: str) -> Set[str]:
        return self.extractor.strings_for(term_uri)

    def get_external_vocabulary_value(self, term_uri: str) -> Optional[Dict[str, Any]]:
        """Stored normalized value as a JSON object, or None."""
        return self.extractor.load_value(term_uri)

    def close(self) -> None:
        """Release the pool if this service opened it."""
        if self._owns_pool and self.pool is not None:
            close_pool()
            self.pool = None
            self._owns_pool = False
            logger.info("External vocabulary service closed")


__all__ = ["ExternalVocabularyService"]
