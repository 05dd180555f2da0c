# ============================================================================
# VOCABULARY REGISTRAR
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Service - Field-level term registration
# PURPOSE: Find term URIs in a saved field and resolve each one
# CREATED: 04 MAR 2026
# ============================================================================
"""
Vocabulary Registrar

Called when a metadata field is saved. Locates the values that hold term
URIs and hands each to the TermRetriever:

    primitive field  -> every scalar value
    compound field   -> every child whose type is the configured
                        term-uri field, in every compound value

Fields without configuration are ignored. A store failure on one term is
logged and the remaining terms are still attempted; registration never
aborts the caller's save.
"""

from typing import Dict, Iterator

from core.contracts import RetrievalOutcome
from core.logging import get_logger, log_context, ComponentType
from core.models.dataset_field import DatasetField
from core.models.vocabulary_config import VocabularyFieldConfig
from infrastructure.base_repository import RepositoryError
from .vocabulary_config_service import VocabularyConfigCache
from .term_retriever import TermRetriever

logger = get_logger(__name__, ComponentType.SERVICE)


class VocabularyRegistrar:
    """Registers the external vocabulary terms of a field."""

    def __init__(self, config_cache: VocabularyConfigCache, retriever: TermRetriever):
        self.config_cache = config_cache
        self.retriever = retriever

    def register(self, field: DatasetField) -> Dict[str, RetrievalOutcome]:
        """
        Resolve every term URI held by field.

        Returns:
            term -> outcome for each term attempted. Terms whose store
            access failed are left out.
        """
        field_type = field.field_type
        config = self.config_cache.get_config().get(field_type.id)
        if config is None:
            return {}

        outcomes: Dict[str, RetrievalOutcome] = {}
        with log_context(field_name=field_type.name, operation="register"):
            logger.info(f"Registering for field: {field_type.name}")
            for term in self.terms_of(field, config):
                if term in outcomes:
                    continue
                try:
                    outcomes[term] = self.retriever.resolve(config, term)
                except RepositoryError as e:
                    logger.error(f"Could not register term {term}: {e}")

            if outcomes:
                summary = ", ".join(f"{o.value}={n}" for o, n in count_outcomes(outcomes).items())
                logger.info(f"Registered {len(outcomes)} term(s) for {field_type.name}: {summary}")
        return outcomes

    def terms_of(self, field: DatasetField, config: VocabularyFieldConfig) -> Iterator[str]:
        """Values of field that should be resolved as terms."""
        field_type = field.field_type

        if field_type.is_primitive:
            yield from field.values
            return

        if not field_type.is_compound:
            return

        term_type_id = config.term_uri_field_type_id
        if term_type_id is None:
            logger.warning(f"No term-uri field type for compound field {field_type.name}")
            return

        for compound in field.compound_values:
            for child in compound.children_of_type(term_type_id):
                logger.debug(f"Found term uri field type id: {child.field_type.id}")
                yield from child.values


def count_outcomes(outcomes: Dict[str, RetrievalOutcome]) -> Dict[RetrievalOutcome, int]:
    """Tally outcomes, e.g. for a summary log line."""
    counts: Dict[RetrievalOutcome, int] = {}
    for outcome in outcomes.values():
        counts[outcome] = counts.get(outcome, 0) + 1
    return counts


__all__ = ["VocabularyRegistrar", "count_outcomes"]
