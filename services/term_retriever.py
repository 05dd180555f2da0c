# ============================================================================
# TERM RETRIEVER
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Service - Fetch, normalize and store one vocabulary term
# PURPOSE: Resolve a term URI against its vocabulary service exactly once
# CREATED: 04 MAR 2026
# ============================================================================
"""
Term Retriever

Resolves a single term URI:

    blank?          -> SKIPPED_BLANK      (store untouched)
    not a URI?      -> NOT_A_URI          (store untouched)
    already stored? -> ALREADY_RESOLVED
    GET retrieval-uri with {0} = term (prefix stripped)
        200 + JSON object -> filter, store -> RESOLVED
        other status      -> HTTP_ERROR
        connect/timeout   -> TRANSPORT_ERROR
        bad body          -> PARSE_ERROR

Failures are logged and leave the term unresolved, so the next
registration retries it. Concurrent calls for the same URI share one
fetch. Repository failures propagate as RepositoryError.

Uses the sync httpx client: registration runs inside blocking save paths.
"""

import json
from typing import Any, Optional
from urllib.parse import SplitResult, urlsplit

import httpx

from core.config import RetrievalDefaults, get_defaults
from core.contracts import JsonKind, RetrievalOutcome, json_kind
from core.errors import NotAUriError, RetrievalError
from core.logging import get_logger, log_context, ComponentType
from core.models.vocabulary_config import VocabularyFieldConfig
from engine.filter import ResponseFilter, get_filter
from infrastructure.single_flight import SingleFlight

logger = get_logger(__name__, ComponentType.RETRIEVER)


def parse_term_uri(term: str) -> SplitResult:
    """
    Check that a field value is an absolute URI.

    Raises:
        NotAUriError: no scheme, embedded whitespace or control characters,
            or not parseable
    """
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in term):
        raise NotAUriError("Contains whitespace or control characters", value=term)
    try:
        parts = urlsplit(term)
    except ValueError as e:
        raise NotAUriError(str(e), value=term) from e
    if not parts.scheme:
        raise NotAUriError("No scheme", value=term)
    return parts


def build_retrieval_url(config: VocabularyFieldConfig, term_uri: str) -> str:
    """Strip the configured prefix from the term and substitute it for {0}."""
    term = term_uri
    if config.prefix and term.startswith(config.prefix):
        term = term[len(config.prefix):]
    return config.retrieval_uri.replace("{0}", term)


class TermRetriever:
    """
    Fetches and stores normalized vocabulary terms.

    Collaborators:
        store: anything with get_value(uri) and save_value(uri, value)
    """

    def __init__(
        self,
        store: Any,
        defaults: Optional[RetrievalDefaults] = None,
        response_filter: Optional[ResponseFilter] = None,
        flights: Optional[SingleFlight] = None,
    ):
        self.store = store
        self.defaults = defaults or get_defaults().retrieval
        self.response_filter = response_filter or get_filter()
        self.flights = flights or SingleFlight("term-retrieval")

    def resolve(self, config: VocabularyFieldConfig, term_uri: Optional[str]) -> RetrievalOutcome:
        """
        Make sure term_uri has a stored normalized value.

        Raises:
            RepositoryError: store lookup or write failed
        """
        if term_uri is None or not term_uri.strip():
            logger.debug("Ignoring blank term")
            return RetrievalOutcome.SKIPPED_BLANK

        try:
            parse_term_uri(term_uri)
        except NotAUriError as e:
            logger.debug(f"Term is not a URI: {term_uri} ({e})")
            return RetrievalOutcome.NOT_A_URI

        with log_context(field_name=config.field_name, term_uri=term_uri):
            return self.flights.do(term_uri, lambda: self._resolve_once(config, term_uri))

    def _resolve_once(self, config: VocabularyFieldConfig, term_uri: str) -> RetrievalOutcome:
        if self.store.get_value(term_uri) is not None:
            logger.debug(f"Already resolved: {term_uri}")
            return RetrievalOutcome.ALREADY_RESOLVED

        url = build_retrieval_url(config, term_uri)
        logger.info(f"Didn't find {term_uri}, calling {url}")

        try:
            response = self.fetch(url)
        except RetrievalError as e:
            logger.warning(f"Error retrieving {url}: {e}")
            if e.status_code is not None:
                return RetrievalOutcome.HTTP_ERROR
            return RetrievalOutcome.TRANSPORT_ERROR

        try:
            document = response.json()
        except (ValueError, RecursionError) as e:
            logger.warning(f"Unparseable response from {url}: {e}")
            return RetrievalOutcome.PARSE_ERROR

        if json_kind(document) is not JsonKind.OBJECT:
            logger.warning(f"Response from {url} is a JSON {json_kind(document).value}, expected object")
            return RetrievalOutcome.PARSE_ERROR

        filtered = self.response_filter.filter(config, document, term_uri)
        if self.store.save_value(term_uri, json.dumps(filtered, ensure_ascii=False, separators=(",", ":"))):
            logger.info(f"Wrote value for term: {term_uri}")
            return RetrievalOutcome.RESOLVED
        return RetrievalOutcome.ALREADY_RESOLVED

    def fetch(self, url: str) -> httpx.Response:
        """
        GET a vocabulary service URL.

        Raises:
            RetrievalError: non-200 status (status_code set), or transport
                failure/timeout (status_code None)
        """
        headers = {
            "Accept": self.defaults.accept_header,
            "User-Agent": self.defaults.user_agent,
        }
        try:
            with httpx.Client(
                timeout=self.defaults.timeout(),
                headers=headers,
                follow_redirects=self.defaults.follow_redirects,
            ) as client:
                response = client.get(url)
        except httpx.TimeoutException as e:
            raise RetrievalError(f"Timed out: {e}", url=url) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RetrievalError(f"Transport failure: {e}", url=url) from e

        if response.status_code != 200:
            raise RetrievalError(
                f"Received response code {response.status_code}: {response.text[:200]}",
                url=url,
                status_code=response.status_code,
            )
        return response


__all__ = [
    "TermRetriever",
    "parse_term_uri",
    "build_retrieval_url",
]
