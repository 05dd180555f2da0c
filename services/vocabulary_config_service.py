# ============================================================================
# VOCABULARY CONFIG CACHE
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Service - Configuration snapshot management
# PURPOSE: Parse the :CVocConf setting once per content change
# CREATED: 04 MAR 2026
# ============================================================================
"""
Vocabulary Config Cache

Turns the raw :CVocConf setting into a read-only mapping
field_type_id -> VocabularyFieldConfig, re-parsing only when the setting
text changes.

Snapshot lifecycle:
    - absent or empty setting   -> empty mapping, snapshot cleared
    - same content hash         -> stored mapping returned (same object)
    - new content               -> parsed, swapped in atomically
    - invalidate()              -> next call re-parses

Readers never lock. Writers take the lock and re-check the hash, so
concurrent callers with the same new content parse it once.

Bad entries are skipped with a warning; the cache never raises.
"""

import hashlib
import json
import threading
from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Optional

from pydantic import ValidationError

from core.config import get_defaults
from core.contracts import JsonKind, json_kind
from core.errors import ConfigParseError, FieldResolutionError
from core.logging import get_logger, ComponentType
from core.models.field_type import DatasetFieldType
from core.models.vocabulary_config import VocabularyFieldConfig
from infrastructure.base_repository import RepositoryError

logger = get_logger(__name__, ComponentType.SERVICE)

ConfigMap = Mapping[int, VocabularyFieldConfig]

_EMPTY: ConfigMap = MappingProxyType({})


class ConfigSnapshot(NamedTuple):
    """Parsed configuration and the hash of the text it came from."""
    content_hash: str
    configs: ConfigMap


def content_hash(raw: str) -> str:
    """SHA-256 hex digest of the raw setting text."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class VocabularyConfigCache:
    """
    Content-hash keyed cache of parsed vocabulary configuration.

    Collaborators:
        settings:    anything with get_value(name) -> Optional[str]
        field_types: anything with find_by_name(name) -> Optional[DatasetFieldType]
    """

    def __init__(self, settings: Any, field_types: Any, settings_key: Optional[str] = None):
        self.settings = settings
        self.field_types = field_types
        self.settings_key = settings_key or get_defaults().vocabulary.settings_key
        self._lock = threading.Lock()
        self._snapshot: Optional[ConfigSnapshot] = None

    @property
    def snapshot(self) -> Optional[ConfigSnapshot]:
        return self._snapshot

    def get_config(self) -> ConfigMap:
        """
        Current configuration, keyed by owning field type id.

        Returns:
            Read-only mapping; empty when unset, unparseable, or unreadable.
        """
        try:
            raw = self.settings.get_value(self.settings_key)
        except RepositoryError as e:
            logger.error(f"Could not read {self.settings_key}: {e}")
            return _EMPTY

        if raw is None or not raw.strip():
            self._snapshot = None
            return _EMPTY

        digest = content_hash(raw)
        snapshot = self._snapshot
        if snapshot is not None and snapshot.content_hash == digest:
            return snapshot.configs

        with self._lock:
            snapshot = self._snapshot
            if snapshot is not None and snapshot.content_hash == digest:
                return snapshot.configs

            try:
                configs = self._parse(raw)
            except RepositoryError as e:
                logger.error(f"Field type lookup failed while loading {self.settings_key}: {e}")
                return _EMPTY

            snapshot = ConfigSnapshot(digest, MappingProxyType(configs))
            self._snapshot = snapshot

        logger.info(f"Loaded external vocabulary configuration for {len(snapshot.configs)} field(s)")
        return snapshot.configs

    def invalidate(self) -> None:
        """Drop the snapshot so the next get_config() re-parses."""
        with self._lock:
            self._snapshot = None
        logger.debug("External vocabulary configuration invalidated")

    # =========================================================================
    # PARSING
    # =========================================================================

    def _parse(self, raw: str) -> Dict[int, VocabularyFieldConfig]:
        try:
            entries = parse_document(raw)
        except ConfigParseError as e:
            logger.warning(f"Ignoring External Vocabulary setting due to parsing error: {e}")
            return {}

        configs: Dict[int, VocabularyFieldConfig] = {}
        for position, entry in enumerate(entries):
            if json_kind(entry) is not JsonKind.OBJECT or "field-name" not in entry:
                logger.warning(f"Ignoring External Vocabulary entry {position}: no field-name")
                continue
            try:
                config = self._load_entry(entry)
            except FieldResolutionError as e:
                logger.warning(f"Ignoring External Vocabulary setting for non-existent field: {e.field_name}")
                continue
            except ValidationError as e:
                logger.warning(
                    f"Ignoring External Vocabulary setting for {entry.get('field-name')}: "
                    f"{e.error_count()} validation error(s)"
                )
                continue
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring External Vocabulary setting for {entry.get('field-name')}: {e}")
                continue
            configs[config.field_type_id] = config
        return configs

    def _load_entry(self, entry: Dict[str, Any]) -> VocabularyFieldConfig:
        """
        Resolve one entry's field names and build its config.

        Raises:
            FieldResolutionError: owning field does not exist
            ValidationError: entry is malformed
        """
        field_name = entry["field-name"]
        owner = self._find(field_name)
        if owner is None:
            raise FieldResolutionError(f"No field type named {field_name}", field_name=field_name)

        term_uri_type_id: Optional[int] = None
        term_uri_field = entry.get("term-uri-field")
        if term_uri_field is not None:
            term_uri_type_id = self._resolve_term_uri_field(owner, term_uri_field)

        child_fields = entry.get("child-fields")
        if json_kind(child_fields) is JsonKind.ARRAY:
            for child_name in child_fields:
                child = self._find(child_name)
                if child is None:
                    logger.warning(f"Ignoring External Vocabulary setting for non-existent child field: {child_name}")
                else:
                    logger.debug(f"Found child field: {child.name}")
        elif child_fields is not None:
            logger.warning(f"child-fields of {field_name} is not an array, child checks skipped")

        return VocabularyFieldConfig.from_wire(entry, owner.id, term_uri_type_id)

    def _resolve_term_uri_field(self, owner: DatasetFieldType, term_uri_field: Any) -> Optional[int]:
        if not owner.has_children:
            if term_uri_field == owner.name:
                logger.info(f"Found primitive field for term uri: {owner.name}")
            return owner.id

        child = self._find(term_uri_field)
        if child is None:
            logger.warning(f"Ignoring External Vocabulary setting for non-existent child field: {term_uri_field}")
            return None

        logger.info(f"Found term child field: {child.name}")
        if not child.is_child_of(owner):
            logger.warning(
                f"Term URI field ({child.display_name or child.name}) not a child of parent: "
                f"{owner.display_name or owner.name}"
            )
        return child.id

    def _find(self, name: Any) -> Optional[DatasetFieldType]:
        if not isinstance(name, str):
            return None
        return self.field_types.find_by_name(name)


def parse_document(raw: str) -> list:
    """
    Decode the setting text into its list of entries.

    Raises:
        ConfigParseError: not valid JSON, or not a JSON array
    """
    try:
        document = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise ConfigParseError(str(e)) from e

    if json_kind(document) is not JsonKind.ARRAY:
        raise ConfigParseError(f"expected an array, found {json_kind(document).value}")
    return document


__all__ = [
    "ConfigMap",
    "ConfigSnapshot",
    "VocabularyConfigCache",
    "content_hash",
    "parse_document",
]
