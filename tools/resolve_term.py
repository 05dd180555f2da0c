#!/usr/bin/env python3
# ============================================================================
# CLI TERM RESOLUTION TOOL
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Tool - Resolve one term against a local configuration file
# PURPOSE: Try a :CVocConf entry without a database
# CREATED: 05 MAR 2026
# ============================================================================
"""
Resolve a term URI using a local vocabulary configuration file.

Does what a field save does, against in-memory stores:
1. Loads the configuration array from --config
2. Registers --term as a value of --field (fetching it over HTTP)
3. Prints the normalized JSON that would be stored

Usage:
    python -m tools.resolve_term --config cvoc.json --field subject \\
        --term https://vocab.example/123

    # Also print the search strings
    python -m tools.resolve_term -c cvoc.json -f keyword -t https://... --strings

Exit status is 0 when the term resolved, 1 otherwise.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import get_defaults
from core.contracts import RetrievalOutcome
from core.logging import configure_logging
from core.models import DatasetField, DatasetFieldCompoundValue, DatasetFieldType
from services import ExternalVocabularyService


# ============================================================================
# IN-MEMORY COLLABORATORS
# ============================================================================

class MemorySettings:
    """Single-key settings source."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(values or {})

    def get_value(self, name: str) -> Optional[str]:
        return self.values.get(name)


class MemoryFieldTypes:
    """Field type finder over a fixed list."""

    def __init__(self, field_types: List[DatasetFieldType]):
        self.by_name = {ft.name: ft for ft in field_types}

    def find_by_name(self, name: str) -> Optional[DatasetFieldType]:
        return self.by_name.get(name)


class MemoryValueStore:
    """Write-once term store."""

    def __init__(self):
        self.values: Dict[str, Optional[str]] = {}

    def get_value(self, uri: str) -> Optional[str]:
        return self.values.get(uri)

    def save_value(self, uri: str, value: str) -> bool:
        if self.values.get(uri) is not None:
            return False
        self.values[uri] = value
        return True


def field_types_for(entries: List[Any]) -> List[DatasetFieldType]:
    """
    Synthesize field types for every name the configuration mentions.

    An entry whose term-uri-field differs from its field-name becomes a
    compound parent; its term-uri and child fields become children.
    """
    field_types: Dict[str, DatasetFieldType] = {}

    def add(name: str, **kwargs) -> DatasetFieldType:
        if name not in field_types:
            field_types[name] = DatasetFieldType(id=len(field_types) + 1, name=name, **kwargs)
        return field_types[name]

    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("field-name"), str):
            continue
        name = entry["field-name"]
        term_field = entry.get("term-uri-field")
        if not isinstance(term_field, str) or term_field == name:
            add(name)
            continue

        parent = add(name, is_primitive=False, is_compound=True, has_children=True)
        for child in [term_field, *(entry.get("child-fields") or [])]:
            if isinstance(child, str):
                add(child, parent_id=parent.id)

    return list(field_types.values())


def build_field(field_type: DatasetFieldType, term_type: Optional[DatasetFieldType], term: str) -> DatasetField:
    """Field instance holding term in the place the configuration expects it."""
    if field_type.is_primitive or term_type is None:
        return DatasetField(field_type=field_type, values=[term])
    child = DatasetField(field_type=term_type, values=[term])
    return DatasetField(
        field_type=field_type,
        compound_values=[DatasetFieldCompoundValue(children=[child])],
    )


def resolve_term(entries: List[Any], field_name: str, term: str):
    """
    Register term for field_name against in-memory stores.

    Returns:
        (service, outcome) - outcome is None if the field is not configured
    """
    field_types = field_types_for(entries)
    finder = MemoryFieldTypes(field_types)
    settings_key = get_defaults().vocabulary.settings_key

    service = ExternalVocabularyService(
        settings=MemorySettings({settings_key: json.dumps(entries)}),
        field_types=finder,
        store=MemoryValueStore(),
    )

    field_type = finder.find_by_name(field_name)
    if field_type is None:
        return service, None

    config = service.get_config().get(field_type.id)
    if config is None:
        return service, None

    term_type = next(
        (ft for ft in field_types if ft.id == config.term_uri_field_type_id), None
    )
    outcomes = service.register_external_vocab_values(build_field(field_type, term_type, term))
    return service, outcomes.get(term)


def main():
    parser = argparse.ArgumentParser(
        description="Resolve a term URI with a local external vocabulary configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --config cvoc.json --field subject --term https://vocab.example/123
  %(prog)s -c cvoc.json -f keyword -t https://vocab.example/123 --strings
        """,
    )
    parser.add_argument("--config", "-c", required=True, help="Path to the configuration JSON array")
    parser.add_argument("--field", "-f", required=True, help="Configured field-name")
    parser.add_argument("--term", "-t", required=True, help="Term URI to resolve")
    parser.add_argument(
        "--strings", "-s",
        action="store_true",
        help="Also print the strings extracted for search",
    )
    parser.add_argument(
        "--log-level", "-l",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        with open(args.config, encoding="utf-8") as f:
            entries = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: Cannot read configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(entries, list):
        print("ERROR: Configuration must be a JSON array", file=sys.stderr)
        sys.exit(1)

    service, outcome = resolve_term(entries, args.field, args.term)
    if outcome is None:
        print(f"ERROR: No usable configuration for field {args.field}", file=sys.stderr)
        sys.exit(1)

    print(f"Outcome: {outcome.value}", file=sys.stderr)
    if outcome not in (RetrievalOutcome.RESOLVED, RetrievalOutcome.ALREADY_RESOLVED):
        sys.exit(1)

    print(json.dumps(service.get_external_vocabulary_value(args.term), indent=2, ensure_ascii=False))

    if args.strings:
        for text in sorted(service.get_strings_for(args.term)):
            print(f"  {text}")


if __name__ == "__main__":
    main()
