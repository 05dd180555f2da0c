# ============================================================================
# JSON PATH WALKER
# ============================================================================
# EPOCH: 1 - EXTERNAL VOCABULARIES
# STATUS: Core - Path parameter resolution
# PURPOSE: Resolve "/a/key=value/b" paths against untyped JSON documents
# CREATED: 04 MAR 2026
# ============================================================================
"""
JSON Path Walker

Pure functions over decoded JSON, dispatching on JsonKind. Every failure
raises PathResolutionError naming the path and the step that failed.

Path grammar:
    path      := "/" step ("/" step)*
    step      := key | key "=" expected
    expected  := "@id" (the term URI being resolved) | any text

All steps but the last move a cursor through the document; the last is
always read as an object member and must yield a string or an array.

Example:
    doc = {"items": [{"id": "x", "label": "A"}, {"id": "y", "label": "B"}]}
    resolve_path(doc, ParamSpec.parse("/items/id=y/label").steps, term_uri)
    -> "B"
"""

from typing import Any, List, Sequence, Union

from core.contracts import JsonKind, json_kind
from core.errors import PathResolutionError
from core.models.vocabulary_config import ID_TOKEN, PathStep

ParamValue = Union[str, List[Any]]


def member(cursor: Any, key: str, path: str = "") -> Any:
    """Object member access."""
    kind = json_kind(cursor)
    if kind is not JsonKind.OBJECT:
        raise PathResolutionError(
            f"Step '{key}' expects an object, found {kind.value}", path=path, step=key
        )
    if key not in cursor:
        raise PathResolutionError(f"No member '{key}'", path=path, step=key)
    return cursor[key]


def select(cursor: Any, step: PathStep, term_uri: str, path: str = "") -> Any:
    """
    Array predicate: first object element whose `key` member equals `expected`.

    An expected value of "@id" matches the term URI, not the literal token.
    """
    step_text = f"{step.key}={step.expected}"
    kind = json_kind(cursor)
    if kind is not JsonKind.ARRAY:
        raise PathResolutionError(
            f"Step '{step_text}' expects an array, found {kind.value}", path=path, step=step_text
        )

    expected = term_uri if step.expected == ID_TOKEN else step.expected
    for element in cursor:
        if json_kind(element) is JsonKind.OBJECT and element.get(step.key) == expected:
            return element

    raise PathResolutionError(
        f"No element where {step.key} is {expected}", path=path, step=step_text
    )


def resolve_path(
    document: Any,
    steps: Sequence[PathStep],
    term_uri: str,
    path: str = "",
) -> ParamValue:
    """
    Walk a path and return the string or array it points at.

    Raises:
        PathResolutionError: any step fails, or the final value is neither
            a string nor an array.
    """
    if not steps:
        raise PathResolutionError("Empty path", path=path)

    cursor = document
    for step in steps[:-1]:
        if step.is_predicate:
            cursor = select(cursor, step, term_uri, path)
        else:
            cursor = member(cursor, step.key, path)

    last = steps[-1].key if not steps[-1].is_predicate else f"{steps[-1].key}={steps[-1].expected}"
    value = member(cursor, last, path)

    kind = json_kind(value)
    if kind is JsonKind.STRING or kind is JsonKind.ARRAY:
        return value

    raise PathResolutionError(
        f"Value at '{last}' is {kind.value}, expected string or array", path=path, step=last
    )


__all__ = ["ParamValue", "member", "select", "resolve_path"]
