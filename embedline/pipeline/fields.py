# embedline/pipeline/fields.py
"""Dotted field access on nested documents."""

from __future__ import annotations

from typing import Any, MutableMapping

_MISSING = object()


def get_field(document: MutableMapping[str, Any], path: str, default: Any = _MISSING) -> Any:
    """
    Read a field; "a.b" reads document["a"]["b"].

    A literal top-level key containing dots wins over the nested reading.
    """
    if path in document:
        return document[path]

    current: Any = document
    for part in path.split("."):
        if isinstance(current, MutableMapping) and part in current:
            current = current[part]
        else:
            if default is _MISSING:
                raise KeyError(path)
            return default
    return current


def set_field(document: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write a field, creating intermediate objects for dotted paths."""
    if path in document or "." not in path:
        document[path] = value
        return

    parts = path.split(".")
    current = document
    for part in parts[:-1]:
        nxt = current.get(part)
        if not isinstance(nxt, MutableMapping):
            if nxt is not None:
                raise ValueError(f"Cannot write {path!r}: {part!r} is not an object")
            nxt = {}
            current[part] = nxt
        current = nxt
    current[parts[-1]] = value


def delete_field(document: MutableMapping[str, Any], path: str) -> None:
    """Remove a field if present; dotted paths follow the same rules as get_field."""
    if path in document:
        del document[path]
        return

    parts = path.split(".")
    current: Any = document
    for part in parts[:-1]:
        if not isinstance(current, MutableMapping) or part not in current:
            return
        current = current[part]
    if isinstance(current, MutableMapping):
        current.pop(parts[-1], None)
