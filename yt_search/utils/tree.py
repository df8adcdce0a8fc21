"""Safe navigation and deep search over loosely typed JSON trees."""

from __future__ import annotations

import json
import re
from typing import Any

_MISSING = object()


def dig(tree: Any, *path: str | int, default: Any = None) -> Any:
    """Follow dict keys and list indexes, returning ``default`` on any miss.

    >>> dig({"a": [{"b": 1}]}, "a", 0, "b")
    1
    """
    node = tree
    for step in path:
        if isinstance(step, int) and isinstance(node, list):
            try:
                node = node[step]
            except IndexError:
                return default
        elif isinstance(step, str) and isinstance(node, dict):
            node = node.get(step, _MISSING)
            if node is _MISSING:
                return default
        else:
            return default
    return default if node is None else node


def first_present(tree: Any, *paths: tuple[str | int, ...], default: Any = None) -> Any:
    """Return the first non-empty value found at any of ``paths``."""
    for path in paths:
        value = dig(tree, *path)
        if value not in (None, "", [], {}):
            return value
    return default


def find_first_matching(tree: Any, pattern: str | re.Pattern[str]) -> str | None:
    """Depth-first search for the first string leaf matching ``pattern``.

    Dicts are walked in insertion order and lists in index order; the
    search stops at the first hit.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    stack: list[Any] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            if regex.search(node):
                return node
        elif isinstance(node, dict):
            stack.extend(reversed(list(node.values())))
        elif isinstance(node, list):
            stack.extend(reversed(node))
    return None


def has_badge(tree: Any, marker: str) -> bool:
    """Check whether ``marker`` occurs anywhere in the serialized tree."""
    if not tree:
        return False
    return marker in json.dumps(tree, ensure_ascii=False)


def joined_runs(tree: Any, *path: str | int) -> str:
    """Join the ``runs[].text`` found at ``path`` (or its simpleText)."""
    node = dig(tree, *path, default={})
    if not isinstance(node, dict):
        return ""
    if "simpleText" in node:
        return str(node["simpleText"])
    runs = node.get("runs") or []
    return "".join(str(run.get("text", "")) for run in runs if isinstance(run, dict))
