"""Helper functions exposed to documentation templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from jinja2 import Undefined


@dataclass(frozen=True)
class SortedEntry:
    """One mapping entry yielded by :func:`each_sorted`."""

    key: str
    value: Any
    index: int
    first: bool
    last: bool


def each_sorted(mapping: Optional[Mapping[str, Any]]) -> List[SortedEntry]:
    """Return the entries of ``mapping`` ordered alphabetically by key.

    Example::

        {% for entry in each_sorted(action.inputs) %}
        | `{{ entry.key }}` | {{ entry.value.description }} |
        {% endfor %}
    """
    if not is_defined(mapping) or not mapping:
        return []
    keys = sorted(mapping)
    last_index = len(keys) - 1
    return [
        SortedEntry(key=key, value=mapping[key], index=index, first=index == 0, last=index == last_index)
        for index, key in enumerate(keys)
    ]


def handle_new_lines(text: Any, padding: int = 0, newline: bool = False) -> Any:
    """Indent every line of a multi-line string by ``padding`` spaces.

    With ``newline`` set, a YAML literal block marker (``|``) is emitted on its
    own line first so the result can sit after a ``key:`` in a usage snippet.
    Single-line values and non-strings are returned untouched.
    """
    if not isinstance(text, str) or "\n" not in text:
        return text
    pad = " " * padding
    lines = [f"{pad}{line}" for line in text.strip().split("\n")]
    if newline:
        lines[0] = f"|\n{lines[0]}"
    return "\n".join(lines)


def replace_new_lines(text: Any, break_line: bool = False) -> Any:
    """Collapse a multi-line string onto one line for use in table cells."""
    if not isinstance(text, str) or "\n" not in text:
        return text
    separator = "<br>" if break_line else " "
    return separator.join(text.strip().split("\n"))


def is_defined(value: Any) -> bool:
    return value is not None and not isinstance(value, Undefined)


def empty_string(value: Any) -> bool:
    return value == ""


def and_(*values: Any) -> bool:
    return all(bool(value) for value in values)


def or_(*values: Any) -> bool:
    return any(bool(value) for value in values)


def not_(value: Any) -> bool:
    return not value


def eq(left: Any, right: Any) -> bool:
    return left == right


def length(value: Any) -> int:
    """Number of keys or items; undefined values count as empty."""
    if not is_defined(value):
        return 0
    return len(value)


def gt(left: Any, right: Any) -> bool:
    return left > right


def lt(left: Any, right: Any) -> bool:
    return left < right


TEMPLATE_GLOBALS: Dict[str, Callable[..., Any]] = {
    "each_sorted": each_sorted,
    "handle_new_lines": handle_new_lines,
    "replace_new_lines": replace_new_lines,
    "is_defined": is_defined,
    "empty_string": empty_string,
    "and_": and_,
    "or_": or_,
    "not_": not_,
    "eq": eq,
    "len": length,
    "gt": gt,
    "lt": lt,
}

TEMPLATE_FILTERS: Dict[str, Callable[..., Any]] = {
    "handle_new_lines": handle_new_lines,
    "replace_new_lines": replace_new_lines,
}


__all__ = [
    "SortedEntry",
    "TEMPLATE_FILTERS",
    "TEMPLATE_GLOBALS",
    "and_",
    "each_sorted",
    "empty_string",
    "eq",
    "gt",
    "handle_new_lines",
    "is_defined",
    "length",
    "lt",
    "not_",
    "or_",
    "replace_new_lines",
]
