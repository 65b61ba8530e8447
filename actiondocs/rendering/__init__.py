"""Template rendering for action and workflow documentation."""

from .helpers import SortedEntry, each_sorted, handle_new_lines, replace_new_lines
from .renderer import GENERATED_NOTICE, TEMPLATES_DIR, DocRenderer

__all__ = [
    "DocRenderer",
    "GENERATED_NOTICE",
    "SortedEntry",
    "TEMPLATES_DIR",
    "each_sorted",
    "handle_new_lines",
    "replace_new_lines",
]
