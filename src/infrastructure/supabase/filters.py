"""Filter values for PostgREST pattern and logic-tree operators."""

import re
from collections.abc import Iterable

# Characters that must be quoted inside an or=(...) logic tree
_RESERVED = re.compile(r'[,.:()"\\\s]')


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the pattern matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def quote_tree_value(value: str) -> str:
    if _RESERVED.search(value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def any_ilike(columns: Iterable[str], term: str) -> str:
    """Logic tree matching ``term`` as a substring of any of the columns."""
    pattern = quote_tree_value(f"*{escape_like(term)}*")
    return ",".join(f"{column}.ilike.{pattern}" for column in columns)
