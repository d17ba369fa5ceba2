"""
Key/value codec for metadata maps.

Labels and annotations are plain string maps on the wire, but while a user is
editing them they live as an ordered list of rows. This module converts between
the two representations.

Rules when turning rows back into a map:
- Keys are trimmed, values are taken verbatim.
- Rows whose trimmed key is empty are dropped.
- If two rows share the same trimmed key, the later row wins.

None of these cases raise; malformed rows are resolved silently.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass


@dataclass(slots=True)
class KeyValuePair:
    """One editable row of a metadata map."""

    key: str = ""
    value: str = ""


def to_pairs(data: Mapping[str, str] | None) -> list[KeyValuePair]:
    """
    Convert a metadata map into an ordered list of editable pairs.

    Order follows the iteration order of the source map. The input is not
    modified and the returned pairs share no state with it.

    Args:
        data: Metadata map (None is treated as empty).

    Returns:
        A new list of KeyValuePair rows.
    """
    if not data:
        return []
    return [KeyValuePair(key=key, value=value) for key, value in data.items()]


def to_map(pairs: Iterable[KeyValuePair]) -> dict[str, str]:
    """
    Convert editable pairs back into a metadata map.

    Args:
        pairs: Rows in display order.

    Returns:
        A new dict keyed by trimmed key; empty keys are skipped and the
        last row wins on duplicate keys.
    """
    result: dict[str, str] = {}
    for pair in pairs:
        key = pair.key.strip()
        if not key:
            continue
        result[key] = pair.value
    return result
