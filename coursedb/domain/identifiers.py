"""Helpers reconciling string course ids with integer user ids."""
from __future__ import annotations

import re
from typing import Any, Iterable, Optional

INT_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_int_id(value: Any) -> Optional[int]:
    """Return the integer form of an identifier, or None when it does not parse.

    Used at every boundary where a course-side id (always a string) points into
    the user keyspace (integers), and for the instructor's integer course list.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not INT_ID_PATTERN.fullmatch(value):
        return None
    return int(value)


def next_counter(values: Iterable[Any]) -> int:
    """Return max(numeric ids) + 1; non-numeric ids count as 0."""
    highest = 0
    for value in values:
        parsed = parse_int_id(value)
        if parsed is not None and parsed > highest:
            highest = parsed
    return highest + 1
