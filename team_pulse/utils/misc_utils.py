# team_pulse/utils/misc_utils.py
from typing import Any, Sequence, Union

PathSegment = Union[str, int]


def get_path(data: Any, path: Sequence[PathSegment], default: Any = None) -> Any:
    """Reads a nested value from decoded JSON, returning ``default`` when any
    segment is missing or has the wrong shape.

    String segments index mappings, integer segments index lists.
    """
    current = data
    for segment in path:
        if isinstance(segment, int):
            if not isinstance(current, list) or not 0 <= segment < len(current):
                return default
            current = current[segment]
        else:
            if not isinstance(current, dict) or segment not in current:
                return default
            current = current[segment]
    if current is None:
        return default
    return current


def clean_text(value: str) -> str:
    """Trims surrounding whitespace from a form field value."""
    return (value or "").strip()
