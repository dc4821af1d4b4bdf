"""
Plain-object helpers shared by the builder and the services.

DTOs, selection lists and records are plain mappings and lists; these helpers
keep copying, keying and emptiness checks consistent everywhere.
"""

import copy as _copy
import math
import random
import string
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Union

_NODE_ID_ALPHABET = string.ascii_lowercase + string.digits


def copy(value: Any) -> Any:
    """Deep copy a DTO or any nested value."""
    return _copy.deepcopy(value)


def is_plain_object(value: Any) -> bool:
    """True for mapping values (the Python counterpart of a plain record)."""
    return isinstance(value, Mapping)


def is_empty(value: Any) -> bool:
    """
    Check whether a filter/DTO value counts as empty.

    None, blank strings, and empty collections are empty. Numbers and
    booleans (including 0 and False) are values.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def is_missing(value: Any) -> bool:
    """True for None and NaN, the values a record key can never take."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def to_number(value: Any) -> Optional[Union[int, float]]:
    """
    Parse a UI value as a number.

    Integral strings stay integers ("3" -> 3), everything else numeric is a
    float. Unparsable values yield None.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def uniq_by(items: Iterable[Any], key: str) -> List[Any]:
    """Drop items whose ``key`` value was already seen (first one wins)."""
    seen = set()
    out = []
    for item in items:
        marker = item.get(key) if is_plain_object(item) else item
        marker = str(marker)
        if marker in seen:
            continue
        seen.add(marker)
        out.append(item)
    return out


def records(items: Iterable[Any], value_key: str, label_key: str) -> Dict[str, Any]:
    """
    Build a ``value -> label`` record map from a list of mappings.

    Keys are stringified so that lookups from widget values (always text)
    and from typed DTO values hit the same entry. Items without a value are
    skipped; duplicates keep the first label.
    """
    out: Dict[str, Any] = {}
    for item in items or []:
        if not is_plain_object(item):
            continue
        value = item.get(value_key)
        if is_missing(value):
            continue
        out.setdefault(str(value), item.get(label_key))
    return out


def random_node_id(length: int = 5) -> str:
    """Short random identifier used to namespace form, field and group ids."""
    return "".join(random.choices(_NODE_ID_ALPHABET, k=length))


def parse_float(value: Any) -> Optional[float]:
    """Parse a UI value as a float; None for empty or unparsable input."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if value is None:
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return None if math.isnan(number) else number
