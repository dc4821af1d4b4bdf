"""
Tagged union for selection sources.

A select-type field gets its options from a ``selection`` factory. The
factory may return either of:

- ``RecordMap``: a ready ``value -> label`` mapping (static options)
- ``ListSource``: a list of records plus the names of their value and label
  keys (dictionary lookups, search results)

A plain mapping returned by a factory is accepted as a ``RecordMap``.
``ListSource`` is also the canonical *selection context* handed to the
transform pipeline.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordMap:
    """Static ``value -> label`` options."""
    records: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ListSource:
    """Record list with the keys holding each option's value and label."""
    items: List[Any]
    value_key: str
    label_key: str


SelectionSource = Union[RecordMap, ListSource]


def to_selection_source(value: Any) -> SelectionSource:
    """
    Normalize whatever a selection factory produced.

    Args:
        value: Factory result (already awaited)

    Returns:
        ``RecordMap`` or ``ListSource``; unsupported shapes become an empty
        ``RecordMap``
    """
    if isinstance(value, (RecordMap, ListSource)):
        return value
    if value is None:
        return RecordMap()
    if isinstance(value, Mapping):
        return RecordMap({str(key): label for key, label in value.items()})
    logger.warning(
        f"Unsupported selection source {type(value).__name__}; "
        f"return a mapping or use the make() helper. Treating as empty."
    )
    return RecordMap()
