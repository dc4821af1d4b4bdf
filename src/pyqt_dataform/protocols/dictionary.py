"""Label dictionary protocol for pluggable field label lookup.

Allows applications to provide their own attribute dictionary (usually backed
by their localization layer) without pyqt-dataform depending on it.
"""

import re
from typing import Dict, Mapping, Optional, Protocol


class LabelDictionaryProtocol(Protocol):
    """Protocol for attribute dictionaries that resolve display labels.

    Example:
        from pyqt_dataform.protocols import register_label_dictionary

        register_label_dictionary(MappingDictionary({"name": "Short name"}))
    """

    def attr(self, field: str) -> Optional[str]:
        """Get the display label for a field.

        Args:
            field: DTO field name

        Returns:
            Label if known, None otherwise
        """
        ...


class MappingDictionary:
    """Label dictionary backed by a plain mapping."""

    def __init__(self, labels: Optional[Mapping[str, str]] = None):
        self._labels: Dict[str, str] = dict(labels or {})

    def attr(self, field: str) -> Optional[str]:
        return self._labels.get(field)

    def update(self, labels: Mapping[str, str]) -> None:
        self._labels.update(labels)


# Global dictionary instance (set by application)
_label_dictionary: Optional[LabelDictionaryProtocol] = None

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def register_label_dictionary(dictionary: Optional[LabelDictionaryProtocol]) -> None:
    """Register a label dictionary implementation.

    Args:
        dictionary: Object implementing LabelDictionaryProtocol, or None
    """
    global _label_dictionary
    _label_dictionary = dictionary


def get_label_dictionary() -> Optional[LabelDictionaryProtocol]:
    """Get the registered label dictionary.

    Returns:
        Registered dictionary or None if not registered
    """
    return _label_dictionary


def format_field_name(name: str) -> str:
    """Convert a field name to Title Case: 'createdBy' / 'created_by' -> 'Created By'"""
    return _CAMEL_BOUNDARY.sub(" ", name).replace("_", " ").strip().title()


def resolve_label(field: str) -> str:
    """Label for a field from the registered dictionary, else its humanized name."""
    dictionary = get_label_dictionary()
    label = dictionary.attr(field) if dictionary is not None else None
    return label if label is not None else format_field_name(field)
