"""
Data form constants for eliminating magic strings throughout the builder and services.

This module centralizes the data type names, id prefixes and embedded snippet
names so that the builder, the services and the presets share a single source
of truth.
"""

from dataclasses import dataclass
from typing import FrozenSet


@dataclass(frozen=True)
class DataFormConstants:
    """
    Centralized constants for data form implementations.

    Categories:
    - Field data types (widget kind plus optional sub-type, ``kind:subtype``)
    - Id generation patterns
    - Embedded snippet names
    - Widget kind names understood by the renderer registry
    """

    # Data type separator: "select:multiple" -> ("select", "multiple")
    DATA_TYPE_SEPARATOR: str = ":"

    # Field data types
    INPUT: str = "input"
    INPUT_NUMBER: str = "input:number"
    INPUT_DECIMAL: str = "input:decimal"
    INPUT_PASSWORD: str = "input:password"
    INPUT_EMAIL: str = "input:email"
    INPUT_CHECKBOX: str = "input:checkbox"
    TEXTAREA: str = "textarea"
    SELECT: str = "select"
    SELECT_MULTIPLE: str = "select:multiple"
    SELECT_BOOLEAN: str = "select:boolean"
    RADIO: str = "radio"
    CHECKBOX: str = "checkbox"
    DATE: str = "date"
    DATE_TIME: str = "date:time"
    DATE_DATETIME: str = "date:datetime"
    DATE_TIMESTAMP: str = "date:timestamp"

    DATE_TYPES: FrozenSet[str] = frozenset({
        "date",
        "date:time",
        "date:datetime",
        "date:timestamp",
    })

    # Default data type filled in by the compiler
    DEFAULT_DATA_TYPE: str = "input"

    # Id generation patterns
    ID_SEPARATOR: str = "_"
    FIELD_PREFIX_SUFFIX: str = "field"
    GROUP_PREFIX_SUFFIX: str = "group"

    # Embedded snippet names
    SNIPPET_PASSWORD: str = "password"
    SNIPPET_FIELDSET: str = "fieldset"
    SNIPPET_SWITCHER: str = "switcher"

    # Widget kind used for every read-only descriptor
    READONLY_KIND: str = "readonly"

    # Boolean select option keys
    BOOLEAN_FALSE_KEY: str = "0"
    BOOLEAN_TRUE_KEY: str = "1"


CONSTANTS = DataFormConstants()
