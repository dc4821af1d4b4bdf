"""
pyqt-dataform: declarative data form compiler and runtime binding for PyQt6.

Given a plain DTO and a map of per-field descriptors, the builder produces
renderable form builds and mediates every read and write between the DTO and
the widgets displaying it.

Architecture:
- Tier 1 (Core): Plain-object helpers, date formatting, background tasks
- Tier 2 (Protocols): Label dictionary, date formatter, validator, config
- Tier 3 (Services): Selection resolution, value transforms, locks, snippets
- Tier 4 (Forms): DataFormBuilder, BaseDataForm, DataFilterForm, presets

Key Features:
- Descriptor default-filling as an explicit pure function
- Tagged selection sources (static records or record lists)
- Background selection resolution with deterministic ``ready()``
- One-shot save locks and sticky reset locks per field
- Metaclass-registered embedded snippets
"""

__version__ = "0.1.0"

from .exceptions import DataFormError, SchemaError, SnippetNotDefinedError, ValidationError

__all__ = [
    "__version__",
    "DataFormError",
    "SchemaError",
    "SnippetNotDefinedError",
    "ValidationError",
]
