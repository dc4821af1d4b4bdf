"""
Collaborator protocols and global configuration.

Pluggable contracts for the collaborators the data form core consumes
(label dictionary, date formatter, validator) plus the global config hook.
"""

from .form_config import DataFormConfig, set_form_config, get_form_config
from .dictionary import (
    LabelDictionaryProtocol,
    MappingDictionary,
    register_label_dictionary,
    get_label_dictionary,
    format_field_name,
    resolve_label,
)
from .date_formatter import DateFormatterProtocol, register_date_formatter, get_date_formatter
from .validator import ValidatorProtocol

__all__ = [
    "DataFormConfig",
    "set_form_config",
    "get_form_config",
    "LabelDictionaryProtocol",
    "MappingDictionary",
    "register_label_dictionary",
    "get_label_dictionary",
    "format_field_name",
    "resolve_label",
    "DateFormatterProtocol",
    "register_date_formatter",
    "get_date_formatter",
    "ValidatorProtocol",
]
