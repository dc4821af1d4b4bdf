"""
Form compilation and lifecycle.

DataFormBuilder and supporting infrastructure for compiling declarative
field descriptors into renderable builds.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .data_form_builder import DataFormBuilder
    from .base_data_form import BaseDataForm, FormState
    from .data_filter_form import DataFilterForm, DataFilterFormConfig, DataFilterFormActions
    from .field_descriptor import FieldDescriptor, FieldGroup, GroupBuild, AutocompleteConfig, with_defaults
    from .selection_types import RecordMap, ListSource, SelectionSource, to_selection_source
    from .snippet_registry import (
        SnippetMeta,
        EMBED_SNIPPETS,
        DataFieldSnippet,
        get_snippet_class,
    )
    from .renderer_registry import RENDERER_REGISTRY, DataFieldRenderer, register_renderer
    from .field_presets import (
        search_context,
        search_lookup,
        search_lookup_autocomplete,
        get_autocomplete,
        get_manual_switcher,
        get_autocomplete_switcher,
        get_author_date_fieldset,
        get_author_fields,
    )

_EXPORTS = {
    "DataFormBuilder": ("pyqt_dataform.forms.data_form_builder", "DataFormBuilder"),
    "BaseDataForm": ("pyqt_dataform.forms.base_data_form", "BaseDataForm"),
    "FormState": ("pyqt_dataform.forms.base_data_form", "FormState"),
    "DataFilterForm": ("pyqt_dataform.forms.data_filter_form", "DataFilterForm"),
    "DataFilterFormConfig": ("pyqt_dataform.forms.data_filter_form", "DataFilterFormConfig"),
    "DataFilterFormActions": ("pyqt_dataform.forms.data_filter_form", "DataFilterFormActions"),
    "FieldDescriptor": ("pyqt_dataform.forms.field_descriptor", "FieldDescriptor"),
    "FieldGroup": ("pyqt_dataform.forms.field_descriptor", "FieldGroup"),
    "GroupBuild": ("pyqt_dataform.forms.field_descriptor", "GroupBuild"),
    "AutocompleteConfig": ("pyqt_dataform.forms.field_descriptor", "AutocompleteConfig"),
    "with_defaults": ("pyqt_dataform.forms.field_descriptor", "with_defaults"),
    "is_selection_type": ("pyqt_dataform.forms.field_descriptor", "is_selection_type"),
    "is_multi_selection_type": ("pyqt_dataform.forms.field_descriptor", "is_multi_selection_type"),
    "is_date_type": ("pyqt_dataform.forms.field_descriptor", "is_date_type"),
    "RecordMap": ("pyqt_dataform.forms.selection_types", "RecordMap"),
    "ListSource": ("pyqt_dataform.forms.selection_types", "ListSource"),
    "SelectionSource": ("pyqt_dataform.forms.selection_types", "SelectionSource"),
    "to_selection_source": ("pyqt_dataform.forms.selection_types", "to_selection_source"),
    "SnippetMeta": ("pyqt_dataform.forms.snippet_registry", "SnippetMeta"),
    "EMBED_SNIPPETS": ("pyqt_dataform.forms.snippet_registry", "EMBED_SNIPPETS"),
    "DataFieldSnippet": ("pyqt_dataform.forms.snippet_registry", "DataFieldSnippet"),
    "get_snippet_class": ("pyqt_dataform.forms.snippet_registry", "get_snippet_class"),
    "RENDERER_REGISTRY": ("pyqt_dataform.forms.renderer_registry", "RENDERER_REGISTRY"),
    "DataFieldRenderer": ("pyqt_dataform.forms.renderer_registry", "DataFieldRenderer"),
    "register_renderer": ("pyqt_dataform.forms.renderer_registry", "register_renderer"),
    "CONSTANTS": ("pyqt_dataform.forms.data_form_constants", "CONSTANTS"),
    "search_context": ("pyqt_dataform.forms.field_presets", "search_context"),
    "search_lookup": ("pyqt_dataform.forms.field_presets", "search_lookup"),
    "search_lookup_autocomplete": ("pyqt_dataform.forms.field_presets", "search_lookup_autocomplete"),
    "get_autocomplete": ("pyqt_dataform.forms.field_presets", "get_autocomplete"),
    "get_manual_switcher": ("pyqt_dataform.forms.field_presets", "get_manual_switcher"),
    "get_autocomplete_switcher": ("pyqt_dataform.forms.field_presets", "get_autocomplete_switcher"),
    "get_author_date_fieldset": ("pyqt_dataform.forms.field_presets", "get_author_date_fieldset"),
    "get_author_fields": ("pyqt_dataform.forms.field_presets", "get_author_fields"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())
