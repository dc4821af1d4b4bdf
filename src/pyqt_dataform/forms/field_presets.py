"""
Reusable descriptor fragments.

Each helper returns a plain descriptor mapping (or a mapping of field name
to descriptor) meant to be spread into ``data_fields``:

    data_fields = {
        "country": {**search_lookup(api.countries), "rules": ["required"]},
        "city": get_autocomplete_switcher(api.cities),
        **get_author_date_fieldset(),
    }

``search`` callables follow the async search contract
``search(query, context) -> list of records`` (sync results are accepted).
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from pyqt_dataform.core.object_utils import is_plain_object
from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.forms.field_descriptor import AutocompleteConfig, FieldDescriptor
from pyqt_dataform.protocols.form_config import get_form_config

logger = logging.getLogger(__name__)

Search = Callable[[str, Any], Any]
ContextGetter = Callable[[FieldDescriptor], Any]
ListHook = Callable[[List[Any]], List[Any]]

DEFAULT_VALUE_KEY = "id"
DEFAULT_LABEL_KEY = "name"

SWITCHER_TEXTS: Dict[str, Dict[str, str]] = {
    "en": {
        "text_switcher_on": "Select from dictionary",
        "text_switcher_off": "Type text",
    },
    "ru": {
        "text_switcher_on": "Выбрать из справочника",
        "text_switcher_off": "Ввести текстом",
    },
}


async def search_context(
    search: Search,
    query: str = "",
    context: Any = None,
    label_key: str = DEFAULT_LABEL_KEY,
) -> List[Any]:
    """Run a search and sort its records by label."""
    result = search(query or "", context)
    if inspect.isawaitable(result):
        result = await result
    items = list(result or [])
    return sorted(items, key=lambda item: str(item.get(label_key, "")) if is_plain_object(item) else str(item))


def search_lookup(
    search: Search,
    value_key: str = DEFAULT_VALUE_KEY,
    label_key: str = DEFAULT_LABEL_KEY,
    get_context: Optional[ContextGetter] = None,
    on_get_list: Optional[ListHook] = None,
) -> Dict[str, Any]:
    """
    Dictionary-bound single select backed by an async search.

    Args:
        search: Record lookup
        value_key: Record key holding the option value
        label_key: Record key holding the option label
        get_context: Derives the search context from the descriptor; a falsy
            context yields no options without searching
        on_get_list: Post-processes the found records
    """

    async def selection(make, data: FieldDescriptor, search_value: Optional[str] = None):
        context = None
        if get_context is not None:
            context = get_context(data)
            if not context:
                return make([], value_key, label_key)

        items = await search_context(search, search_value or "", context, label_key)
        return make(on_get_list(items) if on_get_list else items, value_key, label_key)

    return {
        "data_type": CONSTANTS.SELECT,
        "select_context": True,
        "numeric": True,
        "search": True,
        "selection": selection,
    }


def get_autocomplete(search: Search, keys: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Autocomplete fragment; ``keys`` may set ``value_key`` and ``label_key``."""
    keys = dict(keys or {"value_key": DEFAULT_VALUE_KEY, "label_key": DEFAULT_LABEL_KEY})
    return {"autocomplete": AutocompleteConfig(search=search, **keys)}


def search_lookup_autocomplete(
    search: Search,
    get_context: Optional[ContextGetter] = None,
    on_get_list: Optional[ListHook] = None,
) -> Dict[str, Any]:
    """Autocomplete whose lookups go through ``search_context``."""

    async def complete(query: str, data: FieldDescriptor) -> List[Any]:
        context = get_context(data) if get_context is not None else None
        items = await search_context(search, query, context)
        return on_get_list(items) if on_get_list else items

    return get_autocomplete(complete)


def switcher_texts() -> Dict[str, Any]:
    """Captions of the switcher toggle for the configured locale."""
    locale = get_form_config().locale
    return {"switcher_texts": dict(SWITCHER_TEXTS.get(locale, SWITCHER_TEXTS["en"]))}


def get_manual_switcher(assign: Optional[Mapping[str, Any]] = None, iterable: bool = False) -> Dict[str, Any]:
    """
    Switcher to free-text entry.

    Typed text is stored as a label-only record (``{"name": text}``), or a
    one-element list of it when ``iterable``.
    """
    if iterable:
        def setter(value, data):
            return [{DEFAULT_LABEL_KEY: value}] if value else None

        def getter(value, data):
            first = value[0] if isinstance(value, list) and value else None
            return first.get(DEFAULT_LABEL_KEY) if is_plain_object(first) else None
    else:
        def setter(value, data):
            return {DEFAULT_LABEL_KEY: value} if value else None

        def getter(value, data):
            return value.get(DEFAULT_LABEL_KEY) if is_plain_object(value) else None

    def switcher(builder) -> Dict[str, Any]:
        return {"value_setter": setter, "value_getter": getter, **(assign or {})}

    return {"switcher": switcher, **switcher_texts()}


def get_autocomplete_switcher(search: Search, assign: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    return {**search_lookup_autocomplete(search), **get_manual_switcher(assign=assign)}


def _author_name(value, data):
    return value.get(DEFAULT_LABEL_KEY, value) if is_plain_object(value) else value


def _merge(base: Dict[str, Any], assign: Optional[Mapping[str, Any]], props: Dict[str, Any]) -> Dict[str, Any]:
    own = dict(assign or {})
    return {**base, **own, "props": {**props, **(own.get("props") or {})}}


def get_author_date_fieldset(assign: Optional[Mapping[str, Mapping[str, Any]]] = None) -> Dict[str, Dict[str, Any]]:
    """Read-only author/date pairs, each author rendered as a fieldset with its date."""
    assign = assign or {}
    return {
        "created_by": _merge(
            {"fieldset": ["created_by", "created_date"], "value_getter": _author_name},
            assign.get("created_by"),
            {"disabled": True},
        ),
        "created_date": _merge(
            {"data_type": CONSTANTS.DATE},
            assign.get("created_date"),
            {"disabled": True, "show_icon": False},
        ),
        "last_modified_by": _merge(
            {"fieldset": ["last_modified_by", "last_modified_date"], "value_getter": _author_name},
            assign.get("last_modified_by"),
            {"disabled": True, "show_icon": False},
        ),
        "last_modified_date": _merge(
            {"data_type": CONSTANTS.DATE},
            assign.get("last_modified_date"),
            {"disabled": True, "show_icon": False},
        ),
    }


def get_author_fields(assign: Optional[Mapping[str, Mapping[str, Any]]] = None) -> Dict[str, Dict[str, Any]]:
    """Author/date fields rendered separately (no fieldsets)."""
    fields = get_author_date_fieldset(assign)
    fields["created_by"].pop("fieldset", None)
    fields["last_modified_by"].pop("fieldset", None)
    return fields
