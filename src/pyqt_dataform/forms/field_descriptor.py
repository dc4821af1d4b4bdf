"""
Field descriptors, field groups and default filling.

A ``FieldDescriptor`` is the declarative per-field configuration an
application supplies (usually as a plain dict). Every attribute is optional:
``None`` means "unset", and the compiler fills the required ones through
``with_defaults()`` before a descriptor is ever served to a renderer.

Keys the descriptor does not know are kept as display hints in ``props``
(css classes, icons, masks, widths, ...).
"""

import logging
from collections.abc import Mapping
import dataclasses
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, List, Optional, Union, TYPE_CHECKING

from pyqt_dataform.forms.data_form_constants import CONSTANTS

if TYPE_CHECKING:
    from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)

# (value, descriptor) -> value
ValueTransform = Callable[[Any, "FieldDescriptor"], Any]

# (make, descriptor, search_value) -> mapping | ListSource | awaitable of either
SelectionFactory = Callable[..., Any]


@dataclass
class AutocompleteConfig:
    """Input-time lookup for autocomplete fields.

    Attributes:
        search: ``(query, descriptor) -> list of records`` (may be async)
        value_key: Record key holding the option value
        label_key: Record key holding the option label
    """
    search: Callable[[str, "FieldDescriptor"], Any]
    value_key: str = "id"
    label_key: str = "name"


@dataclass(eq=False)
class FieldDescriptor:
    """Declarative configuration of one form field. See module docstring."""

    id: Optional[str] = None
    field: Optional[str] = None
    label: Optional[str] = None
    data_type: Optional[str] = None
    readonly: Optional[bool] = None
    locale: Optional[str] = None
    rules: Optional[List[Any]] = None
    builder: Optional["DataFormBuilder"] = dataclasses.field(default=None, repr=False)
    validator: Optional[Any] = dataclasses.field(default=None, repr=False)

    # Value transforms and change hooks
    value_getter: Optional[ValueTransform] = dataclasses.field(default=None, repr=False)
    value_setter: Optional[ValueTransform] = dataclasses.field(default=None, repr=False)
    on_set_value: Optional[ValueTransform] = dataclasses.field(default=None, repr=False)
    watcher: Optional[Callable[..., Any]] = dataclasses.field(default=None, repr=False)
    numeric: Optional[bool] = None

    # Selection
    search: Optional[bool] = None
    select_context: Optional[bool] = None
    selection: Optional[SelectionFactory] = dataclasses.field(default=None, repr=False)
    autocomplete: Optional[AutocompleteConfig] = dataclasses.field(default=None, repr=False)

    # Dates
    current_date: Optional[bool] = None
    instant: Optional[bool] = None

    # Visuals
    snippet: Optional[Any] = dataclasses.field(default=None, repr=False)
    fieldset: Optional[List[str]] = None
    switcher: Optional[Callable[["DataFormBuilder"], Any]] = dataclasses.field(default=None, repr=False)
    switcher_texts: Optional[Dict[str, str]] = None
    props: Dict[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Union["FieldDescriptor", Mapping, None]) -> "FieldDescriptor":
        """
        Build a descriptor from a plain mapping.

        Unknown keys become display hints in ``props``; an ``autocomplete``
        mapping becomes an ``AutocompleteConfig``.
        """
        if data is None:
            return cls()
        if isinstance(data, FieldDescriptor):
            return data.copy()

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        props: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "props":
                props.update(value or {})
            elif key in known:
                kwargs[key] = value
            else:
                props[key] = value

        autocomplete = kwargs.get("autocomplete")
        if isinstance(autocomplete, Mapping):
            kwargs["autocomplete"] = AutocompleteConfig(**autocomplete)
        if kwargs.get("fieldset") is not None:
            kwargs["fieldset"] = list(kwargs["fieldset"])
        return cls(**kwargs, props=props)

    def copy(self) -> "FieldDescriptor":
        """Shallow copy with its own ``props`` dict."""
        return replace(self, props=dict(self.props))

    def explicit(self) -> Dict[str, Any]:
        """Attributes that are set (everything except ``None`` and ``props``)."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "props" and getattr(self, f.name) is not None
        }

    def update(self, other: Union["FieldDescriptor", Mapping]) -> "FieldDescriptor":
        """Overwrite with every attribute set on ``other``; hints are merged."""
        other = FieldDescriptor.from_mapping(other)
        for name, value in other.explicit().items():
            setattr(self, name, value)
        self.props.update(other.props)
        return self

    def apply_defaults(self, defaults: Union["FieldDescriptor", Mapping]) -> "FieldDescriptor":
        """Fill only unset attributes from ``defaults``; own hints win."""
        defaults = FieldDescriptor.from_mapping(defaults)
        for name, value in defaults.explicit().items():
            if getattr(self, name) is None:
                setattr(self, name, value)
        self.props = {**defaults.props, **self.props}
        return self

    # ========== DATA TYPE QUERIES ==========

    @property
    def kind(self) -> str:
        """Widget kind part of the data type: 'select:multiple' -> 'select'."""
        return (self.data_type or "").split(CONSTANTS.DATA_TYPE_SEPARATOR)[0]

    @property
    def is_selection(self) -> bool:
        return is_selection_type(self.data_type)

    @property
    def is_multi_selection(self) -> bool:
        return is_multi_selection_type(self.data_type)

    @property
    def is_date(self) -> bool:
        return is_date_type(self.data_type)


def is_selection_type(data_type: Optional[str]) -> bool:
    return bool(data_type) and data_type.startswith(CONSTANTS.SELECT)


def is_multi_selection_type(data_type: Optional[str]) -> bool:
    return data_type == CONSTANTS.SELECT_MULTIPLE


def is_date_type(data_type: Optional[str]) -> bool:
    return data_type in CONSTANTS.DATE_TYPES


def with_defaults(
    partial: Union[FieldDescriptor, Mapping, None],
    *,
    field: str,
    id: str,
    label: Optional[str] = None,
    builder: Optional["DataFormBuilder"] = None,
    validator: Optional[Any] = None,
    locale: Optional[str] = None,
) -> FieldDescriptor:
    """
    Return a complete copy of ``partial`` with the compiler defaults filled.

    Defaults (applied only where unset):
        id         -> ``id`` (stable ``{form}_field_{name}``)
        field      -> ``field``
        label      -> ``label`` (dictionary lookup done by the caller)
        builder    -> back-reference to the owning builder
        validator  -> the builder's validator
        data_type  -> "input" (also replaces an empty string)
        locale     -> builder locale

    The input is never mutated.
    """
    data = FieldDescriptor.from_mapping(partial)

    if data.id is None:
        data.id = id
    if data.field is None:
        data.field = field
    if data.label is None:
        data.label = label
    if data.builder is None:
        data.builder = builder
    if data.validator is None:
        data.validator = validator
    if not data.data_type:
        data.data_type = CONSTANTS.DEFAULT_DATA_TYPE
    if not data.locale:
        data.locale = locale
    return data


@dataclass
class FieldGroup:
    """A renderable section of a form.

    Attributes:
        id: Group id (namespaced with the form id by the builder)
        name: Display name (opaque to the core)
        fields: Field names in render order
        renderer: Optional ``(make, builder) -> DataFieldRenderer`` hook
    """
    id: str = ""
    name: Any = ""
    fields: List[str] = dataclasses.field(default_factory=list)
    css: Optional[Union[str, List[str]]] = None
    wrap_css: Optional[Union[str, List[str]]] = None
    name_css: Optional[Union[str, List[str]]] = None
    bordered: bool = False
    border_top: bool = False
    wide: bool = False
    renderer: Optional[Callable[..., Any]] = None
    expand: Optional[Dict[str, Any]] = None

    @classmethod
    def from_mapping(cls, data: Union["FieldGroup", Mapping]) -> "FieldGroup":
        if isinstance(data, FieldGroup):
            return data
        group = cls(**data)
        group.fields = list(group.fields)
        return group


@dataclass
class GroupBuild:
    """A group with its fields compiled, as handed to the renderer."""
    id: str
    group: FieldGroup
    fields: List[FieldDescriptor]

    @property
    def name(self) -> Any:
        return self.group.name
