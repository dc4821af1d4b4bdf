"""
Renderer registry with explicit kind-based dispatch.

Maps a widget kind (the part of a field's data type before ':') to the
PyQt6 widget class that paints it. The core only selects a registry key and
hands back the class; instantiating and painting the widget is the
renderer's job.

Design:
- RENDERER_REGISTRY: kind -> widget class mapping
- Read-only descriptors always map to the read-only renderer
- Fail-loud if a kind is not registered
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QRadioButton,
)

from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.forms.field_descriptor import FieldDescriptor

logger = logging.getLogger(__name__)

# Kind-based renderer dispatch - NO DUCK TYPING
RENDERER_REGISTRY: Dict[str, Any] = {
    "input": QLineEdit,
    "textarea": QPlainTextEdit,
    "select": QComboBox,
    CONSTANTS.READONLY_KIND: QLabel,
    "date": QDateEdit,
    "radio": QRadioButton,
    "checkbox": QCheckBox,
}

# Input sub-types the input renderer switches on
INPUT_SUB_TYPES: Dict[str, str] = {
    CONSTANTS.INPUT_PASSWORD: "password",
    CONSTANTS.INPUT_EMAIL: "email",
    CONSTANTS.INPUT_NUMBER: "number",
    CONSTANTS.INPUT_DECIMAL: "number",
    CONSTANTS.INPUT_CHECKBOX: "checkbox",
}


@dataclass
class DataFieldRenderer:
    """A component reference plus the props it is rendered with."""
    component: Any
    props: Optional[Dict[str, Any]] = None


def register_renderer(kind: str, component: Any) -> None:
    """
    Register (or replace) the component rendering a widget kind.

    Example:
        >>> register_renderer("select", MySearchableComboBox)
    """
    if kind in RENDERER_REGISTRY:
        logger.warning(f"Overwriting renderer for kind '{kind}' with {component!r}")
    RENDERER_REGISTRY[kind] = component
    logger.debug(f"Registered renderer for kind '{kind}'")


def get_renderer_component(kind: str) -> Any:
    """
    Get the component registered for a widget kind.

    Raises:
        KeyError: If the kind is not registered
    """
    if kind not in RENDERER_REGISTRY:
        raise KeyError(
            f"No renderer registered for kind '{kind}'. "
            f"Available kinds: {list(RENDERER_REGISTRY.keys())}"
        )
    return RENDERER_REGISTRY[kind]


def resolve_renderer(data: FieldDescriptor) -> DataFieldRenderer:
    """Pick the renderer for a compiled descriptor."""
    if data.readonly:
        return DataFieldRenderer(component=get_renderer_component(CONSTANTS.READONLY_KIND))
    if data.is_date:
        # Instant date widgets commit every edit, others on editing finished
        return DataFieldRenderer(component=get_renderer_component(data.kind), props={"instant": bool(data.instant)})
    return DataFieldRenderer(component=get_renderer_component(data.kind))


def get_input_sub_type(data: FieldDescriptor) -> Optional[str]:
    """Input sub-type for ``input:*`` data types, None otherwise."""
    return INPUT_SUB_TYPES.get(data.data_type or "")
