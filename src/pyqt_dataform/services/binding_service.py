"""
Renderer-side binding of one field.

A widget painting a field keeps the value it displays, re-reads it through
the field's value getter whenever the field's change ref is bumped, and
reports edits back through the builder's watcher. ``FieldBinding`` is that
contract without a widget: renderers wrap it, tests drive it directly.
"""

import logging
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)


class FieldBinding:
    """
    Display value of one field kept in sync with the DTO.

    A refresh that changes the displayed value fires the field's watcher
    exactly like a user edit would, so ``builder.update()`` writes back
    through the set transform while ``builder.save()`` does not.

    Usage:
        binding = FieldBinding(builder, "name")
        binding.input("Acme")      # user edit -> DTO
        builder.update({"name": "X"})
        binding.value              # "X" (re-read after the ref bump)
    """

    def __init__(self, builder: "DataFormBuilder", field: str):
        self.builder = builder
        self.field = field
        self.value: Any = builder.form.get_input_value(field)
        builder.form.refs.ref_changed.connect(self._on_ref_changed)

    def _on_ref_changed(self, field: str, counter: int) -> None:
        if field == self.field:
            self.refresh()

    def refresh(self) -> bool:
        """Re-read the display value; returns True if it changed."""
        value = self.builder.form.get_input_value(self.field)
        if value == self.value:
            return False
        old_value, self.value = self.value, value
        logger.debug(f"Binding '{self.field}' refreshed: {old_value!r} -> {value!r}")
        self.builder.form.set_input_value(self.field, value, old_value)
        return True

    def input(self, value: Any) -> None:
        """Simulate a user edit of the widget."""
        old_value, self.value = self.value, value
        self.builder.form.set_input_value(self.field, value, old_value)

    def close(self) -> None:
        try:
            self.builder.form.refs.ref_changed.disconnect(self._on_ref_changed)
        except TypeError:
            # Signal not connected - ignore
            pass
