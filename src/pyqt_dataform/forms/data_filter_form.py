"""Filter form: a builder over a search DTO with set/empty notifications."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from pyqt_dataform.core.object_utils import is_empty
from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)


@dataclass
class DataFilterFormActions:
    """Callbacks fired by ``DataFilterForm.set_filter()``.

    Attributes:
        on_change: Always called; receives the DTO when a filter is set, else None
        on_set: Called when at least one filter is non-empty
        on_empty: Called when every filter is empty
    """
    on_change: Optional[Callable[[Optional[Dict[str, Any]]], Any]] = None
    on_set: Optional[Callable[[Dict[str, Any]], Any]] = None
    on_empty: Optional[Callable[[Dict[str, Any]], Any]] = None


@dataclass
class DataFilterFormConfig:
    """Configuration of a filter form.

    Attributes:
        builder: Keyword arguments for the ``DataFormBuilder``
        actions: Change notifications
        search_field: Field holding the free-text search, if any
        check_empty: ``(field, value) -> bool`` replacing the default emptiness check
    """
    builder: Dict[str, Any] = field(default_factory=dict)
    actions: Optional[DataFilterFormActions] = None
    search_field: Optional[str] = None
    check_empty: Optional[Callable[[str, Any], bool]] = None


class DataFilterForm:
    """Tracks whether any filter of a search DTO is set."""

    def __init__(self, fields: Dict[str, Any], config: Optional[DataFilterFormConfig] = None):
        self.fields = fields
        self.config = config or DataFilterFormConfig()
        self.builder = DataFormBuilder(fields, **self.config.builder)

    @property
    def is_set_filter(self) -> bool:
        return any(not self.is_empty(name) for name in self.fields)

    def is_empty(self, field: str) -> bool:
        value = self.fields.get(field)
        if self.config.check_empty is not None:
            return self.config.check_empty(field, value)
        return is_empty(value)

    def set_filter(self, fields: Optional[Dict[str, Any]] = None) -> None:
        """Fire ``on_change`` and exactly one of ``on_set`` / ``on_empty``."""
        is_set = self.is_set_filter
        fields = fields or self.fields
        actions = self.config.actions or DataFilterFormActions()
        logger.debug(f"Filter changed: set={is_set}")

        if actions.on_change is not None:
            actions.on_change(fields if is_set else None)

        if is_set:
            if actions.on_set is not None:
                actions.on_set(fields)
        elif actions.on_empty is not None:
            actions.on_empty(fields)
