"""
Lifecycle wrapper around one data form builder for one entity.

State machine:
    UNINITIALIZED -> INITIALIZED (DTO set, no builder)
                  -> BUILT (builder present)
                  -> SUBMITTING -> BUILT (accepted or rejected)

The form owns the working DTO and a pristine snapshot of it. Resets restore
the DTO's contents in place, so anything bound to the DTO object keeps
tracking it.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from pyqt_dataform.core import object_utils
from pyqt_dataform.exceptions import ValidationError
from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)

OnCreate = Callable[[DataFormBuilder], Optional[Awaitable[None]]]


class FormState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    BUILT = "built"
    SUBMITTING = "submitting"


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class BaseDataForm(ABC):
    """
    Base class for entity forms.

    Subclasses declare ``data_fields`` (a mapping, or a coroutine producing
    one) and implement ``on_submit()``.

    Example:
        class UnitForm(BaseDataForm):
            data_fields = {"name": {"rules": ["required"]}}

            async def on_submit(self):
                return await repo.save(self.fields)

        form = UnitForm({"name": None})
        await form.create_form()
        result = await form.submit()
    """

    def __init__(self, fields: Dict[str, Any]):
        self._fields = fields
        self._field_store = object_utils.copy(fields)
        self._builder: Optional[DataFormBuilder] = None
        self._errors: Optional[Dict[str, List[str]]] = None
        self._state = FormState.UNINITIALIZED

    @property
    @abstractmethod
    def data_fields(self) -> Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]]:
        """Declared field descriptors of the entity."""
        pass

    @property
    def fields(self) -> Dict[str, Any]:
        return self._fields

    @property
    def builder(self) -> Optional[DataFormBuilder]:
        return self._builder

    @property
    def form(self) -> Optional[DataFormBuilder]:
        return self._builder

    @property
    def errors(self) -> Optional[Dict[str, List[str]]]:
        return self._errors

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def readonly(self) -> bool:
        return False

    def _restore_fields(self) -> None:
        self._fields.clear()
        self._fields.update(object_utils.copy(self._field_store))

    def init(self, fields: Optional[Mapping[str, Any]] = None, copy: bool = True) -> "BaseDataForm":
        """Restore the pristine DTO, drop the builder and errors, then apply overrides."""
        self._restore_fields()
        self._builder = None
        self._errors = None
        self._state = FormState.INITIALIZED

        if fields:
            self.set_fields(fields, copy)
        return self

    def set_fields(self, fields: Mapping[str, Any], copy: bool = True) -> None:
        self._fields.update(object_utils.copy(dict(fields)) if copy else fields)

    async def create_form(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        on_create: Optional[OnCreate] = None,
        data_fields: Optional[Mapping[str, Any]] = None,
    ) -> DataFormBuilder:
        """
        Create the builder for the working DTO.

        Args:
            defaults: Builder-wide descriptor defaults (``readonly`` defaults to
                the form's flag)
            on_create: Hook called with the builder after ``on_create_form``
            data_fields: Extra descriptors merged over the declared ones
        """
        declared = await _maybe_await(self.data_fields)
        self._builder = DataFormBuilder(
            self._fields,
            data_fields={**declared, **(data_fields or {})},
            defaults={"readonly": self.readonly, **(defaults or {})},
        )
        self._builder = await self.on_create_form(self._builder)
        self._state = FormState.BUILT

        if on_create is not None:
            await _maybe_await(on_create(self._builder))
        return self._builder

    async def submit(self) -> Any:
        """
        Validate, then run ``on_submit()``.

        Returns:
            The (awaited) result of ``on_submit()``, or None when validation
            failed (errors are stored and ``on_errors()`` is called)
        """
        self._errors = None
        previous = self._state
        self._state = FormState.SUBMITTING
        try:
            if self._builder is not None and self._builder.validator is not None:
                try:
                    await self._builder.validator.validate()
                except ValidationError as error:
                    self._errors = error.errors
                    logger.error(f"Form validation failed: {error.errors}")
                    self.on_errors()
                    return None
            return await _maybe_await(self.on_submit())
        finally:
            self._state = previous

    async def reset(self) -> None:
        """Restore the pristine DTO in place and re-run the builder hook."""
        self._restore_fields()
        if self._builder is not None:
            self._builder.update(self._fields)
            await self.on_create_form(self._builder)

    async def on_create_form(self, form: DataFormBuilder) -> DataFormBuilder:
        """Customization hook for subclasses; must return the builder."""
        return form

    @abstractmethod
    def on_submit(self) -> Any:
        """Domain submit action; may be a coroutine."""
        pass

    def on_errors(self) -> None:
        """Called after a rejected submit with ``errors`` populated."""
        pass
