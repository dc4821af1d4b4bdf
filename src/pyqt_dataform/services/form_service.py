"""
Selection resolution and value transforms for one data form builder.

This service owns the per-field runtime state of a builder:

- selection sources (what a ``selection`` factory returned, possibly pending)
- selection records (the merged ``value -> label`` cache per field)
- the single change watcher installed per field
- save/reset locks and change refs

and installs the default value transforms (boolean, single select, multi
select, dates) on compiled descriptors. User supplied getters and setters
always win over the defaults.
"""

import asyncio
import inspect
import logging
from collections import deque
from datetime import datetime
from functools import partial
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Union, TYPE_CHECKING

from pyqt_dataform.core import object_utils
from pyqt_dataform.core.background_task import SelectionTaskManager
from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.forms.field_descriptor import FieldDescriptor
from pyqt_dataform.forms.renderer_registry import (
    DataFieldRenderer,
    get_input_sub_type,
    resolve_renderer,
)
from pyqt_dataform.forms.selection_types import (
    ListSource,
    RecordMap,
    SelectionSource,
    to_selection_source,
)
from pyqt_dataform.protocols.date_formatter import get_date_formatter
from pyqt_dataform.protocols.form_config import get_form_config
from pyqt_dataform.services.field_change_dispatcher import FieldChangeDispatcher, FieldChangeEvent
from pyqt_dataform.services.field_lock_service import FieldLockService, LockKind
from pyqt_dataform.services.signal_service import FieldRefs

if TYPE_CHECKING:
    from pyqt_dataform.forms.data_form_builder import DataFormBuilder

logger = logging.getLogger(__name__)

FieldNames = Union[str, Iterable[str], None]

_UNSET = object()


def _as_field_list(fields: FieldNames) -> List[str]:
    if fields is None:
        return []
    if isinstance(fields, str):
        return [fields]
    return list(fields)


class FormService:
    """
    Runtime companion of a ``DataFormBuilder``.

    Attributes:
        builder: Owning builder (its ``fields`` is the DTO)
        refs: Per-field change counters (PyQt6 signal source)
        locks: Save/reset lock state machine
        tasks: Background selection resolution per field
    """

    def __init__(self, builder: "DataFormBuilder"):
        self.builder = builder
        self.refs = FieldRefs()
        self.locks = FieldLockService()
        self.tasks = SelectionTaskManager()

        self._selection_sources: Dict[str, Any] = {}
        self._selection_records: Dict[str, Dict[str, Any]] = {}
        self._watchers: Dict[str, Callable[[Any, Any], None]] = {}

        # Delivery state used by FieldChangeDispatcher
        self._dispatching = False
        self._dispatch_queue: Deque[FieldChangeEvent] = deque()

    # ========== LOCKS ==========

    def save_lock(self, fields: FieldNames) -> None:
        self.locks.lock(LockKind.SAVE, _as_field_list(fields))

    def reset_lock(self, fields: FieldNames) -> None:
        self.locks.lock(LockKind.RESET, _as_field_list(fields))

    def reset_unlock(self, fields: FieldNames) -> None:
        self.locks.unlock(LockKind.RESET, _as_field_list(fields))

    def is_reset_lock(self, field: str) -> bool:
        return self.locks.is_locked(LockKind.RESET, field)

    def is_save_lock(self, field: str) -> bool:
        return self.locks.is_locked(LockKind.SAVE, field)

    # ========== WATCHERS AND VALUES ==========

    def set_watcher(self, field: str, data: FieldDescriptor) -> None:
        """
        Install the single change watcher of a field.

        The watcher notifies the user ``watcher`` hook, then either consumes a
        pending save-lock (no write) or writes the transformed value into the
        DTO and calls ``on_set_value`` with the stored value.
        """

        def watcher(value: Any, old_value: Any) -> None:
            if data.watcher is not None:
                data.watcher(data=data, value=value, old_value=old_value)

            if self.locks.consume(LockKind.SAVE, field):
                logger.debug(f"Save-lock consumed for '{field}', write skipped")
                return

            if data.value_setter is not None:
                stored = data.value_setter(value, data)
            elif data.numeric and not isinstance(value, (dict, list)):
                stored = object_utils.parse_float(value)
            else:
                stored = value

            self.builder.fields[field] = stored

            if data.on_set_value is not None:
                data.on_set_value(stored, data)

        self._watchers[field] = watcher

    def get_watcher(self, field: str) -> Optional[Callable[[Any, Any], None]]:
        return self._watchers.get(field)

    def get_input_value(self, field: Optional[str]) -> Any:
        """DTO value of a field passed through its value getter."""
        if not field:
            return None
        data = self.builder.get_data_field(field)
        value = self.builder.fields.get(field)
        if data is not None and data.value_getter is not None:
            return data.value_getter(value, data)
        return value

    def set_input_value(self, field: str, value: Any, old_value: Any = _UNSET) -> None:
        """
        Renderer entry point for a user edit.

        Args:
            field: DTO field name
            value: New display value
            old_value: Previous display value (defaults to the current one)
        """
        if old_value is _UNSET:
            old_value = self.get_input_value(field)
        FieldChangeDispatcher.instance().dispatch(
            FieldChangeEvent(field=field, value=value, old_value=old_value, source=self)
        )

    def update(self, fields: FieldNames = None) -> None:
        """Bump the change ref of the given fields (every DTO field by default)."""
        keys = _as_field_list(fields) or list(self.builder.fields)
        for key in keys:
            self.refs.bump(key)

    def get_input_ref(self, field: str) -> int:
        return self.refs.get(field)

    # ========== RENDERERS ==========

    def get_renderer(self, data: FieldDescriptor) -> DataFieldRenderer:
        return resolve_renderer(data)

    def get_input_sub_type(self, data: FieldDescriptor) -> Optional[str]:
        return get_input_sub_type(data)

    def get_group_renderer(self, component: Any, props: Optional[Dict[str, Any]] = None) -> DataFieldRenderer:
        return DataFieldRenderer(component=component, props=props)

    # ========== SELECTION SOURCES ==========

    def intersect_boolean_selection(self, data: FieldDescriptor) -> None:
        """Default options and "0"/"1" coercion for ``select:boolean`` fields."""
        if data.data_type != CONSTANTS.SELECT_BOOLEAN:
            return

        if data.selection is None:
            labels = dict(get_form_config().boolean_labels)
            data.selection = lambda make, descriptor, search_value=None: RecordMap(dict(labels))

        if data.value_getter is None:
            data.value_getter = lambda value, descriptor: (
                CONSTANTS.BOOLEAN_TRUE_KEY if value else CONSTANTS.BOOLEAN_FALSE_KEY
            )

        if data.value_setter is None:
            data.value_setter = lambda value, descriptor: bool(object_utils.to_number(value))

    def call_selection(
        self, field: str, data: FieldDescriptor, search_value: Optional[str] = None
    ) -> Any:
        """
        Invoke the ``selection`` factory and store its (possibly pending) result.

        Returns:
            The stored source, or None when the field has no factory
        """
        if data.selection is None:
            return None

        source = data.selection(self.create_selection_source, data, search_value)
        if inspect.isawaitable(source):
            source = self.tasks.ensure_future(source)
        self._selection_sources[field] = source
        logger.debug(f"Selection called for '{field}' (search={search_value!r})")
        return source

    @staticmethod
    def create_selection_source(items: Optional[List[Any]], value_key: str, label_key: str) -> ListSource:
        """The ``make`` helper handed to every selection factory."""
        return ListSource(items=list(items or []), value_key=value_key, label_key=label_key)

    async def get_selection_source(self, field: Optional[str]) -> Any:
        """Await the stored selection source; the resolved value replaces the pending one."""
        if not field:
            return None
        source = self._selection_sources.get(field)
        if not inspect.isawaitable(source):
            return source

        future = asyncio.ensure_future(source)
        if self._selection_sources.get(field) is source:
            self._selection_sources[field] = future
        resolved = await future
        if self._selection_sources.get(field) is future:
            self._selection_sources[field] = resolved
        return resolved

    async def get_selection_context(self, field: Optional[str]) -> Optional[ListSource]:
        """Canonical list+keys context, or None for record maps and missing sources."""
        source = await self.get_selection_source(field)
        if isinstance(source, ListSource):
            return source
        return None

    # ========== SELECTION RECORDS ==========

    def get_selection_records(self, field: Optional[str]) -> Optional[Dict[str, Any]]:
        if not field or field not in self._selection_records:
            return None
        return self._selection_records[field]

    def _merge_records(self, field: str, records: Dict[str, Any]) -> Dict[str, Any]:
        target = self._selection_records.setdefault(field, {})
        target.update(records)
        return target

    async def set_selection_records(self, field: Optional[str], records: Any) -> None:
        """Merge records into the field's cache; lists are mapped through the context first."""
        if not field:
            return
        if isinstance(records, (list, tuple)):
            records = await self.map_selection_records(field, records)
        if not object_utils.is_plain_object(records):
            return
        self._merge_records(field, {str(key): label for key, label in records.items()})

    async def map_selection_records(self, field: Optional[str], items: List[Any]) -> Dict[str, Any]:
        """
        Turn DTO values of a multi-select field into ``value -> label`` records.

        Mappings with a value contribute ``str(value) -> label``; label-only
        stubs are skipped. Scalars are added as their own label unless the
        cache already knows them.
        """
        if not field:
            return {}
        context = await self.get_selection_context(field)
        if context is None:
            return {}

        value_key, label_key = context.value_key, context.label_key
        known = self._selection_records.get(field, {})
        out: Dict[str, Any] = {}
        for item in object_utils.uniq_by(items, value_key):
            if object_utils.is_plain_object(item):
                value = item.get(value_key)
                if object_utils.is_missing(value):
                    continue
                out.setdefault(str(value), item.get(label_key))
            elif not object_utils.is_missing(item) and str(item) not in known:
                out.setdefault(str(item), item)
        return out

    def reset_selection_records(self, field: Optional[str]) -> None:
        if field:
            self._selection_records.pop(field, None)

    async def make_selection(self, field: str) -> Dict[str, Any]:
        """
        Resolve the field's source into its records and install select transforms.

        Records are merged into the cache, never replaced.
        """
        data = self.builder.get_data_field(field)
        source: SelectionSource = to_selection_source(await self.get_selection_source(field))

        if isinstance(source, ListSource):
            records = object_utils.records(source.items, source.value_key, source.label_key)
            self._merge_records(field, records)
            if data is not None:
                self.intersect_selection(field, data, source)
            logger.debug(f"Selection resolved for '{field}': {len(records)} records")
            return records

        self._merge_records(field, source.records)
        return self._selection_records[field]

    def intersect_selection(self, field: str, data: FieldDescriptor, source: ListSource) -> None:
        """Install the default single-select getter and setter."""
        if data.data_type != CONSTANTS.SELECT:
            return

        value_key, label_key = source.value_key, source.label_key
        source_value = self.builder.fields.get(field)
        source_value_label = (
            source_value.get(label_key)
            if object_utils.is_plain_object(source_value) and label_key in source_value
            else None
        )

        def getter(value: Any, descriptor: FieldDescriptor) -> Any:
            if object_utils.is_plain_object(value):
                return value.get(label_key) if data.search else value.get(value_key)
            return value

        def setter(value: Any, descriptor: FieldDescriptor) -> Any:
            if not data.select_context:
                return value
            records = self._selection_records.get(field) or {}
            if value is not None and str(value) in records:
                return {
                    value_key: object_utils.to_number(value) if data.numeric else value,
                    label_key: records[str(value)],
                }
            if value is not None and str(value).strip():
                # Free text equal to the current label keeps the full record
                return source_value if value == source_value_label else {label_key: value}
            return None

        if data.value_getter is None:
            data.value_getter = getter
        if data.value_setter is None:
            data.value_setter = setter

    async def intersect_multi_selection(self, data: FieldDescriptor) -> None:
        """Seed records from the DTO and install the default multi-select transforms."""
        if not data.is_multi_selection:
            return

        field = data.field
        context = await self.get_selection_context(field)
        if context is None:
            return

        value_key, label_key = context.value_key, context.label_key
        await self.set_selection_records(field, self.get_input_value(field))

        def getter(value: Any, descriptor: FieldDescriptor) -> List[Any]:
            if not isinstance(value, (list, tuple)):
                return []
            out = []
            for item in value:
                if object_utils.is_plain_object(item):
                    item_value = item.get(value_key)
                    item = item.get(label_key) if object_utils.is_missing(item_value) else item_value
                if item is not None:
                    out.append(item)
            return out

        def setter(value: Any, descriptor: FieldDescriptor) -> List[Dict[str, Any]]:
            records = self._selection_records.get(field) or {}
            out = []
            for item in value or []:
                key = str(item)
                if key in records:
                    out.append({
                        value_key: object_utils.to_number(item) if data.numeric else item,
                        label_key: records[key],
                    })
                else:
                    out.append({label_key: item})
            return out

        if data.value_getter is None:
            data.value_getter = getter
        if data.value_setter is None:
            data.value_setter = setter

        self.builder.set_build(field, data)

    async def complete(self, field: str, query: str) -> List[Any]:
        """
        Autocomplete lookup for ``query``; found records are merged into the cache.

        Failures of the search propagate to the caller.
        """
        data = self.builder.get_data_field(field)
        if data is None or data.autocomplete is None:
            return []

        config = data.autocomplete
        result = config.search(query, data)
        if inspect.isawaitable(result):
            result = await result
        items = list(result or [])
        self._merge_records(field, object_utils.records(items, config.value_key, config.label_key))
        logger.debug(f"Autocomplete '{field}' for {query!r}: {len(items)} results")
        return items

    # ========== DATES ==========

    def intersect_date(self, data: FieldDescriptor) -> None:
        """Seed "now" when requested and install the formatter pair for date fields."""
        if not data.is_date:
            return

        date_type = data.data_type
        formatter = get_date_formatter()

        if data.current_date and data.field and object_utils.is_empty(self.builder.fields.get(data.field)):
            self.builder.fields[data.field] = formatter.parse(datetime.now(), date_type)

        if data.value_getter is None:
            data.value_getter = lambda value, descriptor: formatter.format(value, date_type)
        if data.value_setter is None:
            data.value_setter = lambda value, descriptor: formatter.parse(value, date_type)

    # ========== BACKGROUND RESOLUTION ==========

    def resolve(self, build: FieldDescriptor) -> Optional[asyncio.Task]:
        """Start the background selection and multi-select resolution of a build."""
        return self.tasks.run(build.field, partial(self._resolve, build))

    async def _resolve(self, build: FieldDescriptor) -> None:
        await self.make_selection(build.field)
        await self.intersect_multi_selection(build)
        self.update(build.field)

    async def ready(self, field: str) -> None:
        await self.tasks.ready(field)

    async def settle(self) -> None:
        await self.tasks.settle()
