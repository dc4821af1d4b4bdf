"""
Data form builder: compiles declarative field descriptors into builds.

The builder is bound to one DTO (``fields``) and never copies it: every write
made through the transform pipeline lands in the same mapping the owner
holds. A pristine snapshot is taken at construction for ``reset_fields()``.

Compilation of a field is synchronous and returns a usable build right away.
Selection lookups and multi-select wiring finish in the background and
mutate the build in place; ``await builder.ready(field)`` waits for them.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from pyqt_dataform.core import object_utils
from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.forms.field_descriptor import (
    FieldDescriptor,
    FieldGroup,
    GroupBuild,
    with_defaults,
)
from pyqt_dataform.protocols.dictionary import resolve_label
from pyqt_dataform.protocols.form_config import get_form_config
from pyqt_dataform.services.form_service import FormService
from pyqt_dataform.services.snippet_service import SnippetService
from pyqt_dataform.validation.messages import get_validation_messages
from pyqt_dataform.validation.rules import ValidationRules
from pyqt_dataform.validation.validator import Validator

logger = logging.getLogger(__name__)

Descriptor = Union[FieldDescriptor, Mapping]
FieldNames = Union[str, Iterable[str], None]


def _as_field_list(fields: FieldNames) -> List[str]:
    if fields is None:
        return []
    if isinstance(fields, str):
        return [fields]
    return list(fields)


class DataFormBuilder:
    """
    Compiler and runtime owner of one data form.

    Args:
        fields: The DTO edited by the form
        data_fields: Field name -> descriptor (``FieldDescriptor`` or dict)
        defaults: Descriptor applied to every field where it sets nothing
        groups: Field groups; one implicit group with every field by default
        group_css: Css applied to every group
        validation_model: Field name -> rule specs, overriding descriptor rules
        validation_rules: Rule engine (defaults to ``ValidationRules``)
        validation_messages: Message templates for the default rule engine
        locale: Locale stamped on builds (defaults to the form config)

    Example:
        builder = DataFormBuilder(dto, data_fields={
            "name": {"rules": ["required", {"max_length": 100}]},
            "active": {"data_type": "select:boolean"},
        })
        for group in builder.build:
            for build in group.fields:
                renderer = builder.form.get_renderer(build)
    """

    def __init__(
        self,
        fields: Dict[str, Any],
        *,
        data_fields: Optional[Mapping[str, Descriptor]] = None,
        defaults: Optional[Descriptor] = None,
        groups: Optional[List[Union[FieldGroup, Mapping]]] = None,
        group_css: Optional[Union[str, List[str]]] = None,
        validation_model: Optional[Dict[str, List[Any]]] = None,
        validation_rules: Optional[Any] = None,
        validation_messages: Optional[Dict[str, str]] = None,
        locale: Optional[str] = None,
    ):
        config = get_form_config()
        self.fields = fields
        self.locale = locale or config.locale

        self._field_store = object_utils.copy(fields)
        self._node_id_length = config.node_id_length
        self._form_id = object_utils.random_node_id(self._node_id_length)
        self._group_id = object_utils.random_node_id(self._node_id_length)

        self._data_fields: Dict[str, FieldDescriptor] = {}
        self._rules: Dict[str, List[Any]] = {}
        self._groups: List[FieldGroup] = []
        self._validator: Optional[Validator] = None
        self._build: Dict[str, FieldDescriptor] = {}
        self._form_build: List[GroupBuild] = []
        self._unset_fields: Set[str] = set()

        self.form = FormService(self)
        self.snippet = SnippetService(self)

        for name, data in (data_fields or {}).items():
            self._data_fields[name] = FieldDescriptor.from_mapping(data)
        if defaults:
            self.set_data_field_defaults(defaults)

        self.set_groups(groups)
        if group_css:
            self.set_groups_css(group_css)

        self.set_validator(validation_model or {}, validation_rules, validation_messages)

    # ========== BUILD ==========

    @property
    def build(self) -> List[GroupBuild]:
        """Cached form build; compiled on first access."""
        return self._form_build or self.build_form()

    @property
    def validator(self) -> Optional[Validator]:
        return self._validator

    @property
    def field_prefix(self) -> str:
        return f"{self._form_id}{CONSTANTS.ID_SEPARATOR}{CONSTANTS.FIELD_PREFIX_SUFFIX}"

    @property
    def group_prefix(self) -> str:
        return f"{self._form_id}{CONSTANTS.ID_SEPARATOR}{CONSTANTS.GROUP_PREFIX_SUFFIX}"

    def build_form(self) -> List[GroupBuild]:
        """Compile every group's fields, in group order."""
        builds = []
        for group in self._groups:
            group_id = group.id if group.id.startswith(self._form_id) else f"{self.group_prefix}_{group.id}"
            builds.append(GroupBuild(
                id=group_id,
                group=group,
                fields=[self.compile(field) for field in group.fields],
            ))
        self._form_build = builds
        logger.debug(f"Built form {self._form_id}: {len(builds)} groups")
        return builds

    def compile(self, field: str, data: Optional[Descriptor] = None) -> FieldDescriptor:
        """
        Compile one field into its build.

        Args:
            field: DTO field name
            data: Descriptor to compile instead of the declared one

        Returns:
            The build (selection resolution continues in the background)
        """
        self.reset_build(field)

        partial = data if data is not None else self._data_fields.get(field)
        build = with_defaults(
            partial,
            field=field,
            id=f"{self.field_prefix}_{field}",
            label=resolve_label(field),
            builder=self,
            validator=self._validator,
            locale=self.locale,
        )

        self.form.intersect_boolean_selection(build)
        self.form.call_selection(build.field, build)
        self.form.intersect_date(build)

        build = self.set_build(build.field, build)
        self.form.resolve(build)
        self.form.set_watcher(build.field, build)

        if build.rules:
            self._rules[build.field] = build.rules

        logger.debug(f"Compiled '{build.field}' as {build.data_type}")
        return build

    def get_data_field(self, field: str) -> Optional[FieldDescriptor]:
        """The field's build if compiled, else its declared descriptor."""
        return self._build.get(field) or self._data_fields.get(field)

    def get_form_build(self) -> Dict[str, FieldDescriptor]:
        return dict(self._build)

    def set_build(self, field: str, data: FieldDescriptor) -> FieldDescriptor:
        """Store ``data`` as the field's build, or merge it into the existing one."""
        existing = self._build.get(field)
        if existing is None:
            self._build[field] = data
            return data
        if existing is not data:
            existing.update(data)
        return existing

    def reset_build(self, fields: FieldNames) -> None:
        for field in _as_field_list(fields):
            self._build.pop(field, None)

    # ========== VALUES ==========

    def update(self, fields: Optional[Mapping[str, Any]] = None) -> None:
        """Merge values into the DTO and bump their change refs (every field when None)."""
        if fields is None:
            self.form.update()
            return
        self.fields.update(fields)
        self.form.update(list(fields))

    def save(self, fields: Mapping[str, Any]) -> None:
        """Like ``update()``, but the next watcher write of each field is skipped."""
        self.form.save_lock(list(fields))
        self.update(fields)

    def reset_fields(self, fields: FieldNames = None) -> None:
        """
        Restore DTO values from the snapshot taken at construction.

        Reset-locked fields are skipped; values are deep-copied so the
        snapshot is never aliased.
        """
        names = _as_field_list(fields) or list(self._field_store)
        for name in names:
            if self.form.is_reset_lock(name):
                logger.debug(f"Reset skipped for locked field '{name}'")
                continue
            self.fields[name] = object_utils.copy(self._field_store.get(name))

    # ========== SCHEMA ==========

    def set_data_fields(self, data: Mapping[str, Descriptor], group_id: str = "") -> "DataFormBuilder":
        """Merge descriptors into the schema and append their fields to a group."""
        for name, descriptor in data.items():
            if name in self._data_fields:
                self._data_fields[name].update(descriptor)
            else:
                self._data_fields[name] = FieldDescriptor.from_mapping(descriptor)

        group = self.get_group(group_id)
        if group is not None:
            group.fields = list(dict.fromkeys([*group.fields, *self._data_fields]))
        return self

    def set_data_field_defaults(self, data: Descriptor) -> "DataFormBuilder":
        for descriptor in self._data_fields.values():
            descriptor.apply_defaults(data)
        return self

    def get_group(self, group_id: str = "") -> Optional[FieldGroup]:
        group_id = group_id or self._group_id
        target = f"{self.group_prefix}_{group_id}"
        return next((group for group in self._groups if group.id == target), None)

    def set_groups(self, groups: Optional[List[Union[FieldGroup, Mapping]]] = None) -> "DataFormBuilder":
        if groups:
            self._groups = []
            for group in groups:
                group = FieldGroup.from_mapping(group)
                self._groups.append(replace(group, fields=list(group.fields)))
        else:
            self._groups = [FieldGroup(id=self._group_id, name="", fields=list(self._data_fields))]

        for group in self._groups:
            group.id = f"{self.group_prefix}_{group.id or object_utils.random_node_id(self._node_id_length)}"

        self._form_build = []
        return self

    def set_groups_css(self, css: Union[str, List[str]], group_ids: Optional[Iterable[str]] = None) -> "DataFormBuilder":
        if group_ids is not None:
            targets = {f"{self.group_prefix}_{group_id}" for group_id in group_ids}
        else:
            targets = {group.id for group in self._groups}

        for group in self._groups:
            if group.id in targets:
                group.css = css
        return self

    # ========== VALIDATION ==========

    def set_validator(
        self,
        model: Dict[str, List[Any]],
        validation_rules: Optional[Any] = None,
        validation_messages: Optional[Dict[str, str]] = None,
    ) -> "DataFormBuilder":
        self.set_validation_model(model)
        rules = validation_rules or ValidationRules(
            self.fields,
            validation_messages or get_validation_messages(self.locale),
        )
        self._validator = Validator(self.fields, self._rules, rules)
        return self

    def set_validation_model(self, model: Dict[str, List[Any]]) -> "DataFormBuilder":
        """Merge ``model``; explicit model rules beat descriptor rules."""
        self._rules.update(model)
        for field, descriptor in self._data_fields.items():
            rules = model.get(field) or descriptor.rules
            if rules:
                self._rules[field] = rules
        return self

    def set_rules(self, rules: Dict[str, List[Any]]) -> None:
        self._rules.update(rules)

    def reset_rules(self, field: str) -> None:
        if field in self._rules:
            self._rules[field] = []

    # ========== LOGICAL ABSENCE ==========

    def unset_fields(self, fields: FieldNames) -> "DataFormBuilder":
        self._unset_fields.update(_as_field_list(fields))
        return self

    def restore_fields(self, fields: FieldNames) -> "DataFormBuilder":
        self._unset_fields.difference_update(_as_field_list(fields))
        return self

    def is_set_field(self, field: str) -> bool:
        return field not in self._unset_fields and field in self._data_fields

    # ========== BACKGROUND RESOLUTION ==========

    async def ready(self, field: str) -> None:
        """Wait until the background resolution of ``field`` has finished."""
        await self.form.ready(field)

    async def settle(self) -> None:
        """Wait until every field's background resolution has finished."""
        await self.form.settle()
