"""Tests for DataFormBuilder compilation, groups, values and rules."""

import asyncio
from datetime import date, datetime

import pytest

from pyqt_dataform.exceptions import ValidationError
from pyqt_dataform.forms.data_form_builder import DataFormBuilder
from pyqt_dataform.forms.field_descriptor import GroupBuild
from pyqt_dataform.protocols import MappingDictionary, register_label_dictionary


@pytest.fixture
def builder():
    dto = {"name": "Acme", "code": None, "meta": {"tags": ["a"]}}
    return DataFormBuilder(dto, data_fields={
        "name": {"rules": ["required", {"max_length": 100}]},
        "code": {"data_type": "input:number"},
    })


def test_compile_fills_defaults(builder):
    build = builder.compile("name")

    assert build.id == f"{builder.field_prefix}_name"
    assert build.field == "name"
    assert build.label == "Name"
    assert build.data_type == "input"
    assert build.builder is builder
    assert build.validator is builder.validator
    assert build.locale == "en"


def test_compile_is_idempotent(builder):
    first = builder.compile("name")
    second = builder.compile("name")

    assert first.id == second.id
    assert builder.get_data_field("name") is second


def test_compile_never_mutates_declared_descriptor(builder):
    builder.compile("code")
    declared = builder._data_fields["code"]

    assert declared.id is None
    assert declared.builder is None


def test_compile_uses_label_dictionary():
    register_label_dictionary(MappingDictionary({"name": "Short name"}))
    builder = DataFormBuilder({"name": None, "created_by": None}, data_fields={"name": {}, "created_by": {}})

    assert builder.compile("name").label == "Short name"
    assert builder.compile("created_by").label == "Created By"


def test_compile_override_descriptor(builder):
    build = builder.compile("name", {"data_type": "textarea", "label": "Notes"})

    assert build.data_type == "textarea"
    assert build.label == "Notes"
    assert builder.get_data_field("name") is build


def test_compile_merges_rules(builder):
    builder.compile("code", {"rules": ["numeric"]})
    assert builder.validator.model["code"] == ["numeric"]


def test_build_form_uses_implicit_group(builder):
    build = builder.build

    assert len(build) == 1
    assert isinstance(build[0], GroupBuild)
    assert build[0].id.startswith(builder.group_prefix)
    assert [data.field for data in build[0].fields] == ["name", "code"]
    assert builder.build is build


def test_groups_are_namespaced_per_form():
    groups = [{"id": "main", "name": "Main", "fields": ["name"]}, {"id": "extra", "name": "Extra", "fields": ["code"]}]
    first = DataFormBuilder({"name": None, "code": None}, groups=groups)
    second = DataFormBuilder({"name": None, "code": None}, groups=groups)

    assert first.build[0].id == f"{first.group_prefix}_main"
    assert first.build[0].id != second.build[0].id
    assert groups[0]["id"] == "main"
    assert first.get_group("extra").fields == ["code"]


def test_set_groups_css(builder):
    builder.set_groups([{"id": "a", "fields": ["name"]}, {"id": "b", "fields": ["code"]}])
    builder.set_groups_css("grid", ["b"])

    assert builder.get_group("a").css is None
    assert builder.get_group("b").css == "grid"

    builder.set_groups_css(["flex", "gap"])
    assert builder.get_group("a").css == ["flex", "gap"]


def test_set_data_fields_extends_default_group(builder):
    builder.set_data_fields({"email": {"data_type": "input:email"}, "name": {"label": "Title"}})

    assert builder.get_group().fields == ["name", "code", "email"]
    assert builder.compile("name").label == "Title"
    assert builder.compile("email").data_type == "input:email"


def test_set_data_field_defaults_fill_unset_only(builder):
    builder.set_data_field_defaults({"readonly": True, "data_type": "textarea"})

    assert builder.compile("name").readonly is True
    assert builder.compile("name").data_type == "textarea"
    assert builder.compile("code").data_type == "input:number"


def test_update_merges_values_and_bumps_refs(builder):
    builder.update({"name": "Globex"})

    assert builder.fields["name"] == "Globex"
    assert builder.form.get_input_ref("name") == 1
    assert builder.form.get_input_ref("code") == 0

    builder.update()
    assert builder.form.get_input_ref("name") == 2
    assert builder.form.get_input_ref("meta") == 1


def test_update_emits_ref_changed(builder):
    seen = []
    builder.form.refs.ref_changed.connect(lambda field, counter: seen.append((field, counter)))

    builder.update({"code": 5})

    assert seen == [("code", 1)]


def test_reset_fields_restores_snapshot(builder):
    builder.fields["name"] = "Changed"
    builder.fields["meta"]["tags"].append("b")

    builder.reset_fields()

    assert builder.fields == {"name": "Acme", "code": None, "meta": {"tags": ["a"]}}

    builder.fields["meta"]["tags"].append("c")
    builder.reset_fields()
    assert builder.fields["meta"] == {"tags": ["a"]}


def test_reset_fields_copies_sets_and_tuples():
    dto = {"tags": {1, 2}, "pairs": ([1],)}
    builder = DataFormBuilder(dto)

    builder.reset_fields()
    dto["tags"].add(3)
    dto["pairs"][0].append(2)
    builder.reset_fields()

    assert dto["tags"] == {1, 2}
    assert dto["pairs"] == ([1],)


def test_reset_fields_skips_reset_locked(builder):
    builder.fields["name"] = "Editing"
    builder.fields["code"] = 7
    builder.form.reset_lock(["name"])

    builder.reset_fields()
    assert builder.fields["name"] == "Editing"
    assert builder.fields["code"] is None

    builder.form.reset_unlock(["name"])
    builder.reset_fields("name")
    assert builder.fields["name"] == "Acme"


def test_dto_is_shared_not_copied():
    dto = {"name": None}
    builder = DataFormBuilder(dto, data_fields={"name": {}})
    builder.compile("name")

    builder.form.set_input_value("name", "Acme")

    assert builder.fields is dto
    assert dto["name"] == "Acme"


def test_unset_and_restore_fields(builder):
    assert builder.is_set_field("code")

    builder.unset_fields(["code"])
    assert not builder.is_set_field("code")
    assert "code" in builder.fields

    builder.restore_fields("code")
    assert builder.is_set_field("code")
    assert not builder.is_set_field("unknown")


def test_validation_model_overrides_descriptor_rules():
    builder = DataFormBuilder({"name": None}, data_fields={"name": {"rules": ["required"]}},
                              validation_model={"name": [{"min_length": 3}]})

    assert builder.validator.model == {"name": [{"min_length": 3}]}


def test_set_rules_and_reset_rules(builder):
    builder.set_rules({"code": ["numeric"]})
    assert builder.validator.model["code"] == ["numeric"]

    builder.reset_rules("code")
    assert builder.validator.model["code"] == []

    builder.reset_rules("missing")
    assert "missing" not in builder.validator.model


def test_validator_sees_dto_writes(builder):
    builder.fields["name"] = ""

    with pytest.raises(ValidationError) as error:
        asyncio.run(builder.validator.validate())

    assert "name" in error.value.errors


def test_date_field_installs_formatters():
    builder = DataFormBuilder({"day": "2024-05-01"}, data_fields={"day": {"data_type": "date"}})
    build = builder.compile("day")

    assert builder.form.get_input_value("day") == date(2024, 5, 1)
    assert build.value_setter(date(2024, 6, 2), build) == "2024-06-02"


def test_current_date_seeds_empty_field_only():
    dto = {"start": None, "end": "2020-01-01T00:00:00"}
    builder = DataFormBuilder(dto, data_fields={
        "start": {"data_type": "date:datetime", "current_date": True},
        "end": {"data_type": "date:datetime", "current_date": True},
    })
    builder.compile("start")
    builder.compile("end")

    assert datetime.strptime(dto["start"], "%Y-%m-%dT%H:%M:%S")
    assert dto["end"] == "2020-01-01T00:00:00"


def test_current_date_timestamp_is_epoch_millis():
    dto = {"stamp": None}
    builder = DataFormBuilder(dto, data_fields={"stamp": {"data_type": "date:timestamp", "current_date": True}})
    builder.compile("stamp")

    assert isinstance(dto["stamp"], int)
    assert abs(dto["stamp"] - datetime.now().timestamp() * 1000) < 60_000


def test_watcher_calls_hooks_in_order():
    calls = []
    dto = {"name": None}
    builder = DataFormBuilder(dto, data_fields={"name": {
        "watcher": lambda data, value, old_value: calls.append(("watch", value, old_value, dto["name"])),
        "value_setter": lambda value, data: value.upper(),
        "on_set_value": lambda value, data: calls.append(("set", value)),
    }})
    builder.compile("name")

    builder.form.set_input_value("name", "acme", None)

    assert calls == [("watch", "acme", None, None), ("set", "ACME")]
    assert dto["name"] == "ACME"


def test_renderer_selection(builder):
    from PyQt6.QtWidgets import QComboBox, QLabel, QLineEdit

    assert builder.form.get_renderer(builder.compile("name")).component is QLineEdit
    assert builder.form.get_renderer(builder.compile("name", {"data_type": "select:multiple"})).component is QComboBox
    assert builder.form.get_renderer(builder.compile("name", {"readonly": True})).component is QLabel
    assert builder.form.get_input_sub_type(builder.compile("code")) == "number"
    assert builder.form.get_input_sub_type(builder.compile("code", {"data_type": "input:checkbox"})) == "checkbox"


def test_date_renderer_carries_instant_hint(builder):
    from PyQt6.QtWidgets import QDateEdit

    renderer = builder.form.get_renderer(builder.compile("name", {"data_type": "date", "instant": True}))
    assert renderer.component is QDateEdit
    assert renderer.props == {"instant": True}

    renderer = builder.form.get_renderer(builder.compile("name", {"data_type": "date:datetime"}))
    assert renderer.props == {"instant": False}
    assert builder.form.get_renderer(builder.compile("name")).props is None
