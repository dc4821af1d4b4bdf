"""Tests for the BaseDataForm lifecycle and DataFilterForm notifications."""

import asyncio

import pytest

from pyqt_dataform.forms.base_data_form import BaseDataForm, FormState
from pyqt_dataform.forms.data_filter_form import DataFilterForm, DataFilterFormActions, DataFilterFormConfig


class CompanyForm(BaseDataForm):
    data_fields = {"name": {"rules": ["required"]}, "code": {}}

    def __init__(self, fields):
        super().__init__(fields)
        self.error_calls = 0
        self.created = 0

    async def on_submit(self):
        return {"saved": dict(self.fields)}

    def on_errors(self):
        self.error_calls += 1

    async def on_create_form(self, form):
        self.created += 1
        return form


class ReadonlyForm(CompanyForm):
    @property
    def readonly(self):
        return True

    def on_submit(self):
        return "sync result"


# ========== BASE FORM ==========

def test_submit_rejects_then_accepts():
    async def scenario():
        form = CompanyForm({"name": None, "code": None})
        await form.create_form()

        rejected = await form.submit()
        errors = form.errors
        form.fields["name"] = "Acme"
        accepted = await form.submit()
        return form, rejected, errors, accepted

    form, rejected, errors, accepted = asyncio.run(scenario())

    assert rejected is None
    assert list(errors) == ["name"]
    assert errors["name"] == ["Name is required"]
    assert accepted == {"saved": {"name": "Acme", "code": None}}
    assert form.errors is None
    assert form.error_calls == 1
    assert form.state is FormState.BUILT


def test_submit_returns_sync_result():
    async def scenario():
        form = ReadonlyForm({"name": "Acme", "code": None})
        await form.create_form()
        return await form.submit()

    assert asyncio.run(scenario()) == "sync result"


def test_create_form_applies_defaults_and_hooks():
    hooked = []

    async def scenario():
        form = ReadonlyForm({"name": None, "code": None})
        builder = await form.create_form(
            defaults={"data_type": "textarea"},
            on_create=lambda builder: hooked.append(builder),
            data_fields={"extra": {"label": "Extra"}},
        )
        return form, builder

    form, builder = asyncio.run(scenario())

    assert form.builder is builder
    assert form.form is builder
    assert hooked == [builder]
    assert form.created == 1
    assert builder.compile("name").readonly is True
    assert builder.compile("code").data_type == "textarea"
    assert builder.compile("extra").label == "Extra"
    assert builder.fields is form.fields


def test_create_form_awaits_async_data_fields():
    class AsyncForm(CompanyForm):
        @property
        async def data_fields(self):
            return {"name": {"label": "Loaded"}}

    async def scenario():
        form = AsyncForm({"name": None})
        return await form.create_form()

    assert asyncio.run(scenario()).compile("name").label == "Loaded"


def test_reset_restores_dto_in_place():
    async def scenario():
        form = CompanyForm({"name": "Acme", "code": {"value": 1}})
        builder = await form.create_form()
        dto = form.fields
        dto["name"] = "Changed"
        dto["code"]["value"] = 2
        await form.reset()
        return form, builder, dto

    form, builder, dto = asyncio.run(scenario())

    assert form.fields is dto
    assert builder.fields is dto
    assert dto == {"name": "Acme", "code": {"value": 1}}
    assert builder.form.get_input_ref("name") == 1
    assert form.created == 2


def test_init_discards_builder_and_applies_overrides():
    async def scenario():
        form = CompanyForm({"name": "Acme", "code": None})
        await form.create_form()
        await form.submit()
        return form

    form = asyncio.run(scenario())
    dto = form.fields
    override = {"code": {"nested": True}}

    form.init(override)

    assert form.builder is None
    assert form.errors is None
    assert form.state is FormState.INITIALIZED
    assert form.fields is dto
    assert dto == {"name": "Acme", "code": {"nested": True}}
    assert dto["code"] is not override["code"]


def test_new_form_starts_uninitialized():
    assert CompanyForm({"name": None}).state is FormState.UNINITIALIZED


def test_base_form_requires_submit_action():
    class Incomplete(BaseDataForm):
        data_fields = {}

    with pytest.raises(TypeError):
        Incomplete({})


# ========== FILTER FORM ==========

def make_filter(fields, **config):
    calls = []
    actions = DataFilterFormActions(
        on_change=lambda value: calls.append(("change", value)),
        on_set=lambda value: calls.append(("set", value)),
        on_empty=lambda value: calls.append(("empty", value)),
    )
    form = DataFilterForm(fields, DataFilterFormConfig(
        builder={"data_fields": {name: {} for name in fields}},
        actions=actions,
        **config,
    ))
    return form, calls


def test_filter_set_fires_change_and_set():
    dto = {"query": "acme", "status": None}
    form, calls = make_filter(dto)

    form.set_filter()

    assert form.is_set_filter
    assert calls == [("change", dto), ("set", dto)]


def test_filter_empty_fires_change_and_empty():
    dto = {"query": "  ", "status": [], "page": None}
    form, calls = make_filter(dto)

    form.set_filter()

    assert not form.is_set_filter
    assert calls == [("change", None), ("empty", dto)]


def test_filter_zero_counts_as_set():
    form, calls = make_filter({"count": 0})
    assert form.is_set_filter


def test_filter_custom_emptiness_check():
    form, calls = make_filter({"status": "all"}, check_empty=lambda field, value: value == "all")

    form.set_filter({"status": "all"})

    assert calls == [("change", None), ("empty", {"status": "all"})]


def test_filter_builder_is_bound_to_dto():
    dto = {"query": None}
    form, calls = make_filter(dto)

    form.builder.update({"query": "x"})

    assert dto["query"] == "x"
    assert form.is_set_filter


def test_filter_without_actions():
    form = DataFilterForm({"query": "x"})
    form.set_filter()
    assert form.is_set_filter
