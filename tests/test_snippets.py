"""Tests for snippet resolution: fieldsets, switchers and the embed table."""

import asyncio

import pytest

from pyqt_dataform.exceptions import SchemaError, SnippetNotDefinedError
from pyqt_dataform.forms.data_form_builder import DataFormBuilder
from pyqt_dataform.forms.field_presets import get_manual_switcher
from pyqt_dataform.forms.snippet_registry import (
    EMBED_SNIPPETS,
    DataFieldSnippet,
    FieldSetSnippet,
    PasswordSnippet,
    SwitcherSnippet,
    get_snippet_class,
)


def load(builder):
    builder.build
    asyncio.run(builder.snippet.load())
    return builder


def test_embedded_snippets_are_registered():
    assert get_snippet_class("password") is PasswordSnippet
    assert get_snippet_class("fieldset") is FieldSetSnippet
    assert get_snippet_class("switcher") is SwitcherSnippet


def test_unknown_snippet_name_is_fatal():
    builder = DataFormBuilder({"rating": 3}, data_fields={"rating": {"snippet": "stars"}})
    builder.build

    with pytest.raises(SnippetNotDefinedError) as error:
        asyncio.run(builder.snippet.load())

    assert isinstance(error.value, SchemaError)
    assert isinstance(error.value, KeyError)
    assert "stars" in str(error.value)


def test_make_rejects_empty_snippet():
    builder = DataFormBuilder({}, data_fields={})

    with pytest.raises(SnippetNotDefinedError):
        builder.snippet.make("")


def test_make_accepts_concrete_component():
    builder = DataFormBuilder({}, data_fields={})

    class Custom:
        pass

    renderer = builder.snippet.make(Custom, {"x": 1})
    assert renderer.component is Custom
    assert renderer.props == {"x": 1}


def test_named_snippet_assignment():
    builder = load(DataFormBuilder({"secret": ""}, data_fields={"secret": {"snippet": "password"}}))

    renderer = builder.snippet.get("secret")
    assert renderer.component is PasswordSnippet
    assert builder.snippet.get("missing") is None


def test_set_is_idempotent():
    builder = DataFormBuilder({"secret": ""}, data_fields={"secret": {}})

    builder.snippet.set("secret", "password", {"field": "secret"})
    builder.snippet.set("secret", "password", {"field": "secret"})

    assert builder.snippet.get("secret").component is PasswordSnippet
    assert builder.snippet.get("secret").props == {"field": "secret"}


def test_snippet_factory_is_awaited():
    async def snippet(make, data):
        return make("password", {"builder": data.builder, "field": data.field})

    builder = load(DataFormBuilder({"secret": ""}, data_fields={"secret": {"snippet": snippet}}))

    assert builder.snippet.get("secret").props["field"] == "secret"


def test_fieldset_unsets_companion_fields():
    dto = {"created_by": {"name": "Ann"}, "created_date": "2024-05-01"}
    builder = load(DataFormBuilder(dto, data_fields={
        "created_by": {"fieldset": ["created_by", "created_date"]},
        "created_date": {"data_type": "date"},
    }))

    assert not builder.is_set_field("created_date")
    assert builder.is_set_field("created_by")
    assert dto["created_date"] == "2024-05-01"

    renderer = builder.snippet.get("created_by")
    assert renderer.component is FieldSetSnippet
    assert renderer.props["fields"] == ["created_by", "created_date"]

    snippet = renderer.component(**renderer.props)
    assert [data.field for data in snippet.descriptors()] == ["created_by", "created_date"]


def test_fieldset_ignores_fields_missing_from_dto():
    builder = load(DataFormBuilder({"a": 1}, data_fields={"a": {"fieldset": ["a", "ghost"]}}))

    assert builder._unset_fields == set()


def test_switcher_toggles_transient_descriptor():
    dto = {"city": {"id": 5, "name": "Paris"}}
    builder = load(DataFormBuilder(dto, data_fields={"city": {
        "data_type": "select",
        "readonly": True,
        **get_manual_switcher(),
    }}))

    renderer = builder.snippet.get("city")
    assert renderer.component is SwitcherSnippet
    switcher = renderer.component(**renderer.props)
    assert switcher.text == "Type text"

    manual = switcher.switch()
    assert switcher.text == "Select from dictionary"
    assert manual.readonly is True
    assert manual.data_type == "input"
    assert manual.switcher is None
    assert builder.get_data_field("city") is manual
    assert builder.form.get_input_value("city") == "Paris"

    builder.form.set_input_value("city", "Lyon")
    assert dto["city"] == {"name": "Lyon"}

    restored = switcher.switch()
    assert restored.data_type == "select"
    assert restored.switcher is not None
    assert restored.id == manual.id


def test_custom_snippet_auto_registers():
    class RatingSnippet(DataFieldSnippet):
        _snippet_id = "rating"

        def descriptors(self):
            return [self.builder.get_data_field(self.field)]

    try:
        assert EMBED_SNIPPETS["rating"] is RatingSnippet
        builder = load(DataFormBuilder({"rating": 3}, data_fields={"rating": {"snippet": "rating"}}))
        assert builder.snippet.get("rating").component is RatingSnippet
    finally:
        EMBED_SNIPPETS.pop("rating", None)


def test_snippet_requires_props():
    with pytest.raises(TypeError):
        FieldSetSnippet(builder=None, field="a")
