"""Tests for the default date formatter and the formatter protocol hook."""

from datetime import date, datetime, time

import pytest

from pyqt_dataform.core.date_format import DateFormatter
from pyqt_dataform.forms.data_form_builder import DataFormBuilder
from pyqt_dataform.protocols import DataFormConfig, get_date_formatter, register_date_formatter, set_form_config


@pytest.fixture
def formatter():
    return DateFormatter()


def test_format_storage_values(formatter):
    assert formatter.format("2024-05-01", "date") == date(2024, 5, 1)
    assert formatter.format("13:45:00", "date:time") == time(13, 45)
    assert formatter.format("2024-05-01T13:45:00", "date:datetime") == datetime(2024, 5, 1, 13, 45)


def test_parse_display_values(formatter):
    assert formatter.parse(date(2024, 5, 1), "date") == "2024-05-01"
    assert formatter.parse(time(8, 5, 9), "date:time") == "08:05:09"
    assert formatter.parse(datetime(2024, 5, 1, 13, 45), "date:datetime") == "2024-05-01T13:45:00"


def test_timestamp_round_trip(formatter):
    moment = datetime(2024, 5, 1, 13, 45)
    stored = formatter.parse(moment, "date:timestamp")

    assert stored == int(moment.timestamp() * 1000)
    assert formatter.format(stored, "date:timestamp") == moment
    assert formatter.format(str(stored), "date:timestamp") == moment


def test_empty_values(formatter):
    for date_type in ("date", "date:time", "date:datetime", "date:timestamp"):
        assert formatter.format(None, date_type) is None
        assert formatter.parse("", date_type) is None


def test_free_form_fallback(formatter):
    assert formatter.format("2024-05-01T13:45:00+00:00", "date").isoformat() == "2024-05-01"
    assert formatter.parse("2024-05-01 13:45", "date") == "2024-05-01"


def test_rejects_unsupported_values(formatter):
    with pytest.raises(TypeError):
        formatter.parse(True, "date")
    with pytest.raises(ValueError):
        formatter.parse("not a date", "date")


def test_configured_storage_format():
    set_form_config(DataFormConfig(date_formats={"date": "%d.%m.%Y", "date:datetime": "%d.%m.%Y %H:%M"}))
    formatter = DateFormatter()

    assert formatter.parse(date(2024, 5, 1), "date") == "01.05.2024"
    assert formatter.format("01.05.2024", "date") == date(2024, 5, 1)
    assert formatter.parse(time(9, 30), "date:time").endswith("09:30")


def test_registered_formatter_drives_date_fields():
    class UpperFormatter:
        def format(self, value, date_type):
            return f"<{value}>"

        def parse(self, value, date_type):
            return value.strip("<>")

    register_date_formatter(UpperFormatter())
    dto = {"day": "x"}
    builder = DataFormBuilder(dto, data_fields={"day": {"data_type": "date"}})
    builder.compile("day")

    assert isinstance(get_date_formatter(), UpperFormatter)
    assert builder.form.get_input_value("day") == "<x>"

    builder.form.set_input_value("day", "<y>")
    assert dto["day"] == "y"


def test_default_formatter_when_none_registered():
    register_date_formatter(None)
    assert isinstance(get_date_formatter(), DateFormatter)


def test_compact_date_is_not_a_timestamp(formatter):
    assert formatter.format("20240501", "date") == date(2024, 5, 1)
    assert formatter.parse("20240501", "date") == "2024-05-01"


def test_localized_dotted_date():
    assert DateFormatter().format("01.05.2024", "date") == date(2024, 1, 5)

    set_form_config(DataFormConfig(dayfirst=True))
    assert DateFormatter().format("01.05.2024", "date") == date(2024, 5, 1)


def test_dotted_date_through_the_watcher():
    set_form_config(DataFormConfig(dayfirst=True))
    dto = {"day": None}
    builder = DataFormBuilder(dto, data_fields={"day": {"data_type": "date"}})
    builder.compile("day")

    builder.form.set_input_value("day", "01.05.2024")

    assert dto["day"] == "2024-05-01"
