"""pytest configuration and fixtures for pyqt-dataform tests."""

import pytest
from PyQt6.QtCore import QCoreApplication

from pyqt_dataform.protocols import register_date_formatter, register_label_dictionary, set_form_config


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Create the Qt application instance that owns the change-ref signals."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_collaborators():
    """Restore the global config and collaborators after each test."""
    yield
    set_form_config(None)
    register_label_dictionary(None)
    register_date_formatter(None)


@pytest.fixture
def countries():
    return [
        {"id": 1, "name": "Spain"},
        {"id": 2, "name": "France"},
        {"id": 3, "name": "Italy"},
    ]
