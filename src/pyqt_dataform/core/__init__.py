"""
Core utilities.

Plain-object helpers, the default date formatter and the per-field
background task manager. No domain-specific logic.
"""

from .background_task import SelectionTaskManager
from .date_format import DateFormatter
from . import object_utils

__all__ = [
    "SelectionTaskManager",
    "DateFormatter",
    "object_utils",
]
