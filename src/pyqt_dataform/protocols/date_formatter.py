"""Date formatter protocol for pluggable date coercion.

The formatter pair is the sole source of date bit-exactness: date fields
delegate both directions of their value transform to it.
"""

from typing import Any, Optional, Protocol


class DateFormatterProtocol(Protocol):
    """Protocol for date formatter/parser pairs.

    Both methods must be pure and deterministic.
    """

    def format(self, value: Any, date_type: str) -> Any:
        """Convert a stored DTO value to the value a date widget displays.

        Args:
            value: Stored value
            date_type: One of date, date:time, date:datetime, date:timestamp

        Returns:
            Display value (None for empty input)
        """
        ...

    def parse(self, value: Any, date_type: str) -> Any:
        """Convert a widget value back to its storage form.

        Args:
            value: Display value
            date_type: Date sub-type of the field

        Returns:
            Storage value (None for empty input)
        """
        ...


# Global formatter instance (set by application)
_date_formatter: Optional[DateFormatterProtocol] = None


def register_date_formatter(formatter: Optional[DateFormatterProtocol]) -> None:
    """Register a date formatter implementation.

    Args:
        formatter: Object implementing DateFormatterProtocol, or None to
            restore the default
    """
    global _date_formatter
    _date_formatter = formatter


def get_date_formatter() -> DateFormatterProtocol:
    """Get the registered date formatter.

    Returns:
        Registered formatter, or the default stdlib-based DateFormatter
    """
    if _date_formatter is None:
        from pyqt_dataform.core.date_format import DateFormatter
        return DateFormatter()
    return _date_formatter
