"""Default date formatter: configured storage patterns first, dateutil for anything else."""

import logging
from datetime import date, datetime, time
from typing import Any, Optional

from dateutil import parser

from pyqt_dataform.forms.data_form_constants import CONSTANTS
from pyqt_dataform.protocols.form_config import get_form_config

logger = logging.getLogger(__name__)


class DateFormatter:
    """
    Format/parse pair for the four date sub-types.

    Storage forms:
        date            -> "2024-05-01"           (config date_formats["date"])
        date:time       -> "13:45:00"             (config date_formats["date:time"])
        date:datetime   -> "2024-05-01T13:45:00"  (config date_formats["date:datetime"])
        date:timestamp  -> 1714571100000          (epoch milliseconds)

    Display forms are the datetime objects a date widget consumes:
    ``date`` for date, ``time`` for date:time, ``datetime`` otherwise.
    """

    def format(self, value: Any, date_type: str) -> Any:
        moment = self._coerce(value, date_type)
        if moment is None:
            return None
        if date_type == CONSTANTS.DATE:
            return moment.date()
        if date_type == CONSTANTS.DATE_TIME:
            return moment.time()
        return moment

    def parse(self, value: Any, date_type: str) -> Any:
        moment = self._coerce(value, date_type)
        if moment is None:
            return None
        if date_type == CONSTANTS.DATE_TIMESTAMP:
            return int(moment.timestamp() * 1000)
        return moment.strftime(self._pattern(date_type))

    def _pattern(self, date_type: str) -> str:
        formats = get_form_config().date_formats
        return formats.get(date_type, formats[CONSTANTS.DATE_DATETIME])

    def _coerce(self, value: Any, date_type: str) -> Optional[datetime]:
        """Bring any supported input to a datetime, None for empty input."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, time):
            return datetime.combine(date.today(), value)
        if isinstance(value, bool):
            raise TypeError(f"Cannot interpret {value!r} as {date_type}")
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000)
        if isinstance(value, str):
            return self._parse_text(value.strip(), date_type)
        raise TypeError(f"Cannot interpret {type(value).__name__} as {date_type}")

    def _parse_text(self, text: str, date_type: str) -> datetime:
        # Digit-only text is epoch milliseconds for timestamps, a compact date otherwise
        if date_type == CONSTANTS.DATE_TIMESTAMP and text.lstrip("-").isdigit():
            return datetime.fromtimestamp(int(text) / 1000)
        try:
            return datetime.strptime(text, self._pattern(date_type))
        except ValueError:
            logger.debug(f"'{text}' does not match the {date_type} pattern, parsing freely")
        return parser.parse(text, dayfirst=get_form_config().dayfirst)
