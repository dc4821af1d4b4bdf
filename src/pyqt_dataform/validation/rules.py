"""
Built-in validation rules.

A rule spec is one of:
    "required"                      bare rule name
    {"max_length": 100}             rule name with its argument
    callable(value, values)         returns a message, None, or an awaitable of either

Every rule except ``required`` passes on empty values.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Tuple

from pyqt_dataform.core.object_utils import is_empty, to_number
from pyqt_dataform.exceptions import SchemaError
from pyqt_dataform.protocols.dictionary import resolve_label
from pyqt_dataform.validation.messages import get_validation_messages

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _length(value: Any) -> int:
    return len(value) if isinstance(value, (list, tuple, set, dict)) else len(str(value))


class ValidationRules:
    """
    Executes rule specs against values.

    Args:
        fields: The DTO being validated (passed to callable rules)
        messages: Rule name -> message template
    """

    def __init__(self, fields: Optional[Mapping] = None, messages: Optional[Dict[str, str]] = None):
        self.fields = fields if fields is not None else {}
        self.messages = messages if messages is not None else get_validation_messages()
        self._checks: Dict[str, Callable[[Any, Any], bool]] = {
            "required": lambda value, arg: not is_empty(value),
            "max_length": lambda value, arg: _length(value) <= arg,
            "min_length": lambda value, arg: _length(value) >= arg,
            "min": lambda value, arg: to_number(value) is not None and to_number(value) >= arg,
            "max": lambda value, arg: to_number(value) is not None and to_number(value) <= arg,
            "email": lambda value, arg: bool(_EMAIL.match(str(value))),
            "numeric": lambda value, arg: to_number(value) is not None,
            "pattern": lambda value, arg: re.search(arg, str(value)) is not None,
        }

    @staticmethod
    def parse_spec(spec: Any) -> Tuple[str, Any]:
        """Split a rule spec into ``(name, argument)``."""
        if isinstance(spec, str):
            return spec, None
        if isinstance(spec, Mapping) and len(spec) == 1:
            ((name, arg),) = spec.items()
            return name, arg
        raise SchemaError(f"Invalid rule spec: {spec!r}")

    def check(self, spec: Any, value: Any, field: str, values: Optional[Mapping] = None) -> Any:
        """
        Check one rule.

        Returns:
            Failure message, None on success, or an awaitable for async callables

        Raises:
            SchemaError: If the rule name is unknown or the spec is malformed
        """
        values = self.fields if values is None else values
        if callable(spec):
            return spec(value, values)

        name, arg = self.parse_spec(spec)
        rule = self._checks.get(name)
        if rule is None:
            raise SchemaError(f"Unknown validation rule '{name}'. Available rules: {list(self._checks)}")

        if name != "required" and is_empty(value):
            return None
        if rule(value, arg):
            return None

        template = self.messages.get(name, "{label} is invalid")
        return template.format(label=resolve_label(field), arg=arg)
