"""Default validation engine used by data form builders."""

from .messages import VALIDATION_MESSAGES, get_validation_messages
from .rules import ValidationRules
from .validator import Validator

__all__ = [
    "VALIDATION_MESSAGES",
    "get_validation_messages",
    "ValidationRules",
    "Validator",
]
