"""Per-locale message templates for the built-in validation rules.

Templates are ``str.format`` strings receiving ``label`` (the field label)
and ``arg`` (the rule argument).
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

VALIDATION_MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "required": "{label} is required",
        "max_length": "{label} must be at most {arg} characters",
        "min_length": "{label} must be at least {arg} characters",
        "min": "{label} must be at least {arg}",
        "max": "{label} must be at most {arg}",
        "email": "{label} must be a valid email address",
        "numeric": "{label} must be a number",
        "pattern": "{label} has an invalid format",
    },
    "ru": {
        "required": "Поле «{label}» обязательно для заполнения",
        "max_length": "Поле «{label}» должно содержать не более {arg} символов",
        "min_length": "Поле «{label}» должно содержать не менее {arg} символов",
        "min": "Значение поля «{label}» должно быть не меньше {arg}",
        "max": "Значение поля «{label}» должно быть не больше {arg}",
        "email": "Поле «{label}» должно содержать корректный email",
        "numeric": "Поле «{label}» должно быть числом",
        "pattern": "Поле «{label}» имеет неверный формат",
    },
}

DEFAULT_LOCALE = "en"


def get_validation_messages(locale: str = DEFAULT_LOCALE) -> Dict[str, str]:
    """Templates for a locale, falling back to English."""
    messages = VALIDATION_MESSAGES.get(locale)
    if messages is None:
        logger.debug(f"No validation messages for locale '{locale}', using '{DEFAULT_LOCALE}'")
        messages = VALIDATION_MESSAGES[DEFAULT_LOCALE]
    return dict(messages)
