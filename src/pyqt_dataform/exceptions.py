"""Data form exceptions."""

from typing import Dict, List, Optional


class DataFormError(Exception):
    """Base class for all data form errors."""


class SchemaError(DataFormError):
    """Raised when a form schema references something that does not exist.

    Schema errors are programming errors, never runtime conditions: they are
    raised immediately and are not retried.
    """


class SnippetNotDefinedError(SchemaError, KeyError):
    """Raised when a snippet name is not registered in the embed table."""

    def __init__(self, snippet: object, available: Optional[List[str]] = None):
        self.snippet = snippet
        self.available = available or []
        super().__init__(
            f"Snippet {snippet!r} is not defined in embed snippets. "
            f"Available snippets: {self.available}"
        )

    def __str__(self) -> str:
        return self.args[0]


class ValidationError(DataFormError):
    """Raised by a validator when one or more field rules fail.

    Attributes:
        errors: Mapping of field name to the list of failure messages
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        fields = ", ".join(errors) or "(none)"
        super().__init__(f"Validation failed for fields: {fields}")
