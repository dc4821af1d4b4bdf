"""Validator protocol consumed by the builder and the form lifecycle."""

from typing import Any, Dict, List, Mapping, Optional, Protocol


class ValidatorProtocol(Protocol):
    """Protocol for validators bound to one DTO and one rule model.

    ``validate`` resolves to True on success and raises
    ``pyqt_dataform.exceptions.ValidationError`` carrying a
    ``field -> messages`` map on failure.
    """

    @property
    def model(self) -> Dict[str, List[Any]]:
        """The aggregate ``field -> rule specs`` model being validated."""
        ...

    async def validate(self, fields: Optional[Mapping[str, Any]] = None) -> bool:
        """Validate the bound DTO (or an explicit mapping of values)."""
        ...
