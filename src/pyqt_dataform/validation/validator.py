"""Validator bound to one DTO and one aggregate rule model."""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pyqt_dataform.exceptions import ValidationError
from pyqt_dataform.validation.rules import ValidationRules

logger = logging.getLogger(__name__)


class Validator:
    """
    Runs every rule of the model against the DTO.

    The model is held by reference: rules added to or removed from the
    builder's aggregate model are seen by the next ``validate()``.
    """

    def __init__(self, fields: Mapping, model: Dict[str, List[Any]], rules: Optional[Any] = None):
        self.fields = fields
        self._model = model
        self.rules = rules if rules is not None else ValidationRules(fields)

    @property
    def model(self) -> Dict[str, List[Any]]:
        return self._model

    async def validate(self, fields: Optional[Mapping] = None) -> bool:
        """
        Validate the DTO (or an explicit mapping of values).

        Raises:
            ValidationError: With a ``field -> messages`` map when any rule fails
        """
        values = self.fields if fields is None else fields
        errors: Dict[str, List[str]] = {}

        for field, specs in self._model.items():
            for spec in specs or []:
                message = self.rules.check(spec, values.get(field), field, values)
                if inspect.isawaitable(message):
                    message = await message
                if message:
                    errors.setdefault(field, []).append(message)

        if errors:
            logger.debug(f"Validation failed: {errors}")
            raise ValidationError(errors)
        return True
