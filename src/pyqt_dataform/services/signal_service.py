"""
Per-field change counters.

The builder never pushes values into widgets. Instead every ``update()``
bumps a counter per touched field and emits ``ref_changed``; renderers (or
``FieldBinding``) listen and re-read the field through its value getter.
This counter is the single re-render signal of the data form core.
"""

import logging
from typing import Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


class FieldRefs(QObject):
    """
    Change counters keyed by field name.

    Examples:
        refs = FieldRefs()
        refs.ref_changed.connect(lambda field, counter: repaint(field))
        refs.bump("name")   # emits ref_changed("name", 1)
    """

    ref_changed = pyqtSignal(str, int)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._refs: Dict[str, int] = {}

    def get(self, field: str) -> int:
        """Current counter of a field (0 if it was never touched)."""
        return self._refs.setdefault(field, 0)

    def bump(self, field: str) -> int:
        """Increment a field's counter and notify listeners."""
        counter = self._refs[field] = self.get(field) + 1
        logger.debug(f"Ref bump: {field} -> {counter}")
        self.ref_changed.emit(field, counter)
        return counter
