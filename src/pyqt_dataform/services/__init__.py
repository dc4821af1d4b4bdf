"""
Service layer for data forms.

Selection resolution and value transforms, change refs, field locks,
change dispatch, snippet resolution and renderer-side bindings.
"""

from .signal_service import FieldRefs
from .field_lock_service import FieldLockService, LockKind, LockState
from .field_change_dispatcher import FieldChangeDispatcher, FieldChangeEvent
from .form_service import FormService
from .snippet_service import SnippetService
from .binding_service import FieldBinding

__all__ = [
    "FieldRefs",
    "FieldLockService",
    "LockKind",
    "LockState",
    "FieldChangeDispatcher",
    "FieldChangeEvent",
    "FormService",
    "SnippetService",
    "FieldBinding",
]
