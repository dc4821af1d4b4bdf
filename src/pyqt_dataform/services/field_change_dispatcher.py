"""
Unified Field Change Dispatcher.

Centralizes delivery of widget value changes to the per-field watchers
installed by the builder. Changes raised while a watcher is running (for
example an ``on_set_value`` hook that calls ``builder.update()``) are queued
and delivered after it, in order, instead of re-entering the running
watcher.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pyqt_dataform.services.form_service import FormService

logger = logging.getLogger(__name__)

# Debug flag for verbose dispatcher logging
DEBUG_DISPATCHER = False


@dataclass(frozen=True)
class FieldChangeEvent:
    """Immutable event representing a widget value change."""
    field: str                  # DTO field name
    value: Any                  # New display value
    old_value: Any              # Previous display value
    source: 'FormService'       # Service owning the watcher


class FieldChangeDispatcher:
    """
    Singleton dispatcher for all field changes.

    The dispatcher itself holds no state: delivery state (the running flag
    and the queue of pending events) lives on each ``FormService``, so forms
    never block each other. If a watcher raises, the events still queued
    behind it are dropped with a warning and the error propagates.
    """

    _instance = None

    @classmethod
    def instance(cls) -> 'FieldChangeDispatcher':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def dispatch(self, event: FieldChangeEvent) -> None:
        """Deliver an event now, or queue it behind the running delivery."""
        source = event.source
        source._dispatch_queue.append(event)

        if source._dispatching:
            if DEBUG_DISPATCHER:
                logger.info(f"DISPATCH QUEUED: {event.field} (delivery in progress)")
            return

        source._dispatching = True
        try:
            while source._dispatch_queue:
                self._deliver(source._dispatch_queue.popleft())
        finally:
            source._dispatching = False
            if source._dispatch_queue:
                dropped = [event.field for event in source._dispatch_queue]
                logger.warning(f"Dropped {len(dropped)} queued field changes after a watcher failure: {dropped}")
                source._dispatch_queue.clear()

    def _deliver(self, event: FieldChangeEvent) -> None:
        watcher = event.source.get_watcher(event.field)
        if watcher is None:
            logger.debug(f"No watcher for '{event.field}', change dropped")
            return

        if DEBUG_DISPATCHER:
            logger.info(
                f"DISPATCH: {event.field}: {repr(event.old_value)[:50]} -> {repr(event.value)[:50]}"
            )
        watcher(event.value, event.old_value)
