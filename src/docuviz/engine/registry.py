"""
Diagram Registry & Activation Record
====================================
Maps a container identifier to the initializer that builds its diagram and
records which containers have been activated.

Why is this file needed?
------------------------
1. At-most-once: activate() is check-then-insert on the single event-loop
   thread, so an initializer is scheduled for activation at most once per
   registry lifetime, however often its container scrolls back into view.
2. Handles: Whatever an initializer returns (a diagram handle, or None when
   its container is absent) is kept here, so callers that need to filter or
   update a diagram later ask the registry instead of reaching for globals.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Initializer = Callable[[], Any]


@dataclass
class _Entry:
    container_id: str
    initializer: Initializer
    invocations: int = 0
    handle: Any = None


class ActivationRecord:
    """Ordered set of container ids that have been activated."""

    def __init__(self) -> None:
        self._ids: dict[str, None] = {}

    def __contains__(self, container_id: object) -> bool:
        return container_id in self._ids

    def __iter__(self):
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, container_id: str) -> bool:
        """Insert container_id. Returns False if it was already present."""
        if container_id in self._ids:
            return False
        self._ids[container_id] = None
        return True


class DiagramRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self.record = ActivationRecord()

    def register(self, container_id: str, initializer: Initializer) -> None:
        if not container_id:
            raise ValueError("container_id must be a non-empty string")
        if container_id in self._entries:
            raise ValueError(f"Container '{container_id}' is already registered.")
        self._entries[container_id] = _Entry(container_id, initializer)

    def __contains__(self, container_id: object) -> bool:
        return container_id in self._entries

    def container_ids(self) -> list[str]:
        return list(self._entries)

    def is_activated(self, container_id: str) -> bool:
        return container_id in self.record

    def activated(self) -> list[str]:
        return list(self.record)

    def mark_activated(self, container_id: str) -> bool:
        """
        Claim activation for container_id.

        Returns True exactly once per registered container; False for repeats
        and for unknown ids.
        """
        if container_id not in self._entries:
            logger.debug(f"Ignoring activation of unregistered container '{container_id}'")
            return False
        return self.record.add(container_id)

    def invoke(self, container_id: str) -> Any:
        """
        Run the initializer of container_id and keep its handle.

        Exceptions are logged and swallowed: a broken diagram must not take
        the page (or the event loop) down with it.
        """
        entry = self._entries[container_id]
        entry.invocations += 1
        try:
            handle = entry.initializer()
        except Exception:
            logger.exception(f"Initializer for '{container_id}' failed")
            return None
        if handle is not None:
            entry.handle = handle
        return handle

    def invocations(self, container_id: str) -> int:
        return self._entries[container_id].invocations

    def handle(self, container_id: str) -> Any:
        entry = self._entries.get(container_id)
        return entry.handle if entry is not None else None
