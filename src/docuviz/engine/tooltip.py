"""
Shared Tooltip
==============
One tooltip for the whole document, created lazily the first time a diagram
shows text in it. Views that display it register a creation hook. Only one
pointer exists at a time, so the last diagram to write to it wins; hide()
from a diagram that no longer owns it is ignored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

OFFSET_X = 15.0
OFFSET_Y = -10.0


@dataclass
class TooltipContent:
    owner: str
    text: str
    x: float
    y: float


class Tooltip:
    def __init__(self) -> None:
        self.content: Optional[TooltipContent] = None
        self.visible = False
        self._listeners: list[Callable[[Tooltip], None]] = []

    @property
    def owner(self) -> Optional[str]:
        return self.content.owner if self.content is not None else None

    def subscribe(self, listener: Callable[[Tooltip], None]) -> None:
        self._listeners.append(listener)

    def show(self, owner: str, text: str, x: float, y: float) -> None:
        """Show text near the pointer position (x, y) in global coordinates."""
        self.content = TooltipContent(owner, text, x + OFFSET_X, y + OFFSET_Y)
        self.visible = True
        self._notify()

    def hide(self, owner: Optional[str] = None) -> None:
        if owner is not None and owner != self.owner:
            return
        if not self.visible:
            return
        self.visible = False
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)


_TOOLTIP: Optional[Tooltip] = None
_CREATION_HOOKS: list[Callable[[Tooltip], None]] = []


def shared_tooltip() -> Tooltip:
    global _TOOLTIP
    if _TOOLTIP is None:
        logger.debug("Creating shared tooltip")
        _TOOLTIP = Tooltip()
        for hook in _CREATION_HOOKS:
            hook(_TOOLTIP)
    return _TOOLTIP


def peek_shared_tooltip() -> Optional[Tooltip]:
    """Return the shared tooltip if it was created, without creating it."""
    return _TOOLTIP


def on_shared_tooltip_created(hook: Callable[[Tooltip], None]) -> None:
    """Call hook with the shared tooltip once it exists (immediately if it already does)."""
    _CREATION_HOOKS.append(hook)
    if _TOOLTIP is not None:
        hook(_TOOLTIP)


def reset_shared_tooltip() -> None:
    global _TOOLTIP
    _TOOLTIP = None
    _CREATION_HOOKS.clear()
