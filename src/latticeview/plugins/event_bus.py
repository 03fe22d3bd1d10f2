"""Synchronous hook dispatch with failure capture.

The view core is single-threaded, so events are delivered inline. A
failing plugin is logged and its event parked in ``dead_letters``; the
caller receives a warning string and carries on.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from latticeview.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeadLetter:
    hook_name: str
    payload: dict[str, Any]
    error: str


class EventBus:
    """Dispatch lifecycle events to registered plugins.

    Parameters:
        plugin_manager: PluginManager whose hook relay receives events.
        max_dead_letters: Oldest failures are dropped beyond this count.
    """

    def __init__(self, plugin_manager: PluginManager, *, max_dead_letters: int = 100) -> None:
        self._pm = plugin_manager
        self._max_dead_letters = max_dead_letters
        self.dead_letters: list[DeadLetter] = []

    def dispatch(self, hook_name: str, **payload: Any) -> str | None:
        """Call *hook_name* with *payload*. Returns a warning on failure."""
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return None
        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.warning("Plugin hook %s failed: %s", hook_name, exc, exc_info=True)
            self.dead_letters.append(DeadLetter(hook_name, dict(payload), str(exc)))
            if len(self.dead_letters) > self._max_dead_letters:
                del self.dead_letters[: len(self.dead_letters) - self._max_dead_letters]
            return f"Plugin hook {hook_name} failed: {exc}"
        return None
