"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``latticeview.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from latticeview.plugins.event_bus import EventBus
from latticeview.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
