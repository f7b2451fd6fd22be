"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``metafilter.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from metafilter.plugins.hookspecs import hookimpl
from metafilter.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
