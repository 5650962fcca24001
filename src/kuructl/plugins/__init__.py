"""Extension layer — console layers contributed via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus the built-in stub layers.
INVARIANT: Plugin failures are warnings, never errors.
"""

from kuructl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
