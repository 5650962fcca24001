"""Layer plugin discovery and loading.

Layers come from two places: the built-in stub layers (plugin name
``stubs``) and pip-installed packages exposing a plugin under the
``kuructl.layers`` entry-point group. Every plugin answers the
``kuructl_layers`` hook with the layers it serves.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

import pluggy

from kuructl.domain.location import LAYER_NAME_LENGTH
from kuructl.plugins.hookspecs import KuructlHookSpec
from kuructl.transport.contracts import ConsoleLayer

PROJECT_NAME = "kuructl"
ENTRY_POINT_GROUP = "kuructl.layers"
BUILTIN_STUBS = "stubs"

logger = logging.getLogger(__name__)


class PluginManager:
    """Registers layer plugins and collects the layers they provide."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(KuructlHookSpec)

    def discover_and_load(self, *, builtins: bool = True, disabled: Iterable[str] = ()) -> list[str]:
        """Register the stub layers and every entry-point plugin.

        Names in *disabled* are blocked first, so neither a built-in nor an
        installed plugin with that name is loaded. Returns the plugin names.
        """
        for name in disabled:
            self._pm.set_blocked(name)
        if builtins and not self._pm.is_blocked(BUILTIN_STUBS):
            from kuructl.plugins.builtins.stubs import StubLayersPlugin

            self.register_plugin(StubLayersPlugin(), name=BUILTIN_STUBS)
        loaded = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d entry-point plugin(s) from %s", loaded, ENTRY_POINT_GROUP)
        self._instantiate_class_plugins()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin object; *name* defaults to its class name."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Names of the registered (not blocked) plugins, in registration order."""
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    # ------------------------------------------------------------------
    # Layer collection
    # ------------------------------------------------------------------

    def collect_layers(self) -> list[ConsoleLayer]:
        """Gather layers from every plugin, ordered by layer id.

        A plugin that raises or returns something unusable is skipped with a
        warning. When two layers claim the same id the first one registered
        wins.
        """
        layers: dict[int, ConsoleLayer] = {}
        # Blocked names are listed with a None plugin.
        for plugin_name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue
            for layer in self._plugin_layers(plugin, plugin_name):
                if layer.layer_id in layers:
                    logger.warning(
                        "Plugin %s: layer id %d already provided by %s",
                        plugin_name,
                        layer.layer_id,
                        layers[layer.layer_id].name,
                    )
                    continue
                layers[layer.layer_id] = layer
        return [layers[layer_id] for layer_id in sorted(layers)]

    @staticmethod
    def _plugin_layers(plugin: object, plugin_name: str) -> list[ConsoleLayer]:
        hook = getattr(plugin, "kuructl_layers", None)
        if hook is None:
            return []

        try:
            provided = hook()
        except Exception:
            logger.warning("Failed to collect layers from plugin %s", plugin_name, exc_info=True)
            return []

        if provided is None:
            return []
        if not isinstance(provided, (list, tuple)):
            logger.warning("Plugin %s returned non-list layer registrations", plugin_name)
            return []

        accepted: list[ConsoleLayer] = []
        for layer in provided:
            if not isinstance(layer, ConsoleLayer):
                logger.warning("Plugin %s returned a non-layer object %r", plugin_name, layer)
                continue
            if layer.layer_id < 0 or not 0 < len(layer.name) <= LAYER_NAME_LENGTH:
                logger.warning(
                    "Plugin %s: skipping layer %r (invalid id or name)", plugin_name, layer.name
                )
                continue
            accepted.append(layer)
        return accepted

    # ------------------------------------------------------------------
    # Entry-point plugins
    # ------------------------------------------------------------------

    def _instantiate_class_plugins(self) -> None:
        """Swap plugin classes registered from entry points for instances.

        An entry point may name a class rather than a module or object; its
        ``kuructl_layers`` would then be called without ``self``.
        """
        for name, plugin in self._pm.list_name_plugin():
            if plugin is None or not inspect.isclass(plugin) or not _declares_hooks(plugin):
                continue
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Failed to instantiate layer plugin %s", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
            logger.debug("Instantiated layer plugin: %s", name)


def _declares_hooks(cls: type) -> bool:
    """True if a public attribute of *cls* carries the ``kuructl_impl`` marker."""
    return any(
        callable(getattr(cls, attr, None)) and getattr(getattr(cls, attr), "kuructl_impl", None)
        for attr in dir(cls)
        if not attr.startswith("_")
    )
