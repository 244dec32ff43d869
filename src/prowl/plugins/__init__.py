"""Plugin layer — optional-hook plugins and their ordered dispatch."""

from prowl.plugins.base import HOOK_NAMES, Plugin, plugin_name
from prowl.plugins.registry import PluginRegistry

__all__ = ["HOOK_NAMES", "Plugin", "PluginRegistry", "plugin_name"]
