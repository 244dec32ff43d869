"""Prowl error hierarchy.

All prowl-specific errors inherit from ProwlError for easy catching.
Only BootstrapError is fatal; everything else is local to one file,
plugin, or connection and is reported without stopping the orchestrator.
"""

from __future__ import annotations

from pathlib import Path


class ProwlError(Exception):
    """Base error for all prowl operations."""


class ConfigError(ProwlError):
    """Invalid or missing configuration."""


class ContentError(ProwlError):
    """Error while processing a watched source file."""


class ReadError(ContentError):
    """A watched file vanished or could not be read during change processing."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to read {path}: {cause}")
        self.path = path
        self.cause = cause


class PluginError(ProwlError):
    """Error raised by or about a plugin."""


class HookError(PluginError):
    """A plugin hook raised while being dispatched."""

    def __init__(
        self,
        plugin: str,
        hook: str,
        cause: BaseException,
        path: Path | None = None,
    ) -> None:
        where = f" for {path}" if path is not None else ""
        super().__init__(f"{plugin}.{hook}{where} failed: {cause}")
        self.plugin = plugin
        self.hook = hook
        self.path = path
        self.cause = cause


class TransportError(ProwlError):
    """A push-channel send failed."""


class BootstrapError(ProwlError):
    """A startup resource (e.g. the listening port) could not be acquired."""
