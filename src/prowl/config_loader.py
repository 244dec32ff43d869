"""Load ProwlConfig from prowl.yaml / prowl.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import importlib
import os
import tomllib
from pathlib import Path
from typing import Any

import yaml

from prowl._errors import ConfigError
from prowl.config import ProwlConfig

# Keys accepted from a config file
_KNOWN_KEYS: frozenset[str] = frozenset({
    "src_dir",
    "out_dir",
    "host",
    "port",
    "entry_point",
    "typescript",
    "plugins",
    "debounce_ms",
    "index_document",
    "hmr_path",
})

# Short names for bundled plugins
_BUILTIN_PLUGINS: dict[str, str] = {
    "jsx": "prowl.plugins.jsx:JSXPlugin",
}


def load_config(root: Path, **overrides: object) -> ProwlConfig:
    """Load ProwlConfig from root, optionally merging prowl.yaml/prowl.toml.

    Precedence, lowest first: file values, ``PORT`` environment variable,
    explicit overrides. Overrides whose value is ``None`` are ignored so
    that unset CLI flags do not mask file values.

    Raises:
        ConfigError: If the config file is malformed, has unknown keys, or
            names a plugin that cannot be imported.

    """
    merged = _read_prowl_config(root)

    env_port = os.environ.get("PORT")
    if env_port:
        try:
            merged["port"] = int(env_port)
        except ValueError as exc:
            msg = f"PORT must be an integer, got {env_port!r}"
            raise ConfigError(msg) from exc

    merged.update({k: v for k, v in overrides.items() if v is not None})

    plugins = merged.get("plugins", ())
    if isinstance(plugins, (list, tuple)):
        merged["plugins"] = tuple(
            resolve_plugin(p) if isinstance(p, str) else p for p in plugins
        )
    else:
        msg = f"plugins must be a list, got {type(plugins).__name__}"
        raise ConfigError(msg)

    return ProwlConfig(root=root, **merged)


def resolve_plugin(spec: str) -> Any:
    """Resolve a ``module:attr`` plugin spec (or builtin alias) to an instance.

    Classes are instantiated with no arguments; any other attribute is
    returned as-is.

    """
    target = _BUILTIN_PLUGINS.get(spec, spec)
    module_part, _, attr = target.partition(":")
    if not module_part or not attr:
        msg = f"plugin {spec!r}: expected 'module:attr'"
        raise ConfigError(msg)
    try:
        module = importlib.import_module(module_part)
    except ImportError as exc:
        msg = f"plugin {spec!r}: cannot import {module_part!r}: {exc}"
        raise ConfigError(msg) from exc
    obj = getattr(module, attr, None)
    if obj is None:
        msg = f"plugin {spec!r}: {attr} not found in {module_part}"
        raise ConfigError(msg)
    return obj() if isinstance(obj, type) else obj


def _read_prowl_config(root: Path) -> dict[str, object]:
    """Read prowl config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("prowl.yaml", "prowl.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "prowl.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_prowl_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_prowl_section(data, path)


def _flatten_prowl_section(data: object, path: Path) -> dict[str, object]:
    """Extract prowl.* keys into top-level config."""
    if not isinstance(data, dict):
        msg = f"{path}: top level must be a mapping"
        raise ConfigError(msg)

    result: dict[str, object] = {}
    section = data.get("prowl")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "prowl":
            result[k] = v

    unknown = sorted(set(result) - _KNOWN_KEYS)
    if unknown:
        msg = f"{path}: unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return result
