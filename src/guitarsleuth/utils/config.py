"""Persistent guitarsleuth settings.

Settings live in ~/.config/guitarsleuth/config.toml (or under
$XDG_CONFIG_HOME). The file is read with tomli and written with tomli-w.

Known keys:
- ``catalog.path``: default catalog file for lookups and matching.
- ``quiz.categories_file``: YAML file with the ordered quiz categories.
"""

import contextlib
import os
from pathlib import Path
from typing import Any, Optional, TypeVar, cast

import tomli
import tomli_w

# Determine config directory respecting XDG_CONFIG_HOME if set.
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
CONFIG_DIR = _xdg_config_home / "guitarsleuth"
CONFIG_FILE = CONFIG_DIR / "config.toml"

ENV_PREFIX = "GUITARSLEUTH_"
_TRUTHY = {"1", "true", "yes", "on"}

T = TypeVar("T")


def _read_config_file() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""
    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve ``data["a"]["b"]`` for ``dotted_key="a.b"``, or None."""
    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str) -> str:
    """Convert ``catalog.path`` to ``GUITARSLEUTH_CATALOG_PATH``."""
    return ENV_PREFIX + dotted_key.replace(".", "_").upper()


def _coerce(value: Any, default: T) -> T:
    """Coerce a raw env/config value to the type of *default*.

    Falls back to *default* when the value cannot be converted.
    """
    if isinstance(default, bool):
        if isinstance(value, bool):
            return cast(T, value)
        if isinstance(value, str):
            return cast(T, value.lower() in _TRUTHY)
        return default
    if isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return cast(T, value)
        with contextlib.suppress(TypeError, ValueError):
            return cast(T, int(value))
        return default
    if isinstance(default, float):
        with contextlib.suppress(TypeError, ValueError):
            return cast(T, float(value))
        return default
    return cast(T, value)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"catalog.path"``.
        default: Value to fall back to when no overrides are found.
        cli_value: Value passed from a CLI option (None when not provided).

    Returns:
        The resolved value, coerced to the type of *default* where possible.
    """
    if cli_value is not None:
        return cli_value

    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    file_val = _lookup_nested(_read_config_file(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    return default


def set_setting(key: str, value: Any) -> None:
    """Write *value* under the dotted *key* in config.toml."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = _read_config_file()
    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        section = section.setdefault(part, {})
    section[leaf] = value
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(data, f)


def get_catalog_path(cli_value: Optional[Path] = None) -> Optional[Path]:
    """Return the catalog file to use, if one is configured."""
    raw = resolve_setting("catalog.path", default=None, cli_value=cli_value)
    return Path(raw).expanduser() if raw else None


def get_quiz_categories_file() -> Optional[Path]:
    """Return a user-supplied quiz categories file, if one is configured."""
    raw = resolve_setting("quiz.categories_file", default=None)
    return Path(raw).expanduser() if raw else None
