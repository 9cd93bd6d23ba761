"""Configuration of the bash invocation.

Values are read from (lowest to highest priority): built-in defaults, the
`[unixcompleters]` table of the TOML config file, environment variables
and explicit overrides.
"""

from __future__ import annotations

import os
import shutil
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from .constants import (
    BASH_COMPLETION_SCRIPT,
    CONFIG_FILE,
    CONFIG_SECTION,
    DEFAULT_BASH_PATH,
    DEFAULT_GRACEFUL_TIMEOUT,
    DEFAULT_TIMEOUT,
)
from .logging_setup import get_logger
from .models import ConfigError

__all__ = ["BOOL_FALSE_STRINGS", "Configuration", "coerce_to_bool", "load_configuration"]

BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})

# Environment variable -> configuration field
ENV_VARIABLES = {
    "UNIXCOMPLETERS_BASH": "bash_path",
    "UNIXCOMPLETERS_TIMEOUT": "timeout",
    "UNIXCOMPLETERS_COMPLETION_SCRIPT": "completion_script",
}


def coerce_to_bool(value: Any, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


def default_bash_path() -> str:
    """Return the bash found in PATH, or the usual location."""
    return shutil.which("bash") or DEFAULT_BASH_PATH


@dataclass(frozen=True)
class Configuration:
    """How to run bash and for how long."""

    bash_path: str = DEFAULT_BASH_PATH
    completion_script: str = BASH_COMPLETION_SCRIPT
    timeout: float = DEFAULT_TIMEOUT
    graceful_timeout: float = DEFAULT_GRACEFUL_TIMEOUT
    login_shell: bool = True
    ignore_case: bool = True

    def __post_init__(self) -> None:
        if not self.bash_path:
            msg = "bash_path must not be empty"
            raise ConfigError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout}"
            raise ConfigError(msg)
        if self.graceful_timeout < 0:
            msg = f"graceful_timeout must not be negative, got {self.graceful_timeout}"
            raise ConfigError(msg)

    @property
    def bash_flags(self) -> str:
        """Flags passed to bash before the script."""
        return "-lic" if self.login_shell else "-ic"

    @classmethod
    def from_mapping(cls, values: dict[str, Any], base: Configuration | None = None) -> Configuration:
        """Return `base` (or the defaults) updated with `values`, converting loosely typed entries.

        Raises:
            ConfigError: on unknown keys or values of the wrong type
        """
        if base is None:
            base = cls(bash_path=default_bash_path())
        known = {f.name: f for f in fields(cls)}
        changes: dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                msg = f"Unknown configuration key: {key}"
                raise ConfigError(msg)
            default = getattr(base, key)
            if isinstance(default, bool):
                changes[key] = coerce_to_bool(value, default)
            elif isinstance(default, float):
                try:
                    changes[key] = float(value)
                except (TypeError, ValueError) as e:
                    msg = f"Invalid number for {key}: {value!r}"
                    raise ConfigError(msg) from e
            else:
                changes[key] = os.path.expanduser(str(value))
        return replace(base, **changes)


async def _read_config_file(path: Path) -> dict[str, Any]:
    """Return the `[unixcompleters]` table of `path`, or an empty dict if the file is missing."""
    log = get_logger("config")
    if not await aiofiles.os.path.exists(path):
        log.debug("No config file at %s", path)
        return {}
    log.debug("Loading %s", path)
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()
    try:
        data = tomllib.loads(content.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        log.error("Problem reading %s: %s", path, e)
        msg = f"Invalid config file {path}: {e}"
        raise ConfigError(msg) from e
    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        msg = f"[{CONFIG_SECTION}] must be a table in {path}"
        raise ConfigError(msg)
    return section


async def load_configuration(
    path: str | Path | None = None,
    environ: dict[str, str] | None = None,
    **overrides: Any,
) -> Configuration:
    """Load the configuration.

    Args:
        path: Config file, defaults to CONFIG_FILE
        environ: Environment to read variables from, defaults to os.environ
        **overrides: Explicit values (None values are ignored)

    Returns:
        The merged configuration

    Raises:
        ConfigError: if the file or a value is invalid
    """
    if environ is None:
        environ = dict(os.environ)
    config_path = Path(os.path.expandvars(str(path))).expanduser() if path else CONFIG_FILE

    config = Configuration.from_mapping(await _read_config_file(config_path))
    config = Configuration.from_mapping({field: environ[var] for var, field in ENV_VARIABLES.items() if environ.get(var)}, config)
    return Configuration.from_mapping({k: v for k, v in overrides.items() if v is not None}, config)
