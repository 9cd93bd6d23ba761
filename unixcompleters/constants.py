"""Shared constants for unixcompleters."""

import os
from pathlib import Path

__all__ = [
    "BASH_COMPLETION_SCRIPT",
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "DEFAULT_BASH_PATH",
    "DEFAULT_GRACEFUL_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "PREDICTOR_DESCRIPTION",
    "PREDICTOR_ID",
    "PREDICTOR_NAME",
]

# Standard completion-definitions facility shipped by the bash-completion package
BASH_COMPLETION_SCRIPT = "/usr/share/bash-completion/bash_completion"

DEFAULT_BASH_PATH = "/bin/bash"

# Seconds allowed for a single bash invocation
DEFAULT_TIMEOUT = 2.0

# Seconds between SIGTERM and SIGKILL when a bash invocation must be stopped
DEFAULT_GRACEFUL_TIMEOUT = 0.2

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "unixcompleters" / "config.toml"
CONFIG_SECTION = "unixcompleters"

PREDICTOR_ID = "3b5f4a2e-59a0-4c4e-8f46-5c7dc7b2e1f9"
PREDICTOR_NAME = "UnixUtilPredictor"
PREDICTOR_DESCRIPTION = "Predicts arguments of native Unix utilities using their bash completion functions"
