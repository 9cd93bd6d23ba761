"""Tests for the configuration loading."""

import pytest

from unixcompleters.config import Configuration, coerce_to_bool, load_configuration
from unixcompleters.constants import BASH_COMPLETION_SCRIPT, DEFAULT_TIMEOUT
from unixcompleters.models import ConfigError


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, True), ("", False), ("no", False), ("Off", False), ("yes", True), (0, False), (1, True)],
)
def test_coerce_to_bool(value, expected):
    assert coerce_to_bool(value, default=True) is expected


def test_defaults():
    config = Configuration()
    assert config.completion_script == BASH_COMPLETION_SCRIPT
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.bash_flags == "-lic"
    assert Configuration(login_shell=False).bash_flags == "-ic"


def test_invalid_values():
    with pytest.raises(ConfigError):
        Configuration(timeout=0)
    with pytest.raises(ConfigError):
        Configuration(bash_path="")
    with pytest.raises(ConfigError, match="Unknown"):
        Configuration.from_mapping({"colour": "red"})
    with pytest.raises(ConfigError, match="Invalid number"):
        Configuration.from_mapping({"timeout": "soon"})


@pytest.mark.asyncio
async def test_missing_file_uses_defaults(tmp_path):
    config = await load_configuration(tmp_path / "missing.toml", environ={})
    assert config.timeout == DEFAULT_TIMEOUT


@pytest.mark.asyncio
async def test_priorities(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[unixcompleters]\nbash_path = "/opt/bash"\ntimeout = 5\nignore_case = "no"\n')

    config = await load_configuration(path, environ={})
    assert config.bash_path == "/opt/bash"
    assert config.timeout == 5.0
    assert config.ignore_case is False

    config = await load_configuration(path, environ={"UNIXCOMPLETERS_TIMEOUT": "1.5"})
    assert config.timeout == 1.5

    config = await load_configuration(path, environ={"UNIXCOMPLETERS_TIMEOUT": "1.5"}, timeout=0.5, bash_path=None)
    assert config.timeout == 0.5
    assert config.bash_path == "/opt/bash"


@pytest.mark.asyncio
async def test_broken_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[unixcompleters\n")
    with pytest.raises(ConfigError, match="Invalid config file"):
        await load_configuration(path, environ={})
