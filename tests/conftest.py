" generic fixtures "
import pytest

from .testtools import FakeBash


def pytest_configure():
    "Runs once before all"
    from unixcompleters.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def fake_bash():
    "A script runner answering `complete -p ls` with _longopt"
    bash = FakeBash()
    bash.on("complete -p", "complete -F _longopt ls\n")
    return bash
