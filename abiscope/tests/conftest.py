"""Unit tests configuration file."""

import pytest

from abiscope.signature import parse


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def inputs():
    """Parse a signature and return its parameter list."""

    def _inputs(signature):
        return parse(signature).inputs

    return _inputs
