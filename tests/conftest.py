"""Pytest fixtures for tests."""

import pytest

from castctl.models import AppConfig, CommandContext

from tests.fakes import FakeScheduler, FakeTransport


@pytest.fixture
def scheduler():
    """Manual clock shared by the transport and the command."""
    return FakeScheduler()


@pytest.fixture
def transport(scheduler):
    """Fake transport; devices only connect when the test says so."""
    return FakeTransport(scheduler)


@pytest.fixture
def config():
    """Default configuration (no timeouts, 10s hello grace period)."""
    return AppConfig()


@pytest.fixture
def make_context():
    """Factory for CommandContext objects aimed at 192.0.2.1:8009."""

    def _make(command: str = "status", **fields) -> CommandContext:
        fields.setdefault("host", "192.0.2.1")
        fields.setdefault("port", 8009)
        return CommandContext(command=command, **fields)

    return _make


@pytest.fixture
def config_path(tmp_path):
    """Path of a config file inside a temporary directory."""
    return tmp_path / "castctl" / "config.json"
