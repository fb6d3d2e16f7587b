"""Shared fixtures for the fedorasetup test suite."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from fedorasetup.console import BasePrompter
from fedorasetup.runner import CommandResult
from fedorasetup.vlan.models import ShimConfig, VlanNetworkConfig


def _ok(stdout: str = "", args: list[str] | None = None) -> CommandResult:
    return CommandResult(args or [], 0, stdout, "")


def _failed(returncode: int = 1, stderr: str = "boom", args: list[str] | None = None) -> CommandResult:
    return CommandResult(args or [], returncode, "", stderr)


class ScriptedPrompter(BasePrompter):
    """Prompter answering from a fixed list and recording every question."""

    def __init__(self, answers: list[str] | None = None):
        self.answers = list(answers or [])
        self.prompts: list[str] = []

    def ask(self, prompt: str, default: str = "") -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt}")
        answer = self.answers.pop(0)
        return answer or default


# ── runner / prompter ─────────────────────────────────────────────────


@pytest.fixture()
def ok():
    """Factory fixture returning a successful CommandResult."""
    return _ok


@pytest.fixture()
def failed():
    """Factory fixture returning a failed CommandResult."""
    return _failed


@pytest.fixture()
def mock_runner():
    """MagicMock of CommandRunner whose commands all succeed."""
    runner = MagicMock()
    runner.use_sudo = True
    runner.run.return_value = _ok()
    return runner


@pytest.fixture()
def prompter():
    """Factory fixture returning a ScriptedPrompter with the given answers."""

    def _make(*answers: str) -> ScriptedPrompter:
        return ScriptedPrompter(list(answers))

    return _make


# ── backend mocks ─────────────────────────────────────────────────────


@pytest.fixture()
def mock_nm():
    """MagicMock of a NetworkManager client with no existing connections."""
    nm = MagicMock()
    nm.connection_exists.return_value = False
    nm.add_vlan_connection.return_value = _ok()
    nm.delete_connection.return_value = _ok()
    nm.up.return_value = _ok()
    nm.connection_summary.return_value = []
    return nm


@pytest.fixture()
def mock_link():
    """MagicMock of a link configurator; interfaces are UP, shims absent."""
    link = MagicMock()
    link.list_interfaces.return_value = ["eno1", "eth0"]
    link.exists.side_effect = lambda name: name in ("eno1", "eth0")
    link.state.return_value = "UP"
    link.show.return_value = ""
    link.set_up.return_value = _ok()
    link.add_macvlan.return_value = _ok()
    link.delete.return_value = _ok()
    link.add_address.return_value = _ok()
    link.has_route.return_value = False
    link.add_route.return_value = _ok()
    return link


@pytest.fixture()
def mock_engine():
    """MagicMock of a container engine with no existing networks or containers."""
    engine = MagicMock()
    engine.info.return_value = _ok("Server Version: 27.0")
    engine.network_exists.return_value = False
    engine.inspect_network.return_value = None
    engine.create_macvlan_network.return_value = _ok()
    engine.remove_network.return_value = _ok()
    engine.container_exists.return_value = False
    engine.remove_container.return_value = _ok()
    engine.create_volume.return_value = _ok()
    engine.run_container.return_value = _ok()
    engine.exec_in_container.return_value = _ok()
    engine.stop_container.return_value = _ok()
    engine.container_ip.return_value = "10.32.11.130"
    return engine


@pytest.fixture()
def mock_services():
    """MagicMock of a service manager whose calls succeed."""
    services = MagicMock()
    services.enable.return_value = _ok()
    services.daemon_reload.return_value = _ok()
    return services


@pytest.fixture()
def mock_packages():
    """MagicMock of a package manager whose calls succeed."""
    packages = MagicMock()
    packages.install.return_value = _ok()
    packages.add_repo.return_value = _ok()
    packages.makecache.return_value = _ok()
    return packages


# ── vlan fixtures ─────────────────────────────────────────────────────


@pytest.fixture()
def vlan_config():
    """Factory fixture returning a VlanNetworkConfig with customizable fields."""

    def _make(**kwargs):
        defaults = {
            "parent_interface": "eno1",
            "vlan_id": 11,
            "subnet": "10.32.11.0/24",
            "gateway": "10.32.11.1",
            "network_name": "service-vlan",
            "ip_range": None,
            "shim": None,
        }
        defaults.update(kwargs)
        return VlanNetworkConfig(**defaults)

    return _make


@pytest.fixture()
def shim_config():
    """ShimConfig on the VLAN interface with a host address."""
    return ShimConfig(parent="", address="10.32.11.250/32")
