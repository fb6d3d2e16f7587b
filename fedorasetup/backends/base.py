"""Abstract capability interfaces over the system tools."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from fedorasetup.runner import CommandResult, CommandRunner


class DockerNetworkInfo(BaseModel):
    """Subset of ``docker network inspect`` relevant to macvlan networks."""

    name: str
    driver: str = ""
    parent: str = ""
    subnet: str = ""
    gateway: str = ""
    ip_range: str = ""
    containers: list[str] = Field(default_factory=list)


class BaseBackend(ABC):
    """Backend bound to a command runner."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner


class BasePackageManager(BaseBackend):
    """Abstract base class for the system package manager."""

    @abstractmethod
    def install(self, packages: list[str]) -> CommandResult:
        """Install packages non-interactively."""

    @abstractmethod
    def add_repo(self, repo_url: str) -> CommandResult:
        """Add a repository from a remote ``.repo`` file."""

    @abstractmethod
    def makecache(self) -> CommandResult:
        """Refresh repository metadata."""


class BaseServiceManager(BaseBackend):
    """Abstract base class for the service manager."""

    @abstractmethod
    def enable(self, unit: str, now: bool = False) -> CommandResult:
        """Enable a unit, optionally starting it right away."""

    @abstractmethod
    def daemon_reload(self) -> CommandResult:
        """Reload unit files from disk."""


class BaseNetworkManagerClient(BaseBackend):
    """Abstract base class for NetworkManager connection profiles."""

    @abstractmethod
    def connection_exists(self, name: str) -> bool:
        """Check whether a connection profile with this name exists."""

    @abstractmethod
    def add_vlan_connection(self, name: str, ifname: str, parent: str, vlan_id: int) -> CommandResult:
        """Create a VLAN connection profile without IP configuration."""

    @abstractmethod
    def delete_connection(self, name: str) -> CommandResult:
        """Delete a connection profile."""

    @abstractmethod
    def up(self, name: str) -> CommandResult:
        """Activate a connection profile."""

    @abstractmethod
    def connection_summary(self, name: str) -> list[str]:
        """Return the general properties of a connection for diagnostics."""


class BaseContainerEngine(BaseBackend):
    """Abstract base class for the container engine."""

    @abstractmethod
    def info(self) -> CommandResult:
        """Show engine-wide information."""

    @abstractmethod
    def network_exists(self, name: str) -> bool:
        """Check whether a network exists."""

    @abstractmethod
    def inspect_network(self, name: str) -> DockerNetworkInfo | None:
        """Return network details, or None if it does not exist."""

    @abstractmethod
    def create_macvlan_network(
        self,
        name: str,
        subnet: str,
        gateway: str,
        parent: str,
        ip_range: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        """Create a macvlan network attached to ``parent``."""

    @abstractmethod
    def remove_network(self, name: str) -> CommandResult:
        """Remove a network."""

    @abstractmethod
    def container_exists(self, name: str) -> bool:
        """Check whether a container (running or not) exists."""

    @abstractmethod
    def remove_container(self, name: str) -> CommandResult:
        """Force-remove a container."""

    @abstractmethod
    def create_volume(self, name: str) -> CommandResult:
        """Create a named volume."""

    @abstractmethod
    def run_container(
        self,
        image: str,
        name: str,
        *,
        detach: bool = True,
        remove: bool = False,
        restart: str | None = None,
        network: str | None = None,
        ports: list[str] | None = None,
        volumes: list[str] | None = None,
        command: list[str] | None = None,
    ) -> CommandResult:
        """Start a container."""

    @abstractmethod
    def exec_in_container(self, name: str, command: list[str]) -> CommandResult:
        """Run a command inside a running container."""

    @abstractmethod
    def stop_container(self, name: str) -> CommandResult:
        """Stop a running container."""

    @abstractmethod
    def container_ip(self, name: str) -> str:
        """Return the container's IP address(es), or an empty string."""


class BaseLinkConfigurator(BaseBackend):
    """Abstract base class for kernel links, addresses and routes."""

    @abstractmethod
    def list_interfaces(self) -> list[str]:
        """List interface names, loopback excluded."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether an interface exists."""

    @abstractmethod
    def state(self, name: str) -> str | None:
        """Return the operational state (e.g. ``UP``), or None if missing."""

    @abstractmethod
    def set_up(self, name: str) -> CommandResult:
        """Bring an interface up."""

    @abstractmethod
    def show(self, name: str) -> str:
        """Return the detailed link listing for diagnostics."""

    @abstractmethod
    def add_macvlan(self, name: str, parent: str, mode: str = "bridge") -> CommandResult:
        """Create a macvlan interface on ``parent``."""

    @abstractmethod
    def delete(self, name: str) -> CommandResult:
        """Delete an interface."""

    @abstractmethod
    def add_address(self, name: str, cidr: str) -> CommandResult:
        """Assign an address to an interface."""

    @abstractmethod
    def has_route(self, destination: str, dev: str) -> bool:
        """Check whether a route to ``destination`` via ``dev`` exists."""

    @abstractmethod
    def add_route(self, destination: str, dev: str) -> CommandResult:
        """Add a route to ``destination`` via ``dev``."""
