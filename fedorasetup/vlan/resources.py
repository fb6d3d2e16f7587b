"""Managed resources of the VLAN provisioner."""

from __future__ import annotations

from loguru import logger

from fedorasetup.backends.base import BaseContainerEngine, BaseLinkConfigurator, BaseNetworkManagerClient
from fedorasetup.console import print_error, print_info
from fedorasetup.reconcile import ManagedResource
from fedorasetup.runner import CommandResult
from fedorasetup.vlan.models import VlanNetworkConfig


class VlanConnectionResource(ManagedResource):
    """NetworkManager VLAN connection profile ``vlan<ID>``."""

    kind = "VLAN connection"

    def __init__(self, config: VlanNetworkConfig, nm: BaseNetworkManagerClient) -> None:
        super().__init__(config.connection_name)
        self.config = config
        self.nm = nm

    def exists(self) -> bool:
        return self.nm.connection_exists(self.name)

    def delete(self) -> CommandResult:
        return self.nm.delete_connection(self.name)

    def create(self) -> CommandResult:
        print_info(f"Creating VLAN connection '{self.name}'...")
        return self.nm.add_vlan_connection(
            self.name,
            ifname=self.config.vlan_interface,
            parent=self.config.parent_interface,
            vlan_id=self.config.vlan_id,
        )

    def describe(self) -> list[str]:
        return [f"Interface: {self.config.vlan_interface}"]


class ShimInterfaceResource(ManagedResource):
    """Host-side macvlan interface ``macvlan<ID>-shim`` in bridge mode.

    Creating it also assigns the optional address, brings it up and adds the
    subnet route when that route is not already present.
    """

    kind = "shim interface"
    delete_failure_fatal = False

    def __init__(self, config: VlanNetworkConfig, link: BaseLinkConfigurator) -> None:
        super().__init__(config.shim_name)
        self.config = config
        self.link = link

    def exists(self) -> bool:
        return self.link.exists(self.name)

    def delete(self) -> CommandResult:
        return self.link.delete(self.name)

    def create(self) -> CommandResult:
        print_info(f"Creating shim interface '{self.name}' on {self.config.shim_parent}...")
        result = self.link.add_macvlan(self.name, self.config.shim_parent, mode="bridge")
        if not result.ok:
            return result

        address = self.config.shim.address if self.config.shim else None
        if address:
            result = self.link.add_address(self.name, address)
            if not result.ok:
                return result

        result = self.link.set_up(self.name)
        if not result.ok:
            return result

        return self.ensure_route()

    def ensure_route(self) -> CommandResult:
        """Add the subnet route via the shim only if it is absent."""
        if self.link.has_route(self.config.subnet, self.name):
            logger.debug(f"Route {self.config.subnet} dev {self.name} already present")
            return CommandResult(["ip", "route", "show", self.config.subnet, "dev", self.name], 0)
        return self.link.add_route(self.config.subnet, self.name)

    def describe(self) -> list[str]:
        state = self.link.state(self.name) or "unknown"
        return [f"State: {state}"]


class DockerNetworkResource(ManagedResource):
    """Docker macvlan network keyed by the chosen network name."""

    kind = "Docker network"

    def __init__(self, config: VlanNetworkConfig, engine: BaseContainerEngine) -> None:
        super().__init__(config.network_name)
        self.config = config
        self.engine = engine

    def exists(self) -> bool:
        return self.engine.network_exists(self.name)

    def delete(self) -> CommandResult:
        return self.engine.remove_network(self.name)

    def create(self) -> CommandResult:
        c = self.config
        print_info(f"Creating Docker macvlan network '{self.name}'...")
        print_info(f"  Parent interface: {c.vlan_interface}")
        print_info(f"  Subnet: {c.subnet}")
        print_info(f"  Gateway: {c.gateway}")
        if c.ip_range:
            print_info(f"  IP Range: {c.ip_range}")

        result = self.engine.create_macvlan_network(
            self.name, c.subnet, c.gateway, c.vlan_interface, ip_range=c.ip_range
        )
        if not result.ok:
            # Show docker's own diagnostic instead of the captured one
            print_error(f"docker network create failed (exit code {result.returncode}), re-running for details:")
            rerun = self.engine.create_macvlan_network(
                self.name, c.subnet, c.gateway, c.vlan_interface, ip_range=c.ip_range, capture=False
            )
            if rerun.ok:
                print_info(f"Docker network '{self.name}' created on the second attempt")
                return rerun
        return result

    def describe(self) -> list[str]:
        info = self.engine.inspect_network(self.name)
        if info is None:
            return []
        lines = [f"Driver: {info.driver}", f"Parent: {info.parent}", f"Subnet: {info.subnet}"]
        if info.ip_range:
            lines.append(f"IP Range: {info.ip_range}")
        lines.append(f"Gateway: {info.gateway}")
        return lines

    def delete_hint(self) -> list[str]:
        info = self.engine.inspect_network(self.name)
        if info is not None and info.containers:
            return [
                f"Containers attached: {', '.join(info.containers)}",
                "Stop them first with:",
                f"  docker stop {' '.join(info.containers)}",
            ]
        return [
            "Containers might be using it. Stop them first with:",
            f"  docker network inspect {self.name} --format '{{{{range .Containers}}}}{{{{.Name}}}} {{{{end}}}}'",
        ]
