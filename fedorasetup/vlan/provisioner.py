"""VLAN / macvlan provisioning pipeline.

Steps run strictly in order. Each returns a :class:`StepResult`; the caller
stops at the first fatal one. Nothing is rolled back, so resources created by
earlier steps stay in place after a later failure.
"""

from __future__ import annotations

import ipaddress
import os
import time
from typing import Callable

from loguru import logger

from fedorasetup.backends.base import (
    BaseContainerEngine,
    BaseLinkConfigurator,
    BaseNetworkManagerClient,
    BaseServiceManager,
)
from fedorasetup.console import BasePrompter, print_header, print_info, print_plain, print_success, print_warning
from fedorasetup.reconcile import ResourceReconciler
from fedorasetup.runner import CommandRunner, StepResult, StepStatus
from fedorasetup.vlan.models import VlanNetworkConfig
from fedorasetup.vlan.persistence import ShimPersistence
from fedorasetup.vlan.resources import DockerNetworkResource, ShimInterfaceResource, VlanConnectionResource

REQUIRED_TOOLS = {"nmcli": "NetworkManager", "docker": "docker", "ip": "iproute2"}

DEFAULT_ACTIVATION_ATTEMPTS = 5
ACTIVATION_SETTLE_SECONDS = 2.0
POLL_INTERVAL_SECONDS = 1.0
TEST_IMAGE = "alpine:latest"


class VlanProvisioner:
    """Create the VLAN connection, optional shim and the Docker network."""

    def __init__(
        self,
        config: VlanNetworkConfig,
        runner: CommandRunner,
        prompter: BasePrompter,
        nm: BaseNetworkManagerClient,
        link: BaseLinkConfigurator,
        engine: BaseContainerEngine,
        services: BaseServiceManager,
        activation_attempts: int = DEFAULT_ACTIVATION_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.runner = runner
        self.prompter = prompter
        self.nm = nm
        self.link = link
        self.engine = engine
        self.services = services
        self.activation_attempts = activation_attempts
        self.sleep = sleep
        self.reconciler = ResourceReconciler(prompter)

    def setup_vlan_connection(self) -> StepResult:
        print_header("Creating VLAN Configuration")
        c = self.config
        if self.link.exists(c.vlan_interface):
            print_info(f"VLAN interface '{c.vlan_interface}' already exists")
            if self.nm.connection_exists(c.connection_name):
                print_info(f"VLAN is managed by NetworkManager connection '{c.connection_name}'")
            else:
                print_warning("VLAN interface exists but is not managed by NetworkManager")
                print_info("Will create NetworkManager connection to manage it")
        return self.reconciler.reconcile(VlanConnectionResource(c, self.nm))

    def _is_up(self) -> bool:
        return self.link.state(self.config.vlan_interface) == "UP"

    def activate_vlan(self) -> StepResult:
        """Activate the connection and poll a bounded number of times for UP."""
        c = self.config
        print_info("Activating VLAN connection...")
        if self.nm.up(c.connection_name).ok:
            print_success("VLAN connection activated")
        else:
            print_warning("Could not activate via nmcli, checking interface directly...")

        self.sleep(ACTIVATION_SETTLE_SECONDS)
        print_info("Verifying VLAN interface status...")
        for attempt in range(1, self.activation_attempts + 1):
            if self._is_up():
                print_success(f"VLAN interface '{c.vlan_interface}' is UP")
                return StepResult.success(f"{c.vlan_interface} is UP")
            logger.debug(f"{c.vlan_interface} not UP yet (attempt {attempt}/{self.activation_attempts})")
            self.sleep(POLL_INTERVAL_SECONDS)

        print_warning("VLAN interface not UP, attempting manual activation...")
        if self.link.set_up(c.vlan_interface).ok:
            self.sleep(POLL_INTERVAL_SECONDS)
            if self._is_up():
                print_success("VLAN interface brought UP manually")
                return StepResult.success(f"{c.vlan_interface} brought UP manually")

        details = ["Debug info:"]
        details.append(self.link.show(c.vlan_interface) or "  Interface does not exist")
        details.extend(self.nm.connection_summary(c.connection_name))
        return StepResult.fatal(f"Failed to bring VLAN interface '{c.vlan_interface}' UP", details=details)

    def setup_shim(self) -> StepResult:
        if self.config.shim is None:
            return StepResult.success("No shim requested")
        print_header("Creating Macvlan Shim")
        resource = ShimInterfaceResource(self.config, self.link)
        result = self.reconciler.reconcile(resource)
        if result.failed or result.changed:
            return result
        # Kept an existing shim; its route may still be missing
        route = resource.ensure_route()
        if not route.ok:
            return StepResult.warning(f"Could not add route {self.config.subnet} via {resource.name}")
        return result

    def persistence(self) -> ShimPersistence:
        c = self.config
        return ShimPersistence(
            vlan_id=c.vlan_id,
            shim_name=c.shim_name,
            shim_parent=c.shim_parent,
            subnet=c.subnet,
            vlan_interface=c.vlan_interface,
            address=c.shim.address if c.shim else None,
        )

    def persist_shim(self) -> StepResult:
        if self.config.shim is None:
            return StepResult.success("No shim requested")
        if not self.prompter.confirm("Make the shim persistent across reboots?", default=True):
            return StepResult.warning("Shim is not persistent and will be gone after a reboot")
        return self.persistence().install(self.runner, self.services)

    def setup_docker_network(self) -> StepResult:
        print_header("Creating Docker Network")
        print_info("Checking for existing Docker network...")
        return self.reconciler.reconcile(DockerNetworkResource(self.config, self.engine))

    def test_network(self) -> StepResult:
        """Start a throwaway container on the network and ping the gateway."""
        print_header("Testing Network Configuration")
        print_info("Running a test container to verify network connectivity...")
        c = self.config
        name = f"macvlan-test-{os.getpid()}"

        started = self.engine.run_container(
            TEST_IMAGE, name, detach=True, remove=True, network=c.network_name, command=["sleep", "30"]
        )
        if not started.ok:
            print_warning("Could not start test container, but network may still work")
            return StepResult.warning("Test container did not start")

        print_success("Test container started")
        print_info(f"Container IP: {self.engine.container_ip(name)}")
        print_info(f"Testing connectivity to gateway ({c.gateway})...")
        pinged = self.engine.exec_in_container(name, ["ping", "-c", "2", "-W", "2", c.gateway])
        if pinged.ok:
            print_success("Container can reach gateway!")
        else:
            print_warning("Container cannot reach gateway")
            print_info("This might be expected if gateway doesn't respond to ping")

        self.engine.stop_container(name)
        print_success("Test container cleaned up")
        if pinged.ok:
            return StepResult.success("Gateway reachable from container")
        return StepResult.warning("Gateway not reachable from container")

    def display_usage_info(self) -> None:
        c = self.config
        print_header("Setup Complete!")
        print_success(f"VLAN interface '{c.vlan_interface}' is configured and UP")
        print_success(f"Docker network '{c.network_name}' is ready")
        if c.shim is not None:
            print_success(f"Shim interface '{c.shim_name}' gives the host access to containers")
        print_plain()
        print_plain("Verify Configuration:")
        print_plain(f"  VLAN connection: nmcli connection show {c.connection_name}")
        print_plain(f"  VLAN interface:  ip link show {c.vlan_interface}")
        print_plain(f"  Docker network:  docker network inspect {c.network_name}")
        print_plain()
        example_ip = _example_address(c.ip_range or c.subnet)
        print_plain("Using the Network:")
        print_plain("1. Run container with automatic IP:")
        print_plain(f"   docker run --network {c.network_name} <image>")
        print_plain("2. Run container with specific IP:")
        print_plain(f"   docker run --network {c.network_name} --ip {example_ip} <image>")
        print_plain("3. Docker Compose example:")
        for line in (
            "   services:",
            "     myapp:",
            "       image: nginx",
            "       networks:",
            f"         {c.network_name}:",
            f"           ipv4_address: {example_ip}",
            "",
            "   networks:",
            f"     {c.network_name}:",
            "       external: true",
        ):
            print_plain(line)
        print_plain()
        print_plain("Important Notes:")
        print_plain(f"  • Containers will get IPs on the {c.subnet} network")
        print_plain(f"  • Containers can communicate with other devices on VLAN {c.vlan_id}")
        if c.shim is None:
            print_plain("  • The host CANNOT directly communicate with containers (this is normal for macvlan)")
            print_plain("  • To test from host, use another device on the same VLAN")
        else:
            print_plain(f"  • The host reaches containers through {c.shim_name}")
        print_plain()

    def provision(self, run_test: bool | None = None) -> StepResult:
        """Run every step in order and stop at the first fatal result.

        ``run_test`` None asks the user whether to run the connectivity test.
        """
        for step in (
            self.setup_vlan_connection,
            self.activate_vlan,
            self.setup_shim,
            self.persist_shim,
            self.setup_docker_network,
        ):
            result = step()
            if result.failed:
                return result
            if result.status is StepStatus.WARNING:
                print_warning(result.message)

        if run_test is None:
            print_plain()
            run_test = self.prompter.confirm("Would you like to run a quick connectivity test?", default=True)
        if run_test:
            self.test_network()

        self.display_usage_info()
        print_success("All done!")
        return StepResult.success("Provisioning complete", changed=True)


def _example_address(cidr: str) -> str:
    """Pick a plausible host address inside ``cidr`` for the usage examples."""
    try:
        network = ipaddress.ip_network(cidr, strict=False)
    except ValueError:
        return cidr
    if network.num_addresses <= 2:
        return str(network.network_address)
    offset = 10 if network.num_addresses > 11 else 1
    return str(network.network_address + offset)
