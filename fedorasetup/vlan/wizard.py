"""Interactive collection of a :class:`VlanNetworkConfig`.

Values already supplied (e.g. from command-line flags) skip their prompt but
still go through the same validators.
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import ValidationError
from tabulate import tabulate

from fedorasetup.backends.base import BaseLinkConfigurator
from fedorasetup.console import (
    BasePrompter,
    print_error,
    print_header,
    print_info,
    print_plain,
    print_success,
    print_warning,
)
from fedorasetup.exceptions import AbortedError, InvalidInputError
from fedorasetup.validators import (
    IP_MESSAGE,
    NETWORK_NAME_MESSAGE,
    SUBNET_MESSAGE,
    VLAN_ID_MESSAGE,
    prompt_until_valid,
    validate_interface,
    validate_ip,
    validate_network_name,
    validate_subnet,
    validate_vlan_id,
)
from fedorasetup.vlan.models import ShimConfig, VlanNetworkConfig


class VlanConfigWizard:
    """Walk the user through the VLAN network parameters."""

    def __init__(self, prompter: BasePrompter, link: BaseLinkConfigurator) -> None:
        self.prompter = prompter
        self.link = link

    def _preseeded(self, value: str, validator: Callable[[str], bool], message: str) -> str:
        if not validator(value):
            raise InvalidInputError(f"{message} (got '{value}')")
        return value

    def step_parent_interface(self, preset: str | None = None) -> str:
        print_header("Step 1: Network Interface")
        if preset:
            if not validate_interface(preset, self.link):
                raise InvalidInputError(f"Interface '{preset}' does not exist")
            print_success(f"Using parent interface: {preset}")
            return preset

        print_info("Available network interfaces:")
        for name in self.link.list_interfaces():
            print_plain(f"  - {name}")
        print_plain()

        while True:
            name = self.prompter.ask("Enter parent interface name [e.g., eno1, eth0]").strip()
            if not name:
                print_error("Interface name cannot be empty")
                continue
            if validate_interface(name, self.link):
                print_success(f"Using parent interface: {name}")
                return name
            print_error(f"Interface '{name}' does not exist")

    def step_vlan_id(self, parent: str, preset: str | None = None) -> int:
        print_header("Step 2: VLAN Configuration")
        if preset:
            value = self._preseeded(preset, validate_vlan_id, VLAN_ID_MESSAGE)
        else:
            value = prompt_until_valid(
                self.prompter,
                "Enter VLAN ID [e.g., 11, 20, 100]",
                validate_vlan_id,
                "VLAN ID cannot be empty",
                VLAN_ID_MESSAGE,
            )
        print_success(f"VLAN interface will be: {parent}.{int(value)}")
        return int(value)

    def step_subnet(self, preset: str | None = None) -> str:
        print_header("Step 3: Network Subnet")
        if preset:
            value = self._preseeded(preset, validate_subnet, SUBNET_MESSAGE)
        else:
            value = prompt_until_valid(
                self.prompter,
                "Enter subnet [e.g., 10.32.11.0/24]",
                validate_subnet,
                "Subnet cannot be empty",
                SUBNET_MESSAGE,
            )
        print_success(f"Using subnet: {value}")
        return value

    def step_gateway(self, preset: str | None = None) -> str:
        print_header("Step 4: Gateway Configuration")
        if preset:
            value = self._preseeded(preset, validate_ip, IP_MESSAGE)
        else:
            value = prompt_until_valid(
                self.prompter,
                "Enter gateway IP [e.g., 10.32.11.1]",
                validate_ip,
                "IP address cannot be empty",
                IP_MESSAGE,
            )
        print_success(f"Using gateway: {value}")
        return value

    def step_network_name(self, preset: str | None = None) -> str:
        print_header("Step 5: Docker Network Name")
        if preset:
            value = self._preseeded(preset, validate_network_name, NETWORK_NAME_MESSAGE)
        else:
            value = prompt_until_valid(
                self.prompter,
                "Enter Docker network name [e.g., service-vlan]",
                validate_network_name,
                "Network name cannot be empty",
                NETWORK_NAME_MESSAGE,
            )
        print_success(f"Docker network name: {value}")
        return value

    def step_ip_range(self, preset: str | None = None) -> str | None:
        print_header("Step 6: IP Range (Optional)")
        if preset:
            return self._preseeded(preset, validate_subnet, SUBNET_MESSAGE)

        print_info("You can limit Docker to a specific IP range within the subnet")
        print_info("This helps avoid IP conflicts with other devices on the VLAN")
        value = self.prompter.ask("Enter IP range [leave empty to use full subnet]").strip()
        if not value:
            return None
        if validate_subnet(value):
            print_success(f"Using IP range: {value}")
            return value
        print_warning("Invalid IP range format, will use full subnet")
        return None

    def step_shim(
        self,
        vlan_interface: str,
        wanted: bool | None = None,
        parent: str | None = None,
        address: str | None = None,
    ) -> ShimConfig | None:
        print_header("Step 7: Host Access Shim (Optional)")
        print_info("With macvlan the host cannot reach its own containers directly")
        print_info("A macvlan shim interface on the host restores host-to-container traffic")
        if wanted is None:
            wanted = self.prompter.confirm("Create a macvlan shim interface?", default=False)
        if not wanted:
            return None

        if parent:
            if not validate_interface(parent, self.link) and parent != vlan_interface:
                raise InvalidInputError(f"Interface '{parent}' does not exist")
        else:
            parent = self.prompter.ask(f"Enter shim parent interface [{vlan_interface}]").strip() or vlan_interface
            # The VLAN interface may not exist yet; it is created later
            while parent != vlan_interface and not validate_interface(parent, self.link):
                print_error(f"Interface '{parent}' does not exist")
                parent = self.prompter.ask(f"Enter shim parent interface [{vlan_interface}]").strip() or vlan_interface

        if address:
            address = self._preseeded(address, validate_subnet, SUBNET_MESSAGE)
        else:
            answer = self.prompter.ask("Enter shim address in CIDR form [e.g., 10.32.11.250/32, empty for none]")
            answer = answer.strip()
            if answer and validate_subnet(answer):
                address = answer
            elif answer:
                print_warning("Invalid shim address format, the shim will have no address")

        print_success(f"Shim parent interface: {parent}")
        return ShimConfig(parent=parent, address=address or None)

    def collect(self, presets: dict[str, Any] | None = None) -> VlanNetworkConfig:
        """Run every step and return the validated configuration."""
        p = presets or {}
        parent = self.step_parent_interface(p.get("parent_interface"))
        vlan_id = self.step_vlan_id(parent, p.get("vlan_id"))
        subnet = self.step_subnet(p.get("subnet"))
        gateway = self.step_gateway(p.get("gateway"))
        network_name = self.step_network_name(p.get("network_name"))
        ip_range = self.step_ip_range(p.get("ip_range"))
        shim = self.step_shim(
            f"{parent}.{vlan_id}",
            wanted=p.get("shim"),
            parent=p.get("shim_parent"),
            address=p.get("shim_address"),
        )
        try:
            return VlanNetworkConfig(
                parent_interface=parent,
                vlan_id=vlan_id,
                subnet=subnet,
                gateway=gateway,
                network_name=network_name,
                ip_range=ip_range,
                shim=shim,
            )
        except ValidationError as e:
            raise InvalidInputError(str(e)) from e

    def confirm(self, config: VlanNetworkConfig) -> None:
        """Show the summary and ask to proceed; declining exits cleanly."""
        print_header("Configuration Summary")
        print_plain(tabulate(config.summary_rows(), tablefmt="plain"))
        print_plain()
        if not self.prompter.confirm("Do you want to proceed with this configuration?", default=False):
            raise AbortedError("Setup cancelled by user", exit_code=0)
