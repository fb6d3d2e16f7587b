"""CLI entry point for the VLAN / Docker macvlan provisioner, standalone-capable.

Every value can be given up front; anything missing is asked interactively.

Examples:
  # Fully interactive
  fedorasetup-vlan-docker

  # Pre-seeded, still asks for the optional steps and the final confirmation
  fedorasetup-vlan-docker --parent eno1 --vlan-id 11 --subnet 10.32.11.0/24 \\
      --gateway 10.32.11.1 --network-name service-vlan

  # With a host shim so the host can reach its containers
  fedorasetup-vlan-docker --parent eno1 --vlan-id 11 --subnet 10.32.11.0/24 \\
      --gateway 10.32.11.1 --network-name service-vlan --ip-range 10.32.11.128/25 \\
      --shim --shim-address 10.32.11.250/32 -y
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from fedorasetup import quiet_logging
from fedorasetup.backends import (
    DockerEngine,
    IpRouteLinkConfigurator,
    NmcliClient,
    SystemdServiceManager,
)
from fedorasetup.console import ConsolePrompter, console, print_error, print_header, print_plain, print_warning
from fedorasetup.exceptions import AbortedError, SetupError
from fedorasetup.runner import CommandRunner
from fedorasetup.vlan.provisioner import DEFAULT_ACTIVATION_ATTEMPTS, REQUIRED_TOOLS, VlanProvisioner
from fedorasetup.vlan.wizard import VlanConfigWizard


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for the VLAN provisioner."""
    parser = argparse.ArgumentParser(
        prog="fedorasetup-vlan-docker",
        description="Create a Docker macvlan network attached to a VLAN (NetworkManager + Docker)",
    )
    parser.add_argument("--parent", help="Parent interface (e.g. eno1)")
    parser.add_argument("--vlan-id", help="VLAN ID (1-4094)")
    parser.add_argument("--subnet", help="Subnet in CIDR notation (e.g. 10.32.11.0/24)")
    parser.add_argument("--gateway", help="Gateway IP (e.g. 10.32.11.1)")
    parser.add_argument("--network-name", help="Docker network name (e.g. service-vlan)")
    parser.add_argument("--ip-range", help="Limit Docker to this range inside the subnet (CIDR)")
    parser.add_argument(
        "--shim",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Create a host macvlan shim for host-to-container traffic (asked if omitted)",
    )
    parser.add_argument("--shim-parent", help="Shim parent interface (default: the VLAN interface)")
    parser.add_argument("--shim-address", help="Shim address in CIDR form (e.g. 10.32.11.250/32)")
    parser.add_argument(
        "--activation-attempts",
        type=int,
        default=DEFAULT_ACTIVATION_ATTEMPTS,
        help=f"Polls while waiting for the VLAN interface to come UP (default: {DEFAULT_ACTIVATION_ATTEMPTS})",
    )
    parser.add_argument("--skip-test", action="store_true", help="Skip the connectivity test container")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for the final confirmation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser.parse_args(args)


def _presets(parsed: argparse.Namespace) -> dict[str, Any]:
    return {
        "parent_interface": parsed.parent,
        "vlan_id": parsed.vlan_id,
        "subnet": parsed.subnet,
        "gateway": parsed.gateway,
        "network_name": parsed.network_name,
        "ip_range": parsed.ip_range,
        "shim": parsed.shim,
        "shim_parent": parsed.shim_parent,
        "shim_address": parsed.shim_address,
    }


def main(args: list[str] | None = None) -> None:
    """Main entry point for the VLAN provisioner CLI."""
    parsed = parse_args(args)
    quiet_logging(parsed.verbose)

    if sys.stdout.isatty():
        console.clear()
    print_header("Docker Macvlan VLAN Network Setup")
    print_plain("This script will create a Docker macvlan network attached to a VLAN.")
    print_plain("Containers will get IPs directly on the VLAN subnet.")
    print_plain()

    prompter = ConsolePrompter()
    try:
        runner = CommandRunner()
        runner.require(REQUIRED_TOOLS)
        runner.ensure_privileges()

        link = IpRouteLinkConfigurator(runner)
        wizard = VlanConfigWizard(prompter, link)
        config = wizard.collect(_presets(parsed))
        if not parsed.yes:
            wizard.confirm(config)

        provisioner = VlanProvisioner(
            config,
            runner=runner,
            prompter=prompter,
            nm=NmcliClient(runner),
            link=link,
            engine=DockerEngine(runner),
            services=SystemdServiceManager(runner),
            activation_attempts=parsed.activation_attempts,
        )
        result = provisioner.provision(run_test=False if parsed.skip_test else None)
        if result.failed:
            print_error(result.message)
            for line in result.details:
                print_plain(line)
            sys.exit(1)
    except AbortedError as e:
        if e.exit_code == 0:
            print_warning(str(e))
        else:
            print_error(str(e))
        sys.exit(e.exit_code)
    except SetupError as e:
        print_error(str(e))
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)
    finally:
        prompter.close()


if __name__ == "__main__":
    main()
