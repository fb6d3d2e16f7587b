"""Orchestrator CLI, dispatches to sub-CLIs.

Sub-commands:
  install-docker  Install Docker CE on Fedora, optionally Portainer
  vlan-docker     VLAN connection, macvlan shim and Docker macvlan network
  launcher        Pick and run a setup script from a GitHub repository

Examples:
  fedorasetup install-docker --portainer server

  fedorasetup vlan-docker --parent enp3s0 --vlan-id 20 \\
      --subnet 192.168.20.0/24 --gateway 192.168.20.1 --network-name vlan20

  fedorasetup launcher --repo CTXP/FedoraScripts
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from fedorasetup import __version__, configure_logging, glogger
from fedorasetup.host import distribution_name, invoking_user, is_fedora, is_root, read_os_release
from fedorasetup.launcher.cli import DEFAULT_BRANCH, DEFAULT_REPO

COMMANDS = {
    "install-docker": ("fedorasetup.installer.cli", "Install Docker CE and Portainer"),
    "vlan-docker": ("fedorasetup.vlan.cli", "VLAN-backed Docker macvlan network"),
    "launcher": ("fedorasetup.launcher.cli", "Run a remote setup script"),
}


def _print_usage() -> None:
    print("usage: fedorasetup <command> [options]\n")
    print("Available commands:")
    for cmd, (_, desc) in COMMANDS.items():
        print(f"  {cmd:14s}  {desc}")
    print("\nRun 'fedorasetup <command> --help' for command-specific options.")


def _startup_rows() -> list[list[str]]:
    """Key facts about this run: version, script source and host."""
    release = read_os_release()
    return [
        ["version", __version__],
        ["scripts", "https://github.com/" + os.getenv("FEDORASETUP_REPO", DEFAULT_REPO)],
        ["branch", os.getenv("FEDORASETUP_BRANCH", DEFAULT_BRANCH)],
        ["host", distribution_name(release) + ("" if is_fedora(release) else " (not Fedora)")],
        ["user", invoking_user() or "root"],
        ["privileges", "root" if is_root() else "sudo"],
    ]


def _print_startup_banner() -> None:
    table_str = tabulate(_startup_rows(), tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "fedorasetup starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).info(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point, dispatch to sub-CLI."""
    configure_logging()
    _print_startup_banner()

    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        _print_usage()
        sys.exit(0 if len(sys.argv) >= 2 else 1)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"fedorasetup: unknown command '{command}'\n", file=sys.stderr)
        _print_usage()
        sys.exit(1)

    module_path, _ = COMMANDS[command]

    from importlib import import_module

    module = import_module(module_path)
    module.main(sys.argv[2:])


if __name__ == "__main__":
    main()
