"""Boot-time persistence for the macvlan shim interface.

A shim created with ``ip link add`` disappears on reboot. This module renders
a small shell script that recreates it and a oneshot systemd unit that runs
the script before Docker starts, then installs and enables both.
"""

from __future__ import annotations

import shlex
from pathlib import PurePosixPath

from loguru import logger

from fedorasetup.backends.base import BaseServiceManager
from fedorasetup.console import print_info, print_success, print_warning
from fedorasetup.runner import CommandRunner, StepResult

SCRIPT_DIR = PurePosixPath("/usr/local/bin")
UNIT_DIR = PurePosixPath("/etc/systemd/system")
DEFAULT_WAIT_TIMEOUT = 30


class ShimPersistence:
    """Renders and installs the shim boot script and its systemd unit."""

    def __init__(
        self,
        vlan_id: int,
        shim_name: str,
        shim_parent: str,
        subnet: str,
        vlan_interface: str,
        address: str | None = None,
        wait_timeout: int = DEFAULT_WAIT_TIMEOUT,
    ):
        self.vlan_id = vlan_id
        self.shim_name = shim_name
        self.shim_parent = shim_parent
        self.subnet = subnet
        self.vlan_interface = vlan_interface
        self.address = address
        self.wait_timeout = wait_timeout

    @property
    def base_name(self) -> str:
        return f"macvlan{self.vlan_id}-shim"

    @property
    def script_path(self) -> PurePosixPath:
        return SCRIPT_DIR / f"{self.base_name}.sh"

    @property
    def unit_name(self) -> str:
        return f"{self.base_name}.service"

    @property
    def unit_path(self) -> PurePosixPath:
        return UNIT_DIR / self.unit_name

    @property
    def parent_is_vlan(self) -> bool:
        """A dotted parent name is itself a VLAN interface."""
        return "." in self.shim_parent

    @property
    def needs_network_manager(self) -> bool:
        return self.shim_parent == self.vlan_interface

    def render_script(self) -> str:
        q = shlex.quote
        lines = [
            "#!/usr/bin/env bash",
            f"# Recreate macvlan shim {self.shim_name} for VLAN {self.vlan_id} at boot",
            "set -u",
            "",
            f"SHIM={q(self.shim_name)}",
            f"PARENT={q(self.shim_parent)}",
            f"SUBNET={q(self.subnet)}",
            f"ADDRESS={q(self.address or '')}",
            f"TIMEOUT={self.wait_timeout}",
            "",
            "waited=0",
        ]
        if self.parent_is_vlan:
            lines += [
                "# VLAN parent: NetworkManager creates the link itself, wait for it first",
                'while ! ip link show "$PARENT" >/dev/null 2>&1; do',
                '    if [ "$waited" -ge "$TIMEOUT" ]; then',
                '        echo "Parent interface $PARENT did not appear within ${TIMEOUT}s" >&2',
                "        exit 1",
                "    fi",
                "    sleep 1",
                "    waited=$((waited + 1))",
                "done",
                "",
            ]
        lines += [
            "while true; do",
            "    state=$(ip -br link show \"$PARENT\" 2>/dev/null | awk '{print $2}')",
            '    if [ "$state" = "UP" ]; then',
            "        break",
            "    fi",
            '    if [ "$waited" -ge "$TIMEOUT" ]; then',
            '        echo "Parent interface $PARENT not UP after ${TIMEOUT}s" >&2',
            "        exit 1",
            "    fi",
            "    sleep 1",
            "    waited=$((waited + 1))",
            "done",
            "",
            'if ! ip link show "$SHIM" >/dev/null 2>&1; then',
            '    ip link add "$SHIM" link "$PARENT" type macvlan mode bridge || exit 1',
            "fi",
            'if [ -n "$ADDRESS" ] && ! ip addr show dev "$SHIM" | grep -q "inet $ADDRESS"; then',
            '    ip addr add "$ADDRESS" dev "$SHIM"',
            "fi",
            'ip link set "$SHIM" up || exit 1',
            'if [ -z "$(ip route show "$SUBNET" dev "$SHIM" 2>/dev/null)" ]; then',
            '    ip route add "$SUBNET" dev "$SHIM"',
            "fi",
            "exit 0",
        ]
        return "\n".join(lines) + "\n"

    def render_unit(self) -> str:
        ordering = "network-online.target"
        if self.needs_network_manager:
            ordering += " NetworkManager.service"
        lines = [
            "[Unit]",
            f"Description=Macvlan shim {self.shim_name} for VLAN {self.vlan_id}",
            f"After={ordering}",
            f"Wants={ordering}",
            "Before=docker.service",
            "",
            "[Service]",
            "Type=oneshot",
            f"ExecStart={self.script_path}",
            "RemainAfterExit=yes",
            "",
            "[Install]",
            "WantedBy=multi-user.target",
        ]
        return "\n".join(lines) + "\n"

    def install(self, runner: CommandRunner, services: BaseServiceManager) -> StepResult:
        """Write both files and enable the unit.

        Nothing here is fatal: the shim created in this session keeps working
        until the next reboot either way.
        """
        print_info(f"Writing {self.script_path}")
        written = runner.run(["tee", str(self.script_path)], privileged=True, input=self.render_script())
        if written.ok:
            written = runner.run(["chmod", "755", str(self.script_path)], privileged=True)
        if not written.ok:
            logger.debug(f"Writing {self.script_path} failed: {written.output}")
            return StepResult.warning(f"Could not write {self.script_path}; the shim will not survive a reboot")

        print_info(f"Writing {self.unit_path}")
        written = runner.run(["tee", str(self.unit_path)], privileged=True, input=self.render_unit())
        if not written.ok:
            logger.debug(f"Writing {self.unit_path} failed: {written.output}")
            return StepResult.warning(f"Could not write {self.unit_path}; the shim will not survive a reboot")

        if not services.daemon_reload().ok:
            print_warning("systemctl daemon-reload failed")

        enabled = services.enable(self.unit_name)
        if not enabled.ok:
            return StepResult.warning(
                f"Could not enable {self.unit_name} (exit code {enabled.returncode}); "
                "the shim works for this boot only"
            )

        print_success(f"Enabled {self.unit_name}")
        return StepResult.success(f"Shim persisted via {self.unit_name}", changed=True)
