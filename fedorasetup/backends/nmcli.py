"""NetworkManager backend using ``nmcli``."""

from __future__ import annotations

import re

from fedorasetup.backends.base import BaseNetworkManagerClient
from fedorasetup.runner import CommandResult

_SUMMARY_RE = re.compile(r"^(connection|GENERAL)\.")


class NmcliClient(BaseNetworkManagerClient):
    """NetworkManager connection profiles via ``nmcli connection``."""

    def connection_exists(self, name: str) -> bool:
        return self.runner.run(["nmcli", "connection", "show", name]).ok

    def add_vlan_connection(self, name: str, ifname: str, parent: str, vlan_id: int) -> CommandResult:
        # No IP configuration on the VLAN itself; Docker owns the addresses
        return self.runner.run(
            [
                "nmcli",
                "connection",
                "add",
                "type",
                "vlan",
                "con-name",
                name,
                "ifname",
                ifname,
                "dev",
                parent,
                "id",
                str(vlan_id),
                "ipv4.method",
                "disabled",
                "ipv6.method",
                "disabled",
                "connection.autoconnect",
                "yes",
            ],
            privileged=True,
        )

    def delete_connection(self, name: str) -> CommandResult:
        return self.runner.run(["nmcli", "connection", "delete", name], privileged=True)

    def up(self, name: str) -> CommandResult:
        return self.runner.run(["nmcli", "connection", "up", name], privileged=True)

    def connection_summary(self, name: str) -> list[str]:
        result = self.runner.run(["nmcli", "connection", "show", name])
        if not result.ok:
            return []
        return [line.rstrip() for line in result.stdout.splitlines() if _SUMMARY_RE.match(line)]
