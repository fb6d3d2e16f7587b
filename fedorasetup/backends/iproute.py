"""Link, address and route configuration via iproute2 (``ip``)."""

from __future__ import annotations

from fedorasetup.backends.base import BaseLinkConfigurator
from fedorasetup.runner import CommandResult


def _strip_parent_suffix(name: str) -> str:
    """``eno1.11@eno1`` -> ``eno1.11``."""
    return name.split("@", 1)[0]


class IpRouteLinkConfigurator(BaseLinkConfigurator):
    """Link configurator backed by the ``ip`` command."""

    def list_interfaces(self) -> list[str]:
        result = self.runner.run(["ip", "-br", "link", "show"])
        names: list[str] = []
        for line in result.stdout.splitlines():
            fields = line.split()
            if not fields:
                continue
            name = _strip_parent_suffix(fields[0])
            if name != "lo":
                names.append(name)
        return names

    def exists(self, name: str) -> bool:
        return self.runner.run(["ip", "link", "show", name]).ok

    def state(self, name: str) -> str | None:
        result = self.runner.run(["ip", "-br", "link", "show", name])
        if not result.ok:
            return None
        fields = result.stdout.split()
        return fields[1] if len(fields) > 1 else None

    def set_up(self, name: str) -> CommandResult:
        return self.runner.run(["ip", "link", "set", name, "up"], privileged=True)

    def show(self, name: str) -> str:
        result = self.runner.run(["ip", "link", "show", name])
        return result.stdout.strip() if result.ok else ""

    def add_macvlan(self, name: str, parent: str, mode: str = "bridge") -> CommandResult:
        return self.runner.run(
            ["ip", "link", "add", name, "link", parent, "type", "macvlan", "mode", mode],
            privileged=True,
        )

    def delete(self, name: str) -> CommandResult:
        return self.runner.run(["ip", "link", "delete", name], privileged=True)

    def add_address(self, name: str, cidr: str) -> CommandResult:
        return self.runner.run(["ip", "addr", "add", cidr, "dev", name], privileged=True)

    def has_route(self, destination: str, dev: str) -> bool:
        result = self.runner.run(["ip", "route", "show", destination, "dev", dev])
        return result.ok and bool(result.stdout.strip())

    def add_route(self, destination: str, dev: str) -> CommandResult:
        return self.runner.run(["ip", "route", "add", destination, "dev", dev], privileged=True)
