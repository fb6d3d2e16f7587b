"""Docker CLI backend."""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from fedorasetup.backends.base import BaseContainerEngine, DockerNetworkInfo
from fedorasetup.runner import CommandResult


def macvlan_network_args(
    name: str,
    subnet: str,
    gateway: str,
    parent: str,
    ip_range: str | None = None,
) -> list[str]:
    """Build the ``docker network create`` argv for a macvlan network."""
    args = ["docker", "network", "create", "-d", "macvlan", f"--subnet={subnet}", f"--gateway={gateway}"]
    if ip_range:
        args.append(f"--ip-range={ip_range}")
    args.extend(["-o", f"parent={parent}", name])
    return args


def _parse_network(name: str, raw: Any) -> DockerNetworkInfo:
    entry = raw[0] if isinstance(raw, list) and raw else raw
    if not isinstance(entry, dict):
        return DockerNetworkInfo(name=name)

    ipam_config = (entry.get("IPAM") or {}).get("Config") or []
    first = ipam_config[0] if ipam_config else {}
    containers = entry.get("Containers") or {}
    return DockerNetworkInfo(
        name=entry.get("Name", name),
        driver=entry.get("Driver", ""),
        parent=(entry.get("Options") or {}).get("parent", ""),
        subnet=first.get("Subnet", ""),
        gateway=first.get("Gateway", ""),
        ip_range=first.get("IPRange", ""),
        containers=sorted(c.get("Name", "") for c in containers.values() if c.get("Name")),
    )


class DockerEngine(BaseContainerEngine):
    """Container engine backed by the ``docker`` CLI, run with sudo."""

    def _docker(self, *args: str, capture: bool = True) -> CommandResult:
        return self.runner.run(["docker", *args], privileged=True, capture=capture)

    def info(self) -> CommandResult:
        return self._docker("info")

    def network_exists(self, name: str) -> bool:
        return self._docker("network", "inspect", name).ok

    def inspect_network(self, name: str) -> DockerNetworkInfo | None:
        result = self._docker("network", "inspect", name)
        if not result.ok:
            return None
        try:
            raw = json.loads(result.stdout or "[]")
        except json.JSONDecodeError as e:
            logger.warning(f"Unparseable output from docker network inspect {name}: {e}")
            return DockerNetworkInfo(name=name)
        return _parse_network(name, raw)

    def create_macvlan_network(
        self,
        name: str,
        subnet: str,
        gateway: str,
        parent: str,
        ip_range: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = macvlan_network_args(name, subnet, gateway, parent, ip_range)
        return self.runner.run(args, privileged=True, capture=capture)

    def remove_network(self, name: str) -> CommandResult:
        return self._docker("network", "rm", name)

    def container_exists(self, name: str) -> bool:
        return self._docker("container", "inspect", name).ok

    def remove_container(self, name: str) -> CommandResult:
        return self._docker("rm", "-f", name)

    def create_volume(self, name: str) -> CommandResult:
        return self._docker("volume", "create", name)

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
        args = ["run"]
        if detach:
            args.append("-d")
        if remove:
            args.append("--rm")
        args.extend(["--name", name])
        if restart:
            args.append(f"--restart={restart}")
        if network:
            args.extend(["--network", network])
        for port in ports or []:
            args.extend(["-p", port])
        for volume in volumes or []:
            args.extend(["-v", volume])
        args.append(image)
        args.extend(command or [])
        return self._docker(*args)

    def exec_in_container(self, name: str, command: list[str]) -> CommandResult:
        return self._docker("exec", name, *command)

    def stop_container(self, name: str) -> CommandResult:
        return self._docker("stop", name)

    def container_ip(self, name: str) -> str:
        result = self._docker(
            "inspect",
            name,
            "--format",
            "{{range .NetworkSettings.Networks}}{{.IPAddress}} {{end}}",
        )
        return result.stdout.strip() if result.ok else ""
