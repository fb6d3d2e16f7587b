"""systemd service manager backend."""

from __future__ import annotations

from fedorasetup.backends.base import BaseServiceManager
from fedorasetup.runner import CommandResult


class SystemdServiceManager(BaseServiceManager):
    """Service manager backed by ``systemctl``."""

    def enable(self, unit: str, now: bool = False) -> CommandResult:
        args = ["systemctl", "enable"]
        if now:
            args.append("--now")
        args.append(unit)
        return self.runner.run(args, privileged=True)

    def daemon_reload(self) -> CommandResult:
        return self.runner.run(["systemctl", "daemon-reload"], privileged=True)
