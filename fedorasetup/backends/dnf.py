"""dnf package manager backend."""

from __future__ import annotations

from fedorasetup.backends.base import BasePackageManager
from fedorasetup.runner import CommandResult


class DnfPackageManager(BasePackageManager):
    """Package manager backed by ``dnf`` (dnf5 ``config-manager addrepo`` syntax)."""

    def install(self, packages: list[str]) -> CommandResult:
        return self.runner.run(["dnf", "install", "-y", *packages], privileged=True)

    def add_repo(self, repo_url: str) -> CommandResult:
        return self.runner.run(
            ["dnf", "config-manager", "addrepo", f"--from-repofile={repo_url}"],
            privileged=True,
        )

    def makecache(self) -> CommandResult:
        return self.runner.run(["dnf", "makecache"], privileged=True)
