"""Docker CE installation for Fedora with optional Portainer deployment."""

from __future__ import annotations

from typing import Callable

from loguru import logger

from fedorasetup.backends.base import BaseContainerEngine, BasePackageManager, BaseServiceManager
from fedorasetup.console import (
    BasePrompter,
    console,
    print_command,
    print_error,
    print_header,
    print_info,
    print_plain,
    print_success,
    print_warning,
)
from fedorasetup.exceptions import AbortedError
from fedorasetup.host import distribution_name, invoking_user, is_fedora, read_os_release
from fedorasetup.installer.models import (
    DNF_PLUGIN_PACKAGES,
    DOCKER_PACKAGES,
    DOCKER_REPO_URL,
    PortainerChoice,
    PortainerDeployment,
)
from fedorasetup.reconcile import ManagedResource, ResourceReconciler
from fedorasetup.runner import CommandResult, CommandRunner, StepResult

REQUIRED_TOOLS = {"dnf": "dnf", "systemctl": "systemd"}


class PortainerContainerResource(ManagedResource):
    """Named Portainer container, plus its data volume when it has one."""

    kind = "container"

    def __init__(self, deployment: PortainerDeployment, engine: BaseContainerEngine) -> None:
        super().__init__(deployment.container_name)
        self.deployment = deployment
        self.engine = engine

    def exists(self) -> bool:
        return self.engine.container_exists(self.name)

    def delete(self) -> CommandResult:
        return self.engine.remove_container(self.name)

    def create(self) -> CommandResult:
        d = self.deployment
        if d.data_volume:
            volume = self.engine.create_volume(d.data_volume)
            if not volume.ok:
                return volume
        return self.engine.run_container(
            d.image,
            d.container_name,
            detach=True,
            restart=d.restart,
            ports=d.ports,
            volumes=d.volumes,
        )

    def describe(self) -> list[str]:
        return [f"Image: {self.deployment.image}"]


class DockerInstaller:
    """Install Docker CE from the upstream repository and optionally Portainer.

    Every command goes through :meth:`run_step`: on failure the user decides
    whether to continue or stop (exit code 1).
    """

    def __init__(
        self,
        runner: CommandRunner,
        prompter: BasePrompter,
        packages: BasePackageManager,
        services: BaseServiceManager,
        engine: BaseContainerEngine,
    ):
        self.runner = runner
        self.prompter = prompter
        self.packages = packages
        self.services = services
        self.engine = engine
        self.reconciler = ResourceReconciler(prompter)

    def preflight(self) -> None:
        release = read_os_release()
        if not is_fedora(release):
            print_warning(f"This installer targets Fedora, detected: {distribution_name(release)}")
            if not self.prompter.confirm("Continue anyway?", default=False):
                raise AbortedError("Script terminated by user", exit_code=1)
        self.runner.require(REQUIRED_TOOLS)
        self.runner.ensure_privileges()

    def _continue_or_abort(self) -> None:
        if self.prompter.confirm("Continue anyway?", default=False):
            print_warning("Continuing despite error...")
            return
        raise AbortedError("Script terminated by user", exit_code=1)

    def run_step(self, description: str, action: Callable[[], CommandResult]) -> CommandResult:
        """Run one command, show its output and apply the continue-or-abort policy."""
        print_command(description)
        result = action()
        if result.output:
            print_plain(result.output)

        if result.ok:
            console.print("[success]Success[/success]")
            return result

        print_error(f"ERROR: Command failed (exit code {result.returncode})")
        print_plain(f"Command: {result.command_line}")
        self._continue_or_abort()
        return result

    def install_docker(self) -> None:
        print_header("Docker Installation (Fedora)")
        print_info("Preparing Docker environment...")
        p = self.packages
        self.run_step("dnf install -y dnf-plugins-core", lambda: p.install(DNF_PLUGIN_PACKAGES))
        self.run_step(f"dnf config-manager addrepo --from-repofile={DOCKER_REPO_URL}", lambda: p.add_repo(DOCKER_REPO_URL))
        self.run_step("dnf makecache", p.makecache)
        self.run_step(f"dnf install -y {' '.join(DOCKER_PACKAGES)}", lambda: p.install(DOCKER_PACKAGES))
        self.run_step("systemctl enable --now docker", lambda: self.services.enable("docker", now=True))
        self.run_step("docker info", self.engine.info)

    def add_user_to_docker_group(self, user: str | None = None) -> StepResult:
        user = user or invoking_user()
        if not user:
            logger.debug("No non-root invoking user, skipping docker group membership")
            return StepResult.success("No invoking user")
        result = self.run_step(
            f"usermod -aG docker {user}",
            lambda: self.runner.run(["usermod", "-aG", "docker", user], privileged=True),
        )
        if result.ok:
            print_info(f"Log out and back in for '{user}' to use docker without sudo")
            return StepResult.success(f"Added {user} to docker group", changed=True)
        return StepResult.warning(f"Could not add {user} to docker group")

    def choose_portainer(self, choice: str | None = None, version: str | None = None) -> PortainerDeployment | None:
        print_header("Portainer Installation (Optional)")
        if choice is None:
            print_plain("Choose Portainer option:")
            console.print("  [green]1) None[/green] (default)")
            console.print("  [blue]2) Portainer Server (UI)[/blue]")
            console.print("  [cyan]3) Portainer Agent[/cyan]")
            choice = self.prompter.choose("Selection", [c.value for c in PortainerChoice], PortainerChoice.NONE.value)

        try:
            selected = PortainerChoice(choice)
        except ValueError:
            print_error("Invalid selection. Skipping Portainer.")
            return None

        if selected is PortainerChoice.NONE:
            print_info("Skipping Portainer installation.")
            return None

        if version is None:
            version = self.prompter.ask("Portainer version (default: latest)").strip()
        version = version or "latest"
        if selected is PortainerChoice.SERVER:
            return PortainerDeployment.server(version)
        return PortainerDeployment.agent(version)

    def install_portainer(self, deployment: PortainerDeployment) -> StepResult:
        label = "Server" if deployment.container_name == "portainer" else "Agent"
        print_header(f"Installing Portainer {label} ({deployment.image.rsplit(':', 1)[-1]})")
        result = self.reconciler.reconcile(PortainerContainerResource(deployment, self.engine))
        if result.failed:
            print_error(result.message)
            for line in result.details:
                print_plain(line)
            self._continue_or_abort()
        return result

    def install(
        self,
        portainer_choice: str | None = None,
        portainer_version: str | None = None,
        docker_group: bool = True,
    ) -> None:
        self.preflight()
        self.install_docker()
        if docker_group:
            self.add_user_to_docker_group()

        deployment = self.choose_portainer(portainer_choice, portainer_version)
        if deployment is not None:
            self.install_portainer(deployment)

        print_plain()
        print_success("All done! Script completed successfully.")
        print_info("Docker is installed and ready to use.")
