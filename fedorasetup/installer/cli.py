"""CLI entry point for the Docker installer, standalone-capable.

Examples:
  fedorasetup-install-docker
  fedorasetup-install-docker --portainer server --portainer-version 2.21.0
  fedorasetup-install-docker --portainer none --skip-docker-group
"""

from __future__ import annotations

import argparse
import sys

from fedorasetup import quiet_logging
from fedorasetup.backends import DnfPackageManager, DockerEngine, SystemdServiceManager
from fedorasetup.console import ConsolePrompter, print_error, print_warning
from fedorasetup.exceptions import AbortedError, SetupError
from fedorasetup.installer.installer import DockerInstaller
from fedorasetup.installer.models import PortainerChoice
from fedorasetup.runner import CommandRunner


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for the Docker installer."""
    parser = argparse.ArgumentParser(
        prog="fedorasetup-install-docker",
        description="Install Docker CE on Fedora and optionally deploy Portainer",
    )
    parser.add_argument(
        "--portainer",
        choices=["none", "server", "agent"],
        help="Portainer deployment (asked if omitted)",
    )
    parser.add_argument("--portainer-version", help="Portainer image tag (default: latest)")
    parser.add_argument(
        "--skip-docker-group",
        action="store_true",
        help="Do not add the invoking user to the docker group",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> None:
    """Main entry point for the installer CLI."""
    parsed = parse_args(args)
    quiet_logging(parsed.verbose)

    choice = PortainerChoice.from_flag(parsed.portainer).value if parsed.portainer else None
    prompter = ConsolePrompter()
    try:
        runner = CommandRunner()
        installer = DockerInstaller(
            runner,
            prompter,
            packages=DnfPackageManager(runner),
            services=SystemdServiceManager(runner),
            engine=DockerEngine(runner),
        )
        installer.install(
            portainer_choice=choice,
            portainer_version=parsed.portainer_version,
            docker_group=not parsed.skip_docker_group,
        )
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
