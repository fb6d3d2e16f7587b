"""CLI entry point for the remote script launcher, standalone-capable.

Examples:
  fedorasetup-launcher
  fedorasetup-launcher --repo CTXP/FedoraScripts --branch main
  fedorasetup-launcher --script vlan-docker.sh -y
"""

from __future__ import annotations

import argparse
import os
import sys

from fedorasetup import quiet_logging
from fedorasetup.console import ConsolePrompter, console, print_error, print_header, print_info
from fedorasetup.exceptions import DependencyError, SetupError
from fedorasetup.launcher.github import GitHubContentsClient
from fedorasetup.launcher.launcher import DEFAULT_EXCLUDE, DEFAULT_SUFFIX, ScriptLauncher
from fedorasetup.runner import CommandRunner

DEFAULT_REPO = "CTXP/FedoraScripts"
DEFAULT_BRANCH = "main"


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Build argparse parser for the launcher."""
    parser = argparse.ArgumentParser(
        prog="fedorasetup-launcher",
        description="List setup scripts in a GitHub repository and run the chosen one with sudo",
    )
    parser.add_argument(
        "--repo",
        default=os.getenv("FEDORASETUP_REPO", DEFAULT_REPO),
        help=f"GitHub repository owner/name (default: $FEDORASETUP_REPO or {DEFAULT_REPO})",
    )
    parser.add_argument(
        "--branch",
        default=os.getenv("FEDORASETUP_BRANCH", DEFAULT_BRANCH),
        help=f"Branch to list (default: $FEDORASETUP_BRANCH or {DEFAULT_BRANCH})",
    )
    parser.add_argument("--suffix", default=DEFAULT_SUFFIX, help=f"Script suffix (default: {DEFAULT_SUFFIX})")
    parser.add_argument("--exclude", default=DEFAULT_EXCLUDE, help=f"File to hide (default: {DEFAULT_EXCLUDE})")
    parser.add_argument("--script", help="Run this script without showing the menu")
    parser.add_argument("-y", "--yes", action="store_true", help="Do not ask before executing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> None:
    """Main entry point for the launcher CLI."""
    parsed = parse_args(args)
    quiet_logging(parsed.verbose)

    if sys.stdout.isatty():
        console.clear()
    print_header("Fedora Script Launcher")

    prompter = ConsolePrompter()
    client = GitHubContentsClient(parsed.repo, parsed.branch, token=os.getenv("GITHUB_TOKEN") or None)
    try:
        runner = CommandRunner()
        tools = {"bash": "bash"}
        if runner.use_sudo:
            tools["sudo"] = "sudo"
        try:
            runner.require(tools)
        except DependencyError as e:
            print_error(str(e))
            print_info(f"Install them with: sudo dnf install -y {' '.join(e.missing)}")
            sys.exit(1)

        launcher = ScriptLauncher(client, prompter, runner, suffix=parsed.suffix, exclude=parsed.exclude)
        code = launcher.run(preselect=parsed.script, assume_yes=parsed.yes)
        sys.exit(code)
    except SetupError as e:
        print_error(str(e))
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)
    finally:
        client.close()
        prompter.close()


if __name__ == "__main__":
    main()
