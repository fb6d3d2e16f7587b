"""Remote script launcher: list, select, confirm, download and execute.

States: LISTING -> SELECTING -> CONFIRMING -> EXECUTING -> DONE, with FAILED
reachable from listing, downloading and executing, and ABORTED when the user
declines. Any HTTP status other than 200 is a terminal failure.
"""

from __future__ import annotations

from loguru import logger
from rich.markup import escape

from fedorasetup.console import (
    BasePrompter,
    console,
    print_error,
    print_header,
    print_info,
    print_plain,
    print_success,
    print_warning,
)
from fedorasetup.exceptions import APIError, CommandError
from fedorasetup.launcher.github import GitHubContentsClient
from fedorasetup.launcher.models import LauncherState, RemoteScript
from fedorasetup.runner import CommandRunner

DEFAULT_SUFFIX = ".sh"
DEFAULT_EXCLUDE = "setup.sh"
INTERPRETER = ["bash"]
SEPARATOR = "━" * 46


class ScriptLauncher:
    """Pick one script from a repository and run it with elevated privileges."""

    def __init__(
        self,
        client: GitHubContentsClient,
        prompter: BasePrompter,
        runner: CommandRunner,
        suffix: str = DEFAULT_SUFFIX,
        exclude: str = DEFAULT_EXCLUDE,
    ):
        self.client = client
        self.prompter = prompter
        self.runner = runner
        self.suffix = suffix
        self.exclude = exclude
        self.state = LauncherState.LISTING
        self.scripts: list[RemoteScript] = []
        self.selected: RemoteScript | None = None

    def _fail(self, message: str) -> int:
        print_error(message)
        self.state = LauncherState.FAILED
        return 1

    def list_scripts(self) -> list[RemoteScript]:
        """Fetch the listing and keep runnable files, excluding the launcher itself."""
        self.state = LauncherState.LISTING
        print_info("Fetching available scripts from GitHub...")
        entries = self.client.list_contents()
        self.scripts = [
            e for e in entries if e.type == "file" and e.name.endswith(self.suffix) and e.name != self.exclude
        ]
        logger.debug(f"{len(entries)} entries, {len(self.scripts)} runnable")
        return self.scripts

    def display_menu(self) -> None:
        print_header("Available Scripts")
        for number, script in enumerate(self.scripts, start=1):
            console.print(
                f"[bold cyan] {number} [/bold cyan] {escape(script.display_name)} [blue]({escape(script.name)})[/blue]",
            )
        print_plain()

    def select(self) -> RemoteScript:
        """Loop until the user enters a number in ``[1, len(scripts)]``."""
        self.state = LauncherState.SELECTING
        count = len(self.scripts)
        while True:
            choice = self.prompter.ask("Enter the number of the script to run").strip()
            if choice.isdigit() and 1 <= int(choice) <= count:
                self.selected = self.scripts[int(choice) - 1]
                print_success(f"Selected: {self.selected.name}")
                return self.selected
            print_warning(f"Invalid selection. Please enter a number between 1 and {count}")

    def preselect(self, name: str) -> RemoteScript | None:
        for script in self.scripts:
            if script.name == name:
                self.selected = script
                print_success(f"Selected: {script.name}")
                return script
        return None

    def confirm(self) -> bool:
        assert self.selected is not None
        self.state = LauncherState.CONFIRMING
        print_plain()
        print_warning(f"You are about to download and execute: {self.selected.name}")
        print_info(f"Source: {self.client.raw_url(self.selected.location)}")
        print_plain()
        return self.prompter.confirm("Do you want to proceed?", default=False)

    def execute(self) -> int:
        """Download the selected script and stream it into a privileged shell."""
        assert self.selected is not None
        self.state = LauncherState.EXECUTING
        print_info("Downloading script...")
        try:
            content = self.client.fetch_raw(self.selected.location)
        except APIError as e:
            if e.status_code is not None:
                return self._fail(f"Failed to download script (HTTP {e.status_code})")
            return self._fail(f"Failed to download script: {e}")

        print_success("Script downloaded successfully")
        print_info(f"Executing {self.selected.name}...")
        print_plain()
        console.print(f"[bold cyan]{SEPARATOR}[/bold cyan]")
        print_plain()

        result = self.runner.run(INTERPRETER, privileged=True, capture=False, input=content)

        print_plain()
        console.print(f"[bold cyan]{SEPARATOR}[/bold cyan]")
        try:
            result.check()
        except CommandError as e:
            logger.debug(str(e))
            return self._fail(f"Script execution failed (exit code {result.returncode})")

        print_success("Script completed successfully")
        self.state = LauncherState.DONE
        return 0

    def run(self, preselect: str | None = None, assume_yes: bool = False) -> int:
        """Drive the whole state machine and return the process exit code."""
        try:
            self.list_scripts()
        except APIError as e:
            code = f"HTTP {e.status_code}" if e.status_code is not None else str(e)
            self._fail(f"Failed to fetch scripts from GitHub ({code})")
            print_info(f"Repository: {self.client.repo}")
            print_info(f"Branch: {self.client.branch}")
            return 1

        if not self.scripts:
            print_warning("No executable scripts found in repository")
            self.state = LauncherState.FAILED
            return 1
        print_success(f"Found {len(self.scripts)} script(s)")

        if preselect:
            if self.preselect(preselect) is None:
                return self._fail(f"Script '{preselect}' not found in repository")
        else:
            self.display_menu()
            self.select()

        if not assume_yes and not self.confirm():
            print_warning("Aborted by user")
            self.state = LauncherState.ABORTED
            return 0

        code = self.execute()
        if code == 0:
            print_plain()
            print_success("All done!")
        return code
