"""Command runner and typed step results shared by every tool."""

from __future__ import annotations

import shlex
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from fedorasetup.exceptions import CommandError, DependencyError, PrivilegeError
from fedorasetup.host import is_root

# Exit codes used when a command cannot be started or runs too long
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


@dataclass
class CommandResult:
    """Outcome of a single external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stripped."""
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)

    @property
    def command_line(self) -> str:
        return shlex.join(self.args)

    def check(self) -> CommandResult:
        """Return self, or raise :class:`CommandError` for a non-zero exit."""
        if not self.ok:
            raise CommandError(f"Command failed (exit code {self.returncode}): {self.command_line}", result=self)
        return self


class StepStatus(Enum):
    """Outcome class of a provisioning step."""

    SUCCESS = "success"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass
class StepResult:
    """Result of one step; callers decide what a warning or fatal means."""

    status: StepStatus
    message: str = ""
    changed: bool = False
    details: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, message: str = "", changed: bool = False) -> StepResult:
        return cls(StepStatus.SUCCESS, message, changed)

    @classmethod
    def warning(cls, message: str, changed: bool = False) -> StepResult:
        return cls(StepStatus.WARNING, message, changed)

    @classmethod
    def fatal(cls, message: str, details: list[str] | None = None) -> StepResult:
        return cls(StepStatus.FATAL, message, details=list(details or []))

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FATAL


class CommandRunner:
    """Run external commands, prefixing privileged ones with ``sudo``.

    Failing commands never raise; the caller inspects the returned
    :class:`CommandResult`.
    """

    def __init__(self, use_sudo: bool | None = None, default_timeout: int | None = None):
        if use_sudo is None:
            use_sudo = not is_root()
        self.use_sudo = use_sudo
        self.default_timeout = default_timeout

    def build(self, args: list[str], privileged: bool = False) -> list[str]:
        """Return the argv that :meth:`run` would execute."""
        if privileged and self.use_sudo:
            return ["sudo", *args]
        return list(args)

    def run(
        self,
        args: list[str],
        privileged: bool = False,
        capture: bool = True,
        input: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run a command and return its result.

        Args:
            args: Command and arguments.
            privileged: Prefix with ``sudo`` when not running as root.
            capture: Capture stdout/stderr; otherwise they go to the terminal.
            input: Text fed to the command's stdin.
            timeout: Seconds before the command is killed.
        """
        cmd = self.build(args, privileged)
        timeout = timeout if timeout is not None else self.default_timeout
        logger.debug(f"Running: {shlex.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                input=input,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            logger.debug(f"Command {cmd[0]} not found: {e}")
            return CommandResult(cmd, EXIT_NOT_FOUND, "", f"{cmd[0]}: command not found")
        except subprocess.TimeoutExpired:
            logger.debug(f"Command {cmd[0]} timed out after {timeout}s")
            return CommandResult(cmd, EXIT_TIMEOUT, "", f"{cmd[0]}: timed out after {timeout}s")

        result = CommandResult(cmd, proc.returncode, proc.stdout or "", proc.stderr or "")
        logger.debug(f"Exit code {result.returncode}: {result.command_line}")
        return result

    @staticmethod
    def which(tool: str) -> str | None:
        return shutil.which(tool)

    def missing(self, tools: dict[str, str]) -> list[str]:
        """Return the package names of ``tools`` not found on PATH.

        ``tools`` maps an executable name to the package that provides it.
        """
        return [package for tool, package in tools.items() if self.which(tool) is None]

    def require(self, tools: dict[str, str]) -> None:
        """Raise :class:`DependencyError` if any of ``tools`` is missing."""
        missing = self.missing(tools)
        if missing:
            raise DependencyError(f"Missing required dependencies: {' '.join(missing)}", missing=missing)

    def ensure_privileges(self) -> None:
        """Make sure privileged commands can run, prompting for sudo if needed."""
        if not self.use_sudo:
            return
        if self.which("sudo") is None:
            raise PrivilegeError("This tool requires root privileges and sudo is not installed")
        if self.run(["sudo", "-n", "true"]).ok:
            return
        logger.info("Requesting sudo credentials")
        if not self.run(["sudo", "-v"], capture=False).ok:
            raise PrivilegeError("Failed to obtain sudo privileges")
