"""Exception hierarchy for the setup tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fedorasetup.runner import CommandResult


class SetupError(Exception):
    """Base exception for all setup errors."""

    exit_code: int = 1


class DependencyError(SetupError):
    """A required tool is not installed."""

    def __init__(self, message: str, missing: list[str] | None = None):
        self.missing = list(missing or [])
        super().__init__(message)


class PrivilegeError(SetupError):
    """Elevated privileges could not be obtained."""


class CommandError(SetupError):
    """An external command failed."""

    def __init__(self, message: str, result: CommandResult | None = None):
        self.result = result
        super().__init__(message)


class InvalidInputError(SetupError):
    """A pre-seeded value did not pass validation."""


class APIError(SetupError):
    """HTTP request to a remote API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AbortedError(SetupError):
    """The user stopped the flow.

    ``exit_code`` is 0 when the user simply declined to proceed and 1 when the
    user terminated after a failure.
    """

    def __init__(self, message: str, exit_code: int = 1):
        self.exit_code = exit_code
        super().__init__(message)
