"""Tests for the fedorasetup exception hierarchy."""

import pytest

from fedorasetup.exceptions import (
    AbortedError,
    APIError,
    CommandError,
    DependencyError,
    InvalidInputError,
    PrivilegeError,
    SetupError,
)
from fedorasetup.runner import CommandResult


class TestExceptionHierarchy:
    """Test exception inheritance and structure."""

    @pytest.mark.parametrize(
        "cls", [DependencyError, PrivilegeError, CommandError, InvalidInputError, APIError, AbortedError]
    )
    def test_inherits_from_setup_error(self, cls):
        """Every error derives from SetupError."""
        assert issubclass(cls, SetupError)
        assert issubclass(cls, Exception)

    def test_default_exit_code(self):
        """Errors exit with 1 unless stated otherwise."""
        assert SetupError("x").exit_code == 1
        assert PrivilegeError("x").exit_code == 1


class TestExceptionAttributes:
    """Test extra attributes carried by exceptions."""

    def test_dependency_error_missing(self):
        """DependencyError keeps the missing package list."""
        exc = DependencyError("Missing required dependencies: docker", missing=["docker"])
        assert exc.missing == ["docker"]
        assert str(exc) == "Missing required dependencies: docker"

    def test_command_error_result(self):
        """CommandError keeps the failing result."""
        result = CommandResult(["false"], 1)
        exc = CommandError("failed", result=result)
        assert exc.result is result

    def test_api_error_status(self):
        """APIError keeps the HTTP status code."""
        exc = APIError("not found", status_code=404)
        assert exc.status_code == 404
        assert APIError("network down").status_code is None

    def test_aborted_error_exit_code(self):
        """AbortedError carries its own exit code."""
        assert AbortedError("cancelled", exit_code=0).exit_code == 0
        assert AbortedError("terminated").exit_code == 1
