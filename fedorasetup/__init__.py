"""Interactive Fedora host setup tools.

Installs Docker and Portainer, provisions VLAN-backed Docker macvlan networks
and launches remote setup scripts from a GitHub repository.
"""

__version__ = "0.1.0"

import os
import sys

from loguru import logger as glogger

glogger.disable(__name__)

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Install the single stderr sink and enable the package logger.

    ``LOGURU_LEVEL`` in the environment overrides ``level``.
    """
    glogger.remove()
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL") or level, format=LOG_FORMAT)
    glogger.enable(__name__)


def quiet_logging(verbose: bool) -> None:
    """Keep only warnings on stderr unless ``verbose`` is set.

    The console helpers already tell the user what is happening; debug records
    (every command line and its exit code) are only useful with ``-v``.
    """
    configure_logging("DEBUG" if verbose else "WARNING")


from fedorasetup.exceptions import (  # noqa: E402
    AbortedError,
    APIError,
    CommandError,
    DependencyError,
    InvalidInputError,
    PrivilegeError,
    SetupError,
)
from fedorasetup.runner import CommandResult, CommandRunner, StepResult, StepStatus  # noqa: E402

__all__ = [
    "glogger",
    "configure_logging",
    "quiet_logging",
    "CommandResult",
    "CommandRunner",
    "StepResult",
    "StepStatus",
    "SetupError",
    "DependencyError",
    "PrivilegeError",
    "CommandError",
    "InvalidInputError",
    "APIError",
    "AbortedError",
]
