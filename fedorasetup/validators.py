"""Input validators for interactively gathered values.

Every validator returns a plain pass/fail boolean; callers decide whether to
re-prompt or abort. Only syntax is checked: ``10.32.11.5/24`` is an accepted
subnet even though its host bits are set.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable

from fedorasetup.console import BasePrompter, print_error

if TYPE_CHECKING:
    from fedorasetup.backends.base import BaseLinkConfigurator

VLAN_ID_MIN = 1
VLAN_ID_MAX = 4094

_DIGITS_RE = re.compile(r"^[0-9]+$")
_IP_RE = re.compile(r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}$")
_CIDR_RE = re.compile(r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}/[0-9]{1,2}$")
_NETWORK_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")

VLAN_ID_MESSAGE = f"VLAN ID must be a number between {VLAN_ID_MIN} and {VLAN_ID_MAX}"
SUBNET_MESSAGE = "Invalid subnet format. Use CIDR notation: e.g., 10.32.11.0/24"
IP_MESSAGE = "Invalid IP format. Use format: e.g., 10.32.11.1"
NETWORK_NAME_MESSAGE = "Network name can only contain letters, numbers, hyphens, and underscores"


def validate_not_empty(value: str) -> bool:
    return bool(value and value.strip())


def validate_interface(name: str, link: BaseLinkConfigurator) -> bool:
    """Check that ``name`` is non-empty and the interface exists right now."""
    if not validate_not_empty(name):
        return False
    return link.exists(name)


def validate_vlan_id(value: str) -> bool:
    if not _DIGITS_RE.fullmatch(value or ""):
        return False
    return VLAN_ID_MIN <= int(value) <= VLAN_ID_MAX


def validate_subnet(value: str) -> bool:
    """Dotted-quad with a ``/prefix`` suffix, e.g. ``10.32.11.0/24``."""
    return bool(_CIDR_RE.fullmatch(value or ""))


def validate_ip(value: str) -> bool:
    return bool(_IP_RE.fullmatch(value or ""))


def validate_network_name(value: str) -> bool:
    return bool(_NETWORK_NAME_RE.fullmatch(value or ""))


def prompt_until_valid(
    prompter: BasePrompter,
    prompt: str,
    validator: Callable[[str], bool],
    empty_message: str,
    invalid_message: str,
) -> str:
    """Ask until ``validator`` accepts the answer.

    There is no retry limit; only an explicit abort (Ctrl-C) leaves the loop.
    """
    while True:
        value = prompter.ask(prompt).strip()
        if not value:
            print_error(empty_message)
            continue
        if validator(value):
            return value
        print_error(invalid_message)
