"""Facts about the local host: distribution and invoking user."""

from __future__ import annotations

import os
from pathlib import Path

OS_RELEASE_PATH = Path("/etc/os-release")


def read_os_release(path: Path = OS_RELEASE_PATH) -> dict[str, str]:
    """Parse an os-release file into a dict; a missing file yields ``{}``."""
    try:
        text = path.read_text()
    except OSError:
        return {}

    release: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        release[key.strip()] = value
    return release


def is_fedora(release: dict[str, str]) -> bool:
    if release.get("ID", "").lower() == "fedora":
        return True
    return "fedora" in release.get("ID_LIKE", "").lower().split()


def distribution_name(release: dict[str, str]) -> str:
    return release.get("PRETTY_NAME") or release.get("NAME") or release.get("ID") or "unknown"


def is_root() -> bool:
    return os.geteuid() == 0


def invoking_user() -> str | None:
    """Return the human user behind this session (``SUDO_USER`` first)."""
    for var in ("SUDO_USER", "USER"):
        user = os.environ.get(var, "")
        if user and user != "root":
            return user
    return None
