"""Pydantic models and enums for the remote script launcher."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class LauncherState(str, Enum):
    LISTING = "listing"
    SELECTING = "selecting"
    CONFIRMING = "confirming"
    EXECUTING = "executing"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


class RemoteScript(BaseModel):
    """One entry of the GitHub contents API listing."""

    name: str
    path: str = ""
    type: str = "file"

    @property
    def location(self) -> str:
        """Repository path used for the raw download."""
        return self.path or self.name

    @property
    def display_name(self) -> str:
        """``install-docker.sh`` -> ``install docker``."""
        stem = self.name.rsplit(".", 1)[0] if "." in self.name else self.name
        return stem.replace("-", " ")
