"""Remote script launcher backed by the GitHub contents API."""

from fedorasetup.launcher.github import GitHubContentsClient
from fedorasetup.launcher.launcher import ScriptLauncher
from fedorasetup.launcher.models import LauncherState, RemoteScript

__all__ = [
    "GitHubContentsClient",
    "ScriptLauncher",
    "LauncherState",
    "RemoteScript",
]
