"""Tests for fedorasetup/launcher/launcher.py."""

from unittest.mock import MagicMock

import pytest

from fedorasetup.exceptions import APIError
from fedorasetup.launcher.launcher import ScriptLauncher
from fedorasetup.launcher.models import LauncherState, RemoteScript

LISTING = [
    RemoteScript(name="README.md", path="README.md"),
    RemoteScript(name="setup.sh", path="setup.sh"),
    RemoteScript(name="install-docker.sh", path="install-docker.sh"),
    RemoteScript(name="vlan-docker.sh", path="vlan-docker.sh"),
    RemoteScript(name="lib.sh", path="lib.sh", type="dir"),
]


@pytest.fixture()
def mock_client():
    """MagicMock of GitHubContentsClient with a typical listing."""
    client = MagicMock()
    client.repo = "CTXP/FedoraScripts"
    client.branch = "main"
    client.list_contents.return_value = list(LISTING)
    client.fetch_raw.return_value = "#!/bin/bash\necho hi\n"
    client.raw_url.side_effect = lambda name: f"https://raw.githubusercontent.com/CTXP/FedoraScripts/main/{name}"
    return client


@pytest.fixture()
def make_launcher(mock_client, mock_runner, prompter):
    """Factory fixture returning a ScriptLauncher with scripted answers."""

    def _make(*answers):
        return ScriptLauncher(mock_client, prompter(*answers), mock_runner)

    return _make


class TestListScripts:
    """Tests for filtering the repository listing."""

    def test_filters_listing(self, make_launcher):
        """Only .sh files other than setup.sh are offered."""
        names = [s.name for s in make_launcher().list_scripts()]
        assert names == ["install-docker.sh", "vlan-docker.sh"]

    def test_display_name(self):
        """Display names drop the suffix and hyphens."""
        assert RemoteScript(name="install-docker.sh").display_name == "install docker"


class TestRun:
    """Tests for the launcher state machine."""

    def test_happy_path(self, make_launcher, mock_client, mock_runner):
        """The chosen script is downloaded and piped into a privileged bash."""
        launcher = make_launcher("2", "y")
        assert launcher.run() == 0

        assert launcher.state is LauncherState.DONE
        mock_client.fetch_raw.assert_called_once_with("vlan-docker.sh")
        mock_runner.run.assert_called_once_with(
            ["bash"], privileged=True, capture=False, input="#!/bin/bash\necho hi\n"
        )

    def test_listing_404(self, make_launcher, mock_client, mock_runner, capsys):
        """A 404 listing exits 1 without downloading anything."""
        mock_client.list_contents.side_effect = APIError("not found", status_code=404)
        launcher = make_launcher()

        assert launcher.run() == 1
        assert launcher.state is LauncherState.FAILED
        mock_client.fetch_raw.assert_not_called()
        mock_runner.run.assert_not_called()
        out = capsys.readouterr().out
        assert "HTTP 404" in out
        assert "CTXP/FedoraScripts" in out

    def test_listing_network_error(self, make_launcher, mock_client):
        """A connection failure is a failure too."""
        mock_client.list_contents.side_effect = APIError("GET failed: connection refused")
        assert make_launcher().run() == 1

    def test_empty_listing(self, make_launcher, mock_client):
        """No runnable scripts exits 1."""
        mock_client.list_contents.return_value = [RemoteScript(name="setup.sh")]
        launcher = make_launcher()
        assert launcher.run() == 1
        assert launcher.state is LauncherState.FAILED

    def test_out_of_range_reprompts(self, make_launcher, mock_client, capsys):
        """Out-of-range and non-numeric choices are asked again."""
        launcher = make_launcher("0", "3", "abc", "", "1", "y")
        assert launcher.run() == 0

        assert launcher.selected.name == "install-docker.sh"
        assert capsys.readouterr().out.count("Invalid selection. Please enter a number between 1 and 2") == 4

    def test_decline(self, make_launcher, mock_client, mock_runner):
        """Declining the confirmation exits 0 without downloading."""
        launcher = make_launcher("1", "")
        assert launcher.run() == 0

        assert launcher.state is LauncherState.ABORTED
        mock_client.fetch_raw.assert_not_called()
        mock_runner.run.assert_not_called()

    def test_download_failure(self, make_launcher, mock_client, mock_runner, capsys):
        """A failed download exits 1 and runs nothing."""
        mock_client.fetch_raw.side_effect = APIError("gone", status_code=404)
        launcher = make_launcher("1", "y")

        assert launcher.run() == 1
        assert launcher.state is LauncherState.FAILED
        mock_runner.run.assert_not_called()
        assert "Failed to download script (HTTP 404)" in capsys.readouterr().out

    def test_script_failure(self, make_launcher, mock_runner, failed, capsys):
        """A non-zero exit of the script exits 1."""
        mock_runner.run.return_value = failed(3, args=["sudo", "bash"])
        launcher = make_launcher("1", "y")
        assert launcher.run() == 1
        assert launcher.state is LauncherState.FAILED
        assert "Script execution failed (exit code 3)" in capsys.readouterr().out

    def test_downloads_by_repository_path(self, make_launcher, mock_client):
        """The raw download uses the entry's path rather than its name."""
        mock_client.list_contents.return_value = [RemoteScript(name="backup.sh", path="tools/backup.sh")]
        assert make_launcher("1", "y").run() == 0
        mock_client.fetch_raw.assert_called_once_with("tools/backup.sh")

    def test_preselect_assume_yes(self, make_launcher, mock_client, mock_runner):
        """--script with --yes asks nothing."""
        launcher = make_launcher()
        assert launcher.run(preselect="install-docker.sh", assume_yes=True) == 0

        assert launcher.prompter.prompts == []
        mock_client.fetch_raw.assert_called_once_with("install-docker.sh")

    def test_preselect_unknown(self, make_launcher, mock_client):
        """An unknown preselected script exits 1."""
        assert make_launcher().run(preselect="nope.sh") == 1
        mock_client.fetch_raw.assert_not_called()

    def test_excluded_script_not_preselectable(self, make_launcher):
        """The excluded launcher script cannot be preselected."""
        assert make_launcher().run(preselect="setup.sh", assume_yes=True) == 1

    def test_confirm_shows_source(self, make_launcher, mock_runner, capsys, ok):
        """The confirmation names the raw download URL."""
        mock_runner.run.return_value = ok()
        make_launcher("1", "y").run()
        out = " ".join(capsys.readouterr().out.split())
        assert "raw.githubusercontent.com/CTXP/FedoraScripts/main/install-docker.sh" in out
