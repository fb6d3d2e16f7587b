"""GitHub contents API / raw file client."""

from __future__ import annotations

from typing import Any

import requests
from loguru import logger

from fedorasetup.exceptions import APIError
from fedorasetup.launcher.models import RemoteScript

API_BASE = "https://api.github.com"
RAW_BASE = "https://raw.githubusercontent.com"
DEFAULT_TIMEOUT = 30


class GitHubContentsClient:
    """Read-only access to the top level of one repository branch.

    Any HTTP status other than 200 is an :class:`APIError` carrying the status.
    """

    def __init__(
        self,
        repo: str,
        branch: str = "main",
        token: str | None = None,
        session: requests.Session | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    @property
    def contents_url(self) -> str:
        return f"{API_BASE}/repos/{self.repo}/contents/?ref={self.branch}"

    def raw_url(self, path: str) -> str:
        return f"{RAW_BASE}/{self.repo}/{self.branch}/{path}"

    def _get(self, url: str) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise APIError(f"GET {url} failed: {e}") from e
        if resp.status_code != 200:
            raise APIError(f"GET {url} returned HTTP {resp.status_code}", status_code=resp.status_code)
        return resp

    def list_contents(self) -> list[RemoteScript]:
        """List entries at the repository root."""
        resp = self._get(self.contents_url)
        try:
            payload: Any = resp.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON from {self.contents_url}: {e}", status_code=resp.status_code) from e
        if not isinstance(payload, list):
            raise APIError(f"Unexpected contents listing from {self.contents_url}", status_code=resp.status_code)
        return [RemoteScript.model_validate(entry) for entry in payload if isinstance(entry, dict) and "name" in entry]

    def fetch_raw(self, path: str) -> str:
        """Download one file's content."""
        return self._get(self.raw_url(path)).text

    def close(self) -> None:
        self._session.close()
