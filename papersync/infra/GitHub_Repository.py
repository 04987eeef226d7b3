"""GitHub-backed vault store using the REST contents API.

Files are addressed by repository-relative path. Writes reuse the last blob sha
seen for a path (best effort, no compare-and-swap), so two clients syncing the
same week at once can still race.
"""
import base64
import binascii
import logging
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from papersync.domain.Errors import GitHubAPIError, GitHubFileNotFoundError
from papersync.utilities.config import GITHUB_API_URL, HTTP_TIMEOUT

logger = logging.getLogger(__name__)


def split_repository(full_name: str) -> Tuple[str, str]:
    """``owner/repo`` -> (owner, repo); ValueError on anything else."""
    owner, sep, repo = (full_name or "").strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ValueError(f"Invalid repository name: {full_name!r}")
    return owner, repo


class GitHubVaultStore:
    def __init__(self, token: str, owner: str, repo: str, *, api_url: str = GITHUB_API_URL,
                 timeout: float = HTTP_TIMEOUT, transport: Optional[httpx.BaseTransport] = None,
                 default_message: str = "Update from PaperSync"):
        self.owner = owner
        self.repo = repo
        self.default_message = default_message
        self._shas: Dict[str, str] = {}
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
            transport=transport,
        )

    # --- HTTP helpers -----------------------------------------------------
    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{quote(path.strip('/'))}"

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, self._contents_url(path), **kwargs)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub request failed: {path}", cause=e) from e
        if response.status_code == 404:
            raise GitHubFileNotFoundError(path)
        if response.is_error:
            detail = response.text
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} {response.reason_phrase}"
                + (f" - {detail}" if detail else ""),
                status_code=response.status_code,
            )
        return response

    def _fetch(self, path: str) -> Tuple[str, str]:
        data = self._request("GET", path).json()
        if not isinstance(data, dict) or "content" not in data or "sha" not in data:
            raise GitHubAPIError(f"Invalid response from GitHub API for {path}")
        self._shas[path] = data["sha"]
        try:
            raw = base64.b64decode(data["content"])
        except (binascii.Error, TypeError) as e:
            raise GitHubAPIError(f"Invalid content from GitHub API for {path}", cause=e) from e
        content = raw.decode("utf-8", "replace")
        return content, data["sha"]

    def _sha_for(self, path: str) -> Optional[str]:
        if path in self._shas:
            return self._shas[path]
        try:
            return self._fetch(path)[1]
        except GitHubFileNotFoundError:
            return None

    # --- Store interface --------------------------------------------------
    def read_file(self, path: str) -> str:
        return self._fetch(path)[0]

    def write_file(self, path: str, content: str, message: Optional[str] = None) -> None:
        body = {
            "message": message or self.default_message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        sha = self._sha_for(path)
        if sha:
            body["sha"] = sha
        data = self._request("PUT", path, json=body).json()
        new_sha = (data.get("content") or {}).get("sha") if isinstance(data, dict) else None
        if new_sha:
            self._shas[path] = new_sha
        logger.info("Committed %s to %s/%s", path, self.owner, self.repo)

    def file_exists(self, path: str) -> bool:
        try:
            self._request("GET", path)
        except GitHubFileNotFoundError:
            return False
        return True

    def ensure_directory(self, path: str) -> None:
        # Git has no empty directories; they appear with their first file
        return None

    def list_files(self, path: str) -> List[str]:
        try:
            data = self._request("GET", path).json()
        except GitHubFileNotFoundError:
            return []
        if not isinstance(data, list):
            return []
        return sorted(item["name"] for item in data if item.get("type") == "file")

    def delete_file(self, path: str, message: Optional[str] = None) -> None:
        sha = self._sha_for(path)
        if sha is None:
            raise GitHubFileNotFoundError(path)
        self._request("DELETE", path, json={"message": message or self.default_message, "sha": sha})
        self._shas.pop(path, None)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self) -> str:
        return f"GitHubVaultStore({self.owner}/{self.repo})"
