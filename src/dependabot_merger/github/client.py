"""Minimal GitHub REST client for the calls the merger needs."""

from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

log = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
USER_AGENT = "dependabot-merger"
PER_PAGE = 100
NEXT_LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="next"')


class GitHubApiError(Exception):
    """A GitHub API call failed. status is the HTTP status, or None for network errors."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class GitHubNotFound(GitHubApiError):
    pass


def next_page_url(link_header: str | None) -> str | None:
    """The rel="next" URL from a Link header, or None on the last page."""
    match = NEXT_LINK_PATTERN.search(link_header or "")
    return match.group(1) if match else None


class GitHubClient:
    """Thin wrapper over urllib. Repositories are addressed as "owner/name"."""

    def __init__(self, token: str, *, api_root: str = API_ROOT, timeout: float = 30) -> None:
        self.token = token
        self.api_root = api_root.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str, params: dict[str, Any] | None = None) -> str:
        url = f"{self.api_root}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def _send(
        self,
        method: str,
        url: str,
        *,
        body: dict[str, Any] | None = None,
        accept: str = "application/vnd.github+json",
    ) -> tuple[int, bytes, str | None]:
        headers = {
            "Accept": accept,
            "Authorization": f"token {self.token}",
            "User-Agent": USER_AGENT,
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode()
            headers["Content-Type"] = "application/json"

        req = Request(url, data=data, headers=headers, method=method)
        log.debug("%s %s", method, url)
        try:
            with urlopen(req, timeout=self.timeout) as response:
                return response.status, response.read(), response.headers.get("Link")
        except HTTPError as e:
            detail = e.read().decode(errors="replace") if e.fp else ""
            msg = f"{method} {url} failed: HTTP {e.code} {e.reason} {detail}".rstrip()
            if e.code == 404:
                raise GitHubNotFound(msg, status=404) from e
            raise GitHubApiError(msg, status=e.code) from e
        except URLError as e:
            msg = f"{method} {url} failed: network error ({e.reason})"
            raise GitHubApiError(msg) from e

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        accept: str = "application/vnd.github+json",
    ) -> tuple[int, bytes]:
        status, payload, _link = self._send(method, self._url(path, params), body=body, accept=accept)
        return status, payload

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        _status, payload = self._request("GET", path, params=params)
        return json.loads(payload.decode())

    def _get_all_pages(self, path: str, params: dict[str, Any] | None = None, key: str | None = None) -> Any:
        """GET a listing and follow rel="next" links.

        Plain array listings come back as one list. Wrapped listings (key set, e.g.
        "workflow_runs") come back as the first page's object with key holding every item.
        A first page without key is returned untouched.
        """
        url: str | None = self._url(path, {**(params or {}), "per_page": PER_PAGE})
        result: Any = None
        while url:
            _status, payload, link = self._send("GET", url)
            page = json.loads(payload.decode())
            if result is None:
                result = page
                if key is not None and not (isinstance(page, dict) and isinstance(page.get(key), list)):
                    return page
            elif key is None:
                result.extend(page)
            else:
                result[key].extend(page.get(key) or [])
            url = next_page_url(link)
        return result

    # --- Pull requests ---

    def pull_requests(self, repo: str) -> list[dict[str, Any]]:
        """Open PRs, oldest first, across every page."""
        return self._get_all_pages(
            f"/repos/{repo}/pulls",
            {"state": "open", "sort": "created", "direction": "asc"},
        )

    def pull_request(self, repo: str, number: int) -> dict[str, Any]:
        return self._get_json(f"/repos/{repo}/pulls/{number}")

    def pull_request_commits(self, repo: str, number: int) -> list[dict[str, Any]]:
        return self._get_all_pages(f"/repos/{repo}/pulls/{number}/commits")

    def post_review(self, repo: str, number: int, body: str, event: str = "APPROVE") -> int:
        """Post a review and return the HTTP status. Failed requests return their error status."""
        try:
            status, _payload = self._request(
                "POST",
                f"/repos/{repo}/pulls/{number}/reviews",
                body={"event": event, "body": body},
            )
        except GitHubApiError as e:
            log.debug("Review request failed: %s", e)
            return e.status or 0
        return status

    def merge_pull_request(self, repo: str, number: int) -> dict[str, Any]:
        _status, payload = self._request("PUT", f"/repos/{repo}/pulls/{number}/merge", body={})
        return json.loads(payload.decode()) if payload else {}

    # --- Commits ---

    def commit(self, repo: str, sha: str) -> dict[str, Any]:
        return self._get_json(f"/repos/{repo}/commits/{sha}")

    # --- Actions ---

    def workflow_runs(self, repo: str, head_sha: str) -> dict[str, Any]:
        return self._get_all_pages(f"/repos/{repo}/actions/runs", {"head_sha": head_sha}, key="workflow_runs")

    def workflow_jobs(self, repo: str, run_id: int) -> dict[str, Any]:
        return self._get_all_pages(f"/repos/{repo}/actions/runs/{run_id}/jobs", key="jobs")

    # --- Contents ---

    def contents(self, repo: str, path: str) -> str:
        """Raw file text from the default branch. Raises GitHubNotFound if absent."""
        _status, payload = self._request(
            "GET",
            f"/repos/{repo}/contents/{path}",
            accept="application/vnd.github.raw",
        )
        return payload.decode()
