"""Access to the repository hosting the tenant manifests."""

from __future__ import annotations

import base64
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from urllib.parse import quote

import requests

DEFAULT_API_URL = "https://api.github.com"


class GatewayError(Exception):
    """A request to the repository host failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RepoGateway(ABC):
    """Operations a sync strategy needs from a repository."""

    @abstractmethod
    def default_branch(self) -> str:
        """Return the name of the default branch."""

    @abstractmethod
    def create_branch(self, from_branch: str, to_branch: str) -> None:
        """Create *to_branch* pointing at the head of *from_branch*."""

    @abstractmethod
    def write_file(self, path: str, content: bytes, branch: str) -> None:
        """Create or update *path* on *branch*."""

    @abstractmethod
    def pull_request(self, title: str, body: str, base: str, head: str) -> int:
        """Open a pull request and return its number."""


class GitHubGateway(RepoGateway):
    """A repository on GitHub, reached through its REST API."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        *,
        api_url: str = DEFAULT_API_URL,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._api = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers["Accept"] = "application/vnd.github+json"
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _url(self, *parts: str) -> str:
        base = f"{self._api}/repos/{quote(self.owner, safe='')}/{quote(self.repo, safe='')}"
        return "/".join([base, *(quote(p, safe="/") for p in parts)])

    def _request(self, method, url, *, params=None, json=None, allow=()):
        try:
            resp = self._session.request(
                method, url, params=params, json=json, timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise GatewayError(f"{method} {url}: {exc}") from exc
        if resp.status_code >= 400 and resp.status_code not in allow:
            try:
                detail = resp.json().get("message", resp.reason)
            except (ValueError, AttributeError):
                detail = resp.reason
            raise GatewayError(
                f"{method} {url}: {resp.status_code} {detail}", status=resp.status_code
            )
        return resp

    def default_branch(self) -> str:
        data = self._request("GET", self._url()).json()
        return data.get("default_branch") or "main"

    def create_branch(self, from_branch: str, to_branch: str) -> None:
        ref = self._request("GET", self._url("git", "ref", "heads", from_branch)).json()
        try:
            sha = ref["object"]["sha"]
        except (KeyError, TypeError) as exc:
            raise GatewayError(f"no commit found for branch {from_branch}") from exc
        self._request(
            "POST",
            self._url("git", "refs"),
            json={"ref": f"refs/heads/{to_branch}", "sha": sha},
        )

    def write_file(self, path: str, content: bytes, branch: str) -> None:
        file_path = posixpath.normpath(path)
        url = self._url("contents", file_path)
        resp = self._request("GET", url, params={"ref": branch}, allow=(404,))
        existing_sha = None
        if resp.status_code != 404:
            payload = resp.json()
            if isinstance(payload, dict):
                existing_sha = payload.get("sha")
        options = {
            "message": f"appsync: update {file_path}",
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch,
        }
        if existing_sha:
            options["sha"] = existing_sha
        self._request("PUT", url, json=options)

    def pull_request(self, title: str, body: str, base: str, head: str) -> int:
        data = self._request(
            "POST",
            self._url("pulls"),
            json={
                "title": title,
                "head": head,
                "base": base,
                "body": body,
                "maintainer_can_modify": True,
            },
        ).json()
        return int(data.get("number", 0))


@dataclass(frozen=True)
class GitHubGatewayFactory:
    """Builds gateways for GitHub repositories."""

    api_url: str = DEFAULT_API_URL

    def new(self, token: str, owner: str, repo: str) -> RepoGateway:
        return GitHubGateway(token, owner, repo, api_url=self.api_url)