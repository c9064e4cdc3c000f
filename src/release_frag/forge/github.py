"""GitHub release publishing."""

from __future__ import annotations

import logging
import os
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx

from release_frag.exceptions import GitHubError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TOKEN_ENV = ("GITHUB_TOKEN", "GH_TOKEN")
HTTP_UNPROCESSABLE = 422


class PublishResult(StrEnum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


def resolve_token(token: str | None = None, env_names: Iterable[str] = DEFAULT_TOKEN_ENV) -> str:
    """Pick the API token from an explicit value or the environment.

    Raises:
        GitHubError: If no token is available
    """
    if token:
        return token
    names = list(env_names)
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    raise GitHubError(f"No GitHub token found. Set one of: {', '.join(names)}")


def _is_already_exists(response: httpx.Response) -> bool:
    if response.status_code != HTTP_UNPROCESSABLE:
        return False
    text = response.text.lower()
    return "already_exists" in text or "already exists" in text


class GitHubClient:
    """Minimal REST client for the releases API.

    Args:
        repository: ``owner/name``
        token: API token
        api_url: REST API root, override for GitHub Enterprise
        client: Optional pre-built httpx client (used by tests)
    """

    def __init__(
        self,
        repository: str,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        client: httpx.Client | None = None,
    ) -> None:
        self.repository = repository
        self._client = client or httpx.Client(timeout=30.0)
        self._client.base_url = api_url.rstrip("/")
        self._client.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        logger.debug("POST %s", path)
        try:
            return self._client.post(path, json=payload)
        except httpx.HTTPError as e:
            raise GitHubError(f"Request to {path} failed: {e}") from e

    def create_release(self, tag: str, title: str, body: str) -> PublishResult:
        """Create a release for an existing tag.

        A release that already exists for ``tag`` is reported as
        ALREADY_EXISTS rather than an error, so publishing can be retried.

        Raises:
            GitHubError: For any other API failure
        """
        path = f"/repos/{self.repository}/releases"
        response = self._post(path, {"tag_name": tag, "name": title, "body": body})

        if _is_already_exists(response):
            logger.info("Release %s already exists, skipping", tag)
            return PublishResult.ALREADY_EXISTS
        if response.is_error:
            raise GitHubError(
                f"Creating release {tag} failed with status {response.status_code}",
                status_code=response.status_code,
                response_text=response.text,
            )

        logger.info("Created GitHub release %s", tag)
        return PublishResult.CREATED
