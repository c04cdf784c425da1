# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GitHub REST client publishing issue comments and pull request reviews."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, Final, Protocol, runtime_checkable

import httpx

from ..errors import PublisherError
from ..logging import trace

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL: Final[str] = "https://api.github.com"
DEFAULT_ACCEPT_HEADER: Final[str] = "application/vnd.github+json"
DEFAULT_API_VERSION: Final[str] = "2022-11-28"
DEFAULT_USER_AGENT: Final[str] = "lintdiff"
MAX_RETRY_AFTER: Final[float] = 10.0
_PAGE_SIZE: Final[int] = 100
_RETRY_STATUSES: Final[frozenset[int]] = frozenset({403, 429})


@runtime_checkable
class Publisher(Protocol):
    """Hosting-platform operations used to publish lint results."""

    def find_issue_comment_id(self, repo: str, number: int, marker: str) -> int | None:
        """Return the id of the comment containing ``marker`` or ``None``."""

        raise NotImplementedError

    def post_issue_comment(self, repo: str, number: int, body: str) -> int:
        """Create an issue comment and return its id."""

        raise NotImplementedError

    def update_comment(self, repo: str, comment_id: int, body: str) -> None:
        """Replace the body of an existing issue comment."""

        raise NotImplementedError

    def post_review(self, repo: str, number: int, payload: Mapping[str, Any]) -> None:
        """Submit a pull request review."""

        raise NotImplementedError


def _int_header(headers: httpx.Headers, name: str) -> int | None:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _response_detail(response: httpx.Response) -> Any | None:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class GitHubClient:
    """Synchronous :class:`Publisher` backed by :mod:`httpx`.

    Args:
        token: Token sent as a bearer credential.
        base_url: API root, for GitHub Enterprise installations.
        timeout: Per-request timeout in seconds.
        client: Pre-built client, mainly for tests; not closed by :meth:`close`.
        sleep: Called with the ``retry-after`` delay before the single retry.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": DEFAULT_ACCEPT_HEADER,
            "X-GitHub-Api-Version": DEFAULT_API_VERSION,
            "User-Agent": user_agent,
        }
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self._owns_client = client is None
        self._sleep = sleep

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""

        if self._owns_client:
            self._client.close()

    def _send(self, method: str, url: str, *, params: Mapping[str, Any] | None, json: Any | None) -> httpx.Response:
        try:
            return self._client.request(method, url, headers=self._headers, params=params, json=json)
        except httpx.HTTPError as exc:
            raise PublisherError(f"GitHub API request to {url} failed: {exc}") from exc

    def _retry_delay(self, response: httpx.Response) -> float | None:
        if response.status_code not in _RETRY_STATUSES:
            return None
        retry_after = _int_header(response.headers, "retry-after")
        if retry_after is None or retry_after > MAX_RETRY_AFTER:
            return None
        return float(retry_after)

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        trace(LOGGER, "%s %s %s", method, url, json)
        response = self._send(method, url, params=params, json=json)
        delay = self._retry_delay(response)
        if delay is not None:
            LOGGER.warning("GitHub API rate limited, retrying %s %s in %.0fs", method, url, delay)
            self._sleep(delay)
            response = self._send(method, url, params=params, json=json)
        if response.status_code >= 400:
            raise PublisherError(
                f"GitHub API request to {url} failed with status {response.status_code}.",
                response.status_code,
                _response_detail(response),
                rate_limit_remaining=_int_header(response.headers, "x-ratelimit-remaining"),
                rate_limit_reset=_int_header(response.headers, "x-ratelimit-reset"),
                retry_after=_int_header(response.headers, "retry-after"),
            )
        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise PublisherError(
                "GitHub API returned invalid JSON.",
                response.status_code,
                response.text,
            ) from exc

    def find_issue_comment_id(self, repo: str, number: int, marker: str) -> int | None:
        """Return the id of the first comment on ``number`` containing ``marker``."""

        page = 1
        while True:
            response = self._request(
                "GET",
                f"/repos/{repo}/issues/{number}/comments",
                params={"per_page": _PAGE_SIZE, "page": page},
            )
            comments = self._json(response)
            if not isinstance(comments, list):
                raise PublisherError("GitHub API returned an unexpected comment list.", response.status_code, comments)
            for comment in comments:
                if marker in str(comment.get("body", "")):
                    LOGGER.info("found previous comment %s on #%d", comment.get("id"), number)
                    return int(comment["id"])
            if len(comments) < _PAGE_SIZE:
                return None
            page += 1

    def post_issue_comment(self, repo: str, number: int, body: str) -> int:
        response = self._request("POST", f"/repos/{repo}/issues/{number}/comments", json={"body": body})
        payload = self._json(response)
        comment_id = int(payload["id"])
        LOGGER.info("posted comment %d on #%d", comment_id, number)
        return comment_id

    def update_comment(self, repo: str, comment_id: int, body: str) -> None:
        self._request("PATCH", f"/repos/{repo}/issues/comments/{comment_id}", json={"body": body})
        LOGGER.info("updated comment %d", comment_id)

    def add_or_update_issue_comment(self, repo: str, number: int, body: str, *, marker: str) -> int:
        """Update the comment tagged with ``marker`` or create a new one."""

        return add_or_update_issue_comment(self, repo, number, body, marker=marker)

    def post_review(self, repo: str, number: int, payload: Mapping[str, Any]) -> None:
        self._request("POST", f"/repos/{repo}/pulls/{number}/reviews", json=dict(payload))
        LOGGER.info("posted review with %d comment(s) on #%d", len(payload.get("comments", ())), number)


def add_or_update_issue_comment(publisher: Publisher, repo: str, number: int, body: str, *, marker: str) -> int:
    """Update the comment on ``number`` tagged with ``marker`` or post a new one.

    Returns:
        int: Id of the updated or created comment.
    """

    comment_id = publisher.find_issue_comment_id(repo, number, marker)
    if comment_id is None:
        return publisher.post_issue_comment(repo, number, body)
    publisher.update_comment(repo, comment_id, body)
    return comment_id


__all__ = ["DEFAULT_BASE_URL", "MAX_RETRY_AFTER", "GitHubClient", "Publisher", "add_or_update_issue_comment"]
