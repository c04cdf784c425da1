# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the GitHub REST client using ``httpx.MockTransport``."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from lintdiff.errors import PublisherError
from lintdiff.github import GitHubClient, Publisher, add_or_update_issue_comment

from .support import RecordingPublisher

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, sleeps: list[float] | None = None) -> GitHubClient:
    transport = httpx.MockTransport(handler)
    http = httpx.Client(base_url="https://api.example.test", transport=transport)
    delays = sleeps if sleeps is not None else []
    return GitHubClient("secret-token", client=http, sleep=delays.append)


def test_post_issue_comment_sends_auth_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 77})

    client = _client(handler)

    assert client.post_issue_comment("octo/repo", 5, "hello") == 77
    (request,) = seen
    assert request.method == "POST"
    assert request.url.path == "/repos/octo/repo/issues/5/comments"
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert json.loads(request.content) == {"body": "hello"}
    assert isinstance(client, Publisher)


def test_find_comment_pages_until_marker() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        if page == 1:
            return httpx.Response(200, json=[{"id": index, "body": "other"} for index in range(100)])
        return httpx.Response(200, json=[{"id": 500, "body": "<!-- lintdiff -->\n# results"}])

    assert _client(handler).find_issue_comment_id("octo/repo", 5, "<!-- lintdiff -->") == 500


def test_find_comment_returns_none_when_absent() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": 1, "body": "unrelated"}])

    assert _client(handler).find_issue_comment_id("octo/repo", 5, "<!-- lintdiff -->") is None


def test_update_comment_uses_patch() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 9})

    _client(handler).update_comment("octo/repo", 9, "new body")

    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/repos/octo/repo/issues/comments/9"


def test_post_review_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 1})

    payload = {"body": "b", "event": "COMMENT", "comments": [{"path": "a.cpp", "position": 2, "body": "x"}]}
    _client(handler).post_review("octo/repo", 3, payload)

    assert seen[0].url.path == "/repos/octo/repo/pulls/3/reviews"
    assert json.loads(seen[0].content) == payload


def test_error_carries_status_and_rate_limit() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            403,
            json={"message": "API rate limit exceeded"},
            headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"},
        )

    with pytest.raises(PublisherError) as excinfo:
        _client(handler).post_issue_comment("octo/repo", 1, "x")

    error = excinfo.value
    assert error.status_code == 403
    assert error.response_body == {"message": "API rate limit exceeded"}
    assert error.rate_limit_remaining == 0
    assert error.rate_limit_reset == 1700000000


def test_short_retry_after_is_retried_once() -> None:
    calls: list[int] = []
    sleeps: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) == 1:
            return httpx.Response(429, headers={"retry-after": "2"})
        return httpx.Response(201, json={"id": 3})

    assert _client(handler, sleeps).post_issue_comment("octo/repo", 1, "x") == 3
    assert sleeps == [2.0]
    assert len(calls) == 2


def test_long_retry_after_is_not_retried() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(429, headers={"retry-after": "3600"})

    with pytest.raises(PublisherError) as excinfo:
        _client(handler).post_issue_comment("octo/repo", 1, "x")
    assert len(calls) == 1
    assert excinfo.value.retry_after == 3600


def test_transport_errors_are_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PublisherError):
        _client(handler).update_comment("octo/repo", 1, "x")


def test_invalid_json_is_reported() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, content=b"not json")

    with pytest.raises(PublisherError):
        _client(handler).post_issue_comment("octo/repo", 1, "x")


def test_add_or_update_prefers_existing_comment() -> None:
    publisher = RecordingPublisher(existing={42: "<!-- lintdiff -->\nold"})

    comment_id = add_or_update_issue_comment(publisher, "octo/repo", 7, "new", marker="<!-- lintdiff -->")

    assert comment_id == 42
    assert publisher.updated == [("octo/repo", 42, "new")]
    assert publisher.posted == []


def test_add_or_update_posts_when_missing() -> None:
    publisher = RecordingPublisher()

    add_or_update_issue_comment(publisher, "octo/repo", 7, "new", marker="<!-- lintdiff -->")

    assert publisher.posted == [("octo/repo", 7, "new")]
