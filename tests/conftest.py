"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from issue_digest.config.run_config import RunConfiguration
from issue_digest.config.settings import DigestSettings
from issue_digest.credentials import MemoryStore
from issue_digest.sinks import DryRunDesktop, FileSink, Sinks


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]


class RecordingFileSink(FileSink):
    """Real file sink that also counts writes."""

    def __init__(self) -> None:
        self.writes: list[str] = []

    async def write(self, content: str, path: str) -> Path:
        self.writes.append(path)
        return await super().write(content, path)


@pytest.fixture
def sample_search_response() -> dict[str, Any]:
    """Jira search response with two open issues."""
    return {
        "startAt": 0,
        "maxResults": 50,
        "total": 2,
        "issues": [
            {"id": "1", "key": "PROJ-1", "fields": {"summary": "Login fails with SSO", "status": {"name": "Open"}}},
            {"id": "2", "key": "PROJ-2", "fields": {"summary": "Crash on save", "status": {"name": "Open"}}},
        ],
    }


@pytest.fixture
def sample_pulls_response() -> list[dict[str, Any]]:
    """GitHub pulls response with two open pull requests."""
    return [
        {
            "id": 5001,
            "number": 15,
            "title": "Fix SSO redirect loop",
            "html_url": "https://github.com/octo/widgets/pull/15",
            "user": {"login": "octocat"},
            "created_at": "2024-06-17T09:00:00Z",
        },
        {
            "id": 5002,
            "number": 16,
            "title": "Handle save errors",
            "html_url": "https://github.com/octo/widgets/pull/16",
            "user": {"login": "hubot"},
            "created_at": "2024-06-18T12:15:00Z",
        },
    ]


@pytest.fixture
def settings(tmp_path: Path) -> DigestSettings:
    """Settings pointing at example hosts and a temp report path."""
    return DigestSettings(
        tracker={
            "base_url": "https://jira.example.com/rest/api/2/",
            "project": "PROJ",
            "status": "Open",
        },
        code_host={
            "base_url": "https://api.github.com",
            "owner": "octo",
            "repo": "widgets",
        },
        output={
            "file_path": str(tmp_path / "reports" / "digest.json"),
            "app_name": "TextEdit",
        },
    )


@pytest.fixture
def run_config(settings: DigestSettings) -> RunConfiguration:
    return RunConfiguration.resolve(settings)


@pytest.fixture
def store() -> MemoryStore:
    """Credential store holding both tokens."""
    return MemoryStore({"tracker-token": "jira-secret", "host-token": "ghp_secret"})


@pytest.fixture
def upstream(
    sample_search_response: dict[str, Any],
    sample_pulls_response: list[dict[str, Any]],
) -> RecordingTransport:
    """Transport answering the Jira search and GitHub pulls endpoints."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "jira.example.com":
            return httpx.Response(200, json=sample_search_response)
        if request.url.host == "api.github.com":
            return httpx.Response(200, json=sample_pulls_response)
        return httpx.Response(404)

    return RecordingTransport(handler)


@pytest.fixture
def desktop() -> DryRunDesktop:
    return DryRunDesktop()


@pytest.fixture
def file_sink() -> RecordingFileSink:
    return RecordingFileSink()


@pytest.fixture
def sinks(desktop: DryRunDesktop, file_sink: RecordingFileSink) -> Sinks:
    """Real file output, recorded desktop effects."""
    return Sinks(file=file_sink, browser=desktop, notifier=desktop, launcher=desktop, indexer=desktop)


@pytest.fixture
def make_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    """Factory for transports with a custom handler."""
    return RecordingTransport
