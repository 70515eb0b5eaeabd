"""Canned upstream responses for ``issue-digest run --test``.

The transport answers the Jira search and GitHub pulls endpoints the
same way the real services do, so a test invocation goes through the
real clients, payload validation and pipeline.
"""

import httpx

SAMPLE_SEARCH_RESPONSE = {
    "startAt": 0,
    "maxResults": 50,
    "total": 2,
    "issues": [
        {
            "id": "10001",
            "key": "PROJ-1",
            "fields": {"summary": "Login fails with SSO", "status": {"name": "Open"}},
        },
        {
            "id": "10002",
            "key": "PROJ-2",
            "fields": {"summary": "Export drops unicode characters", "status": {"name": "Open"}},
        },
    ],
}

SAMPLE_PULLS_RESPONSE = [
    {
        "id": 1001,
        "number": 42,
        "title": "Fix SSO redirect loop",
        "html_url": "https://github.com/myusername/myrepo/pull/42",
        "user": {"login": "octocat"},
        "created_at": "2025-01-15T10:30:00Z",
    },
    {
        "id": 1002,
        "number": 43,
        "title": "Encode export as UTF-8",
        "html_url": "https://github.com/myusername/myrepo/pull/43",
        "user": {"login": "hubot"},
        "created_at": "2025-01-16T08:00:00Z",
    },
]


def _handle(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/search"):
        return httpx.Response(200, json=SAMPLE_SEARCH_RESPONSE)
    if request.url.path.endswith("/pulls"):
        return httpx.Response(200, json=SAMPLE_PULLS_RESPONSE)
    return httpx.Response(404, json={"message": "Not Found"})


def sample_transport() -> httpx.MockTransport:
    """Transport serving the sample Jira and GitHub payloads."""
    return httpx.MockTransport(_handle)
