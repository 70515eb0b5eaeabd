"""
Shared plumbing for the upstream REST clients.

Both clients follow the same contract: resolve a bearer token from the
credential store (failing before any network call when it is absent),
issue exactly one authenticated GET, and turn every non-success outcome
into an UpstreamError that keeps the raw status and body.
"""

import asyncio
from abc import ABC
from typing import Any

import httpx
import structlog

from issue_digest.credentials import CredentialStore
from issue_digest.exceptions import MissingCredentialError, UpstreamError

log = structlog.get_logger(__name__)


class RestClient(ABC):
    """Base class for single-request, bearer-authenticated REST clients.

    Subclasses set ``service`` and call ``_get_json``. The HTTP client is
    injected so tests can substitute an ``httpx.MockTransport``; its
    timeout bounds every request.
    """

    service: str = "upstream"

    def __init__(self, credentials: CredentialStore, http: httpx.AsyncClient, token_name: str) -> None:
        self.credentials = credentials
        self.http = http
        self.token_name = token_name

    async def _require_token(self) -> str:
        """Look up the bearer token.

        Keyring lookups can block, so they run in a worker thread.

        Raises:
            MissingCredentialError: If the store has no entry for the token
            StoreError: If the store itself failed
        """
        token = await asyncio.to_thread(self.credentials.get, self.token_name)
        token = (token or "").strip()
        if not token:
            raise MissingCredentialError(
                f"No {self.service} API token found in credential store",
                name=self.token_name,
                suggestion=f"Run: issue-digest credentials set {self.token_name}",
            )
        return token

    async def _get_json(
        self,
        url: str,
        token: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Issue one authenticated GET and decode the JSON body.

        Raises:
            UpstreamError: On transport failure, non-2xx status or invalid JSON
        """
        request_headers = {"Authorization": f"Bearer {token}", **(headers or {})}

        try:
            response = await self.http.get(url, params=params, headers=request_headers)
        except httpx.HTTPError as e:
            log.error("upstream_request_failed", service=self.service, url=url, error=str(e))
            raise UpstreamError(f"Error fetching {self.service} data: {e}", service=self.service) from e

        if not response.is_success:
            log.error(
                "upstream_bad_status",
                service=self.service,
                url=url,
                status_code=response.status_code,
            )
            raise UpstreamError(
                f"{self.service} API returned an error",
                service=self.service,
                status_code=response.status_code,
                response_text=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"{self.service} API returned malformed JSON",
                service=self.service,
                status_code=response.status_code,
                response_text=response.text,
            ) from e

    def _malformed(self, what: str, record: Any) -> UpstreamError:
        return UpstreamError(
            f"{self.service} API returned a malformed {what}",
            service=self.service,
            response_text=repr(record)[:500],
        )
