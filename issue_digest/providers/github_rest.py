"""GitHub code host client using direct REST API calls."""

from datetime import datetime
from typing import Any

import httpx
import structlog

from issue_digest.config.settings import CodeHostConfig
from issue_digest.credentials import CredentialStore
from issue_digest.models.domain import ChangeRequest
from issue_digest.providers.base import RestClient

log = structlog.get_logger(__name__)


class GitHubRestClient(RestClient):
    """Fetch open pull requests for one repository."""

    service = "github"

    def __init__(self, config: CodeHostConfig, credentials: CredentialStore, http: httpx.AsyncClient) -> None:
        super().__init__(credentials, http, config.token_name)
        self.config = config
        self.api_url = config.api_url

    async def fetch_open_change_requests(self, owner: str = "", repo: str = "") -> list[ChangeRequest]:
        """List open pull requests in response order (first page only).

        Empty ``owner`` or ``repo`` fall back to the configured defaults.

        Raises:
            MissingCredentialError: If no host token is stored (no request is made)
            StoreError: If the credential store failed
            UpstreamError: On any non-success or malformed response
        """
        if not owner or not repo:
            owner = owner or self.config.owner
            repo = repo or self.config.repo
            log.info("github_default_coordinates", owner=owner, repo=repo)

        token = await self._require_token()

        log.info("github_fetch_pulls", owner=owner, repo=repo)
        data = await self._get_json(
            f"{self.api_url}/repos/{owner}/{repo}/pulls",
            token,
            params={"state": "open"},
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self.config.api_version,
            },
        )

        if not isinstance(data, list):
            raise self._malformed("pull request list", data)

        pulls = [self._parse_pull_request(record) for record in data]
        log.info("github_pulls_fetched", count=len(pulls), owner=owner, repo=repo)
        return pulls

    def _parse_pull_request(self, record: Any) -> ChangeRequest:
        """Convert one pull request record to a ChangeRequest.

        Field mappings:
            - record["id"] (or record["number"] when id is absent) -> id
            - record["number"] -> number (optional)
            - record["title"] -> title
            - record["html_url"] -> url (optional)
            - record["user"]["login"] -> author
            - record["created_at"] (ISO 8601) -> created_at
        """
        if not isinstance(record, dict):
            raise self._malformed("pull request record", record)

        number = record.get("number")
        identifier = record.get("id", number)

        try:
            title = record["title"]
            author = record["user"]["login"]
            created_at = datetime.fromisoformat(record["created_at"])
        except (KeyError, TypeError, ValueError) as e:
            raise self._malformed("pull request record", record) from e

        if not isinstance(identifier, int) or not isinstance(title, str) or not isinstance(author, str):
            raise self._malformed("pull request record", record)

        return ChangeRequest(
            id=identifier,
            number=number if isinstance(number, int) else None,
            title=title,
            url=record.get("html_url") or None,
            author=author,
            created_at=created_at,
        )
