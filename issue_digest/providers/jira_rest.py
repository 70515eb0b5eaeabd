"""Jira issue tracker client using direct REST API calls."""

from typing import Any

import httpx
import structlog

from issue_digest.config.settings import TrackerConfig
from issue_digest.credentials import CredentialStore
from issue_digest.models.domain import Issue, IssueQuery
from issue_digest.providers.base import RestClient

log = structlog.get_logger(__name__)


class JiraRestClient(RestClient):
    """Fetch open issues from the Jira REST v2 search endpoint.

    Only the first page of search results is used; pagination is not
    followed.
    """

    service = "jira"

    def __init__(self, config: TrackerConfig, credentials: CredentialStore, http: httpx.AsyncClient) -> None:
        super().__init__(credentials, http, config.token_name)
        self.config = config
        self.api_url = config.api_url

    @property
    def instance_url(self) -> str:
        """Scheme and host of the API URL, used for human browse links."""
        url = httpx.URL(self.api_url)
        port = f":{url.port}" if url.port else ""
        return f"{url.scheme}://{url.host}{port}"

    def browse_url(self, key: str) -> str:
        return f"{self.instance_url}/browse/{key}"

    async def fetch_open_issues(self, query: IssueQuery) -> list[Issue]:
        """Run the project/status search and return issues in response order.

        Raises:
            MissingCredentialError: If no tracker token is stored (no request is made)
            StoreError: If the credential store failed
            UpstreamError: On any non-success or malformed response
        """
        token = await self._require_token()

        log.info("jira_fetch_issues", project=query.project, status=query.status)
        data = await self._get_json(
            f"{self.api_url}/search",
            token,
            params={"jql": query.jql, "fields": ",".join(self.config.fields)},
            headers={"Accept": "application/json"},
        )

        if not isinstance(data, dict) or not isinstance(data.get("issues"), list):
            raise self._malformed("search response", data)

        issues = [self._parse_issue(record) for record in data["issues"]]
        log.info("jira_issues_fetched", count=len(issues), project=query.project)
        return issues

    def _parse_issue(self, record: Any) -> Issue:
        """Convert one search hit to an Issue.

        Field mappings:
            - record["key"] -> key
            - record["fields"]["summary"] -> summary
            - record["fields"]["status"]["name"] -> status
        """
        try:
            key = record["key"]
            fields = record["fields"]
            summary = fields["summary"]
            status = fields["status"]["name"]
        except (KeyError, TypeError) as e:
            raise self._malformed("issue record", record) from e

        if not isinstance(key, str) or not isinstance(summary, str) or not isinstance(status, str):
            raise self._malformed("issue record", record)

        return Issue(key=key, summary=summary, status=status, url=self.browse_url(key))
