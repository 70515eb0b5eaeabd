"""Custom exception hierarchy for issue-digest.

Exception Hierarchy:
    IssueDigestError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── MissingCredentialError
    │   └── StoreError
    ├── UpstreamError
    └── DeliveryError

Fetch-phase errors (credential and upstream) are fatal to a run. A
DeliveryError is only fatal when the report file itself cannot be written.

Example Usage:
    >>> from issue_digest.exceptions import UpstreamError
    >>> try:
    ...     issues = await tracker.fetch_open_issues(query)
    ... except UpstreamError as e:
    ...     log.error("tracker_failed", status=e.status_code, body=e.response_text)
"""


class IssueDigestError(Exception):
    """Base exception for all issue-digest errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(IssueDigestError):
    """Configuration file is missing, unreadable or invalid."""

    pass


class CredentialError(IssueDigestError):
    """Credential-related errors.

    Attributes:
        message: Human-readable error description
        name: The credential name that failed (e.g., "tracker-token")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.name = name
        self.suggestion = suggestion

        full_message = message
        if name:
            full_message = f"{message} (credential: {name})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class MissingCredentialError(CredentialError):
    """A required secret has no entry in the credential store."""

    pass


class StoreError(CredentialError):
    """The credential store itself failed (unavailable, permission denied)."""

    pass


class UpstreamError(IssueDigestError):
    """An upstream API returned a non-success status or an unusable body.

    The raw status code and body are retained for diagnostics.

    Attributes:
        message: Error message
        service: Which upstream failed ("jira" or "github")
        status_code: HTTP status code, if a response was received
        response_text: Raw response body, if a response was received
    """

    def __init__(
        self,
        message: str,
        service: str | None = None,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        self.message = message
        self.service = service
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)


class DeliveryError(IssueDigestError):
    """A sink operation (file write, URL open, notify, index) failed.

    Attributes:
        message: Error message
        sink: Name of the sink that failed
        target: Path or URL the sink was acting on
    """

    def __init__(
        self,
        message: str,
        sink: str | None = None,
        target: str | None = None,
    ) -> None:
        self.message = message
        self.sink = sink
        self.target = target
        super().__init__(message)
