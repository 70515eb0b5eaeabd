"""Tests for issue_digest/exceptions.py."""

from issue_digest.exceptions import (
    CredentialError,
    DeliveryError,
    IssueDigestError,
    MissingCredentialError,
    StoreError,
    UpstreamError,
)


class TestCredentialError:
    def test_message_is_preserved(self):
        error = MissingCredentialError("No token", name="host-token", suggestion="Set it")

        assert error.message == "No token"
        assert str(error) == "No token (credential: host-token)\nSuggestion: Set it"

    def test_hierarchy(self):
        assert issubclass(MissingCredentialError, CredentialError)
        assert issubclass(StoreError, CredentialError)
        assert issubclass(CredentialError, IssueDigestError)


class TestUpstreamError:
    def test_status_in_string(self):
        error = UpstreamError("jira API returned an error", service="jira", status_code=503, response_text="down")

        assert str(error) == "jira API returned an error (HTTP 503)"
        assert error.response_text == "down"

    def test_without_status(self):
        assert str(UpstreamError("connection refused", service="github")) == "connection refused"


def test_delivery_error_attributes():
    error = DeliveryError("disk full", sink="file", target="/tmp/r.json")

    assert isinstance(error, IssueDigestError)
    assert (error.message, error.sink, error.target) == ("disk full", "file", "/tmp/r.json")
