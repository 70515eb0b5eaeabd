"""Enumerations shared across the package."""

from enum import Enum


class PipelineState(str, Enum):
    """States of a single report pipeline run.

    The happy path is
    IDLE -> FETCHING_ISSUES -> FETCHING_CHANGE_REQUESTS -> ASSEMBLING -> DELIVERING -> DONE.
    FAILED is terminal and reachable from any fetching, assembling or
    delivering state.
    """

    IDLE = "idle"
    FETCHING_ISSUES = "fetching_issues"
    FETCHING_CHANGE_REQUESTS = "fetching_change_requests"
    ASSEMBLING = "assembling"
    DELIVERING = "delivering"
    DONE = "done"
    FAILED = "failed"


class CredentialName(str, Enum):
    """Well-known credential names looked up by the upstream clients."""

    TRACKER_TOKEN = "tracker-token"
    HOST_TOKEN = "host-token"
