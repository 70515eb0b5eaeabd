"""Sinks that record and log instead of touching the desktop.

Used by ``issue-digest run --test`` so the whole pipeline can be
exercised without opening browser tabs or posting notifications.
"""

from dataclasses import dataclass, field

import structlog

log = structlog.get_logger(__name__)


@dataclass
class DryRunDesktop:
    """Stands in for the URL, notifier, launcher and indexer sinks at once."""

    opened_urls: list[str] = field(default_factory=list)
    notifications: list[tuple[str, str, str | None]] = field(default_factory=list)
    launched: list[tuple[str, str | None]] = field(default_factory=list)
    indexed: list[str] = field(default_factory=list)

    async def open(self, url: str) -> None:
        self.opened_urls.append(url)
        log.info("dry_run_open_url", url=url)

    async def notify(self, title: str, message: str, tone: str | None = None) -> None:
        self.notifications.append((title, message, tone))
        log.info("dry_run_notify", title=title, message=message, tone=tone)

    async def open_with(self, path: str, app: str | None = None) -> None:
        self.launched.append((path, app))
        log.info("dry_run_open_file", path=path, app=app)

    async def index(self, path: str) -> None:
        self.indexed.append(path)
        log.info("dry_run_index", path=path)
