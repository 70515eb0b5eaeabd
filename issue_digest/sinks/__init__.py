"""Output sinks the pipeline delivers a report through."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from issue_digest.sinks.desktop import AppLauncher, Indexer, Notifier, UrlSink
from issue_digest.sinks.dry_run import DryRunDesktop
from issue_digest.sinks.file_sink import FileSink


class FileWriter(Protocol):
    async def write(self, content: str, path: str) -> Path: ...


class UrlOpener(Protocol):
    async def open(self, url: str) -> None: ...


class NotificationSink(Protocol):
    async def notify(self, title: str, message: str, tone: str | None = None) -> None: ...


class FileLauncher(Protocol):
    async def open_with(self, path: str, app: str | None = None) -> None: ...


class SearchIndexer(Protocol):
    async def index(self, path: str) -> None: ...


@dataclass(frozen=True)
class Sinks:
    """The set of sinks one pipeline delivers through."""

    file: FileWriter
    browser: UrlOpener
    notifier: NotificationSink
    launcher: FileLauncher
    indexer: SearchIndexer

    @classmethod
    def for_platform(cls, platform: str | None = None) -> "Sinks":
        return cls(
            file=FileSink(),
            browser=UrlSink(),
            notifier=Notifier(platform),
            launcher=AppLauncher(platform),
            indexer=Indexer(platform),
        )

    @classmethod
    def dry_run(cls, desktop: DryRunDesktop | None = None) -> "Sinks":
        """Real file output, recorded-only desktop effects."""
        desktop = desktop or DryRunDesktop()
        return cls(file=FileSink(), browser=desktop, notifier=desktop, launcher=desktop, indexer=desktop)


__all__ = [
    "AppLauncher",
    "DryRunDesktop",
    "FileSink",
    "Indexer",
    "Notifier",
    "Sinks",
    "UrlSink",
]
