"""Desktop integration sinks: browser, notifications, file viewer, search index.

Each sink picks its mechanism from ``sys.platform``:

=========  ======================  ==================  =============
Platform   Notifications           Open file with app  Search index
=========  ======================  ==================  =============
darwin     osascript               open -a             mdimport
linux      notify-send             xdg-open            (none)
other      log only                log only            (none)
=========  ======================  ==================  =============

All subprocesses receive their values as separate argv entries. The
AppleScript used for notifications reads title, message and sound from
``argv`` rather than having them spliced into the script text.
"""

import subprocess
import sys
import webbrowser

import structlog

from issue_digest.exceptions import DeliveryError
from issue_digest.utils.async_subprocess import run_command

log = structlog.get_logger(__name__)

SUBPROCESS_TIMEOUT = 30.0

_NOTIFY_SCRIPT = (
    "on run argv",
    "display notification (item 2 of argv) with title (item 1 of argv)",
    "end run",
)

_NOTIFY_WITH_SOUND_SCRIPT = (
    "on run argv",
    "display notification (item 2 of argv) with title (item 1 of argv) sound name (item 3 of argv)",
    "end run",
)


def _osascript_args(script: tuple[str, ...], *argv: str) -> list[str]:
    args = ["osascript"]
    for line in script:
        args.extend(["-e", line])
    args.extend(argv)
    return args


async def _run(sink: str, target: str, *args: str) -> None:
    try:
        await run_command(*args, timeout=SUBPROCESS_TIMEOUT)
    except (OSError, ValueError, subprocess.CalledProcessError, TimeoutError) as e:
        # ValueError covers argv the OS refuses, e.g. an embedded NUL
        raise DeliveryError(f"{args[0]} failed: {e}", sink=sink, target=target) from e


class UrlSink:
    """Open URLs in the default web browser."""

    name = "browser"

    async def open(self, url: str) -> None:
        """Open ``url``; raises DeliveryError if no browser accepted it."""
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error as e:
            raise DeliveryError(f"Could not open URL: {e}", sink=self.name, target=url) from e

        if not opened:
            raise DeliveryError("No browser available to open URL", sink=self.name, target=url)
        log.debug("url_opened", url=url)


class Notifier:
    """Send desktop notifications.

    ``tone`` is a macOS sound name (e.g. ``Glass``, ``Basso``) and is
    ignored on other platforms.
    """

    name = "notifier"

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform or sys.platform

    async def notify(self, title: str, message: str, tone: str | None = None) -> None:
        if self.platform == "darwin":
            if tone:
                args = _osascript_args(_NOTIFY_WITH_SOUND_SCRIPT, title, message, tone)
            else:
                args = _osascript_args(_NOTIFY_SCRIPT, title, message)
            await _run(self.name, title, *args)
        elif self.platform.startswith("linux"):
            await _run(self.name, title, "notify-send", "--app-name=issue-digest", title, message)
        else:
            log.info("notification", title=title, message=message)


class AppLauncher:
    """Open a file with a desktop application."""

    name = "launcher"

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform or sys.platform

    async def open_with(self, path: str, app: str | None = None) -> None:
        if self.platform == "darwin":
            args = ["open", "-a", app, path] if app else ["open", path]
            await _run(self.name, path, *args)
        elif self.platform.startswith("linux"):
            # xdg-open always uses the desktop's default handler
            await _run(self.name, path, "xdg-open", path)
        else:
            log.info("open_file_skipped", path=path, app=app, platform=self.platform)


class Indexer:
    """Ask the desktop search service to index a file."""

    name = "indexer"

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform or sys.platform

    async def index(self, path: str) -> None:
        if self.platform == "darwin":
            await _run(self.name, path, "mdimport", path)
        else:
            log.debug("indexing_unsupported", path=path, platform=self.platform)
