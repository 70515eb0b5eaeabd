"""Report file output."""

from pathlib import Path

import aiofiles
import structlog

from issue_digest.exceptions import DeliveryError

log = structlog.get_logger(__name__)


class FileSink:
    """Write report content to disk.

    The path is taken as given (after ``~`` expansion) and is never
    passed through a shell.
    """

    name = "file"

    async def write(self, content: str, path: str) -> Path:
        """Write ``content`` to ``path``, creating parent directories.

        Existing files are overwritten. Characters UTF-8 cannot encode
        (lone surrogates) are written as ``\\uXXXX`` escapes, which keeps
        JSON content loadable.

        Returns:
            The resolved path that was written

        Raises:
            DeliveryError: If the directory or file cannot be written
        """
        target = Path(path).expanduser()

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(target, "w", encoding="utf-8", errors="backslashreplace") as f:
                await f.write(content)
        except (OSError, UnicodeError) as e:
            raise DeliveryError(f"Error saving data to file: {e}", sink=self.name, target=str(target)) from e

        log.info("report_written", path=str(target), chars=len(content))
        return target
