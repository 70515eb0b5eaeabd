"""Async subprocess utilities.

Commands are always executed from discrete arguments, never through a
shell, so paths and repository names are passed verbatim to the child
process.

Example:
    >>> from issue_digest.utils.async_subprocess import run_command
    >>> stdout, stderr, code = await run_command("mdimport", "/Users/me/report.json")
"""

import asyncio
import subprocess
from pathlib import Path


async def run_command(
    *args: str,
    cwd: Path | str | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> tuple[str, str, int]:
    """Run a command asynchronously without shell interpolation.

    Args:
        *args: Command and arguments as separate strings
        cwd: Working directory for command execution
        check: If True, raise CalledProcessError on a non-zero exit code
        timeout: Maximum seconds to wait; the process is killed when exceeded

    Returns:
        Tuple of (stdout, stderr, return_code), decoded as UTF-8 with replacement

    Raises:
        subprocess.CalledProcessError: If check=True and command returns non-zero
        TimeoutError: If timeout is exceeded
        FileNotFoundError: If the command executable is not found
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        process.kill()
        await process.wait()
        raise

    stdout = (stdout_bytes or b"").decode("utf-8", errors="replace")
    stderr = (stderr_bytes or b"").decode("utf-8", errors="replace")

    if check and process.returncode != 0:
        raise subprocess.CalledProcessError(process.returncode, args, stdout, stderr)

    return stdout, stderr, process.returncode or 0
