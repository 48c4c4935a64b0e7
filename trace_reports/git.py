"""Best-effort git lookups for the working copy a run happened in."""

import asyncio
import logging
from pathlib import Path

log = logging.getLogger(__name__)


async def git_output(*args: str, cwd: Path | None = None) -> str | None:
    """Stripped stdout of a git command, or None if it failed or printed nothing."""
    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        log.warning("Could not run git: %s", e)
        return None

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        log.debug("git %s failed: %s", " ".join(args), stderr.decode().strip())
        return None

    return stdout.decode().strip() or None


async def current_branch(cwd: Path | None = None) -> str | None:
    return await git_output("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd)


async def current_commit(cwd: Path | None = None) -> str | None:
    return await git_output("rev-parse", "HEAD", cwd=cwd)


async def changed_files(cwd: Path | None = None) -> str | None:
    """Files changed against HEAD, one per line."""
    return await git_output("diff", "--name-only", "HEAD", cwd=cwd)


async def user_name(cwd: Path | None = None) -> str | None:
    return await git_output("config", "user.name", cwd=cwd)
