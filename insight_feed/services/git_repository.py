"""
Git Repository Adapter

Thin async wrapper over the git CLI for the publish workflow.
Commands are argument lists; nothing goes through a shell.
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import get_settings
from ..core.exceptions import VersionControlStateError
from ..core.logging import get_logger

logger = get_logger(__name__)

NOTHING_TO_COMMIT_MARKERS = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)


@dataclass
class GitResult:
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


class GitRepository:
    """Runs git in a fixed working tree."""

    def __init__(self, repo_dir: Optional[Path] = None, timeout: Optional[float] = None):
        settings = get_settings()
        self.repo_dir = Path(repo_dir if repo_dir is not None else settings.repo_dir)
        self.timeout = timeout if timeout is not None else settings.git_timeout_seconds

    async def run(self, *args: str) -> GitResult:
        """
        Run ``git <args>`` and capture output. A non-zero exit is returned,
        not raised; callers decide what it means.

        Raises:
            VersionControlStateError: git is missing or the command timed out
        """
        # English messages so "nothing to commit" detection is stable; never prompt
        env = {**os.environ, "LC_ALL": "C", "GIT_TERMINAL_PROMPT": "0"}
        cmd = ["git", *args]
        logger.debug("git_command", args=cmd, cwd=str(self.repo_dir))

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(self.repo_dir),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except (FileNotFoundError, NotADirectoryError) as e:
            raise VersionControlStateError(f"Unable to run git in {self.repo_dir}: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise VersionControlStateError(f"git {args[0]} timed out after {self.timeout:.0f}s")

        return GitResult(
            args=cmd,
            returncode=proc.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    async def status_porcelain(self, paths: Sequence[str]) -> GitResult:
        return await self.run("status", "--porcelain", "--", *paths)

    async def add(self, paths: Sequence[str]) -> GitResult:
        return await self.run("add", "--", *paths)

    async def commit(self, message: str) -> GitResult:
        return await self.run("commit", "-m", message)

    async def push(self, remote: Optional[str] = None, branch: Optional[str] = None) -> GitResult:
        args = ["push"]
        if remote:
            args.append(remote)
            if branch:
                args.append(branch)
        return await self.run(*args)

    @staticmethod
    def is_nothing_to_commit(result: GitResult) -> bool:
        text = result.output.lower()
        return any(marker in text for marker in NOTHING_TO_COMMIT_MARKERS)
