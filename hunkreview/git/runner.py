"""Git command runner with timeout handling, local or over ssh."""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_REMOTE_TIMEOUT = 60


class GitError(Exception):
    """A git command failed or could not be run."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr.strip()
        super().__init__(f"{message}: {self.stderr}" if self.stderr else message)


@dataclass
class GitResult:
    """Result of a git command."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out


def _run(cmd: list[str], timeout: int) -> GitResult:
    logger.debug(f"Running: {shlex.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return GitResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    except subprocess.TimeoutExpired:
        return GitResult(
            returncode=-1,
            stdout="",
            stderr=f"Command timed out after {timeout}s",
            timed_out=True,
        )
    except FileNotFoundError:
        return GitResult(
            returncode=127,
            stdout="",
            stderr=f"Command not found: {cmd[0]}",
        )


def run_git(
    args: list[str],
    cwd: Path,
    timeout: int = DEFAULT_TIMEOUT,
) -> GitResult:
    """
    Run a git command with timeout handling.

    Args:
        args: Git command arguments (e.g., ["diff", "HEAD"])
        cwd: Working directory for the command
        timeout: Timeout in seconds

    Returns:
        GitResult with returncode, stdout, stderr, and timed_out flag
    """
    return _run(["git", "-C", str(cwd)] + args, timeout)


def split_remote(remote: str) -> tuple[str, str | None]:
    """Split 'host:/path/to/repo' into (host, path).

    Without a ':' the whole string is the host and git runs in the remote
    login directory.
    """
    host, sep, path = remote.partition(":")
    return host, (path or None) if sep else None


def run_remote(
    remote: str,
    args: list[str],
    timeout: int = DEFAULT_REMOTE_TIMEOUT,
    ssh_command: str = "ssh",
) -> GitResult:
    """
    Run a git command on another machine through ssh.

    Args:
        remote: 'host' or 'host:/path/to/repo' (host may be 'user@host')
        args: Git command arguments
        timeout: Timeout in seconds for the whole ssh call
        ssh_command: ssh invocation, split shell-style (e.g. "ssh -p 2222")
    """
    host, path = split_remote(remote)
    git_cmd = ["git"]
    if path:
        git_cmd += ["-C", path]
    git_cmd += args

    # The remote side runs this through a shell, so quote each word
    cmd = shlex.split(ssh_command) + [host, shlex.join(git_cmd)]
    return _run(cmd, timeout)
