"""Git diff acquisition."""

import logging
from pathlib import Path

from hunkreview.git.runner import (
    DEFAULT_REMOTE_TIMEOUT,
    DEFAULT_TIMEOUT,
    GitError,
    run_git,
    run_remote,
)

logger = logging.getLogger(__name__)


# Pin color, external drivers and path prefixes so diff.noprefix,
# diff.mnemonicPrefix and friends cannot change what the parser sees
DIFF_FORMAT_ARGS = ["--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/"]


def _diff_args(ref_range: str | None) -> list[str]:
    return ["diff"] + DIFF_FORMAT_ARGS + [ref_range or "HEAD"]


def get_diff_text(repo: Path, ref_range: str | None = None, timeout: int = DEFAULT_TIMEOUT) -> str:
    """
    Get unified diff text for a local repository.

    Args:
        repo: Any path inside the repository
        ref_range: Revision or range (e.g. "main...HEAD"); None diffs the
            working tree against HEAD
        timeout: Timeout in seconds

    Returns:
        Diff text, possibly empty

    Raises:
        GitError: if git fails. Without a range, a repository that has no
            commits yet falls back to a plain `git diff` first.
    """
    result = run_git(_diff_args(ref_range), repo, timeout=timeout)
    if result.success:
        return result.stdout

    if ref_range is None and not result.timed_out:
        logger.debug("git diff HEAD failed, retrying without HEAD (repository without commits?)")
        fallback = run_git(["diff"] + DIFF_FORMAT_ARGS, repo, timeout=timeout)
        if fallback.success:
            return fallback.stdout
        raise GitError("git diff failed", fallback.stderr)

    raise GitError(f"git diff {ref_range or 'HEAD'} failed", result.stderr)


def get_remote_diff_text(
    remote: str,
    ref_range: str | None = None,
    timeout: int = DEFAULT_REMOTE_TIMEOUT,
    ssh_command: str = "ssh",
) -> str:
    """
    Get unified diff text from a repository on another machine.

    Args:
        remote: 'host:/path/to/repo'
        ref_range: Revision or range; None diffs the working tree against HEAD

    Raises:
        GitError: if ssh or git fails
    """
    result = run_remote(remote, _diff_args(ref_range), timeout=timeout, ssh_command=ssh_command)
    if not result.success:
        raise GitError(f"git diff on {remote} failed", result.stderr)
    return result.stdout
