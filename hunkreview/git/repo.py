"""Repository metadata lookup."""

from pathlib import Path, PurePosixPath

from hunkreview.git.runner import (
    DEFAULT_REMOTE_TIMEOUT,
    DEFAULT_TIMEOUT,
    GitError,
    GitResult,
    run_git,
    run_remote,
)
from hunkreview.lib.types import RepoInfo


def find_repo_root(start: Path, timeout: int = DEFAULT_TIMEOUT) -> Path:
    """Return the top-level directory of the repository containing start.

    Raises:
        GitError: if start is not inside a git repository
    """
    result = run_git(["rev-parse", "--show-toplevel"], start, timeout=timeout)
    if not result.success:
        raise GitError(f"Not inside a git repository: {start}", result.stderr)
    return Path(result.stdout.strip())


def _repo_info_from_results(root: GitResult, branch: GitResult, where: str) -> RepoInfo:
    if not root.success:
        raise GitError(f"Not a git repository: {where}", root.stderr)
    if not branch.success:
        raise GitError(f"Failed to get current branch for {where}", branch.stderr)

    root_path = root.stdout.strip()
    name = PurePosixPath(root_path).name or root_path
    return RepoInfo(name=name, branch=branch.stdout.strip(), path=root_path)


def get_repo_info(repo: Path, timeout: int = DEFAULT_TIMEOUT) -> RepoInfo:
    """Name, current branch and root path of a local repository.

    A detached HEAD reports branch "HEAD".
    """
    root = run_git(["rev-parse", "--show-toplevel"], repo, timeout=timeout)
    branch = run_git(["rev-parse", "--abbrev-ref", "HEAD"], repo, timeout=timeout)
    return _repo_info_from_results(root, branch, str(repo))


def get_remote_repo_info(
    remote: str,
    timeout: int = DEFAULT_REMOTE_TIMEOUT,
    ssh_command: str = "ssh",
) -> RepoInfo:
    """Same as get_repo_info, for 'host:/path/to/repo' over ssh."""
    root = run_remote(remote, ["rev-parse", "--show-toplevel"], timeout=timeout, ssh_command=ssh_command)
    branch = run_remote(remote, ["rev-parse", "--abbrev-ref", "HEAD"], timeout=timeout, ssh_command=ssh_command)
    return _repo_info_from_results(root, branch, remote)
