"""Git access for hunkreview.

Return type conventions:
- Functions returning GitResult: caller must check .success before using output.
  Examples: run_git(), run_remote()
- Functions returning text or metadata raise GitError on failure.
  Examples: get_diff_text(), get_repo_info()
"""

from hunkreview.git.runner import (
    GitError,
    GitResult,
    run_git,
    run_remote,
    split_remote,
)
from hunkreview.git.diff import (
    get_diff_text,
    get_remote_diff_text,
)
from hunkreview.git.repo import (
    find_repo_root,
    get_repo_info,
    get_remote_repo_info,
)

__all__ = [
    # runner
    "GitError",
    "GitResult",
    "run_git",
    "run_remote",
    "split_remote",
    # diff
    "get_diff_text",
    "get_remote_diff_text",
    # repo
    "find_repo_root",
    "get_repo_info",
    "get_remote_repo_info",
]
