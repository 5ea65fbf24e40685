"""
Review input loading.

Resolves where the diff comes from (local repository or ssh remote), fetches
it and parses it. This is the only place the host touches git on behalf of
the review core.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from hunkreview.git import (
    get_diff_text,
    get_remote_diff_text,
    get_remote_repo_info,
    get_repo_info,
)
from hunkreview.lib.config import ReviewConfig
from hunkreview.lib.diffparse import parse_diff
from hunkreview.lib.types import DiffFile, RepoInfo

logger = logging.getLogger(__name__)


@dataclass
class DiffSource:
    """Startup selection: where to diff and what range, both opaque strings."""
    repo: Path
    ref_range: Optional[str] = None
    remote: Optional[str] = None

    def describe(self) -> str:
        where = self.remote or str(self.repo)
        return f"{where} ({self.ref_range or 'working tree vs HEAD'})"


def resolve_range(cli_range: Optional[str], config: ReviewConfig) -> Optional[str]:
    """Command-line range wins over the configured default."""
    return cli_range or config.default_range


def fetch_diff(source: DiffSource, config: ReviewConfig) -> str:
    """Raw diff text for a source. Raises GitError on failure."""
    if source.remote:
        return get_remote_diff_text(
            source.remote,
            source.ref_range,
            timeout=config.remote_timeout,
            ssh_command=config.ssh_command,
        )
    return get_diff_text(source.repo, source.ref_range, timeout=config.git_timeout)


def load_files(source: DiffSource, config: ReviewConfig) -> list[DiffFile]:
    """Fetch and parse the diff for a source.

    Raises:
        GitError: if the diff cannot be obtained
        DiffParseError: if the diff text is malformed
    """
    diff_text = fetch_diff(source, config)
    files = parse_diff(diff_text)
    logger.info(f"Loaded {len(files)} changed files from {source.describe()}")
    return files


def load_repo_info(source: DiffSource, config: ReviewConfig) -> RepoInfo:
    """Repository metadata for display. Raises GitError on failure."""
    if source.remote:
        return get_remote_repo_info(
            source.remote,
            timeout=config.remote_timeout,
            ssh_command=config.ssh_command,
        )
    return get_repo_info(source.repo, timeout=config.git_timeout)
