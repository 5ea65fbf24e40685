"""
hunkreview info - Show repository and configuration details.
"""

from hunkreview.lib.config import ReviewConfig
from hunkreview.lib.source import DiffSource, load_repo_info


def cmd_info(args, source: DiffSource, config: ReviewConfig) -> int:
    """Print repository metadata and the effective settings."""
    repo_info = load_repo_info(source, config)

    print(f"Repository: {repo_info.name}")
    print("=" * 60)
    print(f"Branch:     {repo_info.branch}")
    print(f"Path:       {repo_info.path}")
    if source.remote:
        print(f"Remote:     {source.remote}")
    print(f"Range:      {source.ref_range or 'working tree vs HEAD'}")
    print()

    print("Settings")
    print("-" * 40)
    print(f"  git_timeout:    {config.git_timeout}s")
    print(f"  remote_timeout: {config.remote_timeout}s")
    print(f"  ssh_command:    {config.ssh_command}")
    print(f"  default_range:  {config.default_range or '(none)'}")
    print(f"  log_file:       {config.log_file or '(none)'}")
    return 0
