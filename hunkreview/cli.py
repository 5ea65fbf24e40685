#!/usr/bin/env python3
"""hunkreview CLI entrypoint."""

import sys
import argparse
import logging
from pathlib import Path

from hunkreview.git import GitError, find_repo_root
from hunkreview.lib.config import ConfigError, ReviewConfig, load_config
from hunkreview.lib.diffparse import DiffParseError
from hunkreview.lib.logging_config import setup_logging
from hunkreview.lib.source import DiffSource, resolve_range
from hunkreview.lib.validate import ValidationError
from hunkreview.commands import review as cmd_review_module
from hunkreview.commands import prompt as cmd_prompt_module
from hunkreview.commands import show as cmd_show_module
from hunkreview.commands import info as cmd_info_module

logger = logging.getLogger(__name__)


def get_repo_dir(args) -> Path:
    """Local repository root, from --repo or the current directory.

    With --remote the local directory is only used for config lookup, so a
    directory outside any repository is accepted as-is.
    """
    start = Path(args.repo).expanduser() if args.repo else Path.cwd()
    if args.remote:
        try:
            return find_repo_root(start)
        except GitError:
            return start
    return find_repo_root(start)


def get_source(args, repo_dir: Path, config: ReviewConfig) -> DiffSource:
    """Startup selection: range and remote, passed through untouched."""
    return DiffSource(
        repo=repo_dir,
        ref_range=resolve_range(getattr(args, 'range', None), config),
        remote=args.remote,
    )


def run_command(args, func) -> int:
    """Resolve repo, config and source, then run a command.

    Exit codes: 1 for git and diff failures, 2 for config and input errors.
    """
    try:
        repo_dir = get_repo_dir(args)
    except GitError as e:
        print(f"ERROR: {e}")
        return 1

    explicit_config = Path(args.config).expanduser() if args.config else None
    try:
        config = load_config(repo_dir, explicit_config)
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 2

    if config.log_file:
        setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=config.log_file)

    source = get_source(args, repo_dir, config)
    logger.debug(f"Reviewing {source.describe()}")

    try:
        return func(args, source, config)
    except (GitError, DiffParseError) as e:
        print(f"ERROR: {e}")
        return 1
    except (ConfigError, ValidationError) as e:
        print(f"ERROR: {e}")
        return 2


def cmd_review(args):
    return run_command(args, cmd_review_module.cmd_review)


def cmd_prompt(args):
    return run_command(args, cmd_prompt_module.cmd_prompt)


def cmd_show(args):
    return run_command(args, cmd_show_module.cmd_show)


def cmd_info(args):
    return run_command(args, cmd_info_module.cmd_info)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='hunkreview', description='Hunk-by-hunk review of uncommitted or ranged git changes')
    parser.add_argument('--repo', '-C', help='Repository directory (default: current directory)')
    parser.add_argument('--remote', help='Review a repository over ssh, as host:/path/to/repo')
    parser.add_argument('--config', help='Config file (default: .hunkreview.yaml in the repo, then ~/.config/hunkreview/config.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only log errors')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # hunkreview review
    p_review = subparsers.add_parser('review', help='Review hunks interactively and copy the prompt')
    p_review.add_argument('range', nargs='?', help='Git range, e.g. main...HEAD (default: working tree vs HEAD)')
    p_review.set_defaults(func=cmd_review)

    # hunkreview prompt
    p_prompt = subparsers.add_parser('prompt', help='Build the prompt from an annotations file')
    p_prompt.add_argument('range', nargs='?', help='Git range (default: working tree vs HEAD)')
    p_prompt.add_argument('--annotations', '-a', required=True, help='Annotations JSON file')
    p_prompt.add_argument('--output', '-o', help='Write the prompt to a file instead of stdout')
    p_prompt.set_defaults(func=cmd_prompt)

    # hunkreview show
    p_show = subparsers.add_parser('show', help='Show the parsed diff with hunk indexes')
    p_show.add_argument('range', nargs='?', help='Git range (default: working tree vs HEAD)')
    p_show.add_argument('--brief', '-b', action='store_true', help='Show only files and hunk headers')
    p_show.set_defaults(func=cmd_show)

    # hunkreview info
    p_info = subparsers.add_parser('info', help='Show repository details and effective settings')
    p_info.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
