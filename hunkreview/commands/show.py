"""
hunkreview show - Print the parsed diff.

Useful for checking what the review will contain, and which hunk index a
given change has when writing an annotations file by hand.
"""

from rich.console import Console
from rich.text import Text

from hunkreview.lib.config import ReviewConfig
from hunkreview.lib.progress import total_hunks
from hunkreview.lib.source import DiffSource, load_files
from hunkreview.lib.types import DiffFile, FileStatus, LineType

STATUS_STYLES = {
    FileStatus.ADDED: "green",
    FileStatus.DELETED: "red",
    FileStatus.RENAMED: "yellow",
    FileStatus.MODIFIED: "cyan",
}

LINE_STYLES = {
    LineType.ADDITION: "green",
    LineType.DELETION: "red",
    LineType.CONTEXT: "dim",
}


def count_changes(diff_file: DiffFile) -> tuple[int, int]:
    """(added, removed) line counts for one file."""
    added = removed = 0
    for hunk in diff_file.hunks:
        for line in hunk.lines:
            if line.line_type == LineType.ADDITION:
                added += 1
            elif line.line_type == LineType.DELETION:
                removed += 1
    return added, removed


def file_heading(diff_file: DiffFile) -> Text:
    heading = Text()
    heading.append(f"[{diff_file.status.value}] ", style=STATUS_STYLES[diff_file.status])
    if diff_file.old_path and diff_file.old_path != diff_file.path:
        heading.append(f"{diff_file.old_path} -> ")
    heading.append(diff_file.path, style="bold")
    return heading


def cmd_show(args, source: DiffSource, config: ReviewConfig) -> int:
    """Show changed files and their hunks."""
    files = load_files(source, config)
    console = Console(highlight=False)

    if not files:
        print("No changes.")
        return 0

    print(f"Diff: {source.describe()}")
    print("=" * 60)

    for diff_file in files:
        added, removed = count_changes(diff_file)
        line = file_heading(diff_file)
        line.append(f"  +{added} -{removed}, {len(diff_file.hunks)} hunks", style="dim")
        console.print(line)

        for index, hunk in enumerate(diff_file.hunks):
            console.print(Text(f"  {index}: {hunk.header}", style="magenta"))
            if args.brief:
                continue
            for diff_line in hunk.lines:
                console.print(Text(f"    {diff_line.prefix}{diff_line.content}", style=LINE_STYLES[diff_line.line_type]))
        if not args.brief:
            print()

    print("-" * 60)
    print(f"{len(files)} files, {total_hunks(files)} hunks")
    return 0
