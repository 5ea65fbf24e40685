"""
Unified diff parser for hunkreview.

Turns `git diff` output (or plain `diff -u` output) into DiffFile records.
Hunk bodies are checked against the line counts in their headers; any
mismatch is a hard error because annotations address hunks by position.
"""

import logging
import re

from hunkreview.lib.types import DiffFile, DiffHunk, DiffLine, FileStatus, LineType

logger = logging.getLogger(__name__)

GIT_HEADER_PREFIX = "diff --git "
HUNK_HEADER_RE = re.compile(r'^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@')
QUOTED_PATH_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')
NO_NEWLINE_MARKER = "\\"  # "\ No newline at end of file"
DEV_NULL = "/dev/null"


class DiffParseError(Exception):
    """A file section of a diff could not be parsed."""

    def __init__(self, message: str, path: str | None = None, header: str | None = None):
        self.message = message
        self.path = path
        self.header = header
        location = []
        if path:
            location.append(f"file {path}")
        if header:
            location.append(f"hunk {header}")
        super().__init__(message + (f" ({', '.join(location)})" if location else ""))


class _LineReader:
    """Cursor over the lines of a diff."""

    def __init__(self, lines: list[str]):
        self.lines = lines
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    def peek(self, offset: int = 0) -> str | None:
        idx = self.pos + offset
        if idx < len(self.lines):
            return self.lines[idx]
        return None

    def advance(self) -> str:
        line = self.lines[self.pos]
        self.pos += 1
        return line


def parse_diff(diff_text: str) -> list[DiffFile]:
    """Parse unified diff text into an ordered list of files.

    Files and hunks keep the order they have in the input. Text before the
    first file header (commit messages from `git show`, etc.) is ignored.

    Raises:
        DiffParseError: if a hunk header is malformed or a hunk body does not
            match the line counts its header declares.
    """
    lines = diff_text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    reader = _LineReader(lines)
    files = []

    while not reader.at_end():
        line = reader.peek()
        if line.startswith(GIT_HEADER_PREFIX):
            files.append(_parse_git_section(reader))
        elif _at_plain_header(reader):
            files.append(_parse_plain_section(reader))
        else:
            reader.advance()

    logger.debug(f"Parsed {len(files)} files, {sum(len(f.hunks) for f in files)} hunks")
    return files


def _at_plain_header(reader: _LineReader) -> bool:
    """True if the cursor sits on a '--- old' / '+++ new' header pair."""
    first = reader.peek()
    second = reader.peek(1)
    return (
        first is not None and second is not None
        and first.startswith("--- ") and second.startswith("+++ ")
    )


def _unquote(value: str) -> str:
    """Undo git's C-style path quoting ("a/caf\\303\\251")."""
    value = value.rstrip("\r")
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        raw = value[1:-1]
        return raw.encode("utf-8").decode("unicode_escape").encode("latin-1").decode("utf-8")
    return value


def _strip_side_prefix(value: str) -> str:
    """Normalize a ---/+++ path: drop timestamp, quoting and a/ b/ prefix."""
    value = _unquote(value.split("\t", 1)[0])
    if value == DEV_NULL:
        return value
    if value.startswith(("a/", "b/")):
        return value[2:]
    return value


def _path_from_git_header(line: str) -> str:
    """Extract the post-image path from 'diff --git a/x b/x'."""
    rest = line[len(GIT_HEADER_PREFIX):].rstrip("\r")
    quoted = QUOTED_PATH_RE.findall(rest)
    if len(quoted) == 2:
        return _strip_side_prefix(f'"{quoted[1]}"')

    b_pos = rest.rfind(" b/")
    if b_pos == -1:
        return ""
    return rest[b_pos + 3:]


def _parse_git_section(reader: _LineReader) -> DiffFile:
    """Parse one 'diff --git' section: extended header lines, then hunks."""
    header_path = _path_from_git_header(reader.advance())
    status = FileStatus.MODIFIED
    old_path = None
    rename_to = None
    minus_path = None
    plus_path = None

    while not reader.at_end():
        line = reader.peek()
        if line.startswith(GIT_HEADER_PREFIX) or line.startswith("@@"):
            break
        reader.advance()

        if line.startswith("new file mode"):
            status = FileStatus.ADDED
        elif line.startswith("deleted file mode"):
            status = FileStatus.DELETED
        elif line.startswith("rename from "):
            old_path = _unquote(line[len("rename from "):])
            status = FileStatus.RENAMED
        elif line.startswith("rename to "):
            rename_to = _unquote(line[len("rename to "):])
        elif line.startswith("--- "):
            minus_path = _strip_side_prefix(line[4:])
        elif line.startswith("+++ "):
            plus_path = _strip_side_prefix(line[4:])
        # index, mode, similarity, "Binary files ... differ" and binary
        # patch bodies carry nothing we keep

    path = rename_to
    if not path and plus_path and plus_path != DEV_NULL:
        path = plus_path
    if not path and minus_path and minus_path != DEV_NULL:
        path = minus_path
    if not path:
        path = header_path

    hunks = ()
    if not reader.at_end() and reader.peek().startswith("@@"):
        hunks = _parse_hunks(reader, path)

    return DiffFile(path=path, status=status, old_path=old_path, hunks=hunks)


def _parse_plain_section(reader: _LineReader) -> DiffFile:
    """Parse a section that starts directly at '--- old' / '+++ new'."""
    minus_path = _strip_side_prefix(reader.advance()[4:])
    plus_path = _strip_side_prefix(reader.advance()[4:])

    if minus_path == DEV_NULL:
        status, path = FileStatus.ADDED, plus_path
    elif plus_path == DEV_NULL:
        status, path = FileStatus.DELETED, minus_path
    else:
        status, path = FileStatus.MODIFIED, plus_path

    return DiffFile(path=path, status=status, hunks=_parse_hunks(reader, path))


def _parse_hunks(reader: _LineReader, path: str) -> tuple[DiffHunk, ...]:
    """Parse consecutive hunks until the next file section."""
    hunks = []

    while not reader.at_end():
        line = reader.peek()
        if line.startswith("@@"):
            hunks.append(_parse_hunk(reader, path))
        elif line == "" or line.startswith(NO_NEWLINE_MARKER):
            reader.advance()
        elif line.startswith(("+", "-", " ")) and not _at_plain_header(reader):
            raise DiffParseError(
                "Hunk has more lines than its header declares",
                path,
                hunks[-1].header if hunks else None,
            )
        else:
            break

    return tuple(hunks)


def _parse_hunk(reader: _LineReader, path: str) -> DiffHunk:
    """Parse one hunk header and exactly the body lines it declares."""
    header = reader.advance().rstrip("\r")
    match = HUNK_HEADER_RE.match(header)
    if not match:
        raise DiffParseError("Malformed hunk header", path, header)

    old_start = int(match.group(1))
    old_count = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_count = int(match.group(4)) if match.group(4) is not None else 1

    old_no, old_end = old_start, old_start + old_count
    new_no, new_end = new_start, new_start + new_count
    lines = []

    while old_no < old_end or new_no < new_end:
        raw = reader.peek()
        if raw is None or raw.startswith("@@") or raw.startswith(GIT_HEADER_PREFIX):
            raise DiffParseError(
                "Hunk ends before its declared line counts are reached", path, header
            )
        reader.advance()

        if raw.startswith(NO_NEWLINE_MARKER):
            continue

        if raw.startswith("+"):
            if new_no >= new_end:
                raise DiffParseError("Hunk adds more lines than its header declares", path, header)
            lines.append(DiffLine(raw[1:], LineType.ADDITION, None, new_no))
            new_no += 1
        elif raw.startswith("-"):
            if old_no >= old_end:
                raise DiffParseError("Hunk removes more lines than its header declares", path, header)
            lines.append(DiffLine(raw[1:], LineType.DELETION, old_no, None))
            old_no += 1
        else:
            if old_no >= old_end or new_no >= new_end:
                raise DiffParseError("Hunk has more context lines than its header declares", path, header)
            content = raw[1:] if raw.startswith(" ") else raw
            lines.append(DiffLine(content, LineType.CONTEXT, old_no, new_no))
            old_no += 1
            new_no += 1

    return DiffHunk(
        header=header,
        old_start=old_start,
        old_count=old_count,
        new_start=new_start,
        new_count=new_count,
        lines=tuple(lines),
    )
