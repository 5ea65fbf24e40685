"""
Shared data types for hunkreview.

The diff model (DiffFile/DiffHunk/DiffLine) is produced once by the parser
and never mutated afterwards. Annotations are created one at a time by the
reviewer and live only in memory.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple


class LineType(Enum):
    ADDITION = "Addition"
    DELETION = "Deletion"
    CONTEXT = "Context"


class FileStatus(Enum):
    ADDED = "Added"
    MODIFIED = "Modified"
    DELETED = "Deleted"
    RENAMED = "Renamed"


class Decision(Enum):
    """Reviewer judgment on a hunk or a range of its lines."""
    APPROVED = "approved"
    COMMENTED = "commented"
    REJECTED = "rejected"


class RejectMode(Enum):
    PROPOSE_ALTERNATIVE = "propose_alternative"
    REQUEST_POSSIBILITIES = "request_possibilities"


LINE_PREFIXES = {
    LineType.ADDITION: "+",
    LineType.DELETION: "-",
    LineType.CONTEXT: " ",
}


@dataclass(frozen=True)
class DiffLine:
    """One physical diff line, marker stripped."""
    content: str
    line_type: LineType
    old_line_no: int | None = None  # Absent for additions
    new_line_no: int | None = None  # Absent for deletions

    @property
    def addressing_line_no(self) -> int | None:
        """Line number used to match annotation ranges (post-image first)."""
        if self.new_line_no is not None:
            return self.new_line_no
        return self.old_line_no

    @property
    def prefix(self) -> str:
        return LINE_PREFIXES[self.line_type]


@dataclass(frozen=True)
class DiffHunk:
    header: str  # Verbatim "@@ -a,b +c,d @@" line
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[DiffLine, ...] = ()


@dataclass(frozen=True)
class DiffFile:
    path: str
    status: FileStatus = FileStatus.MODIFIED
    old_path: str | None = None  # Only set for renames
    hunks: tuple[DiffHunk, ...] = ()


class HunkKey(NamedTuple):
    """Address of a hunk: file path plus position within that file.

    Positional, so annotations keyed on it are orphaned if the diff is
    re-parsed after the underlying changes move.
    """
    path: str
    index: int


@dataclass(frozen=True)
class LineRange:
    """Inclusive range of addressing line numbers."""
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError(f"Line numbers must be non-negative: {self.start}-{self.end}")
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    def contains(self, line_no: int | None) -> bool:
        return line_no is not None and self.start <= line_no <= self.end

    @property
    def label(self) -> str:
        """'line 4' or 'lines 4-7'."""
        if self.start == self.end:
            return f"line {self.start}"
        return f"lines {self.start}-{self.end}"


def _new_annotation_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Annotation:
    """A single reviewer judgment attached to a hunk.

    An annotation without selected_lines applies to the whole hunk.
    selected_text is only shown back to the reader, never matched.
    """
    decision: Decision
    comment: str | None = None
    reject_mode: RejectMode | None = None
    selected_text: str | None = None
    selected_lines: LineRange | None = None
    id: str = field(default_factory=_new_annotation_id)

    def __post_init__(self):
        if self.decision == Decision.APPROVED:
            if self.comment is not None:
                raise ValueError("Approvals do not carry a comment")
        elif self.comment is None:
            raise ValueError(f"A {self.decision.value} annotation requires a comment")

        if self.decision == Decision.REJECTED:
            if self.reject_mode is None:
                raise ValueError("Rejections require a reject_mode")
        elif self.reject_mode is not None:
            raise ValueError("reject_mode is only valid on rejections")

    @property
    def is_scoped(self) -> bool:
        return self.selected_lines is not None


@dataclass
class RepoInfo:
    """Repository metadata shown by the host; never consumed by the core."""
    name: str
    branch: str
    path: str
