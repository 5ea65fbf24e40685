"""Tests for the review TUI helpers (no running app)."""

import pytest

from hunkreview.commands.review import (
    action_bar_text,
    annotation_at,
    describe_annotation,
    file_label,
    flatten_hunks,
    format_progress,
    hunk_status_symbol,
    render_hunk,
)
from hunkreview.lib.annotations import AnnotationStore
from hunkreview.lib.progress import FileTreeEntry, ReviewProgress, get_file_tree
from hunkreview.lib.tui import parse_line_range
from hunkreview.lib.types import (
    Annotation,
    Decision,
    DiffFile,
    DiffHunk,
    DiffLine,
    FileStatus,
    HunkKey,
    LineRange,
    LineType,
    RejectMode,
)

HUNK = DiffHunk(
    header="@@ -3,2 +3,2 @@",
    old_start=3,
    old_count=2,
    new_start=3,
    new_count=2,
    lines=(
        DiffLine("keep()", LineType.CONTEXT, 3, 3),
        DiffLine("[old] call()", LineType.DELETION, 4, None),
        DiffLine("[new] call()", LineType.ADDITION, None, 4),
    ),
)


class TestParseLineRange:
    def test_blank_means_whole_hunk(self):
        assert parse_line_range("") is None
        assert parse_line_range("   ") is None

    def test_single_line(self):
        assert parse_line_range("12") == LineRange(12, 12)

    def test_range_with_spaces(self):
        assert parse_line_range(" 12 - 15 ") == LineRange(12, 15)

    def test_garbage(self):
        with pytest.raises(ValueError, match="Not a line range"):
            parse_line_range("twelve")

    def test_reversed(self):
        with pytest.raises(ValueError):
            parse_line_range("15-12")


class TestFlattenHunks:
    def test_skips_files_without_hunks(self):
        files = [DiffFile("a.py", hunks=(HUNK, HUNK)), DiffFile("logo.png"), DiffFile("b.py", hunks=(HUNK,))]
        keys = [entry.key for entry in flatten_hunks(files)]
        assert keys == [HunkKey("a.py", 0), HunkKey("a.py", 1), HunkKey("b.py", 0)]


class TestStatusSymbols:
    def test_unreviewed_is_blank(self):
        assert hunk_status_symbol(AnnotationStore(), HunkKey("a.py", 0)) == " "

    def test_worst_decision_wins(self):
        store = AnnotationStore()
        key = HunkKey("a.py", 0)
        store.add(key, Annotation(Decision.APPROVED))
        assert hunk_status_symbol(store, key) == "✓"
        store.add(key, Annotation(Decision.COMMENTED, comment="x"))
        assert hunk_status_symbol(store, key) == "✎"
        store.add(key, Annotation(Decision.REJECTED, comment="y", reject_mode=RejectMode.PROPOSE_ALTERNATIVE))
        assert hunk_status_symbol(store, key) == "✗"

    def test_format_progress(self):
        progress = ReviewProgress(total=5, reviewed=3, approved=1, commented=1, rejected=2)
        assert format_progress(progress) == "3/5 reviewed | 1 approved | 1 commented | 2 rejected"


class TestDescribeAnnotation:
    def test_whole_hunk_approval(self):
        assert describe_annotation(Annotation(Decision.APPROVED)) == "approved whole hunk"

    def test_scoped_rejection(self):
        annotation = Annotation(
            Decision.REJECTED,
            comment="Use a pool",
            reject_mode=RejectMode.REQUEST_POSSIBILITIES,
            selected_lines=LineRange(4, 5),
            selected_text="call()",
        )
        assert describe_annotation(annotation) == (
            "rejected (request other possibilities) on lines 4-5 `call()`: Use a pool"
        )


class TestRenderHunk:
    def test_plain_text_content(self):
        entry = flatten_hunks([DiffFile("a.py", hunks=(HUNK,))])[0]
        text = render_hunk(entry, []).plain
        assert text.startswith("a.py\n@@ -3,2 +3,2 @@\n")
        # Brackets in code must survive verbatim
        assert "-[old] call()" in text
        assert "+[new] call()" in text
        assert "Annotations:" not in text

    def test_lists_annotations(self):
        entry = flatten_hunks([DiffFile("a.py", old_path="old.py", hunks=(HUNK,))])[0]
        annotations = [Annotation(Decision.COMMENTED, comment="Rename this")]
        text = render_hunk(entry, annotations).plain
        assert "(renamed from old.py)" in text
        assert "1. ✎ commented whole hunk: Rename this" in text


class TestFileLabel:
    """File rows carry a completion marker and reviewed/total counts."""

    def test_complete_file(self):
        diff_file = DiffFile("a.py", hunks=(HUNK, HUNK))
        assert file_label(diff_file, FileTreeEntry("a.py", 2, 2)) == "✓ 2/2 a.py [Modified]"

    def test_partial_file(self):
        diff_file = DiffFile("b.py", status=FileStatus.ADDED, hunks=(HUNK, HUNK))
        assert file_label(diff_file, FileTreeEntry("b.py", 2, 1)) == "● 1/2 b.py [Added]"

    def test_file_without_hunks_is_never_complete(self):
        diff_file = DiffFile("img.png")
        assert file_label(diff_file, FileTreeEntry("img.png", 0, 0)).startswith("● 0/0 ")

    def test_labels_follow_store(self):
        files = [DiffFile("a.py", hunks=(HUNK,)), DiffFile("b.py", hunks=(HUNK, HUNK))]
        store = AnnotationStore()
        store.add(HunkKey("a.py", 0), Annotation(Decision.APPROVED))
        store.add(HunkKey("b.py", 1), Annotation(Decision.APPROVED))
        labels = [file_label(f, e) for f, e in zip(files, get_file_tree(files, store))]
        assert labels == ["✓ 1/1 a.py [Modified]", "● 1/2 b.py [Modified]"]


class TestActionBarText:
    def test_hints_until_everything_reviewed(self):
        files = [DiffFile("a.py", hunks=(HUNK, HUNK))]
        store = AnnotationStore()
        store.add(HunkKey("a.py", 0), Annotation(Decision.APPROVED))
        text = action_bar_text(files, store)
        assert text.startswith("1/2 reviewed")
        assert "[D]elete" in text
        assert "All hunks reviewed" not in text

    def test_all_reviewed(self):
        files = [DiffFile("a.py", hunks=(HUNK,))]
        store = AnnotationStore()
        store.add(HunkKey("a.py", 0), Annotation(Decision.COMMENTED, comment="ok?"))
        text = action_bar_text(files, store)
        assert text.startswith("1/1 reviewed")
        assert "All hunks reviewed" in text


class TestAnnotationAt:
    """Picking an annotation by its displayed number."""

    ANNOTATIONS = [
        Annotation(Decision.APPROVED),
        Annotation(Decision.COMMENTED, comment="second"),
        Annotation(Decision.COMMENTED, comment="third"),
    ]

    def test_picks_middle_annotation(self):
        assert annotation_at(self.ANNOTATIONS, " 2 ") is self.ANNOTATIONS[1]

    def test_deleting_middle_keeps_others(self):
        store = AnnotationStore()
        key = HunkKey("a.py", 0)
        for annotation in self.ANNOTATIONS:
            store.add(key, annotation)
        picked = annotation_at(store.get(key), "2")
        assert store.remove(key, picked.id)
        assert [a.comment for a in store.get(key)] == [None, "third"]

    @pytest.mark.parametrize("text", ["0", "4", "-1"])
    def test_out_of_range(self, text):
        with pytest.raises(ValueError, match="this hunk has 3"):
            annotation_at(self.ANNOTATIONS, text)

    def test_not_a_number(self):
        with pytest.raises(ValueError, match="Not an annotation number: 'two'"):
            annotation_at(self.ANNOTATIONS, "two")
