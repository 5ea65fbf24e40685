"""Tests for hunkreview.lib.progress."""

from hunkreview.lib.annotations import AnnotationStore
from hunkreview.lib.progress import (
    get_file_tree,
    get_review_progress,
    is_all_reviewed,
    iter_hunk_keys,
    total_hunks,
)
from hunkreview.lib.types import (
    Annotation,
    Decision,
    DiffFile,
    DiffHunk,
    HunkKey,
    RejectMode,
)


def make_files():
    hunk = DiffHunk(header="@@ -1 +1 @@", old_start=1, old_count=1, new_start=1, new_count=1)
    return [
        DiffFile(path="a.py", hunks=(hunk, hunk)),
        DiffFile(path="logo.png"),
        DiffFile(path="b.py", hunks=(hunk,)),
    ]


class TestCounting:
    def test_total_hunks(self):
        assert total_hunks(make_files()) == 3

    def test_iter_hunk_keys_in_diff_order(self):
        keys = [key for key, _hunk in iter_hunk_keys(make_files())]
        assert keys == [HunkKey("a.py", 0), HunkKey("a.py", 1), HunkKey("b.py", 0)]


class TestReviewProgress:
    def test_nothing_reviewed(self):
        progress = get_review_progress(make_files(), AnnotationStore())
        assert progress.total == 3
        assert progress.reviewed == 0
        assert not is_all_reviewed(make_files(), AnnotationStore())

    def test_counts_by_decision(self):
        store = AnnotationStore()
        store.add(HunkKey("a.py", 0), Annotation(Decision.APPROVED))
        store.add(HunkKey("a.py", 1), Annotation(Decision.APPROVED))
        store.add(HunkKey("a.py", 1), Annotation(Decision.COMMENTED, comment="x"))
        store.add(HunkKey("a.py", 1), Annotation(
            Decision.REJECTED, comment="y", reject_mode=RejectMode.PROPOSE_ALTERNATIVE
        ))

        progress = get_review_progress(make_files(), store)
        assert progress.reviewed == 2
        assert progress.approved == 1
        assert progress.commented == 1
        assert progress.rejected == 1

    def test_all_reviewed(self):
        files = make_files()
        store = AnnotationStore()
        for key, _hunk in iter_hunk_keys(files):
            store.add(key, Annotation(Decision.APPROVED))
        assert is_all_reviewed(files, store)

    def test_no_hunks_is_not_all_reviewed(self):
        assert not is_all_reviewed([DiffFile(path="logo.png")], AnnotationStore())

    def test_orphaned_keys_not_counted(self):
        store = AnnotationStore()
        store.add(HunkKey("gone.py", 0), Annotation(Decision.APPROVED))
        assert get_review_progress(make_files(), store).reviewed == 0


class TestFileTree:
    def test_per_file_counts(self):
        store = AnnotationStore()
        store.add(HunkKey("a.py", 1), Annotation(Decision.APPROVED))
        entries = get_file_tree(make_files(), store)
        assert [(e.path, e.hunks, e.reviewed) for e in entries] == [
            ("a.py", 2, 1),
            ("logo.png", 0, 0),
            ("b.py", 1, 0),
        ]
