"""
Review progress counters for the host UI.

Everything here is derived on demand from the parsed files and the
annotation store; nothing is cached.
"""

from dataclasses import dataclass

from hunkreview.lib.annotations import AnnotationStore
from hunkreview.lib.types import Decision, DiffFile, HunkKey


@dataclass
class ReviewProgress:
    """Hunk counts by review state.

    A hunk with both a comment and a rejection counts toward both
    commented and rejected; reviewed counts it once.
    """
    total: int
    reviewed: int
    approved: int
    commented: int
    rejected: int


@dataclass
class FileTreeEntry:
    """One row of the file list: path plus annotated/total hunk counts."""
    path: str
    hunks: int
    reviewed: int


def total_hunks(files: list[DiffFile]) -> int:
    return sum(len(f.hunks) for f in files)


def iter_hunk_keys(files: list[DiffFile]):
    """Yield (key, hunk) for every hunk, in diff order."""
    for diff_file in files:
        for index, hunk in enumerate(diff_file.hunks):
            yield HunkKey(diff_file.path, index), hunk


def get_review_progress(files: list[DiffFile], store: AnnotationStore) -> ReviewProgress:
    total = reviewed = approved = commented = rejected = 0

    for key, _hunk in iter_hunk_keys(files):
        total += 1
        annotations = store.get(key)
        if not annotations:
            continue

        reviewed += 1
        decisions = {a.decision for a in annotations}
        if decisions == {Decision.APPROVED}:
            approved += 1
        if Decision.COMMENTED in decisions:
            commented += 1
        if Decision.REJECTED in decisions:
            rejected += 1

    return ReviewProgress(
        total=total,
        reviewed=reviewed,
        approved=approved,
        commented=commented,
        rejected=rejected,
    )


def is_all_reviewed(files: list[DiffFile], store: AnnotationStore) -> bool:
    """True once every hunk carries at least one annotation."""
    progress = get_review_progress(files, store)
    return progress.total > 0 and progress.reviewed >= progress.total


def get_file_tree(files: list[DiffFile], store: AnnotationStore) -> list[FileTreeEntry]:
    entries = []
    for diff_file in files:
        reviewed = sum(
            1 for index in range(len(diff_file.hunks))
            if HunkKey(diff_file.path, index) in store
        )
        entries.append(FileTreeEntry(path=diff_file.path, hunks=len(diff_file.hunks), reviewed=reviewed))
    return entries
