"""Tests for hunkreview.lib.types."""

import pytest

from hunkreview.lib.types import (
    Annotation,
    Decision,
    DiffLine,
    HunkKey,
    LineRange,
    LineType,
    RejectMode,
)


class TestDiffLine:
    def test_addressing_prefers_new_line_number(self):
        line = DiffLine("x", LineType.CONTEXT, old_line_no=4, new_line_no=7)
        assert line.addressing_line_no == 7

    def test_addressing_falls_back_to_old_for_deletions(self):
        line = DiffLine("x", LineType.DELETION, old_line_no=4)
        assert line.addressing_line_no == 4

    def test_prefixes(self):
        assert DiffLine("x", LineType.ADDITION, new_line_no=1).prefix == "+"
        assert DiffLine("x", LineType.DELETION, old_line_no=1).prefix == "-"
        assert DiffLine("x", LineType.CONTEXT, 1, 1).prefix == " "


class TestHunkKey:
    def test_paths_with_delimiters_stay_distinct(self):
        # Composite keys, so '::' in a path cannot collide with another key
        assert HunkKey("a::1", 0) != HunkKey("a", 1)

    def test_usable_as_dict_key(self):
        keys = {HunkKey("a.py", 0): "first"}
        assert keys[HunkKey("a.py", 0)] == "first"


class TestLineRange:
    def test_single_line_label(self):
        assert LineRange(4, 4).label == "line 4"

    def test_multi_line_label(self):
        assert LineRange(4, 7).label == "lines 4-7"

    def test_contains_is_inclusive(self):
        lines = LineRange(4, 7)
        assert lines.contains(4)
        assert lines.contains(7)
        assert not lines.contains(3)
        assert not lines.contains(8)
        assert not lines.contains(None)

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError, match="after end"):
            LineRange(7, 4)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            LineRange(-1, 2)


class TestAnnotation:
    """Field rules enforced at construction."""

    def test_approval(self):
        annotation = Annotation(Decision.APPROVED)
        assert annotation.comment is None
        assert not annotation.is_scoped

    def test_approval_with_comment_rejected(self):
        with pytest.raises(ValueError, match="do not carry a comment"):
            Annotation(Decision.APPROVED, comment="nice")

    def test_comment_requires_text(self):
        with pytest.raises(ValueError, match="requires a comment"):
            Annotation(Decision.COMMENTED)

    def test_rejection_requires_mode(self):
        with pytest.raises(ValueError, match="reject_mode"):
            Annotation(Decision.REJECTED, comment="no")

    def test_reject_mode_only_on_rejections(self):
        with pytest.raises(ValueError, match="only valid on rejections"):
            Annotation(Decision.COMMENTED, comment="hm", reject_mode=RejectMode.PROPOSE_ALTERNATIVE)

    def test_ids_are_unique(self):
        first = Annotation(Decision.APPROVED)
        second = Annotation(Decision.APPROVED)
        assert first.id != second.id

    def test_scoped(self):
        annotation = Annotation(Decision.COMMENTED, comment="x", selected_lines=LineRange(2, 3))
        assert annotation.is_scoped
