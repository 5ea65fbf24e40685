"""
Review prompt synthesis.

Collapses a parsed diff plus the reviewer's annotations into the single
message handed back to the code author. Only hunks that need attention are
spelled out; everything else is folded into an approved count.

Output is a pure function of its inputs: the same files and annotations
always produce byte-identical text.
"""

from hunkreview.lib.annotations import AnnotationStore
from hunkreview.lib.types import (
    Annotation,
    Decision,
    DiffFile,
    DiffHunk,
    HunkKey,
    LineRange,
    RejectMode,
)

__all__ = [
    "REJECT_MODE_LABELS",
    "format_selected_text",
    "format_hunk_diff",
    "format_hunk_section",
    "synthesize_prompt",
]

REJECT_MODE_LABELS = {
    RejectMode.PROPOSE_ALTERNATIVE: "propose alternative",
    RejectMode.REQUEST_POSSIBILITIES: "request other possibilities",
}

HUNK_APPROVED_MARKER = "Hunk approved as-is."


def format_selected_text(text: str) -> str:
    return f"`{text}`"


def _snippet_suffix(annotation: Annotation) -> str:
    if annotation.selected_text:
        return f" ({format_selected_text(annotation.selected_text)})"
    return ""


def format_hunk_diff(hunk: DiffHunk, selected_lines: LineRange | None = None) -> str:
    """Re-emit hunk lines with their +/-/space prefixes.

    With selected_lines, only lines whose addressing number (post-image,
    else pre-image) falls inside the range are kept.
    """
    lines = hunk.lines
    if selected_lines is not None:
        lines = [line for line in lines if selected_lines.contains(line.addressing_line_no)]
    return "\n".join(f"{line.prefix}{line.content}" for line in lines)


def _format_approval(annotation: Annotation) -> str:
    return f"Approved on {annotation.selected_lines.label}{_snippet_suffix(annotation)}"


def _format_comment(annotation: Annotation) -> str:
    line_part = f" on {annotation.selected_lines.label}" if annotation.selected_lines else ""
    return f"Comment{line_part}{_snippet_suffix(annotation)}:\n{annotation.comment or ''}"


def _format_rejection(annotation: Annotation, hunk: DiffHunk) -> str:
    label = REJECT_MODE_LABELS[annotation.reject_mode]
    diff_block = "```diff\n" + format_hunk_diff(hunk, annotation.selected_lines) + "\n```"
    return (
        f"Rejected ({label}){_snippet_suffix(annotation)}:\n"
        f"{diff_block}\n"
        f"{annotation.comment or ''}"
    )


def format_hunk_section(path: str, hunk: DiffHunk, annotations: list[Annotation]) -> str:
    """Heading plus one block per annotation, grouped by kind.

    Group order is fixed (hunk approval, line approvals, comments,
    rejections); creation order is kept inside each group.
    """
    blocks = []

    if any(a.decision == Decision.APPROVED and not a.is_scoped for a in annotations):
        blocks.append(HUNK_APPROVED_MARKER)

    for annotation in annotations:
        if annotation.decision == Decision.APPROVED and annotation.is_scoped:
            blocks.append(_format_approval(annotation))

    for annotation in annotations:
        if annotation.decision == Decision.COMMENTED:
            blocks.append(_format_comment(annotation))

    for annotation in annotations:
        if annotation.decision == Decision.REJECTED:
            blocks.append(_format_rejection(annotation, hunk))

    heading = f"{path} — Hunk {hunk.header}"
    return "\n".join([heading] + blocks)


def synthesize_prompt(files: list[DiffFile], store: AnnotationStore) -> str:
    """Build the review message for a parsed diff and its annotations.

    Returns:
        "" when there are no files, a one-line all-clear when nothing is
        actionable, otherwise the approved count followed by one section per
        actionable hunk.
    """
    if not files:
        return ""

    approved_count = 0
    sections = []

    for diff_file in files:
        for index, hunk in enumerate(diff_file.hunks):
            key = HunkKey(diff_file.path, index)
            if store.effectively_approved(key):
                approved_count += 1
                continue
            sections.append(format_hunk_section(diff_file.path, hunk, store.get(key)))

    if not sections:
        return f"I've reviewed your changes. All {approved_count} hunks approved as-is. Looks good!"

    parts = [
        f"I've reviewed your changes. {approved_count} hunks approved as-is.",
        "",
        "The following need attention:",
        "",
        "\n\n".join(sections),
    ]
    return "\n".join(parts)
