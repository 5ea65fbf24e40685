"""
hunkreview review - Interactive hunk-by-hunk review.

TUI host around the review core: shows the parsed diff, records
annotations in an AnnotationStore, and hands the synthesized prompt to the
clipboard when the reviewer is done.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Static, Tree

from hunkreview.git import GitError
from hunkreview.lib.annotations import AnnotationStore
from hunkreview.lib.config import ReviewConfig
from hunkreview.lib.progress import (
    FileTreeEntry,
    ReviewProgress,
    get_file_tree,
    get_review_progress,
    is_all_reviewed,
)
from hunkreview.lib.prompts import REJECT_MODE_LABELS, synthesize_prompt
from hunkreview.lib.source import DiffSource, load_files, load_repo_info
from hunkreview.lib.tui import (
    AnnotationInput,
    AnnotationModal,
    ConfirmModal,
    ContentScreen,
    NumberModal,
)
from hunkreview.lib.types import (
    Annotation,
    Decision,
    DiffFile,
    DiffHunk,
    HunkKey,
    LineType,
    RejectMode,
    RepoInfo,
)

logger = logging.getLogger(__name__)

LINE_STYLES = {
    LineType.ADDITION: "green",
    LineType.DELETION: "red",
    LineType.CONTEXT: "",
}

DECISION_SYMBOLS = {
    Decision.APPROVED: "✓",
    Decision.COMMENTED: "✎",
    Decision.REJECTED: "✗",
}

DECISION_COLORS = {
    Decision.APPROVED: "green",
    Decision.COMMENTED: "yellow",
    Decision.REJECTED: "red",
}


@dataclass
class HunkEntry:
    """One navigable hunk: its key plus the file it belongs to."""
    key: HunkKey
    file: DiffFile
    hunk: DiffHunk


def flatten_hunks(files: list[DiffFile]) -> list[HunkEntry]:
    return [
        HunkEntry(HunkKey(f.path, index), f, hunk)
        for f in files
        for index, hunk in enumerate(f.hunks)
    ]


def hunk_status_symbol(store: AnnotationStore, key: HunkKey) -> str:
    """Symbol for the tree: worst decision wins, blank when unreviewed."""
    annotations = store.get(key)
    if not annotations:
        return " "
    decisions = {a.decision for a in annotations}
    for decision in (Decision.REJECTED, Decision.COMMENTED, Decision.APPROVED):
        if decision in decisions:
            return DECISION_SYMBOLS[decision]
    return " "


def format_progress(progress: ReviewProgress) -> str:
    return (
        f"{progress.reviewed}/{progress.total} reviewed | "
        f"{progress.approved} approved | "
        f"{progress.commented} commented | "
        f"{progress.rejected} rejected"
    )


def file_label(diff_file: DiffFile, entry: FileTreeEntry) -> str:
    """'✓ 2/2 path [Status]' once every hunk has an annotation, '●' before."""
    complete = entry.hunks > 0 and entry.reviewed == entry.hunks
    marker = "✓" if complete else "●"
    return f"{marker} {entry.reviewed}/{entry.hunks} {diff_file.path} [{diff_file.status.value}]"


def action_bar_text(files: list[DiffFile], store: AnnotationStore) -> str:
    progress = format_progress(get_review_progress(files, store))
    if is_all_reviewed(files, store):
        return f"{progress}  All hunks reviewed: [d]one copies the prompt, [p] previews it"
    return (
        f"{progress}  "
        "[j/k] move [a]pprove [A]pprove lines [c]omment [r/R]eject [u]ndo [D]elete [x] clear [d]one"
    )


def annotation_at(annotations: list[Annotation], text: str) -> Annotation:
    """Pick an annotation by the 1-based number shown under the hunk.

    Raises:
        ValueError: if text is not a number in range
    """
    try:
        number = int(text.strip())
    except ValueError:
        raise ValueError(f"Not an annotation number: '{text.strip()}'") from None
    if not 1 <= number <= len(annotations):
        raise ValueError(f"No annotation {number} (this hunk has {len(annotations)})")
    return annotations[number - 1]


def describe_annotation(annotation: Annotation) -> str:
    """One-line summary used under the hunk body."""
    parts = [annotation.decision.value]
    if annotation.reject_mode is not None:
        parts.append(f"({REJECT_MODE_LABELS[annotation.reject_mode]})")
    parts.append(f"on {annotation.selected_lines.label}" if annotation.selected_lines else "whole hunk")
    if annotation.selected_text:
        parts.append(f"`{annotation.selected_text}`")
    summary = " ".join(parts)
    if annotation.comment:
        summary += f": {annotation.comment}"
    return summary


def render_hunk(entry: HunkEntry, annotations: list[Annotation]) -> Text:
    """Hunk header, numbered lines and the annotations recorded on it."""
    text = Text()
    text.append(f"{entry.file.path}", style="bold")
    if entry.file.old_path:
        text.append(f"  (renamed from {entry.file.old_path})", style="dim")
    text.append("\n")
    text.append(f"{entry.hunk.header}\n", style="cyan")

    for line in entry.hunk.lines:
        old_no = "" if line.old_line_no is None else str(line.old_line_no)
        new_no = "" if line.new_line_no is None else str(line.new_line_no)
        text.append(f"{old_no:>5} {new_no:>5} ", style="dim")
        text.append(f"{line.prefix}{line.content}\n", style=LINE_STYLES[line.line_type])

    if annotations:
        text.append("\nAnnotations:\n", style="bold")
        for number, annotation in enumerate(annotations, 1):
            color = DECISION_COLORS[annotation.decision]
            text.append(f"  {number}. ", style="dim")
            text.append(f"{DECISION_SYMBOLS[annotation.decision]} ", style=color)
            text.append(f"{describe_annotation(annotation)}\n")

    return text


class ReviewApp(App[Optional[str]]):
    """Main review TUI application.

    Exits with the synthesized prompt when the reviewer finishes, or None
    when they quit.
    """

    CSS = """
    #main-container {
        height: 1fr;
    }

    #file-tree {
        width: 40;
        border: solid blue;
    }

    #hunk-scroll {
        width: 1fr;
        border: solid green;
        padding: 0 1;
    }

    #action-bar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("j", "next_hunk", "Next", show=False),
        Binding("k", "prev_hunk", "Prev", show=False),
        Binding("a", "approve", "Approve", show=False),
        Binding("A", "approve_lines", "Approve lines", show=False),
        Binding("c", "comment", "Comment", show=False),
        Binding("r", "reject_alternative", "Reject", show=False),
        Binding("R", "reject_possibilities", "Reject (options)", show=False),
        Binding("u", "undo", "Undo", show=False),
        Binding("D", "delete_annotation", "Delete annotation", show=False),
        Binding("x", "clear_hunk", "Clear", show=False),
        Binding("p", "preview", "Preview"),
        Binding("y", "copy_prompt", "Copy"),
        Binding("d", "done", "Done"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        files: list[DiffFile],
        store: Optional[AnnotationStore] = None,
        repo_info: Optional[RepoInfo] = None,
    ) -> None:
        super().__init__()
        self.files = files
        self.store = store if store is not None else AnnotationStore()
        self.repo_info = repo_info
        self.entries = flatten_hunks(files)
        self.current = 0
        self._leaf_nodes = {}
        self._file_nodes = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Tree("Changes", id="file-tree"),
            VerticalScroll(Static(id="hunk-view"), id="hunk-scroll"),
            id="main-container",
        )
        yield Static(id="action-bar", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        if self.repo_info:
            self.title = f"hunkreview: {self.repo_info.name}"
            self.sub_title = self.repo_info.branch
        else:
            self.title = "hunkreview"

        tree = self.query_one("#file-tree", Tree)
        tree.root.expand()
        entry_index = 0
        for diff_file in self.files:
            file_node = tree.root.add(Text(""), expand=True)
            self._file_nodes.append((diff_file, file_node))
            for _hunk in diff_file.hunks:
                self._leaf_nodes[entry_index] = file_node.add_leaf(Text(""), data=entry_index)
                entry_index += 1

        self.refresh_view()

    def _hunk_label(self, entry_index: int) -> str:
        entry = self.entries[entry_index]
        marker = "▶" if entry_index == self.current else " "
        symbol = hunk_status_symbol(self.store, entry.key)
        return f"{marker}{symbol} {entry.hunk.header}"

    def refresh_view(self) -> None:
        """Redraw tree labels, the focused hunk and the progress bar."""
        tree_entries = get_file_tree(self.files, self.store)
        for (diff_file, file_node), tree_entry in zip(self._file_nodes, tree_entries):
            file_node.set_label(Text(file_label(diff_file, tree_entry)))
        for entry_index, node in self._leaf_nodes.items():
            node.set_label(Text(self._hunk_label(entry_index)))

        view = self.query_one("#hunk-view", Static)
        if self.entries:
            entry = self.entries[self.current]
            view.update(render_hunk(entry, self.store.get(entry.key)))
        else:
            view.update(Text("No hunks to review."))

        self.query_one("#action-bar", Static).update(action_bar_text(self.files, self.store))

    @property
    def focused_entry(self) -> Optional[HunkEntry]:
        if not self.entries:
            return None
        return self.entries[self.current]

    @on(Tree.NodeSelected)
    def on_tree_selected(self, event: Tree.NodeSelected) -> None:
        if event.node.data is not None:
            self.current = event.node.data
            self.refresh_view()

    def action_next_hunk(self) -> None:
        if self.entries and self.current < len(self.entries) - 1:
            self.current += 1
            self.refresh_view()

    def action_prev_hunk(self) -> None:
        if self.current > 0:
            self.current -= 1
            self.refresh_view()

    def _add(self, annotation: Annotation) -> None:
        entry = self.focused_entry
        self.store.add(entry.key, annotation)
        self.refresh_view()

    def _ask(self, title: str, build, ask_comment: bool = True) -> None:
        """Open an AnnotationModal and add what build() makes of the input."""
        if self.focused_entry is None:
            self.notify("No hunk selected", severity="warning")
            return

        def handle_input(result: Optional[AnnotationInput]) -> None:
            if result is None:
                return
            try:
                self._add(build(result))
            except ValueError as e:
                self.notify(str(e), severity="error")

        self.push_screen(AnnotationModal(title, ask_comment=ask_comment), handle_input)

    def action_approve(self) -> None:
        """Approve the whole focused hunk."""
        if self.focused_entry is None:
            self.notify("No hunk selected", severity="warning")
            return
        self._add(Annotation(decision=Decision.APPROVED))
        self.action_next_hunk()

    def action_approve_lines(self) -> None:
        self._ask(
            "Approve lines",
            lambda r: Annotation(
                decision=Decision.APPROVED,
                selected_lines=r.selected_lines,
                selected_text=r.selected_text,
            ),
            ask_comment=False,
        )

    def action_comment(self) -> None:
        self._ask(
            "Comment",
            lambda r: Annotation(
                decision=Decision.COMMENTED,
                comment=r.comment,
                selected_lines=r.selected_lines,
                selected_text=r.selected_text,
            ),
        )

    def _reject(self, mode: RejectMode) -> None:
        self._ask(
            f"Reject ({REJECT_MODE_LABELS[mode]})",
            lambda r: Annotation(
                decision=Decision.REJECTED,
                reject_mode=mode,
                comment=r.comment,
                selected_lines=r.selected_lines,
                selected_text=r.selected_text,
            ),
        )

    def action_reject_alternative(self) -> None:
        self._reject(RejectMode.PROPOSE_ALTERNATIVE)

    def action_reject_possibilities(self) -> None:
        self._reject(RejectMode.REQUEST_POSSIBILITIES)

    def action_undo(self) -> None:
        """Remove the newest annotation on the focused hunk."""
        entry = self.focused_entry
        annotations = self.store.get(entry.key) if entry else []
        if not annotations:
            self.notify("Nothing to undo", severity="warning")
            return
        self.store.remove(entry.key, annotations[-1].id)
        self.refresh_view()

    def action_delete_annotation(self) -> None:
        """Remove one annotation on the focused hunk, picked by its number."""
        entry = self.focused_entry
        annotations = self.store.get(entry.key) if entry else []
        if not annotations:
            self.notify("Nothing to delete", severity="warning")
            return

        def handle_number(text: str) -> None:
            if not text.strip():
                return
            try:
                annotation = annotation_at(annotations, text)
            except ValueError as e:
                self.notify(str(e), severity="error")
                return
            self.store.remove(entry.key, annotation.id)
            self.refresh_view()

        self.push_screen(
            NumberModal(f"Delete annotation (1-{len(annotations)}) on {entry.hunk.header}"),
            handle_number,
        )

    def action_clear_hunk(self) -> None:
        entry = self.focused_entry
        if entry is None or entry.key not in self.store:
            self.notify("Nothing to clear", severity="warning")
            return

        key = entry.key

        def handle_confirm(confirmed: bool) -> None:
            if confirmed:
                self.store.clear(key)
                self.refresh_view()

        self.push_screen(ConfirmModal(f"Clear all annotations on {key.path} hunk {key.index + 1}?"), handle_confirm)

    def action_preview(self) -> None:
        prompt = synthesize_prompt(self.files, self.store)
        if not prompt:
            self.notify("Nothing to preview", severity="warning")
            return
        self.push_screen(ContentScreen(prompt, title="Prompt preview"))

    def action_copy_prompt(self) -> None:
        prompt = synthesize_prompt(self.files, self.store)
        if not prompt:
            self.notify("Nothing to copy", severity="warning")
            return
        self.copy_to_clipboard(prompt)
        self.notify("Prompt copied to clipboard", severity="information")

    def action_done(self) -> None:
        """Copy the prompt and exit with it."""
        prompt = synthesize_prompt(self.files, self.store)
        if prompt:
            self.copy_to_clipboard(prompt)
        self.exit(result=prompt)


def cmd_review(args, source: DiffSource, config: ReviewConfig) -> int:
    """Run the review TUI and print the prompt when finished."""
    files = load_files(source, config)
    if not files:
        print("No changes to review.")
        return 0

    try:
        repo_info = load_repo_info(source, config)
    except GitError as e:
        logger.warning(f"Could not read repository info: {e}")
        repo_info = None

    app = ReviewApp(files, repo_info=repo_info)
    prompt = app.run()

    if prompt:
        print(prompt)
    return 0
