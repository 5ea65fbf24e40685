"""Shared TUI components for the review screen."""

import re
from dataclasses import dataclass
from typing import Optional

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, Label, Static

from hunkreview.lib.types import LineRange

LINE_RANGE_RE = re.compile(r'^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$')


def parse_line_range(text: str) -> Optional[LineRange]:
    """Parse '12' or '12-15' into a LineRange; blank means whole hunk.

    Raises:
        ValueError: on anything else, or a reversed range
    """
    if not text.strip():
        return None
    match = LINE_RANGE_RE.match(text)
    if not match:
        raise ValueError(f"Not a line range: '{text.strip()}' (use 12 or 12-15)")
    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else start
    return LineRange(start, end)


@dataclass
class AnnotationInput:
    """What the reviewer typed into an AnnotationModal."""
    selected_lines: Optional[LineRange]
    selected_text: Optional[str]
    comment: Optional[str]


class ConfirmModal(ModalScreen[bool]):
    """Simple yes/no confirmation modal."""

    CSS = """
    ConfirmModal {
        align: center middle;
    }

    #confirm-dialog {
        width: auto;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $warning;
    }

    #confirm-message {
        margin-bottom: 1;
    }

    #confirm-hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Container(
            Static(self.message, id="confirm-message"),
            Static("[y]es / [n]o", id="confirm-hint"),
            id="confirm-dialog",
        )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class AnnotationModal(ModalScreen[Optional[AnnotationInput]]):
    """Collects line range, quoted snippet and (optionally) a comment.

    Enter in any field submits; Tab moves between fields; Escape cancels
    and dismisses with None.
    """

    CSS = """
    AnnotationModal {
        align: center middle;
    }

    #annotation-dialog {
        width: 72;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    #annotation-title {
        margin-bottom: 1;
        text-style: bold;
    }

    #annotation-hint {
        margin-top: 1;
        color: $text-muted;
    }

    #annotation-error {
        color: $error;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, ask_comment: bool = True, comment_required: bool = True) -> None:
        super().__init__()
        self.dialog_title = title
        self.ask_comment = ask_comment
        self.comment_required = comment_required

    def compose(self) -> ComposeResult:
        widgets = [
            Label(self.dialog_title, id="annotation-title"),
            Input(placeholder="Lines: 12 or 12-15 (blank = whole hunk)", id="annotation-lines"),
            Input(placeholder="Quoted code (optional)", id="annotation-text"),
        ]
        if self.ask_comment:
            widgets.append(Input(placeholder="Comment", id="annotation-comment"))
        widgets.append(Static("", id="annotation-error"))
        widgets.append(Label("Enter to submit, Tab for next field, Escape to cancel", id="annotation-hint"))
        yield Container(*widgets, id="annotation-dialog")

    def on_mount(self) -> None:
        focus_id = "#annotation-comment" if self.ask_comment else "#annotation-lines"
        self.query_one(focus_id, Input).focus()

    @on(Input.Submitted)
    def on_submit(self, event: Input.Submitted) -> None:
        error = self.query_one("#annotation-error", Static)

        try:
            selected_lines = parse_line_range(self.query_one("#annotation-lines", Input).value)
        except ValueError as e:
            error.update(str(e))
            return

        selected_text = self.query_one("#annotation-text", Input).value.strip() or None

        comment = None
        if self.ask_comment:
            comment = self.query_one("#annotation-comment", Input).value.strip() or None
            if comment is None and self.comment_required:
                error.update("A comment is required")
                return

        self.dismiss(AnnotationInput(selected_lines, selected_text, comment))

    def action_cancel(self) -> None:
        self.dismiss(None)


class NumberModal(ModalScreen[str]):
    """Single-field prompt for picking an item by number."""

    CSS = """
    NumberModal {
        align: center middle;
    }

    #number-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: solid $primary;
    }

    #number-input {
        margin: 1 0;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str) -> None:
        super().__init__()
        self.title_text = title

    def compose(self) -> ComposeResult:
        yield Container(
            Label(self.title_text),
            Input(placeholder="Annotation number", id="number-input"),
            Label("Press Enter to submit, Escape to cancel"),
            id="number-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#number-input", Input).focus()

    @on(Input.Submitted)
    def on_submit(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss("")


class ContentScreen(ModalScreen):
    """Full screen text viewer (prompt preview)."""

    BINDINGS = [
        Binding("q", "back", "Back"),
        Binding("escape", "back", "Back"),
    ]

    def __init__(self, content: str, title: str = "") -> None:
        super().__init__()
        self.content = content
        self.screen_title = title

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(
            Static(self.content, id="content-body", markup=False),
            id="content-scroll",
        )
        yield Footer()

    def on_mount(self) -> None:
        if self.screen_title:
            self.title = self.screen_title

    def action_back(self) -> None:
        self.app.pop_screen()
