"""Textual front end: the editing area, sheet mask and document actions."""

from __future__ import annotations

import logging
import os
from typing import Callable, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, OptionList, Static, TextArea
from textual.widgets.option_list import Option

from .autosave import AutosaveController, read_swap_file, swap_file_exists
from .constants import PaginationConstants
from .decorations import EMPTY_DECORATIONS, DecorationRenderer, DecorationSet
from .geometry import TextLayoutProbe
from .model import Document
from .page_mask import MaskLayer
from .pagination import Paginator
from .pdf_export import PDFExporter, PrintOutput, SheetLine, layout_sheets
from .settings_persistence import get_persistence
from .state import PaginationState
from .templates import LEGAL_TEMPLATES, NEW_DOCUMENT, WELCOME_DOCUMENT, get_template

logger = logging.getLogger(__name__)


class SheetMask(VerticalScroll):
    """Side panel drawing one frame per sheet."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._frames = 0

    @property
    def frame_count(self) -> int:
        return self._frames

    def rebuild(self, count: int) -> None:
        self._frames = count
        self.remove_children()
        self.mount(*[Static(f"Sheet {i}", classes="sheet") for i in range(1, count + 1)])


MaskLayer.register(SheetMask)


class BreakList(VerticalScroll):
    """One line per page-break spacer; unmoved spacers keep their widget."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.decorations: DecorationSet = EMPTY_DECORATIONS
        self.entries: Dict[str, Static] = {}

    def show(self, decorations: DecorationSet) -> None:
        result = DecorationRenderer.reconcile(self.decorations, decorations)
        for key in result.removed:
            self.entries.pop(key).remove()
        added = set(result.added)
        # New entries are mounted in document order before the next kept one
        pending: List[Static] = []
        for decoration in decorations:
            if decoration.key in added:
                entry = Static(decoration.summary, classes="spacer")
                self.entries[decoration.key] = entry
                pending.append(entry)
                continue
            self.entries[decoration.key].update(decoration.summary)
            if pending:
                self.mount(*pending, before=self.entries[decoration.key])
                pending = []
        if pending:
            self.mount(*pending)
        self.decorations = decorations


class TemplatePicker(ModalScreen[Optional[str]]):
    """Lets the user pick a template; dismisses with its id."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        yield OptionList(
            *[Option(f"{t.name}\n{t.description}", id=t.id) for t in LEGAL_TEMPLATES],
            id="templates",
        )

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no question; dismisses with the answer."""

    BINDINGS = [
        Binding("y", "answer(True)", "Yes"),
        Binding("n", "answer(False)", "No"),
        Binding("escape", "answer(False)", "Cancel"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self.message, id="question")
            with Horizontal(id="buttons"):
                yield Button("Yes", id="yes", variant="error")
                yield Button("No", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class SheetflowApp(App):
    """Paginated document editor."""

    CSS = """
    #title {
        border: none;
        height: 3;
    }
    TextArea {
        width: 1fr;
        border: none;
    }
    #side {
        width: 30;
        border-left: solid $primary;
    }
    SheetMask {
        height: 2fr;
    }
    BreakList {
        height: 1fr;
        border-top: solid $primary;
    }
    .sheet {
        height: 5;
        margin: 0 1 1 1;
        border: round $secondary;
        content-align: center middle;
    }
    ConfirmScreen {
        align: center middle;
    }
    #dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        border: thick $error;
        background: $surface;
    }
    #buttons {
        height: auto;
        margin-top: 1;
    }
    """

    # Ctrl+P prints, as in pagemark
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+n", "new_document", "New"),
        Binding("ctrl+d", "clear_document", "Clear", priority=True),
        Binding("ctrl+t", "pick_template", "Templates"),
        Binding("ctrl+p", "print", "Print"),
        Binding("f2", "toggle_autosave", "Auto-Save"),
        Binding("f5", "export_pdf", "Export PDF"),
        Binding("f8", "format_block('heading1')", "H1"),
        Binding("f9", "format_block('heading2')", "H2"),
        Binding("f10", "format_block('paragraph')", "Paragraph"),
        Binding("f11", "format_block('bullet')", "Bullets"),
        Binding("f12", "format_block('ordered')", "Numbered"),
    ]

    def __init__(self, filename: Optional[str] = None):
        super().__init__()
        self.filename = filename
        self.persistence = get_persistence()
        settings = self.persistence.load_settings(filename)
        self.document_title: str = settings.get("title") or PaginationConstants.DEFAULT_TITLE
        self.autosave = AutosaveController(filename, enabled=settings.get("autosave", True))
        self.page_config = self.persistence.load_page_config(filename)
        self.document = Document(list(WELCOME_DOCUMENT))
        self.probe = TextLayoutProbe(self.document)
        self.mask = SheetMask(id="mask")
        self.breaks = BreakList(id="breaks")
        self.paginator: Optional[Paginator] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(value=self.document_title, placeholder="Document title", id="title")
        with Horizontal():
            yield TextArea(self.document.to_text(), id="editor", soft_wrap=True)
            with Vertical(id="side"):
                yield self.mask
                yield self.breaks
        yield Footer()

    def on_mount(self) -> None:
        self.title = self.document_title
        if self.filename:
            self._load(self.filename)
        self.paginator = Paginator(
            self.document,
            self.probe,
            config=self.page_config,
            mask_layer=self.mask,
            defer=self.call_after_refresh,
        )
        self.paginator.add_listener(self._pagination_committed)
        self.paginator.start()
        self.set_interval(0.5, self._refresh_status)
        self.query_one("#editor", TextArea).focus()

    def on_unmount(self) -> None:
        if self.paginator is not None:
            self.paginator.stop()
        self.document.destroy()

    def _load(self, filename: str) -> None:
        content = None
        if swap_file_exists(filename):
            content = read_swap_file(filename)
            if content is not None:
                self.notify("Recovered unsaved changes from swap file")
        if content is None and os.path.exists(filename):
            try:
                with open(filename, 'r', encoding='utf-8') as f:
                    content = f.read()
            except OSError as e:
                self.notify(f"Error loading file: {e}", severity="error")
        if content is not None:
            self._set_content(content.split("\n"))

    def _set_content(self, paragraphs: List[str]) -> None:
        self.document.replace_content(paragraphs)
        self.query_one("#editor", TextArea).load_text(self.document.to_text())

    def _confirm_replace(self, message: str, replace: Callable[[], None]) -> None:
        """Ask before discarding the current content."""
        if isinstance(self.screen, ConfirmScreen):
            return

        def answered(confirmed: Optional[bool]) -> None:
            if confirmed:
                replace()

        self.push_screen(ConfirmScreen(message), answered)

    # --- Events ---
    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text == self.document.to_text():
            return
        self.document.set_text(text)
        self.autosave.document_changed(text)
        self._refresh_status()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "title":
            self.document_title = event.value or PaginationConstants.DEFAULT_TITLE
            self.title = self.document_title

    def _pagination_committed(self, state: PaginationState) -> None:
        self.breaks.show(state.decorations)
        self._refresh_status()

    def _refresh_status(self) -> None:
        pages = self.paginator.page_count if self.paginator else 1
        mode = "Auto-Save" if self.autosave.enabled else "Manual"
        self.sub_title = f"{pages} page(s) | {mode}: {self.autosave.status}"

    def _print_output(self) -> PrintOutput:
        return PrintOutput(PDFExporter(self.page_config))

    def _sheets(self) -> Optional[List[List[SheetLine]]]:
        if self.paginator is None or self.paginator.plan is None:
            return None
        return layout_sheets(self.document, self.paginator.plan, self.probe)

    # --- Actions ---
    def action_save(self) -> None:
        if not self.filename:
            self.notify("No filename set", severity="warning")
            return
        if self.autosave.save_now(self.document.to_text()):
            self.persistence.save_settings(self.filename, {
                "title": self.document_title,
                "autosave": self.autosave.enabled,
            })
            self.notify(f"Saved to {self.filename}")
        else:
            self.notify(f"Error saving {self.filename}", severity="error")
        self._refresh_status()

    def action_new_document(self) -> None:
        self._confirm_replace(
            "Start a new document? Unsaved changes will be lost.",
            lambda: self._set_content(list(NEW_DOCUMENT)),
        )

    def action_clear_document(self) -> None:
        self._confirm_replace(
            "Clear the whole document?",
            lambda: self._set_content([""]),
        )

    def action_pick_template(self) -> None:
        def load_template(template_id: Optional[str]) -> None:
            template = get_template(template_id) if template_id else None
            if template is None:
                return

            def replace() -> None:
                self._set_content(list(template.blocks))
                self.notify(f"Loaded template: {template.name}")

            self._confirm_replace(f"Replace the document with {template.name}?", replace)

        self.push_screen(TemplatePicker(), load_template)

    def action_format_block(self, fmt: str) -> None:
        editor = self.query_one("#editor", TextArea)
        row, column = editor.cursor_location
        before = len(self.document.paragraphs[row])
        self.document.format_block(row, fmt)
        shift = len(self.document.paragraphs[row]) - before
        text = self.document.to_text()
        editor.load_text(text)
        editor.cursor_location = (row, max(0, column + shift))
        self.autosave.document_changed(text)
        self._refresh_status()

    def action_toggle_autosave(self) -> None:
        enabled = self.autosave.toggle()
        self.notify("Auto-save on" if enabled else "Auto-save off")
        self._refresh_status()

    def action_export_pdf(self) -> None:
        sheets = self._sheets()
        if sheets is None:
            return
        base = os.path.splitext(self.filename)[0] if self.filename else "document"
        ok, error = self._print_output().save_to_file(sheets, base + ".pdf", self.document_title)
        if ok:
            self.notify(f"Exported {base}.pdf")
        else:
            self.notify(error, severity="error")

    def action_print(self) -> None:
        sheets = self._sheets()
        if sheets is None:
            return
        ok, error = self._print_output().print_to_printer(sheets)
        if ok:
            self.notify("Sent to printer")
        else:
            self.notify(error, severity="error")


def main(filename: Optional[str] = None) -> None:
    SheetflowApp(filename=filename).run()
