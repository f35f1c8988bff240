"""
Charisma — session.py
The menu-driven state machine behind the terminal UI.

    MAIN_MENU ─┬─> NEW_CODE ─────┐
               ├─> VIEW_HISTORY ─┼─> MAIN_MENU
               ├─> CREATE_GIST ──┘
               └─> TERMINATED  (Exit, or the menu was cancelled)

Every step runs to completion before the next menu is shown. A failure inside
a branch is reported and ends that branch only.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from charisma.config import CharismaConfig
from charisma.core import CodeGenerator
from charisma.errors import GenerationError, PersistenceError, PublishError
from charisma.formatters import DEFAULT_LANGUAGE, LANGUAGES, get_formatter
from charisma.gist import GistPublisher
from charisma.history import HistoryEntry, HistoryStore
from charisma.log import get_logger
from charisma.tools import (
    ToolResult, copy_to_clipboard, file_read, file_write, output_path,
    probe_formatter, run_formatter,
)

log = get_logger("session")


class State(Enum):
    MAIN_MENU = "main_menu"
    NEW_CODE = "new_code"
    VIEW_HISTORY = "view_history"
    CREATE_GIST = "create_gist"
    TERMINATED = "terminated"


MENU: List[Tuple[str, State]] = [
    ("New Code",           State.NEW_CODE),
    ("View History",       State.VIEW_HISTORY),
    ("Create GitHub Gist", State.CREATE_GIST),
    ("Exit",               State.TERMINATED),
]


class SessionUI(Protocol):
    def clear(self) -> None: ...
    def banner(self) -> None: ...
    def select(self, options: Sequence[str], title: str) -> int: ...
    def ask(self, message: str, secret: bool = False) -> str: ...
    def confirm(self, message: str) -> bool: ...
    def pause(self, message: str = "Press Enter to return...") -> None: ...
    def status(self, message: str) -> None: ...
    def ok(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
    def warn(self, message: str) -> None: ...
    def err(self, message: str) -> None: ...
    def preview(self, code: str, lexer: str) -> None: ...
    def show_history(self, entries: Sequence[HistoryEntry]) -> None: ...


class Session:
    def __init__(
        self,
        config: CharismaConfig,
        ui: SessionUI,
        generator: Optional[CodeGenerator] = None,
        history: Optional[HistoryStore] = None,
        publisher: Optional[GistPublisher] = None,
        probe: Callable[[str], Optional[Tuple[str, ...]]] = probe_formatter,
        formatter: Callable[..., ToolResult] = run_formatter,
        clipboard: Callable[[str], ToolResult] = copy_to_clipboard,
    ):
        self.config = config
        self.ui = ui
        self.generator = generator if generator is not None else CodeGenerator(config)
        self.history = history if history is not None else HistoryStore(config.history_path)
        self.publisher = publisher if publisher is not None else GistPublisher()
        self._probe = probe
        self._format = formatter
        self._clipboard = clipboard
        self.state = State.MAIN_MENU
        self._handlers: Dict[State, Callable[[], State]] = {
            State.MAIN_MENU:    self.main_menu,
            State.NEW_CODE:     self.new_code,
            State.VIEW_HISTORY: self.view_history,
            State.CREATE_GIST:  self.create_gist,
        }

    def run(self) -> None:
        self.state = State.MAIN_MENU
        while self.state is not State.TERMINATED:
            self.state = self.step(self.state)
        log.info("session terminated")

    def step(self, state: State) -> State:
        try:
            return self._handlers[state]()
        except PersistenceError as exc:
            log.error("history failure in %s: %s", state.value, exc)
            self.ui.err(f"History error: {exc}")
            self.ui.pause()
            return State.MAIN_MENU

    # ── States ────────────────────────────────────────────────────────────────

    def main_menu(self) -> State:
        self.ui.clear()
        self.ui.banner()
        choice = self.ui.select([label for label, _ in MENU], "Select option:")
        if choice < 0 or choice >= len(MENU):
            return State.TERMINATED
        return MENU[choice][1]

    def view_history(self) -> State:
        entries = self.history.recent(self.config.history_limit)
        if entries: self.ui.show_history(entries)
        else:       self.ui.warn("No history yet.")
        self.ui.pause()
        return State.MAIN_MENU

    def create_gist(self) -> State:
        token = self.ui.ask("Enter your GitHub token: ", secret=True)
        description = self.ui.ask("Enter a description for the Gist (optional): ")
        is_private = self.ui.confirm("Should the Gist be private?")
        filename = self.ui.ask("Enter Gist filename (with extension): ").strip()

        source = file_read(filename)
        if not source.success:
            self.ui.err(f"Cannot read {filename or '(no file given)'}: {source.error}")
            self.ui.pause()
            return State.MAIN_MENU

        try:
            gist = self.publisher.publish(filename, source.output, token,
                                          description=description.strip(),
                                          is_private=is_private)
        except PublishError as exc:
            self.ui.err(f"Failed to create Gist: {exc}")
        else:
            self.ui.ok(f"Gist created: {gist.html_url}")
        self.ui.pause()
        return State.MAIN_MENU

    def new_code(self) -> State:
        prompt = self.ui.ask("‹ Enter Prompt: ").strip()
        if not prompt:
            self.ui.warn("Prompt is empty, nothing to generate.")
            self.ui.pause()
            return State.MAIN_MENU

        language = self.choose_language()
        fmt = get_formatter(language)
        target = output_path(self.config.output_dir, prompt, language)

        self.ui.status("Generating code...")
        try:
            code = self.generator.generate(prompt, language).code
        except GenerationError as exc:
            self.ui.err(f"Something went wrong: {exc}")
            self.ui.pause()
            return State.MAIN_MENU

        if self.ui.confirm("Preview code in terminal?"):
            self.ui.preview(code, fmt.lexer)

        written = file_write(target, code)
        if not written.success:
            self.ui.err(f"Could not save {target}: {written.error}")
            self.ui.pause()
            return State.MAIN_MENU
        self.ui.ok(written.output)

        command = self._probe(language)
        if command is None:
            self.ui.info(f"{fmt.binary} not found, skipping format")
        elif self.ui.confirm(f"Format with {command[0]}?"):
            result = self._format(command, target)
            if result.success: self.ui.ok("Code formatted")
            else:              self.ui.err(f"Formatter error: {result.error}")

        if self.ui.confirm("Copy code to clipboard?"):
            copied = self._clipboard(code)
            if copied.success:
                self.ui.ok(copied.output)

        self.history.record(prompt, language, target)
        self.ui.pause("Done. Press Enter to return...")
        return State.MAIN_MENU

    def choose_language(self) -> str:
        index = self.ui.select(LANGUAGES, "Select language:")
        if index < 0 or index >= len(LANGUAGES):
            return DEFAULT_LANGUAGE
        return LANGUAGES[index]
