#!/usr/bin/env python3
"""
CHARISMA — Coding Agent
Prompt an AI model for code, save it, format it, share it.

  charisma                — open the menu in the current directory
  charisma --version      — print the version

Needs MISTRAL_API_KEY in the environment (or in a .env file).
"""

import shutil, sys
from typing import Sequence

import click
from rich.console import Console
from rich.panel   import Panel
from rich.text    import Text
from rich.table   import Table
from rich.align   import Align
from rich.syntax  import Syntax
from rich          import box
from prompt_toolkit             import PromptSession
from prompt_toolkit.styles      import Style as PTStyle
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.key_binding    import KeyBindings

from charisma                import __version__
from charisma.config         import CharismaConfig, load_config
from charisma.history        import HistoryEntry
from charisma.log            import get_logger, setup_logging
from charisma.session        import Session

log = get_logger("cli")

# ── Console & palette ──────────────────────────────────────────────────────────
console = Console(highlight=False)
VERSION = __version__

GOLD   = "#ffdf00"
CYAN   = "#00f5ff"
BLUE   = "#0088ff"
GREEN  = "#00ff9f"
YELLOW = "#ffe600"
RED    = "#ff4444"
WHITE  = "#e8eaf6"
DIM    = "#3d4a5c"
GRAD   = [GOLD, "#ffc800", "#ffb000", "#ff9900", YELLOW]

def W(): return shutil.get_terminal_size().columns
def gradient(text: str) -> Text:
    t = Text()
    for i, ch in enumerate(text):
        t.append(ch, style=f"bold {GRAD[i % len(GRAD)]}")
    return t

PT_STYLE = PTStyle.from_dict({"": WHITE})


def _escape_bindings(result: str) -> KeyBindings:
    kb = KeyBindings()

    @kb.add("escape", eager=True)
    def _(event):
        event.app.exit(result=result)

    return kb


class TerminalUI:
    """rich + prompt_toolkit rendition of the session menu."""

    def __init__(self, config: CharismaConfig, out: Console = None):
        self.config = config
        self.console = out or console
        self._prompt = PromptSession(style=PT_STYLE)

    # ── Output ────────────────────────────────────────────────────────────────

    def clear(self): self.console.clear()

    def banner(self):
        self.console.print()
        self.console.print(Align.center(gradient("CHARISMA")))
        self.console.print(Align.center(Text("Coding Agent", style=f"bold {GREEN}")))
        key_line = (
            f"[bold {GREEN}]✔  key loaded[/]" if self.config.has_api_key
            else f"[bold {RED}]✗  export MISTRAL_API_KEY=...[/]"
        )
        self.console.print(Align.center(Text.from_markup(
            f"[{DIM}]model[/] [bold {CYAN}]{self.config.model}[/]   "
            f"[{DIM}]output[/] [{WHITE}]{self.config.output_dir}[/]   {key_line}"
        )))
        self.console.print()

    def status(self, m): self.console.print(f"  [{BLUE}]◉[/]  [{WHITE}]{m}[/]")
    def ok(self, m):     self.console.print(f"  [{GREEN}]✔[/]  [{WHITE}]{m}[/]")
    def warn(self, m):   self.console.print(f"  [{YELLOW}]⚠[/]  [{WHITE}]{m}[/]")
    def err(self, m):    self.console.print(f"  [{RED}]✖[/]  [{RED}]{m}[/]")
    def info(self, m):   self.console.print(f"  [{CYAN}]⬡[/]  [{DIM}]{m}[/]")

    def preview(self, code: str, lexer: str):
        self.console.print(f"\n  [{BLUE}]› Preview:[/]\n")
        # unknown lexers render as plain text
        self.console.print(Syntax(code, lexer, theme=self.config.syntax_theme,
                                  line_numbers=True, padding=(0, 2)))
        self.console.print()

    def show_history(self, entries: Sequence[HistoryEntry]):
        self.console.print(f"\n  [bold {WHITE}]› History:[/]\n")
        t = Table(box=box.SIMPLE_HEAD, border_style=DIM, header_style=f"bold {CYAN}",
                  show_edge=False, padding=(0, 2))
        t.add_column("#", style=DIM, justify="right")
        t.add_column("LANGUAGE", style=f"bold {CYAN}")
        t.add_column("PROMPT", style=YELLOW)
        t.add_column("FILE", style=WHITE)
        t.add_column("WHEN", style=DIM)
        for i, e in enumerate(entries, 1):
            t.add_row(str(i), e.language, e.prompt, e.file_path, e.timestamp)
        self.console.print(t)

    # ── Input ─────────────────────────────────────────────────────────────────

    def select(self, options: Sequence[str], title: str) -> int:
        """Numbered menu. Returns the chosen index, or -1 when cancelled."""
        self.console.print()
        for i, label in enumerate(options, 1):
            self.console.print(f"  [bold {CYAN}][{i}][/] [{WHITE}]{label}[/]")
        self.console.print(f"  [{DIM}][0] CANCEL[/]")
        self.console.print()
        question = HTML(f'<ansigray>{title} [1...{len(options)} / 0]: </ansigray>')
        while True:
            try:
                raw = self._prompt.prompt(question, key_bindings=_escape_bindings("0")).strip()
            except (EOFError, KeyboardInterrupt):
                return -1
            if raw.isdigit():
                n = int(raw)
                if n == 0: return -1
                if 1 <= n <= len(options): return n - 1
            self.console.print(f"  [{DIM}]Type a number between 0 and {len(options)}[/]")

    def ask(self, message: str, secret: bool = False) -> str:
        try:
            return self._prompt.prompt(HTML(f"<ansigreen>{_html(message)}</ansigreen>"),
                                       is_password=secret)
        except (EOFError, KeyboardInterrupt):
            return ""

    def confirm(self, message: str) -> bool:
        question = HTML(f"<ansiyellow>{_html(message)}</ansiyellow> <ansigray>[y/n]: </ansigray>")
        while True:
            try:
                raw = self._prompt.prompt(question).strip().lower()
            except (EOFError, KeyboardInterrupt):
                return False
            if raw in ("y", "yes"): return True
            if raw in ("n", "no"):  return False
            self.console.print(f"  [{DIM}]y=yes  n=no[/]")

    def pause(self, message: str = "Press Enter to return..."):
        try:
            self._prompt.prompt(HTML(f"\n<ansigray>{_html(message)}</ansigray>"))
        except (EOFError, KeyboardInterrupt):
            pass


def _html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def goodbye():
    console.print()
    console.print(Align.center(Panel(
        f"[bold {GOLD}]CHARISMA OFFLINE[/]\n[{DIM}]see you next time[/]",
        border_style=DIM, box=box.DOUBLE_EDGE,
        padding=(0, 6), width=min(36, W() - 4),
    )))
    console.print()


# ── Entry point ────────────────────────────────────────────────────────────────

@click.command(context_settings={"help_option_names": ["--help"]})
@click.option("--version", is_flag=True, help="Show version.")
def main(version):
    """CHARISMA — interactive AI coding agent.

    \b
    Everything happens in the menu:
      New Code            prompt → generate → preview → save → format → copy
      View History        last generations
      Create GitHub Gist  publish any file
    """
    if version:
        console.print(gradient(f"CHARISMA v{VERSION}")); return

    try:
        config = load_config()
    except ValueError as exc:
        console.print(f"  [{RED}]✖[/]  Invalid configuration: {exc}")
        sys.exit(2)

    setup_logging(config)
    config.ensure_output_dir()
    log.info("starting charisma %s (model=%s, output=%s)", VERSION, config.model, config.output_dir)

    session = Session(config, TerminalUI(config))
    try:
        session.run()
    except KeyboardInterrupt:
        log.info("interrupted")
    goodbye()


if __name__ == "__main__":
    main()
