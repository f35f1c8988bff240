"""Shared fixtures: an isolated config, a scripted UI and a fake Mistral client."""

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace
from typing import List, Sequence

import pytest

from charisma.config import CharismaConfig
from charisma.core import CodeGenerator
from charisma.history import HistoryStore


@pytest.fixture(autouse=True)
def reset_charisma_logger():
    base = logging.getLogger("charisma")
    saved = list(base.handlers)
    yield
    for h in base.handlers:
        if h not in saved:
            h.close()
    base.handlers[:] = saved


@pytest.fixture
def config(tmp_path: Path) -> CharismaConfig:
    out = tmp_path / "generated"
    out.mkdir()
    return CharismaConfig(
        api_key="test-key",
        output_dir=out,
        history_path=tmp_path / "charisma_history.json",
    )


@pytest.fixture
def store(config) -> HistoryStore:
    return HistoryStore(config.history_path)


class FakeChat:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls: List[dict] = []

    def complete(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, BaseException):
            raise reply
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply),
                                     finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=34),
        )


class FakeMistral:
    """Stands in for mistralai.Mistral; replies are consumed in order."""

    def __init__(self, *replies):
        self.chat = FakeChat(replies)


@pytest.fixture
def make_generator(config):
    def _make(*replies) -> CodeGenerator:
        return CodeGenerator(config, client=FakeMistral(*replies))
    return _make


class ScriptedUI:
    """Replays canned answers and records everything the session shows."""

    def __init__(self, selects: Sequence[int] = (), asks: Sequence[str] = (),
                 confirms: Sequence[bool] = ()):
        self.selects = list(selects)
        self.asks = list(asks)
        self.confirms = list(confirms)
        self.events: List[tuple] = []

    def _log(self, kind, payload=None):
        self.events.append((kind, payload))

    def kinds(self, kind) -> list:
        return [p for k, p in self.events if k == kind]

    def clear(self): self._log("clear")
    def banner(self): self._log("banner")

    def select(self, options, title) -> int:
        self._log("select", title)
        return self.selects.pop(0) if self.selects else -1

    def ask(self, message, secret=False) -> str:
        self._log("ask", message)
        return self.asks.pop(0) if self.asks else ""

    def confirm(self, message) -> bool:
        self._log("confirm", message)
        return self.confirms.pop(0) if self.confirms else False

    def pause(self, message="Press Enter to return..."): self._log("pause", message)
    def status(self, message): self._log("status", message)
    def ok(self, message): self._log("ok", message)
    def info(self, message): self._log("info", message)
    def warn(self, message): self._log("warn", message)
    def err(self, message): self._log("err", message)
    def preview(self, code, lexer): self._log("preview", (code, lexer))
    def show_history(self, entries): self._log("history", list(entries))


@pytest.fixture
def scripted_ui():
    return ScriptedUI
