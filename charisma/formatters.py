"""Supported languages and the formatter each one is cleaned up with."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class FormatterSpec:
    language: str
    command: Tuple[str, ...]
    extension: str
    lexer: str

    @property
    def binary(self) -> str:
        return self.command[0]


FORMATTERS: Dict[str, FormatterSpec] = {
    spec.language: spec for spec in (
        FormatterSpec("C",          ("clang-format", "-i"),    ".c",    "c"),
        FormatterSpec("C++",        ("clang-format", "-i"),    ".cpp",  "cpp"),
        FormatterSpec("Python",     ("black",),                ".py",   "python"),
        FormatterSpec("JavaScript", ("prettier", "--write"),   ".js",   "javascript"),
        FormatterSpec("Java",       ("clang-format", "-i"),    ".java", "java"),
        FormatterSpec("Go",         ("gofmt", "-w"),           ".go",   "go"),
        FormatterSpec("Ruby",       ("rufo",),                 ".rb",   "ruby"),
    )
}

LANGUAGES: List[str] = list(FORMATTERS)
DEFAULT_LANGUAGE = "JavaScript"


def get_formatter(language: str) -> FormatterSpec:
    try:
        return FORMATTERS[language]
    except KeyError:
        raise ValueError(
            f"Unsupported language '{language}'. Choose one of: {', '.join(LANGUAGES)}"
        ) from None
