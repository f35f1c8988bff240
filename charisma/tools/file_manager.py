"""
Charisma — tools/file_manager.py
Workspace writer for generated code:
  - safe_filename / output_path derive the target file from the prompt
  - file_write / file_read report through ToolResult instead of raising
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from charisma.errors import CharismaError
from charisma.formatters import get_formatter
from charisma.log import get_logger

log = get_logger("tools.files")

_UNSAFE = re.compile(r"[^a-z0-9]")
# stem is pure ASCII after normalisation; leaves room for the extension under NAME_MAX
MAX_STEM = 200


@dataclass
class ToolResult:
    success: bool
    output: str = ""
    error: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def raise_for_error(self, exc_type: type = CharismaError) -> "ToolResult":
        if not self.success:
            raise exc_type(self.error or "operation failed")
        return self


def safe_filename(prompt: str, extension: str) -> str:
    """Lower-case the prompt and turn every char outside [a-z0-9] into '_'.

    Distinct prompts can map to the same name ("Sort list", "sort-list");
    the later write simply replaces the earlier file. Stems longer than
    MAX_STEM are cut, so prompts sharing that prefix collide as well.
    """
    return f"{_UNSAFE.sub('_', prompt.lower())[:MAX_STEM]}{extension}"


def output_path(output_dir: Union[str, Path], prompt: str, language: str) -> Path:
    return Path(output_dir) / safe_filename(prompt, get_formatter(language).extension)


def file_write(path: Union[str, Path], content: str) -> ToolResult:
    try:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        lines = len(content.splitlines())
        log.info("wrote %s (%d lines)", p, lines)
        return ToolResult(True, output=f"Saved to {p}",
                          metadata={"path": str(p), "lines": lines})
    except OSError as exc:
        log.error("could not write %s: %s", path, exc)
        return ToolResult(False, error=str(exc))


def file_read(path: Union[str, Path]) -> ToolResult:
    try:
        p = Path(path).expanduser()
        if not p.is_file(): return ToolResult(False, error=f"Not found: {path}")
        text = p.read_text(encoding="utf-8")
        return ToolResult(True, output=text, metadata={
            "path": str(p), "total_lines": len(text.splitlines()),
        })
    except UnicodeDecodeError as exc:
        log.warning("refusing to read %s: %s", path, exc)
        return ToolResult(False, error=f"not valid UTF-8 text (byte {exc.start})")
    except OSError as exc:
        return ToolResult(False, error=str(exc))
