"""
Charisma — tools/shell.py
External processes: formatter probing/running and the system clipboard.
None of these raise; callers get a ToolResult (or None for a missing formatter).
"""

from __future__ import annotations
import subprocess, sys, time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from charisma.formatters import get_formatter
from charisma.log import get_logger
from charisma.tools.file_manager import ToolResult

log = get_logger("tools.shell")

PROBE_TIMEOUT = 10
FORMAT_TIMEOUT = 60
CLIPBOARD_TIMEOUT = 10


def probe_formatter(language: str, timeout: int = PROBE_TIMEOUT) -> Optional[Tuple[str, ...]]:
    """Return the formatter command for `language` if `<binary> --version` succeeds."""
    command = get_formatter(language).command
    try:
        result = subprocess.run([command[0], "--version"], stdout=subprocess.DEVNULL,
                                stderr=subprocess.DEVNULL, timeout=timeout)
    except (OSError, subprocess.SubprocessError) as exc:
        log.debug("formatter %s unavailable: %s", command[0], exc)
        return None
    if result.returncode != 0:
        log.debug("formatter %s exited %d on --version", command[0], result.returncode)
        return None
    return command


def run_formatter(command: Sequence[str], path: Union[str, Path],
                  timeout: int = FORMAT_TIMEOUT) -> ToolResult:
    full_cmd = list(command) + [str(path)]
    t0 = time.perf_counter()
    try:
        result = subprocess.run(full_cmd, capture_output=True, text=True, timeout=timeout)
        dur = int((time.perf_counter() - t0) * 1000)
        stdout = result.stdout.strip(); stderr = result.stderr.strip()
        combined = "\n".join(filter(None, [stdout, stderr])) or "(no output)"
        ok = result.returncode == 0
        if ok: log.info("formatted %s with %s in %dms", path, command[0], dur)
        else:  log.warning("%s exited %d on %s", command[0], result.returncode, path)
        return ToolResult(ok, output=combined,
            error="" if ok else f"Exit {result.returncode}: {stderr[:400]}",
            metadata={"exit_code": result.returncode, "duration_ms": dur, "command": full_cmd})
    except subprocess.TimeoutExpired:
        log.warning("%s timed out after %ss", command[0], timeout)
        return ToolResult(False, error=f"Timeout after {timeout}s")
    except OSError as exc:
        log.warning("could not start %s: %s", command[0], exc)
        return ToolResult(False, error=str(exc))


def clipboard_command(platform: str = None) -> List[str]:
    platform = platform or sys.platform
    if platform == "darwin": return ["pbcopy"]
    if platform.startswith("win"): return ["clip"]
    return ["xclip", "-selection", "clipboard"]


def copy_to_clipboard(text: str, platform: str = None,
                      timeout: int = CLIPBOARD_TIMEOUT) -> ToolResult:
    """Pipe `text` into the OS clipboard command. The result is advisory only."""
    cmd = clipboard_command(platform)
    try:
        result = subprocess.run(cmd, input=text.encode("utf-8"), capture_output=True,
                                timeout=timeout)
    except (OSError, subprocess.SubprocessError) as exc:
        log.debug("clipboard copy via %s failed: %s", cmd[0], exc)
        return ToolResult(False, error=str(exc), metadata={"command": cmd})
    if result.returncode != 0:
        log.debug("clipboard copy via %s exited %d", cmd[0], result.returncode)
        return ToolResult(False, error=f"Exit {result.returncode}", metadata={"command": cmd})
    return ToolResult(True, output="Copied to clipboard", metadata={"command": cmd})
