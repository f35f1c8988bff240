from charisma.tools.file_manager import (
    ToolResult, safe_filename, output_path, file_write, file_read,
)
from charisma.tools.shell import (
    probe_formatter, run_formatter, copy_to_clipboard, clipboard_command,
)
__all__ = [
    "ToolResult", "safe_filename", "output_path", "file_write", "file_read",
    "probe_formatter", "run_formatter", "copy_to_clipboard", "clipboard_command",
]
