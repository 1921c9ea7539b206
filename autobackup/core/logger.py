"""
AutoBackup - Logger
===================

Tree-style logging to console and log files.

Author: حَـــــنَّـــــا
"""

from datetime import datetime
from typing import List, Optional, Tuple

from autobackup.core.config import LOGS_DIR, get_timezone


TIMEZONE = get_timezone()

# ANSI colors
RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
CYAN = "\033[96m"
GRAY = "\033[90m"

TreeItems = List[Tuple[str, str]]


class Logger:
    """Tree-style logger with colors."""

    def __init__(self):
        self.log_file = LOGS_DIR / "autobackup.log"
        self.error_file = LOGS_DIR / "autobackup_error.log"

    def _timestamp(self) -> str:
        """Get formatted timestamp."""
        now = datetime.now(TIMEZONE)
        return now.strftime("%I:%M:%S %p %Z")

    def _write_file(self, message: str, error: bool = False) -> None:
        """Write to the main log file, and to the error file when asked."""
        targets = [self.log_file, self.error_file] if error else [self.log_file]
        for target in targets:
            try:
                with open(target, "a", encoding="utf-8") as f:
                    f.write(message + "\n")
            except OSError:
                pass

    def _format_tree(self, items: Optional[TreeItems]) -> str:
        """Format items as a tree."""
        if not items:
            return ""
        lines = []
        for i, (key, value) in enumerate(items):
            prefix = "└─" if i == len(items) - 1 else "├─"
            lines.append(f"  {prefix} {key}: {value}")
        return "\n".join(lines)

    def _emit(
        self,
        message: str,
        items: Optional[TreeItems],
        emoji: str,
        color: str,
        error: bool = False,
    ) -> None:
        timestamp = self._timestamp()
        tree_str = self._format_tree(items)

        # Console output with colors
        console_msg = f"{GRAY}[{timestamp}]{RESET} {color}{emoji}{RESET} {BOLD}{message}{RESET}"
        if tree_str:
            console_msg += f"\n{CYAN}{tree_str}{RESET}"
        print(console_msg)

        # File output without colors
        file_msg = f"[{timestamp}] {emoji} {message}"
        if tree_str:
            file_msg += f"\n{tree_str}"
        self._write_file(file_msg, error=error)

    def tree(self, title: str, items: TreeItems, emoji: str = "ℹ️") -> None:
        """Log with tree format."""
        self._emit(title, items, emoji, RESET)

    def info(self, message: str, items: Optional[TreeItems] = None) -> None:
        """Log info message."""
        self._emit(message, items, "ℹ️", BLUE)

    def success(self, message: str, items: Optional[TreeItems] = None) -> None:
        """Log success message."""
        self._emit(message, items, "✅", GREEN)

    def warning(self, message: str, items: Optional[TreeItems] = None) -> None:
        """Log warning message."""
        self._emit(message, items, "⚠️", YELLOW, error=True)

    def error(self, message: str, items: Optional[TreeItems] = None) -> None:
        """Log error message."""
        self._emit(message, items, "❌", RED, error=True)


logger = Logger()
log = logger
