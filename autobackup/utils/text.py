"""
AutoBackup - Text Utilities
===========================

Shared formatting helpers for log output.

Author: حَـــــنَّـــــا
"""

# Size divisors
KB_DIVISOR = 1024
MB_DIVISOR = 1024 * 1024
GB_DIVISOR = 1024 * 1024 * 1024


def format_size(size_bytes: int) -> str:
    """Format file size to appropriate unit (KB, MB, GB)."""
    if size_bytes >= GB_DIVISOR:
        return f"{size_bytes / GB_DIVISOR:.2f} GB"
    elif size_bytes >= MB_DIVISOR:
        return f"{size_bytes / MB_DIVISOR:.1f} MB"
    else:
        return f"{size_bytes / KB_DIVISOR:.1f} KB"


def truncate(text: str, limit: int = 100) -> str:
    """Cut text to at most `limit` characters for log output."""
    return text if len(text) <= limit else text[: limit - 3] + "..."
