"""Byte count formatting."""

from typing import Optional


def format_size(size: Optional[int]) -> str:
    """
    Format a byte count the way ``du -h`` does.

    Args:
        size: Number of bytes, or None if unknown

    Returns:
        Formatted size string, e.g. "4.0K" or "12M"
    """
    if size is None:
        return "unknown"
    value = float(size)
    for unit in ("B", "K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            if unit == "B":
                return f"{int(value)}B"
            return f"{value:.1f}{unit}" if value < 10 else f"{value:.0f}{unit}"
        value /= 1024
