"""
Utility functions for the Fair Rotation engine.

This module contains common utility functions used throughout the engine.
"""


def fmt_mmss(seconds: float) -> str:
    """
    Format seconds as MM:SS string.

    Negative and fractional inputs are clamped/truncated to whole seconds.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(3661)
        '61:01'
    """
    whole = max(0, int(seconds or 0))
    m = whole // 60
    s = whole % 60
    return f"{m:02d}:{s:02d}"
