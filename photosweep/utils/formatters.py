"""
Formatting utilities for PhotoSweep.

Provides human-readable formatting for numbers, percentages and time estimates.
"""

from __future__ import annotations


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1000)
        '1,000'
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_percent(value: float, decimals: int = 1) -> str:
    """
    Format a fraction in [0, 1] as a percentage.

    Examples:
        >>> format_percent(0.87)
        '87.0%'
        >>> format_percent(1.0, decimals=0)
        '100%'
    """
    return f"{value * 100:.{decimals}f}%"


def format_time_estimate(seconds: float) -> str:
    """
    Format seconds into human-readable time estimate.

    Args:
        seconds: Time in seconds

    Returns:
        Formatted time string (e.g., "5s", "2m 30s", "1h 15m")

    Examples:
        >>> format_time_estimate(45)
        '45s'
        >>> format_time_estimate(150)
        '2m 30s'
        >>> format_time_estimate(3665)
        '1h 1m'
    """
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds / 60)}m {int(seconds % 60)}s"
    else:
        hours = int(seconds / 3600)
        minutes = int((seconds % 3600) / 60)
        return f"{hours}h {minutes}m"


__all__ = ['format_number', 'format_percent', 'format_time_estimate']
