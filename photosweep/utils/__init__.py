"""
Utilities package for PhotoSweep.

Provides:
- formatters: Human-readable formatting for numbers, percentages and time
- exporters: Export scan results to files
"""

from __future__ import annotations

from . import formatters
from . import exporters

from .formatters import format_number, format_percent, format_time_estimate
from .exporters import export_results

__all__ = [
    # Submodules
    'formatters',
    'exporters',
    # Formatters
    'format_number',
    'format_percent',
    'format_time_estimate',
    # Exporters
    'export_results',
]
