"""
MicroSpend - Source Package

A small personal expense logger: record everyday cash and card spends,
see today's total, browse history grouped by day and export to CSV.

DESIGN PRINCIPLES:
1. Local-time everywhere (no midnight UTC surprises)
2. Persist first, then update what the user sees
3. Pure functions for grouping, formatting and CSV
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "MicroSpend Team"
