"""
Bill Tracker - Source Package

A personal bill tracker: import bills from loosely formatted CSV files,
enter recurring bills by hand, and see what is paid and what is due.

DESIGN PRINCIPLES:
1. A bad line is skipped, never fatal; only "nothing imported" fails
2. No half-filled bills: a row is imported whole or not at all
3. Dates are calendar dates, never timestamps
4. Every step is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Bill Tracker Team"
