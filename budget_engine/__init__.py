"""
Household Budget Engine

The calculation core of a household budgeting app: normalizes income
and expenses across recurrence frequencies, totals them, and splits
shared household costs between people.

DESIGN PRINCIPLES:
1. Calculations are pure functions of their inputs
2. Normalize first, then sum
3. Unknown frequencies fail loudly
4. Half-edited data degrades to documented fallbacks, never crashes
5. Every fallback is auditable
"""

__version__ = "1.0.0"
__author__ = "Household Budget Team"
