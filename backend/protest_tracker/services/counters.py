"""
Single-statement counter updates.

Likes and followers are public, unauthenticated toggles with no per-caller
bookkeeping: every call moves the counter by exactly one. The floor at zero is
evaluated inside the UPDATE itself, so concurrent toggles never need a
read-modify-write round trip and never drive a counter negative.
"""

from sqlalchemy import case


def step_for(increase: bool) -> int:
    return 1 if increase else -1


def floored_add(column, delta: int):
    """SQL expression for GREATEST(0, column + delta), portable across backends."""
    new_value = column + delta
    return case((new_value < 0, 0), else_=new_value)
