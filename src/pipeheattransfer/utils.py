from __future__ import annotations

from typing import Sequence

ABSOLUTE_ZERO_CELSIUS = -273.15


def lininterp_scalar(u: float, xp: Sequence[float], fp: Sequence[float]) -> float:
    """
    Lightweight linear interpolation for a single scalar.

    Args:
        u:  Query value.
        xp: Monotone x breakpoints (e.g., (1.85, 6.85, 11.85, ...)).
        fp: Corresponding y values.

    Returns:
        Interpolated value at u, clamped to the end segments.
    """
    if u <= xp[0]:
        return fp[0]
    for i in range(len(xp) - 1):
        x0, x1 = xp[i], xp[i + 1]
        if u <= x1:
            t = (u - x0) / (x1 - x0)
            return (1.0 - t) * fp[i] + t * fp[i + 1]
    return fp[-1]


def in_table_range(u: float, xp: Sequence[float]) -> bool:
    """Return True when u lies within the tabulated breakpoints."""
    return xp[0] <= u <= xp[-1]
