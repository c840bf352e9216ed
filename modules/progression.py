# D&D 5e experience progression.
# NOTE: Keep pure data and functions only (no side effects) so imports are cheap.
from __future__ import annotations

__all__ = [
    "XP_TABLE",
    "MAX_LEVEL",
    "level_for",
    "next_threshold",
    "progress_percent",
    "progress_bar",
]

# XP needed to reach each level; index 0 is level 1.
XP_TABLE = [
    0, 300, 900, 2700, 6500, 14000, 23000, 34000, 48000, 64000,
    85000, 100000, 120000, 140000, 165000, 190000, 225000, 265000, 305000, 355000,
]

MAX_LEVEL = len(XP_TABLE)


def _clamp_level(level: int) -> int:
    return max(1, min(int(level), MAX_LEVEL))


def level_for(exp: int) -> int:
    """Highest level whose threshold ``exp`` has reached (1 at minimum)."""
    for i in range(len(XP_TABLE) - 1, -1, -1):
        if exp >= XP_TABLE[i]:
            return i + 1
    return 1


def next_threshold(level: int) -> int:
    """XP required for ``level + 1``.

    Capped characters get their own threshold back, which makes progress
    computations saturate instead of dividing by a level that does not exist.
    """
    lvl = _clamp_level(level)
    if lvl >= MAX_LEVEL:
        return XP_TABLE[MAX_LEVEL - 1]
    return XP_TABLE[lvl]


def progress_percent(exp: int, level: int) -> float:
    lvl = _clamp_level(level)
    prev = XP_TABLE[lvl - 1]
    span = next_threshold(lvl) - prev
    if span <= 0:
        return 100.0
    pct = (exp - prev) / span * 100
    return max(0.0, min(100.0, pct))


def progress_bar(percent: float, width: int = 10) -> str:
    filled = int(round(max(0.0, min(100.0, percent)) / 100 * width))
    return "▰" * filled + "▱" * (width - filled)
