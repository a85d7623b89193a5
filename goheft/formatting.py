"""Human-readable sizes for the CLI."""

from __future__ import annotations

import re

SIZE_HUGE = 5 * 1024 * 1024  # 5 MB
SIZE_BIG = 1024 * 1024  # 1 MB
SIZE_SMALL = 25 * 1024  # 25 KB

_UNITS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
    "t": 1024**4,
    "tb": 1024**4,
}

# 750kb, 1.5 MB, 100
_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)


def parse_size(value: str) -> int:
    """Parse a size like ``750kb`` or ``1.5MB`` into bytes.

    Raises:
        ValueError: unrecognized number or unit.
    """
    m = _SIZE_RE.match(value)
    if not m:
        raise ValueError(f"invalid size {value!r}")
    number, unit = m.group(1), m.group(2).lower()
    if unit not in _UNITS:
        raise ValueError(f"unknown size unit {m.group(2)!r}")
    return int(float(number) * _UNITS[unit])


def pretty_size(size: int) -> str:
    """Format *size* bytes as ``512 B``, ``1.5 KB``, ``12 MB``."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024:
            break
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text} {unit}"


def size_color(size: int) -> dict:
    """click.style keyword arguments for a library of *size* bytes."""
    if size > SIZE_HUGE:
        return {"fg": "red"}
    if size > SIZE_BIG:
        return {"fg": "yellow"}
    if size < SIZE_SMALL:
        return {"dim": True}
    return {}
