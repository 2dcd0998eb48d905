"""Per-process bar colors for the Gantt chart."""

import colorsys
from typing import Dict

from .config import COLOR_LIGHTNESS, COLOR_SATURATION


def hash_code(text: str) -> int:
    """
    32-bit signed string hash (``h = h * 31 + code``), wrapping on overflow.

    Runs over UTF-16 code units, so characters outside the BMP count as
    their two surrogates, the same as Java's ``String.hashCode``.
    """
    data = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """Convert HSL (degrees, percent, percent) to a Tk ``#rrggbb`` string."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness / 100.0, saturation / 100.0)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


def hue_for(pid: str) -> int:
    return abs(hash_code(pid)) % 360


def color_for(pid: str) -> str:
    """Deterministic color for a pid; depends on nothing but the pid text."""
    return hsl_to_hex(hue_for(pid), COLOR_SATURATION, COLOR_LIGHTNESS)


class ColorTable:
    """Memoized pid -> color lookup, rebuilt for every render pass."""

    def __init__(self) -> None:
        self._colors: Dict[str, str] = {}

    def color(self, pid: str) -> str:
        if pid not in self._colors:
            self._colors[pid] = color_for(pid)
        return self._colors[pid]

    def reset(self) -> None:
        self._colors.clear()
