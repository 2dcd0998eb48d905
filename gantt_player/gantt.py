"""
Gantt chart rendering.

The geometry is computed by :func:`layout_bars`, a pure function, and then
painted by :class:`GanttRenderer` onto anything exposing the
``tkinter.Canvas`` drawing calls it needs (``configure``, ``delete``,
``create_rectangle``, ``create_text``).
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from .colors import ColorTable
from .config import (
    BAR_HEIGHT,
    BAR_TOP,
    CHART_HEIGHT,
    LABEL_COLOR_LIGHT,
    LABEL_FONT,
    LABEL_INSET,
    LABEL_Y,
    MIN_CHART_WIDTH,
    PIXELS_PER_UNIT,
)
from .timeline import Segment, Timeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarGeometry:
    """Screen placement of one segment's bar and label."""

    segment: Segment
    x: float
    width: float
    top: float
    bottom: float
    color: str
    label: str
    label_x: float
    label_y: float


def chart_width(
    timeline: Timeline,
    min_width: int = MIN_CHART_WIDTH,
    pixels_per_unit: float = PIXELS_PER_UNIT,
) -> float:
    """Canvas width: proportional to the span, but never below ``min_width``."""
    return max(min_width, timeline.span * pixels_per_unit)


def layout_bars(
    timeline: Timeline,
    colors: Optional[ColorTable] = None,
    min_width: int = MIN_CHART_WIDTH,
    pixels_per_unit: float = PIXELS_PER_UNIT,
) -> List[BarGeometry]:
    """
    Compute bar placement for every segment of ``timeline``.

    Args:
        timeline:        Timeline to lay out (may be empty).
        colors:          Color table for this render pass; a fresh one is
                         used when omitted.
        min_width:       Minimum chart width in pixels.
        pixels_per_unit: Horizontal scale for long timelines.

    Returns:
        One :class:`BarGeometry` per segment, in timeline order.
    """
    if not timeline:
        return []
    if colors is None:
        colors = ColorTable()

    width = chart_width(timeline, min_width, pixels_per_unit)
    span = timeline.span
    origin = timeline.global_start

    bars: List[BarGeometry] = []
    for seg in timeline:
        x = (seg.start - origin) / span * width
        w = (seg.end - seg.start) / span * width
        bars.append(
            BarGeometry(
                segment=seg,
                x=x,
                width=w,
                top=BAR_TOP,
                bottom=BAR_TOP + BAR_HEIGHT,
                color=colors.color(seg.pid),
                label=seg.label,
                label_x=x + LABEL_INSET,
                label_y=LABEL_Y,
            )
        )
    return bars


class GanttRenderer:
    """
    Draws a :class:`Timeline` on a Tk canvas.

    The renderer is the only component that touches the canvas. Drawing is
    idempotent: every call clears the canvas and starts a new color table.
    """

    def __init__(
        self,
        canvas: Any,
        min_width: int = MIN_CHART_WIDTH,
        pixels_per_unit: float = PIXELS_PER_UNIT,
        height: int = CHART_HEIGHT,
        label_color: str = LABEL_COLOR_LIGHT,
    ) -> None:
        self.canvas = canvas
        self.min_width = min_width
        self.pixels_per_unit = pixels_per_unit
        self.height = height
        self.label_color = label_color
        self.colors = ColorTable()
        self._last: Optional[Timeline] = None

    def clear(self) -> None:
        """Blank the canvas and forget the last drawn timeline."""
        self._last = None
        self.canvas.delete("all")

    def draw(self, timeline: Optional[Timeline]) -> None:
        """Redraw the whole chart for ``timeline`` (clears it when empty)."""
        if not timeline:
            self.clear()
            return

        self._last = timeline
        self.colors.reset()
        bars = layout_bars(timeline, self.colors, self.min_width, self.pixels_per_unit)
        width = chart_width(timeline, self.min_width, self.pixels_per_unit)

        self.canvas.configure(width=width, height=self.height, scrollregion=(0, 0, width, self.height))
        self.canvas.delete("all")

        for bar in bars:
            self.canvas.create_rectangle(
                bar.x,
                bar.top,
                bar.x + bar.width,
                bar.bottom,
                fill=bar.color,
                outline="",
                tags=("bar",),
            )
            self.canvas.create_text(
                bar.label_x,
                bar.label_y,
                text=bar.label,
                anchor="w",
                fill=self.label_color,
                font=LABEL_FONT,
                tags=("label",),
            )

        logger.debug("Drew %d bars on a %.0fpx chart", len(bars), width)

    def redraw(self) -> None:
        """Repaint the last timeline, e.g. after the label color changed."""
        self.draw(self._last)

    def set_label_color(self, color: str) -> None:
        self.label_color = color
        if self._last:
            self.redraw()
