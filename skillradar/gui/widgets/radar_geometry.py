"""Pure geometry calculations for the radar chart.

NO Kivy imports - all functions are pure and deterministic.

Coordinate System (logical / CSS pixels):
- Origin at top-left, Y increases downward
- Angle 0 = right (3 o'clock), positive angles turn clockwise on screen

Radar Layout:
- center = (w/2, h/2), chart radius = min(w, h) * 0.38
- Axis i at angle 2*pi*i/n - pi/2: axis 0 points straight up, the rest
  follow clockwise
- Level L in [0, 10] sits at (L/10) * radius along its axis

Device pixel ratio never enters the math: callers convert backing-store
pixels with to_logical() first.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from skillradar.core.models import CompetencyLevel

SCALE_MAX = 10.0
RADIUS_FRACTION = 0.38
LABEL_OFFSET = 28.0
GRID_LEVELS = (2, 4, 6, 8, 10)
HIT_MIN_DISTANCE = 15.0
HIT_OUTER_MARGIN = 40.0
DOT_RADIUS = 4.0

RGBA = Tuple[float, float, float, float]


def _rgba(r: int, g: int, b: int, a: float = 1.0) -> RGBA:
    return (r / 255.0, g / 255.0, b / 255.0, a)


GRID_COLOR = _rgba(108, 112, 134, 0.5)
AXIS_COLOR = _rgba(108, 112, 134, 0.6)
FILL_COLOR = _rgba(137, 180, 250, 0.35)
OUTLINE_COLOR = _rgba(137, 180, 250, 0.9)
DOT_COLOR = _rgba(137, 180, 250)
DOT_OUTLINE_COLOR = _rgba(255, 255, 255, 0.6)
LABEL_COLOR = _rgba(205, 214, 244)
PLACEHOLDER_COLOR = _rgba(166, 173, 200)

LABEL_FONT_SIZE = 12
PLACEHOLDER_FONT_SIZE = 14

PLACEHOLDER_TEXT = "Add competencies and score them from tasks to see the chart."
LEGEND_TEXT = "Click a competency to see which tasks scored it · Scale 0–10"


# =============================================================================
# Layout
# =============================================================================


@dataclass(frozen=True)
class RadarLayout:
    """Size-dependent layout of an n-axis radar (logical pixels)."""

    width: float
    height: float
    num_axes: int

    @classmethod
    def for_size(cls, width: float, height: float, num_axes: int) -> "RadarLayout":
        return cls(float(width), float(height), int(num_axes))

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def radius(self) -> float:
        return min(self.width, self.height) * RADIUS_FRACTION

    @property
    def label_radius(self) -> float:
        return self.radius + LABEL_OFFSET

    @property
    def max_hit_distance(self) -> float:
        return self.radius + LABEL_OFFSET + HIT_OUTER_MARGIN

    @property
    def is_drawable(self) -> bool:
        return self.width > 0 and self.height > 0


def axis_angle(axis_index: int, num_axes: int) -> float:
    """Screen angle (radians) of axis ``axis_index``; axis 0 points up."""
    return (2 * math.pi * axis_index) / num_axes - math.pi / 2


def point_at(layout: RadarLayout, axis_index: int, radius: float) -> Tuple[float, float]:
    a = axis_angle(axis_index, layout.num_axes)
    cx, cy = layout.center
    return (cx + radius * math.cos(a), cy + radius * math.sin(a))


def calculate_vertex(layout: RadarLayout, axis_index: int, level: float) -> Tuple[float, float]:
    """(x, y) of ``level`` (clamped into [0, 10]) on axis ``axis_index``."""
    clamped = max(0.0, min(SCALE_MAX, level))
    return point_at(layout, axis_index, (clamped / SCALE_MAX) * layout.radius)


def get_ring_points(layout: RadarLayout, level: float) -> List[float]:
    """Grid ring for ``level`` as a closed flat list [x0, y0, ..., x0, y0]."""
    points: List[float] = []
    for i in range(layout.num_axes):
        points.extend(calculate_vertex(layout, i, level))
    points.extend(points[:2])
    return points


def get_data_polygon(layout: RadarLayout, levels: Sequence[CompetencyLevel]) -> List[float]:
    """Projected levels in axis order, closed back to the first point."""
    points: List[float] = []
    for i, entry in enumerate(levels):
        points.extend(calculate_vertex(layout, i, entry.level))
    points.extend(points[:2])
    return points


def get_label_position(layout: RadarLayout, axis_index: int) -> Tuple[float, float]:
    """Label anchor: radius + 28 px outward along the axis (text centered on it).

    Must use the same angle formula as calculate_vertex.
    """
    return point_at(layout, axis_index, layout.label_radius)


def format_level(level: float) -> str:
    """6.0 -> "6", 5.8 -> "5.8"."""
    return str(int(level)) if float(level).is_integer() else f"{level:.1f}"


def label_text(entry: CompetencyLevel) -> str:
    return f"{entry.name} — {format_level(entry.level)}"


def build_mesh_data(
    polygon: List[float],
    center: Tuple[float, float],
) -> Tuple[List[float], List[int]]:
    """Vertices and indices for a filled polygon as a triangle fan.

    Returns:
        (vertices, indices)
        vertices: [x, y, u, v, ...] with the center first
        indices: [0, 1, 2, 0, 2, 3, ..., 0, n, 1]
    """
    vertices: List[float] = [center[0], center[1], 0.0, 0.0]
    n = (len(polygon) - 2) // 2
    for i in range(n):
        vertices.extend([polygon[i * 2], polygon[i * 2 + 1], 0.0, 0.0])

    indices: List[int] = []
    for i in range(1, n):
        indices.extend([0, i, i + 1])
    if n > 0:
        indices.extend([0, n, 1])
    return (vertices, indices)


# =============================================================================
# Hit-testing
# =============================================================================


def to_logical(px: float, py: float, device_pixel_ratio: float) -> Tuple[float, float]:
    """Backing-store pixels -> logical pixels."""
    dpr = device_pixel_ratio if device_pixel_ratio and device_pixel_ratio > 0 else 1.0
    return (px / dpr, py / dpr)


def hit_test(layout: RadarLayout, x: float, y: float) -> Optional[int]:
    """Axis index owning the point, or None.

    Angle-only: every axis owns the full 2*pi/n wedge starting at its own
    angle, whatever the plotted radius. Points closer than 15 px to the
    center, or farther than radius + 28 + 40, hit nothing.
    """
    n = layout.num_axes
    if n <= 0:
        return None
    cx, cy = layout.center
    dx = x - cx
    dy = y - cy
    distance = math.hypot(dx, dy)
    if distance < HIT_MIN_DISTANCE or distance > layout.max_hit_distance:
        return None
    angle = (math.atan2(dy, dx) + math.pi / 2) % (2 * math.pi)
    return int(math.floor(angle / (2 * math.pi / n))) % n


def hit_test_competency(
    levels: Sequence[CompetencyLevel],
    width: float,
    height: float,
    x: float,
    y: float,
) -> Optional[int]:
    """Competency id under a click point, or None."""
    index = hit_test(RadarLayout.for_size(width, height, len(levels)), x, y)
    if index is None:
        return None
    return levels[index].competency_id


# =============================================================================
# Scene (toolkit-neutral draw list)
# =============================================================================


@dataclass(frozen=True)
class Polyline:
    points: Tuple[float, ...]
    color: RGBA
    width: float = 1.0
    fill: Optional[RGBA] = None


@dataclass(frozen=True)
class Dot:
    center: Tuple[float, float]
    radius: float
    fill: RGBA
    outline: RGBA


@dataclass(frozen=True)
class TextLabel:
    text: str
    pos: Tuple[float, float]
    color: RGBA
    font_size: int
    axis_index: Optional[int] = None


Primitive = Union[Polyline, Dot, TextLabel]


@dataclass(frozen=True)
class RadarScene:
    """Everything needed to paint one frame, in paint order.

    ``drawable`` is False for a zero-area surface (paint nothing).
    ``placeholder`` is True when there are no competencies; the legend is
    then empty.
    """

    width: float
    height: float
    primitives: Tuple[Primitive, ...] = ()
    legend: str = ""
    placeholder: bool = False
    drawable: bool = True


def build_radar_scene(levels: Sequence[CompetencyLevel], width: float, height: float) -> RadarScene:
    """Build the draw list for ``levels`` on a ``width`` x ``height`` surface.

    Pure: the same inputs always produce an equal scene, so repeated
    resizes without data changes repaint identically.
    """
    layout = RadarLayout.for_size(width, height, len(levels))
    if not layout.is_drawable:
        return RadarScene(layout.width, layout.height, drawable=False)

    if not levels:
        text = TextLabel(PLACEHOLDER_TEXT, layout.center, PLACEHOLDER_COLOR, PLACEHOLDER_FONT_SIZE)
        return RadarScene(layout.width, layout.height, (text,), legend="", placeholder=True)

    primitives: List[Primitive] = []

    # 1. Grid rings (levels 2, 4, 6, 8, 10)
    for ring in GRID_LEVELS:
        primitives.append(Polyline(tuple(get_ring_points(layout, ring)), GRID_COLOR, 1.0))

    # 2. Axis spokes
    cx, cy = layout.center
    for i in range(layout.num_axes):
        end = point_at(layout, i, layout.radius)
        primitives.append(Polyline((cx, cy) + end, AXIS_COLOR, 1.0))

    # 3. Level polygon (fill + outline)
    polygon = get_data_polygon(layout, levels)
    primitives.append(Polyline(tuple(polygon), OUTLINE_COLOR, 2.0, fill=FILL_COLOR))

    # 4. Vertex dots
    for i, entry in enumerate(levels):
        primitives.append(Dot(calculate_vertex(layout, i, entry.level), DOT_RADIUS, DOT_COLOR, DOT_OUTLINE_COLOR))

    # 5. Labels
    for i, entry in enumerate(levels):
        primitives.append(
            TextLabel(label_text(entry), get_label_position(layout, i), LABEL_COLOR, LABEL_FONT_SIZE, axis_index=i)
        )

    return RadarScene(layout.width, layout.height, tuple(primitives), legend=LEGEND_TEXT)
