"""Tests for radar chart geometry (pure functions, no Kivy)."""

import math

import pytest

from skillradar.core.models import CompetencyLevel
from skillradar.gui.widgets.radar_geometry import (
    GRID_LEVELS,
    LEGEND_TEXT,
    PLACEHOLDER_TEXT,
    Dot,
    Polyline,
    RadarLayout,
    TextLabel,
    axis_angle,
    build_mesh_data,
    build_radar_scene,
    calculate_vertex,
    format_level,
    get_data_polygon,
    get_label_position,
    get_ring_points,
    hit_test,
    hit_test_competency,
    label_text,
    to_logical,
)


def make_levels(*values):
    return [CompetencyLevel(competency_id=i + 1, name=f"C{i + 1}", level=v) for i, v in enumerate(values)]


class TestLayout:
    def test_radius_uses_shorter_side(self):
        layout = RadarLayout.for_size(400, 300, 4)
        assert layout.center == (200.0, 150.0)
        assert layout.radius == pytest.approx(300 * 0.38)
        assert layout.label_radius == pytest.approx(300 * 0.38 + 28)
        assert layout.max_hit_distance == pytest.approx(300 * 0.38 + 68)

    @pytest.mark.parametrize("w,h", [(0, 300), (300, 0), (0, 0)])
    def test_zero_area_not_drawable(self, w, h):
        assert not RadarLayout.for_size(w, h, 3).is_drawable

    def test_axis_zero_points_up(self):
        assert axis_angle(0, 5) == pytest.approx(-math.pi / 2)

    def test_axes_evenly_spaced(self):
        n = 6
        gaps = [axis_angle(i + 1, n) - axis_angle(i, n) for i in range(n - 1)]
        assert all(g == pytest.approx(2 * math.pi / n) for g in gaps)


class TestVertices:
    def test_level_ten_sits_on_outer_ring(self):
        layout = RadarLayout.for_size(400, 400, 4)
        x, y = calculate_vertex(layout, 0, 10)
        assert x == pytest.approx(200)
        assert y == pytest.approx(200 - 152)

    def test_second_of_four_axes_points_right(self):
        layout = RadarLayout.for_size(400, 400, 4)
        x, y = calculate_vertex(layout, 1, 5)
        assert x == pytest.approx(200 + 76)
        assert y == pytest.approx(200)

    def test_level_zero_is_center(self):
        layout = RadarLayout.for_size(400, 400, 3)
        assert calculate_vertex(layout, 2, 0) == pytest.approx((200, 200))

    def test_levels_are_clamped(self):
        layout = RadarLayout.for_size(400, 400, 3)
        assert calculate_vertex(layout, 1, 14) == pytest.approx(calculate_vertex(layout, 1, 10))
        assert calculate_vertex(layout, 1, -3) == pytest.approx(calculate_vertex(layout, 1, 0))

    def test_ring_is_closed(self):
        layout = RadarLayout.for_size(400, 400, 5)
        points = get_ring_points(layout, 6)
        assert len(points) == 2 * 5 + 2
        assert points[:2] == points[-2:]

    def test_data_polygon_follows_axis_order(self):
        levels = make_levels(10, 5, 0)
        layout = RadarLayout.for_size(400, 400, len(levels))
        points = get_data_polygon(layout, levels)
        assert (points[0], points[1]) == pytest.approx(calculate_vertex(layout, 0, 10))
        assert (points[2], points[3]) == pytest.approx(calculate_vertex(layout, 1, 5))
        assert (points[4], points[5]) == pytest.approx((200, 200))
        assert points[:2] == points[-2:]

    def test_label_position_is_offset_from_outer_ring(self):
        layout = RadarLayout.for_size(400, 400, 1)
        assert get_label_position(layout, 0) == pytest.approx((200, 200 - 152 - 28))


class TestMeshData:
    def test_triangle_fan(self):
        polygon = [0.0, 0.0, 10.0, 0.0, 10.0, 10.0, 0.0, 0.0]
        vertices, indices = build_mesh_data(polygon, (5.0, 5.0))
        assert vertices[:4] == [5.0, 5.0, 0.0, 0.0]
        assert len(vertices) == 4 * 4
        assert indices == [0, 1, 2, 0, 2, 3, 0, 3, 1]

    def test_empty_polygon(self):
        vertices, indices = build_mesh_data([], (0.0, 0.0))
        assert vertices == [0.0, 0.0, 0.0, 0.0]
        assert indices == []


class TestLabels:
    @pytest.mark.parametrize("level,expected", [(6.0, "6"), (0.0, "0"), (5.8, "5.8"), (10.0, "10")])
    def test_format_level(self, level, expected):
        assert format_level(level) == expected

    def test_label_text(self):
        entry = CompetencyLevel(competency_id=1, name="Reception", level=6.0)
        assert label_text(entry) == "Reception — 6"


class TestHitTest:
    def test_label_point_hits_single_competency(self):
        """One competency on a 400x400 surface; its label point hits it."""
        levels = make_levels(6.0)
        assert hit_test_competency(levels, 400, 400, 200, 20) == 1

    def test_center_hits_nothing(self):
        assert hit_test_competency(make_levels(6.0), 400, 400, 200, 200) is None

    def test_inner_dead_zone(self):
        layout = RadarLayout.for_size(400, 400, 3)
        assert hit_test(layout, 200, 200 - 14.9) is None
        assert hit_test(layout, 200, 200 - 15) == 0

    def test_outer_limit(self):
        layout = RadarLayout.for_size(400, 400, 3)
        limit = layout.max_hit_distance
        assert hit_test(layout, 200, 200 - limit) == 0
        assert hit_test(layout, 200, 200 - limit - 0.5) is None

    @pytest.mark.parametrize(
        "x,y,expected",
        [
            (270, 130, 0),  # upper right
            (270, 270, 1),  # lower right
            (130, 270, 2),  # lower left
            (130, 130, 3),  # upper left
        ],
    )
    def test_wedges_start_at_their_axis(self, x, y, expected):
        layout = RadarLayout.for_size(400, 400, 4)
        assert hit_test(layout, x, y) == expected

    def test_just_before_an_axis_belongs_to_previous_wedge(self):
        layout = RadarLayout.for_size(400, 400, 4)
        # Axis 1 points right; a point slightly above it is still in wedge 0
        assert hit_test(layout, 300, 199) == 0

    def test_angle_only_ignores_plotted_level(self):
        """A click far outside a low polygon still selects by angle."""
        levels = make_levels(1.0, 1.0, 1.0, 1.0)
        assert hit_test_competency(levels, 400, 400, 270, 270) == 2

    def test_every_point_in_annulus_maps_to_valid_index(self):
        n = 7
        layout = RadarLayout.for_size(500, 400, n)
        cx, cy = layout.center
        for step in range(360):
            a = math.radians(step + 0.5)
            for r in (15.5, 100.0, layout.max_hit_distance - 0.5):
                index = hit_test(layout, cx + r * math.cos(a), cy + r * math.sin(a))
                assert index is not None
                assert 0 <= index < n

    def test_no_axes(self):
        assert hit_test(RadarLayout.for_size(400, 400, 0), 200, 100) is None
        assert hit_test_competency([], 400, 400, 200, 100) is None

    def test_device_pixel_ratio_conversion(self):
        assert to_logical(400, 40, 2.0) == (200, 20)
        assert to_logical(400, 40, 0) == (400, 40)
        levels = make_levels(6.0)
        x, y = to_logical(400, 40, 2.0)
        assert hit_test_competency(levels, 400, 400, x, y) == 1


class TestScene:
    def test_paint_order(self):
        levels = make_levels(8, 6, 4)
        scene = build_radar_scene(levels, 400, 400)
        kinds = [type(p) for p in scene.primitives]
        n = len(levels)
        assert kinds == [Polyline] * len(GRID_LEVELS) + [Polyline] * n + [Polyline] + [Dot] * n + [TextLabel] * n
        assert scene.legend == LEGEND_TEXT
        assert not scene.placeholder
        assert scene.drawable

    def test_polygon_is_filled(self):
        scene = build_radar_scene(make_levels(8, 6, 4), 400, 400)
        polygon = scene.primitives[len(GRID_LEVELS) + 3]
        assert polygon.fill is not None
        assert len(polygon.points) == 2 * 3 + 2

    def test_labels_carry_axis_index(self):
        scene = build_radar_scene(make_levels(8, 6), 400, 400)
        labels = [p for p in scene.primitives if isinstance(p, TextLabel)]
        assert [label.axis_index for label in labels] == [0, 1]
        assert labels[0].text == "C1 — 8"

    def test_no_competencies_shows_placeholder(self):
        scene = build_radar_scene([], 400, 300)
        assert scene.placeholder
        assert scene.legend == ""
        assert len(scene.primitives) == 1
        assert scene.primitives[0].text == PLACEHOLDER_TEXT
        assert scene.primitives[0].pos == (200, 150)

    def test_zero_area_paints_nothing(self):
        scene = build_radar_scene(make_levels(5), 0, 300)
        assert not scene.drawable
        assert scene.primitives == ()

    def test_rebuild_is_identical(self):
        levels = make_levels(8, 6, 4, 2)
        assert build_radar_scene(levels, 640, 480) == build_radar_scene(levels, 640, 480)
