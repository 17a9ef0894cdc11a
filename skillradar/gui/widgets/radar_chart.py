"""N-axis radar chart Kivy widget.

Paints a RadarScene from radar_geometry and turns touches back into a
competency id. The same widget serves the interactive view and the
read-only shared view.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from kivy.clock import Clock
from kivy.graphics import Color, Ellipse, Line, Mesh
from kivy.metrics import dp
from kivy.properties import BooleanProperty, ListProperty, StringProperty
from kivy.uix.label import Label
from kivy.uix.relativelayout import RelativeLayout

from skillradar.core.models import CompetencyLevel
from skillradar.gui.widgets.radar_geometry import (
    Dot,
    Polyline,
    RadarScene,
    TextLabel,
    build_mesh_data,
    build_radar_scene,
    hit_test_competency,
)

_logger = logging.getLogger("skillradar.gui.widgets.radar_chart")


class RadarChartWidget(RelativeLayout):
    """Radar chart widget.

    Properties:
        levels: list of CompetencyLevel, one per axis, in axis order
        read_only: True in the shared view (passed along with selections)
        legend: legend text of the last painted scene (empty for placeholder)

    Events:
        on_competency_selected(competency_id, read_only)
    """

    levels = ListProperty()
    read_only = BooleanProperty(False)
    legend = StringProperty("")

    __events__ = ("on_competency_selected",)

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.levels = []
        self._labels: List[Label] = []
        self._last_scene: Optional[RadarScene] = None
        self._redraw_trigger = Clock.create_trigger(self._do_redraw, 0)
        for prop in ("size", "levels"):
            self.bind(**{prop: self._schedule_redraw})

    def set_levels(self, levels: Sequence[CompetencyLevel]) -> None:
        self.levels = list(levels)

    def _schedule_redraw(self, *_: Any) -> None:
        self._redraw_trigger()

    def _flip(self, points: Sequence[float]) -> List[float]:
        """Logical (y-down) -> Kivy local (y-up)."""
        out: List[float] = []
        for i in range(0, len(points), 2):
            out.extend([points[i], self.height - points[i + 1]])
        return out

    def _do_redraw(self, *_: Any) -> None:
        self.canvas.before.clear()
        scene = build_radar_scene(self.levels, self.width, self.height)
        if not scene.drawable:
            # Zero-area surface: drop labels left over from the last paint
            self._sync_label_count(0)
            self.legend = ""
            self._last_scene = None
            return

        text_labels = [p for p in scene.primitives if isinstance(p, TextLabel)]
        self._sync_label_count(len(text_labels))
        center = (self.width / 2, self.height / 2)

        with self.canvas.before:
            for prim in scene.primitives:
                if isinstance(prim, Polyline):
                    flipped = self._flip(prim.points)
                    if prim.fill is not None:
                        vertices, indices = build_mesh_data(flipped, center)
                        Color(*prim.fill)
                        Mesh(vertices=vertices, indices=indices, mode="triangles")
                    Color(*prim.color)
                    Line(points=flipped, width=prim.width)
                elif isinstance(prim, Dot):
                    x, y = prim.center
                    y = self.height - y
                    r = prim.radius
                    Color(*prim.fill)
                    Ellipse(pos=(x - r, y - r), size=(2 * r, 2 * r))
                    Color(*prim.outline)
                    Line(circle=(x, y, r), width=1)

        for lbl, prim in zip(self._labels, text_labels):
            lbl.text = prim.text
            lbl.color = prim.color
            lbl.font_size = dp(prim.font_size)
            lbl.texture_update()
            lbl.size = lbl.texture_size
            lbl.center = (prim.pos[0], self.height - prim.pos[1])

        self.legend = scene.legend
        self._last_scene = scene

    def _sync_label_count(self, count: int) -> None:
        while len(self._labels) > count:
            self.remove_widget(self._labels.pop())
        while len(self._labels) < count:
            lbl = Label(text="", halign="center", valign="middle", size_hint=(None, None))
            self._labels.append(lbl)
            self.add_widget(lbl)

    def on_touch_down(self, touch: Any) -> bool:
        if not self.collide_point(*touch.pos):
            return super().on_touch_down(touch)
        local_x = touch.x - self.x
        local_y = self.height - (touch.y - self.y)
        competency_id = hit_test_competency(self.levels, self.width, self.height, local_x, local_y)
        if competency_id is None:
            return super().on_touch_down(touch)
        _logger.debug("Radar hit competency %s at (%.1f, %.1f)", competency_id, local_x, local_y)
        self.dispatch("on_competency_selected", competency_id, self.read_only)
        return True

    def on_competency_selected(self, competency_id: int, read_only: bool) -> None:
        pass
