"""Competency detail panel: which tasks scored the selected competency."""
from __future__ import annotations

from typing import Any, Optional

from kivy.metrics import dp
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.label import Label
from kivy.uix.scrollview import ScrollView
from kivy.utils import escape_markup

from skillradar.core.models import CompetencyDetail
from skillradar.gui.widgets.radar_geometry import format_level

NO_TASKS_TEXT = "No task has scored this competency yet."


def detail_lines(detail: CompetencyDetail) -> list[str]:
    """Text rows of the panel (Kivy markup)."""
    if not detail.scored_tasks:
        return [NO_TASKS_TEXT]
    lines = []
    for row in detail.scored_tasks:
        line = f"{escape_markup(row.name)}  [b]{row.score} pt[/b]"
        if row.description:
            line += f"\n[size=12sp][color=a6adc8]{escape_markup(row.description)}[/color][/size]"
        lines.append(line)
    return lines


def level_text(detail: CompetencyDetail) -> str:
    return f"Level: {format_level(detail.level)} (average of task scores)"


class CompetencyDetailPanel(BoxLayout):
    """Side panel. ``on_close`` is called when the close button is pressed.

    The panel never touches the store itself; the session hands it a
    CompetencyDetail (or None to hide).
    """

    def __init__(self, on_close: Any = None, **kwargs: Any) -> None:
        kwargs.setdefault("orientation", "vertical")
        kwargs.setdefault("padding", dp(10))
        kwargs.setdefault("spacing", dp(6))
        super().__init__(**kwargs)
        self._on_close = on_close

        self._title = Label(text="", bold=True, size_hint_y=None, height=dp(28), halign="left")
        self._level = Label(text="", size_hint_y=None, height=dp(22), halign="left")
        self._rows = BoxLayout(orientation="vertical", size_hint_y=None, spacing=dp(4))
        self._rows.bind(minimum_height=self._rows.setter("height"))
        scroll = ScrollView()
        scroll.add_widget(self._rows)
        close = Button(text="Close", size_hint_y=None, height=dp(32))
        close.bind(on_release=lambda *_: self._close())

        for w in (self._title, self._level, scroll, close):
            self.add_widget(w)
        self.show(None)

    def _close(self) -> None:
        if self._on_close is not None:
            self._on_close()

    def show(self, detail: Optional[CompetencyDetail]) -> None:
        self._rows.clear_widgets()
        if detail is None:
            self.opacity = 0
            self.disabled = True
            return
        self.opacity = 1
        self.disabled = False
        self._title.text = detail.name
        self._level.text = level_text(detail)
        for line in detail_lines(detail):
            lbl = Label(text=line, markup=True, size_hint_y=None, halign="left", valign="top")
            lbl.bind(width=lambda inst, w: setattr(inst, "text_size", (w, None)))
            lbl.bind(texture_size=lambda inst, ts: setattr(inst, "height", ts[1]))
            self._rows.add_widget(lbl)
