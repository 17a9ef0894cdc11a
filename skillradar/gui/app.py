"""Kivy application shell.

Wires a Session to the radar chart, the detail panel and (for interactive
sessions) the editor panel. All redraws are driven by Session events.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from kivy.app import App
from kivy.core.clipboard import Clipboard
from kivy.metrics import dp
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.label import Label

from skillradar.common.settings import AppSettings
from skillradar.core.export import export_standalone
from skillradar.core.session import Session
from skillradar.core.state import Event, EventType
from skillradar.gui.features.competency_detail import CompetencyDetailPanel
from skillradar.gui.features.editor_panel import EditorPanel
from skillradar.gui.widgets.radar_chart import RadarChartWidget

_logger = logging.getLogger("skillradar.gui.app")

EXPORT_FILENAME = "skill-overview.html"


class SkillRadarApp(App):
    def __init__(
        self, session: Session, settings: AppSettings, data_file: Optional[str] = None, **kwargs: Any
    ) -> None:
        super().__init__(**kwargs)
        self.session = session
        self.settings = settings
        # Export lands next to the data file actually in use (--data wins)
        self.data_file = data_file or settings.data_file
        self.title = "Skill radar (shared, read-only)" if session.read_only else "Skill radar"
        self._chart: Optional[RadarChartWidget] = None
        self._detail: Optional[CompetencyDetailPanel] = None
        self._editor: Optional[EditorPanel] = None
        self._status: Optional[Label] = None

    def build(self) -> BoxLayout:
        root = BoxLayout(orientation="horizontal")

        if not self.session.read_only:
            self._editor = EditorPanel(self.session, size_hint_x=0.32)
            root.add_widget(self._editor)

        center = BoxLayout(orientation="vertical")
        self._chart = RadarChartWidget(read_only=self.session.read_only)
        self._chart.bind(on_competency_selected=self._on_competency_selected)
        legend = Label(text="", size_hint_y=None, height=dp(24), color=(0.65, 0.68, 0.78, 1))
        self._chart.bind(legend=lambda _w, text: setattr(legend, "text", text))
        center.add_widget(self._chart)
        center.add_widget(legend)
        center.add_widget(self._build_toolbar())
        root.add_widget(center)

        self._detail = CompetencyDetailPanel(on_close=self.session.clear_selection, size_hint_x=0.28)
        root.add_widget(self._detail)

        notifier = self.session.notifier
        notifier.subscribe(EventType.DATA_CHANGED, self._on_data_changed)
        notifier.subscribe(EventType.SELECTION_CHANGED, self._on_selection_changed)
        self._on_data_changed(Event.create(EventType.DATA_CHANGED, {"reason": "startup"}))
        return root

    def _build_toolbar(self) -> BoxLayout:
        bar = BoxLayout(orientation="horizontal", size_hint_y=None, height=dp(36), spacing=dp(6), padding=dp(4))
        share = Button(text="Copy share link")
        share.bind(on_release=lambda *_: self.copy_share_link())
        export = Button(text="Export document")
        export.bind(on_release=lambda *_: self.export_document(auto_print=False))
        export_print = Button(text="Export for printing")
        export_print.bind(on_release=lambda *_: self.export_document(auto_print=True))
        self._status = Label(text="", size_hint_x=1.4)
        for w in (share, export, export_print, self._status):
            bar.add_widget(w)
        return bar

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_data_changed(self, _event: Event) -> None:
        if self._chart is not None:
            self._chart.set_levels(self.session.levels())
        if self._editor is not None:
            self._editor.refresh()
        self._on_selection_changed(_event)

    def _on_selection_changed(self, _event: Event) -> None:
        if self._detail is not None:
            self._detail.show(self.session.selected_detail())

    def _on_competency_selected(self, _widget: Any, competency_id: int, _read_only: bool) -> None:
        self.session.select_competency(competency_id)

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    def _set_status(self, text: str) -> None:
        if self._status is not None:
            self._status.text = text

    def copy_share_link(self) -> str:
        url = self.session.share_url(self.settings.share_base_url)
        Clipboard.copy(url)
        self._set_status("Share link copied")
        return url

    def export_document(self, auto_print: bool) -> None:
        output = Path(self.data_file).resolve().parent / EXPORT_FILENAME
        result = export_standalone(
            self.session.snapshot(),
            output,
            auto_print=auto_print,
            auto_print_delay_ms=self.settings.auto_print_delay_ms,
        )
        if result.success:
            self._set_status(f"Exported to {result.output_path}")
        else:
            self._set_status(f"Export failed: {result.error_message}")
