"""Editor panel: add/delete tasks and competencies, score a task.

Thin plumbing over Session. Every change goes through a Session method, so
redraw and persistence follow from the DATA_CHANGED notification; this
panel only rebuilds its own lists.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from kivy.metrics import dp
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.label import Label
from kivy.uix.scrollview import ScrollView
from kivy.uix.spinner import Spinner
from kivy.uix.textinput import TextInput

from skillradar.core.session import Session
from skillradar.core.store import parse_score_input

_logger = logging.getLogger("skillradar.gui.features.editor_panel")

SCORE_HINT = "Pick a task, then score it per competency."


def score_text(value: int) -> str:
    return str(value) if value > 0 else ""


def _row(height: float = 32) -> BoxLayout:
    return BoxLayout(orientation="horizontal", size_hint_y=None, height=dp(height), spacing=dp(4))


class EditorPanel(ScrollView):
    def __init__(self, session: Session, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._session = session
        self._selected_task_id: Optional[int] = None

        self._body = BoxLayout(orientation="vertical", size_hint_y=None, spacing=dp(6), padding=dp(8))
        self._body.bind(minimum_height=self._body.setter("height"))
        self.add_widget(self._body)

        # Task form
        self._task_name = TextInput(hint_text="Task name", multiline=False)
        self._task_description = TextInput(hint_text="Description (optional)", multiline=False)
        add_task = Button(text="Add task", size_hint_x=None, width=dp(110))
        add_task.bind(on_release=lambda *_: self._add_task())
        self._task_name.bind(on_text_validate=lambda *_: self._add_task())

        # Competency form
        self._competency_name = TextInput(hint_text="Competency name", multiline=False)
        add_comp = Button(text="Add competency", size_hint_x=None, width=dp(140))
        add_comp.bind(on_release=lambda *_: self._add_competency())
        self._competency_name.bind(on_text_validate=lambda *_: self._add_competency())

        self._task_list = BoxLayout(orientation="vertical", size_hint_y=None)
        self._task_list.bind(minimum_height=self._task_list.setter("height"))
        self._competency_list = BoxLayout(orientation="vertical", size_hint_y=None)
        self._competency_list.bind(minimum_height=self._competency_list.setter("height"))

        self._task_picker = Spinner(text="", values=[], size_hint_y=None, height=dp(32))
        self._task_picker.bind(text=lambda *_: self._on_task_picked())
        self._score_rows = BoxLayout(orientation="vertical", size_hint_y=None)
        self._score_rows.bind(minimum_height=self._score_rows.setter("height"))

        for header, widgets in (
            ("Tasks", [self._task_name, self._task_description]),
            ("Competencies", [self._competency_name]),
        ):
            self._body.add_widget(Label(text=f"[b]{header}[/b]", markup=True, size_hint_y=None, height=dp(26)))
            row = _row()
            for w in widgets:
                row.add_widget(w)
            row.add_widget(add_task if header == "Tasks" else add_comp)
            self._body.add_widget(row)
            self._body.add_widget(self._task_list if header == "Tasks" else self._competency_list)

        self._body.add_widget(Label(text="[b]Scores[/b]", markup=True, size_hint_y=None, height=dp(26)))
        self._body.add_widget(self._task_picker)
        self._body.add_widget(self._score_rows)

        self.refresh()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _add_task(self) -> None:
        if self._session.add_task(self._task_name.text, self._task_description.text) is None:
            _logger.debug("Blank task name ignored")
            return
        self._task_name.text = ""
        self._task_description.text = ""

    def _add_competency(self) -> None:
        if self._session.add_competency(self._competency_name.text) is None:
            return
        self._competency_name.text = ""

    def _on_task_picked(self) -> None:
        label = self._task_picker.text
        self._selected_task_id = None
        for task in self._session.source.tasks:
            if self._task_label(task.id, task.name) == label:
                self._selected_task_id = task.id
                break
        self._refresh_scores()

    def _commit_score(self, task_id: int, competency_id: int, entry: Any) -> None:
        # Focus changes fire for untouched inputs too; only real edits mutate
        stored = self._session.source.get_score(task_id, competency_id)
        if parse_score_input(entry.text) == stored:
            # Clamped input ("15" over a stored 10) would otherwise stay on screen
            entry.text = score_text(stored)
            return
        self._session.set_score(task_id, competency_id, entry.text)

    @staticmethod
    def _task_label(task_id: int, name: str) -> str:
        return f"{task_id}. {name}"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        source = self._session.source
        self._task_list.clear_widgets()
        for task in source.tasks:
            row = _row(28)
            row.add_widget(Label(text=task.name, halign="left", shorten=True))
            delete = Button(text="×", size_hint_x=None, width=dp(32))
            delete.bind(on_release=lambda _b, tid=task.id: self._session.remove_task(tid))
            row.add_widget(delete)
            self._task_list.add_widget(row)

        self._competency_list.clear_widgets()
        for competency in source.competencies:
            row = _row(28)
            row.add_widget(Label(text=competency.name, halign="left", shorten=True))
            delete = Button(text="×", size_hint_x=None, width=dp(32))
            delete.bind(on_release=lambda _b, cid=competency.id: self._session.remove_competency(cid))
            row.add_widget(delete)
            self._competency_list.add_widget(row)

        labels = [self._task_label(t.id, t.name) for t in source.tasks]
        self._task_picker.values = labels
        if self._selected_task_id is None or source.get_task(self._selected_task_id) is None:
            self._selected_task_id = source.tasks[0].id if source.tasks else None
        selected = source.get_task(self._selected_task_id) if self._selected_task_id else None
        self._task_picker.text = self._task_label(selected.id, selected.name) if selected else ""
        self._refresh_scores()

    def _refresh_scores(self) -> None:
        self._score_rows.clear_widgets()
        source = self._session.source
        task_id = self._selected_task_id
        if task_id is None or not source.competencies:
            self._score_rows.add_widget(Label(text=SCORE_HINT, size_hint_y=None, height=dp(28)))
            return
        for competency in source.competencies:
            value = source.get_score(task_id, competency.id)
            row = _row()
            row.add_widget(Label(text=competency.name, halign="left", shorten=True))
            entry = TextInput(
                text=score_text(value),
                hint_text="–",
                multiline=False,
                input_filter="int",
                size_hint_x=None,
                width=dp(60),
            )
            entry.bind(
                on_text_validate=lambda inst, cid=competency.id: self._commit_score(task_id, cid, inst),
                focus=lambda inst, focused, cid=competency.id: None
                if focused
                else self._commit_score(task_id, cid, inst),
            )
            remove = Button(text="Remove", size_hint_x=None, width=dp(80), disabled=value <= 0)
            remove.bind(on_release=lambda _b, cid=competency.id: self._session.remove_score(task_id, cid))
            row.add_widget(entry)
            row.add_widget(remove)
            self._score_rows.add_widget(row)
