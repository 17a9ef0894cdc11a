"""Tests for the editor panel score commit (Kivy import required)."""

import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from skillradar.core.session import Session

# Skip tests that import Kivy-dependent modules on CI (no display available)
_CI_SKIP = pytest.mark.skipif(
    os.environ.get("CI", "").lower() == "true", reason="Requires display - cannot import Kivy modules on headless CI"
)


@pytest.fixture
def panel_class():
    pytest.importorskip("kivy")
    from skillradar.gui.features.editor_panel import EditorPanel

    return EditorPanel


@_CI_SKIP
class TestCommitScore:
    def test_clamped_input_shows_stored_value(self, panel_class, reception_store):
        reception_store.set_score(1, 1, 10)
        panel = MagicMock(_session=Session.interactive(reception_store))
        entry = SimpleNamespace(text="15")

        panel_class._commit_score(panel, 1, 1, entry)

        assert entry.text == "10"
        assert reception_store.get_score(1, 1) == 10

    def test_cleared_input_over_empty_cell_stays_blank(self, panel_class, reception_store):
        panel = MagicMock(_session=Session.interactive(reception_store))
        entry = SimpleNamespace(text="0")

        panel_class._commit_score(panel, 1, 99, entry)

        assert entry.text == ""

    def test_changed_input_updates_store(self, panel_class, reception_store):
        panel = MagicMock(_session=Session.interactive(reception_store))
        entry = SimpleNamespace(text="3")

        panel_class._commit_score(panel, 1, 1, entry)

        assert reception_store.get_score(1, 1) == 3

    def test_score_text(self, panel_class):
        from skillradar.gui.features.editor_panel import score_text

        assert score_text(7) == "7"
        assert score_text(0) == ""
