"""Widgets package - uses lazy imports to avoid triggering Kivy initialization."""

from __future__ import annotations

from typing import Any

__all__ = ["RadarChartWidget"]

# Lazy loading so radar_geometry.py can be imported without Kivy


def __getattr__(name: str) -> Any:
    """Lazy load Kivy-dependent widgets on first access."""
    if name == "RadarChartWidget":
        from skillradar.gui.widgets.radar_chart import RadarChartWidget

        return RadarChartWidget
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
