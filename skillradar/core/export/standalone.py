# skillradar/core/export/standalone.py
"""Standalone export document (single HTML file, no external resources).

The document embeds the snapshot token in a double-quoted script string and
redraws the radar in the browser with the same constants as radar_geometry.
"""
from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from skillradar.core.export.template import HTML_TEMPLATE
from skillradar.core.snapshot import SnapshotPayload, encode_snapshot
from skillradar.gui.widgets import radar_geometry as geo

_logger = logging.getLogger("skillradar.core.export.standalone")

DEFAULT_TITLE = "Skill overview"

_MARKERS = (
    "__TITLE__",
    "__HEADING__",
    "__TOKEN__",
    "__GEOMETRY_JSON__",
    "__AUTO_PRINT__",
    "__AUTO_PRINT_DELAY__",
)
_MARKER_RE = re.compile("|".join(re.escape(m) for m in sorted(_MARKERS, key=len, reverse=True)))


@dataclass
class ExportResult:
    """Outcome of writing an export document."""

    success: bool
    output_path: Optional[Path]
    error_message: Optional[str] = None


def _css_rgba(color: geo.RGBA) -> str:
    r, g, b, a = color
    return f"rgba({round(r * 255)}, {round(g * 255)}, {round(b * 255)}, {a:g})"


def geometry_constants() -> dict:
    """Radar constants handed to the inline script."""
    return {
        "scaleMax": geo.SCALE_MAX,
        "radiusFraction": geo.RADIUS_FRACTION,
        "labelOffset": geo.LABEL_OFFSET,
        "gridLevels": list(geo.GRID_LEVELS),
        "minHitDistance": geo.HIT_MIN_DISTANCE,
        "outerMargin": geo.HIT_OUTER_MARGIN,
        "dotRadius": geo.DOT_RADIUS,
        "placeholder": geo.PLACEHOLDER_TEXT,
        "legend": geo.LEGEND_TEXT,
        "colors": {
            "grid": _css_rgba(geo.GRID_COLOR),
            "axis": _css_rgba(geo.AXIS_COLOR),
            "fill": _css_rgba(geo.FILL_COLOR),
            "outline": _css_rgba(geo.OUTLINE_COLOR),
            "dot": _css_rgba(geo.DOT_COLOR),
            "dotOutline": _css_rgba(geo.DOT_OUTLINE_COLOR),
            "label": _css_rgba(geo.LABEL_COLOR),
            "placeholder": _css_rgba(geo.PLACEHOLDER_COLOR),
        },
    }


def _check_template() -> None:
    for marker in _MARKERS:
        count = HTML_TEMPLATE.count(marker)
        if count != 1:
            raise RuntimeError(f"HTML_TEMPLATE must contain {marker} exactly once (found {count})")


def build_standalone_html(
    payload: SnapshotPayload,
    *,
    auto_print: bool = False,
    auto_print_delay_ms: int = 400,
    title: Optional[str] = None,
) -> str:
    """Render the export document for ``payload``.

    Raises:
        TypeError: If payload is not a SnapshotPayload.
        RuntimeError: If the template is broken (marker missing or left over).
    """
    if not isinstance(payload, SnapshotPayload):
        raise TypeError(f"payload must be SnapshotPayload, got {type(payload).__name__}")
    _check_template()

    if title is None:
        title = f"{DEFAULT_TITLE}: {payload.subject_name}" if payload.subject_name else DEFAULT_TITLE
    safe_title = html.escape(title)
    geometry_json = json.dumps(geometry_constants(), ensure_ascii=False).replace("</", "<\\/")

    values = {
        "__TITLE__": safe_title,
        "__HEADING__": safe_title,
        "__TOKEN__": encode_snapshot(payload),
        "__GEOMETRY_JSON__": geometry_json,
        "__AUTO_PRINT__": "true" if auto_print else "false",
        "__AUTO_PRINT_DELAY__": str(max(0, int(auto_print_delay_ms))),
    }
    injected: list[str] = []

    def _inject(match: re.Match) -> str:
        injected.append(match.group(0))
        return values[match.group(0)]

    # Single pass: user text (title) is never rescanned for markers
    doc = _MARKER_RE.sub(_inject, HTML_TEMPLATE)
    if sorted(injected) != sorted(_MARKERS):
        raise RuntimeError(f"HTML generation failed: injected {sorted(injected)}")
    return doc


def export_standalone(
    payload: SnapshotPayload,
    output_path: Path | str,
    *,
    auto_print: bool = False,
    auto_print_delay_ms: int = 400,
    title: Optional[str] = None,
) -> ExportResult:
    """Write the export document. I/O failures are reported, not raised."""
    path = Path(output_path)
    try:
        document = build_standalone_html(
            payload, auto_print=auto_print, auto_print_delay_ms=auto_print_delay_ms, title=title
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
    except OSError as e:
        _logger.warning("Export to %s failed: %s", path, e)
        return ExportResult(success=False, output_path=None, error_message=str(e))
    _logger.info("Exported %d competencies to %s", len(payload.competencies), path)
    return ExportResult(success=True, output_path=path)
