"""Standalone export document."""

from skillradar.core.export.standalone import (
    ExportResult,
    build_standalone_html,
    export_standalone,
    geometry_constants,
)

__all__ = ["ExportResult", "build_standalone_html", "export_standalone", "geometry_constants"]
