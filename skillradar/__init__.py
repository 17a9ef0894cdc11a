"""skillradar - task/competency scoring with a radar chart and shareable snapshots."""

__version__ = "1.0.0"
