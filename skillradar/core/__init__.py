"""Kivy-independent core: store, aggregation, snapshot codec, session."""

from skillradar.core.aggregation import competency_detail, levels_for, levels_from_source, round_level
from skillradar.core.models import Competency, CompetencyDetail, CompetencyLevel, ScoredTask, Task
from skillradar.core.snapshot import (
    DecodeResult,
    SnapshotPayload,
    build_share_url,
    decode_snapshot,
    encode_snapshot,
    parse_share_fragment,
    snapshot_from_store,
)
from skillradar.core.store import EntityStore, parse_score_input

__all__ = [
    "Competency",
    "CompetencyDetail",
    "CompetencyLevel",
    "DecodeResult",
    "EntityStore",
    "ScoredTask",
    "SnapshotPayload",
    "Task",
    "build_share_url",
    "competency_detail",
    "decode_snapshot",
    "encode_snapshot",
    "levels_for",
    "levels_from_source",
    "parse_score_input",
    "parse_share_fragment",
    "round_level",
    "snapshot_from_store",
]
