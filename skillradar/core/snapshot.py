"""Portable snapshot codec.

A snapshot is a frozen, self-contained copy of the skill data that a third
party can view without the original store. It travels as a text token:

    token = base64url_nopad(gzip(compact_json))

compact_json:
    {"v": 1,
     "t": [[task_id, name, description], ...],
     "c": [[competency_id, name], ...],
     "s": {"task_id": {"competency_id": score}},
     "n": "subject name"}            # optional

The token alphabet is [A-Za-z0-9_-], so it can sit verbatim in a URL
fragment (``#d=<token>``) or inside a double-quoted script string.

Decoding never raises for bad input; it returns DecodeResult(success=False).
"""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import logging
import re
import zlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from skillradar.core.errors import SnapshotError
from skillradar.core.models import Competency, ScoreKey, Task
from skillradar.core.store import (
    SkillDataSource,
    nest_scores,
    parse_competencies,
    parse_nested_scores,
    parse_tasks,
)

_logger = logging.getLogger("skillradar.core.snapshot")

FORMAT_VERSION = 1
SHARE_FRAGMENT_PREFIX = "d="

# Upper bounds keep a hostile link from exhausting memory
MAX_TOKEN_LENGTH = 1_000_000
MAX_PAYLOAD_BYTES = 8 * 1024 * 1024

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]+$")


# =============================================================================
# Payload
# =============================================================================


@dataclass(frozen=True)
class SnapshotPayload:
    """Read-only skill data bundle; stands in for the EntityStore in shared views.

    Use SnapshotPayload.create() rather than the constructor: it drops score
    entries whose ids do not resolve inside the bundle.
    """

    tasks: tuple[Task, ...] = ()
    competencies: tuple[Competency, ...] = ()
    scores: Mapping[ScoreKey, int] = field(default_factory=lambda: MappingProxyType({}))
    subject_name: Optional[str] = None

    @classmethod
    def create(
        cls,
        tasks: Any,
        competencies: Any,
        scores: Mapping[ScoreKey, int],
        subject_name: Optional[str] = None,
    ) -> "SnapshotPayload":
        tasks = tuple(tasks)
        competencies = tuple(competencies)
        task_ids = {t.id for t in tasks}
        comp_ids = {c.id for c in competencies}
        consistent = {
            (tid, cid): value
            for (tid, cid), value in scores.items()
            if tid in task_ids and cid in comp_ids and 1 <= value <= 10
        }
        subject = subject_name.strip() if isinstance(subject_name, str) else None
        return cls(
            tasks=tasks,
            competencies=competencies,
            scores=MappingProxyType(consistent),
            subject_name=subject or None,
        )

    # SkillDataSource read interface

    def get_task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def get_competency(self, competency_id: int) -> Optional[Competency]:
        for competency in self.competencies:
            if competency.id == competency_id:
                return competency
        return None

    def get_score(self, task_id: int, competency_id: int) -> int:
        return self.scores.get((task_id, competency_id), 0)

    def to_dict(self) -> dict[str, Any]:
        """Long-form view (same shape as the persisted state, minus counters)."""
        d: dict[str, Any] = {
            "tasks": [t.to_dict() for t in self.tasks],
            "competencies": [c.to_dict() for c in self.competencies],
            "scores": nest_scores(self.scores),
        }
        if self.subject_name:
            d["subjectName"] = self.subject_name
        return d


@dataclass
class DecodeResult:
    """Outcome of decoding a token or share link."""

    success: bool
    payload: Optional[SnapshotPayload] = None
    error_message: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "DecodeResult":
        return cls(success=False, payload=None, error_message=message)


def snapshot_from_store(source: SkillDataSource, subject_name: Optional[str] = None) -> SnapshotPayload:
    """Freeze the current state of a store (or another snapshot)."""
    return SnapshotPayload.create(source.tasks, source.competencies, source.scores, subject_name)


# =============================================================================
# Encode
# =============================================================================


def _compact_document(payload: SnapshotPayload) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "v": FORMAT_VERSION,
        "t": [[t.id, t.name, t.description] for t in payload.tasks],
        "c": [[c.id, c.name] for c in payload.competencies],
        "s": nest_scores(payload.scores),
    }
    if payload.subject_name:
        doc["n"] = payload.subject_name
    return doc


def encode_snapshot(payload: SnapshotPayload) -> str:
    """Encode a payload into a URL-safe token.

    Deterministic: the gzip header carries mtime=0, so equal payloads give
    equal tokens.
    """
    raw = json.dumps(_compact_document(payload), ensure_ascii=False, separators=(",", ":"))
    compressed = gzip.compress(raw.encode("utf-8"), compresslevel=9, mtime=0)
    return base64.urlsafe_b64encode(compressed).rstrip(b"=").decode("ascii")


# =============================================================================
# Decode
# =============================================================================


def _b64decode(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _gunzip(data: bytes) -> bytes:
    """Bounded gzip decompression; truncated or oversized input is an error."""
    decompressor = zlib.decompressobj(16 + zlib.MAX_WBITS)
    out = decompressor.decompress(data, MAX_PAYLOAD_BYTES)
    if decompressor.unconsumed_tail:
        raise SnapshotError("snapshot payload too large")
    if not decompressor.eof:
        raise SnapshotError("snapshot token is truncated")
    return out


def _rows_to_dicts(rows: Any, keys: tuple[str, ...], label: str) -> list[dict[str, Any]]:
    if not isinstance(rows, list):
        raise SnapshotError(f"{label} must be a list")
    out = []
    for row in rows:
        if isinstance(row, list) and len(row) >= 2:
            out.append(dict(zip(keys, row)))
        elif isinstance(row, Mapping):
            out.append(dict(row))
    return out


def _payload_from_document(doc: Any) -> SnapshotPayload:
    """Strict structural parse of a decoded document.

    Raises:
        SnapshotError: If the document is not a skill payload.
    """
    if not isinstance(doc, dict):
        raise SnapshotError("snapshot is not an object")
    version = doc.get("v")
    if version != FORMAT_VERSION:
        raise SnapshotError(f"unsupported snapshot version: {version!r}", context={"version": version})
    if "t" not in doc and "c" not in doc:
        raise SnapshotError("snapshot holds neither tasks nor competencies")

    try:
        tasks = parse_tasks(_rows_to_dicts(doc.get("t", []), ("id", "name", "description"), "tasks"))
        competencies = parse_competencies(_rows_to_dicts(doc.get("c", []), ("id", "name"), "competencies"))
        scores = parse_nested_scores(
            doc.get("s") or {},
            (t.id for t in tasks),
            (c.id for c in competencies),
        )
    except TypeError as e:
        raise SnapshotError(str(e)) from e

    subject = doc.get("n")
    return SnapshotPayload.create(tasks, competencies, scores, subject if isinstance(subject, str) else None)


def decode_snapshot(token: Any) -> DecodeResult:
    """Decode a token produced by encode_snapshot().

    Returns:
        DecodeResult with success=True and the payload, or success=False and
        an error message. Never raises on malformed input.
    """
    if not isinstance(token, str):
        return DecodeResult.failure("snapshot token must be a string")
    token = token.strip()
    if not token:
        return DecodeResult.failure("snapshot token is empty")
    if len(token) > MAX_TOKEN_LENGTH:
        return DecodeResult.failure("snapshot token is too long")
    if not _TOKEN_RE.match(token):
        return DecodeResult.failure("snapshot token contains invalid characters")

    try:
        raw = _gunzip(_b64decode(token))
        doc = json.loads(raw.decode("utf-8"))
        payload = _payload_from_document(doc)
    except SnapshotError as e:
        _logger.debug("Snapshot rejected: %s", e)
        return DecodeResult.failure(str(e))
    except (binascii.Error, zlib.error, UnicodeDecodeError, json.JSONDecodeError, ValueError, RecursionError) as e:
        # RecursionError: deeply nested JSON arrays/objects
        _logger.debug("Snapshot decode failed: %s: %s", type(e).__name__, e)
        return DecodeResult.failure(f"snapshot token is malformed ({type(e).__name__})")
    return DecodeResult(success=True, payload=payload)


# =============================================================================
# Share links
# =============================================================================


def build_share_url(base_url: str, token: str) -> str:
    """``<base>#d=<token>``; any existing fragment on the base is replaced."""
    base = (base_url or "").split("#", 1)[0]
    return f"{base}#{SHARE_FRAGMENT_PREFIX}{token}"


def parse_share_fragment(url_or_fragment: Any) -> DecodeResult:
    """Extract and decode the ``d=`` payload from a URL or bare fragment.

    A missing ``d=`` prefix or a bad token is reported as "no shared payload".
    """
    if not isinstance(url_or_fragment, str):
        return DecodeResult.failure("no shared payload")
    text = url_or_fragment.strip()
    if "#" in text:
        text = text.split("#", 1)[1]
    if not text.startswith(SHARE_FRAGMENT_PREFIX):
        return DecodeResult.failure("no shared payload")
    result = decode_snapshot(text[len(SHARE_FRAGMENT_PREFIX):])
    if not result.success:
        _logger.warning("Ignoring shared link: %s", result.error_message)
    return result
