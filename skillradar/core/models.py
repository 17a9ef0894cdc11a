"""Entity types shared by the store, aggregation, geometry and codec.

All entities are frozen dataclasses. Identity (the id) is assigned by the
EntityStore; only the score relation is mutable, and it lives in the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

SCORE_MIN = 1
SCORE_MAX = 10

# Flat score relation key: (task_id, competency_id)
ScoreKey = Tuple[int, int]
ScoreMap = Dict[ScoreKey, int]


@dataclass(frozen=True)
class Task:
    """A scorable activity ("opgave")."""

    id: int
    name: str
    description: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class Competency:
    """A skill axis being measured ("kompetence")."""

    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class CompetencyLevel:
    """Aggregated level of one competency (0.0-10.0, one decimal).

    Attributes:
        competency_id: Id of the competency
        name: Competency name (label text)
        level: Mean of all existing scores, rounded half-up to one decimal.
            0.0 when no task has scored the competency.
    """

    competency_id: int
    name: str
    level: float


@dataclass(frozen=True)
class ScoredTask:
    """One task's contribution to a competency (detail panel row)."""

    task_id: int
    name: str
    description: str
    score: int


@dataclass(frozen=True)
class CompetencyDetail:
    """Everything the detail panel shows for a selected competency."""

    competency_id: int
    name: str
    level: float
    scored_tasks: Tuple[ScoredTask, ...]


def clamp_score(value: int) -> int:
    """Clamp a positive score into [SCORE_MIN, SCORE_MAX]."""
    return max(SCORE_MIN, min(SCORE_MAX, int(value)))
