"""Competency level aggregation.

level(c) = mean of every existing score for competency c across all tasks,
rounded half-up to one decimal. A competency nobody has scored sits at 0.0.

Results are never cached: callers recompute after every mutation. Dataset
sizes are tens of rows, so a full pass is cheap.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from skillradar.core.models import (
    Competency,
    CompetencyDetail,
    CompetencyLevel,
    ScoredTask,
    ScoreKey,
    Task,
)
from skillradar.core.store import SkillDataSource


def round_level(total: int, count: int) -> float:
    """Mean of ``count`` scores summing to ``total``, rounded half-up to 0.1.

    This is the SINGLE SOURCE OF TRUTH for level rounding.

    Note:
        Uses Decimal on the exact integer ratio, so a true .x5 always rounds
        up (6.05 -> 6.1) regardless of binary float representation.
    """
    if count <= 0:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def levels_for(
    tasks: Sequence[Task],
    competencies: Sequence[Competency],
    scores: Mapping[ScoreKey, int],
) -> list[CompetencyLevel]:
    """One CompetencyLevel per competency, in competency order.

    Only scores whose task is in ``tasks`` count. An empty competency
    sequence yields an empty list.
    """
    sums = {c.id: 0 for c in competencies}
    counts = {c.id: 0 for c in competencies}
    for task in tasks:
        for competency in competencies:
            value = scores.get((task.id, competency.id), 0)
            if value > 0:
                sums[competency.id] += value
                counts[competency.id] += 1
    return [
        CompetencyLevel(
            competency_id=c.id,
            name=c.name,
            level=round_level(sums[c.id], counts[c.id]),
        )
        for c in competencies
    ]


def levels_from_source(source: SkillDataSource) -> list[CompetencyLevel]:
    """levels_for() over a store or a decoded snapshot."""
    return levels_for(source.tasks, source.competencies, source.scores)


def competency_detail(source: SkillDataSource, competency_id: int) -> Optional[CompetencyDetail]:
    """Detail panel data for one competency, or None if it no longer exists.

    Scored tasks are sorted by score, highest first; ties keep task order.
    """
    competency = source.get_competency(competency_id)
    if competency is None:
        return None

    level = 0.0
    for entry in levels_from_source(source):
        if entry.competency_id == competency_id:
            level = entry.level
            break

    rows = [
        ScoredTask(
            task_id=task.id,
            name=task.name,
            description=task.description,
            score=source.get_score(task.id, competency_id),
        )
        for task in source.tasks
        if source.get_score(task.id, competency_id) > 0
    ]
    rows.sort(key=lambda row: -row.score)
    return CompetencyDetail(
        competency_id=competency.id,
        name=competency.name,
        level=level,
        scored_tasks=tuple(rows),
    )
