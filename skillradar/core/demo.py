"""Demo dataset: language skills.

Loaded when no persisted state exists, so a first start shows a full chart.
"""

from __future__ import annotations

from skillradar.core.store import EntityStore

DEMO_STATE = {
    "competencies": [
        {"id": 1, "name": "Reception"},
        {"id": 2, "name": "Production"},
        {"id": 3, "name": "Interaction"},
        {"id": 4, "name": "Mediation"},
    ],
    "tasks": [
        {
            "id": 1,
            "name": "Read and understand an authentic article",
            "description": "Read an article and answer comprehension and analysis questions",
        },
        {
            "id": 2,
            "name": "Write an argumentative text",
            "description": "Write a short argumentative text from a given perspective",
        },
        {
            "id": 3,
            "name": "Group debate on a topic",
            "description": "Take part in a structured debate with prepared arguments",
        },
        {
            "id": 4,
            "name": "Translate and explain an excerpt",
            "description": "Translate an excerpt and explain choices and angles for the recipient",
        },
        {
            "id": 5,
            "name": "Listen to a podcast and take notes",
            "description": "Listen to a podcast and produce structured notes",
        },
        {
            "id": 6,
            "name": "Presentation with slides",
            "description": "Give a short presentation with visual support",
        },
        {
            "id": 7,
            "name": "Compare two texts",
            "description": "Read two texts and write a comparative analysis",
        },
        {
            "id": 8,
            "name": "Role play: conversation in a shop",
            "description": "Hold a situational conversation (e.g. purchase/return) with a partner",
        },
        {
            "id": 9,
            "name": "Summary of an audio source",
            "description": "Listen to an audio source and write a precise summary",
        },
    ],
    "scores": {
        "1": {"1": 8, "2": 2, "3": 1, "4": 5},
        "2": {"1": 4, "2": 9, "3": 2, "4": 3},
        "3": {"1": 5, "2": 5, "3": 9, "4": 4},
        "4": {"1": 6, "2": 4, "3": 2, "4": 9},
        "5": {"1": 8, "2": 6, "3": 1, "4": 3},
        "6": {"1": 3, "2": 8, "3": 7, "4": 5},
        "7": {"1": 7, "2": 4, "3": 2, "4": 8},
        "8": {"1": 4, "2": 5, "3": 9, "4": 3},
        "9": {"1": 7, "2": 7, "3": 2, "4": 6},
    },
    "nextTaskId": 10,
    "nextCompetencyId": 5,
}


def load_demo() -> EntityStore:
    """Fresh EntityStore holding the demo dataset."""
    return EntityStore.from_dict(DEMO_STATE)
