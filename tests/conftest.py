"""
Pytest configuration and shared fixtures for skillradar tests.

This module provides:
- Small hand-built stores (the "Reception" scenario)
- The demo dataset
- Helpers for building raw snapshot tokens
"""

import base64
import gzip
import json
import os

import pytest

from skillradar.core.demo import load_demo
from skillradar.core.store import EntityStore


# ---------------------------------------------------------------------------
# CI Environment Detection
# ---------------------------------------------------------------------------


def is_ci_environment() -> bool:
    """True when a CI provider variable is set to a truthy value."""
    truthy_values = ("true", "1", "yes")
    for var in ("CI", "GITHUB_ACTIONS", "GITLAB_CI"):
        if os.environ.get(var, "").lower() in truthy_values:
            return True
    return False


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------


def make_token(obj) -> str:
    """gzip + base64url (no padding) of arbitrary JSON, bypassing the encoder."""
    raw = json.dumps(obj).encode("utf-8")
    return base64.urlsafe_b64encode(gzip.compress(raw)).rstrip(b"=").decode("ascii")


def make_raw_token(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def reception_store() -> EntityStore:
    """Competency 1 "Reception"; tasks A and B scoring it 8 and 4."""
    store = EntityStore()
    store.add_competency("Reception")
    store.add_task("A")
    store.add_task("B")
    store.set_score(1, 1, 8)
    store.set_score(2, 1, 4)
    return store


@pytest.fixture
def four_axis_store() -> EntityStore:
    store = EntityStore()
    for name in ("Reception", "Production", "Interaction", "Mediation"):
        store.add_competency(name)
    store.add_task("Essay", "Argumentative text")
    store.add_task("Debate")
    store.set_score(1, 1, 6)
    store.set_score(1, 2, 9)
    store.set_score(2, 3, 8)
    store.set_score(2, 2, 5)
    return store


@pytest.fixture
def demo_store() -> EntityStore:
    return load_demo()
