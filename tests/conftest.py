"""Test configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from swarm_compute.models import Task
from swarm_compute.worker.config import WorkerSettings

_SETTINGS_ENV = (
    "LOG_LEVEL",
    "SWARM_ENGINE_DEBUG",
    "SWARM_MAX_SHARD_SIZE",
    "SWARM_MIN_ANSWER_LENGTH",
    "SWARM_REVIEW_PREVIEW_CHARS",
)


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings under test."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def worker_settings() -> WorkerSettings:
    """Provide worker settings independent of any local `.env`."""
    return WorkerSettings(_env_file=None)


@pytest.fixture
def spectral_task_data() -> dict[str, Any]:
    """Provide the raw descriptor of the pinned spectral task."""
    return {
        "task_id": "task-fft-1",
        "task_type": "fft",
        "seed": "test",
        "shard_size": 16,
        "consensus_mode": "",
        "phase": "",
    }


@pytest.fixture
def spectral_task(spectral_task_data: dict[str, Any]) -> Task:
    """Provide the pinned spectral task."""
    return Task(**spectral_task_data)
