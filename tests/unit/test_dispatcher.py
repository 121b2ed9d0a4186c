"""Unit tests for consensus-mode routing."""

from __future__ import annotations

from typing import Any

import pytest

from swarm_compute.engine.dispatcher import Route, process_task, select_route
from swarm_compute.engine.processors import (
    InvalidShardSizeError,
    process_hash_search,
    process_monte_carlo,
    process_sha_chain,
    process_simulation,
)
from swarm_compute.models import Task, parse_task


def _task(**overrides: Any) -> Task:
    fields: dict[str, Any] = {"task_id": "t-1", "seed": "s", "shard_size": 16}
    fields.update(overrides)
    return Task(**fields)


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ({"consensus_mode": "verify", "phase": "search"}, Route.HASH_SEARCH),
        (
            {"consensus_mode": "verify", "phase": "verify", "candidate": "04ab"},
            Route.VERIFY_CANDIDATE,
        ),
        ({"consensus_mode": "vote", "phase": "produce"}, Route.SIGNAL_CLASSIFY),
        ({"consensus_mode": "vote", "phase": "judge", "responses": []}, Route.JUDGE_RESPONSES),
        ({"consensus_mode": "numeric_tolerance", "task_type": "fft"}, Route.SIMULATION),
        ({"task_type": "fft"}, Route.SPECTRAL),
        ({"task_type": "spectral"}, Route.SPECTRAL),
        ({"task_type": "monte_carlo"}, Route.MONTE_CARLO),
        ({"task_type": "sha_chain"}, Route.SHA_CHAIN),
        ({"task_type": "open_question"}, Route.SHA_CHAIN),
        ({}, Route.SHA_CHAIN),
    ],
)
def test_select_route(fields: dict[str, Any], expected: Route) -> None:
    assert select_route(_task(**fields)) is expected


def test_mode_rules_take_precedence_over_task_type() -> None:
    task = _task(consensus_mode="verify", phase="search", task_type="monte_carlo")

    assert select_route(task) is Route.HASH_SEARCH
    assert process_task(task) == process_hash_search("s", 16)
    assert process_task(task) != process_monte_carlo("s", 16)


def test_verify_without_candidate_falls_through() -> None:
    task = _task(consensus_mode="verify", phase="verify", candidate="", task_type="monte_carlo")
    assert select_route(task) is Route.MONTE_CARLO

    task = _task(consensus_mode="verify", phase="verify", task_type="unknown")
    assert select_route(task) is Route.SHA_CHAIN


def test_judge_without_responses_falls_through() -> None:
    task = _task(consensus_mode="vote", phase="judge", task_type="spectral")
    assert select_route(task) is Route.SPECTRAL


def test_unrecognised_mode_and_phase_fall_through() -> None:
    task = _task(consensus_mode="review", phase="produce", task_type="mystery")
    assert select_route(task) is Route.SHA_CHAIN
    assert process_task(task) == process_sha_chain("s", 16)


def test_numeric_tolerance_runs_simulation() -> None:
    task = _task(consensus_mode="numeric_tolerance", phase="produce")
    assert process_task(task) == process_simulation("s", 16)


def test_end_to_end_spectral_golden() -> None:
    result = process_task(_task(seed="test", shard_size=16, task_type="fft"))
    assert result.output_hash == (
        "3cf8a51783430f5a99963da3614ad6d2f32972a85fc8d774a8737803d03bb415"
    )


def test_repeated_dispatch_is_deterministic() -> None:
    task = _task(consensus_mode="vote", phase="produce", shard_size=300)
    assert process_task(task) == process_task(task.model_copy())


def test_monte_carlo_zero_shard_surfaces_error() -> None:
    with pytest.raises(InvalidShardSizeError):
        process_task(_task(task_type="monte_carlo", shard_size=0))


def test_extras_do_not_affect_routing() -> None:
    plain = _task(task_type="fft")
    noisy = _task(task_type="fft", consensus_mode_hint="verify", phase_extra="search")

    assert noisy.extras == {"consensus_mode_hint": "verify", "phase_extra": "search"}
    assert process_task(noisy) == process_task(plain)


@pytest.mark.parametrize(
    "malformed",
    [
        {"phase": None},
        {"consensus_mode": 7},
        {"task_type": None},
        {"candidate": 123},
        {"responses": [{"output_value": "X"}]},
        {"responses": "oops"},
    ],
)
def test_malformed_routing_fields_fall_through_to_sha_chain(malformed: dict[str, Any]) -> None:
    descriptor: dict[str, Any] = {"seed": "s", "shard_size": 16, "task_type": "sha_chain"}
    descriptor.update(malformed)

    task = parse_task(descriptor)

    assert select_route(task) is Route.SHA_CHAIN
    assert process_task(task) == process_sha_chain("s", 16)


def test_wrongly_typed_candidate_does_not_verify() -> None:
    task = parse_task(
        {
            "seed": "s",
            "shard_size": 16,
            "consensus_mode": "verify",
            "phase": "verify",
            "candidate": 123,
            "task_type": "monte_carlo",
        }
    )

    assert select_route(task) is Route.MONTE_CARLO


def test_judge_runs_with_partial_peer_responses() -> None:
    task = parse_task(
        {
            "seed": "s",
            "shard_size": 16,
            "consensus_mode": "vote",
            "phase": "judge",
            "responses": [{"output_value": "WHITE_NOISE"}, None],
        }
    )

    assert select_route(task) is Route.JUDGE_RESPONSES
    # Position 1 carries no value, so either branch picks position 0 and its blank hash.
    assert process_task(task).to_payload() == {"output_hash": "", "output_value": "0"}


def test_non_list_responses_skip_judging() -> None:
    task = parse_task(
        {
            "seed": "s",
            "shard_size": 16,
            "consensus_mode": "vote",
            "phase": "judge",
            "responses": {"0": "PERIODIC"},
            "task_type": "spectral",
        }
    )

    assert task.responses is None
    assert select_route(task) is Route.SPECTRAL
