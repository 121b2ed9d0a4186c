"""Consensus-mode dispatcher.

Routing is a fixed, ordered rule list evaluated against a `Task`; the first
matching rule wins. A task that half-matches an early rule (for example
verify/verify without a candidate) falls through to later rules, and anything
unrecognised ends in the SHA chain.
"""

from __future__ import annotations

import logging
from enum import Enum

from swarm_compute.engine import processors
from swarm_compute.models import ConsensusMode, Phase, Task, TaskResult, TaskType

logger = logging.getLogger(__name__)


class Route(str, Enum):
    HASH_SEARCH = "hash_search"
    VERIFY_CANDIDATE = "verify_candidate"
    SIGNAL_CLASSIFY = "signal_classify"
    JUDGE_RESPONSES = "judge_responses"
    SIMULATION = "simulation"
    SPECTRAL = "spectral"
    MONTE_CARLO = "monte_carlo"
    SHA_CHAIN = "sha_chain"


_SPECTRAL_TYPES = {TaskType.FFT.value, TaskType.SPECTRAL.value}


def select_route(task: Task) -> Route:
    """Return the processor route for `task`. Never raises."""

    mode = task.consensus_mode
    phase = task.phase

    if mode == ConsensusMode.VERIFY:
        if phase == Phase.SEARCH:
            return Route.HASH_SEARCH
        if phase == Phase.VERIFY and task.candidate:
            return Route.VERIFY_CANDIDATE

    if mode == ConsensusMode.VOTE:
        if phase == Phase.PRODUCE:
            return Route.SIGNAL_CLASSIFY
        if phase == Phase.JUDGE and task.responses is not None:
            return Route.JUDGE_RESPONSES

    if mode == ConsensusMode.NUMERIC_TOLERANCE:
        return Route.SIMULATION

    if task.task_type in _SPECTRAL_TYPES:
        return Route.SPECTRAL
    if task.task_type == TaskType.MONTE_CARLO:
        return Route.MONTE_CARLO

    # sha_chain, and the fallback for every unrecognised type.
    return Route.SHA_CHAIN


def process_task(task: Task) -> TaskResult:
    """Compute the result for `task` on the processor chosen by `select_route`.

    Raises:
        InvalidShardSizeError: If the selected processor rejects the shard size
            (Monte Carlo with shard_size 0).
    """

    route = select_route(task)
    logger.debug(
        "Dispatching task",
        extra={"task_id": task.task_id, "route": route.value, "shard_size": task.shard_size},
    )

    seed = task.seed
    size = task.shard_size

    if route is Route.HASH_SEARCH:
        return processors.process_hash_search(seed, size)
    if route is Route.VERIFY_CANDIDATE:
        return processors.verify_candidate(seed, size, task.candidate)
    if route is Route.SIGNAL_CLASSIFY:
        return processors.process_signal_classify(seed, size)
    if route is Route.JUDGE_RESPONSES:
        return processors.judge_responses(seed, size, task.responses)
    if route is Route.SIMULATION:
        return processors.process_simulation(seed, size)
    if route is Route.SPECTRAL:
        return processors.process_spectral(seed, size)
    if route is Route.MONTE_CARLO:
        return processors.process_monte_carlo(seed, size)
    return processors.process_sha_chain(seed, size)
