#!/usr/bin/env python3
"""Programmatic task computation example.

This demonstrates using the engine and worker components directly:

* load settings from `.env`
* parse a task descriptor
* compute the submission-ready result locally

Submitting the result to a coordinator is out of scope here.
"""

from __future__ import annotations

import argparse
import json
from typing import Sequence

from swarm_compute.engine.dispatcher import select_route
from swarm_compute.models import parse_task
from swarm_compute.worker.config import WorkerSettings
from swarm_compute.worker.logging import configure_logging
from swarm_compute.worker.submission import AnswerRequired, TaskWorker


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute a task (programmatic example).")
    parser.add_argument("--seed", default="test", help="Task seed")
    parser.add_argument("--shard-size", type=int, default=16, help="Task shard size")
    parser.add_argument("--task-type", default="fft", help="Task type, e.g. fft or monte_carlo")
    parser.add_argument("--mode", default="", help="Consensus mode (optional)")
    parser.add_argument("--phase", default="", help="Consensus phase (optional)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = WorkerSettings()
    configure_logging(settings.log_level, engine_debug=settings.engine_debug)

    task = parse_task(
        {
            "task_id": "example",
            "task_type": args.task_type,
            "seed": args.seed,
            "shard_size": args.shard_size,
            "consensus_mode": args.mode,
            "phase": args.phase,
        }
    )

    try:
        submission = TaskWorker(settings).process(task)
    except AnswerRequired as exc:
        print(exc.prompt)
        return 0

    print(f"Route: {select_route(task).value}")
    print(json.dumps(submission.to_payload(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
