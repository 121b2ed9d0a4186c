"""CLI entrypoint for the local worker.

Reads a task descriptor (flag, file, or stdin), computes its result locally and
prints the submission JSON. Submitting it is left to the caller.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from swarm_compute import __version__
from swarm_compute.engine.dispatcher import select_route
from swarm_compute.engine.processors import InvalidShardSizeError
from swarm_compute.models import InvalidTaskError, Task, parse_task
from swarm_compute.worker.config import WorkerSettings
from swarm_compute.worker.logging import configure_logging
from swarm_compute.worker.submission import AnswerRequired, ShardSizeLimitError, TaskWorker

logger = logging.getLogger(__name__)


def _add_task_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--task", default=None, help="Task descriptor as a JSON string")
    source.add_argument(
        "--task-file",
        type=Path,
        default=None,
        help="Path to a file holding the task descriptor JSON (default: read stdin)",
    )


def _read_task(args: argparse.Namespace) -> Task:
    if args.task is not None:
        raw = args.task
    elif args.task_file is not None:
        raw = args.task_file.read_text(encoding="utf-8")
    else:
        raw = sys.stdin.read()
    return parse_task(raw)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swarm-compute",
        description="Deterministic swarm task computation",
    )
    parser.add_argument("--version", action="version", version=f"swarm-compute {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser(
        "process",
        help="Compute a task locally and print the submission JSON",
    )
    _add_task_source(process)
    process.add_argument(
        "--answer",
        default=None,
        help=(
            "Your text answer for review/produce tasks, or JSON ratings for review/review "
            "tasks, e.g. '{\"ratings\":[4,2,5,3]}'"
        ),
    )

    route = subparsers.add_parser("route", help="Print which processor a task would run on")
    _add_task_source(route)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = WorkerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, engine_debug=settings.engine_debug)

    try:
        task = _read_task(args)

        if args.command == "route":
            print(select_route(task).value)
            return 0

        if args.command == "process":
            submission = TaskWorker(settings).process(task, answer=args.answer)
            print(json.dumps(submission.to_payload(), indent=2, ensure_ascii=False))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except InvalidTaskError as e:
        logger.warning("Invalid task descriptor", extra={"error": str(e)})
        print(f"Invalid task: {e}", file=sys.stderr)
        return 2

    except (ShardSizeLimitError, InvalidShardSizeError) as e:
        logger.warning(str(e))
        print(str(e), file=sys.stderr)
        return 3

    except AnswerRequired as e:
        print(e.prompt)
        return 4

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
