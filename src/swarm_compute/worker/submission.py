"""Turn a task into a submission-ready result.

Deterministic tasks are computed by the engine. Review-mode tasks are
subjective: the operator supplies the answer text (or ratings JSON) and the
worker only digests it. Signing and transport happen elsewhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from swarm_compute.engine.dispatcher import process_task, select_route
from swarm_compute.engine.formatting import sha256_hex
from swarm_compute.models import ConsensusMode, Phase, Task, TaskResult
from swarm_compute.worker.config import WorkerSettings

logger = logging.getLogger(__name__)


class Submission(BaseModel):
    """A result tagged with its task, ready for signing and submission."""

    output_hash: str
    output_value: str | None = None
    task_id: str | int | None = None
    ready_to_submit: bool = True

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_result(cls, task: Task, result: TaskResult) -> Submission:
        return cls(
            output_hash=result.output_hash,
            output_value=result.output_value,
            task_id=task.task_id,
        )

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True, slots=True)
class AnswerRequired(Exception):
    """Raised when a review-mode task needs operator-written input."""

    prompt: str

    def __str__(self) -> str:
        return self.prompt


class ShardSizeLimitError(ValueError):
    """Raised when a task's shard size exceeds the worker's configured bound."""


def _preview(text: str | None, limit: int) -> str:
    text = text or ""
    return text[:limit] + ("..." if len(text) > limit else "")


class TaskWorker:
    """Prepare submissions for tasks handed to this node."""

    def __init__(self, settings: WorkerSettings | None = None) -> None:
        self.settings = settings or WorkerSettings()

    def process(self, task: Task, answer: str | None = None) -> Submission:
        """Compute (or digest) the result for `task`.

        Args:
            task: The task descriptor.
            answer: Operator text for review-mode tasks; ignored otherwise.

        Raises:
            AnswerRequired: A review-mode task was given no usable answer.
            ShardSizeLimitError: The shard size exceeds `max_shard_size`.
            InvalidShardSizeError: The engine rejected the shard size.
        """

        if task.consensus_mode == ConsensusMode.REVIEW:
            if task.phase == Phase.PRODUCE:
                return self._digest_answer(task, self._require_written_answer(task, answer))
            if task.phase == Phase.REVIEW:
                return self._digest_answer(task, self._require_ratings(task, answer))

        if task.shard_size > self.settings.max_shard_size:
            raise ShardSizeLimitError(
                f"shard_size {task.shard_size} exceeds limit {self.settings.max_shard_size}"
            )

        result = process_task(task)
        logger.info(
            "Task computed",
            extra={
                "task_id": task.task_id,
                "route": select_route(task).value,
                "output_hash": result.output_hash,
            },
        )
        return Submission.from_result(task, result)

    def _require_written_answer(self, task: Task, answer: str | None) -> str:
        minimum = self.settings.min_answer_length
        if answer and len(answer) >= minimum:
            return answer
        raise AnswerRequired(
            "This is a subjective task requiring your written answer.\n\n"
            f"Question: {task.description or ''}\n\n"
            f"Process it again with an answer of at least {minimum} characters."
        )

    def _require_ratings(self, task: Task, answer: str | None) -> str:
        if answer:
            return answer
        limit = self.settings.review_preview_chars
        summary = "\n\n".join(
            f"Response {i}: {_preview(r.output_value, limit)}"
            for i, r in enumerate(task.responses or [])
        )
        raise AnswerRequired(
            "This is a review task. Rate each response 1-5.\n\n"
            f"Responses to review:\n{summary}\n\n"
            'Process it again with answer = \'{"ratings":[4,2,5,3]}\' '
            "(one rating per response, in order)."
        )

    def _digest_answer(self, task: Task, answer: str) -> Submission:
        logger.info("Answer digested", extra={"task_id": task.task_id, "phase": task.phase})
        return Submission(output_hash=sha256_hex(answer), output_value=answer, task_id=task.task_id)
