"""Local worker surface around the engine: settings, logging, submissions, CLI."""

from swarm_compute.worker.config import WorkerSettings
from swarm_compute.worker.submission import AnswerRequired, Submission, TaskWorker

__all__ = ["AnswerRequired", "Submission", "TaskWorker", "WorkerSettings"]
