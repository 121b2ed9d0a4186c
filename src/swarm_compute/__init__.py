"""Swarm compute engine.

Deterministic workload kernels for a participant node in a distributed
compute network:
- a seeded xorshift128+ generator and a radix-2 FFT
- eight task processors whose results every peer must reproduce bit-for-bit
- a consensus-mode dispatcher routing a task to its processor
"""

__version__ = "0.1.0"

from swarm_compute.engine.dispatcher import process_task
from swarm_compute.models import Task, TaskResult, parse_task

__all__ = ["__version__", "Task", "TaskResult", "parse_task", "process_task"]
