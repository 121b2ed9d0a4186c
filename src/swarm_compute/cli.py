"""Module entrypoint: `python -m swarm_compute.cli`.

The CLI is implemented in `swarm_compute.worker.main`.
"""

from __future__ import annotations

from swarm_compute.worker.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
