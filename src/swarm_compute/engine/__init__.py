"""Deterministic compute core.

Nothing in this package performs I/O or reads configuration; every entry point
is a pure function of its arguments.
"""

from swarm_compute.engine.dispatcher import Route, process_task, select_route
from swarm_compute.engine.fft import fft_in_place, inverse_fft_in_place, next_power_of_two
from swarm_compute.engine.formatting import sha256_hex, to_fixed
from swarm_compute.engine.prng import Xorshift128Plus, generate_data

__all__ = [
    "Route",
    "Xorshift128Plus",
    "fft_in_place",
    "generate_data",
    "inverse_fft_in_place",
    "next_power_of_two",
    "process_task",
    "select_route",
    "sha256_hex",
    "to_fixed",
]
