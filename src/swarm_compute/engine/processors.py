"""Deterministic task processors.

Each processor maps (seed, shard_size[, extra]) to a `TaskResult`. Results are
compared across peers by digest, so every number is rendered through
`to_fixed` before hashing and every loop runs in the same order everywhere.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from swarm_compute.engine.fft import fft_in_place, next_power_of_two
from swarm_compute.engine.formatting import sha256_hex, to_fixed
from swarm_compute.engine.prng import Xorshift128Plus, generate_data
from swarm_compute.models import PeerResponse, SignalClass, TaskResult

logger = logging.getLogger(__name__)

SHA_CHAIN_MAX_ROUNDS = 10_000
HASH_SEARCH_MAX_NONCE = 500_000
NOT_FOUND = "NOTFOUND"

MAGNITUDE_DIGITS = 6
ESTIMATE_DIGITS = 10


class InvalidShardSizeError(ValueError):
    """Raised when a processor cannot produce a finite result for the shard size."""


def magnitude_spectrum(seed: str, shard_size: int) -> list[float]:
    """Magnitudes of the FFT of `next_power_of_two(shard_size)` seeded samples."""

    n = next_power_of_two(shard_size)
    re = generate_data(seed, n)
    im = [0.0] * n
    fft_in_place(re, im)
    # sqrt of the sum, not math.hypot: the two round differently.
    return [math.sqrt(re[i] * re[i] + im[i] * im[i]) for i in range(n)]


def process_spectral(seed: str, shard_size: int) -> TaskResult:
    mags = magnitude_spectrum(seed, shard_size)
    joined = ",".join(to_fixed(m, MAGNITUDE_DIGITS) for m in mags)
    return TaskResult(output_hash=sha256_hex(joined))


def process_sha_chain(seed: str, shard_size: int) -> TaskResult:
    h = seed
    for _ in range(min(shard_size, SHA_CHAIN_MAX_ROUNDS)):
        h = sha256_hex(h)
    return TaskResult(output_hash=h)


def process_monte_carlo(seed: str, shard_size: int) -> TaskResult:
    """Estimate pi from `shard_size` seeded points in the unit square.

    Raises:
        InvalidShardSizeError: If `shard_size` is 0.
    """

    if shard_size <= 0:
        raise InvalidShardSizeError("Monte Carlo estimate requires shard_size >= 1")

    rng = Xorshift128Plus.from_seed(seed)
    inside = 0
    for _ in range(shard_size):
        x = rng.next_unit()
        y = rng.next_unit()
        if x * x + y * y < 1.0:
            inside += 1
    estimate = to_fixed((4.0 * inside) / shard_size, ESTIMATE_DIGITS)
    return TaskResult(output_hash=sha256_hex(estimate))


def process_simulation(seed: str, shard_size: int) -> TaskResult:
    """Population standard deviation of the magnitude spectrum."""

    mags = magnitude_spectrum(seed, shard_size)
    n = len(mags)

    # Left-to-right accumulation; builtin sum() compensates on 3.12+.
    total = 0.0
    for m in mags:
        total += m
    mean = total / n

    variance = 0.0
    for m in mags:
        variance += (m - mean) * (m - mean)
    stddev = to_fixed(math.sqrt(variance / n), ESTIMATE_DIGITS)
    return TaskResult(output_hash=sha256_hex(stddev), output_value=stddev)


def search_prefix(seed: str, shard_size: int) -> str:
    """Hex prefix of hash(seed) a hash-search answer must start with.

    The prefix is 2..5 characters, growing by one for every 16x in shard size.
    """

    prefix_len = min(max(2, math.floor(math.log2(shard_size + 1) / 4)), 5)
    return sha256_hex(seed)[:prefix_len]


def process_hash_search(seed: str, shard_size: int) -> TaskResult:
    prefix = search_prefix(seed, shard_size)
    for nonce in range(HASH_SEARCH_MAX_NONCE + 1):
        h = sha256_hex(f"{seed}:{nonce}")
        if h.startswith(prefix):
            return TaskResult(output_hash=sha256_hex(h), output_value=h)

    logger.debug(
        "Hash search exhausted nonce range",
        extra={"prefix": prefix, "max_nonce": HASH_SEARCH_MAX_NONCE},
    )
    return TaskResult(output_hash=sha256_hex(NOT_FOUND), output_value=NOT_FOUND)


def verify_candidate(seed: str, shard_size: int, candidate: str | None) -> TaskResult:
    candidate = candidate or ""
    if candidate and candidate.startswith(search_prefix(seed, shard_size)):
        return TaskResult(output_hash=sha256_hex(candidate), output_value="valid")
    return TaskResult(output_hash=sha256_hex("INVALID:" + candidate), output_value="invalid")


def classify_peak_ratio(par: float) -> SignalClass:
    if par > 10:
        return SignalClass.PERIODIC
    if par > 5:
        return SignalClass.QUASI_PERIODIC
    if par > 2:
        return SignalClass.STRUCTURED_NOISE
    return SignalClass.WHITE_NOISE


def process_signal_classify(seed: str, shard_size: int) -> TaskResult:
    """Label the spectrum by its peak-to-average ratio over the non-DC half band."""

    mags = magnitude_spectrum(seed, shard_size)
    n = len(mags)

    max_mag = 0.0
    total = 0.0
    for i in range(1, n // 2):
        mag = mags[i]
        total += mag
        if mag > max_mag:
            max_mag = mag

    label = SignalClass.WHITE_NOISE
    if n // 2 > 1 and total > 0:
        mean = total / (n / 2 - 1)
        label = classify_peak_ratio(max_mag / mean)

    return TaskResult(output_hash=sha256_hex(label.value), output_value=label.value)


def judge_responses(
    seed: str, shard_size: int, responses: Sequence[PeerResponse] | None
) -> TaskResult:
    """Pick the first peer response agreeing with our own classification.

    Falls back to position 0 when nobody agrees. The chosen position is
    returned as a decimal string.
    """

    own = process_signal_classify(seed, shard_size)
    if not responses:
        return TaskResult(output_hash=own.output_hash, output_value="0")

    chosen = next(
        (i for i, r in enumerate(responses) if r.output_value == own.output_value),
        0,
    )
    return TaskResult(output_hash=responses[chosen].output_hash, output_value=str(chosen))
