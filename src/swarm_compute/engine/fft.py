"""In-place radix-2 Cooley-Tukey transform over parallel real/imaginary buffers.

The butterfly twiddle factor is advanced by complex multiplication rather than
recomputed with trigonometric calls. Peers hash formatted magnitudes, so the
accumulation order below is part of the output contract.
"""

from __future__ import annotations

import math


def next_power_of_two(size: int) -> int:
    """Smallest power of two >= size (1 for size <= 1)."""

    n = 1
    while n < size:
        n <<= 1
    return n


def _check_buffers(re: list[float], im: list[float]) -> int:
    n = len(re)
    if len(im) != n:
        raise ValueError(f"Buffer lengths differ: re={n} im={len(im)}")
    if n < 1 or n & (n - 1):
        raise ValueError(f"Transform length must be a power of two, got {n}")
    return n


def fft_in_place(re: list[float], im: list[float]) -> None:
    """Forward, unnormalised DFT of (re, im), written back into both buffers."""

    n = _check_buffers(re, im)

    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j ^= bit
        if i < j:
            re[i], re[j] = re[j], re[i]
            im[i], im[j] = im[j], im[i]

    length = 2
    while length <= n:
        angle = (-2 * math.pi) / length
        w_re = math.cos(angle)
        w_im = math.sin(angle)
        half = length >> 1
        for start in range(0, n, length):
            cur_re = 1.0
            cur_im = 0.0
            for k in range(start, start + half):
                m = k + half
                u_re = re[k]
                u_im = im[k]
                v_re = re[m] * cur_re - im[m] * cur_im
                v_im = re[m] * cur_im + im[m] * cur_re
                re[k] = u_re + v_re
                im[k] = u_im + v_im
                re[m] = u_re - v_re
                im[m] = u_im - v_im
                next_re = cur_re * w_re - cur_im * w_im
                cur_im = cur_re * w_im + cur_im * w_re
                cur_re = next_re
        length <<= 1


def inverse_fft_in_place(re: list[float], im: list[float]) -> None:
    """Inverse transform via conjugation; divides every element by n."""

    n = _check_buffers(re, im)
    for i in range(n):
        im[i] = -im[i]
    fft_in_place(re, im)
    for i in range(n):
        re[i] = re[i] / n
        im[i] = -im[i] / n
