"""
Signal primitives shared by the metrics engine.

Pure functions over frequency counts: normalized Shannon entropy, top-share
concentration, and the UTC hour-of-day histogram. All are total: empty or
degenerate inputs return defined values instead of dividing by zero.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

HOURS_PER_DAY = 24
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def normalized_entropy(frequencies: Iterable[int]) -> float:
    """
    Shannon entropy (base 2) of a frequency distribution divided by
    log2(number of categories).

    Zero-count categories contribute nothing to the entropy but still count
    as categories (the 24-bucket hour histogram relies on this). Returns 0
    when the total is 0 or fewer than two categories are used.
    """
    freqs = list(frequencies)
    total = sum(freqs)
    # a single used category carries no information
    if total <= 0 or sum(1 for f in freqs if f > 0) < 2:
        return 0.0
    # H = log2(T) - (1/T) * sum(f * log2 f); exact for uniform unit counts
    entropy = math.log2(total) - sum(f * math.log2(f) for f in freqs if f > 0) / total
    max_entropy = math.log2(len(freqs))
    if max_entropy <= 0:
        return 0.0
    # float error can push a uniform distribution a hair past 1
    return min(1.0, max(0.0, entropy / max_entropy))


def max_share(counts: Mapping[str, int]) -> float:
    """Largest single count over the sum of counts; 0 for no events."""
    total = sum(counts.values())
    if total <= 0:
        return 0.0
    return max(counts.values()) / total


def hour_of_day_histogram(timestamps: Iterable[int]) -> list[int]:
    """24 UTC hour buckets; timestamps <= 0 (unknown) are skipped, not put in hour 0."""
    buckets = [0] * HOURS_PER_DAY
    for ts in timestamps:
        if ts > 0:
            buckets[(ts % SECONDS_PER_DAY) // SECONDS_PER_HOUR] += 1
    return buckets
