from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from harmonic_composer.signal.synthesizer import SampledSignal


@dataclass(frozen=True)
class SignalMetrics:
    rms: float
    peak_to_peak: float
    minimum: float
    maximum: float
    zero_crossings: list[float] = field(default_factory=list)


def _one_cycle_len(n: int, cycle_count: float) -> float:
    return n / float(cycle_count)


def first_cycle(amplitude, cycle_count: float) -> np.ndarray:
    """Samples with index below len/cycle_count (the first period)."""
    a = np.asarray(amplitude, dtype=float)
    stop = min(a.size, int(math.ceil(_one_cycle_len(a.size, cycle_count))))
    return a[:stop]


def peaks(amplitude) -> tuple[float, float]:
    """
    (min, max) of the series.
    Empty input returns the scan seeds (+inf, -inf); callers guard against it.
    """
    a = np.asarray(amplitude, dtype=float)
    if a.size == 0:
        return math.inf, -math.inf
    return float(np.min(a)), float(np.max(a))


def rms(amplitude, cycle_count: float) -> float:
    """
    sqrt(sum(a^2) / (len(a) / cycle_count)).
    The divisor is one period's sample count; for the RMS of a single
    period pass first_cycle(a, cycles) with cycle_count=1.
    """
    a = np.asarray(amplitude, dtype=float)
    if a.size == 0:
        return 0.0
    per_cycle = _one_cycle_len(a.size, cycle_count)
    return float(np.sqrt(np.sum(a * a) / per_cycle))


def peak_to_peak(amplitude) -> float:
    lo, hi = peaks(amplitude)
    return hi - lo


def zero_crossings(amplitude, time, cycle_count: float) -> list[float]:
    """
    Times of strict sign flips inside the first period of the series.
    Each crossing is reported at the later sample (no interpolation).
    A series starting exactly at zero also reports t[0] and the end of
    the first period.
    """
    a = np.asarray(amplitude, dtype=float)
    t = np.asarray(time, dtype=float)
    if a.size == 0 or not np.any(a != 0.0):
        return []

    window = first_cycle(a, cycle_count)

    prev, cur = window[:-1], window[1:]
    flips = ((prev < 0) & (cur > 0)) | ((prev > 0) & (cur < 0))
    idx = np.nonzero(flips)[0] + 1

    out: list[float] = []
    starts_at_zero = a[0] == 0.0
    if starts_at_zero:
        out.append(float(t[0]))
    out.extend(float(x) for x in t[idx])

    if starts_at_zero:
        # With cycle_count < 1 this lies past the last sample: the series
        # covers less than a period, and the boundary is still reported.
        period_end = float(t[-1]) / float(cycle_count)
        if not math.isclose(out[-1], period_end, rel_tol=1e-9, abs_tol=1e-12):
            out.append(period_end)
    return out


def compute_metrics(signal: SampledSignal, cycle_count: float) -> SignalMetrics:
    lo, hi = peaks(signal.amplitude)
    if signal.amplitude.size == 0:
        lo = hi = 0.0
    return SignalMetrics(
        # one period in, so the divisor is that period's own length
        rms=rms(first_cycle(signal.amplitude, cycle_count), 1.0),
        peak_to_peak=hi - lo,
        minimum=lo,
        maximum=hi,
        zero_crossings=zero_crossings(signal.amplitude, signal.time, cycle_count),
    )
