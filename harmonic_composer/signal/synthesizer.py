from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from harmonic_composer.config import settings
from harmonic_composer.model.harmonics import HarmonicComponent, SynthesisParameters


@dataclass(frozen=True)
class SampledSignal:
    time: np.ndarray
    amplitude: np.ndarray

    def __post_init__(self):
        if self.time.shape != self.amplitude.shape:
            raise ValueError("time and amplitude must have the same length.")
        # Derived values are shared, never edited in place
        self.time.setflags(write=False)
        self.amplitude.setflags(write=False)

    def __len__(self) -> int:
        return int(self.time.size)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"time_s": self.time, "amplitude": self.amplitude})


def sample_count(params: SynthesisParameters, sample_rate_hz: Optional[float] = None) -> int:
    """
    Number of sample intervals covering cycle_count periods.
    The series holds sample_count + 1 points (closed interval).
    """
    sr = float(sample_rate_hz) if sample_rate_hz else float(settings.sample_rate_hz)
    return int(round(sr * float(params.cycle_count) / float(params.fundamental_hz)))


def synthesize(
    params: SynthesisParameters,
    harmonics: Iterable[HarmonicComponent],
    sample_rate_hz: Optional[float] = None,
) -> SampledSignal:
    """
    Superposition of peak * sin(2*pi*f*order*t + phase) over every component.
    Assumes params were validated (f != 0, cycles > 0); nothing is clamped here.
    """
    sr = float(sample_rate_hz) if sample_rate_hz else float(settings.sample_rate_hz)
    n = sample_count(params, sr)

    t = np.arange(n + 1, dtype=float) / sr
    y = np.zeros_like(t)

    f = float(params.fundamental_hz)
    # Insertion order keeps the float summation reproducible
    for h in harmonics:
        if h.amplitude_peak == 0.0:
            continue
        y += h.amplitude_peak * np.sin(2.0 * np.pi * f * h.order * t + h.phase_rad)

    return SampledSignal(time=t, amplitude=y)
