from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Literal, Optional

from harmonic_composer.errors import EmptyHarmonicSetError, InvalidAmplitude

AmplitudeEntry = Literal["peak", "rms"]

SQRT2 = math.sqrt(2.0)


def _checked_amplitude(value: float) -> float:
    v = float(value)
    if not math.isfinite(v) or v < 0:
        raise InvalidAmplitude(value)
    return v


def _checked_order(value) -> int:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Harmonic order must be an integer (got {value!r}).")
    if isinstance(value, bool) or not v.is_integer() or v < 1:
        raise ValueError(f"Harmonic order must be an integer >= 1 (got {value!r}).")
    return int(v)


@dataclass
class HarmonicComponent:
    """
    One sinusoid of the composed signal.
    Peak amplitude is the only stored amplitude; RMS is derived from it.
    """
    order: int
    amplitude_peak: float = 0.0
    phase_deg: float = 0.0
    # Which representation the user typed last (None = untouched)
    entered_as: Optional[AmplitudeEntry] = None

    def __setattr__(self, name, value):
        # Checked on every assignment, including the generated __init__
        if name == "amplitude_peak":
            value = _checked_amplitude(value)
        elif name == "order":
            value = _checked_order(value)
        elif name == "phase_deg":
            value = float(value)
        object.__setattr__(self, name, value)

    @property
    def amplitude_rms(self) -> float:
        return self.amplitude_peak / SQRT2

    @amplitude_rms.setter
    def amplitude_rms(self, value: float) -> None:
        self.amplitude_peak = _checked_amplitude(value) * SQRT2

    @property
    def phase_rad(self) -> float:
        return math.radians(self.phase_deg)

    def set_peak(self, value: float) -> None:
        self.amplitude_peak = value
        self.entered_as = "peak"

    def set_rms(self, value: float) -> None:
        self.amplitude_rms = value
        self.entered_as = "rms"

    def set_phase(self, degrees: float) -> None:
        self.phase_deg = float(degrees)


@dataclass
class HarmonicSet:
    """
    Ordered harmonic components, dense from order 1.
    Edits only ever happen at the tail.
    """
    components: list[HarmonicComponent] = field(default_factory=list)

    def __post_init__(self):
        self.components = list(self.components)
        for idx, comp in enumerate(self.components, start=1):
            if comp.order != idx:
                raise ValueError(
                    f"Harmonic orders must be contiguous from 1; position {idx} holds order {comp.order}."
                )

    @classmethod
    def from_peaks(cls, peaks: Iterable[float], phases_deg: Iterable[float] | None = None) -> "HarmonicSet":
        peaks = list(peaks)
        phases = list(phases_deg) if phases_deg is not None else [0.0] * len(peaks)
        if len(phases) != len(peaks):
            raise ValueError("peaks and phases_deg must have the same length.")
        return cls([HarmonicComponent(order=i, amplitude_peak=a, phase_deg=p) for i, (a, p) in enumerate(zip(peaks, phases), start=1)])

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[HarmonicComponent]:
        return iter(self.components)

    def __getitem__(self, idx: int) -> HarmonicComponent:
        return self.components[idx]

    def append_next(self) -> HarmonicComponent:
        comp = HarmonicComponent(order=len(self.components) + 1)
        self.components.append(comp)
        return comp

    def remove_last(self) -> HarmonicComponent:
        # Front ends disable removal when a single component is left
        if not self.components:
            raise EmptyHarmonicSetError("Cannot remove a harmonic from an empty set.")
        return self.components.pop()

    def copy(self) -> "HarmonicSet":
        return HarmonicSet(
            [HarmonicComponent(c.order, c.amplitude_peak, c.phase_deg, c.entered_as) for c in self.components]
        )


@dataclass(frozen=True)
class SynthesisParameters:
    fundamental_hz: float
    cycle_count: float

    @property
    def period_s(self) -> float:
        return 1.0 / self.fundamental_hz

    @property
    def duration_s(self) -> float:
        return self.cycle_count / self.fundamental_hz
