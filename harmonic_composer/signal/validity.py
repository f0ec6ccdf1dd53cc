from __future__ import annotations

import math
from typing import Callable, Optional

from harmonic_composer.config import settings
from harmonic_composer.errors import InvalidCycleCount, InvalidFrequency, UnboundedSampleCount
from harmonic_composer.model.harmonics import SynthesisParameters
from harmonic_composer.signal.synthesizer import sample_count
from harmonic_composer.utils.logging import notice


def _positive(value) -> bool:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(v) and v > 0


def validate_parameters(
    fundamental_hz,
    cycle_count,
    max_samples: Optional[int] = None,
) -> SynthesisParameters:
    """
    Gate in front of the synthesizer.
    Frequency and cycle count must be positive; the derived sample count
    must stay under max_samples (settings.max_samples by default).
    """
    if not _positive(fundamental_hz):
        raise InvalidFrequency(fundamental_hz)
    if not _positive(cycle_count):
        raise InvalidCycleCount(cycle_count)

    params = SynthesisParameters(float(fundamental_hz), float(cycle_count))

    limit = int(max_samples) if max_samples else int(settings.max_samples)
    n = sample_count(params)
    if n > limit:
        raise UnboundedSampleCount(n, limit)
    return params


def resolve_parameters(
    fundamental_hz,
    cycle_count,
    max_samples: Optional[int] = None,
    on_reset: Optional[Callable[[str, object, float], None]] = None,
) -> SynthesisParameters:
    """
    Model-update boundary: invalid frequency / cycle count are reset to the
    configured defaults and reported through on_reset(field, value, fallback)
    (console warning by default). Sample-count overflow is not defaulted and
    propagates as UnboundedSampleCount.
    """
    notice_fn = on_reset or notice
    if not _positive(fundamental_hz):
        notice_fn("fundamental_hz", fundamental_hz, settings.default_fundamental_hz)
        fundamental_hz = settings.default_fundamental_hz
    if not _positive(cycle_count):
        notice_fn("cycle_count", cycle_count, settings.default_cycle_count)
        cycle_count = settings.default_cycle_count
    return validate_parameters(fundamental_hz, cycle_count, max_samples=max_samples)
