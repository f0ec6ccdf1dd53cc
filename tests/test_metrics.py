import math

import numpy as np
import pytest

from harmonic_composer.model.harmonics import HarmonicSet, SynthesisParameters
from harmonic_composer.signal.metrics import (
    compute_metrics,
    first_cycle,
    peak_to_peak,
    peaks,
    rms,
    zero_crossings,
)
from harmonic_composer.signal.synthesizer import synthesize

SAMPLE_PERIOD = 1 / 50000.0


def _unit_sine(freq=1.0, cycles=1.0):
    params = SynthesisParameters(fundamental_hz=freq, cycle_count=cycles)
    return synthesize(params, HarmonicSet.from_peaks([1.0]))


def test_peaks_scan():
    assert peaks([0.5, -2.0, 3.0, 1.0]) == (-2.0, 3.0)


def test_peaks_empty_returns_seeds():
    lo, hi = peaks([])
    assert lo == math.inf
    assert hi == -math.inf


def test_single_tone_metrics():
    sig = _unit_sine()
    assert peak_to_peak(sig.amplitude) == pytest.approx(2.0, abs=1e-9)
    assert rms(sig.amplitude, 1.0) == pytest.approx(1 / math.sqrt(2), abs=1e-4)


def test_rms_divides_by_one_period_sample_count():
    sig = _unit_sine(freq=50.0, cycles=5.0)
    a = np.asarray(sig.amplitude)
    expected = math.sqrt(np.sum(a * a) / (a.size / 5.0))
    assert rms(sig.amplitude, 5.0) == pytest.approx(expected)


def test_metrics_rms_is_per_period():
    sig = _unit_sine(freq=50.0, cycles=5.0)
    assert compute_metrics(sig, 5.0).rms == pytest.approx(1 / math.sqrt(2), abs=1e-3)


def test_first_cycle_window():
    assert first_cycle(np.arange(5001.0), 5.0).size == 1001
    assert first_cycle(np.arange(11.0), 1.0).size == 11


def test_rms_constant_series():
    a = np.full(100, 2.0)
    assert rms(a, 1.0) == pytest.approx(2.0)
    assert rms(a, 4.0) == pytest.approx(4.0)


def test_zero_signal_metrics():
    params = SynthesisParameters(fundamental_hz=50.0, cycle_count=5.0)
    sig = synthesize(params, HarmonicSet())
    m = compute_metrics(sig, params.cycle_count)
    assert m.rms == 0.0
    assert m.peak_to_peak == 0.0
    assert m.zero_crossings == []


def test_pure_sine_crossings_in_first_period():
    sig = _unit_sine()
    zc = zero_crossings(sig.amplitude, sig.time, 1.0)
    # sample 0 is exactly zero
    assert zc[0] == 0.0
    flips = [t for t in zc if t > 0]
    assert len(flips) == 2
    assert flips[0] == pytest.approx(0.5, abs=1.5 * SAMPLE_PERIOD)
    assert flips[1] == pytest.approx(1.0, abs=1.5 * SAMPLE_PERIOD)


def test_crossings_limited_to_first_period():
    sig = _unit_sine(freq=50.0, cycles=5.0)
    zc = zero_crossings(sig.amplitude, sig.time, 5.0)
    assert max(zc) <= 0.02 + SAMPLE_PERIOD
    assert zc == sorted(zc)


def test_crossings_record_later_sample():
    amp = [1.0, 0.5, -0.5, -1.0, 2.0]
    time = [0.0, 0.1, 0.2, 0.3, 0.4]
    assert zero_crossings(amp, time, 1.0) == [0.2, 0.4]


def test_touching_zero_is_not_a_crossing():
    amp = [1.0, 0.0, 1.0, 2.0]
    time = [0.0, 0.1, 0.2, 0.3]
    assert zero_crossings(amp, time, 1.0) == []


def test_leading_zero_adds_period_end():
    # starts at zero and never flips
    amp = [0.0, 1.0, 2.0, 1.0, 0.5, 0.2]
    time = [0.0, 0.1, 0.2, 0.3, 0.4, 0.5]
    assert zero_crossings(amp, time, 1.0) == [0.0, 0.5]


def test_compute_metrics_bundle():
    sig = _unit_sine(freq=50.0, cycles=2.0)
    m = compute_metrics(sig, 2.0)
    assert m.minimum == pytest.approx(-1.0, abs=1e-6)
    assert m.maximum == pytest.approx(1.0, abs=1e-6)
    assert m.peak_to_peak == pytest.approx(m.maximum - m.minimum)
    assert len([t for t in m.zero_crossings if t > 0]) == 2


def test_period_end_past_series_when_under_one_cycle():
    # half a period: the reported boundary sits beyond the last sample
    sig = _unit_sine(freq=1.0, cycles=0.5)
    zc = zero_crossings(sig.amplitude, sig.time, 0.5)
    assert zc == [0.0, 1.0]
    assert zc[-1] > sig.time[-1]
