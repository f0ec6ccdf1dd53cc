import math

import pytest

from harmonic_composer.errors import EmptyHarmonicSetError, InvalidAmplitude
from harmonic_composer.model.harmonics import HarmonicComponent, HarmonicSet, SynthesisParameters


def test_peak_sets_rms():
    h = HarmonicComponent(order=1)
    h.set_peak(2.5)
    assert h.amplitude_rms == pytest.approx(2.5 / math.sqrt(2), abs=1e-9)
    assert h.entered_as == "peak"


def test_rms_sets_peak():
    h = HarmonicComponent(order=3)
    h.set_rms(0.25)
    assert h.amplitude_peak == pytest.approx(0.25 * math.sqrt(2), abs=1e-9)
    assert h.amplitude_rms == pytest.approx(0.25, abs=1e-9)
    assert h.entered_as == "rms"


def test_negative_amplitude_rejected():
    h = HarmonicComponent(order=1)
    with pytest.raises(InvalidAmplitude) as exc:
        h.set_peak(-1.0)
    assert exc.value.field == "amplitude_peak"
    with pytest.raises(InvalidAmplitude):
        HarmonicComponent(order=1, amplitude_peak=-0.1)


def test_phase_is_not_clamped():
    h = HarmonicComponent(order=1, phase_deg=450.0)
    assert h.phase_deg == 450.0
    assert h.phase_rad == pytest.approx(math.radians(450.0))


def test_append_next_is_dense_and_zeroed():
    hs = HarmonicSet()
    hs.append_next()
    hs.append_next()
    third = hs.append_next()
    assert [h.order for h in hs] == [1, 2, 3]
    assert third.amplitude_peak == 0.0
    assert third.phase_deg == 0.0


def test_remove_last_pops_tail():
    hs = HarmonicSet.from_peaks([1.0, 0.5])
    removed = hs.remove_last()
    assert removed.order == 2
    assert len(hs) == 1


def test_remove_last_on_empty_set_raises():
    hs = HarmonicSet()
    with pytest.raises(EmptyHarmonicSetError):
        hs.remove_last()


def test_orders_must_be_contiguous():
    with pytest.raises(ValueError):
        HarmonicSet([HarmonicComponent(order=1), HarmonicComponent(order=3)])


def test_copy_is_independent():
    hs = HarmonicSet.from_peaks([1.0])
    dup = hs.copy()
    dup[0].set_peak(4.0)
    assert hs[0].amplitude_peak == 1.0


def test_parameters_duration():
    p = SynthesisParameters(fundamental_hz=50.0, cycle_count=5.0)
    assert p.period_s == pytest.approx(0.02)
    assert p.duration_s == pytest.approx(0.1)


def test_direct_assignment_is_checked():
    h = HarmonicComponent(order=1, amplitude_peak=1.0)
    with pytest.raises(InvalidAmplitude):
        h.amplitude_peak = -2.0
    assert h.amplitude_peak == 1.0
    with pytest.raises(InvalidAmplitude):
        h.amplitude_rms = -0.5
    assert h.amplitude_rms == pytest.approx(1 / math.sqrt(2))


@pytest.mark.parametrize("order", [1.7, 0, -2, "x", True])
def test_bad_order_rejected(order):
    with pytest.raises(ValueError):
        HarmonicComponent(order=order)


def test_integral_float_order_accepted():
    h = HarmonicComponent(order=2.0)
    assert h.order == 2
    assert isinstance(h.order, int)
