from __future__ import annotations

import math
from typing import Mapping, Optional, Tuple, Union
from urllib.parse import parse_qs, urlencode

from harmonic_composer.config import settings
from harmonic_composer.model.harmonics import HarmonicComponent, HarmonicSet
from harmonic_composer.utils.logging import warn

# Key scheme:
#   f      fundamental frequency (Hz)
#   nc     number of cycles
#   a{n}   peak amplitude of harmonic n
#   ar{n}  RMS amplitude of harmonic n (used when a{n} is absent)
#   p{n}   phase of harmonic n (degrees)

QueryValue = Union[str, list, tuple]


def _first(params: Mapping[str, QueryValue], key: str) -> Optional[str]:
    raw = params.get(key)
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return str(raw[0]) if raw else None
    return str(raw)


def _parse_float(text: Optional[str]) -> Optional[float]:
    if text is None or not text.strip():
        return None
    try:
        v = float(text)
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def _number_text(x: float) -> str:
    # Shortest text that reads back to the same float; integers without ".0"
    x = float(x)
    if x.is_integer() and abs(x) < 1e15:
        return str(int(x))
    return repr(x)


def decode_query(params: Mapping[str, QueryValue]) -> Tuple[float, float, HarmonicSet]:
    """
    Rebuild (fundamental_hz, cycle_count, harmonics) from query parameters.
    Missing / zero / unparsable f and nc fall back to the configured defaults.
    Negative values are passed through so the caller's validation reports them.
    """
    f = _parse_float(_first(params, "f"))
    if not f:
        f = settings.default_fundamental_hz

    nc = _parse_float(_first(params, "nc"))
    if not nc:
        nc = settings.default_cycle_count

    components: list[HarmonicComponent] = []
    for n in range(1, settings.harmonic_limit + 1):
        a_txt = _first(params, f"a{n}")
        ar_txt = _first(params, f"ar{n}")
        p_txt = _first(params, f"p{n}")

        comp = HarmonicComponent(order=n)

        a = _parse_float(a_txt)
        ar = _parse_float(ar_txt)
        if a is not None and a < 0:
            warn(f"Ignoring negative a{n}={a_txt!r}.")
            a = None
        if ar is not None and ar < 0:
            warn(f"Ignoring negative ar{n}={ar_txt!r}.")
            ar = None
        if a_txt is not None and _parse_float(a_txt) is None:
            warn(f"Could not read a{n}={a_txt!r}; falling back to ar{n}.")

        # a{n} wins over ar{n}
        if a:
            comp.set_peak(a)
        elif ar:
            comp.set_rms(ar)

        p = _parse_float(p_txt)
        if p_txt is not None and p is None:
            warn(f"Could not read p{n}={p_txt!r}; using 0.")
        if p:
            comp.set_phase(p)

        components.append(comp)

    # Trim trailing empty harmonics; keep at least the fundamental
    while len(components) > 1 and components[-1].amplitude_peak == 0.0 and components[-1].phase_deg == 0.0:
        components.pop()

    return float(f), float(nc), HarmonicSet(components)


def encode_query(fundamental_hz: float, cycle_count: float, harmonics: HarmonicSet) -> dict[str, str]:
    """
    Inverse of decode_query. Each amplitude is written in the representation
    the user entered it in; zero amplitudes and phases are omitted.
    """
    out: dict[str, str] = {
        "f": _number_text(fundamental_hz),
        "nc": _number_text(cycle_count),
    }
    for comp in harmonics:
        n = comp.order
        if comp.entered_as == "rms":
            if comp.amplitude_rms != 0:
                out[f"ar{n}"] = _number_text(comp.amplitude_rms)
        elif comp.amplitude_peak != 0:
            out[f"a{n}"] = _number_text(comp.amplitude_peak)
        if comp.phase_deg != 0:
            out[f"p{n}"] = _number_text(comp.phase_deg)
    return out


def parse_query_string(text: str) -> dict[str, list[str]]:
    return parse_qs(text.lstrip("?"), keep_blank_values=True)


def build_query_string(params: Mapping[str, str]) -> str:
    return urlencode(params)
