from __future__ import annotations

import io
import sys
from pathlib import Path

import streamlit as st

# -------------------------------------------------
# Ensure project root importable (local reliability)
# -------------------------------------------------
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from harmonic_composer.codec.query import decode_query, encode_query  # noqa: E402
from harmonic_composer.errors import UnboundedSampleCount  # noqa: E402
from harmonic_composer.report.formatting import (  # noqa: E402
    format_crossings,
    format_metric,
    input_step,
    ordinal_suffix,
)
from harmonic_composer.report.plots import export_waveform_png, plot_waveform  # noqa: E402
from harmonic_composer.signal.metrics import compute_metrics  # noqa: E402
from harmonic_composer.signal.synthesizer import synthesize  # noqa: E402
from harmonic_composer.signal.validity import resolve_parameters  # noqa: E402

# -------------------------------------------------
# Page config + styling
# -------------------------------------------------
st.set_page_config(page_title="Harmonic Composer", layout="wide")

CUSTOM_CSS = """
<style>
.block-container {padding-top: 2.0rem; padding-bottom: 2.0rem;}
h1 {letter-spacing: -0.02em; color: navy;}
.hc-metric {font-size: 1.1rem; margin-top: 0.6rem;}
.hc-metric b {color: darkblue;}
.hr {height: 1px; background: rgba(128,128,128,0.25); margin: 1.0rem 0;}
</style>
"""
st.markdown(CUSTOM_CSS, unsafe_allow_html=True)

# -------------------------------------------------
# Hydrate from the query string once per session
# -------------------------------------------------
if "harmonics" not in st.session_state:
    f0, nc0, hs0 = decode_query({k: st.query_params.get_all(k) for k in st.query_params.keys()})
    st.session_state["harmonics"] = hs0
    st.session_state["frequency"] = f0
    st.session_state["cycles"] = nc0

harmonics = st.session_state["harmonics"]


def _sync_widget_keys():
    for h in harmonics:
        st.session_state.setdefault(f"peak_{h.order}", float(h.amplitude_peak))
        st.session_state.setdefault(f"rms_{h.order}", float(h.amplitude_rms))
        st.session_state.setdefault(f"phase_{h.order}", float(h.phase_deg))


def _on_peak(order: int):
    comp = harmonics[order - 1]
    comp.set_peak(max(0.0, float(st.session_state[f"peak_{order}"])))
    st.session_state[f"rms_{order}"] = comp.amplitude_rms


def _on_rms(order: int):
    comp = harmonics[order - 1]
    comp.set_rms(max(0.0, float(st.session_state[f"rms_{order}"])))
    st.session_state[f"peak_{order}"] = comp.amplitude_peak


def _on_phase(order: int):
    harmonics[order - 1].set_phase(float(st.session_state[f"phase_{order}"]))


def _on_add():
    harmonics.append_next()


def _on_remove():
    if len(harmonics) > 1:
        comp = harmonics.remove_last()
        for key in (f"peak_{comp.order}", f"rms_{comp.order}", f"phase_{comp.order}"):
            st.session_state.pop(key, None)


PARAMETER_KEYS = {
    "fundamental_hz": ("frequency", "Fundamental frequency"),
    "cycle_count": ("cycles", "Number of cycles"),
}
notices: list[str] = []


def _on_reset(field: str, value, fallback: float):
    # Runs before the number inputs exist, so their state can still be replaced
    key, label = PARAMETER_KEYS[field]
    st.session_state[key] = float(fallback)
    notices.append(f"{label} should be a positive number (got {value!r}); reset to {fallback:g}.")


_sync_widget_keys()

# -------------------------------------------------
# Model-update boundary (link hydration and edits alike)
# -------------------------------------------------
params = None
limit_error = None
try:
    params = resolve_parameters(st.session_state["frequency"], st.session_state["cycles"], on_reset=_on_reset)
except UnboundedSampleCount as e:
    limit_error = str(e)

# -------------------------------------------------
# Layout
# -------------------------------------------------
left, right = st.columns([1, 2], gap="large")

with left:
    st.title("Harmonic Composer")

    st.number_input(
        "Fundamental frequency (Hz)",
        key="frequency",
        step=1.0,
    )
    st.number_input(
        "Number of cycles",
        key="cycles",
        step=1.0,
    )

    for msg in notices:
        st.warning(msg)
    if limit_error:
        st.error(limit_error)

    signal = metrics = None
    if params is not None:
        signal = synthesize(params, harmonics)
        metrics = compute_metrics(signal, params.cycle_count)

        st.markdown(f'<div class="hc-metric"><b>Peak-to-peak:</b> {format_metric(metrics.peak_to_peak)}</div>', unsafe_allow_html=True)
        st.markdown(f'<div class="hc-metric"><b>RMS:</b> {format_metric(metrics.rms)}</div>', unsafe_allow_html=True)
        st.markdown(
            f'<div class="hc-metric"><b>Zero crossings (s):</b> {format_crossings(metrics.zero_crossings) or "-"}</div>',
            unsafe_allow_html=True,
        )

    st.markdown('<div class="hr"></div>', unsafe_allow_html=True)

    for h in harmonics:
        n = h.order
        freq = float(st.session_state["frequency"]) * n
        st.markdown(f"**{n}{ordinal_suffix(n)} harmonic** ({freq:g} Hz)")
        c1, c2, c3 = st.columns(3, gap="small")
        with c1:
            st.number_input(
                "Amplitude (peak)",
                key=f"peak_{n}",
                min_value=0.0,
                step=input_step(h.amplitude_peak),
                format="%g",
                on_change=_on_peak,
                args=(n,),
            )
        with c2:
            st.number_input(
                "Amplitude (RMS)",
                key=f"rms_{n}",
                min_value=0.0,
                step=input_step(h.amplitude_rms),
                format="%.3f",
                on_change=_on_rms,
                args=(n,),
            )
        with c3:
            st.number_input(
                "Phase (°)",
                key=f"phase_{n}",
                step=input_step(h.phase_deg),
                format="%g",
                on_change=_on_phase,
                args=(n,),
            )

    b1, b2 = st.columns(2, gap="small")
    with b1:
        st.button("Add harmonic", on_click=_on_add, use_container_width=True)
    with b2:
        st.button("Remove harmonic", on_click=_on_remove, disabled=len(harmonics) <= 1, use_container_width=True)

with right:
    if signal is not None and metrics is not None:
        chart = io.BytesIO()
        plot_waveform(signal, metrics, chart, title="Waveform", figsize=(9.0, 4.0))
        st.image(chart.getvalue())

        png = io.BytesIO()
        export_waveform_png(signal, metrics, params, harmonics, png, title="Waveform", figsize=(9.0, 4.0))
        st.download_button(
            "Download PNG",
            data=png.getvalue(),
            file_name="waveform.png",
            mime="image/png",
            use_container_width=True,
        )

# -------------------------------------------------
# Write the model back into the address bar
# -------------------------------------------------
st.query_params.from_dict(encode_query(st.session_state["frequency"], st.session_state["cycles"], harmonics))
