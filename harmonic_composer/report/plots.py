from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Union

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

from harmonic_composer.config import settings
from harmonic_composer.model.harmonics import HarmonicSet, SynthesisParameters
from harmonic_composer.report.formatting import format_exponential, format_time
from harmonic_composer.signal.metrics import SignalMetrics
from harmonic_composer.signal.synthesizer import SampledSignal

Target = Union[str, Path, BinaryIO]

ANGLE = "∠"
DEGREE = "°"


def _prepare(out: Target) -> Target:
    if isinstance(out, (str, Path)):
        Path(out).parent.mkdir(parents=True, exist_ok=True)
        return str(out)
    return out


def _time_tick(x, _pos=None) -> str:
    return format_time(x)


def _draw_waveform(ax, signal: SampledSignal, metrics: SignalMetrics, title: str):
    ax.plot(signal.time, signal.amplitude, linewidth=1.6)
    ax.set_title(title, fontsize=11, pad=10)
    ax.set_xlabel("Time (s)", fontsize=9)
    ax.set_ylabel("Amplitude", fontsize=9)

    if len(signal) > 1:
        ax.set_xlim(float(signal.time[0]), float(signal.time[-1]))
        ax.set_ylim(metrics.minimum - settings.plot_margin, metrics.maximum + settings.plot_margin)

    ax.xaxis.set_major_locator(mticker.MaxNLocator(nbins=6))
    ax.xaxis.set_major_formatter(mticker.FuncFormatter(_time_tick))
    ax.tick_params(axis="both", labelsize=8)
    ax.grid(True, alpha=0.25)


def plot_waveform(
    signal: SampledSignal,
    metrics: SignalMetrics,
    out: Target,
    title: str = "Waveform",
    figsize: tuple[float, float] = (6.6, 2.6),
    dpi: int = 160,
):
    """
    Compact time/amplitude chart.
    Y-range is the signal min/max padded by settings.plot_margin.
    """
    out = _prepare(out)

    fig = plt.figure(figsize=figsize, dpi=dpi)
    ax = fig.add_subplot(111)
    _draw_waveform(ax, signal, metrics, title)

    plt.tight_layout()
    fig.savefig(out, bbox_inches="tight", format="png")
    plt.close(fig)


def summary_lines(params: SynthesisParameters, harmonics: HarmonicSet) -> list[str]:
    """Text block printed under an exported chart (RMS amplitude per harmonic)."""
    lines = [
        f"Fundamental Frequency: {params.fundamental_hz:g} Hz",
        f"Number of Cycles: {params.cycle_count:g}",
    ]
    for h in harmonics:
        if h.amplitude_peak == 0:
            continue
        lines.append(
            f"Harmonic {h.order}: {format_exponential(h.amplitude_rms, 4)} {ANGLE} {h.phase_deg:g}{DEGREE}"
        )
    return lines


def export_waveform_png(
    signal: SampledSignal,
    metrics: SignalMetrics,
    params: SynthesisParameters,
    harmonics: HarmonicSet,
    out: Target,
    title: str = "Waveform",
    figsize: tuple[float, float] = (6.6, 2.6),
    dpi: int = 160,
):
    """Chart plus the parameter summary below it, on a white background."""
    out = _prepare(out)

    lines = summary_lines(params, harmonics)
    line_in = 0.22
    width, chart_h = figsize
    total_h = chart_h + line_in * (len(lines) + 1)

    fig = plt.figure(figsize=(width, total_h), dpi=dpi, facecolor="white")
    chart_frac = chart_h / total_h
    ax = fig.add_axes((0.1, 1.0 - chart_frac + 0.08 * chart_frac, 0.85, 0.78 * chart_frac))
    _draw_waveform(ax, signal, metrics, title)

    y = 1.0 - chart_frac - (line_in / total_h) * 0.5
    for line in lines:
        fig.text(0.02, y, line, fontsize=8, color="black", va="top")
        y -= line_in / total_h

    fig.savefig(out, facecolor="white", format="png")
    plt.close(fig)
