from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.table import Table

from harmonic_composer.codec.query import build_query_string, decode_query, encode_query, parse_query_string
from harmonic_composer.config import settings
from harmonic_composer.errors import ParameterError
from harmonic_composer.model.harmonics import HarmonicSet, SynthesisParameters
from harmonic_composer.report.formatting import format_crossings, format_metric
from harmonic_composer.report.plots import export_waveform_png
from harmonic_composer.signal.metrics import SignalMetrics, compute_metrics
from harmonic_composer.signal.synthesizer import SampledSignal, synthesize
from harmonic_composer.signal.validity import resolve_parameters
from harmonic_composer.utils.logging import console, error, info

app = typer.Typer(add_completion=False)


@dataclass
class PipelineResult:
    params: SynthesisParameters
    harmonics: HarmonicSet
    signal: SampledSignal
    metrics: SignalMetrics
    png_path: Optional[str] = None
    csv_path: Optional[str] = None

    @property
    def query(self) -> str:
        return build_query_string(encode_query(self.params.fundamental_hz, self.params.cycle_count, self.harmonics))


# -------------------------
# Helpers
# -------------------------
def parse_harmonic_specs(specs: Sequence[str]) -> HarmonicSet:
    """
    One entry per harmonic, in order: 'PEAK[@PHASE]' or 'rms:VALUE[@PHASE]'.
    e.g. ['1', '0.3@90', 'rms:0.1@180']
    """
    hs = HarmonicSet()
    for raw in specs:
        text = raw.strip()
        amp_txt, _, phase_txt = text.partition("@")
        comp = hs.append_next()
        try:
            if amp_txt.lower().startswith("rms:"):
                comp.set_rms(float(amp_txt[4:]))
            else:
                comp.set_peak(float(amp_txt))
            if phase_txt:
                comp.set_phase(float(phase_txt))
        except ValueError as e:
            if isinstance(e, ParameterError):
                raise
            raise typer.BadParameter(f"Cannot parse harmonic {raw!r} (expected PEAK[@PHASE] or rms:VALUE[@PHASE]).")
    return hs


def _metrics_table(result: PipelineResult) -> Table:
    table = Table(title="Waveform metrics", show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Fundamental (Hz)", f"{result.params.fundamental_hz:g}")
    table.add_row("Cycles", f"{result.params.cycle_count:g}")
    table.add_row("Samples", f"{len(result.signal):,}")
    table.add_row("RMS", format_metric(result.metrics.rms))
    table.add_row("Peak-to-peak", format_metric(result.metrics.peak_to_peak))
    table.add_row("Zero crossings (s)", format_crossings(result.metrics.zero_crossings) or "-")
    return table


def run_pipeline(
    fundamental_hz: float,
    cycle_count: float,
    harmonics: HarmonicSet,
    out_dir: Optional[str] = None,
    write_png: bool = False,
    write_csv: bool = False,
) -> PipelineResult:
    """
    Resolve parameters -> synthesize -> metrics -> optional exports.
    Invalid frequency / cycle count are replaced by defaults (with a warning);
    UnboundedSampleCount propagates.
    """
    params = resolve_parameters(fundamental_hz, cycle_count)
    signal = synthesize(params, harmonics)
    metrics = compute_metrics(signal, params.cycle_count)

    result = PipelineResult(params=params, harmonics=harmonics, signal=signal, metrics=metrics)

    if (write_png or write_csv) and out_dir:
        out_dir_p = Path(out_dir)
        out_dir_p.mkdir(parents=True, exist_ok=True)

        if write_png:
            png = out_dir_p / "waveform.png"
            export_waveform_png(signal, metrics, params, harmonics, png)
            result.png_path = str(png)

        if write_csv:
            csv = out_dir_p / "waveform.csv"
            signal.to_frame().to_csv(csv, index=False)
            result.csv_path = str(csv)

    return result


def _load_model(
    frequency: Optional[float],
    cycles: Optional[float],
    harmonic: Optional[List[str]],
    query: Optional[str],
):
    if query:
        f, nc, hs = decode_query(parse_query_string(query))
    else:
        f, nc, hs = settings.default_fundamental_hz, settings.default_cycle_count, HarmonicSet()
        hs.append_next()

    if frequency is not None:
        f = frequency
    if cycles is not None:
        nc = cycles
    if harmonic:
        hs = parse_harmonic_specs(harmonic)
    return f, nc, hs


# -------------------------
# Typer CLI wrapper
# -------------------------
@app.command()
def run(
    frequency: Optional[float] = typer.Option(None, "--frequency", "-f", help="Fundamental frequency (Hz)"),
    cycles: Optional[float] = typer.Option(None, "--cycles", "-n", help="Number of fundamental cycles"),
    harmonic: Optional[List[str]] = typer.Option(
        None, "--harmonic", "-H", help="Harmonic in order: PEAK[@PHASE] or rms:VALUE[@PHASE] (repeatable)"
    ),
    query: Optional[str] = typer.Option(None, help="Query string (f, nc, a{n}, ar{n}, p{n}) to start from"),
    out_dir: str = typer.Option("data/outputs", help="Output folder"),
    png: bool = typer.Option(False, "--png/--no-png", help="Export chart + parameter summary as PNG"),
    csv: bool = typer.Option(False, "--csv/--no-csv", help="Export the sampled series as CSV"),
):
    """Synthesize the waveform and print its metrics."""
    try:
        f, nc, hs = _load_model(frequency, cycles, harmonic, query)
        result = run_pipeline(f, nc, hs, out_dir=out_dir, write_png=png, write_csv=csv)
    except ParameterError as e:
        error(str(e))
        raise typer.Exit(code=1)

    console.print(_metrics_table(result))
    if result.png_path:
        info(f"Chart exported: {result.png_path}")
    if result.csv_path:
        info(f"Series exported: {result.csv_path}")
    info(f"Link: ?{result.query}")


@app.command()
def link(
    frequency: Optional[float] = typer.Option(None, "--frequency", "-f", help="Fundamental frequency (Hz)"),
    cycles: Optional[float] = typer.Option(None, "--cycles", "-n", help="Number of fundamental cycles"),
    harmonic: Optional[List[str]] = typer.Option(
        None, "--harmonic", "-H", help="Harmonic in order: PEAK[@PHASE] or rms:VALUE[@PHASE] (repeatable)"
    ),
):
    """Print the query string that reproduces this waveform."""
    try:
        f, nc, hs = _load_model(frequency, cycles, harmonic, None)
        params = resolve_parameters(f, nc)
    except ParameterError as e:
        error(str(e))
        raise typer.Exit(code=1)
    typer.echo("?" + build_query_string(encode_query(params.fundamental_hz, params.cycle_count, hs)))


if __name__ == "__main__":
    app()
