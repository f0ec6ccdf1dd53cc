from __future__ import annotations

import math
from typing import Iterable


def exponent(x: float) -> int:
    """Decimal exponent of x (0 for 0)."""
    x = float(x)
    if x == 0 or not math.isfinite(x):
        return 0
    return int(math.floor(math.log10(abs(x))))


def _trim(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_exponential(x: float, precision: int = 3) -> str:
    """
    Exponential notation with `precision` significant digits and no padding:
    0.0001234 -> '1.23e-4', 70710.0 -> '7.07e+4'.
    """
    mantissa, exp = f"{float(x):.{max(precision, 1) - 1}e}".split("e")
    e = int(exp)
    return f"{_trim(mantissa)}e{'+' if e >= 0 else '-'}{abs(e)}"


def format_metric(x: float) -> str:
    """RMS / peak-to-peak display: exponential outside 1e-3..1e3, else 2 decimals."""
    e = exponent(x)
    if e <= -3 or e >= 3:
        return format_exponential(x, 3)
    return _trim(f"{float(x):.2f}")


def format_time(t: float) -> str:
    e = exponent(t)
    if e <= -4 or e >= 4:
        return format_exponential(t, 3)
    return _trim(f"{float(t):.3f}")


def format_crossings(times: Iterable[float]) -> str:
    return " | ".join(format_time(t) for t in times)


def input_step(value: float) -> float:
    """Spin-box step matching the decimals already typed (at most 3)."""
    text = repr(float(value))
    if "e" in text:
        decimals = 3
    else:
        frac = text.split(".")[1] if "." in text else ""
        decimals = 0 if frac == "0" else min(len(frac), 3)
    return 1.0 / (10 ** decimals)


def ordinal_suffix(n: int) -> str:
    if n % 10 == 1 and n % 100 != 11:
        return "st"
    if n % 10 == 2 and n % 100 != 12:
        return "nd"
    if n % 10 == 3 and n % 100 != 13:
        return "rd"
    return "th"
