from __future__ import annotations


class ParameterError(ValueError):
    """A user-editable parameter is outside the domain the engine accepts."""

    def __init__(self, field: str, value, message: str):
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidFrequency(ParameterError):
    def __init__(self, value):
        super().__init__("fundamental_hz", value, f"Fundamental frequency should be a positive number (got {value!r}).")


class InvalidCycleCount(ParameterError):
    def __init__(self, value):
        super().__init__("cycle_count", value, f"Number of cycles should be a positive number (got {value!r}).")


class UnboundedSampleCount(ParameterError):
    def __init__(self, value: int, limit: int):
        super().__init__(
            "sample_count",
            value,
            f"Derived sample count {value:,} exceeds the limit of {limit:,}; "
            "raise the frequency or lower the number of cycles.",
        )
        self.limit = limit


class InvalidAmplitude(ParameterError):
    def __init__(self, value):
        super().__init__("amplitude_peak", value, f"Amplitude must be a non-negative number (got {value!r}).")


class EmptyHarmonicSetError(IndexError):
    """remove_last() was called on a set with no components."""
