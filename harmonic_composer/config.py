from pydantic import BaseModel, Field

class Settings(BaseModel):
    # Fixed synthesis rate; keep >= 2x the highest harmonic frequency studied
    sample_rate_hz: float = Field(50_000.0, gt=0)

    # Fallbacks used when the user enters an invalid frequency / cycle count
    default_fundamental_hz: float = Field(50.0, gt=0)
    default_cycle_count: float = Field(5.0, gt=0)

    # Upper bound on round(sample_rate * cycles / f); larger requests are rejected
    max_samples: int = Field(5_000_000, gt=0)

    # Highest harmonic index read back from a query string
    harmonic_limit: int = Field(200, ge=1)

    # Chart y-axis padding around the signal min/max
    plot_margin: float = 0.5

settings = Settings()
