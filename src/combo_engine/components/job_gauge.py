from dataclasses import dataclass, field


@dataclass(slots=True)
class JobGauge:
    """Job-specific resource counters keyed by gauge field name."""

    job_id: int
    values: dict[str, float] = field(default_factory=dict)
