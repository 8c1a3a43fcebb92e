from dataclasses import dataclass


@dataclass(slots=True)
class Job:
    """Current job id and level of an actor."""

    job_id: int
    level: int = 1
