"""Timeline assembly: canonical checkpoints and sampled series."""

from __future__ import annotations

import numpy as np

from impact_timeline.config import ImpactConfig
from impact_timeline.models import ExposureSet, ImmediateEffects, Timeline, TimelineSnapshot
from impact_timeline.projection import DAY, HOUR, MONTH, WEEK, project_at

APPROACH_OFFSET = -0.5

CHECKPOINT_OFFSETS: dict[str, float] = {
    "t0": 0.0,
    "t1_hour": HOUR,
    "t24_hours": DAY,
    "t1_week": WEEK,
    "t1_month": MONTH,
    "t1_year": 1.0,
    "t10_years": 10.0,
}


def build_timeline(
    effects: ImmediateEffects,
    exposure: ExposureSet,
    config: ImpactConfig | None = None,
) -> Timeline:
    """Evaluate the projector at the approach and every canonical checkpoint."""
    config = config or ImpactConfig()
    snapshots = {
        name: project_at(effects, exposure, offset, config)
        for name, offset in CHECKPOINT_OFFSETS.items()
    }
    return Timeline(
        approach=project_at(effects, exposure, APPROACH_OFFSET, config),
        **snapshots,
    )


def sample_times(
    start: float = APPROACH_OFFSET,
    stop: float = 50.0,
    num: int = 200,
    log_spaced: bool = False,
) -> list[float]:
    """Time offsets for scrubbing through a timeline.

    With *log_spaced*, post-impact offsets are spread geometrically from one
    hour to *stop* so the first days get as much resolution as the decades;
    a single pre-impact offset is kept when *start* is negative.
    """
    if num < 2:
        raise ValueError("num must be at least 2")
    if stop <= start:
        raise ValueError("stop must be greater than start")

    if not log_spaced:
        return [float(t) for t in np.linspace(start, stop, num)]

    times: list[float] = []
    if start < 0:
        times.append(start)
    if start <= 0:
        times.append(0.0)
        lower = HOUR
    else:
        lower = start
    times.extend(float(t) for t in np.geomspace(lower, stop, num - len(times)))
    return times


def sample_series(
    effects: ImmediateEffects,
    exposure: ExposureSet,
    start: float = APPROACH_OFFSET,
    stop: float = 50.0,
    num: int = 200,
    log_spaced: bool = False,
    config: ImpactConfig | None = None,
) -> list[TimelineSnapshot]:
    """Project a series of snapshots across [start, stop]."""
    config = config or ImpactConfig()
    return [
        project_at(effects, exposure, t, config)
        for t in sample_times(start, stop, num, log_spaced)
    ]
