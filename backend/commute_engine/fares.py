from __future__ import annotations

import math

from .settings import settings


def driving_fare(
    distance_km: float,
    *,
    base_fare: float | None = None,
    per_km: float | None = None,
    free_km: float | None = None,
) -> int:
    """Flat base fare covering the first ``free_km``, then a per-km rate, rounded up."""
    base = settings.fare_base if base_fare is None else base_fare
    rate = settings.fare_per_km if per_km is None else per_km
    free = settings.fare_free_km if free_km is None else free_km
    return int(math.ceil(base + max(0.0, (float(distance_km) - free) * rate)))
