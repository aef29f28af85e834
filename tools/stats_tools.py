"""Statistical helpers — rounding, safe means and descriptive statistics.

Numbers from these helpers back every percentage the dashboards show, so
rounding follows one rule everywhere: half-up, at a precision chosen by the
caller.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

import numpy as np


def round_to(value: float, precision: int | None) -> int | float:
    """Round half-up to ``precision`` decimals.

    ``precision=0`` returns an ``int``; ``None`` returns the value unchanged.
    Non-finite values (``inf``, ``nan``) round to 0.
    """
    if precision is None:
        return value
    if not math.isfinite(value):
        return 0
    quantum = Decimal(1).scaleb(-precision)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if precision <= 0:
        return int(rounded)
    return float(rounded)


def safe_mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty input."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def percentage(part: float, whole: float) -> float:
    """``part / whole * 100``, 0.0 when ``whole`` is zero."""
    if not whole:
        return 0.0
    return part / whole * 100


def calculate_stats(data: list[float | int], metrics: list[str] | None = None) -> dict:
    """Calculate descriptive statistics for a numeric dataset.

    Args:
        data: List of numeric values (e.g. best quiz scores).
        metrics: Which metrics to compute. Defaults to all.
            Supported: mean, median, stddev, min, max, percentiles, distribution.

    Returns:
        Dictionary of computed metric results. ``{"count": 0}`` for empty data.
    """
    if not data:
        return {"count": 0}

    arr = np.array(data, dtype=float)
    all_metrics = metrics or ["mean", "median", "stddev", "min", "max", "percentiles", "distribution"]

    result: dict[str, Any] = {"count": len(data)}

    if "mean" in all_metrics:
        result["mean"] = round_to(float(np.mean(arr)), 2)
    if "median" in all_metrics:
        result["median"] = round_to(float(np.median(arr)), 2)
    if "stddev" in all_metrics:
        result["stddev"] = round_to(float(np.std(arr, ddof=1)) if len(arr) > 1 else 0.0, 2)
    if "min" in all_metrics:
        result["min"] = round_to(float(np.min(arr)), 2)
    if "max" in all_metrics:
        result["max"] = round_to(float(np.max(arr)), 2)
    if "percentiles" in all_metrics:
        result["percentiles"] = {
            "p25": round_to(float(np.percentile(arr, 25)), 2),
            "p50": round_to(float(np.percentile(arr, 50)), 2),
            "p75": round_to(float(np.percentile(arr, 75)), 2),
            "p90": round_to(float(np.percentile(arr, 90)), 2),
        }
    if "distribution" in all_metrics:
        bins = [0, 40, 50, 60, 70, 80, 90, 100]
        labels = ["0-39", "40-49", "50-59", "60-69", "70-79", "80-89", "90-100"]
        # Bonus points can push a score past 100; keep it in the top bucket
        counts, _ = np.histogram(np.clip(arr, 0, 100), bins=bins)
        result["distribution"] = {
            "labels": labels,
            "counts": [int(c) for c in counts],
        }

    return result
