from __future__ import annotations
import math
import numpy as np

def compute_quantiles(sample, bins: int) -> np.ndarray:
    """
    The k-th `bins`-quantiles of `sample` for 0 < k < bins.

    Uses one-based order statistics with linear interpolation:
    h = (N - 1) * k / bins + 1, between x[floor(h)] and x[floor(h) + 1].
    Entry 0 of the result is never computed and stays 0.0. NaN sorts last.
    """
    x = np.sort(np.asarray(sample, dtype=float))
    n = x.shape[0]
    result = np.zeros(bins, dtype=float)
    for k in range(1, bins):
        p = k / bins
        h = (n - 1) * p + 1
        floor_h = math.floor(h)
        result[k] = x[floor_h - 1] + (h - floor_h) * (x[floor_h] - x[floor_h - 1])
    return result

def compute_knots(sample, degrees_of_freedom: int, degree: int, min_x: float, max_x: float) -> np.ndarray:
    """Clamped knot vector: `degree + 1` copies of each bound around quantile interior knots."""
    interior_knot_count = degrees_of_freedom - degree
    quantiles = compute_quantiles(sample, interior_knot_count + 1)
    knots = np.zeros(interior_knot_count + 2 * (degree + 1), dtype=float)
    knots[degree:degree + interior_knot_count + 1] = quantiles
    # bounds written last; position `degree` held the uncomputed quantile 0
    knots[:degree + 1] = min_x
    knots[knots.shape[0] - degree - 1:] = max_x
    return knots
