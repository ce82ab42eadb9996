from __future__ import annotations
import math
import numpy as np

def scale_and_centre(vector) -> np.ndarray:
    """
    Z-score one gene across conditions, skipping NaN entries.

    Mean and sample variance (count - 1 denominator) come from a single-pass
    Welford accumulation over the observed values. Missing entries are passed
    through as NaN. With fewer than two observed values, or no spread, the
    result is NaN/Inf; nothing is raised.
    """
    v = np.asarray(vector, dtype=float)

    count = 0
    mean = 0.0
    m2 = 0.0
    for x in v.tolist():
        if math.isnan(x):
            continue
        count += 1
        delta = x - mean
        mean += delta / count
        m2 += delta * (x - mean)

    with np.errstate(divide="ignore", invalid="ignore"):
        variance = np.float64(m2) / (count - 1)
        sigma = np.sqrt(variance)
        out = (v - mean) / sigma
    out[np.isnan(v)] = np.nan
    return out

def standardize_matrix(matrix) -> np.ndarray:
    m = np.asarray(matrix, dtype=float)
    return np.vstack([scale_and_centre(row) for row in m]) if m.shape[0] else m.copy()
