from __future__ import annotations
import numpy as np

class SirenInputError(ValueError):
    """Base class for inputs rejected before any scoring work starts."""
    pass

class InvalidDimensionsError(SirenInputError):
    """Raised when a matrix or file does not have the shape scoring needs."""
    pass

class IndexOutOfRangeError(SirenInputError, IndexError):
    """Raised when an edge refers to a gene index that does not exist."""
    pass

def validate_expression(expression) -> np.ndarray:
    """Return expression as a float (genes, conditions) array or raise InvalidDimensionsError."""
    try:
        arr = np.asarray(expression, dtype=float)
    except (TypeError, ValueError) as exc:
        # ragged nested sequences land here on current numpy
        raise InvalidDimensionsError(f"expression matrix is not rectangular numeric data: {exc}") from exc
    if arr.ndim != 2:
        raise InvalidDimensionsError(f"expression matrix must be 2-D (genes x conditions), got {arr.ndim}-D")
    if arr.shape[0] < 1:
        raise InvalidDimensionsError("expression matrix has no genes")
    if arr.shape[1] < 2:
        raise InvalidDimensionsError(
            f"expression matrix needs at least 2 conditions to place knots, got {arr.shape[1]}"
        )
    return arr

def validate_edges(edges, n_genes: int) -> np.ndarray:
    """Return edges as an int (E, 2) array of zero-based gene indices."""
    arr = np.asarray(edges)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=int)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidDimensionsError(f"edge list must have shape (E, 2), got {arr.shape}")
    try:
        as_float = arr.astype(float)
    except (TypeError, ValueError) as exc:
        raise IndexOutOfRangeError(f"edge list contains non-numeric gene indices: {exc}") from exc
    if not np.all(np.isfinite(as_float)) or np.any(as_float != np.floor(as_float)):
        raise IndexOutOfRangeError("edge list contains non-integer gene indices")
    idx = as_float.astype(int)
    bad = (idx < 0) | (idx >= n_genes)
    if bad.any():
        row = int(np.argwhere(bad)[0][0])
        raise IndexOutOfRangeError(
            f"edge {row} ({idx[row, 0]}, {idx[row, 1]}) is outside [0, {n_genes})"
        )
    return idx

def validate_weights(weights, bins: int) -> np.ndarray:
    try:
        arr = np.asarray(weights, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidDimensionsError(f"weight matrix is not rectangular numeric data: {exc}") from exc
    if arr.shape != (bins, bins):
        raise InvalidDimensionsError(f"weight matrix must be {bins} x {bins}, got {arr.shape}")
    return arr

def degenerate_genes(expression: np.ndarray) -> np.ndarray:
    """Indices of genes with fewer than 2 observed values or no spread; these standardize to NaN."""
    observed = ~np.isnan(expression)
    counts = observed.sum(axis=1)
    filled_hi = np.where(observed, expression, -np.inf).max(axis=1)
    filled_lo = np.where(observed, expression, np.inf).min(axis=1)
    flat = filled_hi == filled_lo
    return np.flatnonzero((counts < 2) | flat)
