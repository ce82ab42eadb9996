"""
B-spline basis evaluation (Cox-de Boor) for SIREN soft binning.

Each gene's standardized expression is mapped onto `degrees_of_freedom` basis
functions built on quantile knots. The basis values of a sample point act as
fractional bin memberships.

The recursion B(d, j) = alpha1 * B(d-1, j) + alpha2 * B(d-1, j+1) is filled in
bottom-up, one degree level at a time, for every basis index at once. B(d, j)
depends only on (d, j), so the table reproduces the recursive definition value
for value.

Boundary handling matches the R `bs()` lineage the scores were calibrated on:

* at every level d, a point equal to the last knot is NaN for basis j when
  j > dof - d and the knot at dof + d - 2 equals the last knot;
* otherwise the last basis is forced to 1 at the sample maximum.

Both tests use exact float equality.
"""
from __future__ import annotations
import logging
import numpy as np

from siren.spline.knots import compute_knots
from siren.spline.standardize import scale_and_centre

logger = logging.getLogger(__name__)

def _has_multiple_outer_bound(knots: np.ndarray, degrees_of_freedom: int, degree: int) -> bool:
    return bool(knots[-1] == knots[degrees_of_freedom + degree - 2])

def _boundary_nan_mask(x: np.ndarray, knots: np.ndarray, degrees_of_freedom: int, d: int, n_rows: int) -> np.ndarray:
    """(n_rows, len(x)) mask of basis values that are NaN at level d."""
    mask = np.zeros((n_rows, x.shape[0]), dtype=bool)
    if not _has_multiple_outer_bound(knots, degrees_of_freedom, d):
        return mask
    rows = np.arange(n_rows) > degrees_of_freedom - d
    mask[np.ix_(rows, x == knots[-1])] = True
    return mask

def compute_basis_table(x, degrees_of_freedom: int, degree: int, knots) -> np.ndarray:
    """
    All degree-`degree` basis functions on `knots`, evaluated at `x`.

    Returns an array of shape (len(knots) - degree - 1, len(x)); row j is
    basis j, including the intercept at j = 0.
    """
    x = np.asarray(x, dtype=float)
    t = np.asarray(knots, dtype=float)
    n_knots = t.shape[0]

    # degree 0: indicator of the half-open span [t_j, t_j+1)
    n_rows = n_knots - 1
    lo = t[:n_rows, None]
    hi = t[1:n_rows + 1, None]
    table = ((x[None, :] >= lo) & (x[None, :] < hi)).astype(float)
    table[_boundary_nan_mask(x, t, degrees_of_freedom, 0, n_rows)] = np.nan

    for d in range(1, degree + 1):
        n_rows = n_knots - 1 - d
        t_j = t[:n_rows, None]
        t_j1 = t[1:n_rows + 1, None]
        t_jd = t[d:d + n_rows, None]
        t_jd1 = t[d + 1:d + 1 + n_rows, None]

        den1 = t_jd - t_j
        den2 = t_jd1 - t_j1
        with np.errstate(divide="ignore", invalid="ignore"):
            alpha1 = np.where(den1 == 0, 0.0, (x[None, :] - t_j) / den1)
            alpha2 = np.where(den2 == 0, 0.0, (t_jd1 - x[None, :]) / den2)
            level = alpha1 * table[:n_rows] + alpha2 * table[1:n_rows + 1]
        level[_boundary_nan_mask(x, t, degrees_of_freedom, d, n_rows)] = np.nan
        table = level

    return table

def compute_bspline_basis(x, degrees_of_freedom: int, degree: int) -> np.ndarray:
    """(degrees_of_freedom, len(x)) basis matrix for one standardized gene, intercept dropped."""
    x = np.asarray(x, dtype=float)
    # np.min/np.max propagate NaN, so one missing value leaves NaN bounds
    min_x = float(np.min(x))
    max_x = float(np.max(x))

    knots = compute_knots(x, degrees_of_freedom, degree, min_x, max_x)
    table = compute_basis_table(x, degrees_of_freedom, degree, knots)
    result = table[1:degrees_of_freedom + 1].copy()

    if not bool(max_x == knots[degrees_of_freedom + degree - 2]):
        result[-1, x == max_x] = 1.0
    return result

def compute_basis_tensor(expression, degrees_of_freedom: int, degree: int) -> np.ndarray:
    """Standardize each gene and stack its basis matrix into a (genes, bins, conditions) tensor."""
    expr = np.asarray(expression, dtype=float)
    n_genes, n_conditions = expr.shape
    tensor = np.empty((n_genes, degrees_of_freedom, n_conditions), dtype=float)
    for g in range(n_genes):
        tensor[g] = compute_bspline_basis(scale_and_centre(expr[g]), degrees_of_freedom, degree)
    logger.debug("Built basis tensor %s", tensor.shape)
    return tensor
