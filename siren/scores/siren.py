from __future__ import annotations
import logging
import numpy as np

from siren.scores.probability import compute_pab_matrix

logger = logging.getLogger(__name__)

def score_edge(basis_a: np.ndarray, basis_b: np.ndarray, pa_a: np.ndarray, pa_b: np.ndarray,
               weights: np.ndarray) -> float:
    """
    SIREN score of one gene pair.

    Sums Pab * W * log(Pab / Pa / Pb) over the bin pairs where the log ratio is
    strictly positive. NaN ratios (empty bins, missing data) add nothing.
    """
    pab = compute_pab_matrix(basis_a, basis_b)
    with np.errstate(divide="ignore", invalid="ignore"):
        term = np.log(pab / pa_a[:, None] / pa_b[None, :])
        keep = term > 0
        contrib = np.where(keep, pab * weights * term, 0.0)
    return float(contrib.sum())

def score_edges(basis_tensor: np.ndarray, pa: np.ndarray, edges: np.ndarray, weights: np.ndarray) -> np.ndarray:
    out = np.zeros(edges.shape[0], dtype=float)
    for i, (gene_a, gene_b) in enumerate(edges):
        out[i] = score_edge(basis_tensor[gene_a], basis_tensor[gene_b], pa[gene_a], pa[gene_b], weights)
    n_bad = int((~np.isfinite(out)).sum())
    if n_bad:
        logger.warning("%d of %d edges have a non-finite SIREN score", n_bad, out.shape[0])
    return out
