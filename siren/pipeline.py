from __future__ import annotations
import logging
from typing import Optional, Tuple
import numpy as np
import pandas as pd

from siren.config import SirenConfig, DEFAULT_WEIGHT_MATRIX, default_weight_matrix
from siren.loader import edges_from_table
from siren.model import ExpressionMatrix, SplineModel
from siren.spline.basis import compute_basis_tensor
from siren.scores.probability import compute_pa_matrix
from siren.scores.siren import score_edges
from siren.validation import (
    validate_expression, validate_edges, validate_weights, degenerate_genes, InvalidDimensionsError
)

logger = logging.getLogger(__name__)

SCORE_COLUMN = "SIREN"

def _weights_for(cfg: SirenConfig, weights) -> np.ndarray:
    if weights is None:
        if cfg.bins == DEFAULT_WEIGHT_MATRIX.shape[0]:
            return DEFAULT_WEIGHT_MATRIX
        return default_weight_matrix(cfg.bins)
    return validate_weights(weights, cfg.bins)

def _build_spline_model(expr: np.ndarray, cfg: SirenConfig) -> SplineModel:
    bad = degenerate_genes(expr)
    if bad.size:
        logger.warning(
            "%d gene(s) have fewer than 2 observed values or no variance; their bins will be NaN (first: %s)",
            bad.size, bad[:5].tolist()
        )
    basis = compute_basis_tensor(expr, cfg.degrees_of_freedom, cfg.degree)
    return SplineModel(basis=basis, pa=compute_pa_matrix(basis))

def build_spline_model(expression, cfg: Optional[SirenConfig] = None) -> SplineModel:
    """Basis tensor and marginals for every gene; inputs are validated first."""
    values = expression.values if isinstance(expression, ExpressionMatrix) else expression
    return _build_spline_model(validate_expression(values), cfg or SirenConfig())

def compute_scores(expression, edges, weights=None, cfg: Optional[SirenConfig] = None) -> np.ndarray:
    """
    SIREN score per edge, in edge order.

    `expression` is a genes x conditions array (or ExpressionMatrix) with NaN
    for missing values, `edges` an (E, 2) array of zero-based gene indices, and
    `weights` a bins x bins matrix (built-in default when None).
    """
    cfg = cfg or SirenConfig()
    values = expression.values if isinstance(expression, ExpressionMatrix) else expression
    expr = validate_expression(values)
    idx = validate_edges(edges, expr.shape[0])
    w = _weights_for(cfg, weights)

    logger.info(
        "Computing SIREN scores for %d interactions, %d genes, and %d conditions",
        idx.shape[0], expr.shape[0], expr.shape[1]
    )
    model = _build_spline_model(expr, cfg)
    return score_edges(model.basis, model.pa, idx, w)

def score_network(expression: ExpressionMatrix, edge_table: pd.DataFrame, source: str = "source",
                  target: str = "target", weights=None, cfg: Optional[SirenConfig] = None) -> pd.DataFrame:
    """
    Score a host edge table whose `source`/`target` columns hold gene identifiers.

    Returns a copy of the table with a float "SIREN" column, one value per row.
    """
    if expression.genes is None:
        raise InvalidDimensionsError("score_network needs an ExpressionMatrix with gene identifiers")
    idx = edges_from_table(edge_table, expression.genes, source=source, target=target)
    scores = compute_scores(expression, idx, weights=weights, cfg=cfg)
    return attach_scores(edge_table, scores)

def attach_scores(edge_table: pd.DataFrame, scores: np.ndarray, column: str = SCORE_COLUMN) -> pd.DataFrame:
    if len(edge_table) != len(scores):
        raise InvalidDimensionsError(
            f"{len(scores)} scores for an edge table with {len(edge_table)} rows"
        )
    out = edge_table.copy()
    out[column] = np.asarray(scores, dtype=float)
    return out

def find_mismatches(scores, reference, tol: float = 1e-7) -> Tuple[np.ndarray, np.ndarray]:
    """Indices of edges whose score differs from `reference` by more than `tol`, with the differences."""
    s = np.asarray(scores, dtype=float)
    r = np.asarray(reference, dtype=float)
    if s.shape != r.shape:
        raise InvalidDimensionsError(f"{s.shape[0]} scores but {r.shape[0]} reference values")
    diff = s - r
    # NaN differences are mismatches too
    bad = ~(np.abs(diff) <= tol)
    return np.flatnonzero(bad), diff[bad]
