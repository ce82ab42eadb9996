from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import numpy as np

@dataclass(frozen=True)
class ExpressionMatrix:
    """Expression values for one scoring run; NaN marks a missing measurement."""
    values: np.ndarray                     # genes x conditions
    genes: Optional[List[str]] = None      # row identifiers, same order as values
    conditions: Optional[List[str]] = None # column identifiers

@dataclass(frozen=True)
class SplineModel:
    """Per-run spline state: the basis tensor and the marginals derived from it."""
    basis: np.ndarray        # (genes, bins, conditions)
    pa: np.ndarray           # (genes, bins)
