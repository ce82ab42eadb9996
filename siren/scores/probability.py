from __future__ import annotations
import numpy as np

def compute_pa_matrix(basis_tensor: np.ndarray) -> np.ndarray:
    """Marginal bin probabilities, (genes, bins). Any NaN basis value poisons its entry."""
    b = np.asarray(basis_tensor, dtype=float)
    return b.sum(axis=2) / b.shape[2]

def compute_pab_matrix(basis_a: np.ndarray, basis_b: np.ndarray) -> np.ndarray:
    """Joint bin probabilities of two genes, (bins, bins): mean over conditions of a[x] * b[y]."""
    a = np.asarray(basis_a, dtype=float)
    b = np.asarray(basis_b, dtype=float)
    return (a @ b.T) / a.shape[1]
