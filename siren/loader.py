from __future__ import annotations
import logging
from pathlib import Path
from typing import Sequence, Union
import numpy as np
import pandas as pd

from siren.model import ExpressionMatrix
from siren.validation import InvalidDimensionsError, IndexOutOfRangeError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

def _read_tsv(path: PathLike, **kwargs) -> pd.DataFrame:
    """Headerless tab-separated table of raw strings; short rows come back padded with NaN."""
    try:
        return pd.read_csv(path, sep="\t", header=None, dtype=str, keep_default_na=False, **kwargs)
    except pd.errors.ParserError as exc:
        raise InvalidDimensionsError(f"{path}: rows are not rectangular ({exc})") from exc
    except pd.errors.EmptyDataError as exc:
        raise InvalidDimensionsError(f"{path}: no rows") from exc

def _to_float(raw: pd.DataFrame, path: PathLike) -> np.ndarray:
    try:
        return raw.astype(float).to_numpy()
    except ValueError as exc:
        raise InvalidDimensionsError(f"{path}: non-numeric value ({exc})") from exc

def load_matrix(path: PathLike) -> np.ndarray:
    """Headerless tab-separated numeric matrix; every row must have as many fields as the first."""
    raw = _read_tsv(path)
    short = raw.isna().any(axis=1).to_numpy()
    if short.any():
        row = int(np.flatnonzero(short)[0])
        raise InvalidDimensionsError(f"{path}: row {row + 1} has fewer than {raw.shape[1]} fields")
    return _to_float(raw, path)

def load_network(path: PathLike, one_based: bool = True) -> np.ndarray:
    """(E, 2) zero-based gene index pairs from the first two columns of a network file."""
    m = load_matrix(path)
    if m.shape[1] < 2:
        raise InvalidDimensionsError(f"{path}: network rows need 2 gene indices, got {m.shape[1]} field(s)")
    pairs = m[:, :2]
    if np.any(pairs != np.floor(pairs)):
        raise IndexOutOfRangeError(f"{path}: gene indices must be integers")
    idx = pairs.astype(int)
    if one_based:
        idx = idx - 1
    logger.debug("Loaded %d edges from %s", idx.shape[0], path)
    return idx

def load_expression_table(path: PathLike, gene_ids: Sequence[str]) -> ExpressionMatrix:
    """
    Expression rows keyed by gene identifier (first column), arranged in `gene_ids` order.

    Genes missing from the file get an all-NaN row. Rows naming an unknown gene,
    or with no values, are skipped; a repeated gene keeps its last row. The
    condition count is taken from the first row.
    """
    raw = _read_tsv(path, index_col=0)
    raw = raw[~raw.isna().all(axis=1)]
    raw = raw[~raw.index.duplicated(keep="last")]

    ids = [str(g) for g in gene_ids]
    matched = raw.reindex(ids)
    found = matched.index.isin(raw.index)
    partial = found & matched.isna().any(axis=1).to_numpy()
    if partial.any():
        gene = ids[int(np.flatnonzero(partial)[0])]
        raise InvalidDimensionsError(f"{path}: gene {gene} has fewer than {raw.shape[1]} values")

    values = _to_float(matched, path)
    logger.info("Matched %d of %d genes in %s", int(found.sum()), len(ids), path)
    return ExpressionMatrix(values=values, genes=ids)

def expression_from_attributes(node_table: pd.DataFrame, columns: Sequence[str],
                               id_column: str = "name") -> ExpressionMatrix:
    """Expression matrix from numeric node-attribute columns; empty cells become NaN."""
    missing = [c for c in columns if c not in node_table.columns]
    if missing:
        raise InvalidDimensionsError(f"node table has no column(s) {missing}")
    values = node_table[list(columns)].apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)
    genes = node_table[id_column].astype(str).tolist() if id_column in node_table.columns else None
    return ExpressionMatrix(values=values, genes=genes, conditions=list(columns))

def edges_from_table(edge_table: pd.DataFrame, node_ids: Sequence[str], source: str = "source",
                     target: str = "target") -> np.ndarray:
    """Zero-based (E, 2) index pairs for the `source`/`target` identifiers of a host edge table."""
    index = {str(n): i for i, n in enumerate(node_ids)}
    out = np.zeros((len(edge_table), 2), dtype=int)
    for i, (a, b) in enumerate(zip(edge_table[source].astype(str), edge_table[target].astype(str))):
        if a not in index or b not in index:
            raise IndexOutOfRangeError(f"edge {i} ({a}, {b}) names a gene with no expression row")
        out[i] = (index[a], index[b])
    return out

def load_reference_scores(path: PathLike) -> np.ndarray:
    """Scores from a reference result file: 4th field of every row that has exactly 4 fields."""
    # row widths vary in these files, so they are split line by line
    with open(path, "r") as fh:
        rows = [line.rstrip("\r\n").split("\t") for line in fh]
    return np.asarray([float(f[3]) for f in rows if len(f) == 4], dtype=float)
