import math
import numpy as np
import pandas as pd
import pytest

import run_siren
from siren.config import DEFAULT_WEIGHT_MATRIX
from siren.loader import (
    load_matrix, load_network, load_expression_table, load_reference_scores,
    expression_from_attributes, edges_from_table,
)
from siren.validation import InvalidDimensionsError, IndexOutOfRangeError

# scores of the rising/falling toy genes under the default weights
SELF_SCORE = 0.714606604434581
OPPOSED_SCORE = 0.348402508211877

def _write(path, text):
    path.write_text(text)
    return path

def test_load_matrix(tmp_path):
    p = _write(tmp_path / "m.txt", "1\t2\t3\n4\tNaN\t6\n")
    m = load_matrix(p)
    assert m.shape == (2, 3)
    assert np.isnan(m[1, 1])
    assert m[1, 2] == 6.0

def test_load_matrix_rejects_ragged_rows(tmp_path):
    with pytest.raises(InvalidDimensionsError):
        load_matrix(_write(tmp_path / "short.txt", "1\t2\t3\n4\t5\n"))
    with pytest.raises(InvalidDimensionsError):
        load_matrix(_write(tmp_path / "long.txt", "1\t2\n4\t5\t6\n"))

def test_load_matrix_rejects_text(tmp_path):
    with pytest.raises(InvalidDimensionsError):
        load_matrix(_write(tmp_path / "bad.txt", "1\tabc\n"))

def test_load_network_converts_one_based(tmp_path):
    p = _write(tmp_path / "net.txt", "1\t2\n3\t1\n")
    edges = load_network(p)
    assert edges.tolist() == [[0, 1], [2, 0]]
    assert load_network(p, one_based=False).tolist() == [[1, 2], [3, 1]]

def test_load_network_rejects_fractional_index(tmp_path):
    with pytest.raises(IndexOutOfRangeError):
        load_network(_write(tmp_path / "net.txt", "1.5\t2\n"))

def test_load_expression_table_follows_gene_order(tmp_path):
    p = _write(tmp_path / "expr.txt", "G2\t4\t5\t6\nG1\t1\t2\t3\nUNKNOWN\t7\t8\t9\nlonely\n")
    m = load_expression_table(p, ["G1", "G2", "G3"])
    assert m.genes == ["G1", "G2", "G3"]
    assert m.values[0].tolist() == [1.0, 2.0, 3.0]
    assert m.values[1].tolist() == [4.0, 5.0, 6.0]
    assert np.isnan(m.values[2]).all()

def test_load_matrix_rejects_empty_cell(tmp_path):
    with pytest.raises(InvalidDimensionsError):
        load_matrix(_write(tmp_path / "hole.txt", "1\t\t3\n4\t5\t6\n"))

def test_load_matrix_rejects_empty_file(tmp_path):
    with pytest.raises(InvalidDimensionsError):
        load_matrix(_write(tmp_path / "empty.txt", ""))

def test_load_expression_table_repeated_gene_keeps_last_row(tmp_path):
    p = _write(tmp_path / "expr.txt", "G1\t1\t2\t3\nG1\t7\t8\t9\n")
    m = load_expression_table(p, ["G1"])
    assert m.values[0].tolist() == [7.0, 8.0, 9.0]

def test_load_expression_table_rejects_short_gene_row(tmp_path):
    with pytest.raises(InvalidDimensionsError):
        load_expression_table(_write(tmp_path / "expr.txt", "G1\t1\t2\t3\nG2\t4\t5\n"), ["G1", "G2"])

def test_expression_from_attributes():
    nodes = pd.DataFrame({"name": ["A", "B"], "c1": [1.0, None], "c2": [2, 3], "label": ["x", "y"]})
    m = expression_from_attributes(nodes, ["c1", "c2"])
    assert m.genes == ["A", "B"]
    assert m.conditions == ["c1", "c2"]
    assert np.isnan(m.values[1, 0])
    assert m.values[1, 1] == 3.0
    with pytest.raises(InvalidDimensionsError):
        expression_from_attributes(nodes, ["c3"])

def test_edges_from_table():
    edges = pd.DataFrame({"source": ["B", "A"], "target": ["A", "A"]})
    assert edges_from_table(edges, ["A", "B"]).tolist() == [[1, 0], [0, 0]]
    with pytest.raises(IndexOutOfRangeError):
        edges_from_table(pd.DataFrame({"source": ["Z"], "target": ["A"]}), ["A", "B"])

def test_load_reference_scores_takes_fourth_field(tmp_path):
    p = _write(tmp_path / "Result.txt", "a\tb\tc\n1\t2\tx\t0.5\n1\t3\tx\t0.25\n")
    assert load_reference_scores(p).tolist() == [0.5, 0.25]

def _write_weights(path, weights):
    rows = ["\t".join(repr(float(v)) for v in row) for row in weights]
    return _write(path, "\n".join(rows) + "\n")

def _write_reference_dir(tmp_path, self_score):
    _write_weights(tmp_path / run_siren.WEIGHTS_FILE, DEFAULT_WEIGHT_MATRIX)
    _write(tmp_path / run_siren.EXPRESSION_FILE, "1\t2\t3\n3\t2\t1\n")
    _write(tmp_path / run_siren.NETWORK_FILE, "1\t1\n1\t2\n")
    _write(tmp_path / run_siren.RESULT_FILE, f"1\t1\t+\t{self_score!r}\n1\t2\t+\t{OPPOSED_SCORE!r}\n")

def test_regression_driver_requires_weight_file(tmp_path):
    _write_reference_dir(tmp_path, SELF_SCORE)
    (tmp_path / run_siren.WEIGHTS_FILE).unlink()
    with pytest.raises(FileNotFoundError):
        run_siren.main([str(tmp_path)])

def test_regression_driver_matches_reference(tmp_path, capsys):
    _write_reference_dir(tmp_path, SELF_SCORE)
    assert run_siren.main([str(tmp_path)]) == 0
    assert "0 differ" in capsys.readouterr().out

def test_regression_driver_reports_mismatch(tmp_path, capsys):
    _write_reference_dir(tmp_path, SELF_SCORE + 1e-3)
    assert run_siren.main([str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert out.startswith("0\t")

def test_regression_driver_uses_weight_file(tmp_path):
    _write_reference_dir(tmp_path, SELF_SCORE)
    ones = "\n".join("\t".join(["1"] * 10) for _ in range(10)) + "\n"
    _write(tmp_path / run_siren.WEIGHTS_FILE, ones)
    ln3 = math.log(3.0)
    _write(tmp_path / run_siren.RESULT_FILE, f"1\t1\t+\t{2.0 * ln3 / 3.0!r}\n1\t2\t+\t{ln3 / 3.0!r}\n")
    assert run_siren.main([str(tmp_path)]) == 0
