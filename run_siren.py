from __future__ import annotations
import logging
import sys
from pathlib import Path

from siren.config import SirenConfig
from siren.loader import load_matrix, load_network, load_reference_scores
from siren.pipeline import compute_scores, find_mismatches

WEIGHTS_FILE = "Weighting_Matrix.txt"
EXPRESSION_FILE = "Expression_Format.txt"
NETWORK_FILE = "Network_Format.txt"
RESULT_FILE = "Result.txt"

def main(argv=None) -> int:
    """Score the reference network in a data directory and report edges that disagree with Result.txt."""
    argv = sys.argv[1:] if argv is None else argv
    data_dir = Path(argv[0]) if argv else Path(".")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    cfg = SirenConfig(degrees_of_freedom=10, degree=2)

    # Result.txt was produced with a specific weight table; the built-in default would not match it
    weights_path = data_dir / WEIGHTS_FILE
    if not weights_path.exists():
        raise FileNotFoundError(f"{weights_path} is required to compare against {RESULT_FILE}")
    weights = load_matrix(weights_path)
    expression = load_matrix(data_dir / EXPRESSION_FILE)
    edges = load_network(data_dir / NETWORK_FILE, one_based=True)

    scores = compute_scores(expression, edges, weights=weights, cfg=cfg)
    reference = load_reference_scores(data_dir / RESULT_FILE)
    bad, diffs = find_mismatches(scores, reference, tol=1e-7)

    for i, d in zip(bad, diffs):
        print(f"{i}\t{d:g}")
    print(f"Scored {len(scores)} edges; {len(bad)} differ from {RESULT_FILE} by more than 1e-7")
    return 1 if len(bad) else 0

if __name__ == "__main__":
    sys.exit(main())
