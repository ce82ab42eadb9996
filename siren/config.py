from dataclasses import dataclass
import numpy as np

from siren.validation import InvalidDimensionsError

@dataclass(frozen=True)
class SirenConfig:
    """Spline parameters shared by every gene in one scoring run."""
    degrees_of_freedom: int = 10
    degree: int = 2

    def __post_init__(self):
        if self.degree < 0:
            raise InvalidDimensionsError(f"degree must be >= 0, got {self.degree}")
        if self.degrees_of_freedom <= self.degree:
            raise InvalidDimensionsError(
                f"degrees_of_freedom ({self.degrees_of_freedom}) must exceed degree ({self.degree})"
            )
        if self.degrees_of_freedom + self.degree < 2:
            raise InvalidDimensionsError("degrees_of_freedom + degree must be at least 2")

    @property
    def bins(self) -> int:
        return self.degrees_of_freedom

def default_weight_matrix(bins: int) -> np.ndarray:
    """
    Concordance weights: 1 on the diagonal, falling linearly to 0 at opposite corners.

    This is not the published SIREN weighting table; pass that table explicitly
    to reproduce published scores.
    """
    idx = np.arange(bins, dtype=float)
    span = max(bins - 1, 1)
    w = 1.0 - np.abs(idx[:, None] - idx[None, :]) / span
    w.setflags(write=False)
    return w

DEFAULT_WEIGHT_MATRIX = default_weight_matrix(SirenConfig().bins)
