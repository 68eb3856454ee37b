# File: rvcollapse/burden/phenotype.py
# Location: rvcollapse/rvcollapse/burden/phenotype.py
"""
Phenotype helpers shared by collapsing and summary reporting.

- ``is_case``: boolean case mask (phenotype value 1).
- ``inverse_normal_transform``: rank-based inverse normal transform of a
  quantitative trait. Whether it was applied is what the summary header
  reports as ``##InverseNormal=ON``.
"""

from __future__ import annotations

import logging

import numpy as np
from scipy.stats import norm, rankdata

logger = logging.getLogger("rvcollapse")


def is_case(phenotype: np.ndarray) -> np.ndarray:
    """Return a boolean mask, True where the phenotype equals 1."""
    return np.asarray(phenotype, dtype=np.float64) == 1.0


def inverse_normal_transform(values: np.ndarray, c: float = 3.0 / 8.0) -> np.ndarray:
    """
    Rank-based inverse normal transform.

    Computes ``Phi^-1((rank - c) / (n - 2c + 1))`` with average ranks for
    ties. The default offset ``c = 3/8`` is Blom's.

    Parameters
    ----------
    values : np.ndarray, shape (n,)
        Trait values. Must not contain NaN.
    c : float
        Rank offset in [0, 0.5]. Default: 3/8.

    Returns
    -------
    np.ndarray, shape (n,), float64
        Transformed values, in the original sample order.

    Raises
    ------
    ValueError
        If ``values`` is empty, contains NaN, or ``c`` is outside [0, 0.5].
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        raise ValueError("Cannot inverse-normal transform an empty vector")
    if np.isnan(arr).any():
        raise ValueError("Cannot inverse-normal transform a vector containing NaN")
    if not 0.0 <= c <= 0.5:
        raise ValueError(f"Rank offset c must be in [0, 0.5], got {c}")

    n = arr.size
    ranks = rankdata(arr, method="average")
    transformed = norm.ppf((ranks - c) / (n - 2.0 * c + 1.0))
    logger.debug(f"Inverse normal transform applied to {n} values (c={c:g})")
    return transformed
