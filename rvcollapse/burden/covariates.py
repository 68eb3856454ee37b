# File: rvcollapse/burden/covariates.py
# Location: rvcollapse/rvcollapse/burden/covariates.py
"""
Covariate normalization for summary reporting.

Provides ``covariate_columns()`` which turns any of the supported covariate
representations into an ordered list of ``(label, vector)`` pairs, so label
storage never depends on the numeric container:

- a ``pandas.DataFrame`` (labels are the column names),
- a 2-D ``numpy`` array plus an explicit list of labels,
- a sequence of ``(label, values)`` pairs.

Every returned vector is float64, 1-D, and all vectors share one length.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger("rvcollapse")


def covariate_columns(
    covariates: Any,
    labels: Sequence[str] | None = None,
) -> list[tuple[str, np.ndarray]]:
    """
    Split a covariate table into labelled column vectors.

    Parameters
    ----------
    covariates : pd.DataFrame | np.ndarray | sequence of (str, array-like)
        Covariate values, samples in rows.
    labels : sequence of str or None
        Column labels; required for a numpy array and ignored otherwise.

    Returns
    -------
    list[tuple[str, np.ndarray]]
        One ``(label, values)`` pair per covariate, in column order.

    Raises
    ------
    ValueError
        If labels are missing or mismatched, a column is non-numeric, or
        columns differ in length.
    """
    if isinstance(covariates, pd.DataFrame):
        non_numeric = [
            str(col) for col in covariates.columns if not pd.api.types.is_numeric_dtype(covariates[col])
        ]
        if non_numeric:
            raise ValueError(
                f"Covariate column(s) {non_numeric} are not numeric; encode them before summarizing"
            )
        pairs = [(str(col), covariates[col].to_numpy(dtype=np.float64)) for col in covariates.columns]
    elif isinstance(covariates, np.ndarray):
        if covariates.ndim != 2:
            raise ValueError(f"Covariate matrix must be 2-D, got shape {covariates.shape}")
        if labels is None or len(labels) != covariates.shape[1]:
            raise ValueError(
                f"Covariate matrix with {covariates.shape[1]} column(s) needs one label per column, "
                f"got {None if labels is None else len(labels)}"
            )
        pairs = [
            (str(label), covariates[:, i].astype(np.float64)) for i, label in enumerate(labels)
        ]
    else:
        pairs = [(str(label), np.asarray(values, dtype=np.float64)) for label, values in covariates]

    lengths = {values.shape for _, values in pairs}
    if any(len(shape) != 1 for shape in lengths) or len(lengths) > 1:
        raise ValueError(f"Covariate columns must be 1-D and of equal length, got shapes {sorted(lengths)}")

    logger.debug(f"Normalized {len(pairs)} covariate column(s)")
    return pairs
