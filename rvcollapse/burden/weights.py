# File: rvcollapse/burden/weights.py
# Location: rvcollapse/rvcollapse/burden/weights.py
"""
Variant weight schemes for weighted burden collapsing.

Provides the public function:

- ``madsen_browning_weights``: inverse binomial standard deviation weights,
  ``1 / sqrt(f (1 - f))``, optionally scaled by the cohort size
  (``1 / sqrt(f (1 - f) N)``). Rare variants receive higher weights.

Degenerate frequencies
----------------------
Markers with frequency <= 0 or >= 1 receive weight 0.0: they are skipped by
the weighted collapses rather than raising or producing inf.
"""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger("rvcollapse")


def madsen_browning_weights(
    frequencies: np.ndarray,
    n_samples: int | None = None,
) -> np.ndarray:
    """
    Compute Madsen-Browning weights for each marker.

    Parameters
    ----------
    frequencies : np.ndarray, shape (n_markers,)
        Alternate allele frequencies.
    n_samples : int or None
        Cohort size. When given, the variance term is multiplied by it
        (control-weighted form). Default: None.

    Returns
    -------
    np.ndarray, shape (n_markers,), float64
        Weight per marker; 0.0 where the frequency is degenerate.
    """
    freqs = np.asarray(frequencies, dtype=np.float64)
    usable = (freqs > 0.0) & (freqs < 1.0)

    variance = freqs * (1.0 - freqs)
    if n_samples is not None:
        variance = variance * n_samples

    usable &= variance > 0.0

    weights = np.zeros(freqs.shape, dtype=np.float64)
    weights[usable] = 1.0 / np.sqrt(variance[usable])

    n_skipped = int((~usable).sum())
    if n_skipped:
        logger.debug(f"Madsen-Browning weights: {n_skipped} marker(s) with degenerate frequency skipped")
    return weights

