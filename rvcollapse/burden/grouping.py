# File: rvcollapse/burden/grouping.py
# Location: rvcollapse/rvcollapse/burden/grouping.py
"""
Grouping of markers by allele frequency.

Used to order markers by rarity before progressive collapsing and to split
a marker set into frequency bins, each collapsed into its own burden column.

Tie handling
------------
Markers with exactly equal frequencies form one group. Groups are ordered by
ascending frequency; within a group, markers keep their original column
order. No arbitrary tie-break is applied between equal frequencies.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

logger = logging.getLogger("rvcollapse")


def group_by_frequency(frequencies: Sequence[float] | np.ndarray) -> dict[float, list[int]]:
    """
    Group 0-based marker indices by identical frequency value.

    Parameters
    ----------
    frequencies : sequence of float
        Per-marker frequency, indexed by marker column.

    Returns
    -------
    dict[float, list[int]]
        Keys in ascending frequency order; each value lists the markers
        sharing that frequency, in original order.

    Examples
    --------
    >>> group_by_frequency([0.1, 0.2, 0.1, 0.3])
    {0.1: [0, 2], 0.2: [1], 0.3: [3]}
    """
    freqs = np.asarray(frequencies, dtype=np.float64)
    if np.isnan(freqs).any():
        raise ValueError("Cannot group markers with NaN frequency")

    groups: dict[float, list[int]] = {}
    for idx in np.argsort(freqs, kind="stable"):
        groups.setdefault(float(freqs[idx]), []).append(int(idx))
    return groups


def bin_by_frequency(
    frequencies: Sequence[float] | np.ndarray,
    upper_bounds: Sequence[float],
) -> list[list[int]]:
    """
    Assign markers to frequency bins defined by ascending upper bounds.

    A marker goes to the first bin whose upper bound is >= its frequency.
    Markers above the last bound belong to no bin and are dropped.

    Parameters
    ----------
    frequencies : sequence of float
        Per-marker frequency.
    upper_bounds : sequence of float
        Strictly increasing bin upper bounds.

    Returns
    -------
    list[list[int]]
        One list of marker indices per bin (possibly empty), in original
        marker order.

    Raises
    ------
    ValueError
        If ``upper_bounds`` is empty or not strictly increasing.
    """
    bounds = np.asarray(upper_bounds, dtype=np.float64)
    if bounds.size == 0 or np.any(np.diff(bounds) <= 0):
        raise ValueError(
            "Frequency bin bounds must be non-empty and strictly increasing, "
            f"got {list(upper_bounds)}"
        )

    freqs = np.asarray(frequencies, dtype=np.float64)
    bin_idx = np.searchsorted(bounds, freqs, side="left")

    bins: list[list[int]] = [[] for _ in range(len(bounds))]
    n_dropped = 0
    for marker, b in enumerate(bin_idx):
        if b < len(bounds):
            bins[b].append(marker)
        else:
            n_dropped += 1

    if n_dropped:
        logger.debug(f"{n_dropped} marker(s) above the top frequency bound {bounds[-1]:g} excluded from bins")
    return bins
