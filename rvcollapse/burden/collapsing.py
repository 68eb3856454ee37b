# File: rvcollapse/burden/collapsing.py
# Location: rvcollapse/rvcollapse/burden/collapsing.py
"""
Collapsing strategies: sample-by-marker genotypes to sample-by-K burden scores.

Public functions
----------------
- ``cmc_collapse``: CMC indicator, 1.0 if the sample carries any alternate
  allele across the marker set.
- ``cmc_collapse_subset`` / ``cmc_collapse_groups``: CMC over explicit marker
  subsets, one burden column per subset (e.g. frequency bins).
- ``zeggini_collapse``: Morris-Zeggini count of markers carrying an
  alternate allele.
- ``frequency_weighted_collapse``: sum of dosage x ``1 / sqrt(f (1 - f))``
  with ``f`` estimated from all samples.
- ``madsen_browning_collapse``: sum of dosage x ``1 / sqrt(f (1 - f) N)`` with
  ``f`` estimated from controls.
- ``rearrange_by_frequency``, ``progressive_cmc_collapse``,
  ``progressive_madsen_browning_collapse``: frequency-ordered variants that
  emit one cumulative column per distinct marker frequency.
- ``collapse``: string dispatcher over ``COLLAPSE_METHODS``.

Design notes
------------
- Every function returns a freshly allocated float64 matrix. Inputs are
  never written to, so calls over different regions share no state.
- Row order is preserved: burden row i always belongs to genotype row i.
- Missing cells (negative sentinel or NaN) never count as carriers and
  contribute nothing to weighted sums.
- Markers with degenerate frequency (<= 0 or >= 1) get weight 0 in the
  weighted collapses; this is not an error.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from rvcollapse.burden.base import as_genotype_matrix, as_phenotype_vector, observed_mask
from rvcollapse.burden.frequency import control_marker_frequencies, marker_frequencies
from rvcollapse.burden.grouping import group_by_frequency
from rvcollapse.burden.weights import madsen_browning_weights

logger = logging.getLogger("rvcollapse")

COLLAPSE_METHODS = ("cmc", "zeggini", "frequency_weighted", "madsen_browning")


def _carrier_mask(geno: np.ndarray) -> np.ndarray:
    # NaN > 0 is False
    return geno > 0


def _observed_dosages(geno: np.ndarray) -> np.ndarray:
    return np.where(observed_mask(geno), geno, 0.0)


def _weighted_sum(geno: np.ndarray, weights: np.ndarray) -> np.ndarray:
    # zero-weight markers are left out of the product entirely
    used = weights != 0.0
    out = np.zeros((geno.shape[0], 1), dtype=np.float64)
    if used.any():
        out[:, 0] = _observed_dosages(geno[:, used]) @ weights[used]
    return out


def cmc_collapse(genotypes: np.ndarray) -> np.ndarray:
    """
    Combined multivariate and collapsing (CMC) indicator over all markers.

    Parameters
    ----------
    genotypes : np.ndarray, shape (n_samples, n_markers)
        Dosage matrix; negative values are missing.

    Returns
    -------
    np.ndarray, shape (n_samples, 1), float64
        1.0 where the sample has any marker with dosage > 0, else 0.0.
    """
    geno = as_genotype_matrix(genotypes)
    out = np.zeros((geno.shape[0], 1), dtype=np.float64)
    out[:, 0] = _carrier_mask(geno).any(axis=1)
    return out


def cmc_collapse_subset(
    genotypes: np.ndarray,
    index: Sequence[int],
    out_column: int,
    n_columns: int,
) -> tuple[np.ndarray, int]:
    """
    CMC indicator over an explicit marker subset, for one column of a wider burden matrix.

    Parameters
    ----------
    genotypes : np.ndarray, shape (n_samples, n_markers)
        Dosage matrix.
    index : sequence of int
        0-based marker columns to collapse. May be empty (all zeros).
    out_column : int
        Destination column in the caller's burden matrix.
    n_columns : int
        Width of that burden matrix.

    Returns
    -------
    column : np.ndarray, shape (n_samples,), float64
        Indicator values for the subset.
    out_column : int
        The validated destination column, passed through.

    Raises
    ------
    ValueError
        If ``out_column`` is outside ``[0, n_columns)`` or any marker index
        is outside the genotype matrix.
    """
    geno = as_genotype_matrix(genotypes)
    if not 0 <= out_column < n_columns:
        raise ValueError(f"Output column {out_column} out of range for a {n_columns}-column burden matrix")

    idx = np.asarray(index, dtype=np.intp)
    n_markers = geno.shape[1]
    if idx.size and (idx.min() < 0 or idx.max() >= n_markers):
        raise ValueError(f"Marker subset {list(index)} out of range for {n_markers} markers")

    column = _carrier_mask(geno[:, idx]).any(axis=1).astype(np.float64)
    return column, out_column


def cmc_collapse_groups(genotypes: np.ndarray, groups: Sequence[Sequence[int]]) -> np.ndarray:
    """
    One CMC indicator column per marker group.

    Parameters
    ----------
    genotypes : np.ndarray, shape (n_samples, n_markers)
    groups : sequence of sequence of int
        Marker indices per output column, e.g. from ``bin_by_frequency``.

    Returns
    -------
    np.ndarray, shape (n_samples, len(groups)), float64
    """
    geno = as_genotype_matrix(genotypes)
    n_columns = len(groups)
    out = np.zeros((geno.shape[0], n_columns), dtype=np.float64)
    for k, group in enumerate(groups):
        column, col = cmc_collapse_subset(geno, group, k, n_columns)
        out[:, col] = column
    return out


def zeggini_collapse(genotypes: np.ndarray) -> np.ndarray:
    """
    Morris-Zeggini collapse: number of markers with dosage > 0 per sample.

    Returns
    -------
    np.ndarray, shape (n_samples, 1), float64
    """
    geno = as_genotype_matrix(genotypes)
    out = np.zeros((geno.shape[0], 1), dtype=np.float64)
    out[:, 0] = _carrier_mask(geno).sum(axis=1)
    return out


def frequency_weighted_collapse(genotypes: np.ndarray) -> np.ndarray:
    """
    Weighted sum of dosages with weights from all-sample frequencies.

    Weight per marker is ``1 / sqrt(f (1 - f))`` where ``f`` comes from
    ``estimate_frequency``; markers with ``f <= 0`` or ``f >= 1`` are skipped.

    Returns
    -------
    np.ndarray, shape (n_samples, 1), float64
    """
    geno = as_genotype_matrix(genotypes)
    weights = madsen_browning_weights(marker_frequencies(geno))
    return _weighted_sum(geno, weights)


def madsen_browning_collapse(genotypes: np.ndarray, phenotype: np.ndarray) -> np.ndarray:
    """
    Control-weighted Madsen-Browning collapse.

    Frequencies are estimated from controls (phenotype != 1) with the
    pseudo-count estimator and weights are ``1 / sqrt(f (1 - f) N)`` where
    ``N`` is the total number of samples.

    Parameters
    ----------
    genotypes : np.ndarray, shape (n_samples, n_markers)
    phenotype : np.ndarray, shape (n_samples,)
        1 = case; any other value = control.

    Returns
    -------
    np.ndarray, shape (n_samples, 1), float64

    Raises
    ------
    ValueError
        If the phenotype length differs from the number of samples.
    """
    geno = as_genotype_matrix(genotypes)
    pheno = as_phenotype_vector(phenotype, geno.shape[0])
    freqs = control_marker_frequencies(geno, pheno)
    weights = madsen_browning_weights(freqs, n_samples=geno.shape[0])
    return _weighted_sum(geno, weights)


def rearrange_by_frequency(genotypes: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Reorder marker columns by ascending all-sample frequency.

    Ties keep their original relative order (stable sort).

    Returns
    -------
    reordered : np.ndarray, shape (n_samples, n_markers)
        Copy of the genotypes with columns permuted.
    sorted_freqs : np.ndarray, shape (n_markers,)
        Frequencies in the new column order.
    order : np.ndarray, shape (n_markers,), int
        ``reordered[:, j] == genotypes[:, order[j]]``.
    """
    geno = as_genotype_matrix(genotypes)
    freqs = marker_frequencies(geno)
    order = np.argsort(freqs, kind="stable")
    return geno[:, order], freqs[order], order


def progressive_cmc_collapse(genotypes: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Cumulative CMC indicators over markers of increasing frequency.

    Column k is the CMC indicator over every marker whose frequency is at
    most the k-th smallest distinct frequency. Tied markers enter the same
    column together.

    Returns
    -------
    burden : np.ndarray, shape (n_samples, n_distinct_freqs), float64
        Non-decreasing along each row.
    group_freqs : np.ndarray, shape (n_distinct_freqs,)
        Frequency upper bound of each column, ascending.
    """
    geno = as_genotype_matrix(genotypes)
    groups = group_by_frequency(marker_frequencies(geno))
    carriers = _carrier_mask(geno)

    out = np.zeros((geno.shape[0], len(groups)), dtype=np.float64)
    running = np.zeros(geno.shape[0], dtype=bool)
    for k, markers in enumerate(groups.values()):
        running |= carriers[:, markers].any(axis=1)
        out[:, k] = running
    return out, np.fromiter(groups.keys(), dtype=np.float64, count=len(groups))


def progressive_madsen_browning_collapse(genotypes: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Cumulative frequency-weighted burden over markers of increasing frequency.

    Column k sums ``dosage / sqrt(f (1 - f))`` over every marker whose
    all-sample frequency is at most the k-th smallest distinct frequency.
    Degenerate groups (frequency 0 or 1) still get a column, which repeats
    the previous cumulative value.

    Returns
    -------
    burden : np.ndarray, shape (n_samples, n_distinct_freqs), float64
    group_freqs : np.ndarray, shape (n_distinct_freqs,)
    """
    geno = as_genotype_matrix(genotypes)
    freqs = marker_frequencies(geno)
    groups = group_by_frequency(freqs)
    weights = madsen_browning_weights(freqs)
    dosages = _observed_dosages(geno)

    out = np.zeros((geno.shape[0], len(groups)), dtype=np.float64)
    running = np.zeros(geno.shape[0], dtype=np.float64)
    for k, markers in enumerate(groups.values()):
        if weights[markers[0]] != 0.0:
            running = running + dosages[:, markers] @ weights[markers]
        out[:, k] = running
    return out, np.fromiter(groups.keys(), dtype=np.float64, count=len(groups))


def collapse(
    genotypes: np.ndarray,
    method: str,
    phenotype: np.ndarray | None = None,
) -> np.ndarray:
    """
    Dispatch to a collapsing strategy by name.

    Parameters
    ----------
    genotypes : np.ndarray, shape (n_samples, n_markers)
    method : str
        One of ``COLLAPSE_METHODS``.
    phenotype : np.ndarray or None
        Required for ``"madsen_browning"``; ignored otherwise.

    Returns
    -------
    np.ndarray, shape (n_samples, 1), float64

    Raises
    ------
    ValueError
        If ``method`` is unknown, or ``"madsen_browning"`` is requested
        without a phenotype.
    """
    if method == "cmc":
        return cmc_collapse(genotypes)
    if method == "zeggini":
        return zeggini_collapse(genotypes)
    if method == "frequency_weighted":
        return frequency_weighted_collapse(genotypes)
    if method == "madsen_browning":
        if phenotype is None:
            raise ValueError(
                "collapse method 'madsen_browning' requires a phenotype vector; "
                "use 'frequency_weighted' when case/control labels are unavailable."
            )
        return madsen_browning_collapse(genotypes, phenotype)

    raise ValueError(
        f"Unknown collapse method '{method}'. Supported methods: {', '.join(COLLAPSE_METHODS)}."
    )
