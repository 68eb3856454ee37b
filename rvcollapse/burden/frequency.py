# File: rvcollapse/burden/frequency.py
# Location: rvcollapse/rvcollapse/burden/frequency.py
"""
Alternate allele frequency estimation for marker weighting.

Provides two estimators with deliberately different correction terms:

- ``estimate_frequency``: plain ratio ``ac / an`` over every observed sample.
  Returns 0.0 when no sample is observed.
- ``estimate_frequency_from_controls``: Madsen-Browning estimate over
  controls only, ``(ac + 1) / (an + 2)``. Never 0 or 1, so inverse-variance
  weights derived from it stay finite.

Both count two allele slots per observed sample (diploid), whatever the
dosage value; imputed dosages may be fractional. Cells with a negative
dosage (or NaN) are missing and excluded from both tallies.

The ``marker_frequencies`` / ``control_marker_frequencies`` variants compute
the same quantities for every column at once.

References
----------
Madsen BE, Browning SR. A Groupwise Association Test for Rare Mutations Using
a Weighted Sum Statistic. PLoS Genet. 2009;5(2):e1000384.
"""

from __future__ import annotations

import logging

import numpy as np

from rvcollapse.burden.base import (
    as_genotype_matrix,
    as_phenotype_vector,
    check_marker_index,
    observed_mask,
)
from rvcollapse.burden.phenotype import is_case

logger = logging.getLogger("rvcollapse")


def _allele_tallies(
    geno: np.ndarray, rows: np.ndarray | None = None
) -> tuple[np.ndarray, np.ndarray]:
    """Per-column allele count and allele total over the selected rows."""
    if rows is not None:
        geno = geno[rows]
    observed = observed_mask(geno)
    ac = np.where(observed, geno, 0.0).sum(axis=0)
    an = 2.0 * observed.sum(axis=0)
    return ac, an


def _control_rows(pheno: np.ndarray) -> np.ndarray:
    controls = ~is_case(pheno)
    if not controls.any():
        logger.warning(
            "All samples are cases; control frequencies fall back to the pseudo-count 0.5"
        )
    return controls


def estimate_frequency(genotypes: np.ndarray, marker: int) -> float:
    """
    Estimate the alternate allele frequency of one marker over all samples.

    Parameters
    ----------
    genotypes : np.ndarray, shape (n_samples, n_markers)
        Dosage matrix; negative values are missing.
    marker : int
        0-based column index.

    Returns
    -------
    float
        ``ac / an``, or exactly 0.0 when no sample is observed.
    """
    geno = as_genotype_matrix(genotypes)
    check_marker_index(geno, marker)
    ac, an = _allele_tallies(geno[:, [marker]])
    if an[0] == 0:
        return 0.0
    return float(ac[0] / an[0])


def estimate_frequency_from_controls(
    genotypes: np.ndarray, phenotype: np.ndarray, marker: int
) -> float:
    """
    Estimate the alternate allele frequency of one marker from controls.

    Samples with phenotype value 1 (cases) are skipped. Uses the pseudo-count
    form ``(ac + 1) / (an + 2)``, which is 0.5 when no control is observed.

    Raises
    ------
    ValueError
        If the phenotype length differs from the genotype row count.
    """
    geno = as_genotype_matrix(genotypes)
    pheno = as_phenotype_vector(phenotype, geno.shape[0])
    check_marker_index(geno, marker)
    ac, an = _allele_tallies(geno[:, [marker]], _control_rows(pheno))
    return float((ac[0] + 1.0) / (an[0] + 2.0))


def marker_frequencies(genotypes: np.ndarray) -> np.ndarray:
    """
    Per-marker ``estimate_frequency`` for every column.

    Returns
    -------
    np.ndarray, shape (n_markers,), float64
    """
    geno = as_genotype_matrix(genotypes)
    ac, an = _allele_tallies(geno)
    freqs = np.zeros(geno.shape[1], dtype=np.float64)
    np.divide(ac, an, out=freqs, where=an > 0)
    return freqs


def control_marker_frequencies(genotypes: np.ndarray, phenotype: np.ndarray) -> np.ndarray:
    """
    Per-marker ``estimate_frequency_from_controls`` for every column.

    Returns
    -------
    np.ndarray, shape (n_markers,), float64
        Values strictly inside (0, 1).
    """
    geno = as_genotype_matrix(genotypes)
    pheno = as_phenotype_vector(phenotype, geno.shape[0])
    ac, an = _allele_tallies(geno, _control_rows(pheno))
    return (ac + 1.0) / (an + 2.0)
