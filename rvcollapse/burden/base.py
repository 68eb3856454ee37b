# File: rvcollapse/burden/base.py
# Location: rvcollapse/rvcollapse/burden/base.py
"""
Core abstractions shared by the collapsing framework.

Defines the CollapseConfig dataclass and the input validation helpers that
every collapsing and frequency function runs before touching a matrix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np

logger = logging.getLogger("rvcollapse")


@dataclass
class CollapseConfig:
    """
    Configuration for the collapsing engine.

    Defaults mirror the keys of the packaged ``config.json`` so that a config
    dict loaded with ``load_config()`` maps one-to-one onto this dataclass.

    Fields
    ------
    collapse_method : str
        Collapsing strategy: "cmc", "zeggini", "frequency_weighted" or
        "madsen_browning". Default: "cmc".
    collapse_workers : int
        Worker processes for multi-region batches. 1 = sequential,
        -1 = one per CPU. Default: 1.
    inverse_normal : bool
        Whether phenotypes were rank-transformed upstream. Informational
        only; reported in the summary header. Default: False.
    frequency_bins : list[float]
        Ascending frequency upper bounds used by binned CMC collapsing.
    """

    collapse_method: str = "cmc"
    collapse_workers: int = 1
    inverse_normal: bool = False
    frequency_bins: list[float] = field(default_factory=lambda: [0.01, 0.05])

    @classmethod
    def from_dict(cls, cfg: dict[str, Any]) -> CollapseConfig:
        """Build a config from a (possibly larger) config dict; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            logger.debug(f"CollapseConfig: ignoring unknown config keys {unknown}")
        return cls(**{k: v for k, v in cfg.items() if k in known})


def as_genotype_matrix(genotypes: Any) -> np.ndarray:
    """
    Coerce input to a float64 ``(n_samples, n_markers)`` matrix.

    The returned array may share memory with the input; callers must not
    write to it.

    Raises
    ------
    ValueError
        If the input is not two-dimensional.
    """
    geno = np.asarray(genotypes, dtype=np.float64)
    if geno.ndim != 2:
        raise ValueError(
            f"Genotype matrix must be 2-D (samples x markers), got shape {geno.shape}"
        )
    return geno


def as_phenotype_vector(phenotype: Any, n_samples: int) -> np.ndarray:
    """
    Coerce a phenotype to a float64 vector aligned with ``n_samples`` rows.

    Raises
    ------
    ValueError
        If the phenotype is not 1-D or its length differs from ``n_samples``.
    """
    pheno = np.asarray(phenotype, dtype=np.float64)
    if pheno.ndim != 1 or pheno.shape[0] != n_samples:
        raise ValueError(
            f"Phenotype vector of shape {pheno.shape} does not match "
            f"{n_samples} genotype rows"
        )
    return pheno


def check_marker_index(geno: np.ndarray, marker: int) -> None:
    """Raise ValueError if ``marker`` is not a valid column of ``geno``."""
    n_markers = geno.shape[1]
    if not 0 <= marker < n_markers:
        raise ValueError(f"Marker index {marker} out of range for {n_markers} markers")


def observed_mask(geno: np.ndarray) -> np.ndarray:
    """Boolean mask of observed cells; negative sentinels and NaN are missing."""
    # NaN >= 0 is False, so NaN cells drop out here too
    return geno >= 0
