# File: rvcollapse/burden/engine.py
# Location: rvcollapse/rvcollapse/burden/engine.py
"""
CollapsingEngine: orchestrator for collapsing many marker sets.

The engine applies one configured collapsing strategy to one region
(``run``) or to a batch of regions (``run_all``). Each region is an
independent ``(n_samples, n_markers)`` genotype matrix over the same samples;
each produces its own burden matrix, so regions can be processed in worker
processes without any shared mutable state.

Output
------
``run_all`` returns ``{region_name: burden_matrix}`` in input order.
``burden_to_frame`` turns a burden matrix into a DataFrame indexed by
sample ID for downstream test code that works with labelled data.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

import numpy as np
import pandas as pd

from rvcollapse.burden.base import CollapseConfig, as_genotype_matrix, as_phenotype_vector
from rvcollapse.burden.collapsing import COLLAPSE_METHODS, cmc_collapse_groups, collapse
from rvcollapse.burden.frequency import marker_frequencies
from rvcollapse.burden.grouping import bin_by_frequency

logger = logging.getLogger("rvcollapse")


def _worker_initializer() -> None:
    """Set BLAS thread counts to 1 in worker processes to prevent oversubscription."""
    os.environ["OPENBLAS_NUM_THREADS"] = "1"
    os.environ["MKL_NUM_THREADS"] = "1"
    os.environ["OMP_NUM_THREADS"] = "1"


def _run_region_worker(
    args: tuple[str, np.ndarray, str, np.ndarray | None],
) -> tuple[str, np.ndarray]:
    """Collapse a single region in a subprocess worker."""
    region, genotypes, method, phenotype = args
    return region, collapse(genotypes, method, phenotype)


class CollapsingEngine:
    """
    Applies one collapsing strategy to one or many genotype matrices.

    Usage
    -----
    >>> config = CollapseConfig(collapse_method="zeggini")
    >>> engine = CollapsingEngine(config)
    >>> burdens = engine.run_all({"GENE1": g1, "GENE2": g2})

    Parameters
    ----------
    config : CollapseConfig
        Strategy name and worker count.

    Raises
    ------
    ValueError
        If ``config.collapse_method`` is not a known strategy.
    """

    def __init__(self, config: CollapseConfig) -> None:
        if config.collapse_method not in COLLAPSE_METHODS:
            raise ValueError(
                f"Collapse method '{config.collapse_method}' is not available. "
                f"Available methods: {', '.join(COLLAPSE_METHODS)}"
            )
        self._config = config

    @property
    def method(self) -> str:
        return self._config.collapse_method

    def run(self, genotypes: np.ndarray, phenotype: np.ndarray | None = None) -> np.ndarray:
        """Collapse a single marker set; see ``collapse``."""
        return collapse(genotypes, self.method, phenotype)

    def run_binned(self, genotypes: np.ndarray) -> np.ndarray:
        """
        CMC indicator per frequency bin from ``config.frequency_bins``.

        Returns
        -------
        np.ndarray, shape (n_samples, len(frequency_bins)), float64
            Column k covers markers whose frequency falls in bin k.
        """
        geno = as_genotype_matrix(genotypes)
        bins = bin_by_frequency(marker_frequencies(geno), self._config.frequency_bins)
        logger.debug(f"Frequency bins {self._config.frequency_bins}: {[len(b) for b in bins]} marker(s)")
        return cmc_collapse_groups(geno, bins)

    def run_all(
        self,
        regions: Mapping[str, np.ndarray],
        phenotype: np.ndarray | None = None,
    ) -> dict[str, np.ndarray]:
        """
        Collapse every region and return burden matrices keyed by region name.

        Parameters
        ----------
        regions : mapping of str -> np.ndarray
            Genotype matrix per region; all must have the same sample rows.
        phenotype : np.ndarray or None
            Shared phenotype vector (required for "madsen_browning").

        Returns
        -------
        dict[str, np.ndarray]
            Burden matrix per region, in the input order.

        Raises
        ------
        ValueError
            If regions disagree on the number of samples, or the phenotype
            does not match it.
        """
        names = list(regions)
        if not names:
            return {}

        matrices = {name: as_genotype_matrix(regions[name]) for name in names}
        row_counts = {m.shape[0] for m in matrices.values()}
        if len(row_counts) != 1:
            raise ValueError(f"Regions disagree on sample count: {sorted(row_counts)}")
        n_samples = row_counts.pop()
        pheno = as_phenotype_vector(phenotype, n_samples) if phenotype is not None else None

        n_workers = self._config.collapse_workers
        results: dict[str, np.ndarray] = {}

        if n_workers != 1 and len(names) > 1:
            import concurrent.futures

            actual_workers = (os.cpu_count() or 1) if n_workers == -1 else n_workers
            actual_workers = max(1, min(actual_workers, len(names)))
            logger.info(
                f"Parallel collapsing: {actual_workers} workers for {len(names)} regions "
                f"(method={self.method})"
            )
            args_list = [(name, matrices[name], self.method, pheno) for name in names]
            with concurrent.futures.ProcessPoolExecutor(
                max_workers=actual_workers,
                initializer=_worker_initializer,
            ) as executor:
                for name, burden in executor.map(_run_region_worker, args_list):
                    results[name] = burden
                    logger.debug(f"Region {name}: collapsed to shape {burden.shape}")
        else:
            for name in names:
                results[name] = collapse(matrices[name], self.method, pheno)
                logger.debug(f"Region {name}: collapsed to shape {results[name].shape}")

        logger.info(f"Collapsed {len(results)} region(s) with method '{self.method}'")
        return results


def burden_to_frame(
    burden: np.ndarray,
    sample_ids: Sequence[str],
    prefix: str = "burden",
) -> pd.DataFrame:
    """
    Wrap a burden matrix in a DataFrame indexed by sample ID.

    Columns are named ``{prefix}`` for a single column, else
    ``{prefix}_0 .. {prefix}_{k-1}``.

    Raises
    ------
    ValueError
        If the burden matrix row count differs from ``len(sample_ids)``.
    """
    mat = np.asarray(burden, dtype=np.float64)
    if mat.ndim == 1:
        mat = mat[:, np.newaxis]
    ids = [str(s) for s in sample_ids]
    if mat.ndim != 2 or mat.shape[0] != len(ids):
        raise ValueError(f"Burden matrix of shape {mat.shape} does not match {len(ids)} sample IDs")

    columns = [prefix] if mat.shape[1] == 1 else [f"{prefix}_{k}" for k in range(mat.shape[1])]
    return pd.DataFrame(mat, index=pd.Index(ids, name="sample_id"), columns=columns)
