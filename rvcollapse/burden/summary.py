# File: rvcollapse/burden/summary.py
# Location: rvcollapse/rvcollapse/burden/summary.py
"""
Descriptive statistics of phenotypes and covariates for output headers.

Provides:
- SummaryStatistic: immutable snapshot {n, min, q1, median, q3, max, mean, sd}
- summarize(): build a SummaryStatistic from a numeric vector
- CohortSummaryReport: collects per-phenotype and per-covariate summaries and
  renders them as ``##``-prefixed header lines

Quartiles
---------
Quartiles are nearest-rank selections on the sorted copy, at index
``floor(p * n)`` for p = 0.25, 0.5, 0.75. They are not interpolated, so
``median`` of an even-length vector is the upper of the two middle values.

Header layout
-------------
::

    ##Samples=<N>
    ##AnalyzedSamples=<N>
    ##Families=<N>
    ##AnalyzedFamilies=<N>
    ##Founders=<N>
    ##AnalyzedFounders=<N>
    ##InverseNormal=ON|OFF
    ##TraitSummary\tmin\t25th\tmedian\t75th\tmax\tmean\tvariance
    ##<label>\t<min>\t<q1>\t<median>\t<q3>\t<max>\t<mean>\t<variance>
    ##Covariates=<label1>,<label2>,...
    ##CovariateSummary\tmin\t25th\tmedian\t75th\tmax\tmean\tvariance
    ##<label>\t...

The two covariate header lines and their rows are omitted entirely when no
covariate was recorded. N is the count of the first recorded phenotype, or 0.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import IO, Any

import numpy as np

from rvcollapse.burden.covariates import covariate_columns

logger = logging.getLogger("rvcollapse")

_SUMMARY_COLUMNS = "min\t25th\tmedian\t75th\tmax\tmean\tvariance"

_COUNT_FIELDS = (
    "Samples",
    "AnalyzedSamples",
    "Families",
    "AnalyzedFamilies",
    "Founders",
    "AnalyzedFounders",
)


@dataclass(frozen=True)
class SummaryStatistic:
    """
    Read-only summary of one numeric vector.

    Fields
    ------
    n : int
        Number of values.
    min, q1, median, q3, max : float
        Order statistics (nearest-rank quartiles).
    mean : float
        Arithmetic mean.
    sd : float
        Sample standard deviation (denominator n - 1); NaN when n == 1.
    """

    n: int
    min: float
    q1: float
    median: float
    q3: float
    max: float
    mean: float
    sd: float

    @property
    def variance(self) -> float:
        """Sample variance, ``sd ** 2``; this is what the header reports."""
        return self.sd * self.sd

    def format_row(self, label: str) -> str:
        """Render one ``##<label>\\t...`` header row (without newline)."""
        values = (self.min, self.q1, self.median, self.q3, self.max, self.mean, self.variance)
        return "##" + "\t".join([label] + ["%g" % v for v in values])


def summarize(values: Sequence[float] | np.ndarray) -> SummaryStatistic:
    """
    Summarize a numeric vector.

    Parameters
    ----------
    values : sequence of float
        At least one value.

    Returns
    -------
    SummaryStatistic

    Raises
    ------
    ValueError
        If ``values`` is empty or not one-dimensional.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Cannot summarize an array of shape {arr.shape}; expected a vector")
    n = arr.shape[0]
    if n == 0:
        raise ValueError("Cannot summarize an empty vector")

    ordered = np.sort(arr)
    # nearest rank, not interpolated
    q1, median, q3 = (float(ordered[math.floor(p * n)]) for p in (0.25, 0.5, 0.75))

    sd = float(np.std(arr, ddof=1)) if n > 1 else float("nan")
    return SummaryStatistic(
        n=n,
        min=float(ordered[0]),
        q1=q1,
        median=median,
        q3=q3,
        max=float(ordered[-1]),
        mean=float(np.mean(arr)),
        sd=sd,
    )


class CohortSummaryReport:
    """
    Accumulates phenotype and covariate summaries and renders the header.

    Usage
    -----
    >>> report = CohortSummaryReport()
    >>> report.record_phenotype("BMI", [21.0, 25.5, 30.1])
    >>> report.set_inverse_normalize(False)
    >>> report.record_covariates(covariate_df)
    >>> report.render(sys.stdout)

    Phenotypes are appended in call order (duplicate labels are kept);
    ``record_covariates`` replaces any earlier covariate summaries. Once the
    report has been rendered it no longer accepts new records.
    """

    def __init__(self) -> None:
        self._phenotypes: list[tuple[str, SummaryStatistic]] = []
        self._covariates: list[tuple[str, SummaryStatistic]] = []
        self._inverse_normalized = False
        self._rendered = False

    @property
    def phenotypes(self) -> list[tuple[str, SummaryStatistic]]:
        return list(self._phenotypes)

    @property
    def covariates(self) -> list[tuple[str, SummaryStatistic]]:
        return list(self._covariates)

    @property
    def inverse_normalized(self) -> bool:
        return self._inverse_normalized

    @property
    def n_samples(self) -> int:
        """Cohort size: count of the first recorded phenotype, 0 if none."""
        return self._phenotypes[0][1].n if self._phenotypes else 0

    def _check_open(self) -> None:
        if self._rendered:
            raise RuntimeError("CohortSummaryReport has already been rendered; it can no longer be modified")

    def record_phenotype(self, label: str, values: Sequence[float] | np.ndarray) -> None:
        """Summarize ``values`` and append it under ``label``."""
        self._check_open()
        self._phenotypes.append((label, summarize(values)))
        logger.debug(f"Recorded phenotype summary '{label}'")

    def set_inverse_normalize(self, flag: bool) -> None:
        """Record whether phenotypes were inverse-normal transformed upstream."""
        self._check_open()
        self._inverse_normalized = bool(flag)

    def record_covariates(self, covariates: Any, labels: Sequence[str] | None = None) -> None:
        """
        Replace all covariate summaries with one per covariate column.

        Parameters
        ----------
        covariates : pd.DataFrame | np.ndarray | sequence of (label, values)
            See ``covariate_columns`` for the accepted forms.
        labels : sequence of str or None
            Column labels when ``covariates`` is a numpy array.
        """
        self._check_open()
        pairs = covariate_columns(covariates, labels)
        self._covariates = [(label, summarize(values)) for label, values in pairs]
        logger.debug(f"Recorded {len(self._covariates)} covariate summaries")

    def render_lines(self) -> list[str]:
        """Return the header lines, without trailing newlines."""
        n = self.n_samples
        lines = [f"##{name}={n}" for name in _COUNT_FIELDS]
        lines.append(f"##InverseNormal={'ON' if self._inverse_normalized else 'OFF'}")

        lines.append(f"##TraitSummary\t{_SUMMARY_COLUMNS}")
        lines.extend(stat.format_row(label) for label, stat in self._phenotypes)

        if self._covariates:
            lines.append("##Covariates=" + ",".join(label for label, _ in self._covariates))
            lines.append(f"##CovariateSummary\t{_SUMMARY_COLUMNS}")
            lines.extend(stat.format_row(label) for label, stat in self._covariates)
        return lines

    def render(self, writer: IO[str]) -> None:
        """
        Write the header to ``writer``, one ``\\n``-terminated line at a time.

        ``writer`` only needs a ``write(str)`` method (open file, ``sys.stdout``,
        ``io.StringIO``). The report is frozen afterwards.
        """
        if not self._phenotypes:
            logger.warning("Rendering summary header with no recorded phenotype; sample counts reported as 0")
        for line in self.render_lines():
            writer.write(line + "\n")
        self._rendered = True
