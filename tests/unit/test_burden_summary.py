"""
Unit tests for rvcollapse.burden.summary.

Tests cover:
- summarize: nearest-rank quartiles, mean, sample SD, permutation invariance, empty input
- CohortSummaryReport: header layout, %g formatting, covariate replace semantics,
  omitted covariate section, frozen after render
"""

from __future__ import annotations

import io

import numpy as np
import pandas as pd
import pytest

from rvcollapse.burden.summary import CohortSummaryReport, SummaryStatistic, summarize

# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestSummarize:
    """Order statistics, mean and sample SD."""

    def test_worked_example(self) -> None:
        stat = summarize([1.0, 2.0, 3.0, 4.0, 5.0])
        assert stat.n == 5
        assert stat.min == 1.0
        assert stat.q1 == 2.0
        assert stat.median == 3.0
        assert stat.q3 == 4.0
        assert stat.max == 5.0
        assert stat.mean == 3.0
        assert stat.sd == pytest.approx(np.sqrt(2.5))
        assert stat.variance == pytest.approx(2.5)

    def test_nearest_rank_not_interpolated(self) -> None:
        """Even length: median is sorted[n // 2], the upper middle value."""
        stat = summarize([4.0, 1.0, 3.0, 2.0])
        assert stat.q1 == 2.0  # index floor(1.0) = 1
        assert stat.median == 3.0  # index 2
        assert stat.q3 == 4.0  # index 3

    def test_mean_uses_unsorted_values(self) -> None:
        stat = summarize([10.0, -2.0, 4.0])
        assert stat.mean == pytest.approx(4.0)
        assert stat.min == -2.0
        assert stat.max == 10.0

    def test_single_value(self) -> None:
        stat = summarize([7.5])
        assert stat.min == stat.q1 == stat.median == stat.q3 == stat.max == 7.5
        assert stat.mean == 7.5
        assert np.isnan(stat.sd)

    def test_idempotent(self) -> None:
        values = [3.0, 1.5, 8.25, 0.5, 2.0, 2.0]
        assert summarize(values) == summarize(values)

    def test_permutation_invariant(self) -> None:
        values = np.arange(1.0, 21.0) * 0.5
        shuffled = np.random.default_rng(7).permutation(values)
        a, b = summarize(values), summarize(shuffled)
        assert (a.min, a.q1, a.median, a.q3, a.max) == (b.min, b.q1, b.median, b.q3, b.max)
        assert a.mean == pytest.approx(b.mean, rel=1e-15)
        assert a.sd == pytest.approx(b.sd, rel=1e-12)

    def test_input_not_mutated(self) -> None:
        values = np.array([3.0, 1.0, 2.0])
        summarize(values)
        np.testing.assert_array_equal(values, [3.0, 1.0, 2.0])

    def test_snapshot_is_frozen(self) -> None:
        stat = summarize([1.0, 2.0])
        with pytest.raises(AttributeError):
            stat.mean = 0.0  # type: ignore[misc]

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            summarize([])

    def test_matrix_raises(self) -> None:
        with pytest.raises(ValueError):
            summarize(np.ones((2, 2)))


# ---------------------------------------------------------------------------
# CohortSummaryReport
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCohortSummaryReport:
    """Header rendering and recording lifecycle."""

    def test_render_without_covariates(self) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("trait", [1.0, 2.0, 3.0, 4.0, 5.0])
        buf = io.StringIO()
        report.render(buf)

        assert buf.getvalue().splitlines() == [
            "##Samples=5",
            "##AnalyzedSamples=5",
            "##Families=5",
            "##AnalyzedFamilies=5",
            "##Founders=5",
            "##AnalyzedFounders=5",
            "##InverseNormal=OFF",
            "##TraitSummary\tmin\t25th\tmedian\t75th\tmax\tmean\tvariance",
            "##trait\t1\t2\t3\t4\t5\t3\t2.5",
        ]
        assert "##Covariates=" not in buf.getvalue()
        assert "##CovariateSummary" not in buf.getvalue()

    def test_render_with_covariates(self, covariate_df: pd.DataFrame) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("y", [0.5, 1.5, 2.5, 3.5, 4.5])
        report.set_inverse_normalize(True)
        report.record_covariates(covariate_df)

        lines = report.render_lines()

        assert "##InverseNormal=ON" in lines
        cov_idx = lines.index("##Covariates=age,pc1")
        assert lines[cov_idx + 1] == "##CovariateSummary\tmin\t25th\tmedian\t75th\tmax\tmean\tvariance"
        age = lines[cov_idx + 2].split("\t")
        assert age[:6] == ["##age", "28", "30", "39", "45", "52"]
        assert float(age[6]) == pytest.approx(38.8)
        assert lines[cov_idx + 3].startswith("##pc1\t-0.2\t0\t0.05\t0.1\t0.3\t")
        assert len(lines) == cov_idx + 4

    def test_general_float_format(self) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("small", [1e-7, 2e-7, 3e-7])
        row = report.render_lines()[-1].split("\t")
        assert row[1] == "1e-07"
        assert row[3] == "2e-07"

    def test_no_phenotype_reports_zero_counts(self) -> None:
        lines = CohortSummaryReport().render_lines()
        assert lines[:6] == [
            "##Samples=0",
            "##AnalyzedSamples=0",
            "##Families=0",
            "##AnalyzedFamilies=0",
            "##Founders=0",
            "##AnalyzedFounders=0",
        ]
        assert lines[-1] == "##TraitSummary\tmin\t25th\tmedian\t75th\tmax\tmean\tvariance"

    def test_cohort_size_from_first_phenotype(self) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("a", [1.0, 2.0, 3.0])
        report.record_phenotype("b", [1.0, 2.0])
        assert report.n_samples == 3
        assert report.render_lines()[0] == "##Samples=3"

    def test_duplicate_phenotype_labels_kept(self) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("y", [1.0, 2.0])
        report.record_phenotype("y", [3.0, 4.0])
        assert [label for label, _ in report.phenotypes] == ["y", "y"]
        rows = [line for line in report.render_lines() if line.startswith("##y\t")]
        assert len(rows) == 2

    def test_record_covariates_replaces(self, covariate_df: pd.DataFrame) -> None:
        report = CohortSummaryReport()
        report.record_covariates(covariate_df)
        report.record_covariates([("sex", [0.0, 1.0, 1.0, 0.0, 1.0])])
        assert [label for label, _ in report.covariates] == ["sex"]
        assert "##Covariates=sex" in report.render_lines()

    def test_record_covariates_numpy_with_labels(self) -> None:
        report = CohortSummaryReport()
        report.record_covariates(np.array([[1.0, 10.0], [2.0, 20.0]]), labels=["x1", "x2"])
        stats = dict(report.covariates)
        assert isinstance(stats["x2"], SummaryStatistic)
        assert stats["x2"].mean == pytest.approx(15.0)

    def test_empty_covariate_table_omits_section(self) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("y", [1.0, 2.0])
        report.record_covariates(pd.DataFrame(index=range(2)))
        assert not any(line.startswith("##Covariate") for line in report.render_lines())

    def test_frozen_after_render(self) -> None:
        report = CohortSummaryReport()
        report.record_phenotype("y", [1.0, 2.0])
        report.render(io.StringIO())
        with pytest.raises(RuntimeError, match="already been rendered"):
            report.record_phenotype("z", [1.0])
        with pytest.raises(RuntimeError):
            report.set_inverse_normalize(True)

    def test_render_without_phenotype_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="rvcollapse"):
            CohortSummaryReport().render(io.StringIO())
        assert "no recorded phenotype" in caplog.text
