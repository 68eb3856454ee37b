"""
Unit tests for rvcollapse.burden.weights.

Tests cover:
- madsen_browning_weights: formula, degenerate frequencies, cohort-size scaling
- output dtype
"""

from __future__ import annotations

import numpy as np
import pytest

from rvcollapse.burden.weights import madsen_browning_weights


@pytest.mark.unit
class TestMadsenBrowningWeights:
    """Inverse binomial standard deviation weights."""

    def test_formula(self) -> None:
        freqs = np.array([0.5, 0.1, 0.01])
        np.testing.assert_allclose(madsen_browning_weights(freqs), 1.0 / np.sqrt(freqs * (1 - freqs)))

    def test_rare_upweighted(self) -> None:
        weights = madsen_browning_weights(np.array([0.001, 0.01, 0.1, 0.5]))
        assert (np.diff(weights) < 0).all()

    def test_degenerate_frequencies_get_zero(self) -> None:
        weights = madsen_browning_weights(np.array([0.0, 1.0, -0.1, 1.5, 0.5]))
        np.testing.assert_array_equal(weights, [0.0, 0.0, 0.0, 0.0, 2.0])
        assert np.isfinite(weights).all()

    def test_cohort_size_scaling(self) -> None:
        freqs = np.array([0.2, 0.3])
        scaled = madsen_browning_weights(freqs, n_samples=16)
        np.testing.assert_allclose(scaled, madsen_browning_weights(freqs) / 4.0)

    def test_zero_cohort_size_gives_zero_weights(self) -> None:
        np.testing.assert_array_equal(madsen_browning_weights(np.array([0.5]), n_samples=0), [0.0])

    def test_output_dtype_float64(self) -> None:
        assert madsen_browning_weights(np.array([0.1])).dtype == np.float64

