"""Shared pytest fixtures for all test modules."""

import numpy as np
import pandas as pd
import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated unit tests")


@pytest.fixture
def small_genotypes() -> np.ndarray:
    """4 samples x 2 markers with CMC [0,1,1,1] and Zeggini [0,1,1,2]."""
    return np.array([[0, 0], [1, 0], [0, 2], [1, 1]], dtype=np.float64)


@pytest.fixture
def case_control_phenotype() -> np.ndarray:
    """Phenotype for small_genotypes: samples 0-1 controls, 2-3 cases."""
    return np.array([0.0, 0.0, 1.0, 1.0])


@pytest.fixture
def random_genotypes() -> np.ndarray:
    """Sparse random dosage matrix (50 samples x 8 markers) with a few missing cells."""
    rng = np.random.default_rng(42)
    geno = rng.choice([0.0, 1.0, 2.0], size=(50, 8), p=[0.9, 0.08, 0.02])
    geno[rng.integers(0, 50, size=5), rng.integers(0, 8, size=5)] = -9.0
    return geno


@pytest.fixture
def covariate_df() -> pd.DataFrame:
    """Two numeric covariates for five samples."""
    return pd.DataFrame(
        {"age": [30.0, 45.0, 28.0, 52.0, 39.0], "pc1": [0.1, -0.2, 0.05, 0.3, 0.0]},
        index=["S1", "S2", "S3", "S4", "S5"],
    )
