"""
Pytest configuration and shared fixtures.

Datasets follow the column convention of the numerical core: an array of
shape ``(d_in, n)`` holds ``n`` points.
"""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def uniform_data():
    """Five uniformly distributed points in five dimensions."""
    return np.random.default_rng(0).random((5, 5))


@pytest.fixture
def cloud_data():
    """Twenty points in three dimensions drawn from two well separated blobs."""
    rng = np.random.default_rng(1)
    left = rng.normal(loc=-2.0, scale=0.3, size=(3, 10))
    right = rng.normal(loc=2.0, scale=0.3, size=(3, 10))
    return np.hstack([left, right])


@pytest.fixture
def feature_csv(tmp_path):
    """
    A small feature matrix on disk, one row per sample.

    Contains an identifier column, a partially missing column, an infinite
    value and a column that is entirely empty.
    """
    rng = np.random.default_rng(2)
    n_samples = 12
    df = pd.DataFrame(
        {
            "track_id": [f"track_{idx:02d}" for idx in range(n_samples)],
            "tempo": rng.normal(120.0, 10.0, n_samples),
            "energy": rng.random(n_samples),
            "loudness": rng.normal(-8.0, 2.0, n_samples),
            "valence": rng.random(n_samples),
            "empty": np.full(n_samples, np.nan),
        }
    )
    df.loc[3, "energy"] = np.nan
    df.loc[5, "loudness"] = np.inf
    path = tmp_path / "features.csv"
    df.to_csv(path, index=False)
    return path
