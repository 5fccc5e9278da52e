"""
Tests for CSV-to-artifact kernel PCA runs.
"""

import json
import logging

import numpy as np
import pandas as pd
import pytest

from kernel_pca.errors import InvalidDimensionalityError
from kernel_pca.preprocessing import KernelPCAConfig, KernelPCAPreprocessor


def _config(feature_csv, tmp_path, **kwargs):
    values = {
        "input_features": feature_csv,
        "output_root": tmp_path / "runs",
        "run_id": "test_run",
        "kernel": "gaussian",
        "new_dimensionality": 2,
        "metadata_columns": ["track_id"],
    }
    values.update(kwargs)
    return KernelPCAConfig(**values)


def test_execute_writes_artifacts(feature_csv, tmp_path):
    result = KernelPCAPreprocessor(_config(feature_csv, tmp_path)).execute()

    assert result.run_id == "test_run"
    assert result.run_dir == tmp_path / "runs" / "test_run"
    assert set(result.artifacts) == {
        "embedding_npy",
        "embedding_csv",
        "preview_plot",
        "projection_config",
    }
    for path in result.artifacts.values():
        assert path.exists()
    assert (result.run_dir / "config.json").exists()
    assert (result.run_dir / "run_metadata.json").exists()

    embedding = np.load(result.artifacts["embedding_npy"])
    assert embedding.shape == (12, 2)
    assert np.all(np.isfinite(embedding))

    projection = pd.read_csv(result.artifacts["embedding_csv"])
    assert list(projection.columns) == ["track_id", "dim1", "dim2"]
    assert projection["track_id"].iloc[0] == "track_00"

    assert result.metadata["n_samples"] == 12
    assert result.metadata["kernel"] == "gaussian"


def test_feature_cleaning(feature_csv, tmp_path):
    preprocessor = KernelPCAPreprocessor(_config(feature_csv, tmp_path))
    features, columns = preprocessor.prepare_features(pd.read_csv(feature_csv))
    assert "track_id" not in columns
    assert "empty" not in columns
    assert features.shape == (12, len(columns))
    assert np.all(np.isfinite(features))
    # Standardised columns.
    np.testing.assert_allclose(features.mean(axis=0), 0.0, atol=1e-12)


def test_feature_cleaning_without_standardisation(feature_csv, tmp_path):
    preprocessor = KernelPCAPreprocessor(_config(feature_csv, tmp_path, standardise=False))
    features, columns = preprocessor.prepare_features(pd.read_csv(feature_csv))
    tempo = pd.read_csv(feature_csv)["tempo"].to_numpy()
    np.testing.assert_allclose(features[:, columns.index("tempo")], tempo)


def test_nystroem_run_records_selection(feature_csv, tmp_path):
    config = _config(
        feature_csv,
        tmp_path,
        nystroem_method=True,
        rank=4,
        sampling="kmeans",
        sampling_params={"representative": "nearest"},
        center=True,
    )
    result = KernelPCAPreprocessor(config).execute()

    with result.artifacts["projection_config"].open(encoding="utf-8") as fp:
        payload = json.load(fp)
    summary = payload["model_summary"]
    assert summary["kernel"] == "gaussian"
    assert summary["rank"] == 4
    assert summary["sampling"] == "kmeans"
    assert len(set(summary["selected_indices"])) == 4
    assert payload["config"]["sampling_params"] == {"representative": "nearest"}


def test_existing_run_directory(feature_csv, tmp_path):
    KernelPCAPreprocessor(_config(feature_csv, tmp_path)).execute()
    with pytest.raises(FileExistsError):
        KernelPCAPreprocessor(_config(feature_csv, tmp_path)).execute()
    result = KernelPCAPreprocessor(_config(feature_csv, tmp_path, overwrite=True)).execute()
    assert result.artifacts["embedding_npy"].exists()


def test_missing_input(tmp_path):
    config = _config(tmp_path / "absent.csv", tmp_path)
    with pytest.raises(FileNotFoundError):
        KernelPCAPreprocessor(config).execute()


def test_invalid_dimensionality_propagates(feature_csv, tmp_path):
    config = _config(feature_csv, tmp_path, new_dimensionality=13)
    with pytest.raises(InvalidDimensionalityError):
        KernelPCAPreprocessor(config).execute()


def test_generated_run_id(feature_csv, tmp_path):
    preprocessor = KernelPCAPreprocessor(_config(feature_csv, tmp_path, run_id=None))
    assert preprocessor.run_id.startswith("kpca_")


def test_config_json_records_only_run_settings(feature_csv, tmp_path):
    result = KernelPCAPreprocessor(_config(feature_csv, tmp_path)).execute()
    with (result.run_dir / "config.json").open(encoding="utf-8") as fp:
        recorded = json.load(fp)
    assert recorded["run_id"] == "test_run"
    assert recorded["log_level"] == logging.INFO
    assert recorded["kernel"] == "gaussian"
    assert "input_path" not in recorded
    assert "extra_metadata" not in recorded

    with (result.run_dir / "run_metadata.json").open(encoding="utf-8") as fp:
        run_metadata = json.load(fp)
    assert run_metadata["run_id"] == "test_run"
    assert run_metadata["metadata"]["elapsed_seconds"] >= 0


def test_log_level_is_applied_to_the_run_logger(feature_csv, tmp_path):
    preprocessor = KernelPCAPreprocessor(
        _config(feature_csv, tmp_path, log_level=logging.DEBUG)
    )
    assert preprocessor.logger.logger.level == logging.DEBUG
    quiet = KernelPCAPreprocessor(_config(feature_csv, tmp_path, log_level=logging.WARNING))
    assert quiet.logger.logger.level == logging.WARNING
