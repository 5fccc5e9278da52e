"""Kernel PCA run over a CSV feature matrix."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler

from ..reducer import KernelPCAReducer
from .base import Preprocessor, PreprocessorResult, write_json
from .config import KernelPCAConfig


def _get_matplotlib():
    """Lazy import matplotlib with a non-interactive backend."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    return plt


def _normalise_metadata_columns(columns: Optional[Iterable[str]]) -> List[str]:
    if columns is None:
        return []
    return [str(col) for col in columns]


class KernelPCAPreprocessor(Preprocessor):
    """Load a feature CSV, reduce it with kernel PCA and persist the embedding."""

    run_prefix = "kpca"
    config: KernelPCAConfig

    def __init__(self, config: KernelPCAConfig, **kwargs) -> None:
        super().__init__(config, **kwargs)
        self.config = config

    def load_inputs(self) -> pd.DataFrame:
        self.logger.info("Loading feature matrix from %s", self.config.input_features)
        if not Path(self.config.input_features).exists():
            raise FileNotFoundError(
                f"Feature matrix not found at {self.config.input_features}"
            )
        df = pd.read_csv(self.config.input_features)
        if df.empty:
            raise ValueError("Feature matrix is empty; cannot compute projection.")
        return df

    def prepare_features(self, inputs: pd.DataFrame) -> tuple[np.ndarray, List[str]]:
        """Return the cleaned ``(n_samples, n_features)`` matrix and its column names."""
        metadata_cols = _normalise_metadata_columns(self.config.metadata_columns)
        for column in metadata_cols:
            if column not in inputs.columns:
                self.logger.warning(
                    "Metadata column '%s' not found in feature matrix.", column
                )

        numeric_df = inputs.drop(
            columns=[col for col in metadata_cols if col in inputs.columns]
        ).select_dtypes(include=[np.number])
        if numeric_df.empty:
            raise ValueError("No numeric columns available for kernel PCA.")

        # Replace infinities with NaN
        numeric_df = numeric_df.replace([np.inf, -np.inf], np.nan)

        # Drop columns that are entirely NaN
        numeric_df = numeric_df.dropna(axis=1, how="all")
        if numeric_df.empty:
            raise ValueError("All numeric columns are empty after removing NaN values.")

        # Fill remaining NaNs with column mean (for partially missing columns)
        numeric_df = numeric_df.fillna(numeric_df.mean())

        features = numeric_df.values.astype(np.float64)
        feature_columns = numeric_df.columns.tolist()

        if self.config.standardise:
            features = StandardScaler().fit_transform(features)
            self.logger.debug("Applied standardisation to feature matrix.")

        return features, feature_columns

    def process(self, inputs: pd.DataFrame) -> Dict[str, Any]:
        features, feature_columns = self.prepare_features(inputs)

        self.logger.info(
            "Running %s kernel PCA with %d components on %d samples%s",
            self.config.kernel,
            self.config.new_dimensionality,
            features.shape[0],
            " (Nystroem)" if self.config.nystroem_method else "",
        )
        reducer = KernelPCAReducer(
            n_components=self.config.new_dimensionality,
            kernel=self.config.kernel,
            random_state=self.config.random_state,
            center=self.config.center,
            nystroem_method=self.config.nystroem_method,
            rank=self.config.rank,
            sampling=self.config.sampling,
            kernel_params=self.config.kernel_params,
            sampling_params=self.config.sampling_params,
        )
        embedding, model_summary = reducer.fit_transform(features)

        metadata_cols = _normalise_metadata_columns(self.config.metadata_columns)
        projection_df = self._build_projection_dataframe(inputs, metadata_cols, embedding)

        return {
            "embedding": embedding,
            "projection_df": projection_df,
            "feature_columns": feature_columns,
            "model_summary": model_summary,
        }

    def save(self, processed: Dict[str, Any]) -> PreprocessorResult:
        embedding: np.ndarray = processed["embedding"]
        projection_df: pd.DataFrame = processed["projection_df"]
        model_summary: Dict[str, Any] = processed["model_summary"]

        artifacts: Dict[str, Path] = {}

        embedding_npy = self.run_dir / "embedding.npy"
        np.save(embedding_npy, embedding)
        artifacts["embedding_npy"] = embedding_npy

        embedding_csv = self.run_dir / "embedding.csv"
        projection_df.to_csv(embedding_csv, index=False)
        artifacts["embedding_csv"] = embedding_csv

        artifacts["preview_plot"] = self._save_preview_plot(embedding, projection_df)
        artifacts["projection_config"] = self._write_projection_config(
            processed, model_summary
        )

        metadata = {
            "kernel": self.config.kernel,
            "new_dimensionality": self.config.new_dimensionality,
            "n_samples": int(embedding.shape[0]),
            "n_features": len(processed["feature_columns"]),
        }
        metadata.update(model_summary)
        self.logger.log_metrics(
            {
                "n_samples": metadata["n_samples"],
                "n_features": metadata["n_features"],
                "dropped_directions": model_summary.get("dropped_directions", 0),
            }
        )

        return PreprocessorResult(
            run_id=self.run_id,
            run_dir=self.run_dir,
            artifacts=artifacts,
            metadata=metadata,
        )

    # Internal helpers -----------------------------------------------------

    def _build_projection_dataframe(
        self,
        original_df: pd.DataFrame,
        metadata_cols: List[str],
        embedding: np.ndarray,
    ) -> pd.DataFrame:
        dim_columns = [f"dim{idx + 1}" for idx in range(embedding.shape[1])]
        projection_df = pd.DataFrame(embedding, columns=dim_columns)
        for column in metadata_cols:
            if column in original_df.columns:
                projection_df[column] = original_df[column].values
        ordered_columns = [col for col in metadata_cols if col in projection_df.columns]
        ordered_columns += [col for col in projection_df.columns if col not in metadata_cols]
        return projection_df[ordered_columns]

    def _save_preview_plot(
        self, embedding: np.ndarray, projection_df: pd.DataFrame
    ) -> Path:
        preview_path = self.run_dir / "embedding_preview.png"
        plt = _get_matplotlib()
        fig, ax = plt.subplots(figsize=(6, 5))
        try:
            if embedding.shape[1] >= 2:
                ax.scatter(embedding[:, 0], embedding[:, 1], s=16, alpha=0.7)
                ax.set_xlabel("dim1")
                ax.set_ylabel("dim2")
            else:
                ax.scatter(
                    np.arange(embedding.shape[0]), embedding[:, 0], s=16, alpha=0.7
                )
                ax.set_xlabel("sample_index")
                ax.set_ylabel("dim1")
            ax.set_title(
                f"Kernel PCA ({self.config.kernel}) projection ({len(projection_df)} samples)"
            )
            ax.grid(True, linestyle="--", alpha=0.3)
            fig.tight_layout()
            fig.savefig(str(preview_path), dpi=200)
        finally:
            plt.close(fig)
        return preview_path

    def _write_projection_config(
        self,
        processed: Dict[str, Any],
        model_summary: Dict[str, Any],
    ) -> Path:
        payload = {
            "run_id": self.run_id,
            "config": self.config.to_serialisable_dict(),
            "feature_columns": processed["feature_columns"],
            "model_summary": model_summary,
        }
        return write_json(self.run_dir / "projection_config.json", payload)


__all__ = ["KernelPCAPreprocessor"]
