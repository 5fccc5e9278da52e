"""Kernel PCA as a row-oriented dimensionality reduction strategy."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np

from .kpca import DEFAULT_SAMPLING, KernelPCA


class KernelPCAReducer:
    """Apply kernel PCA to a ``(n_samples, n_features)`` feature matrix.

    The numerical core works on points as columns; this adapter transposes on
    the way in and out so callers get an ``(n_samples, n_components)``
    embedding, like any other reducer in a feature pipeline.
    """

    method = "kpca"

    def __init__(
        self,
        *,
        n_components: int,
        kernel: Optional[str],
        random_state: Optional[int] = None,
        center: bool = False,
        nystroem_method: bool = False,
        rank: Optional[int] = None,
        sampling: str = DEFAULT_SAMPLING,
        kernel_params: Optional[Dict[str, Any]] = None,
        sampling_params: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.n_components = n_components
        self.kernel = kernel
        self.random_state = random_state
        self.center = center
        self.nystroem_method = nystroem_method
        self.rank = rank
        self.sampling = sampling
        self.kernel_params = dict(kernel_params or {})
        self.sampling_params = dict(sampling_params or {})

    def fit_transform(self, features: np.ndarray) -> Tuple[np.ndarray, Dict[str, object]]:
        features = np.asarray(features, dtype=np.float64)
        kpca = KernelPCA(
            self.kernel,
            new_dimensionality=self.n_components,
            center=self.center,
            nystroem_method=self.nystroem_method,
            rank=self.rank,
            sampling=self.sampling,
            random_state=self.random_state,
            sampling_params=self.sampling_params,
            **self.kernel_params,
        )
        result = kpca.apply(features.T)
        summary: Dict[str, object] = dict(result.summary)
        if result.selection is not None and result.selection.indices is not None:
            summary["selected_indices"] = result.selection.indices.tolist()
        return result.output.T, summary


__all__ = ["KernelPCAReducer"]
