"""Feature-space centering of kernel matrices and their factors.

For a kernel matrix ``K`` computed on points whose implicit feature map is
``phi``, the kernel matrix of the mean-centred feature map is

    K_c = K - 1 rowMean - colMean 1^T + grandMean

(double centering). When ``K`` is only available as a factor ``G`` with
``K ~ G G^T``, subtracting the column means of ``G`` gives exactly the
double-centred approximation, because ``(I - 11^T/n) G G^T (I - 11^T/n)``
equals ``G_c G_c^T``. Both functions return new arrays and never modify their
input.
"""

from __future__ import annotations

import numpy as np


def center_kernel_matrix(kernel_matrix: np.ndarray) -> np.ndarray:
    """Double-center a square kernel matrix."""
    kernel_matrix = np.asarray(kernel_matrix, dtype=np.float64)
    if kernel_matrix.ndim != 2 or kernel_matrix.shape[0] != kernel_matrix.shape[1]:
        raise ValueError(f"kernel matrix must be square, got shape {kernel_matrix.shape}")
    row_means = kernel_matrix.mean(axis=1, keepdims=True)
    col_means = kernel_matrix.mean(axis=0, keepdims=True)
    grand_mean = kernel_matrix.mean()
    return kernel_matrix - row_means - col_means + grand_mean


def center_feature_map(features: np.ndarray) -> np.ndarray:
    """Center an ``(n, r)`` factor so that its Gram matrix is double-centred.

    Also used on the Nystroem semi-kernel: the Nystroem embedding is linear in
    the semi-kernel, so centering either one yields the same embedding.
    """
    features = np.asarray(features, dtype=np.float64)
    if features.ndim != 2:
        raise ValueError(f"feature map must be 2-D, got shape {features.shape}")
    return features - features.mean(axis=0, keepdims=True)


__all__ = ["center_feature_map", "center_kernel_matrix"]
