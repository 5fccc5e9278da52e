"""Assembly of full and Nystroem-approximated kernel matrices."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .kernels.base import KernelEvaluator
from .nystroem import NystroemApproximator, NystroemFactors
from .sampling.base import PointSelectionPolicy
from .utils.logging.logging_manager import get_logger

logger = get_logger("kernel_matrix")

# Rows of the upper triangle evaluated per pairwise call.
DEFAULT_BLOCK_SIZE = 256


class KernelMatrixBuilder:
    """Build the kernel matrix of a dataset with points as columns.

    In full mode only the upper triangle (including the diagonal) is
    evaluated, block by block, and mirrored into the lower triangle so the
    result is exactly symmetric. Approximate mode delegates to
    :class:`~kernel_pca.nystroem.NystroemApproximator`.
    """

    def __init__(
        self,
        kernel: Optional[KernelEvaluator],
        *,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ) -> None:
        if kernel is None:
            raise ConfigurationError("No kernel evaluator specified.")
        if block_size < 1:
            raise ConfigurationError(f"block_size must be positive, got {block_size}")
        self.kernel = kernel
        self.block_size = int(block_size)

    @staticmethod
    def _check_data(data: np.ndarray) -> np.ndarray:
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2:
            raise ConfigurationError(
                f"dataset must be a (d_in, n) matrix, got shape {data.shape}"
            )
        if data.shape[1] == 0:
            raise ConfigurationError("dataset contains no points.")
        return data

    def build(self, data: np.ndarray) -> np.ndarray:
        """Return the full ``n x n`` kernel matrix."""
        data = self._check_data(data)
        n_points = data.shape[1]
        kernel_matrix = np.empty((n_points, n_points), dtype=np.float64)
        for start in range(0, n_points, self.block_size):
            stop = min(start + self.block_size, n_points)
            block = self.kernel.pairwise(data[:, start:stop], data[:, start:])
            kernel_matrix[start:stop, start:] = block
            kernel_matrix[start:, start:stop] = block.T
            diagonal = block[:, : stop - start]
            kernel_matrix[start:stop, start:stop] = 0.5 * (diagonal + diagonal.T)
        logger.debug("Built %dx%d kernel matrix with %r", n_points, n_points, self.kernel)
        return kernel_matrix

    def build_approximate(
        self,
        data: np.ndarray,
        rank: int,
        *,
        policy: Optional[PointSelectionPolicy] = None,
        selected_points: Optional[np.ndarray] = None,
        center: bool = False,
    ) -> NystroemFactors:
        """Return the Nystroem factors whose embedding ``G`` satisfies ``G G^T ~ K``."""
        data = self._check_data(data)
        approximator = NystroemApproximator(
            data,
            self.kernel,
            rank,
            policy=policy,
            selected_points=selected_points,
            center=center,
        )
        return approximator.decompose()


__all__ = ["DEFAULT_BLOCK_SIZE", "KernelMatrixBuilder"]
