"""Nystroem low-rank approximation of a kernel matrix.

Given ``rank`` selected points, the full ``n x n`` kernel matrix ``K`` is
approximated from two much smaller blocks:

* the mini-kernel ``W`` (``rank x rank``) between the selected points, and
* the semi-kernel ``C`` (``n x rank``) between every point and the selected
  points,

as ``K ~ C W^+ C^T``. Rather than materialising that product, :meth:`apply`
returns the embedding ``G = C U diag(1/sqrt(s)) V`` built from the SVD
``W = U diag(s) V^T``, storing only ``n x rank`` values. ``G G^T`` equals
``C W^+ C^T`` when ``U == V``, i.e. for a positive semi-definite mini-kernel;
for an indefinite one (e.g. ``hyptan``) ``G G^T`` is ``C |W|^+ C^T``, with the
negative eigenvalues of ``W`` replaced by their magnitudes.

Singular values that are numerically zero (``s_i <= tol * s_max``) would make
the normalisation infinite; those directions are dropped instead. If no
direction survives, :class:`~kernel_pca.errors.NumericalInstabilityError` is
raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import linalg

from .centering import center_feature_map
from .errors import ConfigurationError, InvalidParameterError, NumericalInstabilityError
from .kernels.base import KernelEvaluator
from .sampling.base import PointSelectionPolicy, Selection, validate_rank
from .sampling.ordered import OrderedSelection
from .utils.logging.logging_manager import get_logger

logger = get_logger("nystroem")


@dataclass
class NystroemFactors:
    """Intermediate quantities of one Nystroem approximation."""

    selection: Selection
    mini_kernel: np.ndarray
    semi_kernel: np.ndarray
    left_singular_vectors: np.ndarray
    singular_values: np.ndarray
    right_singular_vectors_t: np.ndarray
    normalization: np.ndarray
    embedding: np.ndarray

    @property
    def n_dropped(self) -> int:
        """Number of directions discarded as numerically degenerate."""
        return int(np.count_nonzero(self.normalization == 0.0))


class NystroemApproximator:
    """Rank-``rank`` Nystroem approximation of the kernel matrix of ``data``.

    Args:
        data: Dataset with points as columns, shape ``(d_in, n)``.
        kernel: Kernel evaluator used for every pairwise evaluation.
        rank: Number of points the approximation is built on.
        policy: Point selection policy. Defaults to ordered selection.
        selected_points: Externally supplied subset (e.g. precomputed cluster
            centres), shape ``(d_in, rank)``. Overrides ``policy``.
        center: Center the semi-kernel over the points before combining it
            with the mini-kernel factors, which double-centers the implied
            approximate kernel matrix.
        tol: Relative threshold below which singular values are treated as
            zero. Defaults to ``rank * eps``.
    """

    def __init__(
        self,
        data: np.ndarray,
        kernel: KernelEvaluator,
        rank: int,
        *,
        policy: Optional[PointSelectionPolicy] = None,
        selected_points: Optional[np.ndarray] = None,
        center: bool = False,
        tol: Optional[float] = None,
    ) -> None:
        if kernel is None:
            raise ConfigurationError("A kernel evaluator is required for the Nystroem method.")
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2 or data.shape[1] == 0:
            raise ConfigurationError(
                f"dataset must be a non-empty (d_in, n) matrix, got shape {data.shape}"
            )
        self.data = data
        self.kernel = kernel
        self.rank = validate_rank(rank, data.shape[1])
        self.policy = policy if policy is not None else OrderedSelection()
        self.selected_points = None
        if selected_points is not None:
            selected_points = np.asarray(selected_points, dtype=np.float64)
            if selected_points.shape != (data.shape[0], self.rank):
                raise InvalidParameterError(
                    f"selected points must have shape {(data.shape[0], self.rank)}, "
                    f"got {selected_points.shape}"
                )
            self.selected_points = selected_points
        self.center = bool(center)
        self.tol = float(tol) if tol is not None else self.rank * np.finfo(np.float64).eps

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    def select(self) -> Selection:
        if self.selected_points is not None:
            return Selection(points=self.selected_points.copy())
        return self.policy.select(self.data, self.rank)

    def kernel_blocks(self, selection: Selection) -> tuple[np.ndarray, np.ndarray]:
        """Return the ``(mini_kernel, semi_kernel)`` pair for ``selection``."""
        subset = selection.resolve(self.data)
        mini_kernel = self.kernel.pairwise(subset, subset)
        # Evaluation order can leave rounding asymmetry; W is symmetric by definition.
        mini_kernel = 0.5 * (mini_kernel + mini_kernel.T)
        semi_kernel = self.kernel.pairwise(self.data, subset)
        return mini_kernel, semi_kernel

    def _normalization(self, singular_values: np.ndarray) -> np.ndarray:
        largest = singular_values[0] if singular_values.size else 0.0
        if not np.isfinite(largest) or largest <= 0.0:
            raise NumericalInstabilityError(
                "Nystroem mini-kernel is numerically zero; no direction can be normalised."
            )
        keep = singular_values > self.tol * largest
        normalization = np.zeros_like(singular_values)
        normalization[keep] = 1.0 / np.sqrt(singular_values[keep])
        return normalization

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def decompose(self) -> NystroemFactors:
        """Run the approximation and return every intermediate factor."""
        selection = self.select()
        mini_kernel, semi_kernel = self.kernel_blocks(selection)
        if not (np.all(np.isfinite(mini_kernel)) and np.all(np.isfinite(semi_kernel))):
            raise NumericalInstabilityError(
                f"kernel {self.kernel!r} produced non-finite values on the selected points"
            )

        u, s, vt = linalg.svd(mini_kernel)
        normalization = self._normalization(s)

        if self.center:
            semi_kernel = center_feature_map(semi_kernel)
        embedding = semi_kernel @ u @ np.diag(normalization) @ vt.T

        factors = NystroemFactors(
            selection=selection,
            mini_kernel=mini_kernel,
            semi_kernel=semi_kernel,
            left_singular_vectors=u,
            singular_values=s,
            right_singular_vectors_t=vt,
            normalization=normalization,
            embedding=embedding,
        )
        logger.debug(
            "Nystroem approximation: n=%d rank=%d dropped=%d largest singular value=%.6g",
            self.data.shape[1],
            self.rank,
            factors.n_dropped,
            float(s[0]),
        )
        if factors.n_dropped:
            logger.debug(
                "Dropped %d degenerate mini-kernel directions (tol=%.3g)",
                factors.n_dropped,
                self.tol,
            )
        return factors

    def apply(self) -> np.ndarray:
        """Return the ``(n, rank)`` Nystroem embedding ``G``."""
        return self.decompose().embedding

    def approximate_kernel(self) -> np.ndarray:
        """Reconstruct the full ``n x n`` approximation ``C W^+ C^T``.

        Matches ``G G^T`` only for a positive semi-definite mini-kernel.
        Quadratic in ``n``; intended for inspection and small problems.
        """
        factors = self.decompose()
        pinv = (
            factors.right_singular_vectors_t.T
            @ np.diag(factors.normalization**2)
            @ factors.left_singular_vectors.T
        )
        return factors.semi_kernel @ pinv @ factors.semi_kernel.T


__all__ = ["NystroemApproximator", "NystroemFactors"]
