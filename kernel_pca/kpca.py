"""Kernel Principal Component Analysis.

:class:`KernelPCA` obtains the (possibly Nystroem-approximated) kernel matrix
of a dataset, optionally centers it in feature space, extracts the leading
eigenvectors and projects the points onto them.

Both the dataset and the output follow the column convention: the input has
shape ``(d_in, n)`` and the output ``(new_dimensionality, n)``, with columns in
dataset order. Row ``i`` of the output is ``lambda_i * v_i^T``, i.e. the
projection ``V_k^T K`` of the kernel matrix onto its ``k`` leading
eigenvectors. The Nystroem path reproduces the same scaling from the SVD of
the ``(n, rank)`` embedding without forming an ``n x n`` matrix.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import numpy as np
from scipy import linalg
from sklearn.utils.extmath import svd_flip

from .centering import center_kernel_matrix
from .errors import ConfigurationError, InvalidDimensionalityError
from .kernel_matrix import KernelMatrixBuilder
from .kernels import KernelEvaluator, create_kernel
from .sampling import PointSelectionPolicy, Selection, create_sampler, validate_rank
from .utils.logging.logging_manager import get_logger

logger = get_logger("kpca")

DEFAULT_SAMPLING = "kmeans"


class KernelPCAState(enum.Enum):
    UNCONFIGURED = "unconfigured"
    KERNEL_SELECTED = "kernel_selected"
    MATRIX_BUILT = "matrix_built"
    CENTERED = "centered"
    REDUCED = "reduced"
    DONE = "done"


@dataclass
class ReductionResult:
    """Output of one kernel PCA reduction."""

    output: np.ndarray
    eigenvalues: np.ndarray
    kernel: KernelEvaluator
    centered: bool
    nystroem: bool
    rank: Optional[int] = None
    selection: Optional[Selection] = None
    dropped_directions: int = 0
    summary: Dict[str, Any] = field(default_factory=dict)


def _leading_eigenpairs(
    eigenvalues: np.ndarray, eigenvectors: np.ndarray, count: int
) -> tuple[np.ndarray, np.ndarray]:
    """Return the ``count`` largest eigenpairs, descending, ties kept in input order."""
    order = np.argsort(-eigenvalues, kind="stable")[:count]
    vectors, _ = svd_flip(eigenvectors[:, order], eigenvectors[:, order].T.copy())
    return eigenvalues[order], vectors


class KernelPCA:
    """Single-use kernel PCA reduction.

    Args:
        kernel: Kernel name (see :func:`kernel_pca.kernels.available_kernels`)
            or a :class:`~kernel_pca.kernels.KernelEvaluator` instance.
        new_dimensionality: Number of output dimensions, ``1 <= k <= n``.
        center: Double-center the kernel matrix before the eigendecomposition.
        nystroem_method: Use the Nystroem approximation instead of the full
            kernel matrix.
        rank: Nystroem rank. Defaults to ``new_dimensionality``.
        sampling: Nystroem point selection scheme name or policy instance.
        random_state: Seed forwarded to the sampling policy.
        bandwidth, degree, offset, kernel_scale: Kernel parameters; ``None``
            selects the kernel's default.
        sampling_params: Extra keyword arguments for the sampling policy.

    An instance performs exactly one reduction; call :meth:`apply` once and
    create a new instance for the next dataset.
    """

    def __init__(
        self,
        kernel: Union[str, KernelEvaluator, None],
        *,
        new_dimensionality: int,
        center: bool = False,
        nystroem_method: bool = False,
        rank: Optional[int] = None,
        sampling: Union[str, PointSelectionPolicy, None] = DEFAULT_SAMPLING,
        random_state: Optional[int] = None,
        bandwidth: Optional[float] = None,
        degree: Optional[float] = None,
        offset: Optional[float] = None,
        kernel_scale: Optional[float] = None,
        sampling_params: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.kernel = kernel
        self.new_dimensionality = new_dimensionality
        self.center = bool(center)
        self.nystroem_method = bool(nystroem_method)
        self.rank = rank
        self.sampling = sampling
        self.random_state = random_state
        self.kernel_params = {
            "bandwidth": bandwidth,
            "degree": degree,
            "offset": offset,
            "kernel_scale": kernel_scale,
        }
        self.sampling_params = dict(sampling_params or {})
        self.state = KernelPCAState.UNCONFIGURED

        self._data: Optional[np.ndarray] = None
        self._kernel: Optional[KernelEvaluator] = None
        self._policy: Optional[PointSelectionPolicy] = None
        self._rank: Optional[int] = None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _resolve_kernel(self) -> KernelEvaluator:
        if isinstance(self.kernel, KernelEvaluator):
            return self.kernel
        return create_kernel(self.kernel, **self.kernel_params)

    def _resolve_policy(self) -> PointSelectionPolicy:
        if isinstance(self.sampling, PointSelectionPolicy):
            return self.sampling
        return create_sampler(
            self.sampling, random_state=self.random_state, **self.sampling_params
        )

    @staticmethod
    def _check_data(data: np.ndarray) -> np.ndarray:
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2:
            raise ConfigurationError(
                f"dataset must be a (d_in, n) matrix, got shape {data.shape}"
            )
        if data.shape[1] == 0:
            raise ConfigurationError("dataset contains no points.")
        if not np.all(np.isfinite(data)):
            raise ConfigurationError("dataset contains non-finite values.")
        return data

    def _check_dimensionality(self, n_points: int) -> int:
        k = self.new_dimensionality
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
            raise InvalidDimensionalityError(
                f"new_dimensionality must be an integer, got {k!r}"
            )
        k = int(k)
        if k < 1:
            raise InvalidDimensionalityError(
                f"new_dimensionality must be positive, got {k}"
            )
        if k > n_points:
            raise InvalidDimensionalityError(
                f"new dimensionality ({k}) cannot be greater than the number of points ({n_points})"
            )
        return k

    def configure(self, data: np.ndarray) -> None:
        """Validate the dataset and every parameter; ``Unconfigured -> KernelSelected``.

        Runs before any kernel evaluation so invalid requests fail fast.
        """
        if self.state is not KernelPCAState.UNCONFIGURED:
            raise ConfigurationError(
                f"KernelPCA instances are single-use (current state: {self.state.value})."
            )
        data = self._check_data(data)
        kernel = self._resolve_kernel()
        k = self._check_dimensionality(data.shape[1])
        if self.nystroem_method:
            self._policy = self._resolve_policy()
            rank = validate_rank(self.rank if self.rank is not None else k, data.shape[1])
            if k > rank:
                raise InvalidDimensionalityError(
                    f"new dimensionality ({k}) cannot exceed the Nystroem rank ({rank})"
                )
            self._rank = rank
        self.new_dimensionality = k
        self._data = data
        self._kernel = kernel
        self.state = KernelPCAState.KERNEL_SELECTED

    # ------------------------------------------------------------------
    # Reduction
    # ------------------------------------------------------------------
    def _apply_full(self) -> ReductionResult:
        builder = KernelMatrixBuilder(self._kernel)
        kernel_matrix = builder.build(self._data)
        self.state = KernelPCAState.MATRIX_BUILT

        if self.center:
            kernel_matrix = center_kernel_matrix(kernel_matrix)
            self.state = KernelPCAState.CENTERED

        eigenvalues, eigenvectors = linalg.eigh(kernel_matrix)
        eigenvalues, vectors = _leading_eigenpairs(
            eigenvalues, eigenvectors, self.new_dimensionality
        )
        output = vectors.T @ kernel_matrix
        self.state = KernelPCAState.REDUCED
        return ReductionResult(
            output=output,
            eigenvalues=eigenvalues,
            kernel=self._kernel,
            centered=self.center,
            nystroem=False,
        )

    def _apply_nystroem(self) -> ReductionResult:
        builder = KernelMatrixBuilder(self._kernel)
        factors = builder.build_approximate(
            self._data, self._rank, policy=self._policy, center=self.center
        )
        self.state = KernelPCAState.MATRIX_BUILT
        if self.center:
            self.state = KernelPCAState.CENTERED

        # G = P diag(sigma) Q^T, so G G^T has eigenpairs (sigma^2, P).
        p, sigma, _ = linalg.svd(factors.embedding, full_matrices=False)
        eigenvalues, vectors = _leading_eigenpairs(
            sigma**2, p, self.new_dimensionality
        )
        output = (vectors * eigenvalues).T
        self.state = KernelPCAState.REDUCED
        return ReductionResult(
            output=output,
            eigenvalues=eigenvalues,
            kernel=self._kernel,
            centered=self.center,
            nystroem=True,
            rank=self._rank,
            selection=factors.selection,
            dropped_directions=factors.n_dropped,
        )

    def apply(self, data: np.ndarray) -> ReductionResult:
        """Reduce ``data`` (shape ``(d_in, n)``) to ``(new_dimensionality, n)``."""
        self.configure(data)
        logger.debug(
            "Kernel PCA: kernel=%r n=%d k=%d center=%s nystroem=%s rank=%s",
            self._kernel,
            self._data.shape[1],
            self.new_dimensionality,
            self.center,
            self.nystroem_method,
            self._rank,
        )
        if self.nystroem_method:
            result = self._apply_nystroem()
        else:
            result = self._apply_full()

        total = float(np.sum(np.abs(result.eigenvalues)))
        result.summary = {
            "kernel": getattr(self._kernel, "name", type(self._kernel).__name__),
            "kernel_params": self._kernel.params(),
            "new_dimensionality": self.new_dimensionality,
            "center": self.center,
            "nystroem_method": self.nystroem_method,
            "rank": self._rank,
            "sampling": getattr(self._policy, "name", None),
            "eigenvalues": result.eigenvalues.tolist(),
            "dropped_directions": result.dropped_directions,
            "eigenvalue_ratio": (
                (result.eigenvalues / total).tolist() if total > 0 else None
            ),
        }
        # Intermediates belong to this call only.
        self._data = None
        self.state = KernelPCAState.DONE
        return result


def kernel_pca(
    data: np.ndarray,
    kernel: Union[str, KernelEvaluator, None],
    new_dimensionality: int,
    **kwargs: Any,
) -> np.ndarray:
    """Reduce ``data`` (shape ``(d_in, n)``) with a fresh :class:`KernelPCA`.

    Returns the ``(new_dimensionality, n)`` projection. Keyword arguments are
    forwarded to :class:`KernelPCA`.
    """
    return KernelPCA(kernel, new_dimensionality=new_dimensionality, **kwargs).apply(data).output


__all__ = ["DEFAULT_SAMPLING", "KernelPCA", "KernelPCAState", "ReductionResult", "kernel_pca"]
