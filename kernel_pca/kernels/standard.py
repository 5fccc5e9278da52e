"""Standard kernel evaluators.

Default parameter values match the command-line defaults: ``bandwidth=1.0``,
``degree=1.0``, ``offset=0.0`` and ``kernel_scale=1.0``. Every kernel accepts
(and ignores) the parameters of the other kernels so that a single parameter
set can be forwarded to whichever kernel is selected by name.
"""

from __future__ import annotations

import numpy as np
from scipy.spatial.distance import cdist

from ..errors import InvalidParameterError
from .base import KernelEvaluator
from .registry import register_kernel

DEFAULT_BANDWIDTH = 1.0
DEFAULT_DEGREE = 1.0
DEFAULT_OFFSET = 0.0
DEFAULT_KERNEL_SCALE = 1.0


def _as_point(a) -> np.ndarray:
    return np.asarray(a, dtype=np.float64).ravel()


def _as_block(x) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim == 1:
        x = x[:, None]
    return x


def _squared_distances(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return cdist(_as_block(x).T, _as_block(y).T, metric="sqeuclidean")


def _check_bandwidth(bandwidth: float) -> float:
    bandwidth = float(bandwidth)
    if not np.isfinite(bandwidth) or bandwidth <= 0:
        raise InvalidParameterError(f"bandwidth must be positive, got {bandwidth}")
    return bandwidth


@register_kernel("linear")
class LinearKernel(KernelEvaluator):
    """``k(a, b) = a . b``"""

    name = "linear"

    def __init__(self, **kwargs) -> None:
        pass

    def evaluate(self, a, b) -> float:
        return float(np.dot(_as_point(a), _as_point(b)))

    def pairwise(self, x, y) -> np.ndarray:
        return _as_block(x).T @ _as_block(y)


@register_kernel("gaussian")
class GaussianKernel(KernelEvaluator):
    """``k(a, b) = exp(-||a - b||^2 / (2 bandwidth^2))``"""

    name = "gaussian"

    def __init__(self, *, bandwidth: float = DEFAULT_BANDWIDTH, **kwargs) -> None:
        self.bandwidth = _check_bandwidth(bandwidth)
        self._gamma = -0.5 / self.bandwidth**2

    def evaluate(self, a, b) -> float:
        diff = _as_point(a) - _as_point(b)
        return float(np.exp(self._gamma * np.dot(diff, diff)))

    def pairwise(self, x, y) -> np.ndarray:
        return np.exp(self._gamma * _squared_distances(x, y))

    def params(self) -> dict[str, float]:
        return {"bandwidth": self.bandwidth}


@register_kernel("polynomial")
class PolynomialKernel(KernelEvaluator):
    """``k(a, b) = (a . b + offset)^degree``"""

    name = "polynomial"

    def __init__(
        self,
        *,
        degree: float = DEFAULT_DEGREE,
        offset: float = DEFAULT_OFFSET,
        **kwargs,
    ) -> None:
        self.degree = float(degree)
        self.offset = float(offset)

    def evaluate(self, a, b) -> float:
        return float(np.power(np.dot(_as_point(a), _as_point(b)) + self.offset, self.degree))

    def pairwise(self, x, y) -> np.ndarray:
        return np.power(_as_block(x).T @ _as_block(y) + self.offset, self.degree)

    def params(self) -> dict[str, float]:
        return {"degree": self.degree, "offset": self.offset}


@register_kernel("hyptan")
class HyperbolicTangentKernel(KernelEvaluator):
    """``k(a, b) = tanh(kernel_scale * (a . b) + offset)``"""

    name = "hyptan"

    def __init__(
        self,
        *,
        kernel_scale: float = DEFAULT_KERNEL_SCALE,
        offset: float = DEFAULT_OFFSET,
        **kwargs,
    ) -> None:
        self.kernel_scale = float(kernel_scale)
        self.offset = float(offset)

    def evaluate(self, a, b) -> float:
        return float(np.tanh(self.kernel_scale * np.dot(_as_point(a), _as_point(b)) + self.offset))

    def pairwise(self, x, y) -> np.ndarray:
        return np.tanh(self.kernel_scale * (_as_block(x).T @ _as_block(y)) + self.offset)

    def params(self) -> dict[str, float]:
        return {"kernel_scale": self.kernel_scale, "offset": self.offset}


@register_kernel("laplacian")
class LaplacianKernel(KernelEvaluator):
    """``k(a, b) = exp(-||a - b|| / bandwidth)``"""

    name = "laplacian"

    def __init__(self, *, bandwidth: float = DEFAULT_BANDWIDTH, **kwargs) -> None:
        self.bandwidth = _check_bandwidth(bandwidth)

    def evaluate(self, a, b) -> float:
        return float(np.exp(-np.linalg.norm(_as_point(a) - _as_point(b)) / self.bandwidth))

    def pairwise(self, x, y) -> np.ndarray:
        distances = cdist(_as_block(x).T, _as_block(y).T, metric="euclidean")
        return np.exp(-distances / self.bandwidth)

    def params(self) -> dict[str, float]:
        return {"bandwidth": self.bandwidth}


@register_kernel("epanechnikov")
class EpanechnikovKernel(KernelEvaluator):
    """``k(a, b) = max(0, 1 - ||a - b||^2 / bandwidth^2)``"""

    name = "epanechnikov"

    def __init__(self, *, bandwidth: float = DEFAULT_BANDWIDTH, **kwargs) -> None:
        self.bandwidth = _check_bandwidth(bandwidth)

    def evaluate(self, a, b) -> float:
        diff = _as_point(a) - _as_point(b)
        return float(max(0.0, 1.0 - np.dot(diff, diff) / self.bandwidth**2))

    def pairwise(self, x, y) -> np.ndarray:
        return np.maximum(0.0, 1.0 - _squared_distances(x, y) / self.bandwidth**2)

    def params(self) -> dict[str, float]:
        return {"bandwidth": self.bandwidth}


@register_kernel("cosine")
class CosineKernel(KernelEvaluator):
    """``k(a, b) = a . b / (||a|| ||b||)``, zero when either point is the origin."""

    name = "cosine"

    def __init__(self, **kwargs) -> None:
        pass

    def evaluate(self, a, b) -> float:
        a = _as_point(a)
        b = _as_point(b)
        denominator = np.linalg.norm(a) * np.linalg.norm(b)
        if denominator == 0.0:
            return 0.0
        return float(np.dot(a, b) / denominator)

    def pairwise(self, x, y) -> np.ndarray:
        x = _as_block(x)
        y = _as_block(y)
        denominator = np.outer(np.linalg.norm(x, axis=0), np.linalg.norm(y, axis=0))
        dots = x.T @ y
        out = np.zeros_like(dots)
        np.divide(dots, denominator, out=out, where=denominator != 0.0)
        return out


__all__ = [
    "CosineKernel",
    "DEFAULT_BANDWIDTH",
    "DEFAULT_DEGREE",
    "DEFAULT_KERNEL_SCALE",
    "DEFAULT_OFFSET",
    "EpanechnikovKernel",
    "GaussianKernel",
    "HyperbolicTangentKernel",
    "LaplacianKernel",
    "LinearKernel",
    "PolynomialKernel",
]
