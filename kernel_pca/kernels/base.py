"""Abstract base class for kernel evaluators."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class KernelEvaluator(ABC):
    """A symmetric, deterministic scalar function of two points.

    Points are 1-D arrays of equal length. Blocks of points follow the column
    convention of the numerical core: an array of shape ``(d_in, n)`` holds
    ``n`` points.
    """

    #: Canonical string identifier for the kernel. Subclasses must override.
    name: str

    @abstractmethod
    def evaluate(self, a: np.ndarray, b: np.ndarray) -> float:
        """Return ``k(a, b)``."""

    def pairwise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Return the ``(n_x, n_y)`` matrix of kernel values between point columns.

        Subclasses override this with a vectorised expression; entry ``(i, j)``
        must equal ``evaluate(x[:, i], y[:, j])``.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        out = np.empty((x.shape[1], y.shape[1]), dtype=np.float64)
        for i in range(x.shape[1]):
            for j in range(y.shape[1]):
                out[i, j] = self.evaluate(x[:, i], y[:, j])
        return out

    def params(self) -> dict[str, float]:
        """Return the numeric parameters of the kernel."""
        return {}

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self.params().items())
        return f"{self.__class__.__name__}({args})"


__all__ = ["KernelEvaluator"]
