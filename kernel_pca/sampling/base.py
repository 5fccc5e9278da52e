"""Point selection policies for the Nystroem approximation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import InvalidParameterError


@dataclass(frozen=True)
class Selection:
    """The subset of points a Nystroem approximation is built on.

    Exactly one of ``indices`` (positions of dataset columns) or ``points``
    (synthetic points such as k-means centroids, shape ``(d_in, rank)``) is set.
    """

    indices: Optional[np.ndarray] = None
    points: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        if (self.indices is None) == (self.points is None):
            raise ValueError("A selection holds either indices or points, not both.")

    @property
    def rank(self) -> int:
        if self.indices is not None:
            return int(self.indices.shape[0])
        return int(self.points.shape[1])

    def resolve(self, data: np.ndarray) -> np.ndarray:
        """Return the selected points as a ``(d_in, rank)`` block."""
        if self.indices is not None:
            return data[:, self.indices]
        return self.points


def validate_rank(rank: int, n_points: int) -> int:
    """Check that ``1 <= rank <= n_points`` and return ``rank`` as an int."""
    if isinstance(rank, bool) or int(rank) != rank:
        raise InvalidParameterError(f"rank must be an integer, got {rank!r}")
    rank = int(rank)
    if rank < 1:
        raise InvalidParameterError(f"rank must be at least 1, got {rank}")
    if rank > n_points:
        raise InvalidParameterError(
            f"rank ({rank}) cannot exceed the number of points ({n_points})"
        )
    return rank


def validate_indices(indices: np.ndarray, rank: int, n_points: int) -> np.ndarray:
    """Check that ``indices`` holds ``rank`` distinct positions in ``[0, n_points)``."""
    indices = np.asarray(indices, dtype=np.intp).ravel()
    if np.unique(indices).shape[0] != rank or indices.shape[0] != rank:
        raise InvalidParameterError(
            f"selection must contain {rank} distinct indices, got {indices.tolist()}"
        )
    if indices.min() < 0 or indices.max() >= n_points:
        raise InvalidParameterError(
            f"selected indices must lie in [0, {n_points}), got {indices.tolist()}"
        )
    return indices


class PointSelectionPolicy(ABC):
    """Chooses which points participate in a Nystroem approximation.

    Policies hold configuration only; every call to :meth:`select` returns a
    fresh :class:`Selection` owned by the caller.
    """

    #: Canonical string identifier for the policy. Subclasses must override.
    name: str

    def __init__(self, *, random_state: Optional[int] = None, **unknown) -> None:
        if unknown:
            raise InvalidParameterError(
                f"Unknown parameter(s) for the '{getattr(self, 'name', type(self).__name__)}' "
                f"sampling scheme: {', '.join(sorted(unknown))}"
            )
        self.random_state = random_state

    def select(self, data: np.ndarray, rank: int) -> Selection:
        """Select ``rank`` representatives of the point columns of ``data``."""
        data = np.asarray(data, dtype=np.float64)
        rank = validate_rank(rank, data.shape[1])
        selection = self._select(data, rank)
        if selection.indices is not None:
            validate_indices(selection.indices, rank, data.shape[1])
        elif selection.points.shape != (data.shape[0], rank):
            raise InvalidParameterError(
                f"selected points must have shape {(data.shape[0], rank)}, "
                f"got {selection.points.shape}"
            )
        return selection

    @abstractmethod
    def _select(self, data: np.ndarray, rank: int) -> Selection:
        """Implement the policy for an already validated ``rank``."""


__all__ = ["PointSelectionPolicy", "Selection", "validate_indices", "validate_rank"]
