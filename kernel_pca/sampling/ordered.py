"""Ordered and uniformly random point selection."""

from __future__ import annotations

import numpy as np

from .base import PointSelectionPolicy, Selection
from .registry import register_sampler


@register_sampler("ordered")
class OrderedSelection(PointSelectionPolicy):
    """Select the first ``rank`` points in dataset order."""

    name = "ordered"

    def _select(self, data: np.ndarray, rank: int) -> Selection:
        return Selection(indices=np.arange(rank, dtype=np.intp))


@register_sampler("random")
class RandomSelection(PointSelectionPolicy):
    """Select ``rank`` distinct points uniformly at random, without replacement.

    Deterministic only when ``random_state`` is set.
    """

    name = "random"

    def _select(self, data: np.ndarray, rank: int) -> Selection:
        rng = np.random.default_rng(self.random_state)
        indices = rng.choice(data.shape[1], size=rank, replace=False)
        return Selection(indices=np.asarray(indices, dtype=np.intp))


__all__ = ["OrderedSelection", "RandomSelection"]
