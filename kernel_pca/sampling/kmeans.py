"""k-means based point selection."""

from __future__ import annotations

import warnings
from typing import Optional

import numpy as np
from scipy.spatial.distance import cdist
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from ..errors import InvalidParameterError
from ..utils.logging.logging_manager import get_logger
from .base import PointSelectionPolicy, Selection
from .registry import register_sampler

logger = get_logger("sampling.kmeans")

REPRESENTATIVE_MODES = ("centroid", "nearest")


@register_sampler("kmeans")
class KMeansSelection(PointSelectionPolicy):
    """Cluster the dataset into ``rank`` groups and use one representative each.

    With ``representative="centroid"`` (the default) the centroids themselves
    are returned as synthetic points. With ``representative="nearest"`` each
    centroid is replaced by the closest dataset point not already taken, which
    always yields ``rank`` distinct indices.

    If the dataset has fewer distinct points than ``rank`` the clustering
    cannot produce ``rank`` distinct centroids. The policy then takes the first
    occurrence of every distinct point, in dataset order, and fills the
    remaining slots with the lowest unused indices.
    """

    name = "kmeans"

    def __init__(
        self,
        *,
        random_state: Optional[int] = None,
        representative: str = "centroid",
        n_init: int = 10,
        max_iter: int = 300,
        **kwargs,
    ) -> None:
        super().__init__(random_state=random_state, **kwargs)
        representative = str(representative).lower()
        if representative not in REPRESENTATIVE_MODES:
            raise InvalidParameterError(
                f"representative must be one of {REPRESENTATIVE_MODES}, got '{representative}'"
            )
        self.representative = representative
        self.n_init = int(n_init)
        self.max_iter = int(max_iter)

    def _select(self, data: np.ndarray, rank: int) -> Selection:
        points = data.T
        _, first_seen = np.unique(points, axis=0, return_index=True)
        if first_seen.shape[0] < rank:
            logger.warning(
                "Only %d distinct points for %d clusters; selecting every distinct point first.",
                first_seen.shape[0],
                rank,
            )
            return Selection(indices=self._distinct_first(first_seen, points.shape[0], rank))

        model = KMeans(
            n_clusters=rank,
            n_init=self.n_init,
            max_iter=self.max_iter,
            random_state=self.random_state,
        )
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=ConvergenceWarning)
            model.fit(points)
        centroids = np.asarray(model.cluster_centers_, dtype=np.float64)
        logger.debug("k-means converged after %d iterations", int(model.n_iter_))

        if self.representative == "centroid":
            return Selection(points=np.ascontiguousarray(centroids.T))
        return Selection(indices=self._nearest_distinct(centroids, points))

    @staticmethod
    def _distinct_first(first_seen: np.ndarray, n_points: int, rank: int) -> np.ndarray:
        """First occurrence of each distinct point, then the lowest unused indices."""
        distinct = np.sort(first_seen)
        remaining = np.setdiff1d(np.arange(n_points), distinct)
        return np.concatenate([distinct, remaining])[:rank].astype(np.intp)

    @staticmethod
    def _nearest_distinct(centroids: np.ndarray, points: np.ndarray) -> np.ndarray:
        distances = cdist(centroids, points)
        taken = np.zeros(points.shape[0], dtype=bool)
        chosen = np.empty(centroids.shape[0], dtype=np.intp)
        for cluster, row in enumerate(distances):
            # Stable ordering breaks distance ties by dataset index.
            for index in np.argsort(row, kind="stable"):
                if not taken[index]:
                    taken[index] = True
                    chosen[cluster] = index
                    break
        return chosen


__all__ = ["KMeansSelection", "REPRESENTATIVE_MODES"]
