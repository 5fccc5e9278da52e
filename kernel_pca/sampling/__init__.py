"""Point selection policies for the Nystroem approximation."""

from .base import PointSelectionPolicy, Selection, validate_indices, validate_rank
from .registry import (
    available_sampling_schemes,
    create_sampler,
    register_sampler,
    sampling_registry,
)

# Importing the modules registers the built-in policies.
from .kmeans import KMeansSelection  # noqa: F401
from .ordered import OrderedSelection, RandomSelection  # noqa: F401

__all__ = [
    "KMeansSelection",
    "OrderedSelection",
    "PointSelectionPolicy",
    "RandomSelection",
    "Selection",
    "available_sampling_schemes",
    "create_sampler",
    "register_sampler",
    "sampling_registry",
    "validate_indices",
    "validate_rank",
]
