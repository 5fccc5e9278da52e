"""Registry of point selection policies addressable by scheme name."""

from __future__ import annotations

from typing import Any

from ..errors import UnknownSamplingSchemeError
from ..registry import Registry, registering
from .base import PointSelectionPolicy

sampling_registry: Registry[PointSelectionPolicy] = Registry(
    "sampling scheme", UnknownSamplingSchemeError
)


def register_sampler(name: str):
    """Class decorator to register a selection policy under ``name``."""

    return registering(sampling_registry, name)


def create_sampler(name: str | None, **kwargs: Any) -> PointSelectionPolicy:
    """Instantiate the policy registered under ``name``.

    A missing name raises :class:`~kernel_pca.errors.ConfigurationError`; an
    unregistered one raises :class:`~kernel_pca.errors.UnknownSamplingSchemeError`.
    """
    return sampling_registry.create(name, **kwargs)


def available_sampling_schemes() -> list[str]:
    return sorted(sampling_registry.available())


__all__ = [
    "available_sampling_schemes",
    "create_sampler",
    "register_sampler",
    "sampling_registry",
]
