"""Registry of kernel evaluators addressable by name."""

from __future__ import annotations

from typing import Any

from ..errors import UnknownKernelError
from ..registry import Registry, registering
from .base import KernelEvaluator

kernel_registry: Registry[KernelEvaluator] = Registry("kernel", UnknownKernelError)


def register_kernel(name: str):
    """Class decorator to register a kernel evaluator under ``name``."""

    return registering(kernel_registry, name)


def create_kernel(name: str | None, **params: Any) -> KernelEvaluator:
    """Instantiate the kernel registered under ``name``.

    Parameters set to ``None`` are treated as unset and fall back to the
    kernel's default. Raises :class:`~kernel_pca.errors.ConfigurationError`
    when ``name`` is missing and :class:`~kernel_pca.errors.UnknownKernelError`
    when it is not registered.
    """
    params = {key: value for key, value in params.items() if value is not None}
    return kernel_registry.create(name, **params)


def available_kernels() -> list[str]:
    return sorted(kernel_registry.available())


__all__ = ["available_kernels", "create_kernel", "kernel_registry", "register_kernel"]
