"""Kernel evaluators and their name registry."""

from .base import KernelEvaluator
from .registry import available_kernels, create_kernel, kernel_registry, register_kernel

# Importing the module registers the standard kernels.
from .standard import (  # noqa: F401
    CosineKernel,
    EpanechnikovKernel,
    GaussianKernel,
    HyperbolicTangentKernel,
    LaplacianKernel,
    LinearKernel,
    PolynomialKernel,
)

__all__ = [
    "CosineKernel",
    "EpanechnikovKernel",
    "GaussianKernel",
    "HyperbolicTangentKernel",
    "KernelEvaluator",
    "LaplacianKernel",
    "LinearKernel",
    "PolynomialKernel",
    "available_kernels",
    "create_kernel",
    "kernel_registry",
    "register_kernel",
]
