"""Kernel principal component analysis with optional Nystroem approximation."""

from .centering import center_feature_map, center_kernel_matrix
from .errors import (
    ConfigurationError,
    InvalidDimensionalityError,
    InvalidParameterError,
    KernelPCAError,
    NumericalInstabilityError,
    UnknownKernelError,
    UnknownSamplingSchemeError,
)
from .kernel_matrix import KernelMatrixBuilder
from .kernels import KernelEvaluator, available_kernels, create_kernel
from .kpca import KernelPCA, KernelPCAState, ReductionResult, kernel_pca
from .nystroem import NystroemApproximator, NystroemFactors
from .reducer import KernelPCAReducer
from .sampling import PointSelectionPolicy, Selection, available_sampling_schemes, create_sampler

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "InvalidDimensionalityError",
    "InvalidParameterError",
    "KernelEvaluator",
    "KernelMatrixBuilder",
    "KernelPCA",
    "KernelPCAError",
    "KernelPCAReducer",
    "KernelPCAState",
    "NumericalInstabilityError",
    "NystroemApproximator",
    "NystroemFactors",
    "PointSelectionPolicy",
    "ReductionResult",
    "Selection",
    "UnknownKernelError",
    "UnknownSamplingSchemeError",
    "available_kernels",
    "available_sampling_schemes",
    "center_feature_map",
    "center_kernel_matrix",
    "create_kernel",
    "create_sampler",
    "kernel_pca",
]
