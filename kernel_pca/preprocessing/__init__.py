"""CSV-to-artifact kernel PCA runs."""

from .base import Preprocessor, PreprocessorConfig, PreprocessorResult
from .config import KernelPCAConfig
from .preprocessor import KernelPCAPreprocessor

__all__ = [
    "KernelPCAConfig",
    "KernelPCAPreprocessor",
    "Preprocessor",
    "PreprocessorConfig",
    "PreprocessorResult",
]
