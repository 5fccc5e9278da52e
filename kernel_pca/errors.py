"""Exception taxonomy for kernel PCA reductions.

Every error is raised eagerly, during validation, before any kernel evaluation
takes place (except :class:`NumericalInstabilityError`, which can only be
detected once the mini-kernel has been decomposed). None of them are retried:
a failed reduction produces no output.
"""

from __future__ import annotations


class KernelPCAError(Exception):
    """Base class for all errors raised by :mod:`kernel_pca`."""


class ConfigurationError(KernelPCAError, ValueError):
    """Missing or invalid setup, e.g. no kernel specified or an empty dataset."""


class UnknownKernelError(ConfigurationError):
    """The requested kernel name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = sorted(available or [])
        options = ", ".join(self.available) or "<none>"
        super().__init__(f"Unknown kernel '{name}'. Available kernels: {options}.")


class UnknownSamplingSchemeError(ConfigurationError):
    """The requested Nystroem sampling scheme is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = sorted(available or [])
        options = ", ".join(self.available) or "<none>"
        super().__init__(
            f"Unknown sampling scheme '{name}'. Available schemes: {options}."
        )


class InvalidDimensionalityError(KernelPCAError, ValueError):
    """``new_dimensionality`` is not a positive integer bounded by the point count."""


class InvalidParameterError(KernelPCAError, ValueError):
    """A numeric parameter is out of range (e.g. Nystroem rank exceeds ``n``)."""


class NumericalInstabilityError(KernelPCAError, ArithmeticError):
    """The mini-kernel decomposition is degenerate and no direction survives."""


__all__ = [
    "ConfigurationError",
    "InvalidDimensionalityError",
    "InvalidParameterError",
    "KernelPCAError",
    "NumericalInstabilityError",
    "UnknownKernelError",
    "UnknownSamplingSchemeError",
]
