"""Configuration objects for kernel PCA runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..kpca import DEFAULT_SAMPLING
from .base import PreprocessorConfig


@dataclass
class KernelPCAConfig(PreprocessorConfig):
    """Configures a kernel PCA preprocessing run.

    Kernel parameters left as ``None`` fall back to the selected kernel's
    default. ``rank`` and ``sampling`` only matter when ``nystroem_method`` is
    set; ``rank`` then defaults to ``new_dimensionality``.
    """

    input_features: Path = Path("artifacts/features/features_numeric.csv")
    output_root: Path = Path("artifacts/kpca")
    kernel: Optional[str] = None
    new_dimensionality: int = 2
    bandwidth: Optional[float] = None
    degree: Optional[float] = None
    offset: Optional[float] = None
    kernel_scale: Optional[float] = None
    center: bool = False
    nystroem_method: bool = False
    rank: Optional[int] = None
    sampling: str = DEFAULT_SAMPLING
    sampling_params: Dict[str, Any] = field(default_factory=dict)
    random_state: Optional[int] = 42
    standardise: bool = True
    metadata_columns: List[str] = field(default_factory=list)

    @property
    def kernel_params(self) -> Dict[str, Optional[float]]:
        return {
            "bandwidth": self.bandwidth,
            "degree": self.degree,
            "offset": self.offset,
            "kernel_scale": self.kernel_scale,
        }


__all__ = ["KernelPCAConfig"]
