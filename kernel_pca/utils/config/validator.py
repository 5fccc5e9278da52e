"""Semantic validation of kernel PCA run configuration.

The JSON schema in :mod:`.config_loader` checks structure and types; this
module checks the rules that depend on several values at once and on the
kernel and sampling registries.
"""

from typing import Any, Dict, List, Tuple

from ...errors import ConfigurationError, UnknownKernelError, UnknownSamplingSchemeError
from ...kernels import available_kernels
from ...sampling import available_sampling_schemes
from ..logging.logging_manager import get_logger

logger = get_logger("config_validator")

#: Parameters each kernel actually reads.
KERNEL_PARAMETERS = {
    "linear": (),
    "gaussian": ("bandwidth",),
    "polynomial": ("degree", "offset"),
    "hyptan": ("kernel_scale", "offset"),
    "laplacian": ("bandwidth",),
    "epanechnikov": ("bandwidth",),
    "cosine": (),
}


def _get_value(config: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Get a value from config using dot notation (e.g. 'kernel.name')."""
    value: Any = config
    try:
        for part in key.split("."):
            value = value[part]
        return value
    except (KeyError, TypeError):
        return default


class ConfigValidator:
    """Validate kernel PCA configuration parameters."""

    @staticmethod
    def validate(config: Dict[str, Any]) -> Tuple[List[str], List[str]]:
        """Validate configuration and return ``(errors, warnings)``.

        Unknown kernel or sampling names raise immediately with their
        dedicated exception types.
        """
        errors: List[str] = []
        warnings: List[str] = []

        kernel_name = _get_value(config, "kernel.name")
        if kernel_name is None or not str(kernel_name).strip():
            errors.append("No kernel specified (kernel.name).")
        else:
            key = str(kernel_name).strip().lower()
            if key not in available_kernels():
                raise UnknownKernelError(str(kernel_name), available_kernels())
            used = KERNEL_PARAMETERS.get(key, ())
            for param in ("bandwidth", "degree", "offset", "kernel_scale"):
                if _get_value(config, f"kernel.{param}") is not None and param not in used:
                    warnings.append(
                        f"kernel.{param} is set but ignored by the '{key}' kernel."
                    )

        new_dim = _get_value(config, "reduction.new_dimensionality")
        if new_dim is not None and new_dim < 1:
            errors.append(f"reduction.new_dimensionality={new_dim} must be positive")

        if _get_value(config, "nystroem.enabled", False):
            sampling = _get_value(config, "nystroem.sampling")
            if sampling is None or str(sampling).strip().lower() not in available_sampling_schemes():
                raise UnknownSamplingSchemeError(str(sampling), available_sampling_schemes())
            rank = _get_value(config, "nystroem.rank")
            if rank is not None and new_dim is not None and rank < new_dim:
                errors.append(
                    f"nystroem.rank={rank} is smaller than "
                    f"reduction.new_dimensionality={new_dim}"
                )
        else:
            if _get_value(config, "nystroem.rank") is not None:
                warnings.append("nystroem.rank is set but the Nystroem method is disabled.")

        return errors, warnings

    @staticmethod
    def validate_and_log(config: Dict[str, Any]) -> None:
        """Validate configuration, log warnings and raise on errors.

        Raises:
            ConfigurationError: If any error is found
        """
        errors, warnings = ConfigValidator.validate(config)
        for warning in warnings:
            logger.warning(warning)
        if errors:
            for error in errors:
                logger.error(error)
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))


__all__ = ["ConfigValidator", "KERNEL_PARAMETERS"]
