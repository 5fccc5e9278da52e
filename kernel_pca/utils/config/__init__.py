from .config_loader import ConfigLoader, KPCA_CONFIG_SCHEMA, config_to_kpca_config, load_config
from .validator import ConfigValidator

__all__ = [
    "ConfigLoader",
    "ConfigValidator",
    "KPCA_CONFIG_SCHEMA",
    "config_to_kpca_config",
    "load_config",
]
