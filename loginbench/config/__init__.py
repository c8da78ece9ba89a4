from .loader import load_config, parse_credential
from .types import ConfigError, RunConfig, UnsupportedConfigFormatError

__all__ = [
    "load_config",
    "parse_credential",
    "RunConfig",
    "ConfigError",
    "UnsupportedConfigFormatError",
]
