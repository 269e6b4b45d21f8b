"""edgecsrf core — configuration."""

from edgecsrf.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
