"""Configuration for justify batches."""

from justify.lib.config.settings import JustifyConfig, load_config

__all__ = ["JustifyConfig", "load_config"]
