"""Configuration package."""

from .loader import ENV_FIELDS, load_config  # noqa: F401
from .model import GatewayConfig  # noqa: F401

__all__ = ["ENV_FIELDS", "GatewayConfig", "load_config"]
