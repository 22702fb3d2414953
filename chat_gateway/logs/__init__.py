"""Event catalog and the event-oriented ``GatewayLogger``."""

from .event_catalog import EVENT_TEMPLATES, load_event_templates  # noqa: F401
from .logger import GatewayLogger, logger  # noqa: F401

__all__ = ["EVENT_TEMPLATES", "GatewayLogger", "load_event_templates", "logger"]
