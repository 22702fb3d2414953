"""Event-oriented logger used by the IRC and session layers."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from .event_catalog import EVENT_TEMPLATES


class GatewayLogger:
    """Emits ``domain_action`` events with a human text from the event catalog.

    Handlers are not attached here; ``LoggerConfigurator`` configures the root
    logger once at start-up and this logger propagates to it.
    """

    def __init__(
        self,
        name: str = "chat_gateway",
        templates: Mapping[tuple[str, str], str] | None = None,
    ) -> None:
        self._event_name_width = 32
        self.logger = logging.getLogger(name)
        self.templates = EVENT_TEMPLATES if templates is None else templates

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            template = self.templates.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        kw: dict[str, object] = dict(kwargs)
        user = kw.pop("user", None)
        channel = kw.pop("channel", None)
        prefix = self._build_prefix(
            user if isinstance(user, str) else None,
            channel if isinstance(channel, str) else None,
        )
        if self._is_debug_enabled():
            msg = self._build_debug_message(event_name, prefix, human_text, kw)
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _is_debug_enabled() -> bool:
        return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")

    @staticmethod
    def _build_prefix(user: str | None, channel: str | None) -> str:
        user_label = user or "gateway"
        core = f"{user_label}{channel}" if channel else user_label
        padded = core.ljust(24)[:24]
        return f"[{padded}]"

    def _build_debug_message(
        self,
        event_name: str,
        prefix: str,
        human_text: str,
        kwargs: dict[str, object],
    ) -> str:
        width = self._event_name_width
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:
            ev = event_name[: width - 1] + "…"
        base = f"{ev} {prefix} {human_text}"
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        if context:
            base = f"{base} ({context})"
        return base


logger = GatewayLogger()
