"""Human text for ``log_event`` calls, keyed by ``(domain, action)``."""

from __future__ import annotations

import json
from pathlib import Path

TEMPLATES_PATH = Path(__file__).with_name("event_templates.json")


def load_event_templates(path: Path = TEMPLATES_PATH) -> dict[tuple[str, str], str]:
    """Flatten ``{domain: {action: template}}`` into one lookup table."""
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)
    return {
        (domain, action): template
        for domain, actions in raw.items()
        for action, template in actions.items()
    }


EVENT_TEMPLATES = load_event_templates()
