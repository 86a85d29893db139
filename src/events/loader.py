"""
Webhook Event Loader.

Reads the event that triggered the current GitHub Actions run from the
JSON file the runner points to with ``GITHUB_EVENT_PATH``.
"""

import json
from pathlib import Path
from typing import Optional

from config import logger
from errors import PayloadError
from events.models import Event, parse_event


def load_event(event_name: str, event_path: str) -> Optional[Event]:
    """
    Load and parse the triggering webhook event.

    Args:
        event_name (str): Webhook event name
        event_path (str): Path to the JSON payload

    Returns:
        Optional[Event]: Parsed event, or None if the event name is not handled

    Raises:
        PayloadError: If the name or path is missing, or the payload is unreadable or malformed
    """
    if not event_name:
        raise PayloadError("No event name provided, set GITHUB_EVENT_NAME")
    if not event_path:
        raise PayloadError("No event payload provided, set GITHUB_EVENT_PATH")

    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise PayloadError(f"Failed to read event payload {path}: {e}") from e
    if not isinstance(payload, dict):
        raise PayloadError(f"Event payload {path} is not a JSON object")

    event = parse_event(event_name, payload)
    if event is None:
        logger.info({"message": "Ignoring unsupported event", "event": event_name})
    return event
