import json
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger("neuropath.events")

# Free-text fields can carry therapist notes or model output; only their size is logged.
_FREE_TEXT_KEYS = {"message", "encouragement", "prompt", "notes", "reply"}


def _loggable(key: str, value: Any) -> Any:
	if key.lower() in _FREE_TEXT_KEYS:
		return {"redacted": True, "length": len(str(value or ""))}
	if isinstance(value, Enum):
		return value.value
	if isinstance(value, (datetime, date)):
		return value.isoformat()
	if isinstance(value, float):
		return round(value, 4)
	if value is None or isinstance(value, (str, int, bool)):
		return value
	if hasattr(value, "to_dict"):
		value = value.to_dict()
	if isinstance(value, dict):
		return {str(k): _loggable(str(k), v) for k, v in value.items()}
	if isinstance(value, (list, tuple, set)):
		return [_loggable(key, item) for item in value]
	return str(value)


def log_event(component: str, event: str, owner_id: str, level: int = logging.INFO, **fields) -> None:
	"""Emit one JSON line per domain event on the ``neuropath.events`` logger."""
	record = {"component": component or "neuropath", "event": event or "unknown", "owner_id": owner_id or ""}
	for key, value in fields.items():
		record[key] = _loggable(key, value)
	logger.log(level, json.dumps(record, ensure_ascii=False, default=str))
