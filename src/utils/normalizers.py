"""Data normalization utilities"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from google.cloud import firestore

from config.firebase_config import FirebaseConfig

logger = logging.getLogger(__name__)


def normalize_timestamp(raw: Any) -> Any:
    """
    Convert a Realtime Database time value into a Firestore time value.

    Accepted inputs:
    - None: server timestamp sentinel, resolved by Firestore at commit time
    - int/float: milliseconds since epoch
    - datetime: returned as-is (naive values are taken as UTC)
    - ISO-8601 string

    Anything else falls back to the server timestamp.

    Args:
        raw: Time value from the ephemeral store

    Returns:
        datetime (UTC) or firestore.SERVER_TIMESTAMP
    """
    if raw is None:
        return firestore.SERVER_TIMESTAMP

    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)

    # bool is an int subclass
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            # Outside datetime's range, or nan/inf
            pass

    elif isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace('Z', '+00:00'))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        except ValueError:
            pass

    logger.warning(f"Unrecognized timestamp value {raw!r}, using server timestamp")
    return firestore.SERVER_TIMESTAMP


def apply_status_defaults(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of a status payload with a normalized timestamp and an
    explicit emergencyStatus flag.

    No other field is inspected or validated.
    """
    record = dict(data)
    record['timestamp'] = normalize_timestamp(record.get('timestamp'))
    if record.get('emergencyStatus') is None:
        record['emergencyStatus'] = False
    return record


def resolve_device_id(event_id: str) -> str:
    """
    Resolve the owning device of an event log entry.

    "plugA_17" -> "plugA"; ids without a separator (or with an empty prefix)
    belong to the fallback device.
    """
    separator = FirebaseConfig.EVENT_ID_SEPARATOR
    if event_id and separator in event_id:
        device_id = event_id.split(separator, 1)[0]
        if device_id:
            return device_id
    return FirebaseConfig.FALLBACK_DEVICE_ID
