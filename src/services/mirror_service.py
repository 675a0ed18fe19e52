"""Mirrors Realtime Database writes into Firestore"""
from typing import Dict, Any, Tuple, Optional
from api.models.device_status import DeviceStatusRecord
from api.models.events import EmergencyEvent, LoggedEvent
from services.firestore_service import FirestoreService
from utils.normalizers import resolve_device_id
import logging

logger = logging.getLogger(__name__)


class MirrorService:
    """
    One-way replication of live device data into Firestore.

    Delivery is at-least-once: a redelivered status write overwrites the same
    document, a redelivered log entry is appended again.

    Every store error is caught and logged here. Callers always get a
    (success, message) tuple back and never see an exception, so the event
    delivery system never retries.
    """

    def __init__(self, firestore_service: Optional[FirestoreService] = None):
        self.firestore_service = firestore_service or FirestoreService()

    def mirror_status(self,
                      device_id: str,
                      before: Optional[Dict[str, Any]],
                      after: Optional[Dict[str, Any]]) -> Tuple[bool, str]:
        """
        Mirror a write to /devices/{device_id}/status.

        Steps:
        1. Ignore deletions (after-state absent)
        2. Default timestamp and emergencyStatus
        3. Record an emergency event if emergencyStatus is set
        4. Write the defaulted status to /smart_plugs/{device_id}

        The emergency event and the status write are independent: a failure of
        one does not prevent or undo the other.

        Args:
            device_id: Device identifier from the trigger path
            before: Status before the write (unused, deletions are detected on `after`)
            after: Status after the write, None when deleted

        Returns:
            Tuple of (success: bool, message: str)
        """
        logger.info(f"Status update for device: {device_id}")

        if after is None:
            logger.info(f"Status of device {device_id} was deleted, ignoring")
            return True, "Status deleted, nothing to mirror"

        if not isinstance(after, dict):
            logger.warning(f"Status of device {device_id} is not an object, ignoring: {after!r}")
            return True, "Status is not an object, nothing to mirror"

        try:
            record = DeviceStatusRecord.from_payload(device_id, after)
        except Exception as e:
            logger.error(f"Error preparing status for device {device_id}: {e}", exc_info=True)
            return False, f"Failed to prepare status: {str(e)}"

        if record.is_emergency:
            self._record_emergency(record)

        try:
            self.firestore_service.update_device_status(device_id, record.to_dict())
            logger.info(f"Status successfully mirrored for device: {device_id}")
            return True, "Status mirrored"
        except Exception as e:
            logger.error(f"Error mirroring status for device {device_id}: {e}", exc_info=True)
            return False, f"Failed to mirror status: {str(e)}"

    def _record_emergency(self, record: DeviceStatusRecord) -> bool:
        event = EmergencyEvent.from_status(record)
        try:
            self.firestore_service.add_event(record.device_id, event.to_dict())
            logger.info(f"Emergency event recorded for device: {record.device_id}")
            return True
        except Exception as e:
            logger.error(f"Error recording emergency event for device {record.device_id}: {e}", exc_info=True)
            return False

    def mirror_event(self, event_id: str, data: Optional[Dict[str, Any]]) -> Tuple[bool, str]:
        """
        Mirror a new /events/{event_id} entry into the owning device's event log.

        The owning device is the part of the event id before the first "_",
        or the fallback device when the id has no such prefix.

        Args:
            event_id: Event identifier from the trigger path
            data: Event payload

        Returns:
            Tuple of (success: bool, message: str)
        """
        logger.info(f"New event: {event_id}")

        if not data:
            logger.info(f"No event data found for {event_id}")
            return True, "No event data, nothing to mirror"

        if not isinstance(data, dict):
            logger.warning(f"Event {event_id} is not an object, ignoring: {data!r}")
            return True, "Event is not an object, nothing to mirror"

        device_id = resolve_device_id(event_id)

        try:
            event = LoggedEvent.from_payload(device_id, data)
            self.firestore_service.add_event(device_id, event.to_dict())
            logger.info(f"Event {event_id} mirrored to Firestore for device: {device_id}")
            return True, f"Event mirrored for device {device_id}"
        except Exception as e:
            logger.error(f"Error mirroring event {event_id} for device {device_id}: {e}", exc_info=True)
            return False, f"Failed to mirror event: {str(e)}"
