"""Device event models"""
from typing import Dict, Any, Optional
from google.cloud import firestore
from config.firebase_config import FirebaseConfig
from utils.normalizers import normalize_timestamp

class EmergencyEvent:
    """Emergency raised by a status update with emergencyStatus set"""

    def __init__(self, temperature: Optional[Any], timestamp: Any = None):
        """
        Initialize emergency event

        Args:
            temperature: Temperature of the triggering status record
            timestamp: Time of the triggering status record. A fresh server
                timestamp is used when missing.
        """
        self.type = FirebaseConfig.EMERGENCY_EVENT_TYPE
        self.message = FirebaseConfig.EMERGENCY_MESSAGE
        self.temperature = temperature
        self.timestamp = timestamp if timestamp is not None else firestore.SERVER_TIMESTAMP

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {
            'type': self.type,
            'message': self.message,
            'temperature': self.temperature,
            'timestamp': self.timestamp
        }

    @classmethod
    def from_status(cls, status) -> 'EmergencyEvent':
        """Create instance from a DeviceStatusRecord"""
        return cls(temperature=status.temperature, timestamp=status.timestamp)


class LoggedEvent:
    """Entry of the Realtime Database event log, mirrored 1:1"""

    def __init__(self, device_id: str, timestamp: Any, payload: Optional[Dict[str, Any]] = None):
        self.device_id = device_id
        self.timestamp = timestamp
        self.payload = payload or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {**self.payload, 'timestamp': self.timestamp}

    @classmethod
    def from_payload(cls, device_id: str, payload: Dict[str, Any]) -> 'LoggedEvent':
        """Create instance from a raw log entry, normalizing its timestamp"""
        data = dict(payload)
        timestamp = normalize_timestamp(data.pop('timestamp', None))
        return cls(device_id=device_id, timestamp=timestamp, payload=data)
