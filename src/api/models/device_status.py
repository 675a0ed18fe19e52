"""Device status models"""
from typing import Dict, Any, Optional
from utils.normalizers import apply_status_defaults

class DeviceStatusRecord:
    """
    Latest known state of a smart plug, as stored in /smart_plugs/{device_id}.

    Only timestamp and emergencyStatus are interpreted. Every other payload
    field (temperature, power readings, ...) is carried in `extra` and
    written back unchanged.
    """

    def __init__(self,
                 device_id: str,
                 timestamp: Any,
                 emergency_status: bool = False,
                 temperature: Optional[Any] = None,
                 extra: Optional[Dict[str, Any]] = None):
        """
        Initialize device status

        Args:
            device_id: Device identifier (from the trigger path)
            timestamp: Normalized Firestore time value
            emergency_status: Emergency flag reported by the plug
            temperature: Temperature reading, copied through untyped
            extra: Remaining payload fields
        """
        self.device_id = device_id
        self.timestamp = timestamp
        self.emergency_status = emergency_status
        self.temperature = temperature
        self.extra = extra or {}

    @property
    def is_emergency(self) -> bool:
        return bool(self.emergency_status)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        data = dict(self.extra)
        if self.temperature is not None:
            data['temperature'] = self.temperature
        data['timestamp'] = self.timestamp
        data['emergencyStatus'] = self.emergency_status
        return data

    @classmethod
    def from_payload(cls, device_id: str, payload: Dict[str, Any]) -> 'DeviceStatusRecord':
        """Create a defaulted instance from a raw Realtime Database payload"""
        data = apply_status_defaults(payload)
        timestamp = data.pop('timestamp')
        emergency_status = data.pop('emergencyStatus')
        temperature = data.pop('temperature', None)
        return cls(
            device_id=device_id,
            timestamp=timestamp,
            emergency_status=emergency_status,
            temperature=temperature,
            extra=data
        )
