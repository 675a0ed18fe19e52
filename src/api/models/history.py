"""History snapshot models"""
from typing import Dict, Any, Optional
from utils.normalizers import normalize_timestamp

class HistorySnapshot:
    """
    Point-in-time copy of a device status, stored in
    /smart_plugs/{device_id}/history.

    Snapshots older than the retention window are removed by the daily
    cleanup job.
    """

    def __init__(self, device_id: str, timestamp: Any, fields: Optional[Dict[str, Any]] = None):
        """
        Initialize history snapshot

        Args:
            device_id: Device identifier
            timestamp: Normalized Firestore time value
            fields: Status fields copied from the Realtime Database
        """
        self.device_id = device_id
        self.timestamp = timestamp
        self.fields = fields or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {**self.fields, 'timestamp': self.timestamp}

    @classmethod
    def from_status(cls, device_id: str, status: Dict[str, Any]) -> 'HistorySnapshot':
        """Create instance from a device's current Realtime Database status"""
        fields = dict(status)
        timestamp = normalize_timestamp(fields.pop('timestamp', None))
        return cls(device_id=device_id, timestamp=timestamp, fields=fields)
