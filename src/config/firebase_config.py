"""Firebase configuration"""
import os

class FirebaseConfig:
    """Firebase/GCP configuration settings"""

    # Get from environment variables
    PROJECT_ID = os.environ.get('GCP_PROJECT', '')
    DATABASE_URL = os.environ.get('FIREBASE_DATABASE_URL', '')
    TRIGGER_AUTH_ENABLED = os.environ.get('TRIGGER_AUTH_ENABLED', 'true').lower() == 'true'

    # Secret Manager settings
    TRIGGER_KEYS_SECRET_NAME = 'smartplug-mirror-trigger-keys'
    TRIGGER_KEY_HEADER = 'X-Trigger-Key'

    # Firestore collection names
    DEVICES_COLLECTION = 'smart_plugs'
    EVENTS_SUBCOLLECTION = 'events'
    HISTORY_SUBCOLLECTION = 'history'

    # Realtime Database paths
    RTDB_DEVICES_PATH = '/devices'

    # Event log entries are named "{device_id}_{suffix}"
    EVENT_ID_SEPARATOR = '_'
    FALLBACK_DEVICE_ID = 'plug1'

    EMERGENCY_EVENT_TYPE = 'emergency'
    EMERGENCY_MESSAGE = 'HIGH_TEMPERATURE'

    # History retention
    RETENTION_DAYS = int(os.environ.get('RETENTION_DAYS', 7))
    CLEANUP_PAGE_SIZE = int(os.environ.get('CLEANUP_PAGE_SIZE', 500))

    @staticmethod
    def get_events_path(device_id: str) -> str:
        """Get Firestore path for a device's event log"""
        return f'{FirebaseConfig.DEVICES_COLLECTION}/{device_id}/{FirebaseConfig.EVENTS_SUBCOLLECTION}'

    @staticmethod
    def get_history_path(device_id: str) -> str:
        """Get Firestore path for a device's status history"""
        return f'{FirebaseConfig.DEVICES_COLLECTION}/{device_id}/{FirebaseConfig.HISTORY_SUBCOLLECTION}'
