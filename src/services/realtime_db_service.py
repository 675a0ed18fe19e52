"""Realtime Database service for live device state"""
from typing import Dict, Any, Optional
import firebase_admin
from firebase_admin import db
from config.firebase_config import FirebaseConfig
import logging

logger = logging.getLogger(__name__)


class RealtimeDatabaseService:
    """
    Read-only access to the Firebase Realtime Database.

    Realtime Database structure:
    /devices/{device_id}/status   current status written by the plugs
    /events/{event_id}            flat event log
    """

    def __init__(self, database_url: Optional[str] = None, app=None):
        """
        Initialize Realtime Database access

        Args:
            database_url: Realtime Database URL, defaults to FIREBASE_DATABASE_URL
            app: Firebase app to use. The default app is initialized on first use when omitted.
        """
        self.database_url = database_url or FirebaseConfig.DATABASE_URL
        self._app = app

    def _get_app(self):
        if self._app is None:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                self._app = firebase_admin.initialize_app(options={'databaseURL': self.database_url})
                logger.info(f"Initialized Firebase app for {self.database_url}")
        return self._app

    def get_devices(self) -> Dict[str, Any]:
        """
        Fetch the whole device directory in one read.

        Returns:
            Mapping of device_id to device entry (empty when there are no devices)
        """
        devices = db.reference(FirebaseConfig.RTDB_DEVICES_PATH, app=self._get_app()).get()

        if not devices:
            return {}

        # Numeric keys come back as a list with holes
        if isinstance(devices, list):
            return {str(idx): entry for idx, entry in enumerate(devices) if entry is not None}

        return devices
