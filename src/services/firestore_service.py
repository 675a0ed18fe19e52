"""Firestore service for the durable smart plug records"""
from typing import Dict, Any, List, Optional
from datetime import datetime
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from config.firebase_config import FirebaseConfig
from services.batch_delete import BatchDeleter
import logging

logger = logging.getLogger(__name__)


class FirestoreService:
    """
    Handles all Firestore operations.

    Firestore structure:
    /smart_plugs/{device_id}                  current status
    /smart_plugs/{device_id}/events/{auto}    emergency + mirrored log events
    /smart_plugs/{device_id}/history/{auto}   periodic status snapshots

    Methods raise on store errors. Callers decide how failures are isolated
    and logged.
    """

    def __init__(self, db=None, page_size: Optional[int] = None):
        """
        Initialize Firestore client and batch deleter

        Args:
            db: Firestore client. A default client is created when omitted.
            page_size: Maximum documents per cleanup batch
        """
        self.db = db or firestore.Client()
        self.page_size = min(page_size or FirebaseConfig.CLEANUP_PAGE_SIZE, BatchDeleter.MAX_DOCS_PER_BATCH)
        self.batch_deleter = BatchDeleter(self.db)
        logger.info("FirestoreService initialized")

    def update_device_status(self, device_id: str, data: Dict[str, Any]):
        """
        Write the current status of a device.

        Fields present in `data` overwrite the stored ones; other stored
        fields are left untouched. The document is created on first write.
        """
        doc_ref = self.db.collection(FirebaseConfig.DEVICES_COLLECTION).document(device_id)
        doc_ref.set(data, merge=True)

    def add_event(self, device_id: str, data: Dict[str, Any]) -> str:
        """
        Append an event to a device's event log

        Returns:
            The generated document id
        """
        _, doc_ref = self.db.collection(FirebaseConfig.get_events_path(device_id)).add(data)
        return doc_ref.id

    def add_history(self, device_id: str, data: Dict[str, Any]) -> str:
        """
        Append a status snapshot to a device's history

        Returns:
            The generated document id
        """
        _, doc_ref = self.db.collection(FirebaseConfig.get_history_path(device_id)).add(data)
        return doc_ref.id

    def list_device_ids(self) -> List[str]:
        """
        List every device with a document under /smart_plugs.

        Includes devices whose document only holds sub-collections.
        """
        refs = self.db.collection(FirebaseConfig.DEVICES_COLLECTION).list_documents()
        return [ref.id for ref in refs]

    def delete_history_before(self, device_id: str, cutoff: datetime) -> int:
        """
        Delete all history snapshots of a device older than `cutoff`.

        Args:
            device_id: Device identifier
            cutoff: Snapshots with timestamp < cutoff are deleted

        Returns:
            Number of deleted snapshots
        """
        query = (
            self.db.collection(FirebaseConfig.get_history_path(device_id))
            .where(filter=FieldFilter('timestamp', '<', cutoff))
            .limit(self.page_size)
        )
        return self.batch_deleter.delete_query(query, label=f"Device {device_id} history")
