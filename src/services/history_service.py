"""Scheduled history recording and retention"""
from typing import Dict, Any, Optional
from datetime import datetime, timezone, timedelta
from api.models.history import HistorySnapshot
from config.firebase_config import FirebaseConfig
from services.firestore_service import FirestoreService
from services.realtime_db_service import RealtimeDatabaseService
from utils.concurrency import run_all_settled
import logging

logger = logging.getLogger(__name__)


class HistoryService:
    """
    Time-series history of device status.

    - record_snapshots(): copies every device's live status into its
      Firestore history (scheduled every 2 minutes)
    - cleanup_history(): deletes history older than the retention window
      (scheduled daily)

    Both jobs fan out one task per device and wait for all of them. A failing
    device is logged and never affects the others or the job result.
    """

    def __init__(self,
                 firestore_service: Optional[FirestoreService] = None,
                 realtime_db_service: Optional[RealtimeDatabaseService] = None,
                 retention_days: Optional[int] = None):
        self.firestore_service = firestore_service or FirestoreService()
        self.realtime_db_service = realtime_db_service or RealtimeDatabaseService()
        self.retention_days = FirebaseConfig.RETENTION_DAYS if retention_days is None else retention_days

    def record_snapshots(self) -> Dict[str, Any]:
        """
        Record one history snapshot per device that currently has a status.

        Returns:
            Summary dictionary with recorded, skipped and failed counts
        """
        logger.info("Starting scheduled historical data recording")
        summary = {'recorded': 0, 'skipped': 0, 'failed': 0}

        try:
            devices = self.realtime_db_service.get_devices()
        except Exception as e:
            logger.error(f"Error reading device directory: {e}", exc_info=True)
            summary['failed'] = 1
            return summary

        if not devices:
            logger.info("No devices found")
            return summary

        tasks = {}
        for device_id, entry in devices.items():
            status = entry.get('status') if isinstance(entry, dict) else None
            if not status or not isinstance(status, dict):
                logger.info(f"No status data for device: {device_id}")
                summary['skipped'] += 1
                continue

            tasks[device_id] = self._make_snapshot_task(device_id, status)

        for outcome in run_all_settled(tasks):
            if outcome.succeeded:
                summary['recorded'] += 1
                logger.info(f"Historical data recorded for device: {outcome.key}")
            else:
                summary['failed'] += 1
                logger.error(f"Error recording historical data for device {outcome.key}: {outcome.error}",
                             exc_info=outcome.error)

        logger.info(f"Historical data recording completed: {summary}")
        return summary

    def _make_snapshot_task(self, device_id: str, status: Dict[str, Any]):
        def task():
            snapshot = HistorySnapshot.from_status(device_id, status)
            return self.firestore_service.add_history(device_id, snapshot.to_dict())
        return task

    def cleanup_history(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Delete history snapshots older than the retention window for every device.

        Args:
            now: Reference time, defaults to the current UTC time

        Returns:
            Summary dictionary with cutoff, devices, deleted and failed counts
        """
        logger.info("Starting daily cleanup of historical data")
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=self.retention_days)
        summary = {'cutoff': cutoff.isoformat(), 'devices': 0, 'deleted': 0, 'failed': 0}

        try:
            device_ids = self.firestore_service.list_device_ids()
        except Exception as e:
            logger.error(f"Error listing smart plugs: {e}", exc_info=True)
            summary['failed'] = 1
            return summary

        tasks = {
            device_id: self._make_cleanup_task(device_id, cutoff)
            for device_id in device_ids
        }
        summary['devices'] = len(tasks)

        for outcome in run_all_settled(tasks):
            if outcome.succeeded:
                summary['deleted'] += outcome.result
            else:
                summary['failed'] += 1
                logger.error(f"Error cleaning up history for device {outcome.key}: {outcome.error}",
                             exc_info=outcome.error)

        logger.info(f"Historical data cleanup completed: {summary}")
        return summary

    def _make_cleanup_task(self, device_id: str, cutoff: datetime):
        return lambda: self.firestore_service.delete_history_before(device_id, cutoff)
