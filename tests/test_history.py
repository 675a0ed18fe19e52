"""Tests for history recording, paged deletion and retention cleanup"""
import logging
import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import MagicMock, patch
from google.cloud import firestore

from fakes import FakeFirestoreClient, FakeRealtimeDatabaseService
from services.batch_delete import BatchDeleter
from services.firestore_service import FirestoreService
from services.history_service import HistoryService
from api.models.history import HistorySnapshot

NOW = datetime(2025, 10, 20, 0, 0, tzinfo=timezone.utc)


def _seed_history(db, device_id, count, age):
    docs = db.docs(f'smart_plugs/{device_id}/history')
    for i in range(count):
        docs[f'{device_id}-{age.days}-{i}'] = {'temperature': 30, 'timestamp': NOW - age}


# --- record_snapshots -------------------------------------------------------

def test_snapshots_skip_devices_without_status(firestore_service, fake_db, caplog):
    devices = {
        'plugA': {'status': {'temperature': 30, 'timestamp': 1760084970000}},
        'plugB': {'info': {'name': 'kitchen'}},
        'plugC': {'status': {'temperature': 31}},
    }
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService(devices))

    with caplog.at_level(logging.INFO):
        summary = service.record_snapshots()

    assert summary == {'recorded': 2, 'skipped': 1, 'failed': 0}
    assert list(fake_db.docs('smart_plugs/plugA/history').values()) == [
        {'temperature': 30, 'timestamp': datetime(2025, 10, 10, 8, 29, 30, tzinfo=timezone.utc)}
    ]
    assert list(fake_db.docs('smart_plugs/plugC/history').values()) == [
        {'temperature': 31, 'timestamp': firestore.SERVER_TIMESTAMP}
    ]
    assert fake_db.docs('smart_plugs/plugB/history') == {}
    skips = [r for r in caplog.records if 'No status data for device' in r.getMessage()]
    assert len(skips) == 1
    assert 'plugB' in skips[0].getMessage()


def test_snapshots_do_not_mutate_live_status(firestore_service):
    status = {'temperature': 30, 'timestamp': 1000}
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService({'plugA': {'status': status}}))

    service.record_snapshots()

    assert status == {'temperature': 30, 'timestamp': 1000}


def test_snapshots_with_no_devices(firestore_service, fake_db):
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService(None))

    assert service.record_snapshots() == {'recorded': 0, 'skipped': 0, 'failed': 0}
    assert fake_db.writes == []


def test_snapshot_failure_is_isolated_per_device():
    db = FakeFirestoreClient(fail_paths={'smart_plugs/plug3/history'})
    devices = {f'plug{i}': {'status': {'temperature': 20 + i}} for i in range(1, 6)}
    service = HistoryService(FirestoreService(db=db), FakeRealtimeDatabaseService(devices))

    summary = service.record_snapshots()

    assert summary == {'recorded': 4, 'skipped': 0, 'failed': 1}
    for i in (1, 2, 4, 5):
        assert len(db.docs(f'smart_plugs/plug{i}/history')) == 1
    assert db.docs('smart_plugs/plug3/history') == {}


def test_snapshot_directory_read_failure_does_not_raise(firestore_service):
    service = HistoryService(
        firestore_service,
        FakeRealtimeDatabaseService(error=RuntimeError('rtdb unavailable'))
    )

    assert service.record_snapshots()['failed'] == 1


# --- paged deletion ---------------------------------------------------------

def test_delete_history_pages_until_exhausted(firestore_service, fake_db):
    _seed_history(fake_db, 'plugA', 1200, timedelta(days=8))
    _seed_history(fake_db, 'plugA', 10, timedelta(days=1))

    deleted = firestore_service.delete_history_before('plugA', NOW - timedelta(days=7))

    assert deleted == 1200
    assert fake_db.commits == [500, 500, 200]
    assert len(fake_db.docs('smart_plugs/plugA/history')) == 10


def test_delete_history_again_deletes_nothing(firestore_service, fake_db):
    _seed_history(fake_db, 'plugA', 1200, timedelta(days=8))
    cutoff = NOW - timedelta(days=7)
    firestore_service.delete_history_before('plugA', cutoff)
    commits_before = list(fake_db.commits)

    assert firestore_service.delete_history_before('plugA', cutoff) == 0
    assert fake_db.commits == commits_before


def test_batch_deleter_requeries_after_each_commit():
    db = MagicMock()
    page = [MagicMock() for _ in range(BatchDeleter.MAX_DOCS_PER_BATCH)]
    query = MagicMock()
    query.get.side_effect = [page, page, page[:200], []]

    deleted = BatchDeleter(db).delete_query(query)

    assert deleted == 1200
    assert query.get.call_count == 4
    assert db.batch.return_value.commit.call_count == 3
    assert db.batch.return_value.delete.call_count == 1200


def test_batch_deleter_propagates_commit_errors():
    db = MagicMock()
    db.batch.return_value.commit.side_effect = RuntimeError('aborted')
    query = MagicMock()
    query.get.return_value = [MagicMock()]

    with pytest.raises(RuntimeError):
        BatchDeleter(db).delete_query(query)


# --- cleanup_history --------------------------------------------------------

def test_cleanup_uses_seven_day_cutoff_for_every_device(firestore_service, fake_db):
    fake_db.docs('smart_plugs')['plugA'] = {'temperature': 30}
    _seed_history(fake_db, 'plugA', 3, timedelta(days=8))
    _seed_history(fake_db, 'plugA', 2, timedelta(days=6))
    # Device with history but no status document
    _seed_history(fake_db, 'plugB', 4, timedelta(days=30))

    service = HistoryService(firestore_service, FakeRealtimeDatabaseService())
    summary = service.cleanup_history(now=NOW)

    assert summary == {
        'cutoff': (NOW - timedelta(days=7)).isoformat(),
        'devices': 2,
        'deleted': 7,
        'failed': 0,
    }
    assert len(fake_db.docs('smart_plugs/plugA/history')) == 2
    assert fake_db.docs('smart_plugs/plugB/history') == {}


def test_cleanup_failure_is_isolated_per_device():
    firestore_service = MagicMock()
    firestore_service.list_device_ids.return_value = ['plug1', 'plug2', 'plug3']

    def delete(device_id, cutoff):
        if device_id == 'plug2':
            raise RuntimeError('deadline exceeded')
        return 5

    firestore_service.delete_history_before.side_effect = delete
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService())

    summary = service.cleanup_history(now=NOW)

    assert summary['devices'] == 3
    assert summary['deleted'] == 10
    assert summary['failed'] == 1
    assert firestore_service.delete_history_before.call_count == 3


def test_cleanup_listing_failure_does_not_raise():
    firestore_service = MagicMock()
    firestore_service.list_device_ids.side_effect = RuntimeError('unavailable')
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService())

    summary = service.cleanup_history(now=NOW)

    assert summary['failed'] == 1
    firestore_service.delete_history_before.assert_not_called()


def test_bad_timestamp_on_one_device_does_not_stop_snapshots(firestore_service, fake_db):
    devices = {
        'plugA': {'status': {'temperature': 30, 'timestamp': 1760084970000}},
        'plugB': {'status': {'temperature': 31, 'timestamp': 1e20}},
    }
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService(devices))

    summary = service.record_snapshots()

    assert summary == {'recorded': 2, 'skipped': 0, 'failed': 0}
    assert len(fake_db.docs('smart_plugs/plugA/history')) == 1
    assert list(fake_db.docs('smart_plugs/plugB/history').values()) == [
        {'temperature': 31, 'timestamp': firestore.SERVER_TIMESTAMP}
    ]


def test_snapshot_preparation_error_is_isolated_per_device(firestore_service, fake_db):
    devices = {
        'plugA': {'status': {'temperature': 30}},
        'plugB': {'status': {'temperature': 31}},
    }
    service = HistoryService(firestore_service, FakeRealtimeDatabaseService(devices))
    original = HistorySnapshot.from_status

    def from_status(device_id, status):
        if device_id == 'plugB':
            raise ValueError('unserializable status')
        return original(device_id, status)

    with patch('services.history_service.HistorySnapshot.from_status', side_effect=from_status):
        summary = service.record_snapshots()

    assert summary == {'recorded': 1, 'skipped': 0, 'failed': 1}
    assert len(fake_db.docs('smart_plugs/plugA/history')) == 1
    assert fake_db.docs('smart_plugs/plugB/history') == {}


def test_explicit_zero_retention_is_kept():
    service = HistoryService(MagicMock(), FakeRealtimeDatabaseService(), retention_days=0)
    service.firestore_service.list_device_ids.return_value = ['plugA']
    service.firestore_service.delete_history_before.return_value = 0

    summary = service.cleanup_history(now=NOW)

    assert service.retention_days == 0
    assert summary['cutoff'] == NOW.isoformat()
    service.firestore_service.delete_history_before.assert_called_once_with('plugA', NOW)
