"""Shared fixtures"""
import pytest
from fakes import FakeFirestoreClient


@pytest.fixture
def fake_db():
    return FakeFirestoreClient()


@pytest.fixture
def firestore_service(fake_db):
    from services.firestore_service import FirestoreService
    return FirestoreService(db=fake_db)
