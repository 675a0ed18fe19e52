"""
Paged Firestore deletion.

This module deletes the documents matched by a query in bounded batches so
that no single commit exceeds the Firestore write limit.
"""
from typing import Any
import logging

logger = logging.getLogger(__name__)


class BatchDeleter:
    """
    Deletes query results page by page.

    The query must carry its own limit (the page size) and must stop matching
    a document once it is deleted. Each page is deleted in one atomic batch
    and committed before the next page is requested, so re-running the same
    query returns the next page.
    """

    # Firestore allows at most 500 writes per batch
    MAX_DOCS_PER_BATCH = 500

    def __init__(self, db):
        """
        Initialize the batch deleter

        Args:
            db: Firestore client used to create write batches
        """
        self.db = db

    def delete_query(self, query: Any, label: str = '') -> int:
        """
        Delete every document matched by a limited query.

        Args:
            query: Firestore query limited to at most MAX_DOCS_PER_BATCH results
            label: Name used in log messages

        Returns:
            Total number of deleted documents
        """
        total_deleted = 0
        pages = 0

        while True:
            docs = list(query.get())

            if not docs:
                break

            batch = self.db.batch()
            for doc in docs:
                batch.delete(doc.reference)
            batch.commit()

            pages += 1
            total_deleted += len(docs)
            logger.debug(f"{label}: deleted page {pages} with {len(docs)} document(s)")

        if total_deleted:
            logger.info(f"{label}: deleted {total_deleted} document(s) in {pages} batch(es)")
        return total_deleted
