"""Append-only payment history."""

import logging
from typing import List, Optional

from facepay.config import HISTORY_DOCUMENT
from facepay.errors import InvalidAmount, PersistenceReadFailure
from facepay.storage import Storage
from facepay.types import PaymentRecord
from facepay.utils import parse_amount, utc_timestamp

logger = logging.getLogger(__name__)


class PaymentHistory:
    """Payment records persisted as the ``payment-history`` document."""

    def __init__(self, storage: Storage, document: str = HISTORY_DOCUMENT):
        self.storage = storage
        self.document = document
        self._entries: List[PaymentRecord] = []

    def __len__(self):
        return len(self._entries)

    def load(self) -> List[PaymentRecord]:
        """Load history from storage; unreadable data yields an empty log."""
        try:
            document = self.storage.load(self.document)
        except PersistenceReadFailure as e:
            logger.warning(f"Could not read payment history, starting empty: {e}")
            document = None

        if document is not None and not isinstance(document, list):
            logger.warning(f"Ignoring malformed {self.document!r} document: expected a list")
            document = None

        entries = []
        for entry in document or []:
            try:
                record = PaymentRecord.from_document(entry)
                parse_amount(record.amount)
            except (KeyError, TypeError, ValueError, InvalidAmount) as e:
                logger.warning(f"Skipping malformed payment record: {e}")
                continue
            entries.append(record)

        self._entries = entries
        return list(entries)

    def record(self, identifier: str, amount, timestamp: Optional[str] = None) -> PaymentRecord:
        """
        Append a payment and persist the log.

        Args:
            identifier: Wallet address that was paid
            amount: Positive finite amount
            timestamp: ISO-8601 timestamp (defaults to now, UTC)

        Raises:
            InvalidAmount: if amount is not a positive finite number
            PersistenceWriteFailure: if saving fails (log is left unchanged)
        """
        if timestamp is None:
            timestamp = utc_timestamp()

        entry = PaymentRecord(identifier=identifier, amount=parse_amount(amount),
                              timestamp=timestamp)
        self._entries.append(entry)
        try:
            self.storage.save(self.document, [e.to_document() for e in self._entries])
        except Exception:
            self._entries.pop()
            raise

        logger.info(f"Recorded payment of {entry.amount} for {identifier}")
        return entry

    def list(self) -> List[PaymentRecord]:
        """Return all payments in the order they were recorded."""
        return list(self._entries)
