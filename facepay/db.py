"""Descriptor store: one face descriptor per registered wallet."""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from facepay.config import DUPLICATE_THRESHOLD, USERS_DOCUMENT
from facepay.errors import (
    DescriptorMismatch,
    DuplicateFace,
    DuplicateIdentity,
    InvalidDescriptor,
    PersistenceReadFailure,
    WalletUnavailable,
)
from facepay.storage import Storage
from facepay.types import SOCIAL_PLATFORMS, IdentityRecord, Match, check_descriptor
from facepay.utils import l2_distance

logger = logging.getLogger(__name__)


class DescriptorStore:
    """
    Registered faces, persisted as the ``face-users`` document.

    Records are kept in insertion order and are never mutated once enrolled;
    the only way to remove them is ``clear_all``.
    """

    def __init__(self, storage: Storage, duplicate_threshold: Optional[float] = None,
                 document: str = USERS_DOCUMENT):
        if duplicate_threshold is None:
            duplicate_threshold = DUPLICATE_THRESHOLD

        self.storage = storage
        self.duplicate_threshold = float(duplicate_threshold)
        self.document = document
        self._records: List[IdentityRecord] = []

    @property
    def records(self) -> Tuple[IdentityRecord, ...]:
        return tuple(self._records)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(tuple(self._records))

    @property
    def descriptor_size(self) -> Optional[int]:
        if not self._records:
            return None
        return int(self._records[0].descriptor.size)

    def get(self, identifier: str) -> Optional[IdentityRecord]:
        for record in self._records:
            if record.identifier == identifier:
                return record
        return None

    def load(self) -> List[IdentityRecord]:
        """
        Load registered faces from storage, replacing the in-memory set.

        Absent or corrupt data yields an empty store. Entries that cannot be
        decoded (including empty or non-finite descriptors), duplicate an
        earlier wallet, or have a different descriptor length than the first
        entry are skipped with a warning.

        Returns:
            List of loaded records in stored order
        """
        try:
            document = self.storage.load(self.document)
        except PersistenceReadFailure as e:
            logger.warning(f"Could not read registered faces, starting empty: {e}")
            document = None

        records: List[IdentityRecord] = []
        if document is not None and not isinstance(document, list):
            logger.warning(f"Ignoring malformed {self.document!r} document: expected a list")
            document = None

        seen = set()
        for entry in document or []:
            try:
                record = IdentityRecord.from_document(entry)
            except (KeyError, TypeError, ValueError, InvalidDescriptor) as e:
                logger.warning(f"Skipping malformed face record: {e}")
                continue

            if record.identifier in seen:
                logger.warning(f"Skipping duplicate record for {record.identifier}")
                continue
            if records and record.descriptor.size != records[0].descriptor.size:
                logger.warning(f"Skipping record for {record.identifier}: descriptor length "
                               f"{record.descriptor.size} != {records[0].descriptor.size}")
                continue

            seen.add(record.identifier)
            records.append(record)

        self._records = records
        logger.info(f"Loaded {len(records)} registered face(s)")
        return list(records)

    def distances(self, descriptor: np.ndarray) -> np.ndarray:
        """Euclidean distance from descriptor to every stored descriptor, in order."""
        probe = check_descriptor(descriptor)
        self._check_size(probe)
        if not self._records:
            return np.empty(0, dtype=np.float64)
        known = np.stack([r.descriptor for r in self._records], axis=0)
        return np.linalg.norm(known - probe, axis=1)

    def find_duplicate(self, descriptor: np.ndarray) -> Optional[Match]:
        """
        Find the first stored face closer than the duplicate threshold.

        Returns:
            Match for the owning wallet, or None if the face is new
        """
        probe = check_descriptor(descriptor)
        self._check_size(probe)
        for record in self._records:
            distance = l2_distance(record.descriptor, probe)
            if distance < self.duplicate_threshold:
                return Match(identifier=record.identifier, distance=distance)
        return None

    def enroll(self, identifier: str, descriptor: np.ndarray,
               profile: Optional[Dict[str, str]] = None) -> IdentityRecord:
        """
        Register a face for a wallet and persist the full set.

        Args:
            identifier: Wallet address
            descriptor: Face descriptor
            profile: Optional social links keyed by platform name

        Returns:
            The new record

        Raises:
            WalletUnavailable: if identifier is empty
            DuplicateFace: if the face is already registered to a wallet
            DuplicateIdentity: if the wallet already has a face
            InvalidDescriptor: if the descriptor is empty or not finite
            DescriptorMismatch: if the descriptor length differs from stored ones
            PersistenceWriteFailure: if saving fails (store is left unchanged)
        """
        if not identifier or not identifier.strip():
            raise WalletUnavailable()

        candidate = check_descriptor(descriptor)
        duplicate = self.find_duplicate(candidate)
        if duplicate is not None:
            logger.info(f"Rejected enrollment for {identifier}: face belongs to "
                        f"{duplicate.identifier} (distance {duplicate.distance:.4f})")
            raise DuplicateFace(duplicate.identifier, duplicate.distance)

        if self.get(identifier) is not None:
            raise DuplicateIdentity(identifier)

        links = {p: v for p, v in (profile or {}).items() if p in SOCIAL_PLATFORMS and v}
        record = IdentityRecord(
            identifier=identifier,
            descriptor=candidate,
            profile=links,
        )

        self._records.append(record)
        try:
            self._save()
        except Exception:
            self._records.pop()
            raise

        logger.info(f"Registered face for wallet {identifier}")
        return record

    def clear_all(self):
        """Remove every registered face and erase the persisted document."""
        self.storage.remove(self.document)
        count = len(self._records)
        self._records = []
        logger.info(f"Cleared {count} registered face(s)")

    def _save(self):
        self.storage.save(self.document, [r.to_document() for r in self._records])

    def _check_size(self, probe: np.ndarray):
        expected = self.descriptor_size
        if expected is not None and probe.size != expected:
            raise DescriptorMismatch(expected, int(probe.size))
