"""Matching probe descriptors against the descriptor store."""

import logging
from typing import Optional

import numpy as np

from facepay.config import MATCH_THRESHOLD, PAYMENT_THRESHOLD
from facepay.db import DescriptorStore
from facepay.errors import NoMatch
from facepay.types import Match, Verdict

logger = logging.getLogger(__name__)


class Matcher:
    """Two-tier matcher: a nominal match threshold and a stricter payment gate."""

    def __init__(self, store: DescriptorStore, match_threshold: Optional[float] = None,
                 payment_threshold: Optional[float] = None):
        if match_threshold is None:
            match_threshold = MATCH_THRESHOLD
        if payment_threshold is None:
            payment_threshold = PAYMENT_THRESHOLD

        if payment_threshold > match_threshold:
            raise ValueError(f"payment_threshold ({payment_threshold}) must not exceed "
                             f"match_threshold ({match_threshold})")

        self.store = store
        self.match_threshold = float(match_threshold)
        self.payment_threshold = float(payment_threshold)

    def recognize(self, descriptor: np.ndarray) -> Optional[Match]:
        """
        Find the registered wallet closest to a face descriptor.

        Args:
            descriptor: Probe face descriptor

        Returns:
            Match for the closest wallet, or None if the store is empty or the
            closest face is not within the match threshold. Equal distances
            resolve to the earliest registered wallet.

        Raises:
            InvalidDescriptor: if the probe is empty or not finite
            DescriptorMismatch: if the probe length differs from stored ones
        """
        distances = self.store.distances(descriptor)
        if distances.size == 0:
            return None

        # argmin returns the first index on ties
        best_i = int(np.argmin(distances))
        best_distance = float(distances[best_i])
        record = self.store.records[best_i]

        if best_distance >= self.match_threshold:
            logger.debug(f"No match: best was {record.identifier} at {best_distance:.4f}")
            return None

        logger.debug(f"Matched {record.identifier} at {best_distance:.4f}")
        return Match(identifier=record.identifier, distance=best_distance)

    def authorize(self, match: Optional[Match]) -> Verdict:
        """
        Decide whether a match is strong enough to proceed to payment.

        Raises:
            NoMatch: if match is None
        """
        if match is None:
            raise NoMatch()
        if match.distance < self.payment_threshold:
            return Verdict.AUTHORIZED
        return Verdict.LOW_CONFIDENCE
