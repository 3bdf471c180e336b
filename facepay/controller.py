"""Application state and user actions for the face payment demo."""

import logging
from typing import List, Optional

import numpy as np

from facepay.config import DATA_DIR
from facepay.db import DescriptorStore
from facepay.errors import (
    DuplicateFace,
    LowConfidence,
    NoFaceDetected,
    NoMatch,
    WalletUnavailable,
)
from facepay.history import PaymentHistory
from facepay.matcher import Matcher
from facepay.storage import JsonFileStorage, Storage
from facepay.types import IdentityRecord, PaymentRecord, Recognition, Verdict
from facepay.utils import parse_amount
from facepay.wallet import StaticWallet, WalletConnector

logger = logging.getLogger(__name__)


class FacePayController:
    """
    Owns the connected wallet, the registered faces and the payment history.

    All mutations happen through the action methods below, which are called
    one at a time from the UI thread. Every failure is raised before any
    state changes.
    """

    def __init__(self, storage: Optional[Storage] = None,
                 wallet: Optional[WalletConnector] = None,
                 matcher: Optional[Matcher] = None):
        if storage is None:
            storage = JsonFileStorage(DATA_DIR)
        if wallet is None:
            wallet = StaticWallet()

        self.storage = storage
        self.wallet = wallet
        self.wallet_address = ""
        self.store = matcher.store if matcher is not None else DescriptorStore(storage)
        self.matcher = matcher if matcher is not None else Matcher(self.store)
        self.history = PaymentHistory(storage)
        self.last_recognition: Optional[Recognition] = None

    def load(self):
        """Restore registered faces and payment history from storage."""
        self.store.load()
        self.history.load()

    def connect_wallet(self) -> str:
        """
        Connect the wallet and remember its address.

        Raises:
            WalletUnavailable: if no wallet is present or the connection fails
        """
        address = self.wallet.connect()
        if not address:
            raise WalletUnavailable("Failed to connect wallet.")
        self.wallet_address = address
        logger.info(f"Wallet connected: {address}")
        return address

    def register(self, descriptor: Optional[np.ndarray], linkedin: str = "",
                 instagram: str = "") -> IdentityRecord:
        """
        Register the captured face against the connected wallet.

        Raises:
            WalletUnavailable: if no wallet is connected
            NoFaceDetected: if descriptor is None
            DuplicateFace: if the face already belongs to a wallet
        """
        if not self.wallet_address:
            raise WalletUnavailable()
        if descriptor is None:
            raise NoFaceDetected()

        profile = {"linkedin": (linkedin or "").strip(), "instagram": (instagram or "").strip()}
        return self.store.enroll(self.wallet_address, descriptor, profile)

    def check_duplicate(self, descriptor: Optional[np.ndarray]):
        """Raise before prompting for profile links if the face is taken."""
        if not self.wallet_address:
            raise WalletUnavailable()
        if descriptor is None:
            raise NoFaceDetected()
        match = self.store.find_duplicate(descriptor)
        if match is not None:
            raise DuplicateFace(match.identifier, match.distance)

    def recognize(self, descriptor: Optional[np.ndarray]) -> Recognition:
        """
        Identify a captured face. Does not require a connected wallet.

        Raises:
            NoFaceDetected: if descriptor is None
            NoMatch: if no registered face is within the match threshold
        """
        if descriptor is None:
            raise NoFaceDetected()

        match = self.matcher.recognize(descriptor)
        if match is None:
            self.last_recognition = None
            raise NoMatch()

        verdict = self.matcher.authorize(match)
        recognition = Recognition(match=match, verdict=verdict,
                                  record=self.store.get(match.identifier))
        self.last_recognition = recognition
        logger.info(f"Recognized {match.identifier} at {match.distance:.4f}: {verdict.value}")
        return recognition

    def pay(self, recognition: Recognition, amount) -> PaymentRecord:
        """
        Record a payment to a recognized wallet.

        Raises:
            LowConfidence: unless the recognition passed the payment threshold
            InvalidAmount: if amount is not a positive finite number
        """
        # Verdict is re-checked against the current payment threshold
        if (recognition.verdict is not Verdict.AUTHORIZED
                or self.matcher.authorize(recognition.match) is not Verdict.AUTHORIZED):
            raise LowConfidence(recognition.match)

        value = parse_amount(amount)
        return self.history.record(recognition.match.identifier, value)

    def clear_all(self):
        """Remove every registered face."""
        self.store.clear_all()
        self.last_recognition = None

    def registered_wallets(self) -> List[str]:
        return [r.identifier for r in self.store.records]

    def payments(self) -> List[PaymentRecord]:
        return self.history.list()
