"""Records and results shared by the store, matcher and payment history."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

import numpy as np

from facepay.errors import InvalidDescriptor

SOCIAL_PLATFORMS = ("linkedin", "instagram")


def as_descriptor(values) -> np.ndarray:
    """Copy values into a read-only 1-D float64 descriptor."""
    arr = np.array(values, dtype=np.float64).reshape(-1)
    arr.setflags(write=False)
    return arr


def check_descriptor(values) -> np.ndarray:
    """
    Like as_descriptor, but reject descriptors that cannot be compared.

    Raises:
        InvalidDescriptor: if the descriptor is empty or has NaN/inf values
    """
    arr = as_descriptor(values)
    if arr.size == 0:
        raise InvalidDescriptor("empty")
    if not np.all(np.isfinite(arr)):
        raise InvalidDescriptor("contains NaN or infinite values")
    return arr


@dataclass(frozen=True, eq=False)
class IdentityRecord:
    identifier: str
    descriptor: np.ndarray
    profile: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "profile", MappingProxyType(dict(self.profile)))

    def link(self, platform: str) -> str:
        return self.profile.get(platform, "")

    def to_document(self) -> dict:
        doc = {
            "walletAddress": self.identifier,
            "descriptor": [float(v) for v in self.descriptor],
        }
        for platform in SOCIAL_PLATFORMS:
            if self.profile.get(platform):
                doc[platform] = self.profile[platform]
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "IdentityRecord":
        identifier = doc["walletAddress"]
        if not isinstance(identifier, str) or not identifier:
            raise ValueError(f"Invalid walletAddress: {identifier!r}")
        descriptor = check_descriptor(doc["descriptor"])
        profile = {p: str(doc[p]) for p in SOCIAL_PLATFORMS if doc.get(p)}
        return cls(identifier=identifier, descriptor=descriptor, profile=profile)


@dataclass(frozen=True)
class PaymentRecord:
    identifier: str
    amount: float
    timestamp: str

    def to_document(self) -> dict:
        return {
            "walletAddress": self.identifier,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "PaymentRecord":
        # amount may have been stored as the raw prompt string
        amount: Union[str, float] = doc["amount"]
        return cls(
            identifier=str(doc["walletAddress"]),
            amount=float(amount),
            timestamp=str(doc["timestamp"]),
        )


@dataclass(frozen=True)
class Match:
    identifier: str
    distance: float


class Verdict(Enum):
    AUTHORIZED = "authorized"
    LOW_CONFIDENCE = "low_confidence"


@dataclass(frozen=True)
class Recognition:
    match: Match
    verdict: Verdict
    record: Optional[IdentityRecord] = None

    @property
    def authorized(self) -> bool:
        return self.verdict is Verdict.AUTHORIZED

    @property
    def socials(self) -> Dict[str, str]:
        if self.record is None:
            return {}
        return dict(self.record.profile)
