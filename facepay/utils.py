"""Utility functions for the face payment demo."""

import math
import time
from datetime import datetime, timezone
from typing import Optional, Union

import numpy as np

from facepay.errors import InvalidAmount


def l2_distance(a: np.ndarray, b: np.ndarray) -> float:
    """
    Calculate L2 (Euclidean) distance between two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Euclidean distance
    """
    return float(np.linalg.norm(np.asarray(a) - np.asarray(b)))


def parse_amount(value: Union[str, float, int, None]) -> float:
    """
    Validate a payment amount entered by the user.

    Args:
        value: Raw prompt input or number

    Returns:
        The amount as a positive finite float

    Raises:
        InvalidAmount: if the input is empty, non-numeric, NaN/inf or <= 0
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidAmount(value)
        try:
            amount = float(text)
        except ValueError:
            raise InvalidAmount(value) from None
    else:
        try:
            amount = float(value)
        except (TypeError, ValueError):
            raise InvalidAmount(value) from None

    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmount(value)
    return amount


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds")


def short_address(address: str, keep: int = 6) -> str:
    """Shorten a wallet address for display, e.g. ``0x1234...``."""
    if len(address) <= keep:
        return address
    return f"{address[:keep]}..."


class FrameRateLimiter:
    """Limits processing to a maximum frame rate."""

    def __init__(self, max_fps: float):
        """
        Initialize frame rate limiter.

        Args:
            max_fps: Maximum frames per second to process
        """
        self.max_fps = max_fps
        self.min_interval = 1.0 / max_fps if max_fps > 0 else 0
        self.last_time = 0

    def should_process(self) -> bool:
        """
        Check if enough time has passed to process the next frame.

        Returns:
            True if frame should be processed, False otherwise
        """
        if self.min_interval == 0:
            return True

        current_time = time.time()
        if current_time - self.last_time >= self.min_interval:
            self.last_time = current_time
            return True
        return False

    def reset(self):
        """Reset the limiter."""
        self.last_time = 0
