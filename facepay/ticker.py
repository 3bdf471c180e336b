"""Periodic face detection for the live overlay."""

import logging
import threading
from typing import Callable, List, Optional

import numpy as np

from facepay.config import DETECTION_INTERVAL_MS

logger = logging.getLogger(__name__)


class DetectionTicker:
    """
    Runs ``detect(frame)`` on the latest frame every ``interval_ms``.

    The tick only reads frames and publishes boxes for drawing; it never
    touches registered faces or payment history. Use as a context manager so
    the tick is stopped however the capturing view exits.
    """

    def __init__(self, frame_source: Callable[[], Optional[np.ndarray]],
                 detect: Callable[[np.ndarray], List[tuple]],
                 interval_ms: Optional[int] = None):
        if interval_ms is None:
            interval_ms = DETECTION_INTERVAL_MS
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self.frame_source = frame_source
        self.detect = detect
        self.interval = interval_ms / 1000.0
        self.stop_event = threading.Event()
        self.lock = threading.Lock()
        self.worker: Optional[threading.Thread] = None
        self._boxes: List[tuple] = []
        self.tick_count = 0

    @property
    def boxes(self) -> List[tuple]:
        with self.lock:
            return list(self._boxes)

    @property
    def running(self) -> bool:
        return self.worker is not None and self.worker.is_alive()

    def start(self):
        if self.running:
            return
        self.stop_event.clear()
        self.worker = threading.Thread(target=self._loop, name="facepay-detection", daemon=True)
        self.worker.start()
        logger.debug(f"Detection ticker started ({self.interval * 1000:.0f} ms)")

    def stop(self):
        self.stop_event.set()
        if self.worker is not None and self.worker.is_alive():
            self.worker.join(timeout=3.0)
        self.worker = None
        with self.lock:
            self._boxes = []
        logger.debug("Detection ticker stopped")

    def tick(self):
        """Run a single detection pass."""
        frame = self.frame_source()
        boxes = self.detect(frame) if frame is not None else []
        with self.lock:
            self._boxes = list(boxes)
        self.tick_count += 1

    def _loop(self):
        while not self.stop_event.wait(self.interval):
            try:
                self.tick()
            except Exception as e:
                logger.warning(f"Detection tick failed: {e}", exc_info=True)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
