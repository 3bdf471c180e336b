"""Main application: live face registration and payment loop."""

import argparse
import logging
import sys
import threading

import cv2
import numpy as np

from facepay.actions import dispatch
from facepay.config import CAMERA_INDEX, DATA_DIR, DETECTION_INTERVAL_MS
from facepay.controller import FacePayController
from facepay.extractor import detect_and_encode_frame, locate_landmarks
from facepay.storage import JsonFileStorage
from facepay.ticker import DetectionTicker
from facepay.utils import short_address
from facepay.wallet import PromptWallet, StaticWallet

KEY_HELP = "w: wallet  r: register  p: recognize & pay  c: clear  h: history  q: quit"


class LatestFrame:
    """Holds the most recent camera frame for the detection ticker."""

    def __init__(self):
        self._frame = None
        self._lock = threading.Lock()

    def set(self, frame):
        with self._lock:
            self._frame = frame

    def get(self):
        with self._lock:
            return None if self._frame is None else self._frame.copy()


def draw_overlay(frame, faces, controller, status):
    for (top, right, bottom, left), landmarks in faces:
        cv2.rectangle(frame, (left, top), (right, bottom), (0, 255, 204), 2)
        for points in landmarks.values():
            cv2.polylines(frame, [np.array(points, dtype=np.int32)], False, (0, 200, 255), 1)

    wallet = short_address(controller.wallet_address) if controller.wallet_address else "not connected"
    cv2.putText(frame, f"Wallet: {wallet}", (10, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)

    if status:
        color = (0, 0, 255) if status.startswith("ERROR") else (0, 255, 0)
        cv2.putText(frame, status[:70], (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)

    recognition = controller.last_recognition
    y = 90
    if recognition is not None:
        for platform, url in recognition.socials.items():
            cv2.putText(frame, f"{platform}: {url}"[:70], (10, y),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 200, 0), 1)
            y += 22

    wallets = controller.registered_wallets()
    if wallets:
        cv2.putText(frame, "Registered Users (Wallets):", (10, y + 10),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        for i, address in enumerate(wallets[:8]):
            cv2.putText(frame, address, (10, y + 32 + 20 * i),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, (200, 200, 200), 1)

    cv2.putText(frame, KEY_HELP, (10, frame.shape[0] - 15),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="FacePay: pay anyone, just with a face")
    parser.add_argument("--wallet", help="Wallet address (defaults to FACEPAY_WALLET, else prompt)")
    parser.add_argument("--camera", type=int, default=CAMERA_INDEX, help="Camera index")
    parser.add_argument("--data-dir", default=str(DATA_DIR), help="Directory for saved state")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the main registration/payment loop."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    wallet = StaticWallet(args.wallet) if args.wallet else StaticWallet()
    if not wallet.address:
        wallet = PromptWallet()

    controller = FacePayController(storage=JsonFileStorage(args.data_dir), wallet=wallet)
    controller.load()
    print(f"Loaded {len(controller.registered_wallets())} registered face(s), "
          f"{len(controller.payments())} payment(s)")

    # Initialize camera
    print(f"\nInitializing camera (index {args.camera})...")
    cap = cv2.VideoCapture(args.camera)

    if not cap.isOpened():
        print(f"Error: Failed to open camera at index {args.camera}")
        sys.exit(1)

    print("Camera ready.")
    print(KEY_HELP + "\n")

    latest = LatestFrame()
    status = ""

    try:
        with DetectionTicker(latest.get, locate_landmarks, DETECTION_INTERVAL_MS) as ticker:
            while True:
                ret, frame = cap.read()
                if not ret:
                    print("Failed to read from camera")
                    break

                latest.set(frame)

                display_frame = frame.copy()
                draw_overlay(display_frame, ticker.boxes, controller, status)
                cv2.imshow('FacePay', display_frame)

                key = cv2.waitKey(1) & 0xFF
                if key in (ord('q'), ord('Q')):
                    break
                if key == 255:
                    continue

                message = dispatch(controller, chr(key).lower(), frame, detect_and_encode_frame)
                if message is not None:
                    print(message)
                    status = message.splitlines()[0]

    except KeyboardInterrupt:
        print("\nInterrupted by user")

    finally:
        cap.release()
        cv2.destroyAllWindows()
        print("Camera released. Exiting.")


if __name__ == "__main__":
    main()
