"""Configuration settings for the face payment demo."""

import os
from pathlib import Path

# Base directory (parent of facepay/)
BASE_DIR = Path(__file__).parent.parent

# Recognition settings
DUPLICATE_THRESHOLD = 0.6  # Enrollment rejects faces closer than this to a stored one
MATCH_THRESHOLD = 0.6  # Face distance threshold for a nominal match
PAYMENT_THRESHOLD = 0.45  # Stricter threshold a match must pass before paying

# Camera settings
CAMERA_INDEX = int(os.environ.get("FACEPAY_CAMERA_INDEX", "0"))
DETECTION_INTERVAL_MS = 100  # Overlay detection tick

# Wallet settings
WALLET_ADDRESS = os.environ.get("FACEPAY_WALLET", "")
CURRENCY = "ETH"

# File paths
DATA_DIR = Path(os.environ.get("FACEPAY_DATA_DIR", BASE_DIR / "data"))
USERS_DOCUMENT = "face-users"
HISTORY_DOCUMENT = "payment-history"
