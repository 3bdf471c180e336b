"""CLI tool to register a face for a wallet."""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import facepay modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from facepay.config import DATA_DIR
from facepay.controller import FacePayController
from facepay.errors import FacePayError
from facepay.storage import JsonFileStorage
from facepay.wallet import PromptWallet, StaticWallet


def main():
    """Register a face from image files or a webcam capture."""
    parser = argparse.ArgumentParser(description="Register a face against a wallet address")
    parser.add_argument("images", nargs="*", help="Image files (first one with a face is used)")
    parser.add_argument("--wallet", help="Wallet address (prompted if omitted)")
    parser.add_argument("--linkedin", default=None, help="LinkedIn URL")
    parser.add_argument("--instagram", default=None, help="Instagram URL")
    parser.add_argument("--data-dir", default=str(DATA_DIR), help="Directory for saved state")
    args = parser.parse_args()

    print("=== Face Registration ===")

    wallet = StaticWallet(args.wallet) if args.wallet else PromptWallet()
    controller = FacePayController(storage=JsonFileStorage(args.data_dir), wallet=wallet)
    controller.load()

    try:
        address = controller.connect_wallet()
    except FacePayError as e:
        print(f"Error: {e}")
        return

    # Deferred: importing face_recognition loads the dlib models
    from facepay.extractor import detect_and_encode_frame, encode_face

    descriptor = None
    if args.images:
        for img_path in args.images:
            descriptor = encode_face(img_path)
            if descriptor is not None:
                print(f"  ✓ Encoded: {img_path}")
                break
            print(f"  ✗ No face found in: {img_path}")
    else:
        from facepay.capture import capture_face_frame

        print(f"\nCapturing face for {address}...")
        try:
            frame = capture_face_frame(save_dir=Path(args.data_dir) / "captures")
        except Exception as e:
            print(f"Error capturing photo: {e}")
            return
        if frame is not None:
            descriptor = detect_and_encode_frame(frame)

    linkedin = args.linkedin
    instagram = args.instagram
    try:
        controller.check_duplicate(descriptor)
        if linkedin is None:
            linkedin = input("Enter your LinkedIn URL (optional): ")
        if instagram is None:
            instagram = input("Enter your Instagram URL (optional): ")
        record = controller.register(descriptor, linkedin=linkedin, instagram=instagram)
    except FacePayError as e:
        print(f"Error: {e}")
        return

    print(f"✓ Face registered for wallet: {record.identifier}")


if __name__ == "__main__":
    main()
