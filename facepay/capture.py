"""Module for capturing an enrollment photo from the webcam."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import cv2

from facepay.config import CAMERA_INDEX
from facepay.utils import FrameRateLimiter


def capture_face_frame(camera_index=None, save_dir: Optional[Path] = None):
    """
    Show the webcam feed and capture one frame with a visible face.

    Args:
        camera_index: Camera to open (defaults to config value)
        save_dir: If given, the captured frame is also written there as JPEG

    Returns:
        BGR frame, or None if the user quit before capturing
    """
    if camera_index is None:
        camera_index = CAMERA_INDEX

    # Initialize camera
    cap = cv2.VideoCapture(camera_index)
    if not cap.isOpened():
        raise RuntimeError(f"Failed to open camera at index {camera_index}")

    face_cascade = cv2.CascadeClassifier(cv2.data.haarcascades + 'haarcascade_frontalface_default.xml')
    limiter = FrameRateLimiter(max_fps=10)
    faces = ()
    captured = None

    print("Press SPACE to capture your face, 'q' to cancel")
    print("Make sure your face is clearly visible in the frame\n")

    try:
        while captured is None:
            ret, frame = cap.read()
            if not ret:
                print("Failed to read from camera")
                break

            # Check for face to ensure visibility
            if limiter.should_process():
                gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
                faces = face_cascade.detectMultiScale(gray, 1.1, 4)

            display_frame = frame.copy()
            cv2.putText(display_frame, "Press SPACE to capture",
                        (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
            if len(faces) > 0:
                cv2.putText(display_frame, "Face detected - Ready!",
                            (10, 70), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)
            else:
                cv2.putText(display_frame, "No face detected",
                            (10, 70), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 255), 2)

            cv2.imshow('Register Face', display_frame)

            key = cv2.waitKey(1) & 0xFF

            if key == ord(' '):  # Spacebar to capture
                if len(faces) > 0:
                    captured = frame
                else:
                    print("No face detected! Please position yourself in front of the camera.")

            elif key == ord('q'):
                print("Capture cancelled by user")
                break

    finally:
        cap.release()
        cv2.destroyAllWindows()

    if captured is not None and save_dir is not None:
        save_dir = Path(save_dir)
        save_dir.mkdir(parents=True, exist_ok=True)
        img_path = save_dir / f"{datetime.now().strftime('%Y%m%d_%H%M%S')}.jpg"
        cv2.imwrite(str(img_path), captured)
        print(f"Saved capture: {img_path}")

    return captured
