"""Module for face descriptor extraction using face_recognition."""

from typing import Dict, List, Optional, Tuple

import cv2
import face_recognition
import numpy as np

from facepay.types import as_descriptor

FaceBox = Tuple[int, int, int, int]  # (top, right, bottom, left)
FaceOverlay = Tuple[FaceBox, Dict[str, List[Tuple[int, int]]]]


def encode_face(image_path) -> Optional[np.ndarray]:
    """
    Generate a face descriptor from an image file.

    Args:
        image_path: Path to the image file

    Returns:
        Face descriptor (128-dim numpy array) or None if no face found
    """
    # Load image using face_recognition (uses RGB)
    image = face_recognition.load_image_file(str(image_path))
    return _encode_rgb(image)


def detect_and_encode_frame(frame: np.ndarray) -> Optional[np.ndarray]:
    """
    Detect a face in a live camera frame and return its descriptor.

    Args:
        frame: BGR frame from OpenCV

    Returns:
        Face descriptor (128-dim numpy array) or None if no face found
    """
    # Convert BGR to RGB (face_recognition uses RGB)
    rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    return _encode_rgb(rgb_frame)


def locate_landmarks(frame: np.ndarray, scale: float = 0.5) -> List[FaceOverlay]:
    """
    Find face boxes and their landmark outlines in a BGR frame, for drawing
    overlays only.

    The frame is downscaled before detection and results are mapped back to
    full-frame coordinates.

    Returns:
        List of (box, landmarks) where landmarks maps a feature name
        ("chin", "left_eye", ...) to its points in full-frame coordinates
    """
    rgb_small = _downscale_rgb(frame, scale)
    boxes = face_recognition.face_locations(rgb_small)
    if not boxes:
        return []

    landmarks = face_recognition.face_landmarks(rgb_small, boxes)
    overlays = []
    for box, features in zip(boxes, landmarks):
        scaled = {
            name: [(int(x / scale), int(y / scale)) for x, y in points]
            for name, points in features.items()
        }
        overlays.append((_rescale_box(box, scale), scaled))
    return overlays


def _downscale_rgb(frame: np.ndarray, scale: float) -> np.ndarray:
    small = cv2.resize(frame, (0, 0), fx=scale, fy=scale) if scale != 1.0 else frame
    return cv2.cvtColor(small, cv2.COLOR_BGR2RGB)


def _rescale_box(box, scale: float) -> FaceBox:
    return tuple(int(v / scale) for v in box)


def _encode_rgb(image: np.ndarray) -> Optional[np.ndarray]:
    face_locations = face_recognition.face_locations(image)

    if len(face_locations) == 0:
        return None

    # Use the largest face when several are visible
    largest = max(face_locations, key=lambda b: (b[2] - b[0]) * (b[1] - b[3]))
    encodings = face_recognition.face_encodings(image, [largest])

    if len(encodings) > 0:
        return as_descriptor(encodings[0])

    return None
