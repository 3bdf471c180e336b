"""Keyboard actions of the live app, mapped onto controller calls."""

import logging
from typing import Callable, Optional

import numpy as np

from facepay.config import CURRENCY
from facepay.controller import FacePayController
from facepay.errors import FacePayError, LowConfidence, WalletUnavailable

logger = logging.getLogger(__name__)

Encoder = Callable[[np.ndarray], Optional[np.ndarray]]


def connect_wallet(controller: FacePayController) -> str:
    address = controller.connect_wallet()
    return f"Wallet Connected: {address}"


def register_face(controller: FacePayController, frame: np.ndarray, encode: Encoder,
                  prompt=input) -> str:
    if not controller.wallet_address:
        raise WalletUnavailable()
    descriptor = encode(frame) if frame is not None else None
    # Reject taken faces before asking for profile links
    controller.check_duplicate(descriptor)

    linkedin = prompt("Enter your LinkedIn URL (optional): ") or ""
    instagram = prompt("Enter your Instagram URL (optional): ") or ""
    record = controller.register(descriptor, linkedin=linkedin, instagram=instagram)
    return f"Face registered for wallet: {record.identifier}"


def recognize_and_pay(controller: FacePayController, frame: np.ndarray, encode: Encoder,
                      prompt=input) -> str:
    descriptor = encode(frame) if frame is not None else None
    recognition = controller.recognize(descriptor)
    if not recognition.authorized:
        raise LowConfidence(recognition.match)

    print(f"Face recognized! Wallet: {recognition.match.identifier}")
    amount = prompt("Enter the amount to pay: ")
    payment = controller.pay(recognition, amount)
    return f"Payment of {payment.amount:g} {CURRENCY} triggered for wallet: {payment.identifier}"


def clear_registered_faces(controller: FacePayController) -> str:
    controller.clear_all()
    return "All registered faces have been cleared."


def format_history(controller: FacePayController) -> str:
    payments = controller.payments()
    if not payments:
        return "No payments yet."
    lines = [f"{p.timestamp}  {p.identifier}  {p.amount:g} {CURRENCY}" for p in payments]
    return "\n".join(lines)


def dispatch(controller: FacePayController, key: str, frame: Optional[np.ndarray],
             encode: Encoder, prompt=input) -> Optional[str]:
    """
    Run the action bound to key.

    Returns:
        Status message prefixed with OK/ERROR, or None for unbound keys
    """
    try:
        if key == "w":
            message = connect_wallet(controller)
        elif key == "r":
            message = register_face(controller, frame, encode, prompt=prompt)
        elif key == "p":
            message = recognize_and_pay(controller, frame, encode, prompt=prompt)
        elif key == "c":
            message = clear_registered_faces(controller)
        elif key == "h":
            message = format_history(controller)
        else:
            return None
    except FacePayError as e:
        logger.info(f"Action {key!r} failed: {e}")
        return f"ERROR: {e}"

    return f"OK: {message}"
