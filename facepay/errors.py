"""Exceptions raised by the face payment core."""


class FacePayError(Exception):
    """Base class for all face payment errors."""


class NoFaceDetected(FacePayError):
    """The extractor produced no descriptor for the frame."""

    def __init__(self, message="No face detected. Please try again."):
        super().__init__(message)


class DuplicateFace(FacePayError):
    """The face is already registered under another identifier."""

    def __init__(self, existing_identifier, distance=None):
        self.existing_identifier = existing_identifier
        self.distance = distance
        super().__init__(
            f"This face is already registered with wallet: {existing_identifier}"
        )


class DuplicateIdentity(FacePayError):
    """The identifier already owns a registered face."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Wallet {identifier} already has a registered face")


class DescriptorMismatch(FacePayError):
    """Descriptor length differs from the stored descriptors."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected descriptor of length {expected}, got {actual}")


class InvalidDescriptor(FacePayError):
    """Descriptor is empty or contains NaN/inf values."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Invalid face descriptor: {reason}")


class NoMatch(FacePayError):
    """No stored face lies within the match threshold."""

    def __init__(self, message="Face not recognized."):
        super().__init__(message)


class LowConfidence(FacePayError):
    """A nominal match is too weak to authorize a payment."""

    def __init__(self, match):
        self.match = match
        super().__init__("Face matched, but confidence is too low. Payment aborted.")


class InvalidAmount(FacePayError):
    """Payment amount is empty, non-numeric, non-finite or not positive."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid amount entered: {value!r}")


class PersistenceReadFailure(FacePayError):
    """A persisted document could not be read or decoded."""


class PersistenceWriteFailure(FacePayError):
    """A document could not be written."""


class WalletUnavailable(FacePayError):
    """No wallet is connected or the connector failed."""

    def __init__(self, message="Please connect your wallet first."):
        super().__init__(message)
