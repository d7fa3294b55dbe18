"""Errors raised while loading routing artifacts."""


class StorageError(Exception):
    """Base error for a failed load, carrying the file path and the cause."""

    prefix = "Error loading"

    def __init__(self, path: str, cause: str) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{self.prefix} {path}: {cause}")


class OpenFailure(StorageError):
    """The file could not be opened."""

    prefix = "Error opening"


class FingerprintMismatch(StorageError):
    """The embedded fingerprint does not match the running build."""

    prefix = "Fingerprint mismatch in"


class UnreadableSource(StorageError):
    """A non-empty read transferred no bytes at all."""

    prefix = "Error reading from"


class TruncatedFile(StorageError):
    """A read transferred fewer bytes than requested."""

    prefix = "Error reading from"


class InvariantViolation(StorageError):
    """Loaded data breaks a structural invariant, e.g. an empty graph."""

    prefix = "Invalid data in"
