"""Binary file access, fingerprint validation and per-format loaders."""

from routing_storage.io.file import BinaryFile
from routing_storage.io.fingerprint import FINGERPRINT_DTYPE, Fingerprint

__all__ = ["FINGERPRINT_DTYPE", "BinaryFile", "Fingerprint"]
