"""Build fingerprint embedded at the head of versioned artifacts."""

import hashlib
import sys
from dataclasses import dataclass

import numpy as np

from routing_storage.records.extractor import ORIGINAL_EDGE_DATA_DTYPE, QUERY_NODE_DTYPE
from routing_storage.records.graph import EDGE_ARRAY_ENTRY_DTYPE, NODE_ARRAY_ENTRY_DTYPE
from routing_storage.version import (
    CONTRACTOR_LAYOUT_VERSION,
    FINGERPRINT_MAGIC_NUMBER,
    RTREE_LAYOUT_VERSION,
)

DIGEST_LENGTH = 32

FINGERPRINT_DTYPE = np.dtype(
    [
        ("magic_number", np.uint32),
        ("md5_prepare", f"S{DIGEST_LENGTH + 1}"),
        ("md5_tree", f"S{DIGEST_LENGTH + 1}"),
        ("md5_graph", f"S{DIGEST_LENGTH + 1}"),
        ("md5_objects", f"S{DIGEST_LENGTH + 1}"),
        ("has_64_bits", np.bool_),
    ],
    align=True,
)


def _layout_digest(*parts: object) -> bytes:
    """MD5 hex digest over the textual description of record layouts."""
    md5 = hashlib.md5()
    for part in parts:
        if isinstance(part, np.dtype):
            part = f"{part.descr}/{part.itemsize}"
        md5.update(str(part).encode("utf-8"))
    return md5.hexdigest().encode("ascii")


@dataclass(frozen=True)
class Fingerprint:
    """
    Compatibility marker of the build that wrote an artifact.

    Each digest covers one group of record layouts; two fingerprints are
    compared per group rather than byte for byte.
    """

    magic_number: int
    md5_prepare: bytes
    md5_tree: bytes
    md5_graph: bytes
    md5_objects: bytes
    has_64_bits: bool

    @classmethod
    def get_valid(cls) -> "Fingerprint":
        """Fingerprint of the running build, recomputed on every call."""
        return cls(
            magic_number=FINGERPRINT_MAGIC_NUMBER,
            md5_prepare=_layout_digest(CONTRACTOR_LAYOUT_VERSION, EDGE_ARRAY_ENTRY_DTYPE),
            md5_tree=_layout_digest(RTREE_LAYOUT_VERSION),
            md5_graph=_layout_digest(NODE_ARRAY_ENTRY_DTYPE, EDGE_ARRAY_ENTRY_DTYPE),
            md5_objects=_layout_digest(QUERY_NODE_DTYPE, ORIGINAL_EDGE_DATA_DTYPE),
            has_64_bits=sys.maxsize > 2**32,
        )

    @classmethod
    def from_record(cls, record: np.void) -> "Fingerprint":
        """Build a fingerprint from one FINGERPRINT_DTYPE record."""
        return cls(
            magic_number=int(record["magic_number"]),
            md5_prepare=bytes(record["md5_prepare"]),
            md5_tree=bytes(record["md5_tree"]),
            md5_graph=bytes(record["md5_graph"]),
            md5_objects=bytes(record["md5_objects"]),
            has_64_bits=bool(record["has_64_bits"]),
        )

    def to_record(self) -> np.ndarray:
        """Single-element FINGERPRINT_DTYPE array holding this fingerprint."""
        record = np.zeros(1, dtype=FINGERPRINT_DTYPE)
        record[0] = (
            self.magic_number,
            self.md5_prepare,
            self.md5_tree,
            self.md5_graph,
            self.md5_objects,
            self.has_64_bits,
        )
        return record

    def to_bytes(self) -> bytes:
        return self.to_record().tobytes()

    def is_magic_number_ok(self, other: "Fingerprint") -> bool:
        return self.magic_number == other.magic_number

    def test_contractor(self, other: "Fingerprint") -> bool:
        return _same_digest(self.md5_prepare, other.md5_prepare)

    def test_graph_util(self, other: "Fingerprint") -> bool:
        return _same_digest(self.md5_graph, other.md5_graph)

    def test_rtree(self, other: "Fingerprint") -> bool:
        return _same_digest(self.md5_tree, other.md5_tree)

    def test_query_objects(self, other: "Fingerprint") -> bool:
        return _same_digest(self.md5_objects, other.md5_objects)

    def compare(self, other: "Fingerprint") -> dict[str, bool]:
        """Result of every compatibility predicate, keyed by name."""
        return {
            "magic_number": self.is_magic_number_ok(other),
            "contractor": self.test_contractor(other),
            "graph_util": self.test_graph_util(other),
            "rtree": self.test_rtree(other),
            "query_objects": self.test_query_objects(other),
        }

    def is_compatible(self, other: "Fingerprint") -> bool:
        """Strict check: every predicate must pass."""
        return all(self.compare(other).values())


def _same_digest(left: bytes, right: bytes) -> bool:
    return left[:DIGEST_LENGTH] == right[:DIGEST_LENGTH]
