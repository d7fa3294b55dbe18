"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from routing_storage.io.fingerprint import Fingerprint
from tests.artifacts import ArtifactWriter


@pytest.fixture
def writer(tmp_path: Path) -> ArtifactWriter:
    """Artifact writer targeting a temporary directory."""
    return ArtifactWriter(tmp_path)


@pytest.fixture
def dataset_base(writer: ArtifactWriter) -> str:
    """Base path of a complete sample dataset."""
    return writer.dataset()


@pytest.fixture
def foreign_fingerprint() -> Fingerprint:
    """Fingerprint of a build with a different graph layout."""
    valid = Fingerprint.get_valid()
    return Fingerprint(
        magic_number=valid.magic_number,
        md5_prepare=valid.md5_prepare,
        md5_tree=valid.md5_tree,
        md5_graph=b"0" * 32,
        md5_objects=valid.md5_objects,
        has_64_bits=valid.has_64_bits,
    )
