"""Tests for the dataset loading API."""

from pathlib import Path

import numpy as np
import pytest

from routing_storage import inspect, load_dataset
from routing_storage.api import _count_records
from routing_storage.exceptions import OpenFailure, StorageError, TruncatedFile
from routing_storage.io.fingerprint import Fingerprint
from routing_storage.models import StorageConfig
from routing_storage.records.extractor import QUERY_NODE_DTYPE
from routing_storage.records.guidance import TravelMode
from tests.artifacts import (
    RTREE_NODE_DTYPE,
    ArtifactWriter,
    expected_coordinates,
    sample_edge_rows,
    sample_graph,
    sample_node_rows,
)


def test_storage_config_paths() -> None:
    """Test artifact paths derive from the base path."""
    config = StorageConfig(base_path="/data/berlin.osrm")

    assert str(config.hsgr_data_path) == "/data/berlin.osrm.hsgr"
    assert str(config.ram_index_path) == "/data/berlin.osrm.ramIndex"
    assert str(config.datasource_names_path) == "/data/berlin.osrm.datasource_names"


def test_storage_config_missing_files(writer: ArtifactWriter) -> None:
    """Test required files are checked but optional ones are not."""
    base = writer.dataset()
    config = StorageConfig(base_path=base)
    assert config.is_valid()

    config.timestamp_path.unlink()
    assert config.is_valid()

    config.edges_data_path.unlink()
    assert not config.is_valid()
    assert config.missing_files() == ["map.osrm.edges"]


def test_load_dataset(dataset_base: str) -> None:
    """Test loading every artifact of a dataset."""
    dataset = load_dataset(StorageConfig(base_path=dataset_base))

    nodes, edges = sample_graph()
    assert dataset.header.checksum == 42
    assert dataset.graph_nodes.tobytes() == nodes.tobytes()
    assert dataset.graph_edges.tobytes() == edges.tobytes()

    assert dataset.coordinates.tobytes() == expected_coordinates(sample_node_rows()).tobytes()
    assert dataset.osm_node_ids == [100, 200, 300]

    assert list(dataset.edge_metadata.name_ids) == list(sample_edge_rows()["name_id"])
    assert list(dataset.edge_metadata.travel_modes) == [TravelMode.Driving, TravelMode.Cycling]

    assert dataset.properties[0]["u_turn_penalty"] == 200
    assert dataset.timestamp == "2026-10-01T00:00:00Z"
    assert list(dataset.datasource_indexes) == [0, 1, 1, 0]
    assert dataset.datasource_names.get_name(0) == "lua profile"
    assert dataset.datasource_names.get_name(1) == "traffic"
    assert dataset.ram_index is None


def test_load_dataset_with_ram_index(writer: ArtifactWriter) -> None:
    """Test the spatial index is loaded with the caller's record type."""
    base = writer.dataset(with_ram_index=True)

    dataset = load_dataset(StorageConfig(base_path=base), rtree_node_dtype=RTREE_NODE_DTYPE)

    assert dataset.ram_index is not None
    assert dataset.ram_index.dtype == RTREE_NODE_DTYPE
    assert list(dataset.ram_index["child_count"]) == [1, 0]


def test_load_dataset_without_timestamp(writer: ArtifactWriter) -> None:
    """Test a missing timestamp file loads as an empty timestamp."""
    base = writer.dataset()
    config = StorageConfig(base_path=base)
    config.timestamp_path.unlink()

    dataset = load_dataset(config)

    assert dataset.timestamp == ""


def test_load_dataset_missing_files(tmp_path: Path) -> None:
    """Test loading an incomplete dataset fails before opening anything."""
    with pytest.raises(OpenFailure) as exc_info:
        load_dataset(StorageConfig(base_path=f"{tmp_path}/missing.osrm"))

    assert isinstance(exc_info.value, StorageError)
    assert exc_info.value.path == f"{tmp_path}/missing.osrm.hsgr"


def test_load_dataset_missing_later_file(writer: ArtifactWriter) -> None:
    """Test the first missing required file is the one reported."""
    base = writer.dataset()
    config = StorageConfig(base_path=base)
    config.edges_data_path.unlink()

    with pytest.raises(OpenFailure) as exc_info:
        load_dataset(config)

    assert exc_info.value.path == str(config.edges_data_path)
    assert "required file missing" in str(exc_info.value)


def test_inspect(dataset_base: str) -> None:
    """Test inspecting a valid dataset."""
    report = inspect(dataset_base)

    assert report.valid
    assert report.errors == []
    assert report.warnings == []
    assert report.stats == {
        "nodes": 3,
        "edges": 2,
        "coordinates": 3,
        "edge_metadata": 2,
        "datasource_indexes": 4,
        "datasource_names": 2,
        "timestamp_bytes": 21,
    }


def test_inspect_missing_files(tmp_path: Path) -> None:
    """Test inspecting a directory without a dataset."""
    report = inspect(f"{tmp_path}/missing.osrm")

    assert not report.valid
    assert "Required file missing: missing.osrm.hsgr" in report.errors


def test_inspect_fingerprint_drift(
    writer: ArtifactWriter, foreign_fingerprint: Fingerprint
) -> None:
    """Test a foreign fingerprint is reported as a warning."""
    base = writer.dataset()
    nodes, edges = sample_graph()
    writer.hsgr("map.osrm.hsgr", nodes, edges, fingerprint=foreign_fingerprint)

    report = inspect(base)

    assert report.valid
    assert report.warnings == ["Fingerprint check failed: graph_util"]


def test_inspect_truncated_payload(writer: ArtifactWriter) -> None:
    """Test a count header larger than the payload is an error."""
    base = writer.dataset()
    writer.counted("map.osrm.nodes", sample_node_rows(), count=10)

    report = inspect(base)

    assert not report.valid
    assert "declares 10 records but holds 3" in report.errors[0]


def test_count_records_truncated(writer: ArtifactWriter) -> None:
    """Test a count header larger than the payload raises TruncatedFile."""
    path = writer.counted("nodes.bin", sample_node_rows(), count=10)

    with pytest.raises(TruncatedFile) as exc_info:
        _count_records(path, QUERY_NODE_DTYPE)

    assert exc_info.value.path == str(path)


def test_inspect_empty_graph(writer: ArtifactWriter) -> None:
    """Test a graph header without nodes fails inspection."""
    base = writer.dataset()
    nodes, edges = sample_graph()
    writer.hsgr("map.osrm.hsgr", nodes, edges, number_of_nodes=0)

    report = inspect(base)

    assert not report.valid
    assert "number of nodes is zero" in report.errors[0]


def test_dataset_arrays_are_writable(dataset_base: str) -> None:
    """Test loaded arrays are owned by the caller."""
    dataset = load_dataset(StorageConfig(base_path=dataset_base))

    dataset.graph_edges["target"][0] = 9
    assert np.all(dataset.graph_edges["target"] == [9, 2])
