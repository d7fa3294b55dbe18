"""Loaders turning each artifact format into in-memory arrays."""

import logging
from typing import Any, Protocol

import numpy as np
import numpy.typing as npt

from routing_storage.exceptions import InvariantViolation
from routing_storage.io.file import BinaryFile
from routing_storage.io.fingerprint import FINGERPRINT_DTYPE, Fingerprint
from routing_storage.models import DatasourceNamesData, EdgeMetadataColumns, HSGRHeader
from routing_storage.records import coordinate
from routing_storage.records.extractor import ORIGINAL_EDGE_DATA_DTYPE, QUERY_NODE_DTYPE

logger = logging.getLogger(__name__)


class Appendable(Protocol):
    def append(self, value: int, /) -> None: ...


def _require_capacity(name: str, buffer: npt.NDArray[Any], count: int) -> None:
    if buffer is None:
        raise ValueError(f"{name} buffer is missing")
    if len(buffer) < count:
        raise ValueError(f"{name} buffer holds {len(buffer)} elements, {count} required")


def read_hsgr_header(input_file: BinaryFile) -> HSGRHeader:
    """
    Read the fingerprint and header of a contracted graph file.

    Only the graph layout part of the fingerprint is checked; a mismatch is
    logged and loading continues.

    Raises:
        InvariantViolation: The header declares zero nodes
    """
    fingerprint_valid = Fingerprint.get_valid()
    fingerprint_loaded = Fingerprint.from_record(input_file.read_one(FINGERPRINT_DTYPE))
    if not fingerprint_loaded.test_graph_util(fingerprint_valid):
        logger.warning(
            ".hsgr was prepared with different build.\nReprocess to get rid of this warning."
        )

    checksum = int(input_file.read_one(np.uint32))
    number_of_nodes = int(input_file.read_one(np.uint64))
    number_of_edges = int(input_file.read_one(np.uint64))

    if number_of_nodes == 0:
        raise InvariantViolation(input_file.path, "number of nodes is zero")
    # number of edges can be zero, e.g. in small test fixtures

    logger.debug(
        f"{input_file.path}: checksum={checksum}, nodes={number_of_nodes}, edges={number_of_edges}"
    )
    return HSGRHeader(
        checksum=checksum, number_of_nodes=number_of_nodes, number_of_edges=number_of_edges
    )


def read_hsgr(
    input_file: BinaryFile,
    node_buffer: npt.NDArray[Any],
    number_of_nodes: int,
    edge_buffer: npt.NDArray[Any],
    number_of_edges: int,
) -> None:
    """Read the node and edge arrays of a contracted graph; call after read_hsgr_header()."""
    _require_capacity("Node", node_buffer, number_of_nodes)
    _require_capacity("Edge", edge_buffer, number_of_edges)
    input_file.read_into(node_buffer, number_of_nodes)
    input_file.read_into(edge_buffer, number_of_edges)


def read_properties_count() -> int:
    """A properties file always holds exactly one record."""
    return 1


def read_properties(
    properties_file: BinaryFile, properties: npt.NDArray[Any], properties_size: int
) -> None:
    """Read properties_size profile property records into properties."""
    _require_capacity("Properties", properties, properties_size)
    properties_file.read_into(properties, properties_size)


def read_number_of_bytes(input_file: BinaryFile) -> int:
    """Length of the whole file in bytes."""
    return input_file.size()


def read_timestamp(
    timestamp_file: BinaryFile, timestamp: npt.NDArray[Any], timestamp_length: int
) -> None:
    """Read the raw timestamp text; use read_number_of_bytes() for its length."""
    _require_capacity("Timestamp", timestamp, timestamp_length)
    timestamp_file.read_into(timestamp, timestamp_length)


def read_datasource_indexes(
    datasource_indexes_file: BinaryFile,
    datasource_buffer: npt.NDArray[np.uint8],
    number_of_datasource_indexes: int,
) -> None:
    """Read per-segment datasource indexes; call after reading the element count."""
    _require_capacity("Datasource", datasource_buffer, number_of_datasource_indexes)
    datasource_indexes_file.read_into(datasource_buffer, number_of_datasource_indexes)


_EDGE_COLUMN_NAMES = (
    "Geometry",
    "Name id",
    "Turn instruction",
    "Lane data id",
    "Travel mode",
    "Entry class id",
    "Pre-turn bearing",
    "Post-turn bearing",
)


def read_edges(
    edges_input_file: BinaryFile, columns: EdgeMetadataColumns, number_of_edges: int
) -> None:
    """
    Read per-edge metadata rows and scatter them into columns.

    Each row holds the geometry id, name id, turn instruction, lane data id,
    travel mode, entry class id and the bearings before and after the turn.
    Call after reading the element count.
    """
    for name, column in zip(_EDGE_COLUMN_NAMES, columns.columns()):
        _require_capacity(name, column, number_of_edges)

    current_edge_data = np.empty(1, dtype=ORIGINAL_EDGE_DATA_DTYPE)
    for i in range(number_of_edges):
        edges_input_file.read_into(current_edge_data)
        row = current_edge_data[0]

        columns.geometry_ids[i] = row["via_geometry"]
        columns.name_ids[i] = row["name_id"]
        columns.turn_instructions[i] = row["turn_instruction"]
        columns.lane_data_ids[i] = row["lane_data_id"]
        columns.travel_modes[i] = row["travel_mode"]
        columns.entry_class_ids[i] = row["entry_classid"]
        columns.pre_turn_bearings[i] = row["pre_turn_bearing"]
        columns.post_turn_bearings[i] = row["post_turn_bearing"]

    logger.debug(f"Read {number_of_edges} edge metadata rows from {edges_input_file.path}")


def read_nodes(
    nodes_file: BinaryFile,
    coordinate_list: npt.NDArray[Any],
    osm_node_id_list: Appendable,
    number_of_coordinates: int,
) -> None:
    """
    Read node rows into a coordinate array and append their OSM node ids.

    Call after reading the element count.

    Raises:
        InvariantViolation: A coordinate lies outside the valid range
    """
    _require_capacity("Coordinate", coordinate_list, number_of_coordinates)

    current_node = np.empty(1, dtype=QUERY_NODE_DTYPE)
    for i in range(number_of_coordinates):
        nodes_file.read_into(current_node)
        row = current_node[0]

        lon = int(row["lon"])
        lat = int(row["lat"])
        if not coordinate.is_valid(lon, lat):
            raise InvariantViolation(
                nodes_file.path, f"node {i} has invalid coordinate ({lon}, {lat})"
            )
        coordinate_list[i] = (lon, lat)
        osm_node_id_list.append(int(row["node_id"]))

    logger.debug(f"Read {number_of_coordinates} nodes from {nodes_file.path}")


def read_datasource_names(datasource_names_file: BinaryFile) -> DatasourceNamesData:
    """Read one datasource name per line into a packed buffer with offsets and lengths."""
    datasource_names_data = DatasourceNamesData()
    for name in datasource_names_file.read_lines():
        encoded = name.encode("utf-8", errors="surrogateescape")
        datasource_names_data.offsets.append(len(datasource_names_data.names))
        datasource_names_data.lengths.append(len(encoded))
        datasource_names_data.names.extend(encoded)
    return datasource_names_data


def read_ram_index(
    ram_index_file: BinaryFile, rtree_buffer: npt.NDArray[Any], tree_size: int
) -> None:
    """
    Read the in-memory levels of a spatial index.

    The node record type comes from the caller through the buffer's dtype;
    this module never imports the spatial index. Call after reading the
    element count.
    """
    _require_capacity("Spatial index", rtree_buffer, tree_size)
    ram_index_file.read_into(rtree_buffer, tree_size)
