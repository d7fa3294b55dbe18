"""Public API for routing-storage."""

import logging
from datetime import UTC, datetime
from pathlib import Path

import numpy as np
import numpy.typing as npt

from routing_storage.exceptions import OpenFailure, StorageError, TruncatedFile
from routing_storage.io.file import BinaryFile
from routing_storage.io.fingerprint import FINGERPRINT_DTYPE, Fingerprint
from routing_storage.io.loaders import (
    read_datasource_indexes,
    read_datasource_names,
    read_edges,
    read_hsgr,
    read_hsgr_header,
    read_nodes,
    read_number_of_bytes,
    read_properties,
    read_properties_count,
    read_ram_index,
    read_timestamp,
)
from routing_storage.models import (
    EdgeMetadataColumns,
    InspectionReport,
    RoutingDataset,
    StorageConfig,
)
from routing_storage.records.coordinate import COORDINATE_DTYPE
from routing_storage.records.extractor import (
    DATASOURCE_INDEX_TYPE,
    ORIGINAL_EDGE_DATA_DTYPE,
    PROFILE_PROPERTIES_DTYPE,
    QUERY_NODE_DTYPE,
)
from routing_storage.records.graph import EDGE_ARRAY_ENTRY_DTYPE, NODE_ARRAY_ENTRY_DTYPE

logger = logging.getLogger(__name__)


def load_dataset(
    config: StorageConfig,
    rtree_node_dtype: npt.DTypeLike | None = None,
) -> RoutingDataset:
    """
    Load every artifact of a prepared dataset into memory.

    Args:
        config: Locations of the dataset files
        rtree_node_dtype: Record type of the spatial index nodes; the ram
            index is only loaded when one is given

    Returns:
        RoutingDataset holding the loaded arrays

    Raises:
        OpenFailure: A required file is missing or cannot be opened
        StorageError: A file could not be loaded
    """
    logger.info(f"Loading dataset: {config.base_path}")
    start_time = datetime.now(UTC)

    for path in config.required_paths():
        if not path.exists():
            raise OpenFailure(str(path), "required file missing")

    # Contracted graph
    with BinaryFile(config.hsgr_data_path) as hsgr_file:
        header = read_hsgr_header(hsgr_file)
        graph_nodes = np.empty(header.number_of_nodes, dtype=NODE_ARRAY_ENTRY_DTYPE)
        graph_edges = np.empty(header.number_of_edges, dtype=EDGE_ARRAY_ENTRY_DTYPE)
        read_hsgr(
            hsgr_file, graph_nodes, header.number_of_nodes, graph_edges, header.number_of_edges
        )
    logger.info(
        f"Loaded graph with {header.number_of_nodes} nodes and {header.number_of_edges} edges"
    )

    # Coordinates and OSM node ids
    with BinaryFile(config.nodes_data_path) as nodes_file:
        number_of_coordinates = nodes_file.read_element_count64()
        coordinates = np.empty(number_of_coordinates, dtype=COORDINATE_DTYPE)
        osm_node_ids: list[int] = []
        read_nodes(nodes_file, coordinates, osm_node_ids, number_of_coordinates)
    logger.info(f"Loaded {number_of_coordinates} coordinates")

    # Edge metadata
    with BinaryFile(config.edges_data_path) as edges_file:
        number_of_edges = edges_file.read_element_count64()
        edge_metadata = EdgeMetadataColumns.allocate(number_of_edges)
        read_edges(edges_file, edge_metadata, number_of_edges)
    logger.info(f"Loaded metadata for {number_of_edges} edges")

    with BinaryFile(config.properties_path) as properties_file:
        properties_size = read_properties_count()
        properties = np.empty(properties_size, dtype=PROFILE_PROPERTIES_DTYPE)
        read_properties(properties_file, properties, properties_size)

    timestamp = ""
    if config.timestamp_path.exists():
        with BinaryFile(config.timestamp_path) as timestamp_file:
            timestamp_length = read_number_of_bytes(timestamp_file)
            timestamp_buffer = np.empty(timestamp_length, dtype=np.uint8)
            read_timestamp(timestamp_file, timestamp_buffer, timestamp_length)
        timestamp = timestamp_buffer.tobytes().decode("utf-8", errors="replace").strip()

    with BinaryFile(config.datasource_indexes_path) as datasource_indexes_file:
        number_of_datasource_indexes = datasource_indexes_file.read_element_count64()
        datasource_indexes = np.empty(number_of_datasource_indexes, dtype=DATASOURCE_INDEX_TYPE)
        read_datasource_indexes(
            datasource_indexes_file, datasource_indexes, number_of_datasource_indexes
        )

    with BinaryFile(config.datasource_names_path) as datasource_names_file:
        datasource_names = read_datasource_names(datasource_names_file)
    logger.info(f"Loaded {len(datasource_names)} datasource names")

    ram_index = None
    if rtree_node_dtype is not None:
        with BinaryFile(config.ram_index_path) as ram_index_file:
            tree_size = ram_index_file.read_element_count64()
            ram_index = np.empty(tree_size, dtype=rtree_node_dtype)
            read_ram_index(ram_index_file, ram_index, tree_size)
        logger.info(f"Loaded spatial index with {tree_size} nodes")

    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(f"Dataset loaded in {elapsed:.2f}s")

    return RoutingDataset(
        header=header,
        graph_nodes=graph_nodes,
        graph_edges=graph_edges,
        coordinates=coordinates,
        osm_node_ids=osm_node_ids,
        edge_metadata=edge_metadata,
        properties=properties,
        timestamp=timestamp,
        datasource_indexes=datasource_indexes,
        datasource_names=datasource_names,
        ram_index=ram_index,
    )


def _count_records(path: Path, dtype: npt.DTypeLike) -> int:
    """Read a uint64 count header and check the file is long enough to hold it.

    Raises:
        TruncatedFile: The payload holds fewer records than declared
    """
    with BinaryFile(path) as input_file:
        count = input_file.read_element_count64()
        available = (input_file.size() - 8) // np.dtype(dtype).itemsize
    if available < count:
        raise TruncatedFile(str(path), f"declares {count} records but holds {available}")
    return count


def inspect(base_path: str) -> InspectionReport:
    """
    Inspect a prepared dataset without loading its payloads.

    Args:
        base_path: Base path of the dataset, e.g. ``map.osrm``

    Returns:
        InspectionReport with per-artifact counts, fingerprint warnings and errors
    """
    logger.info(f"Inspecting dataset: {base_path}")

    config = StorageConfig(base_path=base_path)
    errors: list[str] = []
    warnings: list[str] = []
    stats: dict[str, int] = {}

    for filename in config.missing_files():
        errors.append(f"Required file missing: {filename}")

    if errors:
        return InspectionReport(valid=False, errors=errors, warnings=warnings)

    try:
        with BinaryFile(config.hsgr_data_path) as hsgr_file:
            loaded = Fingerprint.from_record(hsgr_file.read_one(FINGERPRINT_DTYPE))
            results = Fingerprint.get_valid().compare(loaded)
            for check, passed in results.items():
                if not passed:
                    warnings.append(f"Fingerprint check failed: {check}")

        # The header reader consumes the fingerprint itself
        with BinaryFile(config.hsgr_data_path) as hsgr_file:
            header = read_hsgr_header(hsgr_file)
        stats["nodes"] = header.number_of_nodes
        stats["edges"] = header.number_of_edges

        stats["coordinates"] = _count_records(config.nodes_data_path, QUERY_NODE_DTYPE)
        stats["edge_metadata"] = _count_records(config.edges_data_path, ORIGINAL_EDGE_DATA_DTYPE)
        stats["datasource_indexes"] = _count_records(
            config.datasource_indexes_path, DATASOURCE_INDEX_TYPE
        )

        with BinaryFile(config.datasource_names_path) as datasource_names_file:
            stats["datasource_names"] = len(read_datasource_names(datasource_names_file))

        if config.timestamp_path.exists():
            with BinaryFile(config.timestamp_path) as timestamp_file:
                stats["timestamp_bytes"] = read_number_of_bytes(timestamp_file)
        else:
            warnings.append(f"Optional file missing: {config.timestamp_path.name}")

    except StorageError as e:
        errors.append(str(e))

    valid = len(errors) == 0

    if valid:
        logger.info("Inspection passed")
    else:
        logger.error(f"Inspection failed with {len(errors)} errors")

    return InspectionReport(valid=valid, errors=errors, warnings=warnings, stats=stats)
