"""Data models for loaded artifacts and their configuration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt

from routing_storage.records.extractor import (
    ENTRY_CLASS_ID_TYPE,
    GEOMETRY_ID_TYPE,
    LANE_DATA_ID_TYPE,
    NAME_ID_TYPE,
    TRAVEL_MODE_TYPE,
    TURN_BEARING_TYPE,
    TURN_INSTRUCTION_TYPE,
)


@dataclass(frozen=True)
class HSGRHeader:
    """Header of a contracted graph file, following its fingerprint."""

    checksum: int
    number_of_nodes: int
    number_of_edges: int


@dataclass
class DatasourceNamesData:
    """Datasource names packed into one buffer, indexed by offset and length."""

    names: bytearray = field(default_factory=bytearray)
    offsets: list[int] = field(default_factory=list)
    lengths: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.offsets)

    def get_name(self, index: int) -> str:
        offset = self.offsets[index]
        raw = bytes(self.names[offset : offset + self.lengths[index]])
        return raw.decode("utf-8", errors="surrogateescape")


@dataclass
class EdgeMetadataColumns:
    """Per-edge metadata stored column by column, one array per field."""

    geometry_ids: npt.NDArray[np.uint32]
    name_ids: npt.NDArray[np.uint32]
    turn_instructions: npt.NDArray[np.uint8]
    lane_data_ids: npt.NDArray[np.uint16]
    travel_modes: npt.NDArray[np.uint8]
    entry_class_ids: npt.NDArray[np.uint16]
    pre_turn_bearings: npt.NDArray[np.uint8]
    post_turn_bearings: npt.NDArray[np.uint8]

    @classmethod
    def allocate(cls, count: int) -> "EdgeMetadataColumns":
        """Allocate zeroed columns for count edges."""
        return cls(
            geometry_ids=np.zeros(count, dtype=GEOMETRY_ID_TYPE),
            name_ids=np.zeros(count, dtype=NAME_ID_TYPE),
            turn_instructions=np.zeros(count, dtype=TURN_INSTRUCTION_TYPE),
            lane_data_ids=np.zeros(count, dtype=LANE_DATA_ID_TYPE),
            travel_modes=np.zeros(count, dtype=TRAVEL_MODE_TYPE),
            entry_class_ids=np.zeros(count, dtype=ENTRY_CLASS_ID_TYPE),
            pre_turn_bearings=np.zeros(count, dtype=TURN_BEARING_TYPE),
            post_turn_bearings=np.zeros(count, dtype=TURN_BEARING_TYPE),
        )

    def columns(self) -> list[npt.NDArray[Any]]:
        return [
            self.geometry_ids,
            self.name_ids,
            self.turn_instructions,
            self.lane_data_ids,
            self.travel_modes,
            self.entry_class_ids,
            self.pre_turn_bearings,
            self.post_turn_bearings,
        ]

    def __len__(self) -> int:
        return min(len(column) for column in self.columns())


@dataclass
class StorageConfig:
    """Locations of every artifact of a prepared dataset, derived from its base path."""

    base_path: str

    def _with_suffix(self, suffix: str) -> Path:
        return Path(f"{self.base_path}{suffix}")

    @property
    def hsgr_data_path(self) -> Path:
        return self._with_suffix(".hsgr")

    @property
    def nodes_data_path(self) -> Path:
        return self._with_suffix(".nodes")

    @property
    def edges_data_path(self) -> Path:
        return self._with_suffix(".edges")

    @property
    def properties_path(self) -> Path:
        return self._with_suffix(".properties")

    @property
    def timestamp_path(self) -> Path:
        return self._with_suffix(".timestamp")

    @property
    def datasource_indexes_path(self) -> Path:
        return self._with_suffix(".datasource_indexes")

    @property
    def datasource_names_path(self) -> Path:
        return self._with_suffix(".datasource_names")

    @property
    def ram_index_path(self) -> Path:
        return self._with_suffix(".ramIndex")

    def required_paths(self) -> list[Path]:
        # timestamp and ram index are optional
        return [
            self.hsgr_data_path,
            self.nodes_data_path,
            self.edges_data_path,
            self.properties_path,
            self.datasource_indexes_path,
            self.datasource_names_path,
        ]

    def missing_files(self) -> list[str]:
        return [path.name for path in self.required_paths() if not path.exists()]

    def is_valid(self) -> bool:
        return not self.missing_files()


@dataclass
class RoutingDataset:
    """Every array loaded from a prepared dataset."""

    header: HSGRHeader
    graph_nodes: npt.NDArray[Any]
    graph_edges: npt.NDArray[Any]
    coordinates: npt.NDArray[Any]
    osm_node_ids: list[int]
    edge_metadata: EdgeMetadataColumns
    properties: npt.NDArray[Any]
    timestamp: str
    datasource_indexes: npt.NDArray[np.uint8]
    datasource_names: DatasourceNamesData
    ram_index: npt.NDArray[Any] | None = None


@dataclass
class InspectionReport:
    """Report from inspecting a prepared dataset."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
