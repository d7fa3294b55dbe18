"""Record layouts written by the extraction stage (.edges, .nodes, .properties)."""

import numpy as np

# One row of the .edges file
ORIGINAL_EDGE_DATA_DTYPE = np.dtype(
    [
        ("via_geometry", np.uint32),
        ("name_id", np.uint32),
        ("entry_classid", np.uint16),
        ("lane_data_id", np.uint16),
        ("turn_instruction", np.uint8),
        ("pre_turn_bearing", np.uint8),
        ("post_turn_bearing", np.uint8),
        ("travel_mode", np.uint8),
    ],
    align=True,
)

# One row of the .nodes file; coordinates are fixed-point
QUERY_NODE_DTYPE = np.dtype(
    [
        ("lon", np.int32),
        ("lat", np.int32),
        ("node_id", np.uint64),
    ],
    align=True,
)

PROFILE_PROPERTIES_DTYPE = np.dtype(
    [
        ("traffic_signal_penalty", np.int32),  # deciseconds
        ("u_turn_penalty", np.int32),  # deciseconds
        ("max_speed_for_map_matching", np.float64),  # m/s
        ("continue_straight_at_waypoint", np.bool_),
        ("use_turn_restrictions", np.bool_),
        ("left_hand_driving", np.bool_),
    ],
    align=True,
)

# Column types of the scattered edge metadata
GEOMETRY_ID_TYPE = np.uint32
NAME_ID_TYPE = np.uint32
TURN_INSTRUCTION_TYPE = np.uint8
LANE_DATA_ID_TYPE = np.uint16
TRAVEL_MODE_TYPE = np.uint8
ENTRY_CLASS_ID_TYPE = np.uint16
TURN_BEARING_TYPE = np.uint8

DATASOURCE_INDEX_TYPE = np.uint8
