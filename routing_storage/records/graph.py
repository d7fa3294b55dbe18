"""Record layouts of the contracted graph (.hsgr)."""

import numpy as np

# Static graph adjacency array: node i owns edges [first_edge[i], first_edge[i + 1]).
# The array ends with one sentinel entry whose first_edge is the edge count.
NODE_ARRAY_ENTRY_DTYPE = np.dtype([("first_edge", np.uint32)], align=True)

# Edge data words:
#   id_shortcut:  id (31 bits) | shortcut (1 bit)
#   weight_flags: weight (30 bits, signed) | forward (1 bit) | backward (1 bit)
EDGE_ARRAY_ENTRY_DTYPE = np.dtype(
    [
        ("target", np.uint32),
        ("id_shortcut", np.uint32),
        ("weight_flags", np.uint32),
    ],
    align=True,
)

_ID_MASK = 0x7FFFFFFF
_WEIGHT_BITS = 30
_WEIGHT_MASK = (1 << _WEIGHT_BITS) - 1


def edge_id(edge: np.void) -> int:
    """Middle node of a shortcut, or the original edge id otherwise."""
    return int(edge["id_shortcut"]) & _ID_MASK


def is_shortcut(edge: np.void) -> bool:
    """Whether the edge bypasses a contracted node."""
    return bool(int(edge["id_shortcut"]) >> 31)


def edge_weight(edge: np.void) -> int:
    """Signed 30-bit weight of an edge."""
    weight = int(edge["weight_flags"]) & _WEIGHT_MASK
    if weight & (1 << (_WEIGHT_BITS - 1)):
        weight -= 1 << _WEIGHT_BITS
    return weight


def is_forward(edge: np.void) -> bool:
    """Whether the edge can be traversed from source to target."""
    return bool((int(edge["weight_flags"]) >> _WEIGHT_BITS) & 1)


def is_backward(edge: np.void) -> bool:
    """Whether the edge can be traversed from target to source."""
    return bool((int(edge["weight_flags"]) >> (_WEIGHT_BITS + 1)) & 1)


def pack_edge_data(
    data_id: int, shortcut: bool, weight: int, forward: bool, backward: bool
) -> tuple[int, int]:
    """Pack edge data fields into the (id_shortcut, weight_flags) words."""
    id_shortcut = (data_id & _ID_MASK) | (int(shortcut) << 31)
    weight_flags = (
        (weight & _WEIGHT_MASK)
        | (int(forward) << _WEIGHT_BITS)
        | (int(backward) << (_WEIGHT_BITS + 1))
    )
    return id_shortcut, weight_flags


def edge_range(node_array: np.ndarray, node: int) -> range:
    """
    Indices of the edges leaving a node.

    The node array carries one trailing sentinel entry, so the last real node's
    range ends at the sentinel's first_edge.

    Raises:
        ValueError: node is negative or refers to the sentinel entry
    """
    if not 0 <= node < len(node_array) - 1:
        raise ValueError(
            f"Node {node} out of range for a node array of {len(node_array)} entries "
            "(the last entry is the sentinel)"
        )
    begin = int(node_array[node]["first_edge"])
    end = int(node_array[node + 1]["first_edge"])
    return range(begin, end)
