"""Guidance values packed into per-edge metadata."""

from enum import IntEnum

BEARING_SCALE = 360.0 / 256.0

_TURN_TYPE_BITS = 5
_TURN_TYPE_MASK = (1 << _TURN_TYPE_BITS) - 1
_MODIFIER_MASK = 0x7
_GEOMETRY_ID_MASK = 0x7FFFFFFF


class TurnType(IntEnum):
    """Kind of maneuver at the end of an edge (5 bits on disk)."""

    Invalid = 0
    NewName = 1
    Continue = 2
    Turn = 3
    Merge = 4
    OnRamp = 5
    OffRamp = 6
    Fork = 7
    EndOfRoad = 8
    Notification = 9
    EnterRoundabout = 10
    EnterAndExitRoundabout = 11
    EnterRotary = 12
    EnterAndExitRotary = 13
    EnterRoundaboutIntersection = 14
    EnterAndExitRoundaboutIntersection = 15
    UseLane = 16
    NoTurn = 17
    Suppressed = 18
    EnterRoundaboutAtExit = 19
    ExitRoundabout = 20
    EnterRotaryAtExit = 21
    ExitRotary = 22
    EnterRoundaboutIntersectionAtExit = 23
    ExitRoundaboutIntersection = 24
    StayOnRoundabout = 25
    Sliproad = 26


_KNOWN_TURN_TYPES = frozenset(int(t) for t in TurnType)


class DirectionModifier(IntEnum):
    """Direction of a maneuver (3 bits on disk)."""

    UTurn = 0
    SharpRight = 1
    Right = 2
    SlightRight = 3
    Straight = 4
    SlightLeft = 5
    Left = 6
    SharpLeft = 7


class TravelMode(IntEnum):
    """Mode of transport used on an edge."""

    Inaccessible = 0
    Driving = 1
    Cycling = 2
    Walking = 3
    Ferry = 4
    Train = 5
    PushingBike = 6
    StepsUp = 8
    StepsDown = 9
    RiverUp = 10
    RiverDown = 11
    Route = 12


def pack_turn_instruction(turn_type: TurnType, modifier: DirectionModifier) -> int:
    """Pack a turn instruction into its one-byte on-disk form."""
    return (int(modifier) << _TURN_TYPE_BITS) | int(turn_type)


def unpack_turn_instruction(value: int) -> tuple[TurnType | int, DirectionModifier]:
    """
    Split a one-byte turn instruction into type and direction modifier.

    Turn type codes 27-31 are reserved and returned as plain ints.
    """
    value = int(value)
    raw_type = value & _TURN_TYPE_MASK
    turn_type = TurnType(raw_type) if raw_type in _KNOWN_TURN_TYPES else raw_type
    return turn_type, DirectionModifier((value >> _TURN_TYPE_BITS) & _MODIFIER_MASK)


def encode_bearing(degrees: float) -> int:
    """Quantize a bearing in degrees to its one-byte on-disk form."""
    return int((degrees % 360.0) / BEARING_SCALE)


def decode_bearing(value: int) -> float:
    """Expand a one-byte bearing to degrees."""
    return int(value) * BEARING_SCALE


def geometry_id(value: int) -> tuple[int, bool]:
    """Split a packed geometry reference into (id, forward)."""
    value = int(value)
    return value & _GEOMETRY_ID_MASK, bool(value >> 31)
