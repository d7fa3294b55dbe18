"""Fixed-point coordinates."""

import numpy as np

COORDINATE_PRECISION = 1e6

# Degrees scaled by COORDINATE_PRECISION
MAX_LONGITUDE = int(180 * COORDINATE_PRECISION)
MAX_LATITUDE = int(90 * COORDINATE_PRECISION)

COORDINATE_DTYPE = np.dtype([("lon", np.int32), ("lat", np.int32)], align=True)


def is_valid(lon: int, lat: int) -> bool:
    """Check a fixed-point coordinate lies within the WGS84 bounds."""
    return -MAX_LONGITUDE <= lon <= MAX_LONGITUDE and -MAX_LATITUDE <= lat <= MAX_LATITUDE


def to_floating(lon: int, lat: int) -> tuple[float, float]:
    """Convert a fixed-point coordinate to (lon, lat) in degrees."""
    return lon / COORDINATE_PRECISION, lat / COORDINATE_PRECISION


def to_fixed(lon: float, lat: float) -> tuple[int, int]:
    """Convert degrees to a fixed-point (lon, lat) pair."""
    return round(lon * COORDINATE_PRECISION), round(lat * COORDINATE_PRECISION)
