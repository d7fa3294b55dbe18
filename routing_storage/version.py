"""Version information and data layout identifiers."""

VERSION = "0.1.0"

# Written at the head of every fingerprinted artifact
FINGERPRINT_MAGIC_NUMBER = 1297240911

# Bumped whenever the persisted spatial index node layout changes. The index
# record type itself lives outside this package.
RTREE_LAYOUT_VERSION = "static-rtree/1"

# Bumped whenever the contractor's edge data semantics change without the
# record layout changing.
CONTRACTOR_LAYOUT_VERSION = "query-edge/1"
