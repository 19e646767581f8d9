"""Shared spatial constants for the relation, descriptor and clustering predicates.

Distances are in scene units, taken to be metres. The contact and slack values
are sized for room-scale scenes captured by a headset or game engine, where
collider surfaces of resting objects sit a centimetre or two apart.
"""

# Two faces closer than 2 cm count as touching.
TOUCH_EPSILON = 0.02

# Broad-phase box slack before running a precise solid test (5 cm).
AABB_SLACK = 0.05

# "On top of" needs at least half of the smaller footprint supported.
MIN_PLANAR_OVERLAP = 0.5

# Above/below and left/right: allowed misalignment grows with separation,
# capped so distant objects cannot claim the whole room.
AXIS_SLOPE_FACTOR = 0.5
AXIS_MAX_TOLERANCE = 2.0

# Depth without a viewpoint uses the same slope on world Z.
DEPTH_SLOPE_FACTOR = 0.5

# "near": surface gap in metres.
NEAR_THRESHOLD = 2.0

# "between": off-segment tolerance is a quarter of the A-B separation, capped.
BETWEEN_SLOPE = 0.25
BETWEEN_MAX_TOLERANCE = 2.0

# Clustering: k-th neighbour, epsilon bounds and the smallest jump that counts
# as an elbow.
CLUSTER_K = 3
CLUSTER_MIN_EPS = 0.01
CLUSTER_MAX_EPS = 3.0
CLUSTER_MIN_RATIO = 1.05

# Emptiness: a foreign box must fit inside after shrinking by this much.
CONTAINS_EPSILON = 1e-4

# Relative tolerance when collecting all winners of a size extremum.
EXTREMA_REL_TOL = 1e-6

# Default camera when a viewpoint is given without a field of view.
DEFAULT_VERTICAL_FOV_DEG = 60.0
DEFAULT_ASPECT = 16.0 / 9.0

# Half-extent of the box standing in for the viewer ("*user").
VIEWER_HALF_EXTENT = 0.1
