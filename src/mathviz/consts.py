"""Central module containing numerical constants and tunables"""

from __future__ import annotations

###############################################################################
# Arc length
###############################################################################

# Relative tolerance and subinterval limit of the adaptive arc-length quadrature
ARC_LENGTH_TOLERANCE: float = 1.0e-10
ARC_LENGTH_QUAD_LIMIT: int = 200

# Number of intervals of the cached t -> arc length lookup table
ARC_LENGTH_TABLE_SIZE: int = 64

###############################################################################
# Closest point
###############################################################################

# Uniform intervals used to bracket roots of (B(t) - p) . B'(t) on [0, 1]
CLOSEST_POINT_SCAN_SAMPLES: int = 32

# Tolerance in t for the refined roots
CLOSEST_POINT_TOLERANCE: float = 1.0e-8

###############################################################################
# Interpolation and plotting
###############################################################################

# Datasets above this size are accepted but logged as prone to oscillation
NEVILLE_RECOMMENDED_MAX_POINTS: int = 10

# On-screen pixel distance between two plot samples
PLOT_SAMPLE_PIXELS: float = 3.0
