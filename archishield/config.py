"""Global configuration: defaults shared across the audit pipeline."""

# Neighbourhood query radius (metres) when the caller does not override it
DEFAULT_NEIGHBORHOOD_RADIUS = 150.0

# Number of nearest neighbours kept in neighbourhood statistics
NEAREST_NEIGHBOR_LIMIT = 10

# Mean earth radius used by the haversine distance (metres)
EARTH_RADIUS_M = 6_371_000.0

# Rough metres per degree of latitude, used for bounding-box pre-filters
METERS_PER_DEGREE = 111_000.0

# Key-risk placeholder when no blocking or critical constraint exists
NO_CRITICAL_CONSTRAINTS = "No critical constraints"

# Settings directory inside a project root
SETTINGS_DIR = ".archishield"
