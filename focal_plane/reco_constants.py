# reco_constants.py

# Numerical guards for the tilt projection
TAN_EPSILON = 1e-12          # |tan(alpha)| below this is treated as an untilted plane
DENOMINATOR_EPSILON = 1e-12  # |denominator| below this means singular geometry

# Missing-data sentinel used in event-builder output columns
INVALID_VALUE = -1.0e6

# Default tree/branch names
TREE_NAME = "SPSTree"
X1_BRANCH = "X1"
X2_BRANCH = "X2"
XAVG_BRANCH = "Xavg"
XSHAP_BRANCH = "Xshap"
