"""
Tilted focal-plane reconstruction for split-wire position-sensitive detectors.
"""

from focal_plane.geom.tilt_params import TiltParameters, DEFAULT_TILT_PARAMETERS
from focal_plane.filters.tilt_correction import compute, compute_batch

__all__ = ["TiltParameters", "DEFAULT_TILT_PARAMETERS", "compute", "compute_batch"]
