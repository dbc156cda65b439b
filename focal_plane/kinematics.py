# kinematics.py

import numpy as np

# Distance between the two delay-line wires of the focal-plane detector
SPS_DETECTOR_WIRE_DIST = 4.28625  # cm


def calculate_weights(z_offset):
    """
    Wire weights for projecting (x1, x2) onto a plane shifted by z_offset (cm)
    from the midpoint between the wires.
    """
    w1 = 0.5 - z_offset / SPS_DETECTOR_WIRE_DIST
    w2 = 0.5 + z_offset / SPS_DETECTOR_WIRE_DIST
    return w1, w2


def weighted_average(x1, x2, weights):
    """Xavg = w1 * x1 + w2 * x2. Accepts scalars or numpy arrays."""
    w1, w2 = weights
    if np.isscalar(x1) and np.isscalar(x2):
        return w1 * x1 + w2 * x2
    return w1 * np.asarray(x1, dtype=np.float64) + w2 * np.asarray(x2, dtype=np.float64)
