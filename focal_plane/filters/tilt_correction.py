# filters/tilt_correction.py
# Tilted focal-plane reconstruction, Shapira et al. (1975)
# https://doi.org/10.1016/0029-554X(75)90121-4

import math

import numpy as np
from numba import njit

from focal_plane.reco_constants import TAN_EPSILON, DENOMINATOR_EPSILON, INVALID_VALUE


def compute(x1, x2, params, tan_eps=TAN_EPSILON, denom_eps=DENOMINATOR_EPSILON):
    """
    Corrected focal-plane position from the two wire positions.

    Args:
        x1, x2: positions measured at the front and back wire
        params: TiltParameters
        tan_eps: |tan(alpha)| below this uses the untilted closed form
        denom_eps: |denominator| below this is a singular projection

    Returns:
        float, or None when the projected geometry is singular
        (including a zero reference length on the untilted branch)
    """
    dx = x2 - x1
    s = params.reference_length_mm

    alpha = math.radians(params.tilt_angle_deg)
    tan_a = math.tan(alpha)
    h_mm = params.effective_height_mm

    if abs(tan_a) < tan_eps:
        # alpha ~ 0 -> untilted focal plane limit
        if abs(s) < denom_eps:
            return None
        return (x2 * s - dx * h_mm) / s

    cot_a = 1.0 / tan_a
    norm_tan = math.sqrt(1.0 + tan_a * tan_a)
    norm_cot = math.sqrt(1.0 + cot_a * cot_a)

    numerator = x2 * (s / norm_tan) - dx * h_mm
    denominator = (s / norm_tan) - (dx / norm_cot)

    if abs(denominator) < denom_eps:
        return None
    return numerator / denominator


def compute_batch(x1, x2, params, tan_eps=TAN_EPSILON, denom_eps=DENOMINATOR_EPSILON):
    """
    Vectorized compute() over arrays of wire positions.

    Returns (values, valid). Entries with a singular projection, or with an
    input that is non-finite or INVALID_VALUE, have valid == False and hold
    INVALID_VALUE.
    """
    x1 = np.asarray(x1, dtype=np.float64)
    x2 = np.asarray(x2, dtype=np.float64)
    if x1.shape != x2.shape:
        raise ValueError(f"x1 and x2 shapes differ: {x1.shape} vs {x2.shape}")

    shape = x1.shape
    values, valid = compute_batch_kernel(
        np.ascontiguousarray(x1.ravel()),
        np.ascontiguousarray(x2.ravel()),
        params.tilt_angle_deg,
        params.effective_height_mm,
        params.reference_length_mm,
        tan_eps,
        denom_eps,
        INVALID_VALUE,
    )
    return values.reshape(shape), valid.reshape(shape)


@njit
def compute_batch_kernel(x1, x2, alpha_deg, h_mm, s, tan_eps, denom_eps, invalid):
    n = x1.shape[0]
    values = np.empty(n, dtype=np.float64)
    valid = np.zeros(n, dtype=np.bool_)

    tan_a = math.tan(math.radians(alpha_deg))
    untilted = abs(tan_a) < tan_eps

    norm_tan = 1.0
    norm_cot = 1.0
    if not untilted:
        cot_a = 1.0 / tan_a
        norm_tan = math.sqrt(1.0 + tan_a * tan_a)
        norm_cot = math.sqrt(1.0 + cot_a * cot_a)

    for i in range(n):
        values[i] = invalid
        a = x1[i]
        b = x2[i]
        if not (np.isfinite(a) and np.isfinite(b)) or a == invalid or b == invalid:
            continue

        dx = b - a
        if untilted:
            if abs(s) < denom_eps:
                continue
            values[i] = (b * s - dx * h_mm) / s
            valid[i] = True
            continue

        denominator = (s / norm_tan) - (dx / norm_cot)
        if abs(denominator) < denom_eps:
            continue
        values[i] = (b * (s / norm_tan) - dx * h_mm) / denominator
        valid[i] = True

    return values, valid
