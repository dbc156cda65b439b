import numpy as np
import pytest

from focal_plane.kinematics import SPS_DETECTOR_WIRE_DIST, calculate_weights, weighted_average


def test_zero_offset_is_midpoint():
    weights = calculate_weights(0.0)
    assert weights == (0.5, 0.5)
    assert weighted_average(100.0, 110.0, weights) == 105.0


def test_weights_sum_to_one():
    for z in (-5.0, 1.3, 12.0):
        w1, w2 = calculate_weights(z)
        assert w1 + w2 == pytest.approx(1.0)


def test_offset_at_back_wire():
    w1, w2 = calculate_weights(SPS_DETECTOR_WIRE_DIST / 2.0)
    assert w1 == pytest.approx(0.0)
    assert w2 == pytest.approx(1.0)


def test_weighted_average_arrays():
    x1 = np.array([100.0, -50.0])
    x2 = np.array([110.0, -40.0])
    xavg = weighted_average(x1, x2, calculate_weights(0.0))
    assert np.allclose(xavg, [105.0, -45.0])
