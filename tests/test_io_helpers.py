import numpy as np
import pytest

from focal_plane.geom.tilt_params import TiltParameters
from focal_plane.reco_constants import INVALID_VALUE
from focal_plane.run_correction import run_correction, correct_event_branches, main
from focal_plane.utils.io_helpers import read_flat_branches, read_wire_positions, write_corrected
from focal_plane.utils.plotting import plot_focal_plane_comparison


def make_input(path):
    branches = {
        "X1": np.array([100.0, -20.0, INVALID_VALUE, 12.0]),
        "X2": np.array([105.0, -25.0, 3.0, 14.0]),
        "ScintLeftEnergy": np.array([1200.0, 800.0, 50.0, 640.0]),
    }
    write_corrected(str(path), "SPSTree", branches)
    return branches


def test_write_and_read_wire_positions(tmp_path):
    path = tmp_path / "run_181.root"
    branches = make_input(path)

    x1, x2 = read_wire_positions(str(path), "SPSTree", "X1", "X2")
    assert np.array_equal(x1, branches["X1"])
    assert np.array_equal(x2, branches["X2"])


def test_missing_tree(tmp_path):
    path = tmp_path / "run_181.root"
    make_input(path)
    with pytest.raises(RuntimeError):
        read_wire_positions(str(path), "tree", "X1", "X2")


def test_missing_branch(tmp_path):
    path = tmp_path / "run_181.root"
    make_input(path)
    with pytest.raises(RuntimeError):
        read_wire_positions(str(path), "SPSTree", "X1", "Xback")


def test_write_rejects_mismatched_lengths(tmp_path):
    with pytest.raises(ValueError):
        write_corrected(str(tmp_path / "bad.root"), "SPSTree", {"X1": np.zeros(2), "X2": np.zeros(3)})


def test_correct_event_branches_requires_wire_branches():
    with pytest.raises(RuntimeError):
        correct_event_branches({"X1": np.zeros(2)}, TiltParameters())


def test_run_correction(tmp_path):
    in_path = tmp_path / "run_181.root"
    out_path = tmp_path / "run_181_xshap.root"
    plot_path = tmp_path / "xshap.png"
    make_input(in_path)

    params = TiltParameters(tilt_angle_deg=0.0, height_scale=1.0, reference_length_mm=42.8625)
    n_events, n_valid = run_correction(str(in_path), str(out_path), params=params,
                                       zoffset=0.0, plot=str(plot_path))

    assert (n_events, n_valid) == (4, 3)
    out = read_flat_branches(str(out_path), "SPSTree")
    assert set(out) == {"X1", "X2", "ScintLeftEnergy", "Xavg", "Xshap"}
    assert np.allclose(out["Xshap"], [100.0, -20.0, INVALID_VALUE, 12.0])
    assert np.allclose(out["Xavg"], [102.5, -22.5, INVALID_VALUE, 13.0])
    assert plot_path.exists()


def test_main_with_params_file(tmp_path):
    in_path = tmp_path / "run_181.root"
    out_path = tmp_path / "out.root"
    params_path = tmp_path / "tilt.json"
    make_input(in_path)
    params_path.write_text(TiltParameters(tilt_angle_deg=0.0, height_scale=0.5,
                                          reference_length_mm=42.8625).to_json())

    main([str(in_path), str(out_path), "--params", str(params_path)])

    x1, xshap = read_wire_positions(str(out_path), "SPSTree", "X1", "Xshap")
    # untilted: x2 - h * dx
    assert xshap[0] == pytest.approx(102.5)
    assert "Xavg" not in read_flat_branches(str(out_path), "SPSTree")


def test_plot_focal_plane_comparison(tmp_path):
    path = tmp_path / "compare.png"
    x = np.random.normal(0.0, 20.0, size=1000)
    plot_focal_plane_comparison(x, x + 0.5, str(path), bins=50)
    assert path.exists()
    assert path.stat().st_size > 0
