import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np


def plot_focal_plane_comparison(x_uncorrected, x_corrected, output_path, bins=600, value_range=None,
                                labels=("Xavg", "Xshap")):
    """
    Overlay histograms of the uncorrected and tilt-corrected focal-plane
    positions and save the figure. Non-finite entries are dropped.
    """
    x_uncorrected = np.asarray(x_uncorrected, dtype=float)
    x_corrected = np.asarray(x_corrected, dtype=float)
    x_uncorrected = x_uncorrected[np.isfinite(x_uncorrected)]
    x_corrected = x_corrected[np.isfinite(x_corrected)]

    if value_range is None:
        both = np.concatenate([x_uncorrected, x_corrected])
        value_range = (both.min(), both.max()) if both.size else (-300.0, 300.0)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.hist(x_uncorrected, bins=bins, range=value_range, histtype="step", label=labels[0])
    ax.hist(x_corrected, bins=bins, range=value_range, histtype="step", label=labels[1])
    ax.set_xlabel("Focal-plane position (mm)")
    ax.set_ylabel("Counts")
    ax.set_title("Focal-plane position before/after tilt correction")
    ax.legend()
    ax.grid(True)

    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
