import numpy as np
import uproot


def _open_tree(input_filename, tree_name):
    f = uproot.open(input_filename)
    if tree_name not in f:
        f.close()
        raise RuntimeError(f"Could not find '{tree_name}' in {input_filename}")
    return f, f[tree_name]


def read_wire_positions(input_filename, tree_name, x1_branch, x2_branch):
    """
    Read the two wire-position branches as float64 numpy arrays.
    """
    f, tree = _open_tree(input_filename, tree_name)
    try:
        for branch in (x1_branch, x2_branch):
            if branch not in tree.keys():
                raise RuntimeError(f"Could not find branch '{branch}' in '{tree_name}' of {input_filename}")
        x1 = tree[x1_branch].array(library="np").astype(np.float64)
        x2 = tree[x2_branch].array(library="np").astype(np.float64)
    finally:
        f.close()
    return x1, x2


def read_flat_branches(input_filename, tree_name):
    """
    Read every flat numeric branch of a tree. Jagged/object branches are skipped.
    """
    f, tree = _open_tree(input_filename, tree_name)
    try:
        arrays = tree.arrays(library="np")
    finally:
        f.close()

    branches = {}
    for name, arr in arrays.items():
        if arr.dtype == object or arr.ndim != 1:
            print(f"[WARNING] Branch '{name}' is not flat, not copied.")
            continue
        branches[name] = arr
    return branches


def write_corrected(output_filename, tree_name, branches):
    """
    Write a new ROOT file holding one tree built from a dict of equal-length numpy arrays.
    """
    lengths = {name: len(arr) for name, arr in branches.items()}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"Branches have different lengths: {lengths}")

    with uproot.recreate(output_filename) as f:
        f[tree_name] = {name: np.asarray(arr) for name, arr in branches.items()}

    print(f"Wrote corrected ROOT file to '{output_filename}'")
