# geom/tilt_params.py

import json
import math
from dataclasses import dataclass, asdict
from pathlib import Path

import pandas as pd

from focal_plane.kinematics import SPS_DETECTOR_WIRE_DIST

FIELDS = ("tilt_angle_deg", "height_scale", "reference_length_mm")

# Short keys written by the event builder's calibration files
ALIASES = {
    "alpha_deg": "tilt_angle_deg",
    "h": "height_scale",
    "s": "reference_length_mm",
}


@dataclass(frozen=True)
class TiltParameters:
    """
    Shapira tilted focal-plane parameters.

    tilt_angle_deg:      tilt of the detector plane w.r.t. the nominal focal plane (degrees)
    height_scale:        dimensionless, effective height = height_scale * reference_length_mm
    reference_length_mm: reference length (mm), nominally the wire separation
    """
    tilt_angle_deg: float = 0.0001
    height_scale: float = 1.0
    reference_length_mm: float = SPS_DETECTOR_WIRE_DIST * 10.0  # cm -> mm

    def __post_init__(self):
        for name in FIELDS:
            object.__setattr__(self, name, float(getattr(self, name)))

    @property
    def effective_height_mm(self):
        return self.height_scale * self.reference_length_mm

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        values = {}
        for key, value in data.items():
            name = ALIASES.get(key, key)
            if name not in FIELDS:
                continue
            try:
                value = float(value)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Non-numeric tilt parameter '{key}': {value!r}") from exc
            if name in values and values[name] != value:
                raise ValueError(f"Conflicting values for '{name}': {values[name]!r} and {value!r}")
            values[name] = value

        missing = [name for name in FIELDS if name not in values]
        if missing:
            raise ValueError(f"Missing tilt parameter(s): {', '.join(missing)}")

        # NaN/inf would turn every corrected position into NaN
        for name in FIELDS:
            if not math.isfinite(values[name]):
                raise ValueError(f"Tilt parameter '{name}' is not finite: {values[name]!r}")

        return cls(**values)

    def to_json(self):
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text):
        return cls.from_dict(json.loads(text))


DEFAULT_TILT_PARAMETERS = TiltParameters()


def load_tilt_parameters_tsv(tsv_path, row=0):
    """
    Read TiltParameters from a tab-separated table with a header naming the
    three fields (short event-builder keys are accepted too). Lines starting
    with '#' are ignored.
    """
    df = pd.read_csv(tsv_path, sep="\t", comment="#", float_precision="round_trip")
    df.columns = [str(c).strip() for c in df.columns]
    if df.empty:
        raise ValueError(f"No tilt parameter rows in {tsv_path}")
    if not 0 <= row < len(df):
        raise ValueError(f"Row {row} out of range for {tsv_path} ({len(df)} rows)")
    return TiltParameters.from_dict(df.iloc[row].to_dict())


def load_tilt_parameters(path):
    """Load parameters from a .json file or a .tsv table."""
    if Path(path).suffix.lower() == ".json":
        with open(path, "r") as f:
            return TiltParameters.from_json(f.read())
    return load_tilt_parameters_tsv(path)
