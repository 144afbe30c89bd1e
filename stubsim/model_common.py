"""Common configuration and IO helpers for the stub simulation."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


UNIT = 1e-3  # mm

DEFAULT_DESIGN_PATH = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "designs", "stub_default.json")
)


@dataclass
class StubDesign:
    eps_r: float = 4.8
    substrate_thickness_mm: float = 1.0
    board_width_mm: float = 20.0
    board_length_mm: float = 40.0
    line_width_mm: float = 1.8
    stub_end_mm: float = 6.7
    port_R: float = 50.0
    dump_z_mm: float = -0.5


@dataclass
class MeshSettings:
    max_res_mm: float = 0.5
    ratio: float = 1.25
    boundary_x_mm: Tuple[float, float] = (-25.0, 25.0)
    boundary_y_mm: Tuple[float, float] = (-25.0, 25.0)
    boundary_z_mm: Tuple[float, float] = (-15.0, 15.0)


@dataclass
class FDTDSettings:
    f0_hz: float = 5.8e9
    fc_hz: float = 3.0e9
    end_criteria: float = 1e-4
    nr_ts: int = 1000000000
    boundary: List[str] = field(default_factory=lambda: ["MUR"] * 6)
    freq_points: int = 201


class OpenEMSImportError(RuntimeError):
    pass


def require_openems():
    try:
        import openEMS  # noqa: F401
        import CSXCAD  # noqa: F401
    except Exception as exc:
        msg = (
            "openEMS Python modules not available.\n"
            "Install openEMS/CSXCAD with their Python bindings and rerun\n"
            "using that Python interpreter."
        )
        raise OpenEMSImportError(msg) from exc


def load_json(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def save_json(path: str, payload: Dict) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)


def _merge(cls, overrides: Dict | None):
    merged = cls()
    if overrides:
        for key, val in overrides.items():
            if hasattr(merged, key):
                if isinstance(getattr(merged, key), tuple):
                    val = tuple(val)
                setattr(merged, key, val)
    return merged


def load_design(
    payload: Dict | None = None,
) -> Tuple[StubDesign, MeshSettings, FDTDSettings]:
    """Resolve a design payload into config dataclasses.

    The payload holds optional ``design``, ``mesh`` and ``fdtd`` sections; keys
    missing from a section keep their defaults, unknown keys are ignored.
    """
    payload = payload or {}
    design = _merge(StubDesign, payload.get("design"))
    mesh = _merge(MeshSettings, payload.get("mesh"))
    fdtd = _merge(FDTDSettings, payload.get("fdtd"))
    return design, mesh, fdtd


def load_design_file(path: str | None) -> Tuple[StubDesign, MeshSettings, FDTDSettings]:
    if not path:
        path = DEFAULT_DESIGN_PATH
    return load_design(load_json(path))


def design_payload(design: StubDesign, mesh: MeshSettings, fdtd: FDTDSettings) -> Dict:
    mesh_dict = dict(mesh.__dict__)
    for key, val in mesh_dict.items():
        if isinstance(val, tuple):
            mesh_dict[key] = list(val)
    return {
        "design": dict(design.__dict__),
        "mesh": mesh_dict,
        "fdtd": dict(fdtd.__dict__),
    }
