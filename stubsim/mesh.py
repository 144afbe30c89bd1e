"""Rectilinear mesh generation from layout edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import numpy as np

from .layout import AXES, Layout


@dataclass
class Mesh:
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    z: List[float] = field(default_factory=list)

    def axis(self, name: str) -> List[float]:
        return getattr(self, name)


def _unique_sorted(lines: Iterable[float]) -> List[float]:
    return sorted(set(float(v) for v in lines))


def detect_edges(layout: Layout) -> Mesh:
    """Collect every box and port coordinate so that all interfaces sit on a mesh plane."""
    coords: Dict[str, List[float]] = {name: [] for name in AXES}
    for prop in layout.properties():
        for box in prop.boxes:
            for idx, name in enumerate(AXES):
                coords[name].extend([box.start[idx], box.stop[idx]])
    for port in layout.ports:
        for idx, name in enumerate(AXES):
            coords[name].extend([port.start[idx], port.stop[idx]])
    return Mesh(**{name: _unique_sorted(vals) for name, vals in coords.items()})


def add_lines(
    mesh: Mesh,
    x: Iterable[float] = (),
    y: Iterable[float] = (),
    z: Iterable[float] = (),
) -> Mesh:
    return Mesh(
        x=_unique_sorted(list(mesh.x) + list(x)),
        y=_unique_sorted(list(mesh.y) + list(y)),
        z=_unique_sorted(list(mesh.z) + list(z)),
    )


def smooth_mesh(mesh: Mesh, max_res: float, ratio: float) -> Mesh:
    from CSXCAD.SmoothMeshLines import SmoothMeshLines

    out = {}
    for name in AXES:
        lines = _unique_sorted(mesh.axis(name))
        smoothed = SmoothMeshLines(lines, max_res, ratio)
        out[name] = _unique_sorted(np.asarray(smoothed).tolist())
    return Mesh(**out)


def mesh_stats(mesh: Mesh) -> Dict[str, Dict[str, float]]:
    stats = {}
    for name in AXES:
        lines = np.asarray(mesh.axis(name), dtype=float)
        entry = {"lines": int(lines.size)}
        if lines.size > 1:
            dl = np.diff(lines)
            entry["min_cell_mm"] = float(np.min(dl))
            entry["max_cell_mm"] = float(np.max(dl))
            if dl.size > 1:
                with np.errstate(divide="ignore", invalid="ignore"):
                    r = dl[1:] / dl[:-1]
                    entry["max_ratio"] = float(np.max(np.maximum(r, 1.0 / r)))
        stats[name] = entry
    return stats


def check_mesh(mesh: Mesh, max_res: float, ratio: float, tol: float = 1e-9) -> List[str]:
    """Return human readable violations of ordering, cell size and growth ratio."""
    problems: List[str] = []
    for name in AXES:
        lines = np.asarray(mesh.axis(name), dtype=float)
        if lines.size < 2:
            problems.append(f"{name}: fewer than two lines")
            continue
        dl = np.diff(lines)
        if np.any(dl <= 0):
            problems.append(f"{name}: lines not strictly increasing")
            continue
        if np.max(dl) > max_res * (1.0 + tol):
            problems.append(f"{name}: max cell {np.max(dl):.4g} > {max_res:.4g}")
        if dl.size > 1:
            r = dl[1:] / dl[:-1]
            worst = float(np.max(np.maximum(r, 1.0 / r)))
            if worst > ratio * (1.0 + tol):
                problems.append(f"{name}: growth ratio {worst:.4g} > {ratio:.4g}")
    return problems
