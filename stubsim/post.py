"""Post-processing helpers for openEMS results."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass
from typing import Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle

from . import model_common as mc
from .fielddump import FieldDump, plane_component, td_to_fd
from .layout import Layout


class SParamError(ValueError):
    pass


@dataclass
class PlotStyle:
    title_fontsize: float = 24.0
    label_fontsize: float = 16.0
    linewidth: float = 1.0
    figsize: Tuple[float, float] = (8.0, 6.0)
    cmap: str = "jet"


def _get_wave_attr(port, field: str, name: str):
    if hasattr(port, field):
        obj = getattr(port, field)
        if hasattr(obj, name):
            return getattr(obj, name)
    legacy = f"{field}_{name}"
    if hasattr(port, legacy):
        return getattr(port, legacy)
    raise AttributeError(f"Port missing {field}.{name} or {legacy}")


def _port_uf(port, name: str):
    return _get_wave_attr(port, "uf", name)


def sparams_from_ports(ports, excite_port: int = 0):
    base = np.asarray(_port_uf(ports[excite_port], "inc"))
    if np.any(base == 0):
        raise SParamError("Incident voltage vanishes inside the frequency sweep")
    return [np.asarray(_port_uf(port, "ref")) / base for port in ports]


def calc_sparams(ports, sim_path: str, freq: np.ndarray, ref_impedance: float, excite_port: int = 0):
    for port in ports:
        port.CalcPort(sim_path, freq, ref_impedance=ref_impedance)
    return sparams_from_ports(ports, excite_port=excite_port)


def s_db(s: np.ndarray) -> np.ndarray:
    return 20.0 * np.log10(np.abs(s))


def save_sparams_csv(path: str, freq: np.ndarray, s11: np.ndarray, s21: np.ndarray) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(["freq_hz", "s11_db", "s21_db", "s11_real", "s11_imag", "s21_real", "s21_imag"])
        for f, a, b in zip(freq, s11, s21):
            writer.writerow(
                [
                    float(f),
                    float(s_db(a)),
                    float(s_db(b)),
                    float(np.real(a)),
                    float(np.imag(a)),
                    float(np.real(b)),
                    float(np.imag(b)),
                ]
            )


def plot_sparams(freq: np.ndarray, s11: np.ndarray, s21: np.ndarray, style: PlotStyle):
    fig, ax = plt.subplots(figsize=style.figsize)
    ax.plot(freq / 1e6, s_db(s11), "r-", lw=style.linewidth, label="|S11|")
    ax.plot(freq / 1e6, s_db(s21), "b-", lw=style.linewidth, label="|S21|")
    ax.grid(True)
    ax.legend(fontsize=style.label_fontsize)
    ax.set_title("Reflection coefficients |S11| and |S21|", fontsize=style.title_fontsize)
    ax.set_xlabel("frequency f / MHz", fontsize=style.label_fontsize)
    ax.set_ylabel("Magnitude, dB", fontsize=style.label_fontsize)
    ax.tick_params(labelsize=style.label_fontsize)
    ax.set_ylim(-50, 5)
    fig.tight_layout()
    return fig


def plot_extent(layout: Layout, name: str, margin: float = 1.25) -> float:
    """Half-size (m) of a square window around the xy footprint of a named property."""
    prop = layout[name]
    if not prop.boxes:
        raise ValueError(f"Property '{name}' has no boxes")
    corners = []
    for box in prop.boxes:
        corners.extend([box.start[0], box.start[1], box.stop[0], box.stop[1]])
    return max(abs(c) for c in corners) * mc.UNIT * margin


def plot_field(
    dump: FieldDump,
    layout: Layout,
    f0_hz: float,
    style: PlotStyle,
    component: str = "z",
    extent_property: str = "substrate",
    z_index: int = 0,
):
    field_fd = td_to_fd(dump.values, dump.times, f0_hz)[0]
    amp = plane_component(field_fd, component, z_index)
    cc = np.sin(np.angle(amp)) * np.abs(amp)
    xx, yy = np.meshgrid(dump.lines[0], dump.lines[1])

    fig, ax = plt.subplots(figsize=style.figsize)
    ax.pcolormesh(xx, yy, cc, shading="gouraud", cmap=style.cmap)

    for metal in layout.metals():
        for box in metal.boxes:
            x1, y1 = box.start[0] * mc.UNIT, box.start[1] * mc.UNIT
            x2, y2 = box.stop[0] * mc.UNIT, box.stop[1] * mc.UNIT
            ax.add_patch(
                Rectangle(
                    (x1, y1),
                    x2 - x1,
                    y2 - y1,
                    edgecolor="black",
                    facecolor="none",
                    lw=style.linewidth,
                )
            )

    dim = plot_extent(layout, extent_property)
    ax.set_xlim(-dim, dim)
    ax.set_ylim(-dim, dim)
    ax.set_aspect("equal", "box")
    ax.set_title(
        f"E{component} field distribution @ {f0_hz / 1e9:.2f} GHz",
        fontsize=style.title_fontsize,
    )
    ax.tick_params(labelsize=style.label_fontsize)
    fig.tight_layout()
    return fig


def save_figure(fig, path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    fig.savefig(path, dpi=160)
