"""Read openEMS HDF5 field dumps and transform them to the frequency domain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import h5py
import numpy as np


COMPONENTS = {"x": 0, "y": 1, "z": 2}


@dataclass
class FieldDump:
    lines: Tuple[np.ndarray, np.ndarray, np.ndarray]  # m
    times: np.ndarray
    values: np.ndarray  # (nt, 3, nz, ny, nx)


def _attr_float(attrs, key: str) -> float:
    return float(np.ravel(attrs[key])[0])


def read_hdf5_dump(path: str) -> FieldDump:
    if not h5py.is_hdf5(path):
        raise ValueError(f"Not an HDF5 file: {path}")
    with h5py.File(path, "r") as f:
        mesh = f["Mesh"]
        lines = tuple(np.asarray(mesh[name][()], dtype=float) for name in ("x", "y", "z"))
        td = f["FieldData"]["TD"]
        entries = []
        for name in td.keys():
            dset = td[name]
            entries.append((_attr_float(dset.attrs, "time"), np.asarray(dset[()], dtype=float)))
    if not entries:
        raise ValueError(f"No time-domain samples in {path}")
    entries.sort(key=lambda item: item[0])
    times = np.array([t for t, _ in entries])
    values = np.stack([v for _, v in entries])
    return FieldDump(lines=lines, times=times, values=values)


def td_to_fd(values: np.ndarray, times: np.ndarray, freq) -> np.ndarray:
    """Discrete Fourier sum ``2 dt * sum_n v_n exp(-j 2 pi f t_n)``.

    Returns an array with a leading frequency axis.
    """
    times = np.asarray(times, dtype=float)
    if times.size < 2:
        raise ValueError("Need at least two time samples")
    dt = times[1] - times[0]
    freq = np.atleast_1d(np.asarray(freq, dtype=float))
    kernel = np.exp(-2j * np.pi * np.outer(freq, times)) * 2.0 * dt
    return np.tensordot(kernel, np.asarray(values), axes=(1, 0))


def plane_component(field_fd: np.ndarray, component: str = "z", z_index: int = 0) -> np.ndarray:
    """Complex amplitude of one component on an xy plane, shaped (ny, nx)."""
    return field_fd[COMPONENTS[component], z_index, :, :]
