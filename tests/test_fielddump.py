"""HDF5 field dump reading and time to frequency transform."""

from __future__ import annotations

import h5py
import numpy as np
import pytest

from stubsim.fielddump import plane_component, read_hdf5_dump, td_to_fd


def _write_dump(path, samples) -> None:
    with h5py.File(path, "w") as f:
        mesh = f.create_group("Mesh")
        mesh.create_dataset("x", data=np.array([-0.01, 0.0, 0.01]))
        mesh.create_dataset("y", data=np.array([-0.02, -0.01, 0.01, 0.02]))
        mesh.create_dataset("z", data=np.array([-0.0005]))
        td = f.create_group("FieldData").create_group("TD")
        for name, time, value in samples:
            dset = td.create_dataset(name, data=value)
            dset.attrs["time"] = np.array([time])


def test_read_hdf5_dump(tmp_path) -> None:
    shape = (3, 1, 4, 3)
    early = np.full(shape, 1.0)
    late = np.full(shape, 2.0)
    late[2, 0, 3, 1] = 7.0
    path = tmp_path / "E_field.h5"
    # stored out of time order on purpose
    _write_dump(str(path), [("00000020", 2e-12, late), ("00000010", 1e-12, early)])

    dump = read_hdf5_dump(str(path))
    if [len(v) for v in dump.lines] != [3, 4, 1]:
        raise AssertionError(f"Mesh lines wrong: {dump.lines}")
    if dump.values.shape != (2,) + shape:
        raise AssertionError(f"Values shape wrong: {dump.values.shape}")
    if not np.allclose(dump.times, [1e-12, 2e-12]):
        raise AssertionError(f"Times not sorted: {dump.times}")
    if dump.values[1, 2, 0, 3, 1] != 7.0 or dump.values[0, 2, 0, 3, 1] != 1.0:
        raise AssertionError("Samples not ordered by time")


def test_read_rejects_non_hdf5(tmp_path) -> None:
    path = tmp_path / "bogus.h5"
    path.write_text("not hdf5", encoding="utf-8")
    with pytest.raises(ValueError):
        read_hdf5_dump(str(path))


def test_td_to_fd_constant() -> None:
    times = np.arange(10) * 0.5
    values = np.ones((10, 2))
    fd = td_to_fd(values, times, 0.0)
    if fd.shape != (1, 2):
        raise AssertionError(f"Shape wrong: {fd.shape}")
    if not np.allclose(fd, 2 * 0.5 * 10):
        raise AssertionError(f"DC sum wrong: {fd}")


def test_td_to_fd_picks_carrier() -> None:
    dt = 0.01
    times = np.arange(1000) * dt
    values = np.cos(2 * np.pi * 1.0 * times)
    fd = td_to_fd(values, times, [1.0, 2.0])
    if abs(fd[0] - 10.0) > 1e-9:
        raise AssertionError(f"Carrier amplitude wrong: {fd[0]}")
    if abs(fd[1]) > 1e-9:
        raise AssertionError(f"Off-carrier leakage: {fd[1]}")


def test_td_to_fd_needs_two_samples() -> None:
    with pytest.raises(ValueError):
        td_to_fd(np.ones((1, 3)), [0.0], 1.0)


def test_plane_component() -> None:
    field = np.zeros((3, 2, 4, 3), dtype=complex)
    field[2, 1, 3, 0] = 1 + 2j
    plane = plane_component(field, "z", z_index=1)
    if plane.shape != (4, 3) or plane[3, 0] != 1 + 2j:
        raise AssertionError(f"Plane extraction wrong: {plane}")
