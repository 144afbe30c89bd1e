"""openEMS solver configuration and CSXCAD structure assembly."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

from . import model_common as mc
from .layout import Layout
from .mesh import Mesh


def excitation_band(settings: mc.FDTDSettings) -> np.ndarray:
    return np.linspace(
        settings.f0_hz - settings.fc_hz,
        settings.f0_hz + settings.fc_hz,
        settings.freq_points,
    )


def configure_fdtd(settings: mc.FDTDSettings):
    if len(settings.boundary) != 6:
        raise ValueError(f"Expected 6 boundary conditions, got {len(settings.boundary)}")
    mc.require_openems()
    from openEMS import openEMS

    FDTD = openEMS(EndCriteria=settings.end_criteria, NrTS=settings.nr_ts)
    FDTD.SetGaussExcite(settings.f0_hz, settings.fc_hz)
    FDTD.SetBoundaryCond(list(settings.boundary))
    return FDTD


def apply_layout(CSX, layout: Layout) -> List[object]:
    from openEMS import ports

    for prop in layout.properties():
        if prop.kind == "material":
            csx_prop = CSX.AddMaterial(prop.name, epsilon=prop.epsilon)
        elif prop.kind == "metal":
            csx_prop = CSX.AddMetal(prop.name)
        elif prop.kind == "dump":
            csx_prop = CSX.AddDump(prop.name, dump_type=prop.dump_type, file_type=prop.file_type)
        else:
            raise ValueError(f"Unknown property kind: {prop.kind}")
        for box in prop.boxes:
            csx_prop.AddBox(list(box.start), list(box.stop), priority=box.priority)

    ports_out: List[object] = []
    for port_def in layout.ports:
        port = ports.LumpedPort(
            CSX,
            port_nr=port_def.number,
            R=port_def.R,
            start=list(port_def.start),
            stop=list(port_def.stop),
            exc_dir=port_def.exc_dir,
            excite=1 if port_def.excite else 0,
        )
        ports_out.append(port)
    return ports_out


def build_simulation(
    layout: Layout,
    mesh: Mesh,
    settings: mc.FDTDSettings,
) -> Tuple[object, object, List[object]]:
    layout.excited_port()
    mc.require_openems()
    from CSXCAD import ContinuousStructure

    FDTD = configure_fdtd(settings)

    CSX = ContinuousStructure()
    grid = CSX.GetGrid()
    grid.SetDeltaUnit(mc.UNIT)
    grid.SetLines("x", np.array(mesh.x))
    grid.SetLines("y", np.array(mesh.y))
    grid.SetLines("z", np.array(mesh.z))

    ports_out = apply_layout(CSX, layout)
    FDTD.SetCSX(CSX)
    return FDTD, CSX, ports_out
