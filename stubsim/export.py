"""Write the openEMS descriptor, preview it and run the solver binary."""

from __future__ import annotations

import os
import re
import subprocess
import xml.etree.ElementTree as ET
from typing import Dict

from .layout import Layout


DEFAULT_OPENEMS_BIN = "openEMS"

# one port_ut<N> voltage entry per lumped port, with or without a resistor
PORT_VOLTAGE_RE = re.compile(r"^port_ut\d+$")


def write_descriptor(FDTD, run_dir: str, filename: str) -> str:
    os.makedirs(run_dir, exist_ok=True)
    path = os.path.join(run_dir, filename)
    FDTD.Write2XML(path)
    return path


def preview_descriptor(path: str) -> None:
    from CSXCAD import AppCSXCAD_BIN

    subprocess.run([AppCSXCAD_BIN, path], check=True)


def run_solver(run_dir: str, filename: str, openems_bin: str = DEFAULT_OPENEMS_BIN) -> None:
    """Block until the openEMS binary finishes; failures propagate to the caller."""
    subprocess.run([openems_bin, filename], cwd=run_dir, check=True)


def summarize_descriptor(path: str) -> Dict:
    """Property names, box counts and lumped port count of a descriptor file."""
    root = ET.parse(path).getroot()
    props = root.find(".//ContinuousStructure/Properties")
    if props is None:
        raise ValueError(f"No CSX properties found in {path}")
    boxes: Dict[str, int] = {}
    kinds: Dict[str, str] = {}
    lumped_ports = 0
    for elem in props:
        name = elem.get("Name", "")
        kinds[name] = elem.tag
        boxes[name] = len(elem.findall("./Primitives/Box"))
        if PORT_VOLTAGE_RE.match(name):
            lumped_ports += 1
    return {"kinds": kinds, "boxes": boxes, "lumped_ports": lumped_ports}


def results_present(run_dir: str, layout: Layout) -> bool:
    for port in layout.ports:
        for name in (f"port_ut{port.number}", f"port_it{port.number}"):
            if not os.path.exists(os.path.join(run_dir, name)):
                return False
    for dump in layout.dumps():
        if dump.file_type == 1 and not os.path.exists(os.path.join(run_dir, f"{dump.name}.h5")):
            return False
    return True
