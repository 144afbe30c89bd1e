"""Layout builder: named properties and lumped port bookkeeping."""

from __future__ import annotations

import pytest

from stubsim import model_common as mc
from stubsim.layout import Layout, axis_name, microstrip_stub_layout


def test_reference_layout_handles() -> None:
    layout = microstrip_stub_layout(mc.StubDesign())

    names = [p.name for p in layout.properties()]
    if names != ["line", "ground", "substrate", "E_field"]:
        raise AssertionError(f"Unexpected property order: {names}")
    if [p.name for p in layout.metals()] != ["line", "ground"]:
        raise AssertionError("Metals not in creation order")
    if [p.name for p in layout.materials()] != ["substrate"]:
        raise AssertionError("Substrate not registered as material")

    substrate = layout["substrate"]
    if substrate.epsilon != 4.8:
        raise AssertionError(f"Substrate eps_r wrong: {substrate.epsilon}")
    if substrate.boxes[0].start != (-10.0, -20.0, -1.0) or substrate.boxes[0].stop != (10.0, 20.0, 0.0):
        raise AssertionError(f"Substrate box wrong: {substrate.boxes[0]}")

    stub = layout["line"].boxes[1]
    if stub.start != (0.9, -0.9, 0.0) or stub.stop != (6.7, 0.9, 0.0):
        raise AssertionError(f"Stub box wrong: {stub}")

    structure_boxes = sum(len(p.boxes) for p in layout.metals() + layout.materials())
    if structure_boxes != 4:
        raise AssertionError(f"Expected 4 structure boxes, got {structure_boxes}")
    if layout["E_field"].boxes[0].priority != 10:
        raise AssertionError("Dump plane priority not kept")


def test_reference_layout_ports() -> None:
    layout = microstrip_stub_layout(mc.StubDesign())
    if len(layout.ports) != 2:
        raise AssertionError(f"Expected 2 ports, got {len(layout.ports)}")
    excited = layout.excited_port()
    if excited.number != 1 or layout.port_index(excited) != 0:
        raise AssertionError("Port 1 should be the excited port")
    passive = layout.ports[1]
    if passive.excite or passive.stop[1] != 20.0:
        raise AssertionError(f"Passive port wrong: {passive}")
    if {p.exc_dir for p in layout.ports} != {"z"}:
        raise AssertionError("Ports should excite along z")


def test_duplicate_property_rejected() -> None:
    layout = Layout()
    layout.add_metal("line")
    with pytest.raises(ValueError):
        layout.add_material("line", epsilon=2.2)


def test_single_excited_port() -> None:
    layout = Layout()
    layout.add_lumped_port(1, 50, [0, 0, 0], [0, 0, 1], (0, 0, 1), excite=True)
    with pytest.raises(ValueError):
        layout.add_lumped_port(2, 50, [1, 0, 0], [1, 0, 1], (0, 0, 1), excite=True)
    with pytest.raises(ValueError):
        layout.add_lumped_port(1, 50, [2, 0, 0], [2, 0, 1], (0, 0, 1))
    layout.add_lumped_port(2, 50, [1, 0, 0], [1, 0, 1], "z")
    if len(layout.ports) != 2:
        raise AssertionError("Passive port not added")


def test_no_excited_port() -> None:
    layout = Layout()
    layout.add_lumped_port(1, 50, [0, 0, 0], [0, 0, 1], (0, 0, 1))
    with pytest.raises(ValueError):
        layout.excited_port()


def test_axis_name() -> None:
    if axis_name((0, 0, 1)) != "z" or axis_name([1.0, 0.0, 0.0]) != "x":
        raise AssertionError("Unit vectors not mapped to axes")
    if axis_name((0, -1, 0)) != "y" or axis_name("Y") != "y" or axis_name(2) != "z":
        raise AssertionError("Axis aliases not accepted")
    for bad in [(0, 1, 1), (0, 0, 2), (0, 0), "w", 3]:
        with pytest.raises(ValueError):
            axis_name(bad)
