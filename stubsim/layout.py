"""Named geometry document: materials, metals, field dumps and lumped ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from . import model_common as mc


Point3 = Tuple[float, float, float]

AXES = ("x", "y", "z")


@dataclass
class Box:
    start: Point3
    stop: Point3
    priority: int = 0


@dataclass
class Property:
    """Named CSX property owning an ordered list of boxes.

    ``kind`` is ``"material"``, ``"metal"`` or ``"dump"``.
    """

    name: str
    kind: str
    epsilon: float = 1.0
    dump_type: int = 0
    file_type: int = 1
    boxes: List[Box] = field(default_factory=list)

    def add_box(self, start: Sequence[float], stop: Sequence[float], priority: int = 0) -> Box:
        box = Box(start=_point(start), stop=_point(stop), priority=int(priority))
        self.boxes.append(box)
        return box


@dataclass
class PortDef:
    number: int
    R: float
    start: Point3
    stop: Point3
    exc_dir: str
    excite: bool


def _point(values: Sequence[float]) -> Point3:
    if len(values) != 3:
        raise ValueError(f"Expected 3 coordinates, got {list(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


def axis_name(direction) -> str:
    """Map a unit axis vector (or axis name/index) to ``"x"``, ``"y"`` or ``"z"``."""
    if isinstance(direction, str):
        name = direction.lower()
        if name in AXES:
            return name
        raise ValueError(f"Unknown axis: {direction}")
    if isinstance(direction, int):
        if 0 <= direction < 3:
            return AXES[direction]
        raise ValueError(f"Unknown axis index: {direction}")
    vec = [abs(float(v)) for v in direction]
    if len(vec) == 3 and sorted(vec) == [0.0, 0.0, 1.0]:
        return AXES[vec.index(1.0)]
    raise ValueError(f"Direction must be a unit axis vector, got {list(direction)}")


class Layout:
    """Geometry document with creation-ordered, name-addressed properties."""

    def __init__(self) -> None:
        self._props: Dict[str, Property] = {}
        self.ports: List[PortDef] = []

    def __getitem__(self, name: str) -> Property:
        return self._props[name]

    def __contains__(self, name: str) -> bool:
        return name in self._props

    def _add(self, prop: Property) -> Property:
        if prop.name in self._props:
            raise ValueError(f"Property '{prop.name}' already defined")
        self._props[prop.name] = prop
        return prop

    def add_material(self, name: str, epsilon: float) -> Property:
        return self._add(Property(name=name, kind="material", epsilon=float(epsilon)))

    def add_metal(self, name: str) -> Property:
        return self._add(Property(name=name, kind="metal"))

    def add_dump(self, name: str, dump_type: int = 0, file_type: int = 1) -> Property:
        return self._add(Property(name=name, kind="dump", dump_type=dump_type, file_type=file_type))

    def properties(self) -> List[Property]:
        return list(self._props.values())

    def materials(self) -> List[Property]:
        return [p for p in self._props.values() if p.kind == "material"]

    def metals(self) -> List[Property]:
        return [p for p in self._props.values() if p.kind == "metal"]

    def dumps(self) -> List[Property]:
        return [p for p in self._props.values() if p.kind == "dump"]

    def add_lumped_port(
        self,
        number: int,
        R: float,
        start: Sequence[float],
        stop: Sequence[float],
        direction,
        excite: bool = False,
    ) -> PortDef:
        if any(p.number == number for p in self.ports):
            raise ValueError(f"Port number {number} already defined")
        if excite and any(p.excite for p in self.ports):
            raise ValueError("Only one port can be excited")
        port = PortDef(
            number=int(number),
            R=float(R),
            start=_point(start),
            stop=_point(stop),
            exc_dir=axis_name(direction),
            excite=bool(excite),
        )
        self.ports.append(port)
        return port

    def excited_port(self) -> PortDef:
        for port in self.ports:
            if port.excite:
                return port
        raise ValueError("No excited port defined")

    def port_index(self, port: PortDef) -> int:
        for idx, candidate in enumerate(self.ports):
            if candidate is port:
                return idx
        raise ValueError(f"Port {port.number} is not part of this layout")


def microstrip_stub_layout(design: mc.StubDesign) -> Layout:
    """Microstrip through-line with an open quarter-wave stub, fed by two lumped ports."""
    h = design.substrate_thickness_mm
    hw = design.board_width_mm / 2.0
    hl = design.board_length_mm / 2.0
    w = design.line_width_mm / 2.0

    layout = Layout()
    line = layout.add_metal("line")
    ground = layout.add_metal("ground")
    substrate = layout.add_material("substrate", epsilon=design.eps_r)

    substrate.add_box([-hw, -hl, -h], [hw, hl, 0.0])
    # zero thickness sheets
    ground.add_box([-hw, -hl, -h], [hw, hl, -h])
    line.add_box([-w, -hl, 0.0], [w, hl, 0.0])
    line.add_box([w, -w, 0.0], [design.stub_end_mm, w, 0.0])

    efield = layout.add_dump("E_field", dump_type=0, file_type=1)
    efield.add_box([-hw, -hl, design.dump_z_mm], [hw, hl, design.dump_z_mm], priority=10)

    layout.add_lumped_port(1, design.port_R, [-w, -hl, -h], [w, -hl, 0.0], (0, 0, 1), excite=True)
    layout.add_lumped_port(2, design.port_R, [-w, hl, -h], [w, hl, 0.0], (0, 0, 1), excite=False)
    return layout
