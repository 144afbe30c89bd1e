"""Build, run and post-process the microstrip stub simulation."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Dict

import matplotlib.pyplot as plt

from . import model_common as mc
from . import export
from . import fdtd
from . import post
from .fielddump import read_hdf5_dump
from .layout import Layout, microstrip_stub_layout
from .mesh import Mesh, add_lines, check_mesh, detect_edges, mesh_stats, smooth_mesh


TAG = "[stubsim]"


def build_mesh(layout: Layout, settings: mc.MeshSettings) -> Mesh:
    mesh = detect_edges(layout)
    mesh = add_lines(
        mesh,
        x=settings.boundary_x_mm,
        y=settings.boundary_y_mm,
        z=settings.boundary_z_mm,
    )
    mesh = smooth_mesh(mesh, settings.max_res_mm, settings.ratio)
    for problem in check_mesh(mesh, settings.max_res_mm, settings.ratio):
        print(f"{TAG} mesh warning: {problem}", file=sys.stderr)
    return mesh


def _passive_index(layout: Layout, excite_idx: int) -> int:
    for idx in range(len(layout.ports)):
        if idx != excite_idx:
            return idx
    raise ValueError("Layout needs a passive port to compute S21")


def simulate(
    design: mc.StubDesign,
    mesh_cfg: mc.MeshSettings,
    fdtd_cfg: mc.FDTDSettings,
    run_dir: str,
    xml_name: str = "stub.xml",
    preview: bool = False,
    post_only: bool = False,
    openems_bin: str = export.DEFAULT_OPENEMS_BIN,
) -> Dict:
    layout = microstrip_stub_layout(design)
    mesh = build_mesh(layout, mesh_cfg)
    FDTD, _, ports = fdtd.build_simulation(layout, mesh, fdtd_cfg)

    if post_only:
        if not export.results_present(run_dir, layout):
            raise FileNotFoundError(f"No simulation results in {run_dir}")
    else:
        xml_path = export.write_descriptor(FDTD, run_dir, xml_name)
        mc.save_json(
            os.path.join(run_dir, "params.json"),
            mc.design_payload(design, mesh_cfg, fdtd_cfg),
        )
        mc.save_json(
            os.path.join(run_dir, "meta.json"),
            {"mesh": mesh_stats(mesh), "descriptor": export.summarize_descriptor(xml_path)},
        )
        print(f"{TAG} wrote {xml_path}")
        if preview:
            export.preview_descriptor(xml_path)
        print(f"{TAG} running {openems_bin} in {run_dir}")
        export.run_solver(run_dir, xml_name, openems_bin=openems_bin)

    freq = fdtd.excitation_band(fdtd_cfg)
    excited = layout.excited_port()
    excite_idx = layout.port_index(excited)
    sparams = post.calc_sparams(ports, run_dir, freq, ref_impedance=excited.R, excite_port=excite_idx)
    s11 = sparams[excite_idx]
    s21 = sparams[_passive_index(layout, excite_idx)]
    post.save_sparams_csv(os.path.join(run_dir, "sparams.csv"), freq, s11, s21)

    dumps = {dump.name: read_hdf5_dump(os.path.join(run_dir, f"{dump.name}.h5")) for dump in layout.dumps()}
    return {
        "layout": layout,
        "mesh": mesh,
        "freq": freq,
        "s11": s11,
        "s21": s21,
        "dumps": dumps,
    }


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--design", default=None, help="Path to design JSON")
    parser.add_argument("--run-dir", default="temp")
    parser.add_argument("--xml", default="stub.xml", help="Descriptor file name")
    parser.add_argument("--preview", action="store_true", help="Open the descriptor in AppCSXCAD")
    parser.add_argument("--post-only", action="store_true")
    parser.add_argument("--openems-bin", default=export.DEFAULT_OPENEMS_BIN)
    parser.add_argument("--dump", default="E_field", help="Field dump to plot")
    parser.add_argument("--no-show", action="store_true")
    parser.add_argument("--save-plots", action="store_true")
    args = parser.parse_args()

    try:
        mc.require_openems()
    except mc.OpenEMSImportError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    design, mesh_cfg, fdtd_cfg = mc.load_design_file(args.design)
    res = simulate(
        design,
        mesh_cfg,
        fdtd_cfg,
        args.run_dir,
        xml_name=args.xml,
        preview=args.preview,
        post_only=args.post_only,
        openems_bin=args.openems_bin,
    )

    style = post.PlotStyle()
    fig_s = post.plot_sparams(res["freq"], res["s11"], res["s21"], style)
    fig_e = post.plot_field(res["dumps"][args.dump], res["layout"], fdtd_cfg.f0_hz, style)
    dim = post.plot_extent(res["layout"], "substrate")
    print(f"{TAG} field window +-{dim:.4g} m")

    if args.save_plots:
        post.save_figure(fig_s, os.path.join(args.run_dir, "sparams.png"))
        post.save_figure(fig_e, os.path.join(args.run_dir, f"{args.dump}.png"))
    if not args.no_show:
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
