# File: demos/run_portal_frame.py
"""
DEMO: PORTAL FRAME (GRAVITY + LATERAL LOADS)
============================================

PURPOSE:
--------
A planar steel portal frame with a roof load and a wind load, checked by
allowable stress design:

- Two H-section columns, fixed at the base
- One H-section beam, connected through semi-rigid joints
- Roof UDL on the beam, lateral point load at the eaves
- Self-weight on

We want to know:
- How much does the frame sway sideways? (drift, usually limited to H/200)
- What are the support reactions?
- Does every member pass the section, buckling and LTB checks?

Inputs are given in engineering units (kN, N/mm², cm-based section
tables) and converted with stressframe.units.
"""

import logging

import pandas as pd

from stressframe import (
    DistributedLoad,
    EndConnection,
    FrameModel,
    Member,
    NodalLoad,
    Node,
    SteelLike,
    SupportKind,
    run_analysis,
)
from stressframe import units
from stressframe.sections import lookup_section


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("DEMO: PORTAL FRAME (GRAVITY + LATERAL LOADS)")
    print("=" * 70)
    print()

    # ========================================================================
    # STEP 1: DEFINE THE PHYSICAL PROBLEM
    # ========================================================================
    H = 4.0                                 # eaves height (m)
    L = 8.0                                 # span (m)
    E = units.n_per_mm2(205000.0)           # steel
    steel = SteelLike(units.n_per_mm2(235.0))
    w_roof = units.kn_per_m(6.0)            # roof load on the beam
    P_wind = units.kn(12.0)                 # lateral load at the left eaves

    column_name = "H-300x300x10x15"
    beam_name = "H-400x200x8x13"

    # Semi-rigid beam-to-column joints (kN*mm/rad -> N*m/rad)
    joint = EndConnection.spring(kr=units.kn_mm_per_rad(5.0e7))

    print(f"Frame: H = {H} m, L = {L} m")
    print(f"Columns: {column_name}, beam: {beam_name}")
    print(f"Roof load: {w_roof / 1e3:.1f} kN/m, wind: {P_wind / 1e3:.1f} kN")
    print()

    # ========================================================================
    # STEP 2: CREATE THE MODEL
    # ========================================================================
    nodes = [
        Node(0.0, 0.0, 0.0, SupportKind.FIXED),
        Node(0.0, 0.0, H),
        Node(L, 0.0, H),
        Node(L, 0.0, 0.0, SupportKind.FIXED),
    ]

    def steel_member(i, j, name, **kwargs):
        return Member(i, j, E=E, strength=steel, section=lookup_section(name),
                      section_name=name, density=7850.0, **kwargs)

    members = [
        steel_member(0, 1, column_name),
        steel_member(1, 2, beam_name, end_i=joint, end_j=joint),
        steel_member(3, 2, column_name),
    ]
    model = FrameModel(
        nodes=nodes,
        members=members,
        nodal_loads=[NodalLoad(1, force=(P_wind, 0.0, 0.0))],
        distributed_loads=[DistributedLoad(1, w=(0.0, 0.0, -w_roof), frame="global")],
        self_weight=True,
    )

    # ========================================================================
    # STEP 3: SOLVE AND CHECK
    # ========================================================================
    result = run_analysis(model)
    tables = result.to_dataframes()

    # ========================================================================
    # STEP 4: REPORT
    # ========================================================================
    pd.set_option("display.width", 120)
    pd.set_option("display.float_format", "{:.4g}".format)

    drift = max(abs(d.ux) for d in result.displacements)
    print(f"Planar model: {result.planar}")
    print(f"Eaves drift: {drift * 1000:.2f} mm (H/{H / drift:.0f})")
    print()
    print("Reactions (N, N*m):")
    print(tables["reactions"][["node", "Rx", "Rz", "My"]].to_string(index=False))
    print()
    print("Section checks:")
    print(tables["section_checks"][["member", "status", "ratio", "station", "slenderness"]]
          .to_string(index=False))
    print()
    print("Buckling:")
    print(tables["buckling"][["member", "status", "axial_force", "critical_load", "safety_factor"]]
          .to_string(index=False))
    print()
    print("Lateral-torsional buckling:")
    print(tables["ltb"][["member", "status", "mcr", "ratio"]].to_string(index=False))
    print()

    print("=" * 70)
    print(f"Max ratio: {result.max_ratio:.3f} -> {'all OK' if result.all_ok else 'NG members present'}")
    print("=" * 70)


if __name__ == "__main__":
    main()
