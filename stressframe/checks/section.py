# stressframe/checks/section.py
"""
Allowable-stress section check.

At every sampled station:

    axial    = σa/ft (tension) or σa/fc (compression),   σa = |N|/A
    bending  = σb/fb per axis,                            σb = |M|/Z
    combined = axial + bending   (per axis)
    shear    = (|V|/A)/fs        (resultant of Vy, Vz in spatial models)

Planar models check only the in-plane (primary) axis. The member ratio is
the largest value over stations and terms; NG when it exceeds 1.0.
"""

import numpy as np

from ..config import AnalysisSettings
from ..elements import MemberElement
from ..results import InternalForces, SectionCheckRecord
from .buckling import member_slenderness_ratio


def _axis_arrays(forces: InternalForces, axis: int):
    """(moment, shear) arrays of bending about local axis 1 (y) or 2 (z)."""
    if axis == 1:
        return forces.My, forces.Vz
    return forces.Mz, forces.Vy


def check_section(element: MemberElement, forces: InternalForces, planar: bool,
                  settings: AnalysisSettings) -> SectionCheckRecord:
    m = element.member
    A = m.section.area
    slenderness = member_slenderness_ratio(element)
    allow = m.strength.allowable(settings.duration, slenderness, m.E)

    N = forces.N
    sigma_a = np.abs(N) / A
    axial = np.where(N > 0, sigma_a / allow.ft, sigma_a / allow.fc)

    M_p, V_p = _axis_arrays(forces, element.primary)
    bend_p = np.abs(M_p) / m.z_active / allow.fb
    comb_p = axial + bend_p

    if planar:
        bend_s = np.zeros_like(bend_p)
        comb_s = np.zeros_like(bend_p)
        shear = np.abs(V_p) / A / allow.fs
    else:
        M_s, _ = _axis_arrays(forces, 3 - element.primary)
        bend_s = np.abs(M_s) / m.z_other / allow.fb
        comb_s = axial + bend_s
        shear = np.hypot(forces.Vy, forces.Vz) / A / allow.fs

    per_station = np.max(np.vstack([comb_p, comb_s, shear]), axis=0)
    k = int(np.argmax(per_station))
    ratio = float(per_station[k])

    return SectionCheckRecord(
        member=element.index,
        status="NG" if ratio > 1.0 else "OK",
        ratio=ratio,
        axial_ratio=float(axial.max()),
        bending_ratio_primary=float(bend_p.max()),
        bending_ratio_secondary=float(bend_s.max()),
        combined_ratio_primary=float(comb_p.max()),
        combined_ratio_secondary=float(comb_s.max()),
        shear_ratio=float(shear.max()),
        station=float(forces.x[k] / element.length),
        slenderness=slenderness,
        ft=allow.ft,
        fc=allow.fc,
        fb=allow.fb,
        fs=allow.fs,
    )
