# stressframe/checks/ltb.py
"""
Lateral-torsional buckling of steel members about the strong axis.

    Lb  = lb_factor * L
    Mcr = Cb (π² E Iy / Lb²) sqrt(Iw/Iy + Lb² G J / (π² E Iy))
    fb_ltb = min(F, Mcr / Z_strong) / nu

Iy is the weak-axis inertia. The warping constant comes from the member's
section, or from the section table by `section_name`; when neither has it
the row is marked 'data missing' and the batch continues.
"""

import logging
import math

import numpy as np

from ..config import AnalysisSettings
from ..elements import MemberElement
from ..errors import MissingSectionDataError
from ..materials import duration_factor
from ..results import InternalForces, LTBRecord
from ..sections import lookup_section

logger = logging.getLogger(__name__)


def elastic_ltb_moment(E: float, G: float, Iy: float, J: float, Iw: float,
                       Lb: float, Cb: float = 1.0) -> float:
    """Elastic critical LTB moment Mcr (N*m)."""
    pe = math.pi ** 2 * E * Iy / Lb ** 2
    return Cb * pe * math.sqrt(Iw / Iy + Lb ** 2 * G * J / (math.pi ** 2 * E * Iy))


def warping_constant(element: MemberElement) -> float:
    m = element.member
    if m.section.iw is not None:
        return m.section.iw
    if not m.section_name:
        raise MissingSectionDataError("no warping constant and no section name", element.name)
    iw = lookup_section(m.section_name).iw
    if iw is None:
        raise MissingSectionDataError(f"section {m.section_name!r} has no warping constant", element.name)
    return iw


def check_ltb(element: MemberElement, forces: InternalForces, planar: bool,
              settings: AnalysisSettings) -> LTBRecord:
    m = element.member
    if not m.strength.supports_ltb:
        return LTBRecord(element.index, "not applicable", message=f"{m.strength.label} member")
    if planar and m.axis == "weak":
        return LTBRecord(element.index, "not applicable", message="bending about the weak axis")

    try:
        Iw = warping_constant(element)
    except MissingSectionDataError as exc:
        logger.warning("LTB skipped for %s: %s", element.name, exc.message)
        return LTBRecord(element.index, "data missing", message=exc.message)

    sec = m.section
    Lb = m.lb_factor * element.length
    G = settings.shear_modulus(m.E)
    Mcr = elastic_ltb_moment(m.E, G, sec.i_weak, sec.j, Iw, Lb, m.cb)
    fb_ltb = min(m.strength.F, Mcr / sec.z_strong) / duration_factor(settings.duration)

    # local axis carrying the strong-axis inertia
    strong_axis = element.primary if m.axis == "strong" else 3 - element.primary
    M = forces.My if strong_axis == 1 else forces.Mz
    sigma = float(np.max(np.abs(M))) / sec.z_strong
    ratio = sigma / fb_ltb

    return LTBRecord(
        member=element.index,
        status="NG" if ratio > 1.0 else "OK",
        unbraced_length=Lb,
        mcr=Mcr,
        fb_ltb=fb_ltb,
        bending_stress=sigma,
        ratio=ratio,
    )
