# stressframe/units.py
"""
Engineering units -> SI.

The model editor works in cm-based section units, N/mm^2 strengths and
kN loads; the engine works in SI. These helpers are the only place the
conversion factors live.
"""

from typing import Optional

from .model import SectionProperties


CM = 1e-2
CM2 = 1e-4
CM3 = 1e-6
CM4 = 1e-8
CM6 = 1e-12
N_PER_MM2 = 1e6       # N/mm^2 -> Pa
KN = 1e3              # kN -> N
KN_PER_M = 1e3        # kN/m -> N/m
KN_PER_MM = 1e6       # kN/mm -> N/m
KN_MM_PER_RAD = 1.0   # kN*mm/rad -> N*m/rad


def cm(value: float) -> float:
    return value * CM


def cm2(value: float) -> float:
    return value * CM2


def cm3(value: float) -> float:
    return value * CM3


def cm4(value: float) -> float:
    return value * CM4


def cm6(value: float) -> float:
    return value * CM6


def n_per_mm2(value: float) -> float:
    return value * N_PER_MM2


def kn(value: float) -> float:
    return value * KN


def kn_per_m(value: float) -> float:
    return value * KN_PER_M


def kn_per_mm(value: float) -> float:
    return value * KN_PER_MM


def kn_mm_per_rad(value: float) -> float:
    return value * KN_MM_PER_RAD


def optional(convert, value: Optional[float]) -> Optional[float]:
    """Apply a converter, passing None through (rigid spring components)."""
    return None if value is None else convert(value)


def section_from_cm(
    area: float,
    i_strong: float,
    i_weak: float,
    j: float,
    z_strong: float,
    z_weak: float,
    iw: Optional[float] = None,
    r_strong: Optional[float] = None,
    r_weak: Optional[float] = None,
) -> SectionProperties:
    """
    Build SectionProperties from table values.

    Parameters
    ----------
    area : cm^2
    i_strong, i_weak, j : cm^4
    z_strong, z_weak : cm^3
    iw : cm^6, optional
    r_strong, r_weak : cm, optional (derived when omitted)
    """
    return SectionProperties(
        area=cm2(area),
        i_strong=cm4(i_strong),
        i_weak=cm4(i_weak),
        j=cm4(j),
        z_strong=cm3(z_strong),
        z_weak=cm3(z_weak),
        iw=optional(cm6, iw),
        r_strong=optional(cm, r_strong),
        r_weak=optional(cm, r_weak),
    )
