# stressframe/checks/buckling.py
"""Euler buckling check per member."""

import math

from ..elements import MemberElement
from ..kernel.buckling import (
    effective_length_factor,
    euler_buckling_load,
    euler_buckling_stress,
)
from ..results import BucklingRecord, MemberForceRecord


def member_k_factor(element: MemberElement) -> float:
    """Effective length factor from the override or the end-connection pair."""
    m = element.member
    return effective_length_factor(m.end_i.buckling_kind, m.end_j.buckling_kind, m.k_factor)


def member_slenderness_ratio(element: MemberElement) -> float:
    """λ = K L / r_min"""
    sec = element.member.section
    r_min = min(sec.r_strong, sec.r_weak)
    return member_k_factor(element) * element.length / r_min


def classify(safety_factor: float) -> str:
    if math.isinf(safety_factor):
        return "no buckling"
    if safety_factor < 1.0:
        return "danger"
    if safety_factor < 2.0:
        return "caution"
    return "safe"


def check_buckling(element: MemberElement, forces: MemberForceRecord) -> BucklingRecord:
    """
    Euler buckling of one member about its weakest axis.

    P_cr = π² E I_min / (K L)²,  SF = P_cr / |N| for net compression.
    Tension or zero axial force gives 'no buckling' with SF = inf.
    """
    m = element.member
    K = member_k_factor(element)
    I_min = min(m.section.i_strong, m.section.i_weak)
    P_cr = euler_buckling_load(m.E, I_min, element.length, K)
    slenderness = member_slenderness_ratio(element)

    N = forces.axial_force
    SF = P_cr / abs(N) if N < 0 else float('inf')

    return BucklingRecord(
        member=element.index,
        status=classify(SF),
        axial_force=N,
        critical_load=P_cr,
        safety_factor=SF,
        k_factor=K,
        effective_length=K * element.length,
        slenderness=slenderness,
        critical_stress=euler_buckling_stress(m.E, slenderness),
    )
