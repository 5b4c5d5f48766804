# member end forces, released-DOF back-substitution, internal force sampling
"""
FORCE RECOVERY
==============

End forces (local axes, forces on the member):

    d_local = T d_e
    f       = K_c d_local + FEF

K_c is the condensed stiffness when the member has end releases. Released
end displacements (pin rotations, spring deformations) are recovered by
back-substitution.

INTERNAL FORCES ALONG THE MEMBER:
---------------------------------
With end forces f and uniform local load w = (wx, wy, wz):

    N(x)  = linear from -f0 to f6            (tension +)
    Vy(x) = linear from -f1 to f7
    Vz(x) = linear from -f2 to f8
    T(x)  = linear from -f3 to f9
    Mz(x) = linear from -f5 to f11  -  wy (L x - x^2) / 2
    My(x) = linear from -f4 to f10  +  wz (L x - x^2) / 2

i.e. Mz(x) = -f5 + f1 x + wy x^2 / 2, the parabola of a uniform load.
"""

from typing import Tuple

import numpy as np

from .elements import MemberElement
from .results import DisplacementRecord, InternalForces, MemberForceRecord, ReactionRecord


def member_end_forces(element: MemberElement, d_global: np.ndarray) -> Tuple[MemberForceRecord, np.ndarray]:
    """
    End forces of one member from the global displacement vector.

    Returns
    -------
    record : MemberForceRecord
    d_end : (12,) array
        Element-end displacements in local axes (released components
        back-substituted)
    """
    d_e = np.asarray(d_global, dtype=float)[element.dof_map]
    d_local = element.T @ d_e
    f = element.condensed.k @ d_local + element.fef
    d_end = element.condensed.end_displacements(d_local, element.fef_full)
    return MemberForceRecord.from_vector(element.index, f), d_end


def internal_forces(record: MemberForceRecord, w_local, L: float, n_points: int = 21) -> InternalForces:
    """
    Sample N, Vy, Vz, T, My, Mz at n_points evenly spaced stations.
    """
    f = record.as_vector()
    _, wy, wz = (float(v) for v in w_local)
    x = np.linspace(0.0, L, n_points)
    t = x / L

    def linear(a, b):
        return a + (b - a) * t

    bubble = (L * x - x * x) / 2.0
    return InternalForces(
        member=record.member,
        x=x,
        N=linear(-f[0], f[6]),
        Vy=linear(-f[1], f[7]),
        Vz=linear(-f[2], f[8]),
        T=linear(-f[3], f[9]),
        My=linear(-f[4], f[10]) + wz * bubble,
        Mz=linear(-f[5], f[11]) - wy * bubble,
    )


def displacement_records(n_nodes: int, d_global: np.ndarray, dof_per_node: int = 6):
    records = []
    for k in range(n_nodes):
        base = dof_per_node * k
        records.append(DisplacementRecord(k, *(float(v) for v in d_global[base:base + 6])))
    return records


def reaction_records(model, R: np.ndarray, support_dofs_of, dof_per_node: int = 6):
    """
    Reactions at supported (or displacement-prescribed) nodes.

    `support_dofs_of(k)` returns the local DOFs whose reaction is reported
    for node k; other components are reported as zero.
    """
    records = []
    for k in range(len(model.nodes)):
        local = support_dofs_of(k)
        if not local:
            continue
        values = [0.0] * 6
        for a in local:
            values[a] = float(R[dof_per_node * k + a])
        records.append(ReactionRecord(k, *values))
    return records
