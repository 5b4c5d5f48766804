# stressframe/kernel/loads.py
"""
MEMBER LOADS: Fixed-end forces and self-weight
==============================================

PURPOSE:
--------
Converts a uniform member load into fixed-end forces (FEF): the end forces
a fully restrained member would need to carry the load. FEF = -(equivalent
nodal loads); the global load vector receives -T^T FEF.

Local load w = (wx, wy, wz) N/m, DOF order [u v w rx ry rz]_i [..]_j.

EQUIVALENT NODAL LOADS:
-----------------------
    rigid-rigid      V: wL/2, wL/2          M: ±wL^2/12
    pinned-rigid     V: 3wL/8, 5wL/8        M: wL^2/8 at j only
    rigid-pinned     V: 5wL/8, 3wL/8        M: wL^2/8 at i only
    pinned-pinned    V: wL/2, wL/2          M: none

    Sign of the end moments (rigid-rigid):
        about z (from wy):  Mz_i = +wy L^2/12,  Mz_j = -wy L^2/12
        about y (from wz):  My_i = -wz L^2/12,  My_j = +wz L^2/12

    Axial: wx L/2 at each end regardless of the end connections.

SELF-WEIGHT:
------------
q = rho A g along global -Z, classified by inclination:
    horizontal   whole weight as a distributed load (rotated to local)
    vertical     qL as a nodal load at the lower node
    inclined     axial part as two half nodal loads along the member axis,
                 transverse part as a local distributed load
"""

from typing import List, Tuple

import numpy as np

from .geometry import MemberGeometry, inclination_deg


def equivalent_nodal_loads_uniform(L: float, w_local, kind_i: str = "rigid",
                                   kind_j: str = "rigid") -> np.ndarray:
    """Equivalent nodal loads (12,) of a uniform local load."""
    wx, wy, wz = (float(v) for v in w_local)
    e = np.zeros(12, dtype=float)

    e[0] = e[6] = wx * L / 2.0

    pin_i = kind_i == "pinned"
    pin_j = kind_j == "pinned"
    if pin_i and pin_j:
        e[1] = e[7] = wy * L / 2.0
        e[2] = e[8] = wz * L / 2.0
    elif pin_i:
        e[1], e[7] = 3.0 * wy * L / 8.0, 5.0 * wy * L / 8.0
        e[2], e[8] = 3.0 * wz * L / 8.0, 5.0 * wz * L / 8.0
        e[11] = -wy * L * L / 8.0
        e[10] = wz * L * L / 8.0
    elif pin_j:
        e[1], e[7] = 5.0 * wy * L / 8.0, 3.0 * wy * L / 8.0
        e[2], e[8] = 5.0 * wz * L / 8.0, 3.0 * wz * L / 8.0
        e[5] = wy * L * L / 8.0
        e[4] = -wz * L * L / 8.0
    else:
        e[1] = e[7] = wy * L / 2.0
        e[2] = e[8] = wz * L / 2.0
        e[5] = wy * L * L / 12.0
        e[11] = -wy * L * L / 12.0
        e[4] = -wz * L * L / 12.0
        e[10] = wz * L * L / 12.0
    return e


def fixed_end_forces_uniform(L: float, w_local, kind_i: str = "rigid",
                             kind_j: str = "rigid") -> np.ndarray:
    """
    Fixed-end forces (12,) of a uniform local load for a rigid/pinned pair.

    Example
    -------
    >>> f = fixed_end_forces_uniform(4.0, (0.0, -1000.0, 0.0))
    >>> f[1], f[5]      # upward end shear, end moment
    (2000.0, 1333.33...)
    """
    return -equivalent_nodal_loads_uniform(L, w_local, kind_i, kind_j)


def self_weight_loads(geom: MemberGeometry, q: float, z_i: float, z_j: float,
                      tol_deg: float = 5.0) -> Tuple[np.ndarray, List[Tuple[str, np.ndarray]]]:
    """
    Split self-weight q (N/m, acting along -Z) into member and nodal parts.

    Returns
    -------
    w_local : (3,) array
        Distributed part in local axes
    nodal : list of (end, global force (3,))
        end is 'i' or 'j'
    """
    R = geom.rotation
    L = geom.length
    g_global = np.array([0.0, 0.0, -q])
    incl = inclination_deg(R)

    if incl <= tol_deg:
        return R @ g_global, []

    if incl >= 90.0 - tol_deg:
        lower = "i" if z_i <= z_j else "j"
        return np.zeros(3), [(lower, g_global * L)]

    w_full = R @ g_global
    axial_half = 0.5 * w_full[0] * L * R[0]
    w_transverse = np.array([0.0, w_full[1], w_full[2]])
    return w_transverse, [("i", axial_half), ("j", axial_half.copy())]
