# stressframe/kernel/elements.py
"""
LOCAL STIFFNESS: 12x12 beam-column element
==========================================

DOF order per node: [u, v, w, rx, ry, rz]   (local axes x, y, z)

    u   axial                     EA/L
    rx  torsion                   GJ/L
    v, rz  bending about local z  (Iz, shear parameter phi_z)
    w, ry  bending about local y  (Iy, shear parameter phi_y)

TIMOSHENKO CORRECTION:
----------------------
    phi = 12 E I / (G A_s L^2),   A_s = A / kappa

    12EI/(L^3 (1+phi))     6EI/(L^2 (1+phi))
    (4+phi)EI/(L (1+phi))  (2-phi)EI/(L (1+phi))

phi = 0 recovers Euler-Bernoulli.
"""

import numpy as np


def shear_parameter(E: float, I: float, G: float, A: float, L: float, kappa: float = 1.5) -> float:
    """Timoshenko shear-deformation parameter phi = 12EI / (G A_s L^2)."""
    A_s = A / kappa
    return 12.0 * E * I / (G * A_s * L * L)


def _bending_terms(E: float, I: float, L: float, phi: float):
    EI = E * I
    den = 1.0 + phi
    a = 12.0 * EI / (L ** 3 * den)
    b = 6.0 * EI / (L ** 2 * den)
    c = (4.0 + phi) * EI / (L * den)
    d = (2.0 - phi) * EI / (L * den)
    return a, b, c, d


def frame_local_stiffness(
    E: float,
    G: float,
    A: float,
    Iy: float,
    Iz: float,
    J: float,
    L: float,
    phi_y: float = 0.0,
    phi_z: float = 0.0,
) -> np.ndarray:
    """
    Local 12x12 stiffness of a prismatic beam-column.

    Parameters
    ----------
    E, G : float
        Young's and shear modulus (Pa)
    A : float
        Area (m^2)
    Iy, Iz : float
        Second moments about local y and z (m^4)
    J : float
        Torsion constant (m^4)
    L : float
        Length (m)
    phi_y, phi_z : float
        Shear parameters of the two bending planes

    Returns
    -------
    np.ndarray
        Symmetric (12, 12) matrix, DOF order [u v w rx ry rz]_i [..]_j
    """
    k = np.zeros((12, 12), dtype=float)

    EA_L = E * A / L
    k[0, 0] = k[6, 6] = EA_L
    k[0, 6] = -EA_L

    GJ_L = G * J / L
    k[3, 3] = k[9, 9] = GJ_L
    k[3, 9] = -GJ_L

    # bending about z: v, rz
    a, b, c, d = _bending_terms(E, Iz, L, phi_z)
    k[1, 1] = k[7, 7] = a
    k[1, 7] = -a
    k[1, 5] = k[1, 11] = b
    k[5, 7] = k[7, 11] = -b
    k[5, 5] = k[11, 11] = c
    k[5, 11] = d

    # bending about y: w, ry (opposite coupling sign)
    a, b, c, d = _bending_terms(E, Iy, L, phi_y)
    k[2, 2] = k[8, 8] = a
    k[2, 8] = -a
    k[2, 4] = k[2, 10] = -b
    k[4, 8] = k[8, 10] = b
    k[4, 4] = k[10, 10] = c
    k[4, 10] = d

    # mirror upper triangle
    return np.triu(k) + np.triu(k, 1).T
