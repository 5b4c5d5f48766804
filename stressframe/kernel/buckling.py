# stressframe/kernel/buckling.py
"""Euler column buckling: effective length factor, critical load and stress."""

from typing import Optional

import numpy as np


# effective-length factor by (end i, end j) connection kind
K_FACTORS = {
    ("rigid", "rigid"): 0.5,
    ("rigid", "pinned"): 0.7,
    ("pinned", "rigid"): 0.7,
    ("pinned", "pinned"): 1.0,
}


def effective_length_factor(kind_i: str, kind_j: str, override: Optional[float] = None) -> float:
    """
    Effective length factor K.

    Args:
        kind_i, kind_j: 'rigid' or 'pinned' (spring ends count as pinned)
        override: explicit K, used as-is when given

    Returns:
        K (0.5 fixed-fixed, 0.7 fixed-pinned, 1.0 pinned-pinned)
    """
    if override is not None:
        return float(override)
    return K_FACTORS[(kind_i, kind_j)]


def euler_buckling_load(E: float, I: float, L: float, k: float = 1.0) -> float:
    """
    Euler critical buckling load.

    P_cr = π²EI / (kL)²
    """
    Le = k * L
    return (np.pi ** 2 * E * I) / (Le ** 2)


def euler_buckling_stress(E: float, slenderness: float) -> float:
    """σ_cr = π²E / λ²"""
    if slenderness <= 0:
        return float('inf')
    return (np.pi ** 2 * E) / (slenderness ** 2)
