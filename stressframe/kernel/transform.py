# stressframe/kernel/transform.py
"""Local <-> global transforms for 12-DOF frame members."""

import numpy as np


def frame_transformation(rotation: np.ndarray) -> np.ndarray:
    """
    12x12 block-diagonal transform (4 copies of the 3x3 rotation).

    d_local = T @ d_global
    """
    T = np.zeros((12, 12), dtype=float)
    for b in range(4):
        T[3 * b:3 * b + 3, 3 * b:3 * b + 3] = rotation
    return T


def transform_stiffness(k_local: np.ndarray, T: np.ndarray) -> np.ndarray:
    """K_global = T^T K_local T"""
    return T.T @ k_local @ T


def to_global(f_local: np.ndarray, T: np.ndarray) -> np.ndarray:
    return T.T @ f_local


def to_local(d_global: np.ndarray, T: np.ndarray) -> np.ndarray:
    return T @ d_global
