# stressframe/sections.py
"""
SECTION CATALOG: Cross-section property calculators
===================================================

PURPOSE:
--------
Compute SectionProperties from plate dimensions, and resolve short section
descriptors such as "H-300x150x6.5x9" to properties. The LTB check uses
this table when a member carries only a section name.

All calculator inputs are in millimetres (as printed in steel tables);
results are SI (m^2, m^4, m^6, m^3).

TORSION / WARPING:
------------------
    Open thin-walled (H, I, channel, angle):
        J  = (1/3) * sum(b t^3)            sum of plates
        Iw = B^3 t_f h0^2 / 24             h0 = H - t_f  (I-shape approximation)
    Closed thin-walled box:
        J  = 4 Am^2 / sum(s/t)             Am = enclosed mid-line area
    Pipe:        J = pi/32 (D^4 - d^4)
    Solid rect:  J = a b^3 (1/3 - 0.21 (b/a)(1 - (b/a)^4/12)),  a >= b
    Solid round: J = pi D^4 / 32
    Closed and solid sections: Iw = 0

DESCRIPTORS:
------------
    H-300x150x6.5x9      H-shape       H x B x t1(web) x t2(flange)
    I-200x100x7x10       I-shape       same as H
    C-150x75x6.5x10      channel       H x B x t1 x t2
    LC-100x50x20x2.3     lipped chan.  H x A x C x t
    L-65x65x6            angle         A x B x t  (L-65x6 for equal legs)
    BOX-200x100x6        hollow rect.  A x B x t  (A: depth)
    P-165.2x5            pipe          D x t
    RECT-200x100         solid rect.   H x B
    ROUND-50             solid round   D
"""

import math
import re
from typing import List, Tuple

import numpy as np

from .errors import MissingSectionDataError
from .model import SectionProperties


def _si(area, i_strong, i_weak, j, z_strong, z_weak, iw=0.0) -> SectionProperties:
    """mm-based values -> SI SectionProperties."""
    return SectionProperties(
        area=area * 1e-6,
        i_strong=i_strong * 1e-12,
        i_weak=i_weak * 1e-12,
        j=j * 1e-12,
        z_strong=z_strong * 1e-9,
        z_weak=z_weak * 1e-9,
        iw=iw * 1e-18,
    )


def h_section(H: float, B: float, t1: float, t2: float) -> SectionProperties:
    """Doubly symmetric H/I shape (fillets ignored)."""
    if H <= 2 * t2 or B <= t1 or min(H, B, t1, t2) <= 0:
        raise MissingSectionDataError(f"invalid H-shape dimensions {H}x{B}x{t1}x{t2}")
    hw = H - 2 * t2
    A = 2 * B * t2 + hw * t1
    Ix = (B * H ** 3 - (B - t1) * hw ** 3) / 12.0
    Iy = (2 * t2 * B ** 3 + hw * t1 ** 3) / 12.0
    J = (2 * B * t2 ** 3 + hw * t1 ** 3) / 3.0
    h0 = H - t2
    Iw = B ** 3 * t2 * h0 ** 2 / 24.0
    return _si(A, Ix, Iy, J, Ix / (H / 2), Iy / (B / 2), Iw)


def channel_section(H: float, B: float, t_web: float, t_flange: float,
                    lip: float = 0.0) -> SectionProperties:
    """
    Channel, optionally lipped (lip = overall lip height C, 0 for plain).

    The weak-axis modulus is the smaller of the web side and the toe side.
    """
    has_lips = lip > 0
    if H <= 2 * t_flange or B <= t_web or (has_lips and lip < t_flange):
        raise MissingSectionDataError(f"invalid channel dimensions {H}x{B}x{t_web}x{t_flange}")

    web_A = (H - 2 * t_flange) * t_web
    flange_A = B * t_flange
    lip_len = lip - t_flange if has_lips else 0.0
    lip_A = lip_len * t_flange
    A = web_A + 2 * flange_A + 2 * lip_A

    web_c = t_web / 2
    flange_c = B / 2
    lip_c = B - t_flange / 2
    cy = (web_A * web_c + 2 * flange_A * flange_c + 2 * lip_A * lip_c) / A

    Ix = (t_web * (H - 2 * t_flange) ** 3 / 12
          + 2 * (B * t_flange ** 3 / 12 + flange_A * (H / 2 - t_flange / 2) ** 2))
    if has_lips:
        Ix += 2 * (t_flange * lip_len ** 3 / 12 + lip_A * (H / 2 - t_flange - lip_len / 2) ** 2)

    Iy = ((H - 2 * t_flange) * t_web ** 3 / 12 + web_A * (cy - web_c) ** 2
          + 2 * (t_flange * B ** 3 / 12 + flange_A * (cy - flange_c) ** 2))
    if has_lips:
        Iy += 2 * (lip_len * t_flange ** 3 / 12 + lip_A * (cy - lip_c) ** 2)

    J = (2 * B * t_flange ** 3 + (H - 2 * t_flange) * t_web ** 3 + 2 * lip_len * t_flange ** 3) / 3.0
    h0 = H - t_flange
    Iw = B ** 3 * t_flange * h0 ** 2 / 24.0
    z_weak = min(Iy / (B - cy), Iy / cy)
    return _si(A, Ix, Iy, J, Ix / (H / 2), z_weak, Iw)


def angle_section(A_leg: float, B_leg: float, t: float) -> SectionProperties:
    """
    Equal or unequal angle, reported about its principal axes (u strong, v weak).

    A_leg is the vertical leg, B_leg the horizontal leg.
    """
    if min(A_leg, B_leg, t) <= 0 or A_leg < t or B_leg < t:
        raise MissingSectionDataError(f"invalid angle dimensions {A_leg}x{B_leg}x{t}")

    # vertical leg (full height) + horizontal leg (remaining width)
    rects = [
        (t, A_leg, t / 2, A_leg / 2),
        (B_leg - t, t, t + (B_leg - t) / 2, t / 2),
    ]
    area = sum(w * h for w, h, _, _ in rects)
    cx = sum(w * h * x for w, h, x, _ in rects) / area
    cy = sum(w * h * y for w, h, _, y in rects) / area

    Ix = Iy = Ixy = 0.0
    for w, h, x, y in rects:
        a = w * h
        Ix += w * h ** 3 / 12 + a * (y - cy) ** 2
        Iy += h * w ** 3 / 12 + a * (x - cx) ** 2
        Ixy += a * (x - cx) * (y - cy)

    # M = [[int x^2, int xy], [int xy, int y^2]]; I about unit axis n is (Ix + Iy) - n.M.n
    M = np.array([[Iy, Ixy], [Ixy, Ix]])
    vals, vecs = np.linalg.eigh(M)
    Iu = Ix + Iy - vals[0]
    Iv = Ix + Iy - vals[1]

    corners = np.array([
        (0.0, 0.0), (B_leg, 0.0), (B_leg, t), (t, t), (t, A_leg), (0.0, A_leg),
    ]) - np.array([cx, cy])
    # distance from the u axis (direction vecs[:,0]) is the projection on vecs[:,1]
    c_u = np.max(np.abs(corners @ vecs[:, 1]))
    c_v = np.max(np.abs(corners @ vecs[:, 0]))

    J = (A_leg * t ** 3 + (B_leg - t) * t ** 3) / 3.0
    return _si(area, Iu, Iv, J, Iu / c_u, Iv / c_v, 0.0)


def box_section(A_dim: float, B_dim: float, t: float) -> SectionProperties:
    """Square/rectangular hollow section; A_dim is the depth."""
    if A_dim <= 2 * t or B_dim <= 2 * t or t <= 0:
        raise MissingSectionDataError(f"invalid box dimensions {A_dim}x{B_dim}x{t}")
    area = A_dim * B_dim - (A_dim - 2 * t) * (B_dim - 2 * t)
    Ix = (B_dim * A_dim ** 3 - (B_dim - 2 * t) * (A_dim - 2 * t) ** 3) / 12.0
    Iy = (A_dim * B_dim ** 3 - (A_dim - 2 * t) * (B_dim - 2 * t) ** 3) / 12.0
    a_m, b_m = A_dim - t, B_dim - t
    Am = a_m * b_m
    J = 4 * Am ** 2 / ((2 * a_m + 2 * b_m) / t)
    Zx, Zy = Ix / (A_dim / 2), Iy / (B_dim / 2)
    if Iy > Ix:
        return _si(area, Iy, Ix, J, Zy, Zx)
    return _si(area, Ix, Iy, J, Zx, Zy)


def pipe_section(D: float, t: float) -> SectionProperties:
    if D <= 2 * t or t <= 0:
        raise MissingSectionDataError(f"invalid pipe dimensions {D}x{t}")
    d = D - 2 * t
    area = math.pi / 4 * (D ** 2 - d ** 2)
    I = math.pi / 64 * (D ** 4 - d ** 4)
    J = math.pi / 32 * (D ** 4 - d ** 4)
    Z = I / (D / 2)
    return _si(area, I, I, J, Z, Z)


def rectangle_section(H: float, B: float) -> SectionProperties:
    """Solid rectangle, H is the depth."""
    if H <= 0 or B <= 0:
        raise MissingSectionDataError(f"invalid rectangle dimensions {H}x{B}")
    area = B * H
    Ix = B * H ** 3 / 12.0
    Iy = H * B ** 3 / 12.0
    a, b = max(H, B), min(H, B)
    ratio = b / a
    J = a * b ** 3 * (1.0 / 3.0 - 0.21 * ratio * (1 - ratio ** 4 / 12.0))
    Zx, Zy = Ix / (H / 2), Iy / (B / 2)
    if Iy > Ix:
        return _si(area, Iy, Ix, J, Zy, Zx)
    return _si(area, Ix, Iy, J, Zx, Zy)


def circle_section(D: float) -> SectionProperties:
    if D <= 0:
        raise MissingSectionDataError(f"invalid round bar diameter {D}")
    R = D / 2
    I = math.pi * D ** 4 / 64.0
    J = math.pi * D ** 4 / 32.0
    return _si(math.pi * R ** 2, I, I, J, I / R, I / R)


# descriptor prefix -> (calculator, accepted dimension counts)
_SHAPES = {
    "H": (h_section, (4,)),
    "I": (h_section, (4,)),
    "C": (channel_section, (4,)),
    "[": (channel_section, (4,)),
    "LC": (lambda H, A, C, t: channel_section(H, A, t, t, lip=C), (4,)),
    "L": (lambda *d: angle_section(d[0], d[0], d[1]) if len(d) == 2 else angle_section(*d), (2, 3)),
    "BOX": (lambda *d: box_section(d[0], d[0], d[1]) if len(d) == 2 else box_section(*d), (2, 3)),
    "□": (lambda *d: box_section(d[0], d[0], d[1]) if len(d) == 2 else box_section(*d), (2, 3)),
    "P": (pipe_section, (2,)),
    "PIPE": (pipe_section, (2,)),
    "○": (pipe_section, (2,)),
    "RECT": (rectangle_section, (2,)),
    "ROUND": (circle_section, (1,)),
    "φ": (circle_section, (1,)),
}

_DESCRIPTOR = re.compile(r"^\s*([A-Za-z\[□○φ]+)\s*-?\s*(\d+(?:\.\d+)?(?:\s*[x×X*]\s*\d+(?:\.\d+)?)*)\s*$")


def parse_descriptor(name: str) -> Tuple[str, List[float]]:
    """
    Split a descriptor into (shape key, dimensions in mm).

    >>> parse_descriptor("H-300x150x6.5x9")
    ('H', [300.0, 150.0, 6.5, 9.0])
    """
    match = _DESCRIPTOR.match(name or "")
    if not match:
        raise MissingSectionDataError(f"cannot parse section descriptor {name!r}")
    shape = match.group(1)
    if shape.isascii():
        shape = shape.upper()
    if shape not in _SHAPES:
        raise MissingSectionDataError(f"unknown section shape {shape!r} in {name!r}")
    dims = [float(v) for v in re.split(r"\s*[x×X*]\s*", match.group(2))]
    return shape, dims


def lookup_section(name: str) -> SectionProperties:
    """
    Resolve a section descriptor to SI properties.

    Raises MissingSectionDataError for unknown or malformed descriptors.
    """
    shape, dims = parse_descriptor(name)
    calculator, counts = _SHAPES[shape]
    if len(dims) not in counts:
        raise MissingSectionDataError(
            f"{shape} descriptor needs {' or '.join(map(str, counts))} dimensions, got {len(dims)}")
    return calculator(*dims)
