# stressframe/materials.py
"""
STRENGTH SPECIFICATIONS: Allowable stresses per material family
================================================================

PURPOSE:
--------
A member's strength specification is a tagged variant:

    SteelLike(F)       structural steel, F-value (design strength)
    StainlessLike(F)   stainless steel, F-value
    AluminumLike(F)    aluminum alloy, F-value
    WoodLike(...)      four base strengths (Fc, Ft, Fb, Fs), preset or custom

Every variant answers the same question through one method:

    spec.allowable(duration, slenderness, E) -> AllowableStresses

so the section checker never branches on a runtime type tag.

ENGINEERING CONTEXT:
--------------------
Allowable stress design scales the material strength by a load-duration
term. For metals:

    ft = fb = F / nu        nu = 1.5 (long-term), 1.0 (short-term)
    fs = ft / sqrt(3)
    fc = column curve, reduced by slenderness lambda with the break point

        Lambda = pi * sqrt(E / (0.6 F))

        lambda <= Lambda:  fc = F (1 - 0.4 (lambda/Lambda)^2) / (3/2 + (2/3)(lambda/Lambda)^2)
        lambda >  Lambda:  fc = 0.277 F / (lambda/Lambda)^2

    (long-term values; short-term compression is 1.5x long-term)

For wood the base strengths are scaled by 1.1/3 (long) or 2/3 (short).
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .errors import InvalidPropertyError


MPA = 1.0e6  # N/mm^2 -> Pa


class LoadDuration(Enum):
    """Load-duration term of the allowable-stress check."""
    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, text: str) -> "LoadDuration":
        key = str(text).strip().lower()
        aliases = {
            "long": cls.LONG, "long-term": cls.LONG, "長期": cls.LONG,
            "short": cls.SHORT, "short-term": cls.SHORT, "短期": cls.SHORT,
        }
        if key not in aliases:
            raise InvalidPropertyError(f"unknown load duration {text!r}")
        return aliases[key]


@dataclass(frozen=True)
class AllowableStresses:
    """Allowable stresses for one member and one load duration (Pa)."""
    ft: float   # tension
    fc: float   # compression (slenderness reduced for metals)
    fb: float   # bending
    fs: float   # shear


class StrengthSpec(ABC):
    """Single allowable-stress capability shared by all strength variants."""

    # Elastic lateral-torsional buckling check applies to this family
    supports_ltb = False

    @abstractmethod
    def allowable(self, duration: LoadDuration, slenderness: float, E: float) -> AllowableStresses:
        """Allowable stresses for the given duration and member slenderness."""

    @property
    def label(self) -> str:
        return type(self).__name__


def duration_factor(duration: LoadDuration) -> float:
    """Metal safety factor nu: 1.5 for long-term, 1.0 for short-term."""
    return 1.5 if duration is LoadDuration.LONG else 1.0


def critical_slenderness(E: float, F: float) -> float:
    """Column-curve break point Lambda = pi * sqrt(E / (0.6 F))."""
    return math.pi * math.sqrt(E / (0.6 * F))


def compression_allowable_long(F: float, E: float, slenderness: float) -> float:
    """Long-term allowable compressive stress from the column curve."""
    Lam = critical_slenderness(E, F)
    ratio = max(slenderness, 0.0) / Lam
    if ratio <= 1.0:
        nu = 1.5 + (2.0 / 3.0) * ratio ** 2
        return F * (1.0 - 0.4 * ratio ** 2) / nu
    return 0.277 * F / ratio ** 2


@dataclass(frozen=True)
class MetalStrength(StrengthSpec):
    """F-value based strength (steel, stainless, aluminum)."""
    F: float    # design strength (Pa)

    def __post_init__(self):
        if not self.F > 0:
            raise InvalidPropertyError(f"F must be positive, got {self.F}")

    def allowable(self, duration: LoadDuration, slenderness: float, E: float) -> AllowableStresses:
        nu = duration_factor(duration)
        ft = self.F / nu
        fc_long = compression_allowable_long(self.F, E, slenderness)
        fc = fc_long if duration is LoadDuration.LONG else 1.5 * fc_long
        return AllowableStresses(ft=ft, fc=fc, fb=ft, fs=ft / math.sqrt(3.0))


@dataclass(frozen=True)
class SteelLike(MetalStrength):
    """Structural steel (SS400: F = 235 N/mm^2, SN490: F = 325 N/mm^2)."""
    supports_ltb = True


@dataclass(frozen=True)
class StainlessLike(MetalStrength):
    """Stainless steel (SUS304: F = 235 N/mm^2)."""


@dataclass(frozen=True)
class AluminumLike(MetalStrength):
    """Aluminum alloy (A6061-T6: F = 210 N/mm^2)."""


@dataclass(frozen=True)
class WoodBaseStrengths:
    """Base material strengths of a wood species (Pa)."""
    Fc: float
    Ft: float
    Fb: float
    Fs: float


# Ungraded sawn lumber base strengths (N/mm^2 -> Pa)
WOOD_PRESETS: Dict[str, WoodBaseStrengths] = {
    "sugi": WoodBaseStrengths(Fc=17.7 * MPA, Ft=13.5 * MPA, Fb=22.2 * MPA, Fs=1.8 * MPA),
    "hinoki": WoodBaseStrengths(Fc=20.7 * MPA, Ft=16.2 * MPA, Fb=26.7 * MPA, Fs=2.1 * MPA),
    "douglas_fir": WoodBaseStrengths(Fc=22.2 * MPA, Ft=17.7 * MPA, Fb=28.2 * MPA, Fs=2.4 * MPA),
    "larch": WoodBaseStrengths(Fc=23.4 * MPA, Ft=18.0 * MPA, Fb=29.4 * MPA, Fs=2.1 * MPA),
    "hemlock": WoodBaseStrengths(Fc=17.7 * MPA, Ft=13.5 * MPA, Fb=22.2 * MPA, Fs=2.1 * MPA),
}

WOOD_ALIASES = {
    "スギ": "sugi", "杉": "sugi",
    "ヒノキ": "hinoki", "檜": "hinoki",
    "ベイマツ": "douglas_fir", "douglas fir": "douglas_fir",
    "カラマツ": "larch",
    "ベイツガ": "hemlock",
}


@dataclass(frozen=True)
class WoodLike(StrengthSpec):
    """
    Wood strength: a named preset or custom base strengths.

    Exactly one of `preset` / `custom` is given:

    >>> WoodLike(preset="sugi")
    >>> WoodLike(custom=WoodBaseStrengths(Fc=..., Ft=..., Fb=..., Fs=...))
    """
    preset: Optional[str] = None
    custom: Optional[WoodBaseStrengths] = None

    def __post_init__(self):
        if (self.preset is None) == (self.custom is None):
            raise InvalidPropertyError("WoodLike needs exactly one of preset or custom")
        if self.preset is not None:
            key = WOOD_ALIASES.get(self.preset, self.preset.strip().lower())
            if key not in WOOD_PRESETS:
                raise InvalidPropertyError(f"unknown wood preset {self.preset!r}")
            object.__setattr__(self, "preset", key)
        if self.custom is not None:
            c = self.custom
            if min(c.Fc, c.Ft, c.Fb, c.Fs) <= 0:
                raise InvalidPropertyError("wood base strengths must be positive")

    @property
    def base(self) -> WoodBaseStrengths:
        return self.custom if self.custom is not None else WOOD_PRESETS[self.preset]

    def allowable(self, duration: LoadDuration, slenderness: float, E: float) -> AllowableStresses:
        factor = 1.1 / 3.0 if duration is LoadDuration.LONG else 2.0 / 3.0
        b = self.base
        return AllowableStresses(
            ft=b.Ft * factor,
            fc=b.Fc * factor,
            fb=b.Fb * factor,
            fs=b.Fs * factor,
        )
