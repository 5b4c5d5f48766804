import math

import pytest

from stressframe import (
    AluminumLike,
    InvalidPropertyError,
    LoadDuration,
    StainlessLike,
    SteelLike,
    WoodBaseStrengths,
    WoodLike,
)
from stressframe.materials import MPA, compression_allowable_long, critical_slenderness

E = 205e9
F = 235 * MPA


def test_metal_tension_bending_shear():
    long = SteelLike(F).allowable(LoadDuration.LONG, 0.0, E)
    short = SteelLike(F).allowable(LoadDuration.SHORT, 0.0, E)

    assert long.ft == pytest.approx(F / 1.5)
    assert long.fb == long.ft
    assert long.fs == pytest.approx(F / 1.5 / math.sqrt(3))
    assert short.ft == pytest.approx(F)
    assert short.fc == pytest.approx(1.5 * long.fc)


def test_column_curve():
    Lam = critical_slenderness(E, F)
    assert Lam == pytest.approx(math.pi * math.sqrt(E / (0.6 * F)))

    # stocky members reach F/1.5
    assert compression_allowable_long(F, E, 0.0) == pytest.approx(F / 1.5)
    # break point, inelastic side
    assert compression_allowable_long(F, E, Lam) == pytest.approx(0.6 * F / (1.5 + 2 / 3))
    # elastic side
    assert compression_allowable_long(F, E, 2 * Lam) == pytest.approx(0.277 * F / 4)

    values = [compression_allowable_long(F, E, lam) for lam in range(0, 300, 10)]
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_metal_variants_share_the_rule():
    for variant in (SteelLike, StainlessLike, AluminumLike):
        allow = variant(F).allowable(LoadDuration.LONG, 50.0, E)
        assert allow.ft == pytest.approx(F / 1.5)
    assert SteelLike.supports_ltb
    assert not AluminumLike.supports_ltb
    assert StainlessLike(F).label == "StainlessLike"


def test_metal_requires_positive_f():
    with pytest.raises(InvalidPropertyError):
        SteelLike(0.0)


def test_wood_preset():
    allow = WoodLike(preset="hinoki").allowable(LoadDuration.LONG, 100.0, 10e9)
    assert allow.fc == pytest.approx(20.7 * MPA * 1.1 / 3)
    assert allow.ft == pytest.approx(16.2 * MPA * 1.1 / 3)
    assert allow.fb == pytest.approx(26.7 * MPA * 1.1 / 3)
    assert allow.fs == pytest.approx(2.1 * MPA * 1.1 / 3)

    short = WoodLike(preset="hinoki").allowable(LoadDuration.SHORT, 100.0, 10e9)
    assert short.fb == pytest.approx(26.7 * MPA * 2 / 3)


def test_wood_aliases_and_custom():
    assert WoodLike(preset="スギ").preset == "sugi"
    assert WoodLike(preset="Douglas_Fir").preset == "douglas_fir"

    custom = WoodLike(custom=WoodBaseStrengths(Fc=20 * MPA, Ft=15 * MPA, Fb=25 * MPA, Fs=2 * MPA))
    assert custom.allowable(LoadDuration.SHORT, 0.0, 10e9).fc == pytest.approx(20 * MPA * 2 / 3)


@pytest.mark.parametrize("kwargs", [
    {},
    {"preset": "sugi", "custom": WoodBaseStrengths(1, 1, 1, 1)},
    {"preset": "balsa"},
    {"custom": WoodBaseStrengths(Fc=0.0, Ft=1.0, Fb=1.0, Fs=1.0)},
])
def test_wood_invalid(kwargs):
    with pytest.raises(InvalidPropertyError):
        WoodLike(**kwargs)


@pytest.mark.parametrize("text, duration", [
    ("long", LoadDuration.LONG), ("Short-Term", LoadDuration.SHORT),
    ("長期", LoadDuration.LONG), ("短期", LoadDuration.SHORT),
])
def test_duration_parse(text, duration):
    assert LoadDuration.parse(text) is duration


def test_duration_parse_unknown():
    with pytest.raises(InvalidPropertyError):
        LoadDuration.parse("permanent")
