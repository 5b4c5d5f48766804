import numpy as np
import pytest

from stressframe import (
    AnalysisSettings,
    FrameModel,
    Member,
    NodalLoad,
    Node,
    SectionProperties,
    SteelLike,
    SupportKind,
    run_analysis,
)

L = 3.0
E = 210e9
A = 0.01
I_STRONG = 8.0e-6
I_WEAK = 2.0e-6
P = 1000.0

SECTION = SectionProperties(area=A, i_strong=I_STRONG, i_weak=I_WEAK, j=1.0e-6,
                            z_strong=1.0e-4, z_weak=4.0e-5)


def cantilever(force, settings=None):
    model = FrameModel(
        nodes=[Node(0.0, 0.0, 0.0, SupportKind.FIXED), Node(L, 0.0, 0.0)],
        members=[Member(0, 1, E=E, strength=SteelLike(235e6), section=SECTION)],
        nodal_loads=[NodalLoad(1, force=force)],
    )
    return run_analysis(model, settings)


def test_cantilever_tip_load_deflection():
    result = cantilever((0.0, 0.0, -P))
    assert result.planar

    G = AnalysisSettings().shear_modulus(E)
    shear_area = A / 1.5
    uz_expected = -P * L**3 / (3 * E * I_STRONG) - P * L / (G * shear_area)
    ry_expected = P * L**2 / (2 * E * I_STRONG)

    tip = result.displacements[1]
    assert np.isclose(tip.uz, uz_expected, rtol=1e-9)
    assert np.isclose(tip.ry, ry_expected, rtol=1e-9)
    assert tip.uy == 0.0 and tip.rx == 0.0 and tip.rz == 0.0

    # Reaction sanity: fixed-end Rz should be +P, moment -PL
    base = result.reactions[0]
    assert base.node == 0
    assert np.isclose(base.Rz, P, rtol=1e-9)
    assert np.isclose(base.My, -P * L, rtol=1e-9)


def test_spatial_cantilever_is_euler_bernoulli():
    """Spatial members ignore shear deformation unless asked for it."""
    result = cantilever((0.0, 0.0, -P), AnalysisSettings(detect_planar=False))
    assert not result.planar

    tip = result.displacements[1]
    assert np.isclose(tip.uz, -P * L**3 / (3 * E * I_STRONG), rtol=1e-9)


def test_out_of_plane_load_bends_weak_axis():
    """A horizontal Fy makes the model spatial; local z carries the weak inertia."""
    result = cantilever((0.0, P, 0.0))
    assert not result.planar

    tip = result.displacements[1]
    assert np.isclose(tip.uy, P * L**3 / (3 * E * I_WEAK), rtol=1e-9)
    assert np.isclose(tip.rz, P * L**2 / (2 * E * I_WEAK), rtol=1e-9)
    assert abs(tip.uz) < 1e-12


def test_cantilever_end_forces_and_internal_moment():
    result = cantilever((0.0, 0.0, -P))
    forces = result.member_forces[0]

    # shear +P on the fixed end, zero moment at the free end
    assert np.isclose(forces.Vz_i, P, rtol=1e-9)
    assert np.isclose(forces.My_j, 0.0, atol=1e-6)

    internal = result.internal_forces[0]
    assert len(internal.x) == 21
    assert np.isclose(abs(internal.My[0]), P * L, rtol=1e-9)
    assert np.isclose(internal.My[-1], 0.0, atol=1e-6)
    # moment varies linearly between the ends
    np.testing.assert_allclose(np.abs(internal.My), P * (L - internal.x), rtol=1e-9, atol=1e-6)


@pytest.mark.parametrize("n_jobs", [1, 2])
def test_threaded_member_work_gives_same_result(n_jobs):
    serial = cantilever((0.0, 0.0, -P))
    threaded = cantilever((0.0, 0.0, -P), AnalysisSettings(n_jobs=n_jobs))
    assert threaded.displacements == serial.displacements
    assert threaded.section_checks == serial.section_checks
