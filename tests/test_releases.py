import numpy as np
import pytest

from stressframe import (
    AnalysisSettings,
    DistributedLoad,
    EndConnection,
    FrameModel,
    Member,
    NodalLoad,
    Node,
    ReleaseCondensationFallback,
    SectionProperties,
    SteelLike,
    SupportKind,
    run_analysis,
)
from stressframe.assembly import build_elements
from stressframe.kernel.assemble import rotation_null_space
from stressframe.kernel.elements import frame_local_stiffness
from stressframe.kernel.loads import fixed_end_forces_uniform
from stressframe.kernel.releases import condense, member_releases
from stressframe.post import member_end_forces

E = 210e9
I = 8.0e-6
SECTION = SectionProperties(area=0.01, i_strong=I, i_weak=2.0e-6, j=1.0e-6,
                            z_strong=1.0e-4, z_weak=4.0e-5)


def member(i, j, **kwargs):
    return Member(i, j, E=E, strength=SteelLike(235e6), section=SECTION, **kwargs)


def fixed_fixed_beam(L, w, end_i=None, end_j=None):
    return FrameModel(
        nodes=[Node(0.0, 0.0, 0.0, SupportKind.FIXED), Node(L, 0.0, 0.0, SupportKind.FIXED)],
        members=[member(0, 1, end_i=end_i or EndConnection.rigid(),
                        end_j=end_j or EndConnection.rigid())],
        distributed_loads=[DistributedLoad(0, w=(0.0, 0.0, -w), frame="global")],
    )


def test_propped_cantilever_from_pinned_member_end():
    """
    Both nodes fixed, the member pinned at j:
        M_i = wL²/8, M_j = 0, R_i = 5wL/8, R_j = 3wL/8
    """
    L, w = 5.0, 4000.0
    result = run_analysis(fixed_fixed_beam(L, w, end_j=EndConnection.pinned()))

    forces = result.member_forces[0]
    assert np.isclose(abs(forces.My_i), w * L**2 / 8, rtol=1e-12)
    assert forces.My_j == pytest.approx(0.0, abs=1e-9)

    left, right = result.reactions
    assert np.isclose(left.Rz, 5 * w * L / 8, rtol=1e-12)
    assert np.isclose(right.Rz, 3 * w * L / 8, rtol=1e-12)
    assert right.My == pytest.approx(0.0, abs=1e-9)


def test_pinned_beam_in_portal_carries_no_end_moment():
    """A beam pinned into two columns is simply supported: zero end moments, wL²/8 at midspan."""
    L, H, w = 6.0, 3.0, 2500.0
    model = FrameModel(
        nodes=[
            Node(0.0, 0.0, 0.0, SupportKind.FIXED),
            Node(0.0, 0.0, H),
            Node(L, 0.0, H),
            Node(L, 0.0, 0.0, SupportKind.FIXED),
        ],
        members=[
            member(0, 1),
            member(1, 2, end_i=EndConnection.pinned(), end_j=EndConnection.pinned()),
            member(2, 3),
        ],
        distributed_loads=[DistributedLoad(1, w=(0.0, 0.0, -w), frame="global")],
    )
    result = run_analysis(model)
    assert result.planar

    beam = result.member_forces[1]
    assert beam.My_i == pytest.approx(0.0, abs=1e-9)
    assert beam.My_j == pytest.approx(0.0, abs=1e-9)

    internal = result.internal_forces[1]
    mid = len(internal.x) // 2
    assert np.isclose(abs(internal.My[mid]), w * L**2 / 8, rtol=1e-9)

    # each column takes half the beam load
    for reaction in result.reactions:
        assert np.isclose(reaction.Rz, w * L / 2, rtol=1e-9)


def test_semi_rigid_end_moment():
    """
    Symmetric rotational springs k at both ends of a fixed-fixed beam:
        M_end = (wL²/12) / (1 + 2EI/(kL))
    """
    L, w = 4.0, 3000.0
    k = 5.0e6
    spring = EndConnection.spring(kr=k)
    result = run_analysis(fixed_fixed_beam(L, w, spring, spring), AnalysisSettings(detect_planar=False))

    expected = (w * L**2 / 12) / (1 + 2 * E * I / (k * L))
    forces = result.member_forces[0]
    assert np.isclose(abs(forces.My_i), expected, rtol=1e-9)
    assert np.isclose(abs(forces.My_j), expected, rtol=1e-9)
    assert 0.0 < expected < w * L**2 / 12


def test_spring_without_components_is_rigid():
    L, w = 4.0, 3000.0
    rigid = run_analysis(fixed_fixed_beam(L, w))
    spring = run_analysis(fixed_fixed_beam(L, w, EndConnection.spring(), EndConnection.spring()))
    np.testing.assert_allclose(spring.member_forces[0].as_vector(),
                               rigid.member_forces[0].as_vector(), rtol=1e-12, atol=1e-9)


def test_stiff_spring_approaches_rigid():
    """A cantilever with a very stiff spring at its root behaves like a rigid one."""
    L, P = 3.0, 1000.0

    def tip_deflection(end_i):
        model = FrameModel(
            nodes=[Node(0.0, 0.0, 0.0, SupportKind.FIXED), Node(L, 0.0, 0.0)],
            members=[member(0, 1, end_i=end_i)],
            nodal_loads=[NodalLoad(1, force=(0.0, 0.0, -P))],
        )
        return run_analysis(model).displacements[1].uz

    rigid = tip_deflection(EndConnection.rigid())
    stiff = tip_deflection(EndConnection.spring(kx=1e14, ky=1e14, kr=1e14))
    soft = tip_deflection(EndConnection.spring(kr=1e5))

    assert np.isclose(stiff, rigid, rtol=1e-4)
    # a soft root spring adds the rigid-body rotation P L / k times L
    assert soft < rigid
    assert np.isclose(soft - rigid, -P * L * L / 1e5, rtol=1e-6)


def test_condensed_load_matches_closed_form():
    """Condensing the rigid-rigid fixed-end forces reproduces the pinned-end tables."""
    L = 4.0
    w = (0.0, -1500.0, -2500.0)
    k = frame_local_stiffness(E, 80e9, 0.01, I, 2.0e-6, 1.0e-6, L)
    full = fixed_end_forces_uniform(L, w)

    for end_i, end_j, kinds in [
        (EndConnection.pinned(), EndConnection.rigid(), ("pinned", "rigid")),
        (EndConnection.rigid(), EndConnection.pinned(), ("rigid", "pinned")),
        (EndConnection.pinned(), EndConnection.pinned(), ("pinned", "pinned")),
    ]:
        condensed = condense(k, member_releases(end_i, end_j))
        np.testing.assert_allclose(condensed.condense_load(full),
                                   fixed_end_forces_uniform(L, w, *kinds), rtol=1e-9, atol=1e-6)


def test_condensed_stiffness_has_zero_pinned_rows():
    k = frame_local_stiffness(E, 80e9, 0.01, I, 2.0e-6, 1.0e-6, 3.0)
    condensed = condense(k, member_releases(EndConnection.pinned(), EndConnection.rigid()))

    assert condensed.released == (4, 5)
    assert not condensed.fallback
    np.testing.assert_array_equal(condensed.k[[4, 5], :], 0.0)
    np.testing.assert_allclose(condensed.k, condensed.k.T)
    # torsion is never released
    assert condensed.k[3, 3] == pytest.approx(k[3, 3])


def test_pinned_end_rotation_is_recovered():
    """Simply supported beam between fixed nodes: end rotation wL³/(24EI)."""
    L, w = 5.0, 2000.0
    model = fixed_fixed_beam(L, w, EndConnection.pinned(), EndConnection.pinned())
    elements = build_elements(model, planar=False, settings=AnalysisSettings())
    record, d_end = member_end_forces(elements[0], np.zeros(12))

    theta = w * L**3 / (24 * E * I)
    assert np.isclose(abs(d_end[4]), theta, rtol=1e-9)
    assert np.isclose(abs(d_end[10]), theta, rtol=1e-9)
    assert np.sign(d_end[4]) == -np.sign(d_end[10])
    assert record.My_i == pytest.approx(0.0, abs=1e-9)


def test_singular_release_falls_back_with_warning():
    """Releasing every translation with zero springs leaves K_yy singular."""
    k = frame_local_stiffness(E, 80e9, 0.01, I, 2.0e-6, 1.0e-6, 3.0)
    free_end = EndConnection.spring(kx=0.0, ky=0.0, kr=0.0)

    with pytest.warns(ReleaseCondensationFallback):
        condensed = condense(k, member_releases(free_end, free_end), element="member 0")

    assert condensed.fallback
    assert not condensed.condensed
    eps = 1e-9 * np.max(np.abs(np.diag(k)))
    for dof in condensed.released:
        assert condensed.k[dof, dof] == pytest.approx(eps)
    # torsion survives
    assert condensed.k[3, 3] == pytest.approx(k[3, 3])


# -----------------------------------------------------------------------------
# Spatial models with pinned ends on skew members
# -----------------------------------------------------------------------------

SQUARE = SectionProperties(area=0.01, i_strong=4.0e-6, i_weak=4.0e-6, j=6.0e-6,
                           z_strong=6.0e-5, z_weak=6.0e-5)


def tripod(load):
    """Three pin-ended bars from pin supports to one apex."""
    supports = [(0.0, 0.0, 0.0), (4.0, 0.0, 0.0), (2.0, 3.0, 0.0)]
    apex = (2.0, 1.0, 3.0)
    pin = EndConnection.pinned()
    return FrameModel(
        nodes=[Node(*p, SupportKind.PINNED) for p in supports] + [Node(*apex)],
        members=[member(k, 3, end_i=pin, end_j=pin) for k in range(3)],
        nodal_loads=[NodalLoad(3, force=load)],
    )


def test_space_truss_tripod_matches_statics():
    P = np.array([1.0e3, 2.0e3, -10.0e3])
    model = tripod(tuple(P))
    result = run_analysis(model)

    assert not result.planar

    # reactions balance the load
    total = np.sum([(r.Rx, r.Ry, r.Rz) for r in result.reactions], axis=0)
    np.testing.assert_allclose(total, -P, rtol=1e-9, atol=1e-6)

    # bar forces from joint equilibrium at the apex: sum(N e) + P = 0
    apex = np.array(model.nodes[3].coords)
    units_to_supports = np.column_stack([
        (np.array(model.nodes[k].coords) - apex) / np.linalg.norm(np.array(model.nodes[k].coords) - apex)
        for k in range(3)
    ])
    N = np.linalg.solve(units_to_supports, -P)
    for record, expected in zip(result.member_forces, N):
        assert record.axial_force == pytest.approx(expected, rel=1e-6)
        f = record.as_vector()
        np.testing.assert_allclose(f[[1, 2, 4, 5, 7, 8, 10, 11]], 0.0, atol=1e-6)

    # nothing resists or loads the rotations
    for d in result.displacements:
        np.testing.assert_allclose((d.rx, d.ry, d.rz), 0.0, atol=1e-12)


def column_with_pinned_beam(far_end, load):
    """Fixed-base column; a beam rigid at the column top, pinned onto a support."""
    return FrameModel(
        nodes=[Node(0.0, 0.0, 0.0, SupportKind.FIXED), Node(0.0, 0.0, 3.0),
               Node(*far_end, SupportKind.PINNED)],
        members=[
            Member(0, 1, E=E, strength=SteelLike(235e6), section=SQUARE),
            Member(1, 2, E=E, strength=SteelLike(235e6), section=SQUARE,
                   end_j=EndConnection.pinned()),
        ],
        nodal_loads=[NodalLoad(1, force=load)],
    )


def test_skew_pinned_beam_matches_axis_aligned_beam():
    """Turning the frame about Z turns the response with it."""
    rot = np.array([[0.8, 0.6, 0.0],
                    [-0.6, 0.8, 0.0],
                    [0.0, 0.0, 1.0]])       # maps +Y onto (0.6, 0.8, 0)
    P = np.array([2.0e3, 3.0e3, -10.0e3])

    aligned = run_analysis(column_with_pinned_beam((0.0, 5.0, 3.0), tuple(P)))
    skew = run_analysis(column_with_pinned_beam((3.0, 4.0, 3.0), tuple(rot @ P)))

    a, s = aligned.displacements[1], skew.displacements[1]
    np.testing.assert_allclose((s.ux, s.uy, s.uz), rot @ (a.ux, a.uy, a.uz), rtol=1e-6, atol=1e-12)
    np.testing.assert_allclose((s.rx, s.ry, s.rz), rot @ (a.rx, a.ry, a.rz), rtol=1e-6, atol=1e-12)

    for ra, rs in zip(aligned.reactions, skew.reactions):
        np.testing.assert_allclose((rs.Rx, rs.Ry, rs.Rz), rot @ (ra.Rx, ra.Ry, ra.Rz),
                                   rtol=1e-6, atol=1e-6)
    # the beam axes turn with the frame, so its local end forces agree
    np.testing.assert_allclose(skew.member_forces[1].as_vector(), aligned.member_forces[1].as_vector(),
                               rtol=1e-6, atol=1e-6)

    # the pinned end carries no bending moment
    beam = skew.member_forces[1]
    assert beam.My_j == pytest.approx(0.0, abs=1e-6)
    assert beam.Mz_j == pytest.approx(0.0, abs=1e-6)


def test_pin_rotation_reported_in_results():
    """Back-substituted pin rotations appear in end_displacements."""
    L, w = 5.0, 2000.0
    model = fixed_fixed_beam(L, w, EndConnection.pinned(), EndConnection.pinned())
    result = run_analysis(model, AnalysisSettings(detect_planar=False))

    theta = w * L**3 / (24 * E * I)
    ends = result.end_displacements[0]
    assert abs(ends.ry_i) == pytest.approx(theta, rel=1e-9)
    assert abs(ends.ry_j) == pytest.approx(theta, rel=1e-9)
    # the supports themselves do not rotate
    assert result.displacements[0].ry == 0.0
    assert "end_displacements" in result.to_dataframes()


def test_rotation_null_space_splits_off_loaded_direction():
    """Torsion of a skew bar leaves two unresisted rotations at its end node."""
    e = np.array([0.6, 0.8, 0.0])
    K = np.zeros((6, 6))
    K[:3, :3] = 1.0e6 * np.eye(3)
    K[3:, 3:] = 5.0e4 * np.outer(e, e)
    dofs = [3, 4, 5]

    held, loaded = rotation_null_space(K, dofs, np.zeros(6))
    assert held.shape == (3, 2)
    assert loaded is None
    np.testing.assert_allclose(held.T @ e, 0.0, atol=1e-12)

    F = np.zeros(6)
    F[5] = 10.0                             # moment about Z
    held, loaded = rotation_null_space(K, dofs, F)
    assert held.shape == (3, 1)
    np.testing.assert_allclose(np.abs(loaded), [0.0, 0.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(np.abs(held[:, 0]), [0.8, 0.6, 0.0], atol=1e-12)
