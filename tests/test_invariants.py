import numpy as np

from stressframe import (
    AnalysisSettings,
    DistributedLoad,
    EndConnection,
    FrameModel,
    Member,
    NodalLoad,
    Node,
    SectionProperties,
    SteelLike,
    SupportKind,
    run_analysis,
)
from stressframe.assembly import assemble_system, build_elements

E = 210e9
SECTION = SectionProperties(area=0.01, i_strong=8.0e-6, i_weak=2.0e-6, j=1.0e-6,
                            z_strong=1.0e-4, z_weak=4.0e-5)


def member(i, j, **kwargs):
    return Member(i, j, E=E, strength=SteelLike(235e6), section=SECTION, **kwargs)


def space_frame(nodal_loads=(), distributed_loads=(), end_j=None):
    """
    Four fixed columns (3 m) carrying a 4 m x 5 m beam grid.

        nodes 0-3: column bases, nodes 4-7: column tops
    """
    base = [(0.0, 0.0), (4.0, 0.0), (4.0, 5.0), (0.0, 5.0)]
    nodes = [Node(x, y, 0.0, SupportKind.FIXED) for x, y in base]
    nodes += [Node(x, y, 3.0) for x, y in base]
    members = [member(k, k + 4) for k in range(4)]
    members += [member(4, 5), member(5, 6), member(6, 7)]
    members.append(member(7, 4, end_j=end_j or EndConnection.rigid()))
    return FrameModel(nodes, members, nodal_loads, distributed_loads)


LOADS = dict(
    nodal_loads=[NodalLoad(5, force=(2000.0, -1500.0, -8000.0), moment=(0.0, 300.0, 0.0))],
    distributed_loads=[DistributedLoad(4, w=(0.0, 0.0, -3000.0), frame="global"),
                       DistributedLoad(6, w=(0.0, 1200.0, 0.0), frame="local")],
)


def test_stiffness_matrix_symmetry():
    """
    WHAT IS THIS TEST?
    ==================
    We check that the assembled stiffness matrix is symmetric, K = K^T,
    including members whose ends are condensed (pinned).

    Maxwell's reciprocal theorem: pushing at A and measuring at B gives the
    same as pushing at B and measuring at A.
    """
    model = space_frame(end_j=EndConnection.pinned())
    settings = AnalysisSettings()
    elements = build_elements(model, planar=False, settings=settings)
    K, F = assemble_system(model, elements)

    assert K.shape == (48, 48)
    np.testing.assert_allclose(K, K.T, rtol=1e-10, atol=1e-6,
                               err_msg="Stiffness matrix is not symmetric!")
    assert not F.any()
    print("✓ Stiffness matrix is symmetric (physics is preserved)")


def test_zero_load_gives_zero_response():
    result = run_analysis(space_frame())

    for d in result.displacements:
        assert (d.ux, d.uy, d.uz, d.rx, d.ry, d.rz) == (0.0,) * 6
    for r in result.reactions:
        assert (r.Rx, r.Ry, r.Rz, r.Mx, r.My, r.Mz) == (0.0,) * 6
    assert result.max_ratio == 0.0
    assert all(b.status == "no buckling" for b in result.buckling)


def test_equilibrium_forces():
    """
    WHAT IS THIS TEST?
    ==================
    Sum of reactions + sum of applied loads = 0 in every global direction.
    """
    result = run_analysis(space_frame(**LOADS))
    assert not result.planar

    total = np.zeros(3)
    for r in result.reactions:
        total += (r.Rx, r.Ry, r.Rz)

    # beam 4 runs 4 m along X, beam 6 runs 4 m along -X (local y = -Y)
    applied = np.array([2000.0, -1500.0, -8000.0])
    applied += np.array([0.0, 0.0, -3000.0 * 4.0])
    applied += np.array([0.0, -1200.0 * 4.0, 0.0])

    np.testing.assert_allclose(total, -applied, rtol=1e-9, atol=1e-6)
    print("✓ Reactions balance the applied loads")


def test_equilibrium_moments():
    """Moments about the origin balance as well (reaction moments included)."""
    model = space_frame(nodal_loads=[NodalLoad(6, force=(0.0, 0.0, -10000.0))])
    result = run_analysis(model)

    total = np.zeros(3)
    for r in result.reactions:
        p = np.array(model.nodes[r.node].coords)
        total += np.cross(p, (r.Rx, r.Ry, r.Rz)) + np.array((r.Mx, r.My, r.Mz))
    total += np.cross(np.array(model.nodes[6].coords), (0.0, 0.0, -10000.0))

    np.testing.assert_allclose(total, 0.0, atol=1e-6)


def test_superposition():
    """Linear analysis: response to A + B is the sum of the responses."""
    load_a = NodalLoad(5, force=(3000.0, 0.0, 0.0))
    load_b = NodalLoad(7, force=(0.0, 2000.0, -5000.0))

    def uvec(result):
        return np.array([[d.ux, d.uy, d.uz, d.rx, d.ry, d.rz] for d in result.displacements])

    ra = uvec(run_analysis(space_frame(nodal_loads=[load_a])))
    rb = uvec(run_analysis(space_frame(nodal_loads=[load_b])))
    rab = uvec(run_analysis(space_frame(nodal_loads=[load_a, load_b])))

    np.testing.assert_allclose(rab, ra + rb, rtol=1e-9, atol=1e-15)


def test_analysis_does_not_mutate_model():
    model = space_frame(**LOADS)
    before = repr(model)
    first = run_analysis(model)
    assert repr(model) == before

    second = run_analysis(model)
    assert first.displacements == second.displacements
