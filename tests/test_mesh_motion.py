import numpy as np
import pytest

from fsi_coupling.fe import nodal_values
from fsi_coupling.mesh import rectangle
from fsi_coupling.mesh_motion import deformed_mesh, move_solid_mesh

from .conftest import FakeSolid, disk_mesh


@pytest.fixture
def solid():
    s = FakeSolid(rectangle(1.0, 1.0, 4, 4))
    rng = np.random.default_rng(0)
    # multiples of 1/8 keep the forward/backward arithmetic exact
    s.current_displacement = rng.integers(-8, 9, size=2 * s.mesh.n_vertices) / 8.0
    return s


class TestMoveSolidMesh:

    def test_each_vertex_moves_once(self, solid):
        reference = solid.mesh.vertices.copy()
        move_solid_mesh(solid, True)
        expected = reference + nodal_values(solid.current_displacement,
                                            solid.mesh.n_vertices, 2)
        np.testing.assert_array_equal(solid.mesh.vertices, expected)

    def test_forward_then_backward_is_identity(self, solid):
        reference = solid.mesh.vertices.copy()
        move_solid_mesh(solid, True)
        assert not np.array_equal(solid.mesh.vertices, reference)
        move_solid_mesh(solid, False)
        np.testing.assert_array_equal(solid.mesh.vertices, reference)

    def test_zero_displacement(self):
        s = FakeSolid(disk_mesh((0.5, 0.5), 0.2, 3))
        reference = s.mesh.vertices.copy()
        move_solid_mesh(s, True)
        np.testing.assert_array_equal(s.mesh.vertices, reference)


class TestDeformedMesh:

    def test_deformed_inside_restored_after(self, solid):
        reference = solid.mesh.vertices.copy()
        with deformed_mesh(solid) as mesh:
            assert mesh is solid.mesh
            np.testing.assert_array_equal(
                mesh.vertices,
                reference + nodal_values(solid.current_displacement, mesh.n_vertices, 2))
        np.testing.assert_array_equal(solid.mesh.vertices, reference)

    def test_restored_bit_for_bit_with_arbitrary_values(self):
        s = FakeSolid(disk_mesh((0.1, 0.7), 0.3, 4))
        rng = np.random.default_rng(1)
        s.current_displacement = rng.normal(scale=1e3, size=2 * s.mesh.n_vertices)
        reference = s.mesh.vertices.copy()
        with deformed_mesh(s):
            pass
        np.testing.assert_array_equal(s.mesh.vertices, reference)

    def test_restored_when_block_raises(self, solid):
        reference = solid.mesh.vertices.copy()
        with pytest.raises(RuntimeError, match="collaborator failure"):
            with deformed_mesh(solid):
                raise RuntimeError("collaborator failure")
        np.testing.assert_array_equal(solid.mesh.vertices, reference)

    def test_vertex_array_is_not_replaced(self, solid):
        vertices = solid.mesh.vertices
        with deformed_mesh(solid):
            pass
        assert solid.mesh.vertices is vertices
