"""Fake fluid/solid solvers and mesh builders shared by the tests."""

import numpy as np
import pytest

from fsi_coupling.cell_property import CellPropertyStore
from fsi_coupling.fe import CellValues, FaceValues
from fsi_coupling.mesh import QuadMesh, rectangle
from fsi_coupling.parameters import Parameters
from fsi_coupling.solvers import FluidSolver, SolidSolver


def disk_mesh(center, radius, n):
    """Quadrilateral mesh of a disk, obtained by mapping an n x n mesh of
    [-1, 1]^2 onto the disk (the map keeps the cells counter-clockwise)."""
    square = rectangle(2.0, 2.0, n, n, origin=(-1.0, -1.0))
    x, y = square.vertices[:, 0], square.vertices[:, 1]
    X = x * np.sqrt(1.0 - y**2 / 2.0)
    Y = y * np.sqrt(1.0 - x**2 / 2.0)
    vertices = np.column_stack([center[0] + radius * X, center[1] + radius * Y])
    return QuadMesh(vertices, square.cells, square.boundary)


def interpolate(mesh, functions):
    """Block-ordered dof vector of the given component functions at the vertices."""
    x, y = mesh.vertices[:, 0], mesh.vertices[:, 1]
    return np.concatenate([np.broadcast_to(f(x, y), x.shape).astype(float)
                           for f in functions])


class FakeFluid(FluidSolver):
    """Fluid solver that keeps its solution fixed and records every step."""

    def __init__(self, mesh, mu=0.1, n_points=2, log=None):
        self.mesh = mesh
        self.mu = mu
        self.n_points = n_points
        self.log = log if log is not None else []
        self.cell_property = CellPropertyStore()
        self.setup_dofs()
        self.initialize_system()

    def setup_dofs(self):
        self.cell_values = CellValues(self.mesh, self.n_points)
        n_dofs = self.n_components * self.mesh.n_vertices
        self.present_solution = np.zeros(n_dofs)
        self.solution_increment = np.zeros(n_dofs)
        self.log.append(("fluid_setup", self.mesh.n_active_cells))

    def initialize_system(self):
        self.cell_property.initialize(self.mesh.n_active_cells, self.mu)

    def set_solution(self, vx, vy, p):
        self.present_solution = interpolate(self.mesh, (vx, vy, p))

    def run_one_step(self, first_step):
        self.log.append(("fluid", first_step, len(self.fsi_stress),
                         len(self.fsi_acceleration)))


class FakeSolid(SolidSolver):
    """Solid solver whose state is set by the test; optionally moves by a
    fixed displacement increment every step."""

    def __init__(self, mesh, n_points=2, log=None, step_displacement=None):
        self.mesh = mesh
        self.n_points = n_points
        self.log = log if log is not None else []
        self.step_displacement = step_displacement
        self.setup_dofs()

    def setup_dofs(self):
        self.face_values = FaceValues(self.mesh, self.n_points)
        n_dofs = self.mesh.dim * self.mesh.n_vertices
        self.current_displacement = np.zeros(n_dofs)
        self.current_acceleration = np.zeros(n_dofs)
        self.stress = [[np.zeros((self.mesh.n_active_cells, 4))
                        for _ in range(self.mesh.dim)]
                       for _ in range(self.mesh.dim)]
        self.log.append(("solid_setup", self.mesh.n_active_cells))

    def initialize_system(self):
        pass

    def set_uniform_displacement(self, d):
        self.current_displacement = np.repeat(np.asarray(d, dtype=float),
                                              self.mesh.n_vertices)

    def run_one_step(self, first_step):
        self.log.append(("solid", first_step, len(self.fluid_traction)))
        if self.step_displacement is not None:
            self.current_displacement = self.current_displacement + np.repeat(
                np.asarray(self.step_displacement, dtype=float), self.mesh.n_vertices)


@pytest.fixture
def fluid_mesh():
    """Unit square, 5 x 5 cells of size 0.2."""
    return rectangle(1.0, 1.0, 5, 5)


@pytest.fixture
def solid_square():
    """Square [0.3, 0.7]^2 with 2 x 2 cells."""
    return rectangle(0.4, 0.4, 2, 2, origin=(0.3, 0.3))


@pytest.fixture
def parameters():
    return Parameters(end_time=0.1, time_step=0.05, output_interval=0.05,
                      refinement_interval=0.1, viscosity=0.1)
