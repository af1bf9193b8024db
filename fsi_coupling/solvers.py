"""
Contracts of the fluid and solid solvers driven by the coupling loop.

The coupling layer never assembles or solves anything itself: it reads the
meshes and solution vectors listed below, writes its outputs back into the
designated attributes and asks each solver to advance one time step.
"""
from abc import ABC, abstractmethod


# ------------------------------------------------------------------------------------
# Section: fluid solver
# ------------------------------------------------------------------------------------
# The fluid lives on a fixed background mesh. Cells entirely covered by the
# solid are flagged in ``cell_property`` and receive the FSI forcing
# ``fsi_stress`` / ``fsi_acceleration``, which are ordered by cell index and
# then by quadrature point of ``cell_values``.

class FluidSolver(ABC):
    """
    Fluid solver collaborator.

    Attributes
    ----------
    mesh : QuadMesh
        Fixed background mesh.
    cell_values : CellValues
        Volume quadrature used by the solver's own assembly; the FSI forcing
        is evaluated at exactly these points.
    cell_property : CellPropertyStore
        Viscosity and indicator of every active cell.
    present_solution : ndarray
        Block-ordered dof vector with ``dim`` velocity components followed
        by the pressure.
    solution_increment : ndarray
        Change of ``present_solution`` over the last time step.
    fsi_stress : ndarray, shape (N, dim, dim)
    fsi_acceleration : ndarray, shape (N, dim)
        FSI forcing handed in before every step.
    """

    mesh = None
    cell_values = None
    cell_property = None
    present_solution = None
    solution_increment = None
    fsi_stress = None
    fsi_acceleration = None

    @property
    def n_components(self):
        return self.mesh.dim + 1

    @abstractmethod
    def setup_dofs(self):
        """Distribute degrees of freedom on the (possibly refined) mesh."""

    @abstractmethod
    def initialize_system(self):
        """Allocate matrices, vectors and per-cell properties."""

    @abstractmethod
    def run_one_step(self, first_step):
        """Advance the fluid by one time step."""


# ------------------------------------------------------------------------------------
# Section: solid solver
# ------------------------------------------------------------------------------------
# The solid mesh is kept in its reference configuration; the current
# configuration is obtained by adding ``current_displacement`` to the
# vertices. ``fluid_traction`` is ordered by cell, face and face quadrature
# point of ``face_values`` over the boundary faces without a Dirichlet
# condition.

class SolidSolver(ABC):
    """
    Solid solver collaborator.

    Attributes
    ----------
    mesh : QuadMesh
        Solid mesh in reference configuration.
    face_values : FaceValues
        Face quadrature used by the solver to apply the traction.
    current_displacement : ndarray
        Block-ordered nodal displacement dof vector.
    current_acceleration : ndarray
        Block-ordered nodal acceleration dof vector.
    stress : list of list of ndarray
        ``stress[i][j]`` is the cell-wise (discontinuous) field of stress
        component ``(i, j)``, shape (n_cells, 4).
    fluid_traction : ndarray, shape (N, dim)
        Neumann load handed in before every step.
    """

    mesh = None
    face_values = None
    current_displacement = None
    current_acceleration = None
    stress = None
    fluid_traction = None

    @abstractmethod
    def setup_dofs(self):
        """Distribute degrees of freedom."""

    @abstractmethod
    def initialize_system(self):
        """Allocate matrices and vectors."""

    @abstractmethod
    def run_one_step(self, first_step):
        """Advance the solid by one time step."""
