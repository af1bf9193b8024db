"""
Partitioned fluid-structure interaction on non-conforming meshes.

A fluid solver on a fixed background mesh and a solid solver on a
deforming mesh are coupled through an indicator of the fluid cells covered
by the solid, an FSI forcing on those cells and a fluid traction on the
solid boundary.
"""
from .cell_property import CellProperty, CellPropertyStore
from .containment import ContainmentQuery, point_in_mesh
from .coupling import FSI, CouplingState, SimulationTime
from .errors import CouplingStateError, FSIError, PointOutsideMeshError
from .indicator import update_indicator
from .interface_force import InterfaceForceSample, find_fluid_fsi
from .mesh import QuadMesh, rectangle
from .mesh_motion import deformed_mesh, move_solid_mesh
from .parameters import Parameters
from .solvers import FluidSolver, SolidSolver
from .traction import find_solid_bc

__all__ = [
    "CellProperty",
    "CellPropertyStore",
    "ContainmentQuery",
    "point_in_mesh",
    "FSI",
    "CouplingState",
    "SimulationTime",
    "CouplingStateError",
    "FSIError",
    "PointOutsideMeshError",
    "update_indicator",
    "InterfaceForceSample",
    "find_fluid_fsi",
    "QuadMesh",
    "rectangle",
    "deformed_mesh",
    "move_solid_mesh",
    "Parameters",
    "FluidSolver",
    "SolidSolver",
    "find_solid_bc",
]
