from contextlib import contextmanager

import numpy as np


def move_solid_mesh(solid, move_forward):
    """
    Move the solid mesh between its reference and current configuration.

    Every vertex is visited once, however many cells share it, and its
    nodal displacement (read from ``solid.current_displacement``) is added
    to the coordinates when ``move_forward`` is True and subtracted
    otherwise.

    Parameters
    ----------
    solid : SolidSolver
        Solver owning the mesh and the displacement dof vector.
    move_forward : bool
        Direction of the motion.
    """
    mesh = solid.mesh
    displacement = solid.current_displacement
    vertex_touched = np.zeros(mesh.n_vertices, dtype=bool)

    for cell in mesh.active_cells():
        for v in range(mesh.cells.shape[1]):
            index = mesh.vertex_index(cell, v)
            if vertex_touched[index]:
                continue
            vertex_touched[index] = True
            vertex_displacement = np.array([
                displacement[mesh.vertex_dof_index(index, d)]
                for d in range(mesh.dim)
            ])
            if move_forward:
                mesh.vertices[index] += vertex_displacement
            else:
                mesh.vertices[index] -= vertex_displacement


@contextmanager
def deformed_mesh(solid):
    """
    Keep the solid mesh in its current (deformed) configuration for the
    duration of a ``with`` block.

    The reference coordinates are restored exactly on every exit path,
    including exceptions raised inside the block.
    """
    reference = solid.mesh.vertices.copy()
    try:
        move_solid_mesh(solid, True)
        yield solid.mesh
    finally:
        # reference geometry must come back bit-for-bit
        np.copyto(solid.mesh.vertices, reference)
