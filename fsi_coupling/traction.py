import numpy as np

from .containment import ContainmentQuery
from .fe import gradient_at, locate_point, outside_value, value_at
from .interface_force import fluid_stress, symmetric_gradient
from .mesh import FACES_PER_CELL


def find_solid_bc(fluid, solid, parameters):
    """
    Compute the fluid traction on the solid boundary.

    Every solid face on the physical boundary whose boundary id carries no
    Dirichlet condition receives, at each of its quadrature points, the
    traction ``sigma n`` with ``sigma = -p I + mu sym(grad v)`` built from the
    fluid solution interpolated at that point.

    Note that the undeformed quadrature points and normal vectors of the
    solid are used.

    Parameters
    ----------
    fluid : FluidSolver
    solid : SolidSolver
    parameters : Parameters
        Supplies the viscosity, the Dirichlet boundary ids and the policy for
        points outside the fluid mesh.

    Returns
    -------
    traction : ndarray, shape (N, dim)
        Ordered by solid cell, face and face quadrature point.
    """
    dim = solid.mesh.dim
    n_components = dim + 1
    fe_face_values = solid.face_values
    query = ContainmentQuery(fluid.mesh)
    policy = parameters.outside_point_policy

    traction = []
    for s_cell in solid.mesh.active_cells():
        for f in range(FACES_PER_CELL):
            # Boundary faces without a prescribed displacement
            if not solid.mesh.at_boundary(s_cell, f):
                continue
            if solid.mesh.boundary_id(s_cell, f) in parameters.solid_dirichlet_bcs:
                continue
            fe_face_values.reinit(s_cell, f)
            for q_point, normal in zip(fe_face_values.quadrature_points,
                                       fe_face_values.normal_vectors):
                located = locate_point(fluid.mesh, q_point, query)
                if located is None:
                    traction.append(outside_value(q_point, policy, (dim,)))
                    continue
                f_cell, xi = located
                value = value_at(fluid.mesh, fluid.present_solution, f_cell, xi,
                                 n_components=n_components)
                gradient = gradient_at(fluid.mesh, fluid.present_solution, f_cell, xi,
                                       n_components=n_components)
                sym_deformation = symmetric_gradient(gradient[:dim, :])
                stress = fluid_stress(value[dim], sym_deformation, parameters.viscosity)
                traction.append(stress @ normal)

    return np.array(traction).reshape(-1, dim)
