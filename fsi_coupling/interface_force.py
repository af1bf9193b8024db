import numpy as np

from .containment import ContainmentQuery
from .fe import locate_point, outside_value, value_at


class InterfaceForceSample:
    """
    FSI forcing at the quadrature points of the artificial fluid cells.

    ``stress[k]`` and ``acceleration[k]`` belong to the same point; points
    are ordered by fluid cell index, then by quadrature point.
    """

    def __init__(self, stress, acceleration):
        self.stress = stress
        self.acceleration = acceleration

    def __len__(self):
        return len(self.acceleration)


def fluid_stress(p, sym_grad_v, mu):
    """Newtonian stress ``-p I + mu sym(grad v)`` for a batch of points."""
    dim = sym_grad_v.shape[-1]
    p = np.asarray(p, dtype=float)
    return -p[..., np.newaxis, np.newaxis] * np.eye(dim) + mu * sym_grad_v


def symmetric_gradient(grad_v):
    return 0.5 * (grad_v + np.swapaxes(grad_v, -1, -2))


def find_fluid_fsi(fluid, solid, dt, policy="raise"):
    """
    Compute the FSI forcing on every artificial fluid cell.

    At each quadrature point of a cell with indicator 1 the fluid stress
    and material acceleration

        sigma_f = -p I + mu sym(grad v)
        a_f     = dv / dt + (grad v) v

    are compared with the solid acceleration and stress interpolated at the
    same physical point. Cells with indicator 0 contribute nothing.

    The solid fields are interpolated on the reference solid mesh, each
    point being located once. Only the components ``stress[i][j]`` with
    ``i <= j`` are read, so every stress difference is symmetric.

    Parameters
    ----------
    fluid : FluidSolver
    solid : SolidSolver
    dt : float
        Fixed time step of the coupled simulation.
    policy : {"raise", "zero"}
        Behaviour of the solid interpolation at points outside the solid mesh.

    Returns
    -------
    sample : InterfaceForceSample
        ``sample.stress`` has shape (N, dim, dim) and ``sample.acceleration``
        shape (N, dim), with N the total number of quadrature points of the
        artificial fluid cells.
    """
    fe_values = fluid.cell_values
    dim = fluid.mesh.dim
    n_components = dim + 1
    solid_mesh = solid.mesh
    query = ContainmentQuery(solid_mesh)

    fsi_stress = []
    fsi_acceleration = []

    for f_cell in fluid.mesh.active_cells():
        props = fluid.cell_property.get_data(f_cell)
        if props.indicator == 0:
            continue
        mu = props.get_mu()
        fe_values.reinit(f_cell)

        values = fe_values.function_values(fluid.present_solution, n_components)
        gradients = fe_values.function_gradients(fluid.present_solution, n_components)
        increments = fe_values.function_values(fluid.solution_increment, n_components)

        v = values[:, :dim]
        p = values[:, dim]
        grad_v = gradients[:, :dim, :]
        dv = increments[:, :dim]

        # Newtonian stress and material acceleration
        sigma_f = fluid_stress(p, symmetric_gradient(grad_v), mu)
        acc_f = dv / dt + np.einsum('qij,qj->qi', grad_v, v)

        for q, q_point in enumerate(fe_values.quadrature_points):
            # Solid state at the same physical point
            located = locate_point(solid_mesh, q_point, query)
            if located is None:
                acc_s = outside_value(q_point, policy, (dim,))
                sigma_s = np.zeros((dim, dim))
            else:
                s_cell, xi = located
                acc_s = value_at(solid_mesh, solid.current_acceleration, s_cell, xi,
                                 n_components=dim)
                # symmetric: only the upper triangle of the solid stress is read
                sigma_s = np.empty((dim, dim))
                for i in range(dim):
                    for j in range(i, dim):
                        sigma_s[i, j] = sigma_s[j, i] = value_at(
                            solid_mesh, solid.stress[i][j], s_cell, xi)
            # Difference between fluid and solid
            fsi_stress.append(sigma_f[q] - sigma_s)
            fsi_acceleration.append(acc_f[q] - acc_s)

    return InterfaceForceSample(
        np.array(fsi_stress).reshape(-1, dim, dim),
        np.array(fsi_acceleration).reshape(-1, dim),
    )
