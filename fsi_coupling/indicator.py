import logging

from .containment import ContainmentQuery
from .mesh_motion import deformed_mesh

logger = logging.getLogger(__name__)


def update_indicator(fluid, solid):
    """
    Flag the fluid cells covered by the solid in its current configuration.

    A fluid cell becomes artificial fluid (indicator 1) only if every one of
    its quadrature points lies inside the deformed solid mesh; partially
    covered cells stay pure fluid (indicator 0). The solid mesh is back in
    its reference configuration when this function returns or raises.

    Parameters
    ----------
    fluid : FluidSolver
    solid : SolidSolver

    Returns
    -------
    n_covered : int
        Number of fluid cells flagged as artificial fluid.
    """
    fe_values = fluid.cell_values
    n_covered = 0

    with deformed_mesh(solid) as solid_mesh:
        query = ContainmentQuery(solid_mesh)
        for f_cell in fluid.mesh.active_cells():
            fe_values.reinit(f_cell)
            is_solid = all(query.contains(q_point)
                           for q_point in fe_values.quadrature_points)
            fluid.cell_property.get_data(f_cell).indicator = 1 if is_solid else 0
            n_covered += is_solid

    logger.debug("indicator updated: %d of %d fluid cells covered",
                 n_covered, fluid.mesh.n_active_cells)
    return n_covered
