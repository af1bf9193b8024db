"""Run parameters of a coupled simulation."""

from typing import FrozenSet, Literal

from pydantic import BaseModel, ConfigDict, Field


class Parameters(BaseModel):
    """Parameters consumed by the coupling layer.

    Reading them from a file is left to the driver program.
    """

    model_config = ConfigDict(frozen=True)

    end_time: float = Field(gt=0)
    time_step: float = Field(gt=0)
    # Intervals are simulated time spans, not step counts
    output_interval: float = Field(gt=0)
    refinement_interval: float = Field(gt=0)
    global_refinement: int = Field(default=0, ge=0)
    # Dynamic viscosity used for the traction on the solid boundary
    viscosity: float = Field(ge=0)
    # Solid boundary ids carrying a prescribed displacement
    solid_dirichlet_bcs: FrozenSet[int] = frozenset()
    # What point evaluation does for points outside the mesh. The FSI force
    # reads the solid fields on the reference solid mesh, so with "raise" a
    # run aborts with PointOutsideMeshError once a covered fluid cell lies
    # outside the solid's reference footprint; "zero" lets it continue.
    outside_point_policy: Literal["raise", "zero"] = "raise"
