import enum
import logging

from .errors import CouplingStateError
from .indicator import update_indicator
from .interface_force import find_fluid_fsi
from .traction import find_solid_bc

logger = logging.getLogger(__name__)

# Remaining time below which the simulation counts as finished
TIME_TOLERANCE = 1e-12


class SimulationTime:
    """
    Global time of the coupled simulation.

    ``output_interval`` and ``refinement_interval`` are spans of simulated
    time; they are converted to step counts with the fixed step size.
    """

    def __init__(self, end_time, delta_t, output_interval, refinement_interval):
        self._end = end_time
        self._delta_t = delta_t
        self._output_interval = output_interval
        self._refinement_interval = refinement_interval
        self._current = 0.0
        self._timestep = 0

    def current(self):
        return self._current

    def end(self):
        return self._end

    def get_delta_t(self):
        return self._delta_t

    def get_timestep(self):
        return self._timestep

    def increment(self):
        self._current += self._delta_t
        self._timestep += 1

    def finished(self):
        return self._end - self._current <= TIME_TOLERANCE

    def _every(self, interval):
        delta = max(1, int(round(interval / self._delta_t)))
        return self._timestep >= delta and self._timestep % delta == 0

    def time_to_output(self):
        return self._every(self._output_interval)

    def time_to_refine(self):
        return self._every(self._refinement_interval)


class CouplingState(enum.Enum):
    NOT_STARTED = "not_started"
    STEPPING = "stepping"
    DONE = "done"


# ------------------------------------------------------------------------------------
# Section: partitioned FSI driver
# ------------------------------------------------------------------------------------
# Each time step performs exactly one solid solve and one fluid solve:
#
#   1. fluid state of the previous step -> traction on the solid boundary
#   2. solid step
#   3. indicator of the fluid cells covered by the moved solid
#   4. FSI forcing on the artificial fluid cells
#   5. fluid step
#   6. time advance
#
# There is no fixed-point iteration between the two solvers.

class FSI:
    """
    Explicit partitioned coupling of a fluid and a solid solver.

    Parameters
    ----------
    fluid_solver : FluidSolver
    solid_solver : SolidSolver
    parameters : Parameters
    """

    def __init__(self, fluid_solver, solid_solver, parameters):
        self.fluid_solver = fluid_solver
        self.solid_solver = solid_solver
        self.parameters = parameters
        self.time = SimulationTime(parameters.end_time,
                                   parameters.time_step,
                                   parameters.output_interval,
                                   parameters.refinement_interval)
        self.state = CouplingState.NOT_STARTED
        logger.info("Number of fluid active cells: %d",
                    fluid_solver.mesh.n_active_cells)
        logger.info("Number of solid active cells: %d",
                    solid_solver.mesh.n_active_cells)

    def initialize_system(self):
        self.fluid_solver.setup_dofs()
        self.fluid_solver.initialize_system()
        self.solid_solver.setup_dofs()
        self.solid_solver.initialize_system()

    def run(self):
        """Run the coupled simulation from time zero to the end time."""
        if self.state is not CouplingState.NOT_STARTED:
            raise CouplingStateError(
                f"run() requires a coupling loop that has not started, state is "
                f"{self.state.value}")

        self.fluid_solver.mesh.refine_global(self.parameters.global_refinement)
        logger.info("Fluid mesh refined %d times: %d active cells",
                    self.parameters.global_refinement,
                    self.fluid_solver.mesh.n_active_cells)
        self.initialize_system()
        self.state = CouplingState.STEPPING

        first_step = True
        while not self.time.finished():
            self._step(first_step)
            first_step = False

        self.state = CouplingState.DONE
        logger.info("FSI simulation finished after %d steps at t = %g",
                    self.time.get_timestep(), self.time.current())

    def _step(self, first_step):
        fluid = self.fluid_solver
        solid = self.solid_solver

        solid.fluid_traction = find_solid_bc(fluid, solid, self.parameters)
        solid.run_one_step(first_step)

        n_covered = update_indicator(fluid, solid)

        sample = find_fluid_fsi(fluid, solid, self.time.get_delta_t(),
                                policy=self.parameters.outside_point_policy)
        fluid.fsi_stress = sample.stress
        fluid.fsi_acceleration = sample.acceleration
        fluid.run_one_step(first_step)

        self.time.increment()

        message = ("step %d, t = %g: %d artificial fluid cells, %d traction points, "
                   "%d FSI force points")
        args = (self.time.get_timestep(), self.time.current(), n_covered,
                len(solid.fluid_traction), len(sample))
        if self.time.time_to_output():
            logger.info(message, *args)
        else:
            logger.debug(message, *args)
