class FSIError(Exception):
    """Base class of the errors raised by the coupling layer."""


class PointOutsideMeshError(FSIError, ValueError):
    """A point handed to point evaluation lies in no cell of the mesh."""

    def __init__(self, point):
        self.point = tuple(float(x) for x in point)
        super().__init__(f"point {self.point} lies outside the mesh")


class CouplingStateError(FSIError, RuntimeError):
    """The coupling loop was driven from a state that does not allow it."""
