from shapely.geometry import Point


class ContainmentQuery:
    """
    Point-in-mesh queries by brute-force scan over the cells of a mesh.

    The cell polygons are built from the mesh geometry at construction
    time, so a query describes the mesh as it was when it was created and
    must be rebuilt after the vertices move.

    Cells are tested in index order and the first cell whose closed polygon
    covers the point wins; a point on an edge shared by several cells is
    therefore always attributed to the lowest-numbered one.
    """

    def __init__(self, mesh):
        self.mesh = mesh
        self.polygons = [mesh.cell_polygon(c) for c in mesh.active_cells()]

    def locate(self, point):
        """Index of the first cell containing ``point``, or None."""
        p = Point(point[0], point[1])
        for cell, polygon in enumerate(self.polygons):
            if polygon.covers(p):
                return cell
        return None

    def contains(self, point):
        return self.locate(point) is not None


def point_in_mesh(mesh, point):
    """True if ``point`` lies inside (or on the boundary of) any cell of ``mesh``."""
    return ContainmentQuery(mesh).contains(point)
