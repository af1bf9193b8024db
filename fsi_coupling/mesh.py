import numpy as np
from shapely.geometry import Polygon

# Local face numbering of a bilinear quadrilateral (counter-clockwise):
#   face 0: bottom (v0 -> v1), face 1: right (v1 -> v2),
#   face 2: top    (v2 -> v3), face 3: left  (v3 -> v0)
FACE_VERTICES = ((0, 1), (1, 2), (2, 3), (3, 0))
FACES_PER_CELL = 4
VERTICES_PER_CELL = 4


class QuadMesh:
    """
    Two-dimensional mesh of bilinear quadrilaterals.

    Parameters
    ----------
    vertices : array_like, shape (n_vertices, 2)
        Vertex coordinates. The array is owned by the mesh and modified in
        place when the mesh is deformed.
    cells : array_like, shape (n_cells, 4)
        Counter-clockwise vertex indices of every cell.
    boundary : dict
        Maps ``(cell, face)`` to the boundary identifier of every face
        lying on the physical boundary.
    """

    dim = 2

    def __init__(self, vertices, cells, boundary=None):
        self.vertices = np.array(vertices, dtype=float)
        self.cells = np.array(cells, dtype=int).reshape(-1, VERTICES_PER_CELL)
        self.boundary = dict(boundary or {})

    @property
    def n_vertices(self):
        return self.vertices.shape[0]

    @property
    def n_active_cells(self):
        return self.cells.shape[0]

    def active_cells(self):
        return range(self.n_active_cells)

    def vertex_index(self, cell, v):
        return int(self.cells[cell, v])

    def vertex_dof_index(self, v, d):
        """Index of component ``d`` of global vertex ``v`` in a block-ordered
        vector field (all x-values first, then all y-values)."""
        return d * self.n_vertices + v

    def cell_vertices(self, cell):
        return self.vertices[self.cells[cell]]

    def at_boundary(self, cell, face):
        return (cell, face) in self.boundary

    def boundary_id(self, cell, face):
        return self.boundary[(cell, face)]

    def boundary_faces(self):
        """Boundary faces as ``(cell, face, boundary_id)`` in cell/face order."""
        return [(c, f, self.boundary[(c, f)])
                for c in self.active_cells()
                for f in range(FACES_PER_CELL)
                if (c, f) in self.boundary]

    def cell_polygon(self, cell):
        """Closed polygon of a cell in its current geometry."""
        return Polygon(self.cell_vertices(cell))

    # ------------------------------------------------------------------
    # Global refinement
    # ------------------------------------------------------------------
    def refine_global(self, times=1):
        """
        Split every cell into four children ``times`` times.

        Edge midpoints are shared between neighbouring cells. Child faces
        on the physical boundary inherit the boundary identifier of their
        parent face. All per-cell data held elsewhere is invalidated.
        """
        for _ in range(times):
            self._refine_once()

    def _refine_once(self):
        vertices = [tuple(x) for x in self.vertices]
        midpoints = {}

        def edge_midpoint(a, b):
            key = (min(a, b), max(a, b))
            if key not in midpoints:
                midpoints[key] = len(vertices)
                vertices.append(tuple(0.5 * (self.vertices[a] + self.vertices[b])))
            return midpoints[key]

        cells = []
        boundary = {}
        for c in self.active_cells():
            v = self.cells[c]
            m = [edge_midpoint(v[i], v[j]) for i, j in FACE_VERTICES]
            centre = len(vertices)
            vertices.append(tuple(self.vertices[v].mean(axis=0)))

            first = len(cells)
            # Children in counter-clockwise order starting at local vertex 0
            cells.append([v[0], m[0], centre, m[3]])
            cells.append([m[0], v[1], m[1], centre])
            cells.append([centre, m[1], v[2], m[2]])
            cells.append([m[3], centre, m[2], v[3]])

            # (face, child) pairs that sit on each parent face
            children_on_face = {
                0: ((first, 0), (first + 1, 0)),
                1: ((first + 1, 1), (first + 2, 1)),
                2: ((first + 2, 2), (first + 3, 2)),
                3: ((first + 3, 3), (first, 3)),
            }
            for f in range(FACES_PER_CELL):
                if (c, f) in self.boundary:
                    for child, child_face in children_on_face[f]:
                        boundary[(child, child_face)] = self.boundary[(c, f)]

        self.vertices = np.array(vertices, dtype=float)
        self.cells = np.array(cells, dtype=int)
        self.boundary = boundary


def rectangle(lx, ly, nx, ny, origin=(0.0, 0.0), boundary_ids=(0, 1, 2, 3)):
    """
    Structured quadrilateral mesh of the rectangle
    ``[x0, x0 + lx] x [y0, y0 + ly]``.

    Parameters
    ----------
    lx, ly : float
        Length of the domain in x and y directions.
    nx, ny : int
        Number of elements in x and y directions.
    origin : tuple of float
        Lower-left corner of the rectangle.
    boundary_ids : tuple of int
        Identifiers of the [bottom, right, top, left] sides.

    Returns
    -------
    mesh : QuadMesh
    """
    # ------------------------------------------------------------------
    # Nodal coordinates, numbered with y running fastest
    # ------------------------------------------------------------------
    x = origin[0] + np.linspace(0, lx, nx + 1)
    y = origin[1] + np.linspace(0, ly, ny + 1)
    X, Y = np.meshgrid(x, y, indexing='ij')
    P = np.column_stack([X.ravel(), Y.ravel()])

    # ------------------------------------------------------------------
    # Element connectivity (counter-clockwise)
    # ------------------------------------------------------------------
    ix, jy = np.meshgrid(np.arange(nx), np.arange(ny), indexing='ij')
    n1 = ix * (ny + 1) + jy
    n2 = n1 + (ny + 1)
    n3 = n2 + 1
    n4 = n1 + 1
    T = np.stack([n1, n2, n3, n4], axis=-1).reshape(-1, 4)

    # ------------------------------------------------------------------
    # Boundary description: element e = i * ny + j
    # ------------------------------------------------------------------
    bottom, right, top, left = boundary_ids
    boundary = {}
    for el in range(0, nx * ny, ny):
        boundary[(el, 0)] = bottom
    for el in range((nx - 1) * ny, nx * ny):
        boundary[(el, 1)] = right
    for el in range(ny - 1, nx * ny, ny):
        boundary[(el, 2)] = top
    for el in range(ny):
        boundary[(el, 3)] = left

    return QuadMesh(P, T, boundary)
