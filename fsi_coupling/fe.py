"""
Bilinear (Q1) finite element utilities on a :class:`~fsi_coupling.mesh.QuadMesh`.

Continuous vector fields are stored as block-ordered degree-of-freedom
vectors: for a mesh with ``Nb`` vertices, entries ``[0, Nb)`` hold the
first component at every vertex, ``[Nb, 2 Nb)`` the second one, and so on.
Discontinuous fields are stored cell-wise as arrays of shape ``(n_cells, 4)``
holding the value at the four vertices of each cell.
"""
import logging

import numpy as np
from numpy.polynomial.legendre import leggauss
from scipy.optimize import root

from .containment import ContainmentQuery
from .errors import FSIError, PointOutsideMeshError
from .mesh import FACE_VERTICES

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------------
# Section: quadrature rules and shape functions
# ------------------------------------------------------------------------------------

def gauss_legendre(n):
    """
    Compute 1D Gaussian quadrature nodes and weights on [0,1].

    Parameters
    ----------
    n : int
        Number of Gauss points.

    Returns
    -------
    nodes : ndarray, shape (n,)
    weights : ndarray, shape (n,)
    """
    a, b = 0, 1
    x_1, w_1 = leggauss(n)
    nodes = (b - a) / 2 * x_1 + (a + b) / 2
    weights = (b - a) / 2 * w_1
    return nodes, weights


def compute_quad(n):
    """
    Compute 2D tensor-product Gaussian quadrature on [0,1]^2.

    Returns
    -------
    nodes_2d : ndarray, shape (n*n, 2)
    weights_2d : ndarray, shape (n*n,)
    """
    nodes_m, weights_m = gauss_legendre(n)
    nodes_2d = np.array([(x, y) for x in nodes_m for y in nodes_m])
    weights_2d = np.array([wx * wy for wx in weights_m for wy in weights_m])
    return nodes_2d, weights_2d


def phi(x, y):
    """
    Bilinear shape functions of the reference element [0,1]^2.

    Returns the values of the four shape functions at (x, y), ordered as
    the counter-clockwise cell vertices.
    """
    return np.array([(1.0 - x) * (1.0 - y),
                     x * (1.0 - y),
                     x * y,
                     y * (1.0 - x)])


def grad_phi(x, y):
    """Reference gradients of the bilinear shape functions, shape (4, 2)."""
    return np.array([[y - 1.0, x - 1.0],
                     [1.0 - y, -x],
                     [y, x],
                     [-y, 1.0 - x]])


def nodal_values(field, n_vertices, n_components):
    """Reshape a block-ordered dof vector to (n_vertices, n_components)."""
    return np.asarray(field, dtype=float).reshape(n_components, n_vertices).T


def _n_components(mesh, field):
    n = np.size(field) // mesh.n_vertices
    if n * mesh.n_vertices != np.size(field):
        raise ValueError(
            f"field of size {np.size(field)} does not match a mesh with "
            f"{mesh.n_vertices} vertices")
    return n


def _cell_dof_values(mesh, field, cell, n_components=None):
    """Values of ``field`` at the four vertices of ``cell``, shape (4, k) or (4, ...)."""
    field = np.asarray(field, dtype=float)
    if field.ndim == 1:
        if n_components is None:
            n_components = _n_components(mesh, field)
        return nodal_values(field, mesh.n_vertices, n_components)[mesh.cells[cell]]
    # cell-wise (discontinuous) field
    return field[cell]


# ------------------------------------------------------------------------------------
# Section: values on cells and faces
# ------------------------------------------------------------------------------------

class CellValues:
    """
    Shape functions, quadrature points and integration weights on one cell
    at a time.

    ``reinit(cell)`` must be called before any of the per-cell quantities
    are accessed.
    """

    def __init__(self, mesh, n_points=2):
        self.mesh = mesh
        self.unit_points, self.weights = compute_quad(n_points)
        self.shape_values = np.array([phi(x, y) for x, y in self.unit_points])
        self.unit_gradients = np.array([grad_phi(x, y) for x, y in self.unit_points])
        self.cell = None

    @property
    def n_quadrature_points(self):
        return len(self.weights)

    def reinit(self, cell):
        X = self.mesh.cell_vertices(cell)
        # J[q] = dx/dxi, shape (n_q, 2, 2)
        J = np.einsum('ki,qkj->qij', X, self.unit_gradients)
        self.cell = cell
        self.quadrature_points = self.shape_values @ X
        self.JxW = self.weights * np.abs(np.linalg.det(J))
        self.shape_gradients = np.einsum('qkl,qlj->qkj',
                                         self.unit_gradients, np.linalg.inv(J))
        return self

    def function_values(self, field, n_components=None):
        """Field values at the quadrature points, shape (n_q, k)."""
        local = _cell_dof_values(self.mesh, field, self.cell, n_components)
        return np.einsum('qk,k...->q...', self.shape_values, local)

    def function_gradients(self, field, n_components=None):
        """Field gradients at the quadrature points, shape (n_q, k, 2) with
        ``grad[q, i, j] = d u_i / d x_j``."""
        local = _cell_dof_values(self.mesh, field, self.cell, n_components)
        return np.einsum('ki,qkj->qij', local, self.shape_gradients)


class FaceValues:
    """Quadrature points, outward unit normals and weights on one cell face."""

    def __init__(self, mesh, n_points=2):
        self.mesh = mesh
        self.unit_points, self.weights = gauss_legendre(n_points)

    @property
    def n_quadrature_points(self):
        return len(self.weights)

    def reinit(self, cell, face):
        a, b = FACE_VERTICES[face]
        X = self.mesh.cell_vertices(cell)
        tangent = X[b] - X[a]
        length = np.hypot(tangent[0], tangent[1])
        s = self.unit_points[:, np.newaxis]
        self.quadrature_points = (1.0 - s) * X[a] + s * X[b]
        # Counter-clockwise cells: the outward normal is the tangent turned clockwise
        normal = np.array([tangent[1], -tangent[0]]) / length
        self.normal_vectors = np.tile(normal, (self.n_quadrature_points, 1))
        self.JxW = self.weights * length
        return self


# ------------------------------------------------------------------------------------
# Section: point evaluation
# ------------------------------------------------------------------------------------

def map_to_unit_cell(mesh, cell, point):
    """
    Invert the bilinear map of ``cell`` at a physical ``point``.

    Returns
    -------
    xi : ndarray, shape (2,)
        Reference coordinates in [0,1]^2 (up to round-off for points on
        the cell boundary).
    """
    X = mesh.cell_vertices(cell)
    point = np.asarray(point, dtype=float)

    def residual(xi):
        r = phi(*xi) @ X - point
        J = X.T @ grad_phi(*xi)
        return r, J

    sol = root(residual, x0=np.array([0.5, 0.5]), jac=True, tol=1e-13)
    scale = np.ptp(X, axis=0).max()
    if not sol.success and np.linalg.norm(sol.fun) > 1e-10 * scale:
        raise FSIError(f"could not map point {point} to the unit cell of cell {cell}: "
                       f"{sol.message}")
    return sol.x


def locate_point(mesh, point, query=None):
    """
    Find the cell containing a physical point and its reference coordinates.

    Parameters
    ----------
    mesh : QuadMesh
    point : array_like, shape (2,)
    query : ContainmentQuery, optional
        Prebuilt locator for ``mesh``.

    Returns
    -------
    (cell, xi) or None
        None when no cell of ``mesh`` contains the point.
    """
    if query is None:
        query = ContainmentQuery(mesh)
    cell = query.locate(point)
    if cell is None:
        return None
    return cell, map_to_unit_cell(mesh, cell, point)


def outside_value(point, policy, shape):
    """Value used for a point outside the mesh, or PointOutsideMeshError."""
    if policy == "zero":
        logger.warning("point %s lies outside the mesh, using zero", tuple(point))
        return np.zeros(shape)
    raise PointOutsideMeshError(point)


def _value_shape(mesh, field, n_components):
    field = np.asarray(field)
    if field.ndim == 1:
        return (n_components or _n_components(mesh, field),)
    return field.shape[2:]


def value_at(mesh, field, cell, xi, n_components=None):
    """Value of ``field`` at reference coordinates ``xi`` of ``cell``."""
    local = _cell_dof_values(mesh, field, cell, n_components)
    return np.einsum('k,k...->...', phi(*xi), local)


def gradient_at(mesh, field, cell, xi, n_components=None):
    """Gradient of a dof vector at reference coordinates ``xi`` of ``cell``,
    shape (k, 2)."""
    X = mesh.cell_vertices(cell)
    dN = grad_phi(*xi)
    G = dN @ np.linalg.inv(X.T @ dN)
    local = _cell_dof_values(mesh, field, cell, n_components)
    return local.T @ G


def point_value(mesh, field, point, n_components=None, policy="raise", query=None):
    """
    Evaluate ``field`` at an arbitrary physical point.

    Parameters
    ----------
    mesh : QuadMesh
        Mesh the field lives on, in its current geometry.
    field : ndarray
        Block-ordered dof vector or cell-wise array of shape (n_cells, 4, ...).
    point : array_like, shape (2,)
    n_components : int, optional
        Number of components of a dof vector (inferred when omitted).
    policy : {"raise", "zero"}
        Behaviour when no cell contains the point.
    query : ContainmentQuery, optional
        Prebuilt locator for ``mesh``.

    Returns
    -------
    value : ndarray
        Shape (k,) for dof vectors, the trailing shape for cell-wise fields.
    """
    located = locate_point(mesh, point, query)
    if located is None:
        return outside_value(point, policy, _value_shape(mesh, field, n_components))
    return value_at(mesh, field, *located, n_components=n_components)


def point_gradient(mesh, field, point, n_components=None, policy="raise", query=None):
    """
    Evaluate the gradient of a dof vector at an arbitrary physical point.

    Returns
    -------
    gradient : ndarray, shape (k, 2)
        ``gradient[i, j] = d u_i / d x_j``.
    """
    located = locate_point(mesh, point, query)
    if located is None:
        shape = _value_shape(mesh, field, n_components) + (mesh.dim,)
        return outside_value(point, policy, shape)
    return gradient_at(mesh, field, *located, n_components=n_components)
