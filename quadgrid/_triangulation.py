"""
Quadrilateral (2D) and hexahedral (3D) triangulations.

A ``Triangulation`` stores its vertices as a ``(n_vertices, dim)`` array and
its active cells as a ``(n_active_cells, 2**dim)`` array of vertex indices.
Cell vertices are numbered lexicographically: local vertex ``i + 2*j + 4*k``
sits at the corner ``(i, j, k)`` of the reference cell [0, 1]^dim, i.e. a
quadrilateral is listed as (lower-left, lower-right, upper-left,
upper-right).

Only the finest level is kept. Global refinement replaces every active cell
by its 2**dim children and ``n_levels`` counts how many levels the
triangulation would have in a full hierarchy (1 for a coarse mesh).
"""
import copy
import itertools
import logging

import numpy

from quadgrid._manifold import Manifold, FlatManifold


def reference_corners(dim):
    """Corners of the reference cell in lexicographic order, shape (2**dim, dim)"""
    return numpy.array([[(v >> a) & 1 for a in range(dim)]
                        for v in range(2 ** dim)], dtype=int)


def cell_measures(vertices, cells, dim):
    """
    Signed area (2D) or volume (3D) of every cell.

    The determinant of the Jacobian of the multilinear cell map is
    integrated with a 2-point Gauss rule per axis, which is exact for
    bilinear quadrilaterals and trilinear hexahedra. Cells whose vertices
    are not listed in lexicographic order come out negative.

    :param vertices: array (n_vertices, dim)
    :param cells: int array (n_cells, 2**dim)
    :param dim: int, spatial dimension
    :return: array (n_cells,)
    """
    corners = reference_corners(dim)
    x = vertices[cells]
    g = 0.5 / numpy.sqrt(3.0)
    measures = numpy.zeros(len(cells))
    for xi in itertools.product((0.5 - g, 0.5 + g), repeat=dim):
        xi = numpy.array(xi)
        val = numpy.where(corners == 1, xi, 1.0 - xi)
        der = numpy.where(corners == 1, 1.0, -1.0)
        grad = numpy.empty(corners.shape)
        for b in range(dim):
            grad[:, b] = der[:, b] * numpy.prod(numpy.delete(val, b, axis=1),
                                                axis=1)
        jac = numpy.einsum('mvi,vb->mib', x, grad)
        measures += numpy.linalg.det(jac) / 2 ** dim
    return measures


def _refinement_stencil(dim):
    """
    Describe the 3**dim points of a cell refined once.

    Point ``g`` in {0, 1, 2}^dim (axis 0 fastest) is the midpoint of the
    parent sub-entity spanned by the corners that agree with ``g`` on every
    axis where ``g`` is not 1; its entity dimension is the number of 1s.

    :return: (points, spans, edges, children)
        points: list of index tuples g
        spans: per point, tuple of the parent local vertices spanning it
        edges: per point, the point indices of the midpoints of the lines
               bounding its entity (empty for vertices and lines)
        children: int array (2**dim, 2**dim), point index of every child
                  vertex, children in lexicographic order
    """
    points = [tuple(reversed(t)) for t in itertools.product(range(3),
                                                            repeat=dim)]

    def index(g):
        return sum(ga * 3 ** a for a, ga in enumerate(g))

    corners = [tuple(c) for c in reference_corners(dim)]
    spans = []
    edges = []
    for g in points:
        spans.append(tuple(v for v, c in enumerate(corners)
                           if all(ga == 1 or ga == 2 * ca
                                  for ga, ca in zip(g, c))))
        halves = [a for a in range(dim) if g[a] == 1]
        e = []
        if len(halves) >= 2:
            for a in halves:
                others = [b for b in halves if b != a]
                for choice in itertools.product((0, 2), repeat=len(others)):
                    q = list(g)
                    for b, qb in zip(others, choice):
                        q[b] = qb
                    e.append(index(q))
        edges.append(tuple(e))

    children = numpy.array([[index(tuple(ca + la for ca, la in zip(c, l)))
                             for l in corners] for c in corners], dtype=int)
    return points, spans, edges, children


class Triangulation:
    def __init__(self, dim):
        """
        An empty triangulation of quadrilaterals (dim=2) or hexahedra (dim=3).

        Important methods:
            Construction:
                Triangulation.create_triangulation and the generators in
                quadgrid._generators
            Refinement:
                Triangulation.refine_global
            Geometry attached to lines:
                Triangulation.set_manifold, Triangulation.set_line_manifold_id

        :param dim: int, spatial dimension of the mesh (2 or 3)
        """
        if dim not in (2, 3):
            raise NotImplementedError(f"Triangulations of dimension {dim} are "
                                      "not supported, use 2 or 3")
        self.dim = dim
        self.clear()

    def clear(self):
        """Remove all vertices, cells and manifold information."""
        self.vertices = numpy.empty((0, self.dim))
        self.cells = numpy.empty((0, 2 ** self.dim), dtype=numpy.int64)
        self.material_ids = numpy.empty(0, dtype=numpy.int64)
        self.manifolds = {}
        self.line_manifold_ids = {}
        self.n_levels = 0

    # %% Construction
    def create_triangulation(self, vertices, cells, material_ids=None):
        """
        Populate the triangulation from explicit vertex and cell lists.

        :param vertices: array_like (n_vertices, dim), vertex coordinates
        :param cells: array_like (n_cells, 2**dim), vertex indices of every
                      cell in lexicographic order
        :param material_ids: array_like (n_cells,), optional, defaults to 0
        :raises ValueError: if the triangulation is not empty or the data
                            describes an invalid mesh
        """
        if self.n_levels > 0:
            raise ValueError("The triangulation is not empty, call clear() "
                             "before creating a new one")

        n_cv = 2 ** self.dim
        vertices = numpy.array(vertices, dtype=float)
        cells = numpy.array(cells, dtype=numpy.int64)
        if vertices.ndim != 2 or vertices.shape[1] != self.dim:
            raise ValueError(f"Expected vertices of shape (n, {self.dim}), "
                             f"got {vertices.shape}")
        if cells.ndim != 2 or cells.shape[1] != n_cv or len(cells) == 0:
            raise ValueError(f"Expected at least one cell of {n_cv} vertices, "
                             f"got cells of shape {cells.shape}")
        if not numpy.all(numpy.isfinite(vertices)):
            i = int(numpy.flatnonzero(~numpy.all(numpy.isfinite(vertices),
                                                 axis=1))[0])
            raise ValueError(f"Vertex {i} {vertices[i].tolist()} has "
                             "non-finite coordinates")

        out_of_range = numpy.any((cells < 0) | (cells >= len(vertices)),
                                 axis=1)
        if numpy.any(out_of_range):
            i = int(numpy.flatnonzero(out_of_range)[0])
            raise ValueError(f"Cell {i} {cells[i].tolist()} references a "
                             f"vertex outside [0, {len(vertices) - 1}]")

        repeated = numpy.any(numpy.diff(numpy.sort(cells, axis=1), axis=1)
                             == 0, axis=1)
        if numpy.any(repeated):
            i = int(numpy.flatnonzero(repeated)[0])
            raise ValueError(f"Cell {i} {cells[i].tolist()} uses a vertex "
                             "more than once")

        # Measures are compared against the size of the cell's bounding box
        x = vertices[cells]
        extent = numpy.prod(x.max(axis=1) - x.min(axis=1), axis=1)
        measures = cell_measures(vertices, cells, self.dim)
        invalid = ~(measures > 1e-12 * extent)
        if numpy.any(invalid):
            i = int(numpy.flatnonzero(invalid)[0])
            raise ValueError(f"Cell {i} {cells[i].tolist()} has non-positive "
                             f"measure {measures[i]:g}; it is degenerate or "
                             "its vertices are not in lexicographic order")

        if material_ids is None:
            material_ids = numpy.zeros(len(cells), dtype=numpy.int64)
        else:
            material_ids = numpy.array(material_ids, dtype=numpy.int64)
            if material_ids.shape != (len(cells),):
                raise ValueError("Expected one material id per cell")

        self.vertices = vertices
        self.cells = cells
        self.material_ids = material_ids
        self.n_levels = 1
        logging.debug(f"Created {self.dim}D triangulation with "
                      f"{len(vertices)} vertices and {len(cells)} cells")

    def set_manifold(self, manifold_id, manifold):
        """Attach ``manifold`` to all lines tagged with ``manifold_id``."""
        if not isinstance(manifold, Manifold):
            raise TypeError(f"Expected a Manifold, got {type(manifold)}")
        self.manifolds[manifold_id] = manifold

    def set_line_manifold_id(self, i, j, manifold_id):
        """Tag the line between vertices ``i`` and ``j`` with ``manifold_id``."""
        n = len(self.vertices)
        if not (0 <= i < n and 0 <= j < n) or i == j:
            raise ValueError(f"Invalid line ({i}, {j}) for a triangulation "
                             f"with {n} vertices")
        self.line_manifold_ids[(min(i, j), max(i, j))] = manifold_id

    # %% Queries
    def n_active_cells(self):
        return len(self.cells)

    def n_vertices(self):
        return len(self.vertices)

    def n_used_vertices(self):
        return len(numpy.unique(self.cells))

    def cell_measures(self):
        """Area (2D) or volume (3D) of every active cell."""
        return cell_measures(self.vertices, self.cells, self.dim)

    def bounding_box(self):
        """Return the (lower, upper) corners of the axis-aligned bounding box."""
        if len(self.vertices) == 0:
            raise ValueError("The triangulation is empty")
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def copy(self):
        return copy.deepcopy(self)

    def __repr__(self):
        return (f"Triangulation(dim={self.dim}, n_vertices={self.n_vertices()}, "
                f"n_active_cells={self.n_active_cells()}, "
                f"n_levels={self.n_levels})")

    # %% Refinement
    def refine_global(self, times=1):
        """
        Refine every active cell ``times`` times.

        Each refinement splits a quadrilateral into 4 and a hexahedron into
        8 children. Lines, faces and cells shared between neighbours get a
        single new vertex so the result stays conforming.

        :param times: int, number of refinement levels to add
        """
        if int(times) != times or times < 0:
            raise ValueError(f"Cannot refine a negative or fractional number "
                             f"of times ({times})")
        times = int(times)
        if self.n_levels == 0:
            raise ValueError("Cannot refine an empty triangulation")

        n_before = self.n_active_cells()
        for _ in range(times):
            self._refine_once()
            self.n_levels += 1
            logging.debug(f"Refinement level {self.n_levels - 1}: "
                          f"{self.n_active_cells()} active cells, "
                          f"{self.n_vertices()} vertices")

        if times:
            logging.info(f"Refined {self.dim}D triangulation {times} times: "
                         f"{n_before} -> {self.n_active_cells()} active cells")

    def _refine_once(self):
        dim = self.dim
        points, spans, edges, children = _refinement_stencil(dim)
        n_cells = len(self.cells)
        node = numpy.empty((n_cells, len(points)), dtype=numpy.int64)
        coords = numpy.empty((n_cells, len(points), dim))

        new_vertices = [self.vertices]
        new_line_ids = {}
        offset = len(self.vertices)
        for k in range(dim + 1):
            pk = [i for i, g in enumerate(points) if g.count(1) == k]
            keys = self.cells[:, numpy.array([spans[i] for i in pk])]
            if k == 0:
                node[:, pk] = keys[:, :, 0]
                coords[:, pk] = self.vertices[keys[:, :, 0]]
                continue

            flat = numpy.sort(keys, axis=2).reshape(-1, 2 ** k)
            unique, first, inverse = numpy.unique(flat, axis=0,
                                                  return_index=True,
                                                  return_inverse=True)
            inverse = inverse.reshape(n_cells, len(pk))
            if k == 1:
                xyz = self._line_midpoints(unique)
                for u, (a, b) in self._tagged_lines(unique):
                    m = offset + u
                    mid = self.line_manifold_ids[(a, b)]
                    new_line_ids[(a, m)] = mid
                    new_line_ids[(b, m)] = mid
            else:
                # Faces and cell centres: mean of their line midpoints,
                # which are already shared between neighbours
                e = numpy.array([edges[i] for i in pk])
                xyz = coords[:, e].mean(axis=2).reshape(-1, dim)[first]

            node[:, pk] = offset + inverse
            coords[:, pk] = xyz[inverse]
            new_vertices.append(xyz)
            offset += len(unique)

        self.vertices = numpy.concatenate(new_vertices)
        self.cells = node[:, children].reshape(-1, 2 ** dim)
        self.material_ids = numpy.repeat(self.material_ids, 2 ** dim)
        self.line_manifold_ids = new_line_ids

    def _tagged_lines(self, lines):
        """Yield (row, (a, b)) for every line in ``lines`` carrying a manifold id"""
        if not self.line_manifold_ids:
            return
        for u, (a, b) in enumerate(lines.tolist()):
            if (a, b) in self.line_manifold_ids:
                yield u, (a, b)

    def _line_midpoints(self, lines):
        p = self.vertices[lines[:, 0]]
        q = self.vertices[lines[:, 1]]
        xyz = FlatManifold().get_midpoints(p, q)

        rows = {}
        for u, line in self._tagged_lines(lines):
            rows.setdefault(self.line_manifold_ids[line], []).append(u)
        for manifold_id, r in rows.items():
            try:
                manifold = self.manifolds[manifold_id]
            except KeyError:
                raise ValueError(f"No manifold attached to manifold id "
                                 f"{manifold_id}") from None
            r = numpy.array(r)
            xyz[r] = manifold.get_midpoints(p[r], q[r])
        return xyz
