"""
Generators for coarse triangulations of simple domains.

Every generator returns a new coarse ``Triangulation``; extrusion and merging
only accept coarse (never refined) input triangulations.
"""
import logging

import numpy

from quadgrid._triangulation import Triangulation, reference_corners
from quadgrid._manifold import PolarManifold
from quadgrid._tools import delete_duplicated_vertices

# Manifold id of the lines bounding the hole of
# hyper_cube_with_cylindrical_hole
HOLE_MANIFOLD_ID = 1


def _structured_grid(shape):
    """
    Cells of a structured grid with ``shape`` cells per axis.

    Vertices are numbered with axis 0 fastest.

    :param shape: sequence of int, number of cells along each axis
    :return: (vertex_index, cells, cell_index), where ``vertex_index`` and
             ``cell_index`` hold the integer grid coordinates of every vertex
             and cell (shape (n, dim)), and ``cells`` the lexicographic vertex
             numbers of every cell
    """
    shape = numpy.asarray(shape, dtype=int)
    dim = len(shape)
    strides = numpy.cumprod(numpy.concatenate(([1], shape[:-1] + 1)))
    vertex_index = numpy.indices(shape + 1).reshape(dim, -1, order='F').T
    cell_index = numpy.indices(shape).reshape(dim, -1, order='F').T
    base = cell_index @ strides
    cells = base[:, None] + (reference_corners(dim) @ strides)[None, :]
    return vertex_index, cells, cell_index


def subdivided_hyper_rectangle(repetitions, p1, p2):
    """
    A box between two diagonally opposite corners, split into a grid.

    :param repetitions: sequence of int, number of cells along each axis
                        (its length sets the dimension)
    :param p1: sequence of float, a corner of the box
    :param p2: sequence of float, the opposite corner (any order)
    :return: Triangulation with prod(repetitions) cells
    """
    repetitions = numpy.asarray(repetitions, dtype=int)
    dim = len(repetitions)
    p1 = numpy.asarray(p1, dtype=float)
    p2 = numpy.asarray(p2, dtype=float)
    if p1.shape != (dim,) or p2.shape != (dim,):
        raise ValueError(f"Corners must have {dim} coordinates to match the "
                         f"{dim} repetitions given")
    if numpy.any(repetitions < 1):
        raise ValueError(f"Repetitions must be positive, got "
                         f"{repetitions.tolist()}")
    lower = numpy.minimum(p1, p2)
    upper = numpy.maximum(p1, p2)
    if numpy.any(upper - lower <= 0.0):
        raise ValueError(f"The box between {p1.tolist()} and {p2.tolist()} "
                         "is degenerate")

    vertex_index, cells, _ = _structured_grid(repetitions)
    vertices = lower + vertex_index * (upper - lower) / repetitions

    tria = Triangulation(dim)
    tria.create_triangulation(vertices, cells)
    return tria


def hyper_rectangle(p1, p2):
    return subdivided_hyper_rectangle([1] * len(p1), p1, p2)


def hyper_cube(left=0.0, right=1.0, dim=2):
    """The cube [left, right]^dim as a single cell."""
    if left >= right:
        raise ValueError(f"left ({left}) must be smaller than right ({right})")
    return hyper_rectangle([left] * dim, [right] * dim)


def hyper_cube_with_cylindrical_hole(inner_radius=0.25, outer_radius=1.0):
    """
    The square [-outer_radius, outer_radius]^2 with a round hole about the
    origin, meshed with 8 cells around the hole.

    The lines on the hole carry ``HOLE_MANIFOLD_ID`` with a
    ``PolarManifold`` so the hole stays round under refinement.

    :param inner_radius: float, radius of the hole
    :param outer_radius: float, half the edge length of the square
    """
    if not 0.0 < inner_radius < outer_radius:
        raise ValueError(f"Need 0 < inner_radius < outer_radius, got "
                         f"inner_radius={inner_radius}, "
                         f"outer_radius={outer_radius}")

    # Directions to the corners and edge midpoints of the square,
    # counter-clockwise
    directions = numpy.array([[1, 0], [1, 1], [0, 1], [-1, 1],
                              [-1, 0], [-1, -1], [0, -1], [1, -1]],
                             dtype=float)
    outer = outer_radius * directions
    inner = (inner_radius * directions
             / numpy.linalg.norm(directions, axis=1)[:, None])
    vertices = numpy.concatenate([outer, inner])

    cells = []
    for k in range(8):
        kn = (k + 1) % 8
        cells.append((8 + k, k, 8 + kn, kn))

    tria = Triangulation(2)
    tria.create_triangulation(vertices, cells)
    tria.set_manifold(HOLE_MANIFOLD_ID, PolarManifold((0.0, 0.0)))
    for k in range(8):
        tria.set_line_manifold_id(8 + k, 8 + (k + 1) % 8, HOLE_MANIFOLD_ID)
    return tria


def cheese(holes):
    """
    A block with a regular pattern of holes.

    Along axis ``a`` the domain is ``2 * holes[a] + 1`` unit cells long;
    the cells whose grid coordinates are all odd are left out and form the
    holes.

    :param holes: sequence of int, number of holes along each axis
    """
    holes = numpy.asarray(holes, dtype=int)
    if holes.ndim != 1 or len(holes) not in (2, 3):
        raise NotImplementedError("cheese is only available in 2D and 3D")
    if numpy.any(holes < 1):
        raise ValueError(f"Number of holes must be positive, got "
                         f"{holes.tolist()}")

    vertex_index, cells, cell_index = _structured_grid(2 * holes + 1)
    solid = ~numpy.all(cell_index % 2 == 1, axis=1)

    tria = Triangulation(len(holes))
    tria.create_triangulation(vertex_index.astype(float), cells[solid])
    return tria


def merge_triangulations(tria1, tria2, duplicated_vertex_tolerance=1e-12):
    """
    Combine two coarse triangulations into one.

    Vertices of the two inputs closer than ``duplicated_vertex_tolerance``
    become a single vertex, so the inputs must match where they touch.
    Material ids, line manifold ids and manifolds are carried over. When
    both inputs attach different manifolds to the same id, the lines of
    ``tria2`` are moved to a new, unused id so each keeps its own manifold.

    :return: Triangulation, a new coarse triangulation
    """
    if tria1.dim != tria2.dim:
        raise ValueError(f"Cannot merge a {tria1.dim}D with a {tria2.dim}D "
                         "triangulation")
    for tria in (tria1, tria2):
        if tria.n_levels != 1:
            raise ValueError("Only coarse, non-empty triangulations can be "
                             "merged")

    n1 = tria1.n_vertices()
    vertices, cells, index = delete_duplicated_vertices(
        numpy.concatenate([tria1.vertices, tria2.vertices]),
        numpy.concatenate([tria1.cells, tria2.cells + n1]),
        tol=duplicated_vertex_tolerance)

    result = Triangulation(tria1.dim)
    result.create_triangulation(
        vertices, cells,
        numpy.concatenate([tria1.material_ids, tria2.material_ids]))

    used_ids = (set(tria1.manifolds) | set(tria1.line_manifold_ids.values())
                | set(tria2.manifolds) | set(tria2.line_manifold_ids.values()))
    for offset, tria in ((0, tria1), (n1, tria2)):
        renumber = {}
        for manifold_id, manifold in tria.manifolds.items():
            if manifold_id in result.manifolds:
                if result.manifolds[manifold_id] is manifold:
                    continue
                new_id = max(used_ids) + 1
                used_ids.add(new_id)
                renumber[manifold_id] = new_id
                logging.info(f"Manifold id {manifold_id} is used by both "
                             f"triangulations, the second one's becomes "
                             f"{new_id}")
                manifold_id = new_id
            result.set_manifold(manifold_id, manifold)
        for (a, b), manifold_id in tria.line_manifold_ids.items():
            result.set_line_manifold_id(int(index[a + offset]),
                                        int(index[b + offset]),
                                        renumber.get(manifold_id,
                                                     manifold_id))

    logging.info(f"Merged triangulations: {result.n_vertices()} vertices, "
                 f"{result.n_active_cells()} cells")
    return result


def extrude_triangulation(tria, n_layers, height):
    """
    Extrude a coarse 2D triangulation along z into a 3D one.

    Every quadrilateral becomes a column of ``n_layers`` hexahedra of equal
    height spanning ``0 <= z <= height``. Material ids are copied to every
    layer; manifold information is not, the result has straight lines.

    :param tria: Triangulation, coarse and two-dimensional
    :param n_layers: int, number of cell layers (at least 1)
    :param height: float, extent of the result in z
    :return: Triangulation of dimension 3 with
             ``n_layers * tria.n_active_cells()`` cells
    """
    if tria.dim != 2:
        raise ValueError(f"Only 2D triangulations can be extruded, got "
                         f"{tria.dim}D")
    if tria.n_levels != 1:
        raise ValueError("Only coarse, non-empty triangulations can be "
                         "extruded; extrude before refining")
    if int(n_layers) != n_layers or n_layers < 1:
        raise ValueError(f"Need at least one layer, got {n_layers}")
    if not height > 0.0:
        raise ValueError(f"Height must be positive, got {height}")
    n_layers = int(n_layers)

    n = tria.n_vertices()
    z = numpy.linspace(0.0, height, n_layers + 1)
    vertices = numpy.concatenate([
        numpy.column_stack([tria.vertices, numpy.full(n, zk)]) for zk in z])

    bottom = (tria.cells[:, None, :]
              + (numpy.arange(n_layers) * n)[None, :, None])
    cells = numpy.concatenate([bottom, bottom + n], axis=2).reshape(-1, 8)

    result = Triangulation(3)
    result.create_triangulation(vertices, cells,
                                numpy.repeat(tria.material_ids, n_layers))
    if tria.line_manifold_ids:
        logging.debug("Manifold ids are not carried over to the extruded "
                      "triangulation")
    return result
