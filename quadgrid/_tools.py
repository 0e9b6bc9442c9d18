"""Vertex transformations and clean-up operating on a Triangulation in place"""
import logging

import numpy


def transform(func, tria):
    """
    Replace every vertex ``x`` of ``tria`` by ``func(x)``.

    :param func: callable, maps a point (array of shape (dim,)) to a point
    :param tria: Triangulation, modified in place
    """
    if len(tria.vertices) == 0:
        return
    moved = numpy.array([func(x.copy()) for x in tria.vertices], dtype=float)
    if moved.shape != tria.vertices.shape:
        raise ValueError(f"transform function must map points of dimension "
                         f"{tria.dim} to points of dimension {tria.dim}")
    tria.vertices = moved


def shift(offset, tria):
    """Translate all vertices and manifolds of ``tria`` by ``offset``."""
    tria.vertices = tria.vertices + numpy.asarray(offset, dtype=float)
    tria.manifolds = {manifold_id: manifold.shifted(offset)
                      for manifold_id, manifold in tria.manifolds.items()}


def scale(factor, tria):
    """Scale all vertices and manifolds of ``tria`` about the origin."""
    if not factor > 0:
        raise ValueError(f"Scaling factor must be positive, got {factor}")
    tria.vertices = tria.vertices * factor
    tria.manifolds = {manifold_id: manifold.scaled(factor)
                      for manifold_id, manifold in tria.manifolds.items()}


def move_vertices(tria, predicate, offset):
    """
    Translate the vertices for which ``predicate(x)`` is true by ``offset``.

    :return: int, number of vertices moved
    """
    offset = numpy.asarray(offset, dtype=float)
    mask = numpy.array([bool(predicate(x)) for x in tria.vertices],
                       dtype=bool)
    tria.vertices[mask] += offset
    logging.debug(f"Moved {int(mask.sum())} vertices by {offset.tolist()}")
    return int(mask.sum())


def delete_duplicated_vertices(vertices, cells, tol=1e-12):
    """
    Merge vertices that coincide up to ``tol`` in the max-norm.

    The first occurrence of a point is kept and vertices referenced by no
    cell are dropped; the order of the remaining vertices is preserved.

    :param vertices: array (n_vertices, dim)
    :param cells: int array (n_cells, n_cell_vertices)
    :param tol: float, distance below which two vertices are identical
    :return: (vertices, cells, new_index) where ``new_index[i]`` is the
             position of old vertex ``i`` in the returned array (-1 if it
             was dropped)
    """
    vertices = numpy.asarray(vertices, dtype=float)
    cells = numpy.asarray(cells, dtype=numpy.int64)
    n = len(vertices)

    # Representative (first coincident vertex) of every vertex
    rep = numpy.arange(n)
    for i in range(n):
        if rep[i] != i:
            continue
        close = numpy.all(numpy.abs(vertices[i + 1:] - vertices[i]) <= tol,
                          axis=1)
        later = numpy.flatnonzero(close) + i + 1
        rep[later[rep[later] == later]] = i

    cells = rep[cells]
    used = numpy.zeros(n, dtype=bool)
    used[cells.ravel()] = True
    new_index = numpy.full(n, -1, dtype=numpy.int64)
    new_index[used] = numpy.arange(int(used.sum()))

    n_merged = n - len(numpy.unique(rep))
    if n_merged:
        logging.debug(f"Merged {n_merged} duplicated vertices")
    return vertices[used], new_index[cells], new_index[rep]
