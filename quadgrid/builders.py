"""
Mesh builders.

Every builder constructs a 2D triangulation, extrudes it into 3D, refines
both globally and writes ``<name>_2D.vtk`` and ``<name>_3D.vtk`` into
``output_dir``, printing the mesh info of each. All builders return the
pair ``(tria_2d, tria_3d)``.

Usage::

    from quadgrid.builders import get_builder

    tria_2d, tria_3d = get_builder("cube_hole")(output_dir="out",
                                                n_refinements=2)
"""
import logging
import os

import numpy

from quadgrid import _coarse_grid
from quadgrid._generators import (cheese as cheese_grid,
                                  extrude_triangulation,
                                  hyper_cube_with_cylindrical_hole,
                                  merge_triangulations,
                                  subdivided_hyper_rectangle)
from quadgrid._grid_out import print_mesh_info
from quadgrid._tools import move_vertices, scale, transform
from quadgrid._triangulation import Triangulation

N_LAYERS = 3
HEIGHT = 2.0

INNER_RADIUS = 0.25
OUTER_RADIUS = 1.0

RECT_REPETITIONS = (3, 2)
RECT_P1 = (1.0, -1.0)
RECT_P2 = (4.0, 1.0)

CHEESE_HOLES = (3, 2)

COARSE_GRID_HEIGHT = 1500.0


def _finish(tria_2d, tria_3d, name, n_refinements, output_dir):
    """Refine both triangulations and write them as <name>_2D/3D.vtk"""
    tria_2d.refine_global(n_refinements)
    tria_3d.refine_global(n_refinements)

    os.makedirs(output_dir, exist_ok=True)
    print_mesh_info(tria_2d, os.path.join(output_dir, f"{name}_2D.vtk"))
    print_mesh_info(tria_3d, os.path.join(output_dir, f"{name}_3D.vtk"))
    return tria_2d, tria_3d


def cube_hole(output_dir=".", n_refinements=4, n_layers=N_LAYERS,
              height=HEIGHT, inner_radius=INNER_RADIUS,
              outer_radius=OUTER_RADIUS):
    """Square with a cylindrical hole."""
    tria = hyper_cube_with_cylindrical_hole(inner_radius, outer_radius)
    out = extrude_triangulation(tria, n_layers, height)
    return _finish(tria, out, "cube_hole", n_refinements, output_dir)


def grid6_func(x):
    """Compress a [-1, 1] range in y towards its ends: y -> tanh(2y)/tanh(2)."""
    return numpy.array([x[0], numpy.tanh(2.0 * x[1]) / numpy.tanh(2.0)])


def subdivided_rect(output_dir=".", n_refinements=4, n_layers=N_LAYERS,
                    height=HEIGHT, repetitions=RECT_REPETITIONS,
                    p1=RECT_P1, p2=RECT_P2):
    """
    Subdivided rectangle. The 2D mesh is transformed with ``grid6_func``
    after the extrusion, so the 3D mesh keeps the uniform spacing.
    """
    tria = subdivided_hyper_rectangle(repetitions, p1, p2)
    out = extrude_triangulation(tria, n_layers, height)
    transform(grid6_func, tria)
    return _finish(tria, out, "subdivided_rect", n_refinements, output_dir)


def merge_cube_rect(output_dir=".", n_refinements=4, n_layers=N_LAYERS,
                    height=HEIGHT):
    """The square with a hole merged with the rectangle on its right."""
    tria1 = hyper_cube_with_cylindrical_hole(INNER_RADIUS, OUTER_RADIUS)
    tria2 = subdivided_hyper_rectangle(RECT_REPETITIONS, RECT_P1, RECT_P2)
    tria = merge_triangulations(tria1, tria2)
    out = extrude_triangulation(tria, n_layers, height)
    return _finish(tria, out, "merge_cube_rect", n_refinements, output_dir)


def shift_cube(output_dir=".", n_refinements=2, n_layers=N_LAYERS,
               height=HEIGHT, shift=0.5):
    """Square with a hole whose top edge (y = 1) is moved up by ``shift``."""
    tria = hyper_cube_with_cylindrical_hole(INNER_RADIUS, OUTER_RADIUS)
    moved = move_vertices(tria, lambda x: abs(x[1] - 1.0) < 1e-5,
                          (0.0, shift))
    logging.info(f"shift_cube: moved {moved} vertices")
    out = extrude_triangulation(tria, n_layers, height)
    return _finish(tria, out, "shift_cube", n_refinements, output_dir)


def cheese(output_dir=".", n_refinements=4, n_layers=N_LAYERS,
           height=HEIGHT, holes=CHEESE_HOLES):
    """Block with a 3 x 2 pattern of square holes."""
    tria = cheese_grid(holes)
    out = extrude_triangulation(tria, n_layers, height)
    return _finish(tria, out, "cheese", n_refinements, output_dir)


def create_coarse_grid(output_dir=".", n_refinements=0, n_layers=N_LAYERS,
                       height=COARSE_GRID_HEIGHT):
    """
    Hand-built coarse grid of the Hamburg area (292 vertices, 244 cells)
    in metres, extruded to ``height`` metres.
    """
    tria = Triangulation(2)
    tria.create_triangulation(_coarse_grid.VERTICES, _coarse_grid.CELLS)
    scale(_coarse_grid.SCALE, tria)
    out = extrude_triangulation(tria, n_layers, height)
    return _finish(tria, out, "Hamburg", n_refinements, output_dir)


BUILDERS = {
    "cube_hole": cube_hole,
    "subdivided_rect": subdivided_rect,
    "merge_cube_rect": merge_cube_rect,
    "shift_cube": shift_cube,
    "cheese": cheese,
    "create_coarse_grid": create_coarse_grid,
}

# The builder run when none is chosen explicitly
DEFAULT_BUILDER = "create_coarse_grid"


def get_builder(name=None):
    """
    Get a mesh builder by name.

    :param name: str or None, a key of ``BUILDERS``; ``None`` selects
                 ``DEFAULT_BUILDER``
    :return: callable
    """
    if name is None:
        name = DEFAULT_BUILDER
    if name not in BUILDERS:
        raise ValueError(f"Unknown builder {name!r}. Available: "
                         f"{list(BUILDERS.keys())}")
    return BUILDERS[name]
