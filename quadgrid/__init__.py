"""
Quadrilateral and hexahedral mesh generation.

Usage::

    from quadgrid import (hyper_cube_with_cylindrical_hole,
                          extrude_triangulation, print_mesh_info)

    tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)
    out = extrude_triangulation(tria, 3, 2.0)
    tria.refine_global(2)
    out.refine_global(2)
    print_mesh_info(tria, "cube_hole_2D.vtk")
    print_mesh_info(out, "cube_hole_3D.vtk")
"""
from ._triangulation import Triangulation, cell_measures, reference_corners
from ._manifold import Manifold, FlatManifold, PolarManifold
from ._generators import (
    HOLE_MANIFOLD_ID,
    cheese,
    extrude_triangulation,
    hyper_cube,
    hyper_cube_with_cylindrical_hole,
    hyper_rectangle,
    merge_triangulations,
    subdivided_hyper_rectangle,
)
from ._tools import (
    delete_duplicated_vertices,
    move_vertices,
    scale,
    shift,
    transform,
)
from ._grid_out import (
    print_mesh_info,
    read_grid,
    to_meshio,
    write_grid,
    write_vtk,
)

__version__ = "0.1.0"

__all__ = [
    "Triangulation",
    "cell_measures",
    "reference_corners",
    "Manifold",
    "FlatManifold",
    "PolarManifold",
    "HOLE_MANIFOLD_ID",
    "cheese",
    "extrude_triangulation",
    "hyper_cube",
    "hyper_cube_with_cylindrical_hole",
    "hyper_rectangle",
    "merge_triangulations",
    "subdivided_hyper_rectangle",
    "delete_duplicated_vertices",
    "move_vertices",
    "scale",
    "shift",
    "transform",
    "print_mesh_info",
    "read_grid",
    "to_meshio",
    "write_grid",
    "write_vtk",
]
