"""
Building a grid from explicit vertex and cell lists.

An L-shaped domain made of three unit squares is created, one material id
per cell, merged with a shifted copy of itself, extruded and written to
VTK. Cells list their vertices lexicographically: (0,0), (1,0), (0,1), (1,1)
of the reference square.
"""
from quadgrid import (Triangulation, extrude_triangulation,
                      merge_triangulations, print_mesh_info, shift)

vertices = [(0, 0), (1, 0), (2, 0),
            (0, 1), (1, 1), (2, 1),
            (0, 2), (1, 2)]
cells = [(0, 1, 3, 4),
         (1, 2, 4, 5),
         (3, 4, 6, 7)]

tria = Triangulation(2)
tria.create_triangulation(vertices, cells, material_ids=[1, 2, 3])
print(tria)

# A copy moved to the right shares its left edge with the first L
other = tria.copy()
shift((2.0, 0.0), other)
both = merge_triangulations(tria, other)
print(f"Merged: {both.n_vertices()} vertices, {both.n_active_cells()} cells")

out = extrude_triangulation(both, 2, 0.5)
both.refine_global(2)
out.refine_global(2)

print_mesh_info(both, "l_shape_2D.vtk")
print_mesh_info(out, "l_shape_3D.vtk")
