"""
Comparing refinement levels of the square with a cylindrical hole.

Shows how every call to refine_global() splits each cell into 2^dim
children and how the curved hole boundary converges to the circle.
"""
import numpy as np
from quadgrid import extrude_triangulation, hyper_cube_with_cylindrical_hole

inner_radius = 0.25

# --- Progressive refinement in 2D ---
print("=== Progressive refinement (2D) ===")
tria = hyper_cube_with_cylindrical_hole(inner_radius, 1.0)
exact = 4.0 - np.pi * inner_radius ** 2
print(f"Level 0: {tria.n_active_cells()} cells, {tria.n_vertices()} vertices")

for level in range(1, 6):
    tria.refine_global()
    area = tria.cell_measures().sum()
    print(f"Level {level}: {tria.n_active_cells()} cells, "
          f"{tria.n_vertices()} vertices, area error {area - exact:.2e}")


# --- Extruded mesh ---
print("\n=== Extruded mesh (3D) ===")
out = extrude_triangulation(hyper_cube_with_cylindrical_hole(inner_radius, 1.0),
                            3, 2.0)
for level in range(3):
    print(f"Level {level}: {out.n_active_cells()} cells, "
          f"{out.n_vertices()} vertices")
    out.refine_global()
