"""Reading and writing triangulations through meshio"""
import logging

import meshio
import numpy

from quadgrid._triangulation import Triangulation

# meshio/VTK cell type of the cells of a triangulation of each dimension
CELL_TYPES = {2: "quad", 3: "hexahedron"}

# VTK numbers cell vertices counter-clockwise, the triangulation
# lexicographically. Both permutations are their own inverse.
VTK_ORDER = {
    2: numpy.array([0, 1, 3, 2]),
    3: numpy.array([0, 1, 3, 2, 4, 5, 7, 6]),
}

MATERIAL_FIELD = "MaterialID"


def to_meshio(tria):
    """
    Convert ``tria`` to a ``meshio.Mesh``.

    Points are padded to three coordinates as VTK expects, cells are
    reordered to VTK numbering and material ids are stored as the
    ``MaterialID`` cell field.
    """
    if tria.n_levels == 0:
        raise ValueError("Cannot convert an empty triangulation")
    points = tria.vertices
    if tria.dim == 2:
        points = numpy.column_stack([points, numpy.zeros(len(points))])
    cells = tria.cells[:, VTK_ORDER[tria.dim]]
    return meshio.Mesh(points, [(CELL_TYPES[tria.dim], cells)],
                       cell_data={MATERIAL_FIELD: [tria.material_ids]})


def write_vtk(tria, filename):
    """Write ``tria`` as a legacy ASCII VTK file."""
    meshio.write(filename, to_meshio(tria), file_format="vtk", binary=False)
    logging.debug(f"Wrote {tria.n_active_cells()} cells to {filename}")


def write_grid(tria, filename, file_format=None, **kwargs):
    """
    Write ``tria`` in any format meshio supports.

    :param file_format: str, optional, meshio format name; inferred from the
                        extension of ``filename`` when omitted
    :param kwargs: passed on to the meshio writer
    """
    meshio.write(filename, to_meshio(tria), file_format=file_format,
                 **kwargs)
    logging.debug(f"Wrote {tria.n_active_cells()} cells to {filename}")


def read_grid(filename, dim=None, file_format=None):
    """
    Read a quadrilateral or hexahedral mesh into a new Triangulation.

    :param dim: int, optional, 2 to read the quadrilaterals and 3 to read
                the hexahedra of the file; by default hexahedra are read
                when present
    :return: Triangulation
    """
    mesh = meshio.read(filename, file_format=file_format)
    present = {block.type for block in mesh.cells}
    if dim is None:
        dim = 3 if CELL_TYPES[3] in present else 2
    if dim not in CELL_TYPES:
        raise NotImplementedError(f"Triangulations of dimension {dim} are "
                                  "not supported, use 2 or 3")
    if CELL_TYPES[dim] not in present:
        raise ValueError(f"{filename} contains no {CELL_TYPES[dim]} cells")

    blocks = [i for i, block in enumerate(mesh.cells)
              if block.type == CELL_TYPES[dim]]
    cells = numpy.concatenate([mesh.cells[i].data for i in blocks])
    materials = None
    if MATERIAL_FIELD in mesh.cell_data:
        materials = numpy.concatenate(
            [mesh.cell_data[MATERIAL_FIELD][i] for i in blocks]).astype(int)

    tria = Triangulation(dim)
    tria.create_triangulation(mesh.points[:, :dim], cells[:, VTK_ORDER[dim]],
                              materials)
    return tria


def print_mesh_info(tria, filename):
    """
    Print the dimension and number of active cells of ``tria``, then write
    it to ``filename`` in VTK format.
    """
    print("Mesh info:")
    print(f" dimension: {tria.dim}")
    print(f" no. of cells: {tria.n_active_cells()}")

    write_vtk(tria, filename)
    print(f" written to {filename}")
    print()
