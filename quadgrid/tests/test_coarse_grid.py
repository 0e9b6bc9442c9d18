import numpy

from quadgrid import Triangulation
from quadgrid import _coarse_grid


class TestCoarseGridData:
    """Consistency of the hand-built Hamburg table."""

    def test_sizes(self):
        assert len(_coarse_grid.VERTICES) == 292
        assert len(_coarse_grid.CELLS) == 244

    def test_index_range(self):
        cells = numpy.array(_coarse_grid.CELLS)
        assert cells.min() == 0
        assert cells.max() == len(_coarse_grid.VERTICES) - 1

    def test_every_vertex_used(self):
        cells = numpy.array(_coarse_grid.CELLS)
        assert len(numpy.unique(cells)) == len(_coarse_grid.VERTICES)

    def test_no_duplicated_vertices(self):
        vertices = numpy.array(_coarse_grid.VERTICES)
        assert len(numpy.unique(vertices, axis=0)) == len(vertices)

    def test_cells_are_2km_squares(self):
        vertices = numpy.array(_coarse_grid.VERTICES)
        x = vertices[numpy.array(_coarse_grid.CELLS)]
        assert numpy.allclose(x[:, 1] - x[:, 0], [2.0, 0.0])
        assert numpy.allclose(x[:, 2] - x[:, 0], [0.0, 2.0])
        assert numpy.allclose(x[:, 3] - x[:, 0], [2.0, 2.0])

    def test_creates_valid_triangulation(self):
        tria = Triangulation(2)
        tria.create_triangulation(_coarse_grid.VERTICES, _coarse_grid.CELLS)
        assert tria.n_active_cells() == 244
        assert numpy.allclose(tria.cell_measures(), 4.0)
        lower, upper = tria.bounding_box()
        assert lower.tolist() == [548.0, 5916.0]
        assert upper.tolist() == [590.0, 5956.0]
