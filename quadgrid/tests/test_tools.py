import numpy
import pytest

from quadgrid import (HOLE_MANIFOLD_ID, delete_duplicated_vertices,
                      hyper_cube,
                      hyper_cube_with_cylindrical_hole, move_vertices, scale,
                      shift, subdivided_hyper_rectangle, transform)


class TestTransform:
    def test_applied_to_every_vertex(self):
        tria = hyper_cube()
        transform(lambda x: 2.0 * x + 1.0, tria)
        assert tria.vertices.tolist() == [[1.0, 1.0], [3.0, 1.0],
                                          [1.0, 3.0], [3.0, 3.0]]

    def test_cells_unchanged(self):
        tria = subdivided_hyper_rectangle((3, 2), (1.0, -1.0), (4.0, 1.0))
        cells = tria.cells.copy()
        transform(lambda x: x[::-1] * [1.0, -1.0], tria)
        assert numpy.array_equal(tria.cells, cells)

    def test_func_may_modify_argument(self):
        """The function receives a copy of each point."""
        tria = hyper_cube()
        original = tria.vertices.copy()

        def func(x):
            x += 1.0
            return x

        transform(func, tria)
        assert numpy.array_equal(tria.vertices, original + 1.0)

    def test_tanh_keeps_coarse_vertices(self):
        """y in {-1, 0, 1} is fixed by y -> tanh(2y)/tanh(2)."""
        tria = subdivided_hyper_rectangle((3, 2), (1.0, -1.0), (4.0, 1.0))
        original = tria.vertices.copy()
        transform(lambda x: numpy.array(
            [x[0], numpy.tanh(2.0 * x[1]) / numpy.tanh(2.0)]), tria)
        assert numpy.allclose(tria.vertices, original)

    def test_wrong_dimension(self):
        tria = hyper_cube()
        with pytest.raises(ValueError, match="dimension"):
            transform(lambda x: numpy.append(x, 0.0), tria)


class TestShiftScale:
    def test_shift(self):
        tria = hyper_cube()
        shift((1.0, -2.0), tria)
        lower, upper = tria.bounding_box()
        assert lower.tolist() == [1.0, -2.0]
        assert upper.tolist() == [2.0, -1.0]

    def test_scale(self):
        tria = hyper_cube(1.0, 2.0)
        scale(1000.0, tria)
        lower, upper = tria.bounding_box()
        assert lower.tolist() == [1000.0, 1000.0]
        assert upper.tolist() == [2000.0, 2000.0]
        assert tria.cell_measures() == pytest.approx([1.0e6])

    def test_manifolds_follow_the_mesh(self):
        """A shifted and scaled hole stays round under refinement."""
        tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)
        shift((1.0, 2.0), tria)
        scale(2.0, tria)
        assert tria.manifolds[HOLE_MANIFOLD_ID].center.tolist() == [2.0, 4.0]
        tria.refine_global(1)
        r = numpy.linalg.norm(tria.vertices - [2.0, 4.0], axis=1)
        assert numpy.count_nonzero(numpy.abs(r - 0.5) < 1e-12) == 16

    @pytest.mark.parametrize("factor", [0.0, -1.0, float("nan")])
    def test_scale_invalid(self, factor):
        with pytest.raises(ValueError):
            scale(factor, hyper_cube())


class TestMoveVertices:
    def test_top_edge_of_cube_hole(self):
        """Three outer vertices lie on y = 1."""
        tria = hyper_cube_with_cylindrical_hole(0.25, 1.0)
        moved = move_vertices(tria, lambda x: abs(x[1] - 1.0) < 1e-5,
                              (0.0, 0.5))
        assert moved == 3
        assert tria.vertices[:, 1].max() == pytest.approx(1.5)
        assert numpy.count_nonzero(tria.vertices[:, 1] == 1.5) == 3
        assert numpy.all(tria.cell_measures() > 0.0)

    def test_nothing_matches(self):
        tria = hyper_cube()
        original = tria.vertices.copy()
        assert move_vertices(tria, lambda x: x[0] > 5.0, (1.0, 1.0)) == 0
        assert numpy.array_equal(tria.vertices, original)


class TestDeleteDuplicatedVertices:
    def test_two_squares(self):
        vertices = [(0, 0), (1, 0), (0, 1), (1, 1),
                    (1, 0), (2, 0), (1, 1), (2, 1)]
        cells = [(0, 1, 2, 3), (4, 5, 6, 7)]
        v, c, index = delete_duplicated_vertices(vertices, cells)
        assert len(v) == 6
        assert c.tolist() == [[0, 1, 2, 3], [1, 4, 3, 5]]
        assert index.tolist() == [0, 1, 2, 3, 1, 4, 3, 5]

    def test_tolerance(self):
        vertices = [(0, 0), (1, 0), (1 + 1e-9, 0)]
        cells = [(0, 1, 2, 0)]
        v, _, _ = delete_duplicated_vertices(vertices, cells, tol=1e-12)
        assert len(v) == 3
        v, _, _ = delete_duplicated_vertices(vertices, cells, tol=1e-6)
        assert len(v) == 2
        assert v[1].tolist() == [1.0, 0.0]

    def test_unused_dropped(self):
        vertices = [(0, 0), (5, 5), (1, 0), (0, 1), (1, 1)]
        cells = [(0, 2, 3, 4)]
        v, c, index = delete_duplicated_vertices(vertices, cells)
        assert v.tolist() == [[0, 0], [1, 0], [0, 1], [1, 1]]
        assert c.tolist() == [[0, 1, 2, 3]]
        assert index[1] == -1
