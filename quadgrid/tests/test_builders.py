"""
Tests for the mesh builders.

The builders run with few refinements to keep the tests fast.
"""
import numpy
import pytest

from quadgrid.builders import (BUILDERS, DEFAULT_BUILDER, cheese, cube_hole,
                               create_coarse_grid, get_builder, grid6_func,
                               merge_cube_rect, shift_cube, subdivided_rect)


def vtk_files(path):
    return sorted(p.name for p in path.iterdir() if p.suffix == ".vtk")


class TestGetBuilder:
    def test_default(self):
        assert DEFAULT_BUILDER == "create_coarse_grid"
        assert get_builder() is create_coarse_grid

    def test_by_name(self):
        for name, builder in BUILDERS.items():
            assert get_builder(name) is builder

    def test_all_builders_available(self):
        assert set(BUILDERS) == {"cube_hole", "subdivided_rect",
                                 "merge_cube_rect", "shift_cube", "cheese",
                                 "create_coarse_grid"}

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown builder"):
            get_builder("no_such_builder")


class TestBuilders:
    """Each builder writes a 2D and a 3D file and returns both meshes."""

    def test_cube_hole(self, tmp_path):
        tria_2d, tria_3d = cube_hole(str(tmp_path), n_refinements=1)
        assert tria_2d.n_active_cells() == 8 * 4
        assert tria_3d.n_active_cells() == 24 * 8
        assert vtk_files(tmp_path) == ["cube_hole_2D.vtk",
                                       "cube_hole_3D.vtk"]

    def test_cube_hole_refinement_scaling(self, tmp_path):
        tria_2d, tria_3d = cube_hole(str(tmp_path), n_refinements=2)
        assert tria_2d.n_active_cells() == 8 * 4 ** 2
        assert tria_3d.n_active_cells() == 24 * 8 ** 2

    def test_cube_hole_round(self, tmp_path):
        tria_2d, _ = cube_hole(str(tmp_path), n_refinements=2)
        r = numpy.linalg.norm(tria_2d.vertices, axis=1)
        assert numpy.count_nonzero(numpy.abs(r - 0.25) < 1e-12) == 32

    def test_subdivided_rect(self, tmp_path):
        tria_2d, tria_3d = subdivided_rect(str(tmp_path), n_refinements=1)
        assert tria_2d.n_active_cells() == 6 * 4
        assert tria_3d.n_active_cells() == 18 * 8
        assert vtk_files(tmp_path) == ["subdivided_rect_2D.vtk",
                                       "subdivided_rect_3D.vtk"]

    def test_subdivided_rect_3d_untransformed(self, tmp_path):
        """The 3D mesh is extruded before the transformation."""
        _, tria_3d = subdivided_rect(str(tmp_path), n_refinements=1)
        y = numpy.unique(numpy.round(tria_3d.vertices[:, 1], 12))
        assert y == pytest.approx([-1.0, -0.5, 0.0, 0.5, 1.0])

    def test_grid6_func(self):
        assert grid6_func(numpy.array([2.0, 1.0])) == pytest.approx([2.0,
                                                                      1.0])
        assert grid6_func(numpy.array([2.0, 0.0])) == pytest.approx([2.0,
                                                                      0.0])
        y = grid6_func(numpy.array([0.0, 0.5]))[1]
        assert y == pytest.approx(numpy.tanh(1.0) / numpy.tanh(2.0))

    def test_merge_cube_rect(self, tmp_path):
        tria_2d, tria_3d = merge_cube_rect(str(tmp_path), n_refinements=0)
        assert tria_2d.n_active_cells() == 14
        assert tria_2d.n_vertices() == 25
        assert tria_3d.n_active_cells() == 42
        lower, upper = tria_3d.bounding_box()
        assert lower.tolist() == [-1.0, -1.0, 0.0]
        assert upper.tolist() == [4.0, 1.0, 2.0]

    def test_shift_cube(self, tmp_path):
        tria_2d, tria_3d = shift_cube(str(tmp_path), n_refinements=0)
        assert tria_2d.vertices[:, 1].max() == pytest.approx(1.5)
        assert tria_3d.vertices[:, 1].max() == pytest.approx(1.5)
        assert numpy.all(tria_3d.cell_measures() > 0.0)

    def test_shift_cube_default_refinements(self, tmp_path):
        tria_2d, tria_3d = shift_cube(str(tmp_path))
        assert tria_2d.n_active_cells() == 8 * 16
        assert tria_3d.n_active_cells() == 24 * 64

    def test_cheese(self, tmp_path):
        tria_2d, tria_3d = cheese(str(tmp_path), n_refinements=1)
        assert tria_2d.n_active_cells() == 29 * 4
        assert tria_3d.n_active_cells() == 87 * 8
        assert tria_2d.cell_measures().sum() == pytest.approx(29.0)
        assert vtk_files(tmp_path) == ["cheese_2D.vtk", "cheese_3D.vtk"]

    def test_create_coarse_grid(self, tmp_path):
        tria_2d, tria_3d = create_coarse_grid(str(tmp_path))
        assert tria_2d.n_active_cells() == 244
        assert tria_3d.n_active_cells() == 3 * 244
        assert tria_3d.n_vertices() == 4 * 292
        lower, upper = tria_3d.bounding_box()
        assert lower.tolist() == [548000.0, 5916000.0, 0.0]
        assert upper.tolist() == [590000.0, 5956000.0, 1500.0]
        assert vtk_files(tmp_path) == ["Hamburg_2D.vtk", "Hamburg_3D.vtk"]

    def test_output(self, tmp_path, capsys):
        create_coarse_grid(str(tmp_path))
        out = capsys.readouterr().out
        assert out.count("Mesh info:") == 2
        assert " dimension: 2\n no. of cells: 244\n" in out
        assert " dimension: 3\n no. of cells: 732\n" in out
        assert str(tmp_path / "Hamburg_3D.vtk") in out

    def test_creates_output_dir(self, tmp_path):
        output_dir = tmp_path / "a" / "b"
        cube_hole(str(output_dir), n_refinements=0)
        assert vtk_files(output_dir) == ["cube_hole_2D.vtk",
                                         "cube_hole_3D.vtk"]

    def test_deterministic(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        cube_hole(str(first), n_refinements=1)
        cube_hole(str(second), n_refinements=1)
        for name in vtk_files(first):
            assert (first / name).read_bytes() == (second / name).read_bytes()

    def test_negative_refinements(self, tmp_path):
        with pytest.raises(ValueError):
            cube_hole(str(tmp_path), n_refinements=-1)
