import pytest

from quadgrid.__main__ import build_parser, main
from quadgrid.builders import BUILDERS


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.builders == []
        assert args.output_dir == '.'
        assert args.refinements is None
        assert not args.all
        assert not args.plot
        assert args.verbose == 0

    def test_options(self):
        args = build_parser().parse_args(
            ['cube_hole', 'cheese', '-o', 'out', '--refinements', '1',
             '-vv'])
        assert args.builders == ['cube_hole', 'cheese']
        assert args.output_dir == 'out'
        assert args.refinements == 1
        assert args.verbose == 2


class TestMain:
    def test_list(self, capsys):
        assert main(['--list']) == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == len(BUILDERS)
        assert 'create_coarse_grid (default)' in lines
        assert 'cube_hole' in lines

    def test_default_builder(self, tmp_path, capsys):
        assert main(['-o', str(tmp_path)]) == 0
        assert (tmp_path / 'Hamburg_2D.vtk').exists()
        assert (tmp_path / 'Hamburg_3D.vtk').exists()
        assert ' no. of cells: 244' in capsys.readouterr().out

    def test_selected_builders(self, tmp_path):
        assert main(['cube_hole', 'cheese', '-o', str(tmp_path),
                     '--refinements', '0']) == 0
        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == ['cheese_2D.vtk', 'cheese_3D.vtk',
                         'cube_hole_2D.vtk', 'cube_hole_3D.vtk']

    def test_refinements(self, tmp_path, capsys):
        assert main(['cube_hole', '-o', str(tmp_path),
                     '--refinements', '1']) == 0
        out = capsys.readouterr().out
        assert ' no. of cells: 32\n' in out
        assert ' no. of cells: 192\n' in out

    def test_all(self, tmp_path):
        assert main(['--all', '-o', str(tmp_path), '--refinements', '0']) == 0
        assert len(list(tmp_path.glob('*.vtk'))) == 2 * len(BUILDERS)

    def test_unknown_builder(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as e:
            main(['no_such_builder', '-o', str(tmp_path)])
        assert e.value.code == 2
        assert 'Unknown builder' in capsys.readouterr().err
        assert list(tmp_path.iterdir()) == []

    def test_negative_refinements(self, tmp_path):
        with pytest.raises(SystemExit) as e:
            main(['cube_hole', '-o', str(tmp_path), '--refinements', '-1'])
        assert e.value.code == 2

    def test_unwritable_output(self, tmp_path, capsys):
        blocker = tmp_path / 'file'
        blocker.write_text('')
        assert main(['cube_hole', '-o', str(blocker / 'out'),
                     '--refinements', '0']) == 1
        assert 'failed' in capsys.readouterr().err
