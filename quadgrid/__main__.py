"""
Command-line entry point.

Usage::

    python -m quadgrid                      # the default builder
    python -m quadgrid cube_hole cheese -o out --refinements 2
    python -m quadgrid --all --plot
    python -m quadgrid --list
"""
import argparse
import logging
import os
import sys

from quadgrid.builders import BUILDERS, DEFAULT_BUILDER, get_builder


def build_parser():
    parser = argparse.ArgumentParser(
        prog='quadgrid',
        description='Build, extrude and refine quadrilateral meshes and '
                    'write them as VTK files'
    )
    parser.add_argument(
        'builders',
        nargs='*',
        metavar='BUILDER',
        help=f'Builders to run (default: {DEFAULT_BUILDER})'
    )
    parser.add_argument(
        '-o', '--output-dir',
        default='.',
        help='Directory the VTK files are written to'
    )
    parser.add_argument(
        '--all',
        action='store_true',
        help='Run every builder'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List the available builders and exit'
    )
    parser.add_argument(
        '--refinements',
        type=int,
        default=None,
        help="Number of global refinements, overrides each builder's default"
    )
    parser.add_argument(
        '--plot',
        action='store_true',
        help='Also save a PNG of every 2D mesh (requires matplotlib)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Log progress (-v) or debugging output (-vv)'
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose,
                                                       logging.DEBUG)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    if args.list:
        for name in BUILDERS:
            marker = ' (default)' if name == DEFAULT_BUILDER else ''
            print(f"{name}{marker}")
        return 0

    if args.refinements is not None and args.refinements < 0:
        parser.error("--refinements must not be negative")

    if args.all:
        names = list(BUILDERS)
    else:
        names = args.builders or [DEFAULT_BUILDER]
    builders = []
    for name in names:
        try:
            builders.append((name, get_builder(name)))
        except ValueError as e:
            parser.error(str(e))

    kwargs = {'output_dir': args.output_dir}
    if args.refinements is not None:
        kwargs['n_refinements'] = args.refinements

    for name, builder in builders:
        logging.info(f"Running builder {name}")
        try:
            tria_2d, _ = builder(**kwargs)
            if args.plot:
                from quadgrid.plots import save_triangulation_plot
                save_triangulation_plot(
                    tria_2d, os.path.join(args.output_dir, f"{name}_2D.png"),
                    title=name)
        except (ValueError, OSError, ImportError) as e:
            print(f"Error: builder {name!r} failed: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
