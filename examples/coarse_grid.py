"""
The Hamburg coarse grid, refined and plotted.

Runs the default builder into ./output and saves a matplotlib view of the
2D mesh next to the VTK files.

Usage:
    python examples/coarse_grid.py
    python examples/coarse_grid.py --refinements 2 --show
"""
import argparse
import os

from quadgrid.builders import create_coarse_grid
from quadgrid.plots import plot_triangulation, save_triangulation_plot


def main():
    parser = argparse.ArgumentParser(description=__doc__.split('\n')[1])
    parser.add_argument('--refinements', type=int, default=0)
    parser.add_argument('--output-dir', default='output')
    parser.add_argument('--show', action='store_true',
                        help='Show the plot interactively')
    args = parser.parse_args()

    tria_2d, tria_3d = create_coarse_grid(args.output_dir,
                                          n_refinements=args.refinements)
    lower, upper = tria_3d.bounding_box()
    print(f"Bounding box: {lower.tolist()} to {upper.tolist()}")

    filename = os.path.join(args.output_dir, 'Hamburg_2D.png')
    save_triangulation_plot(tria_2d, filename, title='Hamburg')
    print(f"Plot saved to {filename}")

    if args.show:
        from matplotlib import pyplot
        plot_triangulation(tria_2d, show_vertices=True, title='Hamburg')
        pyplot.show()


if __name__ == '__main__':
    main()
